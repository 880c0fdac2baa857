"""Persists the JSON artifacts consumed by the running site."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Sequence

from .emitter import write_file
from .logging import get_logger
from .models import SiteMeta, Sitemap

PAGES_LIST_FILENAME = "pages-list.json"
PACKAGES_DATA_FILENAME = "packages-data.json"
SITE_META_FILENAME = "site-meta.json"


@dataclass
class DataPaths:
    """Locations of the persisted artifacts."""

    pages_list: Path
    packages_data: Path
    site_meta: Path


def dump_json(payload: Dict[str, Any]) -> str:
    return json.dumps(payload, indent=2, default=str) + "\n"


class DataWriter:
    """Writes pages-list.json, packages-data.json and site-meta.json."""

    def __init__(self) -> None:
        self.logger = get_logger("writer")

    def persist(
        self,
        sitemap: Sitemap,
        packages_meta: Sequence[Dict[str, Any]],
        site_meta: SiteMeta,
        data_root: Path,
    ) -> DataPaths:
        """Overwrite the three artifacts under ``data_root``."""
        paths = DataPaths(
            pages_list=data_root / PAGES_LIST_FILENAME,
            packages_data=data_root / PACKAGES_DATA_FILENAME,
            site_meta=data_root / SITE_META_FILENAME,
        )
        write_file(paths.pages_list, dump_json(sitemap.to_dict()))
        write_file(paths.packages_data, dump_json({"metaData": list(packages_meta)}))
        write_file(paths.site_meta, dump_json(site_meta.to_dict()))
        self.logger.info("Wrote site data to %s", data_root)
        return paths


__all__ = ["DataPaths", "DataWriter", "dump_json"]
