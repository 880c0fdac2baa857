"""Preparation of the generated output directory."""

from __future__ import annotations

import asyncio
import os
import shutil
from pathlib import Path
from typing import Any, Iterable

from .config import ConfigurationError
from .logging import get_logger


def _validated_root(output_root: Any) -> Path:
    if not isinstance(output_root, (str, os.PathLike)):
        raise ConfigurationError(
            f"Refusing to clean output root {output_root!r}: expected a path"
        )
    text = os.fspath(output_root)
    if not isinstance(text, str) or not text.strip():
        raise ConfigurationError("Refusing to clean an empty output root")
    path = Path(text).expanduser().resolve()
    if path == Path(path.anchor):
        raise ConfigurationError(f"Refusing to clean filesystem root {path}")
    return path


def ensure_disposable(output_root: Any, project_root: Path, sources: Iterable[Path]) -> Path:
    """Reject an output root that holds the project or any of its source content."""
    path = _validated_root(output_root)
    project = project_root.resolve()
    if project == path or path in project.parents:
        raise ConfigurationError(
            f"Refusing to clean {path}: it contains the project root {project}"
        )
    for source in sources:
        resolved = Path(source).resolve()
        if resolved == path or path in resolved.parents:
            raise ConfigurationError(
                f"Refusing to clean {path}: it contains source content {resolved}"
            )
    return path


class WorkspaceCleaner:
    """Removes stale generated output and lays down the default scaffold."""

    def __init__(self) -> None:
        self.logger = get_logger("workspace")

    async def clean(self, output_root: Any) -> None:
        """Recursively remove ``output_root``; every build starts from nothing."""
        path = _validated_root(output_root)
        if not path.exists():
            self.logger.debug("Output root %s does not exist; nothing to clean", path)
            return
        self.logger.info("Removing previous output at %s", path)
        if path.is_dir():
            await asyncio.to_thread(shutil.rmtree, path)
        else:
            await asyncio.to_thread(path.unlink)

    async def copy_scaffold(self, source: Path, output_root: Path) -> None:
        """Copy the default page scaffold into ``output_root``."""
        if not source.is_dir():
            raise ConfigurationError(f"Scaffold directory not found: {source}")
        self.logger.debug("Copying scaffold %s into %s", source, output_root)
        await asyncio.to_thread(shutil.copytree, source, output_root, dirs_exist_ok=True)


__all__ = ["WorkspaceCleaner", "ensure_disposable"]
