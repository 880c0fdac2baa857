"""Front-matter extraction for content files."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Callable, Dict, Mapping

import yaml

from .logging import get_logger

MetadataExtractor = Callable[[Path], Mapping[str, Any]]

FRONTMATTER_RE = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)
MARKDOWN_SUFFIXES = (".md", ".mdx", ".markdown")

logger = get_logger("metadata")


def extract_front_matter(path: Path) -> Dict[str, Any]:
    """Return the YAML front-matter mapping of a markdown file.

    Files without front matter, empty files and non-markdown modules yield an
    empty mapping. Malformed YAML is logged and treated as absent.
    """
    if path.suffix.lower() not in MARKDOWN_SUFFIXES:
        return {}
    text = path.read_text(encoding="utf-8")
    match = FRONTMATTER_RE.match(text)
    if not match:
        return {}
    try:
        loaded = yaml.safe_load(match.group(1))
    except yaml.YAMLError as exc:
        logger.warning("Ignoring malformed front matter in %s: %s", path, exc)
        return {}
    if not isinstance(loaded, dict):
        return {}
    return {str(key): value for key, value in loaded.items()}


__all__ = ["FRONTMATTER_RE", "MetadataExtractor", "extract_front_matter"]
