"""Assemble flat slash-separated ids into a nested sitemap tree."""

from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

from .config import ConfigurationError
from .logging import get_logger
from .models import PageNode

logger = get_logger("tree")


def split_id(item_id: str) -> Tuple[str, ...]:
    return tuple(segment for segment in item_id.split("/") if segment)


def build_tree(items: Iterable[PageNode], *, strict: bool = False) -> List[PageNode]:
    """Return the nested tree described by ``items``.

    Each item's ``id`` is a slash-separated path. Intermediate segments become
    folder nodes holding ``children``; the final segment becomes a leaf holding
    the item's routes. Siblings keep first-insertion order.

    Two items with the same full path raise ``ConfigurationError`` when
    ``strict`` is set, otherwise the later item replaces the earlier one. A
    node can never be both a leaf and a folder, so an item that would nest
    under a leaf (or replace a folder) always raises.
    """
    roots: List[PageNode] = []
    nodes: Dict[Tuple[str, ...], PageNode] = {}

    for item in items:
        segments = split_id(item.id)
        if not segments:
            raise ConfigurationError(f"Cannot place an item with an empty id: {item.id!r}")

        siblings = roots
        for depth in range(len(segments) - 1):
            prefix = segments[: depth + 1]
            folder = nodes.get(prefix)
            if folder is None:
                folder = PageNode(id=segments[depth], children=[])
                nodes[prefix] = folder
                siblings.append(folder)
            elif folder.children is None:
                raise ConfigurationError(
                    f"{item.id!r} nests under {'/'.join(prefix)!r}, which is already a page"
                )
            siblings = folder.children

        leaf = nodes.get(segments)
        if leaf is None:
            leaf = PageNode(id=segments[-1])
            nodes[segments] = leaf
            siblings.append(leaf)
        elif leaf.children is not None:
            raise ConfigurationError(
                f"{item.id!r} collides with a folder of the same path"
            )
        elif strict:
            raise ConfigurationError(f"Duplicate sitemap path {'/'.join(segments)!r}")
        else:
            logger.warning("Duplicate sitemap path %s; keeping the last entry", "/".join(segments))

        leaf.page_path = item.page_path
        leaf.isolated_path = item.isolated_path
        leaf.folder_path = item.folder_path
        leaf.children = None

    return roots


__all__ = ["build_tree", "split_id"]
