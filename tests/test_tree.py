"""Tests for docsite.tree."""

from __future__ import annotations

import itertools
from typing import List

import pytest

from docsite.config import ConfigurationError
from docsite.models import PageNode
from docsite.tree import build_tree


def _item(item_id: str) -> PageNode:
    folder = item_id.rsplit("/", 1)[0]
    return PageNode(
        id=item_id,
        page_path=f"/packages/p/subExamples/{folder}/examples",
        isolated_path=f"/packages/p/subExamples/{folder}/isolated/examples",
        folder_path=folder,
    )


def _shape(nodes: List[PageNode]) -> list:
    return sorted(
        (node.id, node.page_path, _shape(node.children) if node.children is not None else None)
        for node in nodes
    )


def test_build_tree_nests_shared_prefixes() -> None:
    tree = build_tree([_item("a/b/examples"), _item("a/c/examples")])

    assert [node.id for node in tree] == ["a"]
    folder = tree[0]
    assert folder.page_path is None
    assert [child.id for child in folder.children] == ["b", "c"]
    for child, name in zip(folder.children, ["b", "c"]):
        assert child.page_path is None
        (leaf,) = child.children
        assert leaf.id == "examples"
        assert leaf.children is None
        assert leaf.page_path == f"/packages/p/subExamples/a/{name}/examples"
        assert leaf.isolated_path == f"/packages/p/subExamples/a/{name}/isolated/examples"
        assert leaf.folder_path == f"a/{name}"


def test_build_tree_serialises_leaves_without_children_key() -> None:
    tree = build_tree([_item("a/examples")])

    assert tree[0].to_dict() == {
        "id": "a",
        "children": [
            {
                "id": "examples",
                "pagePath": "/packages/p/subExamples/a/examples",
                "isolatedPath": "/packages/p/subExamples/a/isolated/examples",
                "folderPath": "a",
            }
        ],
    }


def test_build_tree_discards_empty_segments() -> None:
    tree = build_tree([_item("/a//b/examples/")])

    assert tree[0].id == "a"
    assert tree[0].children[0].id == "b"


def test_build_tree_is_idempotent_and_order_independent() -> None:
    ids = ["x/examples", "a/b/examples", "a/c/d/examples", "a/c/examples-more/examples", "Z/examples"]
    expected = _shape(build_tree([_item(item_id) for item_id in ids]))

    assert _shape(build_tree([_item(item_id) for item_id in ids])) == expected
    for permutation in itertools.permutations(ids):
        assert _shape(build_tree([_item(item_id) for item_id in permutation])) == expected


def test_build_tree_keeps_first_insertion_order() -> None:
    tree = build_tree([_item("zeta/examples"), _item("alpha/examples")])

    assert [node.id for node in tree] == ["zeta", "alpha"]


def test_build_tree_preserves_case() -> None:
    tree = build_tree([_item("Forms/examples"), _item("forms/examples")])

    assert [node.id for node in tree] == ["Forms", "forms"]


def test_build_tree_duplicate_path_last_writer_wins() -> None:
    first = PageNode(id="a/examples", page_path="/first")
    second = PageNode(id="a/examples", page_path="/second")

    tree = build_tree([first, second])

    assert tree[0].children[0].page_path == "/second"


def test_build_tree_duplicate_path_is_error_in_strict_mode() -> None:
    items = [PageNode(id="a/examples", page_path="/first"), PageNode(id="a/examples", page_path="/second")]

    with pytest.raises(ConfigurationError):
        build_tree(items, strict=True)


def test_build_tree_rejects_nesting_under_a_leaf() -> None:
    with pytest.raises(ConfigurationError):
        build_tree([PageNode(id="a", page_path="/a"), PageNode(id="a/b", page_path="/a/b")])
    with pytest.raises(ConfigurationError):
        build_tree([PageNode(id="a/b", page_path="/a/b"), PageNode(id="a", page_path="/a")])


def test_build_tree_does_not_mutate_inputs() -> None:
    item = _item("a/b/examples")

    build_tree([item])

    assert item.id == "a/b/examples"
    assert item.children is None
