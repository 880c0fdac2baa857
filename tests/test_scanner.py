"""Tests for docsite.scanner."""

from __future__ import annotations

from pathlib import Path

import pytest

from docsite.config import ConfigurationError, DocsRootConfig
from docsite.models import DocLeaf, IndexedFolder, PlainFolder, RepositoryRef
from docsite.scanner import ContentScanner, MissingContentWarning, ScanOptions
from tests._fixtures.site_builder import SiteBuilder


def test_scan_reads_manifest_and_content(site_builder: SiteBuilder) -> None:
    site_builder.package(
        "button",
        {
            "README.md": "# Button\n",
            "CHANGELOG.md": "## 1.0.0\n",
            "docs/usage.md": "# Usage\n",
            "docs/theming.mdx": "# Theming\n",
            "docs/notes.txt": "ignored\n",
            "examples/basic.js": "export default () => null;\n",
            "examples/with-icon.tsx": "export default () => null;\n",
        },
        manifest={
            "name": "@scope/button",
            "version": "1.2.0",
            "description": "A button",
            "maintainers": ["ana", {"name": "bo"}],
            "repository": {"url": "https://example.test/repo", "directory": "packages/button"},
        },
    )

    result = ContentScanner(site_builder.path()).scan(["packages/*"], [])

    (pkg,) = result.packages
    root = site_builder.path().resolve()
    assert pkg.id == "button"
    assert pkg.name == "@scope/button"
    assert pkg.version == "1.2.0"
    assert pkg.description == "A button"
    assert pkg.maintainers == ("ana", "bo")
    assert pkg.repository == RepositoryRef(url="https://example.test/repo", directory="packages/button")
    assert pkg.readme_path == root / "packages/button/README.md"
    assert pkg.changelog_path == root / "packages/button/CHANGELOG.md"
    assert [doc.id for doc in pkg.docs] == ["theming", "usage"]
    assert [example.id for example in pkg.examples] == ["basic", "with-icon"]
    assert pkg.sub_examples == ()


def test_scan_tolerates_missing_readme_and_changelog(site_builder: SiteBuilder) -> None:
    site_builder.package("bare", {"docs/intro.md": "# Intro\n"})

    with pytest.warns(MissingContentWarning):
        result = ContentScanner(site_builder.path()).scan(["packages/*"], [])

    (pkg,) = result.packages
    assert pkg.readme_path is None
    assert pkg.changelog_path is None
    assert pkg.name == "bare"
    assert pkg.version is None


def test_scan_finds_readme_case_insensitively(site_builder: SiteBuilder) -> None:
    site_builder.package("lower", {"readme.md": "# lower\n", "changelog.md": "x\n"})

    result = ContentScanner(site_builder.path()).scan(["packages/*"], [])

    assert result.packages[0].readme_path.name == "readme.md"
    assert result.packages[0].changelog_path.name == "changelog.md"


def test_scan_fails_when_no_packages_match(site_builder: SiteBuilder) -> None:
    scanner = ContentScanner(site_builder.path())

    with pytest.raises(ConfigurationError):
        scanner.scan(["packages/*"], [])

    result = scanner.scan(["packages/*"], [], ScanOptions(allow_empty_packages=True))
    assert result.packages == []


def test_scan_with_manifests_skips_directories_without_package_json(site_builder: SiteBuilder) -> None:
    site_builder.package("real", {"README.md": "x\n", "CHANGELOG.md": "x\n"}, manifest={"name": "real"})
    site_builder.package("scratch", {"README.md": "x\n", "CHANGELOG.md": "x\n"})

    scanner = ContentScanner(site_builder.path())
    with_manifests = scanner.scan(["packages/*"], [], ScanOptions(use_manifests=True))
    without = scanner.scan(["packages/*"], [])

    assert [pkg.id for pkg in with_manifests.packages] == ["real"]
    assert [pkg.id for pkg in without.packages] == ["real", "scratch"]


def test_scan_collects_nested_sub_examples(site_builder: SiteBuilder) -> None:
    site_builder.package(
        "forms",
        {
            "README.md": "x\n",
            "CHANGELOG.md": "x\n",
            "examples/basic.js": "x\n",
            "examples/examples.js": "x\n",
            "src/components/Field/examples.js": "x\n",
            "src/components/Select/nested/examples.tsx": "x\n",
            "node_modules/dep/examples.js": "x\n",
            "examples.js": "x\n",
        },
    )
    scanner = ContentScanner(site_builder.path())

    hidden = scanner.scan(["packages/*"], [])
    shown = scanner.scan(["packages/*"], [], ScanOptions(show_sub_examples=True))

    assert hidden.packages[0].sub_examples == ()
    ids = [item.id for item in shown.packages[0].sub_examples]
    assert ids == ["src/components/Field", "src/components/Select/nested"]
    assert shown.packages[0].sub_examples[1].path.name == "examples.tsx"


def test_scan_docs_root_uses_readme_as_folder_index(site_builder: SiteBuilder) -> None:
    site_builder.package("p", {"README.md": "x\n", "CHANGELOG.md": "x\n"})
    site_builder.write(
        {
            "docs/overview.md": "# Overview\n",
            "docs/guide/README.md": "# Guide\n",
            "docs/guide/setup.md": "# Setup\n",
            "docs/guide/advanced/tuning.md": "# Tuning\n",
            "docs/reference/api.md": "# API\n",
            "docs/empty/notes.txt": "not markdown\n",
        }
    )
    docs_root = DocsRootConfig(path=site_builder.path() / "docs", name="Docs")

    result = ContentScanner(site_builder.path()).scan(["packages/*"], [docs_root])

    (scanned,) = result.docs
    nodes = {node.id: node for node in scanned.nodes}
    assert sorted(nodes) == ["guide", "overview", "reference"]
    assert isinstance(nodes["overview"], DocLeaf)

    guide = nodes["guide"]
    assert isinstance(guide, IndexedFolder)
    assert guide.index.id == "README"
    assert guide.index.path.name == "README.md"
    assert [child.id for child in guide.children] == ["advanced", "setup"]
    assert all(getattr(child, "path", None) != guide.index.path for child in guide.children)
    assert isinstance(guide.children[0], PlainFolder)

    reference = nodes["reference"]
    assert isinstance(reference, PlainFolder)
    assert [child.id for child in reference.children] == ["api"]


def test_scan_skips_missing_docs_root(site_builder: SiteBuilder) -> None:
    site_builder.package("p", {"README.md": "x\n", "CHANGELOG.md": "x\n"})
    missing = DocsRootConfig(path=site_builder.path() / "guides", name="Guides")

    result = ContentScanner(site_builder.path()).scan(["packages/*"], [missing])

    assert result.docs == []


def test_scan_rejects_duplicate_sibling_ids(site_builder: SiteBuilder) -> None:
    site_builder.package(
        "p",
        {"README.md": "x\n", "CHANGELOG.md": "x\n", "docs/guide.md": "a\n", "docs/guide.mdx": "b\n"},
    )

    with pytest.raises(ConfigurationError):
        ContentScanner(site_builder.path()).scan(["packages/*"], [])


def test_scan_resolves_root_readme_only_when_present(tmp_path: Path, site_builder: SiteBuilder) -> None:
    site_builder.package("p", {"README.md": "x\n", "CHANGELOG.md": "x\n"})
    scanner = ContentScanner(site_builder.path())

    assert scanner.scan(["packages/*"], [], readme=site_builder.path() / "README.md").readme_path is None

    site_builder.write({"README.md": "# Project\n"})
    result = scanner.scan(["packages/*"], [], readme=site_builder.path() / "README.md")
    assert result.readme_path == (site_builder.path() / "README.md").resolve()
