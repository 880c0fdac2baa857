"""Discovery of packages and documentation trees on disk."""

from __future__ import annotations

import json
import os
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .config import ConfigurationError, DocsRootConfig
from .logging import get_logger
from .models import (
    DocLeaf,
    DocNode,
    ExampleDescriptor,
    IndexedFolder,
    PackageDescriptor,
    PlainFolder,
    RepositoryRef,
    SubExampleDescriptor,
)
from .paths import MODULE_SUFFIXES, slugify

MANIFEST_FILENAME = "package.json"
DOC_SUFFIXES = (".md", ".mdx")
README_FILENAME = "readme.md"
CHANGELOG_FILENAME = "changelog.md"

_EXCLUDED_DIRS = {
    "node_modules",
    "__pycache__",
    "dist",
    "build",
}

_RESERVED_PACKAGE_DIRS = {"docs", "examples"}


class MissingContentWarning(UserWarning):
    """A package lacks optional content; a standalone page is generated instead."""


@dataclass
class ScanOptions:
    """Switches that change what the scanner treats as content."""

    show_sub_examples: bool = False
    use_manifests: bool = False
    allow_empty_packages: bool = False


@dataclass
class ScannedDocsRoot:
    """A configured documentation root and the tree found beneath it."""

    config: DocsRootConfig
    nodes: Tuple[DocNode, ...]


@dataclass
class ScanResult:
    """Everything the sitemap assembler needs to know about the source tree."""

    packages: List[PackageDescriptor] = field(default_factory=list)
    docs: List[ScannedDocsRoot] = field(default_factory=list)
    readme_path: Optional[Path] = None


def _is_hidden(name: str) -> bool:
    return name.startswith(".")


def _listdir(directory: Path) -> List[Path]:
    return sorted(
        (entry for entry in directory.iterdir() if not _is_hidden(entry.name)),
        key=lambda entry: entry.name,
    )


def _find_case_insensitive(directory: Path, filename: str) -> Optional[Path]:
    if not directory.is_dir():
        return None
    for entry in _listdir(directory):
        if entry.is_file() and entry.name.lower() == filename:
            return entry.resolve()
    return None


def _file_id(path: Path) -> str:
    return "-".join(path.stem.split())


def _ensure_unique(ids: Iterable[str], where: Path) -> None:
    seen: set[str] = set()
    for item_id in ids:
        if item_id in seen:
            raise ConfigurationError(f"Duplicate id {item_id!r} in {where}")
        seen.add(item_id)


def _read_manifest(path: Path) -> Dict[str, Any]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid package manifest {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigurationError(f"Package manifest {path} must contain an object")
    return payload


def _parse_maintainers(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    maintainers: List[str] = []
    for entry in value:
        if isinstance(entry, str):
            maintainers.append(entry)
        elif isinstance(entry, dict) and isinstance(entry.get("name"), str):
            maintainers.append(entry["name"])
    return tuple(maintainers)


def _parse_repository(value: Any) -> Optional[RepositoryRef]:
    if isinstance(value, str) and value:
        return RepositoryRef(url=value)
    if isinstance(value, dict):
        url = value.get("url")
        directory = value.get("directory")
        if isinstance(url, str) and url:
            return RepositoryRef(
                url=url,
                directory=directory if isinstance(directory, str) and directory else None,
            )
    return None


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


class ContentScanner:
    """Walks package and docs directories to produce normalized descriptors."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root).expanduser().resolve()
        self.logger = get_logger("scanner")

    def scan(
        self,
        package_patterns: Sequence[str],
        docs_roots: Sequence[DocsRootConfig],
        options: ScanOptions | None = None,
        *,
        readme: Path | None = None,
    ) -> ScanResult:
        """Return descriptors for every package and documentation root."""
        options = options or ScanOptions()
        packages = self.scan_packages(package_patterns, options)

        docs: List[ScannedDocsRoot] = []
        for docs_root in docs_roots:
            nodes = self.scan_docs(docs_root.path)
            if nodes is None:
                self.logger.info("Docs root %s not found; skipping %s", docs_root.path, docs_root.name)
                continue
            docs.append(ScannedDocsRoot(config=docs_root, nodes=nodes))

        readme_path = None
        if readme is not None and readme.is_file():
            readme_path = readme.resolve()

        return ScanResult(packages=packages, docs=docs, readme_path=readme_path)

    # ------------------------------------------------------------------
    # Packages

    def scan_packages(
        self, patterns: Sequence[str], options: ScanOptions
    ) -> List[PackageDescriptor]:
        directories: List[Path] = []
        seen: set[Path] = set()
        for pattern in patterns:
            for match in sorted(self.root.glob(pattern)):
                resolved = match.resolve()
                if not resolved.is_dir() or resolved in seen or _is_hidden(resolved.name):
                    continue
                if options.use_manifests and not (resolved / MANIFEST_FILENAME).is_file():
                    self.logger.debug("Skipping %s: no %s", resolved, MANIFEST_FILENAME)
                    continue
                seen.add(resolved)
                directories.append(resolved)

        if not directories and patterns and not options.allow_empty_packages:
            raise ConfigurationError(
                f"No packages matched {', '.join(patterns)} under {self.root}"
            )

        packages = [self.scan_package(directory, options) for directory in directories]
        _ensure_unique((package.id for package in packages), self.root)
        self.logger.debug("Scanner discovered %d packages", len(packages))
        return packages

    def scan_package(self, directory: Path, options: ScanOptions) -> PackageDescriptor:
        package_id = slugify(directory.name)
        manifest_path = directory / MANIFEST_FILENAME
        manifest = _read_manifest(manifest_path) if manifest_path.is_file() else {}

        readme_path = _find_case_insensitive(directory, README_FILENAME)
        if readme_path is None:
            warnings.warn(
                f"Package {package_id} has no README; generating a standalone home page",
                MissingContentWarning,
                stacklevel=2,
            )
        changelog_path = _find_case_insensitive(directory, CHANGELOG_FILENAME)
        if changelog_path is None:
            warnings.warn(
                f"Package {package_id} has no CHANGELOG",
                MissingContentWarning,
                stacklevel=2,
            )

        docs = tuple(
            DocLeaf(id=_file_id(path), path=path.resolve())
            for path in self._files_with_suffix(directory / "docs", DOC_SUFFIXES)
        )
        _ensure_unique((doc.id for doc in docs), directory / "docs")

        examples = tuple(
            ExampleDescriptor(id=_file_id(path), path=path.resolve())
            for path in self._files_with_suffix(directory / "examples", MODULE_SUFFIXES)
        )
        _ensure_unique((example.id for example in examples), directory / "examples")

        sub_examples: Tuple[SubExampleDescriptor, ...] = ()
        if options.show_sub_examples:
            sub_examples = tuple(self._find_sub_examples(directory))
            _ensure_unique((item.id for item in sub_examples), directory)

        self.logger.debug(
            "Package %s: %d docs, %d examples, %d sub-examples",
            package_id,
            len(docs),
            len(examples),
            len(sub_examples),
        )
        return PackageDescriptor(
            id=package_id,
            name=_optional_str(manifest.get("name")) or package_id,
            version=_optional_str(manifest.get("version")),
            description=_optional_str(manifest.get("description")),
            maintainers=_parse_maintainers(manifest.get("maintainers")),
            repository=_parse_repository(manifest.get("repository")),
            readme_path=readme_path,
            changelog_path=changelog_path,
            docs=docs,
            examples=examples,
            sub_examples=sub_examples,
        )

    @staticmethod
    def _files_with_suffix(directory: Path, suffixes: Sequence[str]) -> List[Path]:
        if not directory.is_dir():
            return []
        return [
            entry
            for entry in _listdir(directory)
            if entry.is_file() and entry.suffix.lower() in suffixes
        ]

    def _find_sub_examples(self, package_dir: Path) -> Iterable[SubExampleDescriptor]:
        for dirpath, dirnames, filenames in os.walk(package_dir):
            current = Path(dirpath)
            rel_dir = current.relative_to(package_dir).as_posix() if current != package_dir else ""

            kept = []
            for name in sorted(dirnames):
                if _is_hidden(name) or name in _EXCLUDED_DIRS:
                    continue
                if not rel_dir and name in _RESERVED_PACKAGE_DIRS:
                    continue
                kept.append(name)
            dirnames[:] = kept

            if not rel_dir:
                continue
            for filename in sorted(filenames):
                path = current / filename
                if path.stem == "examples" and path.suffix in MODULE_SUFFIXES:
                    yield SubExampleDescriptor(id=rel_dir, path=path.resolve())

    # ------------------------------------------------------------------
    # Documentation roots

    def scan_docs(self, docs_path: Path) -> Optional[Tuple[DocNode, ...]]:
        """Return the documentation tree under ``docs_path`` or None when absent."""
        if not docs_path.is_dir():
            return None
        return self._scan_docs_dir(docs_path)

    def _scan_docs_dir(self, directory: Path) -> Tuple[DocNode, ...]:
        nodes: List[DocNode] = []
        for entry in _listdir(directory):
            if entry.is_dir():
                if entry.name in _EXCLUDED_DIRS:
                    continue
                folder = self._scan_docs_folder(entry)
                if folder is not None:
                    nodes.append(folder)
            elif entry.is_file() and entry.suffix.lower() in DOC_SUFFIXES:
                nodes.append(DocLeaf(id=_file_id(entry), path=entry.resolve()))
        _ensure_unique((node.id for node in nodes), directory)
        return tuple(nodes)

    def _scan_docs_folder(self, directory: Path) -> Optional[DocNode]:
        children = self._scan_docs_dir(directory)
        readme = next(
            (
                child
                for child in children
                if isinstance(child, DocLeaf) and child.path.name.lower() == README_FILENAME
            ),
            None,
        )
        folder_id = "-".join(directory.name.split())
        if readme is not None:
            remaining = tuple(child for child in children if child is not readme)
            return IndexedFolder(id=folder_id, index=readme, children=remaining)
        if not children:
            self.logger.debug("Skipping empty docs folder %s", directory)
            return None
        return PlainFolder(id=folder_id, children=children)


__all__ = [
    "ContentScanner",
    "MissingContentWarning",
    "ScanOptions",
    "ScanResult",
    "ScannedDocsRoot",
]
