"""Derives the sitemap and the page write intents from scanned descriptors.

The assembler never touches the filesystem: it turns a ``ScanResult`` into
routes plus a list of ``PageIntent`` objects that the emitter writes later.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .config import ConfigurationError
from .logging import get_logger
from .models import (
    DocLeaf,
    DocNode,
    IndexedFolder,
    PackageDescriptor,
    PackageSitemap,
    PageData,
    PageIntent,
    PageKind,
    PageNode,
    PlainFolder,
    Sitemap,
)
from .paths import join_output, route_for_output, slugify, title_case, to_route_path
from .scanner import ScannedDocsRoot, ScanResult
from .tree import build_tree

PACKAGES_DIR = "packages"
ROOT_README_OUTPUT = "readme.js"

_RESERVED_PAGE_IDS = {"index"}
_RESERVED_EXAMPLE_IDS = {"index", "isolated"}
_RESERVED_DOCS_KEYS = {PACKAGES_DIR, "readme"}
_RESERVED_SUB_EXAMPLE_FOLDERS = {"isolated"}


@dataclass
class AssemblyOptions:
    """Build options that change which pages exist."""

    include_changelog: bool = True
    strict: bool = False


@dataclass
class AssembledSite:
    """Sitemap, metadata and write intents for one build."""

    sitemap: Sitemap
    packages_meta: List[Dict[str, Any]] = field(default_factory=list)
    docs_meta: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    intents: List[PageIntent] = field(default_factory=list)


def _check_reserved(item_id: str, reserved: set[str], where: str) -> None:
    if item_id.lower() in reserved:
        raise ConfigurationError(f"{item_id!r} is a reserved page name in {where}")


def package_meta(pkg: PackageDescriptor) -> Dict[str, Any]:
    """Return the packages-data entry for ``pkg``."""
    meta: Dict[str, Any] = {"id": pkg.id, "packageName": pkg.name}
    if pkg.description is not None:
        meta["description"] = pkg.description
    meta["version"] = pkg.version
    if pkg.maintainers:
        meta["maintainers"] = list(pkg.maintainers)
    meta["repository"] = pkg.repository.to_dict() if pkg.repository else None
    return meta


class SitemapAssembler:
    """Composes package and documentation pages into a sitemap."""

    def __init__(self, options: AssemblyOptions | None = None) -> None:
        self.options = options or AssemblyOptions()
        self.logger = get_logger("assembler")

    def assemble(self, scan: ScanResult) -> AssembledSite:
        site = AssembledSite(sitemap=Sitemap())

        for pkg in scan.packages:
            site.sitemap.packages.append(self._assemble_package(pkg, site))
            site.packages_meta.append(package_meta(pkg))

        for docs_root in scan.docs:
            key = slugify(docs_root.config.name)
            if key in site.sitemap.docs or key in _RESERVED_DOCS_KEYS:
                raise ConfigurationError(f"Docs root {docs_root.config.name!r} maps to a taken key {key!r}")
            site.sitemap.docs[key] = self._assemble_docs_root(key, docs_root, site.intents)
            docs_meta: Dict[str, Any] = {"name": docs_root.config.name}
            if docs_root.config.description is not None:
                docs_meta["description"] = docs_root.config.description
            site.docs_meta[key] = docs_meta

        if scan.readme_path is not None:
            site.intents.append(
                PageIntent(
                    kind=PageKind.PROJECT_DOC,
                    output_path=ROOT_README_OUTPUT,
                    content_path=scan.readme_path,
                    data=PageData(
                        page_path=route_for_output(ROOT_README_OUTPUT),
                        page_title="Readme",
                        extra={"key": "readme"},
                    ),
                )
            )
            nav = [PageNode(id=PACKAGES_DIR, page_path=to_route_path(PACKAGES_DIR))]
            nav.extend(PageNode(id=key, page_path=to_route_path(key)) for key in site.sitemap.docs)
            site.sitemap.readme = nav

        self.logger.debug(
            "Assembled %d packages, %d docs roots, %d page intents",
            len(site.sitemap.packages),
            len(site.sitemap.docs),
            len(site.intents),
        )
        return site

    # ------------------------------------------------------------------
    # Packages

    def _assemble_package(self, pkg: PackageDescriptor, site: AssembledSite) -> PackageSitemap:
        intents = site.intents
        home_dir = join_output(PACKAGES_DIR, pkg.id)
        package_data = {"id": pkg.id, "packageName": pkg.name}
        home_data = dict(package_data)
        home_data.update(
            {
                "description": pkg.description,
                "version": pkg.version,
                "maintainers": list(pkg.maintainers),
                "repository": pkg.repository.to_dict() if pkg.repository else None,
            }
        )

        home_output = join_output(home_dir, "index.js")
        intents.append(
            PageIntent(
                kind=PageKind.HOME,
                output_path=home_output,
                content_path=pkg.readme_path,
                data=PageData(
                    page_path=route_for_output(home_output),
                    page_title=title_case(pkg.id),
                    extra=home_data,
                ),
            )
        )

        changelog_output = join_output(home_dir, "changelog.js")
        changelog_route: Optional[str] = None
        if pkg.changelog_path is not None or self.options.include_changelog:
            changelog_route = route_for_output(changelog_output)
            intents.append(
                PageIntent(
                    kind=PageKind.CHANGELOG,
                    output_path=changelog_output,
                    content_path=pkg.changelog_path,
                    data=PageData(
                        page_path=changelog_route,
                        page_title="Changelog",
                        extra=dict(package_data),
                    ),
                )
            )

        docs_output = join_output(home_dir, "docs", "index.js")
        intents.append(
            self._listing_intent(PageKind.DOCS_INDEX, docs_output, "Documents", "docs", package_data)
        )
        examples_output = join_output(home_dir, "examples", "index.js")
        intents.append(
            self._listing_intent(
                PageKind.EXAMPLES_INDEX, examples_output, "Examples", "examples", package_data
            )
        )

        docs: List[PageNode] = []
        for doc in pkg.docs:
            _check_reserved(doc.id, _RESERVED_PAGE_IDS, f"{pkg.id} docs")
            output = join_output(home_dir, "docs", f"{doc.id}.js")
            route = route_for_output(output)
            intents.append(
                PageIntent(
                    kind=PageKind.DOC,
                    output_path=output,
                    content_path=doc.path,
                    data=PageData(page_path=route, page_title=title_case(doc.id), extra=dict(package_data)),
                )
            )
            docs.append(PageNode(id=doc.id, page_path=route))

        examples: List[PageNode] = []
        for example in pkg.examples:
            _check_reserved(example.id, _RESERVED_EXAMPLE_IDS, f"{pkg.id} examples")
            output = join_output(home_dir, "examples", f"{example.id}.js")
            isolated_output = join_output(home_dir, "examples", "isolated", f"{example.id}.js")
            route = route_for_output(output)
            isolated_route = route_for_output(isolated_output)
            intents.append(
                PageIntent(
                    kind=PageKind.EXAMPLE,
                    output_path=output,
                    content_path=example.path,
                    isolated_output_path=isolated_output,
                    data=PageData(
                        page_path=route,
                        page_title=title_case(example.id),
                        isolated_path=isolated_route,
                        extra=dict(package_data),
                    ),
                )
            )
            examples.append(PageNode(id=example.id, page_path=route, isolated_path=isolated_route))

        flat_sub_examples: List[PageNode] = []
        for sub_example in pkg.sub_examples:
            _check_reserved(
                sub_example.id.rsplit("/", 1)[-1],
                _RESERVED_SUB_EXAMPLE_FOLDERS,
                f"{pkg.id} sub-examples",
            )
            output = join_output(home_dir, "subExamples", sub_example.id, "examples.js")
            isolated_output = join_output(
                home_dir, "subExamples", sub_example.id, "isolated", "examples.js"
            )
            route = route_for_output(output)
            isolated_route = route_for_output(isolated_output)
            intents.append(
                PageIntent(
                    kind=PageKind.EXAMPLE,
                    output_path=output,
                    content_path=sub_example.path,
                    isolated_output_path=isolated_output,
                    data=PageData(
                        page_path=route,
                        page_title="Examples",
                        isolated_path=isolated_route,
                        folder_path=sub_example.id,
                        extra=dict(package_data),
                    ),
                )
            )
            flat_sub_examples.append(
                PageNode(
                    id=f"{sub_example.id}/examples",
                    page_path=route,
                    isolated_path=isolated_route,
                    folder_path=sub_example.id,
                )
            )

        return PackageSitemap(
            package_id=pkg.id,
            home_path=route_for_output(home_output),
            changelog_path=changelog_route,
            doc_path=route_for_output(docs_output),
            example_path=route_for_output(examples_output),
            docs=docs,
            examples=examples,
            sub_examples=build_tree(flat_sub_examples, strict=self.options.strict),
        )

    @staticmethod
    def _listing_intent(
        kind: PageKind,
        output_path: str,
        title: str,
        page_type: str,
        extra: Dict[str, Any],
    ) -> PageIntent:
        return PageIntent(
            kind=kind,
            output_path=output_path,
            data=PageData(
                page_path=route_for_output(output_path),
                page_title=title,
                page_type=page_type,
                extra=dict(extra),
            ),
        )

    # ------------------------------------------------------------------
    # Documentation roots

    def _assemble_docs_root(
        self, key: str, docs_root: ScannedDocsRoot, intents: List[PageIntent]
    ) -> List[PageNode]:
        intents.append(
            self._listing_intent(
                PageKind.DOCUMENTS_MAIN,
                join_output(key, "index.js"),
                docs_root.config.name,
                "docs",
                {"key": key},
            )
        )
        return self._mirror(docs_root.nodes, key, key, intents)

    def _mirror(
        self,
        nodes: Sequence[DocNode],
        parent: str,
        key: str,
        intents: List[PageIntent],
    ) -> List[PageNode]:
        pages: List[PageNode] = []
        for node in nodes:
            _check_reserved(node.id, _RESERVED_PAGE_IDS, parent)
            if isinstance(node, DocLeaf):
                pages.append(self._doc_page(node, join_output(parent, f"{node.id}.js"), key, intents))
                continue

            folder = join_output(parent, node.id)
            listing = [
                {"id": child.id, "pagePath": to_route_path([folder, child.id])}
                for child in node.children
            ]
            intents.append(
                PageIntent(
                    kind=PageKind.DOCS_INDEX,
                    output_path=join_output(folder, "index.js"),
                    data=PageData(
                        page_path=to_route_path(folder),
                        page_title=title_case(node.id),
                        page_type="docs",
                        extra={"key": key, "id": node.id, "children": listing},
                    ),
                )
            )
            children = self._mirror(node.children, folder, key, intents)

            if isinstance(node, IndexedFolder):
                index_page = self._doc_page(
                    node.index,
                    join_output(folder, node.index.id, "index.js"),
                    key,
                    intents,
                    title=title_case(node.id),
                )
                pages.append(PageNode(id=node.id, page_path=index_page.page_path, children=children))
            elif isinstance(node, PlainFolder):
                pages.append(PageNode(id=node.id, page_path=to_route_path(folder), children=children))
        return pages

    @staticmethod
    def _doc_page(
        doc: DocLeaf,
        output_path: str,
        key: str,
        intents: List[PageIntent],
        *,
        title: Optional[str] = None,
    ) -> PageNode:
        route = route_for_output(output_path)
        intents.append(
            PageIntent(
                kind=PageKind.PROJECT_DOC,
                output_path=output_path,
                content_path=doc.path,
                data=PageData(page_path=route, page_title=title or title_case(doc.id), extra={"key": key}),
            )
        )
        return PageNode(id=doc.id, page_path=route)


__all__ = [
    "AssembledSite",
    "AssemblyOptions",
    "SitemapAssembler",
    "package_meta",
]
