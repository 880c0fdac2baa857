"""Core data models shared across docsite components."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union


class PageKind(str, Enum):
    """Page kinds and the wrapper component each one renders through."""

    HOME = "home"
    CHANGELOG = "changelog"
    DOC = "doc"
    PROJECT_DOC = "project-doc"
    EXAMPLE = "example"
    DOCS_INDEX = "docs-index"
    EXAMPLES_INDEX = "examples-index"
    DOCUMENTS_MAIN = "documents-main"

    @property
    def wrapper(self) -> str:
        return _WRAPPERS[self]


_WRAPPERS = {
    PageKind.HOME: "package-home",
    PageKind.CHANGELOG: "package-changelog",
    PageKind.DOC: "package-docs",
    PageKind.PROJECT_DOC: "project-docs",
    PageKind.EXAMPLE: "package-example",
    PageKind.DOCS_INDEX: "item-list",
    PageKind.EXAMPLES_INDEX: "item-list",
    PageKind.DOCUMENTS_MAIN: "documents-index",
}


@dataclass(frozen=True)
class RepositoryRef:
    """Source repository of a package, optionally scoped to a subdirectory."""

    url: Optional[str]
    directory: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"url": self.url}
        if self.directory:
            data["directory"] = self.directory
        return data


@dataclass(frozen=True)
class DocLeaf:
    """A single documentation content file."""

    id: str
    path: Path


@dataclass(frozen=True)
class IndexedFolder:
    """Documentation folder whose readme renders as the folder's own page."""

    id: str
    index: DocLeaf
    children: Tuple["DocNode", ...]


@dataclass(frozen=True)
class PlainFolder:
    """Documentation folder without a readme; rendered as a generated listing."""

    id: str
    children: Tuple["DocNode", ...]


DocNode = Union[DocLeaf, IndexedFolder, PlainFolder]


@dataclass(frozen=True)
class ExampleDescriptor:
    """Example component module living in a package's examples folder."""

    id: str
    path: Path


@dataclass(frozen=True)
class SubExampleDescriptor:
    """Example module nested under a slash-separated folder path."""

    id: str
    path: Path


@dataclass(frozen=True)
class PackageDescriptor:
    """Normalized view of one source package."""

    id: str
    name: str
    version: Optional[str] = None
    description: Optional[str] = None
    maintainers: Tuple[str, ...] = ()
    repository: Optional[RepositoryRef] = None
    readme_path: Optional[Path] = None
    changelog_path: Optional[Path] = None
    docs: Tuple[DocLeaf, ...] = ()
    examples: Tuple[ExampleDescriptor, ...] = ()
    sub_examples: Tuple[SubExampleDescriptor, ...] = ()


@dataclass
class PageNode:
    """Sitemap element describing one generated route or a folder of routes."""

    id: str
    page_path: Optional[str] = None
    isolated_path: Optional[str] = None
    folder_path: Optional[str] = None
    children: Optional[List["PageNode"]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id}
        if self.page_path is not None:
            data["pagePath"] = self.page_path
        if self.isolated_path is not None:
            data["isolatedPath"] = self.isolated_path
        if self.folder_path is not None:
            data["folderPath"] = self.folder_path
        if self.children is not None:
            data["children"] = [child.to_dict() for child in self.children]
        return data


@dataclass(frozen=True)
class GeneratorConfig:
    """Output pages root and wrapper-components root for page emission."""

    pages_path: Path
    wrappers_path: Path


@dataclass
class PageData:
    """The `data` payload handed to a page wrapper."""

    page_path: str
    page_title: str
    page_type: Optional[str] = None
    isolated_path: Optional[str] = None
    folder_path: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)
    meta: Dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = dict(self.extra)
        payload["pagePath"] = self.page_path
        payload["pageTitle"] = self.page_title
        if self.page_type is not None:
            payload["pageType"] = self.page_type
        if self.isolated_path is not None:
            payload["isolatedPath"] = self.isolated_path
        if self.folder_path is not None:
            payload["folderPath"] = self.folder_path
        if self.meta:
            payload["meta"] = dict(self.meta)
        return payload


@dataclass
class PageIntent:
    """A page the emitter should write; output paths are relative to the pages root."""

    kind: PageKind
    output_path: str
    data: PageData
    content_path: Optional[Path] = None
    isolated_output_path: Optional[str] = None


@dataclass
class PackageSitemap:
    """Routes generated for a single package."""

    package_id: str
    home_path: str
    changelog_path: Optional[str]
    doc_path: str
    example_path: str
    docs: List[PageNode] = field(default_factory=list)
    examples: List[PageNode] = field(default_factory=list)
    sub_examples: List[PageNode] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "packageId": self.package_id,
            "homePath": self.home_path,
            "changelogPath": self.changelog_path,
            "docPath": self.doc_path,
            "examplePath": self.example_path,
            "docs": [node.to_dict() for node in self.docs],
            "examples": [node.to_dict() for node in self.examples],
            "subExamples": [node.to_dict() for node in self.sub_examples],
        }


@dataclass
class Sitemap:
    """Every generated route, grouped by packages and documentation roots."""

    packages: List[PackageSitemap] = field(default_factory=list)
    docs: Dict[str, List[PageNode]] = field(default_factory=dict)
    readme: Optional[List[PageNode]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"packages": [pkg.to_dict() for pkg in self.packages]}
        for key, nodes in self.docs.items():
            data[key] = [node.to_dict() for node in nodes]
        if self.readme is not None:
            data["readMe"] = [node.to_dict() for node in self.readme]
        return data


@dataclass
class SiteMeta:
    """Site-wide metadata consumed by the running site."""

    site_name: str
    packages_description: Optional[str] = None
    packages_img_src: Optional[str] = None
    links: List[Mapping[str, str]] = field(default_factory=list)
    readme_img_src: Optional[str] = None
    has_readme: bool = False
    docs: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        packages: Dict[str, Any] = {}
        if self.packages_description is not None:
            packages["description"] = self.packages_description
        if self.packages_img_src is not None:
            packages["imgSrc"] = self.packages_img_src
        data: Dict[str, Any] = {"siteName": self.site_name, "packages": packages}
        if self.links:
            data["links"] = [dict(link) for link in self.links]
        if self.has_readme:
            readme: Dict[str, Any] = {}
            if self.readme_img_src is not None:
                readme["imgSrc"] = self.readme_img_src
            data["readMe"] = readme
        if self.docs:
            data["docs"] = {key: dict(value) for key, value in self.docs.items()}
        return data
