"""Configuration loading for docsite (.docsite.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".docsite.yml"

MODES = ("development", "production")


class ConfigurationError(RuntimeError):
    """Raised when the site configuration cannot drive a safe build."""


@dataclass
class DocsRootConfig:
    """A free-standing documentation tree rendered under its own section."""

    path: Path
    name: str
    description: Optional[str] = None


@dataclass
class LinkConfig:
    """External link shown in the site navigation."""

    label: str
    href: str


@dataclass
class OutputConfig:
    """Locations of generated output and the inputs the generator links to."""

    pages_dir: Path
    data_dir: Path
    wrappers_dir: Path
    scaffold_dir: Optional[Path] = None


@dataclass
class SiteConfig:
    """Represents the settings defined in .docsite.yml."""

    root: Path
    site_name: str
    output: OutputConfig
    packages: List[str] = field(default_factory=lambda: ["packages/*"])
    docs: List[DocsRootConfig] = field(default_factory=list)
    readme: Optional[Path] = None
    mode: str = "development"
    show_sub_examples: bool = False
    use_manifests: bool = False
    allow_empty_packages: bool = False
    strict: bool = False
    templates_dir: Optional[Path] = None
    packages_description: Optional[str] = None
    packages_img_src: Optional[str] = None
    readme_img_src: Optional[str] = None
    links: List[LinkConfig] = field(default_factory=list)

    @property
    def include_changelog(self) -> bool:
        """Development builds always link a changelog page, even an empty one."""
        return self.mode == "development"


def default_output(root: Path) -> OutputConfig:
    return OutputConfig(
        pages_dir=root / "site" / "pages",
        data_dir=root / "site" / "data",
        wrappers_dir=root / "site" / "components" / "page-templates",
    )


def load_config(config_path: Path) -> SiteConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return SiteConfig(root=root, site_name=root.name or "Docs", output=default_output(root))

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigurationError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    mode = (_as_str(data.get("mode")) or "development").lower()
    if mode not in MODES:
        raise ConfigurationError(
            f"Unsupported mode {mode!r}; expected one of {', '.join(MODES)}"
        )

    packages = _as_str_list(data.get("packages")) if "packages" in data else ["packages/*"]

    docs: List[DocsRootConfig] = []
    for entry in _as_list(data.get("docs")):
        item = _as_dict(entry)
        path_str = _as_str(item.get("path"))
        name = _as_str(item.get("name"))
        if not path_str or not name:
            raise ConfigurationError("Each docs entry requires a 'path' and a 'name'")
        docs.append(
            DocsRootConfig(
                path=(root / path_str).resolve(),
                name=name,
                description=_as_str(item.get("description")),
            )
        )

    links: List[LinkConfig] = []
    for entry in _as_list(data.get("links")):
        item = _as_dict(entry)
        label = _as_str(item.get("label"))
        href = _as_str(item.get("href"))
        if label and href:
            links.append(LinkConfig(label=label, href=href))

    output = default_output(root)
    output_data = _as_dict(data.get("output"))
    if output_data:
        output = OutputConfig(
            pages_dir=_as_path(root, output_data.get("pages_dir")) or output.pages_dir,
            data_dir=_as_path(root, output_data.get("data_dir")) or output.data_dir,
            wrappers_dir=_as_path(root, output_data.get("wrappers_dir")) or output.wrappers_dir,
            scaffold_dir=_as_path(root, output_data.get("scaffold_dir")),
        )

    return SiteConfig(
        root=root,
        site_name=_as_str(data.get("site_name")) or root.name or "Docs",
        output=output,
        packages=packages,
        docs=docs,
        readme=_as_path(root, data.get("readme")),
        mode=mode,
        show_sub_examples=_as_bool(data.get("show_sub_examples")) or False,
        use_manifests=_as_bool(data.get("use_manifests")) or False,
        allow_empty_packages=_as_bool(data.get("allow_empty_packages")) or False,
        strict=_as_bool(data.get("strict")) or False,
        templates_dir=_as_path(root, data.get("templates_dir")),
        packages_description=_as_str(data.get("packages_description")),
        packages_img_src=_as_str(data.get("packages_img_src")),
        readme_img_src=_as_str(data.get("readme_img_src")),
        links=links,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> List[Any]:
    return list(value) if isinstance(value, list) else []


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_path(root: Path, value: Any) -> Optional[Path]:
    text = _as_str(value)
    if not text:
        return None
    return (root / text).resolve()


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigurationError",
    "DocsRootConfig",
    "LinkConfig",
    "OutputConfig",
    "SiteConfig",
    "default_output",
    "load_config",
]
