"""Renders page templates and writes generated page files."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

from jinja2 import Environment, FileSystemLoader

from .logging import get_logger
from .metadata import MetadataExtractor, extract_front_matter
from .models import GeneratorConfig, PageData, PageIntent, PageKind
from .paths import relative_import_path, route_for_output

_DEFAULT_TEMPLATES = Path(__file__).with_name("templates")


@dataclass
class RenderedPage:
    """Source text for one generated file, before it is written."""

    path: Path
    source: str


@dataclass
class EmitResult:
    """Outcome of emitting one page intent."""

    meta: Dict[str, Any] = field(default_factory=dict)
    written: List[Path] = field(default_factory=list)


def write_file(path: Path, content: str) -> None:
    """Overwrite ``path`` with ``content``, creating parent directories first."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


class PageEmitter:
    """Turns page intents into generated page files."""

    def __init__(
        self,
        templates_dir: Path | None = None,
        *,
        extract_metadata: MetadataExtractor = extract_front_matter,
    ) -> None:
        self.templates_dir = templates_dir
        self._extract_metadata = extract_metadata
        self._env = self._create_env(templates_dir)
        self.logger = get_logger("emitter")

    def emit(self, intent: PageIntent, config: GeneratorConfig) -> EmitResult:
        """Write the file(s) for ``intent`` and return extracted content metadata."""
        meta = self._load_meta(intent.content_path)
        data = replace(intent.data, meta=meta) if meta else intent.data
        pages = self.render(replace(intent, data=data), config)
        for page in pages:
            write_file(page.path, page.source)
            self.logger.debug("Wrote %s", page.path)
        return EmitResult(meta=meta, written=[page.path for page in pages])

    def emit_page(
        self,
        kind: PageKind,
        output_path: str,
        content_path: Optional[Path],
        data: PageData,
        config: GeneratorConfig,
        *,
        isolated_output_path: Optional[str] = None,
    ) -> EmitResult:
        intent = PageIntent(
            kind=kind,
            output_path=output_path,
            data=data,
            content_path=content_path,
            isolated_output_path=isolated_output_path,
        )
        return self.emit(intent, config)

    def render(self, intent: PageIntent, config: GeneratorConfig) -> List[RenderedPage]:
        """Return the generated sources for ``intent`` without touching the disk."""
        page_file = config.pages_path / intent.output_path
        wrapper_import = relative_import_path(
            page_file, config.wrappers_path / f"{intent.kind.wrapper}.js"
        )
        context: Dict[str, Any] = {
            "wrapper_import": wrapper_import,
            "data_expr": self._data_expr(intent.data),
            "route": route_for_output(intent.output_path),
            "content_import": None,
        }
        if intent.content_path is not None:
            context["content_import"] = relative_import_path(page_file, intent.content_path)

        if intent.kind is PageKind.EXAMPLE:
            return self._render_example(intent, config, context)

        if intent.content_path is None:
            template_name = "standalone.js.j2"
        elif intent.kind is PageKind.CHANGELOG:
            template_name = "changelog.js.j2"
        else:
            template_name = "wrapped.js.j2"
        source = self._env.get_template(template_name).render(**context)
        return [RenderedPage(path=page_file, source=source)]

    def _render_example(
        self, intent: PageIntent, config: GeneratorConfig, context: Dict[str, Any]
    ) -> List[RenderedPage]:
        if intent.content_path is None:
            raise ValueError(f"Example page {intent.output_path} requires an example module")
        pages = [
            RenderedPage(
                path=config.pages_path / intent.output_path,
                source=self._env.get_template("example.js.j2").render(**context),
            )
        ]
        if intent.isolated_output_path:
            isolated_file = config.pages_path / intent.isolated_output_path
            isolated_context = dict(context)
            isolated_context["content_import"] = relative_import_path(
                isolated_file, intent.content_path
            )
            isolated_context["route"] = route_for_output(intent.isolated_output_path)
            pages.append(
                RenderedPage(
                    path=isolated_file,
                    source=self._env.get_template("isolated.js.j2").render(**isolated_context),
                )
            )
        return pages

    def _load_meta(self, content_path: Optional[Path]) -> Dict[str, Any]:
        if content_path is None or not content_path.is_file():
            return {}
        return dict(self._extract_metadata(content_path))

    @staticmethod
    def _data_expr(data: PageData) -> str:
        payload = json.dumps(data.to_payload(), separators=(",", ":"), default=str)
        return "{" + payload + "}"

    @staticmethod
    def _create_env(templates_dir: Path | None) -> Environment:
        directories = []
        if templates_dir:
            directories.append(str(templates_dir))
        directories.append(str(_DEFAULT_TEMPLATES))
        env = Environment(
            loader=FileSystemLoader(directories),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        env.filters["quote"] = json.dumps
        return env


__all__ = ["EmitResult", "PageEmitter", "RenderedPage", "write_file"]
