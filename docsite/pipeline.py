"""Pipeline orchestration for a full site build."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .assembler import AssembledSite, AssemblyOptions, SitemapAssembler
from .config import SiteConfig, load_config
from .emitter import PageEmitter
from .logging import get_logger
from .models import GeneratorConfig, SiteMeta
from .scanner import ContentScanner, ScanOptions
from .workspace import WorkspaceCleaner, ensure_disposable
from .writer import DataPaths, DataWriter


@dataclass
class BuildOutcome:
    """Result of a build run."""

    site: AssembledSite
    written: List[Path] = field(default_factory=list)
    data_paths: Optional[DataPaths] = None
    page_meta: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    dry_run: bool = False


def _source_paths(config: SiteConfig, site: AssembledSite) -> List[Path]:
    sources = [intent.content_path for intent in site.intents if intent.content_path is not None]
    sources.extend(docs_root.path for docs_root in config.docs)
    for extra in (config.readme, config.output.scaffold_dir, config.templates_dir):
        if extra is not None:
            sources.append(extra)
    return sources


def build_site_meta(config: SiteConfig, site: AssembledSite) -> SiteMeta:
    return SiteMeta(
        site_name=config.site_name,
        packages_description=config.packages_description,
        packages_img_src=config.packages_img_src,
        links=[{"label": link.label, "href": link.href} for link in config.links],
        readme_img_src=config.readme_img_src,
        has_readme=bool(site.sitemap.readme),
        docs=site.docs_meta,
    )


class Pipeline:
    """Coordinates cleaning, scanning, assembly, emission and persistence."""

    def __init__(
        self,
        emitter: PageEmitter | None = None,
        cleaner: WorkspaceCleaner | None = None,
        writer: DataWriter | None = None,
    ) -> None:
        self._emitter = emitter
        self.cleaner = cleaner or WorkspaceCleaner()
        self.writer = writer or DataWriter()
        self.logger = get_logger("pipeline")

    def load(self, path: str | Path, *, mode: str | None = None, strict: bool | None = None) -> SiteConfig:
        config = load_config(Path(path))
        if mode is not None:
            config.mode = mode
        if strict is not None:
            config.strict = strict
        return config

    def assemble(self, config: SiteConfig) -> AssembledSite:
        """Scan the project and derive the sitemap without writing anything."""
        scanner = ContentScanner(config.root)
        scan = scanner.scan(
            config.packages,
            config.docs,
            ScanOptions(
                show_sub_examples=config.show_sub_examples,
                use_manifests=config.use_manifests,
                allow_empty_packages=config.allow_empty_packages,
            ),
            readme=config.readme,
        )
        assembler = SitemapAssembler(
            AssemblyOptions(include_changelog=config.include_changelog, strict=config.strict)
        )
        return assembler.assemble(scan)

    async def run(self, config: SiteConfig, *, dry_run: bool = False) -> BuildOutcome:
        """Rebuild every generated page and data file for ``config``."""
        self.logger.info("Starting %s build for %s", config.mode, config.root)
        site = self.assemble(config)
        if dry_run:
            self.logger.info("Dry run: %d pages would be generated", len(site.intents))
            return BuildOutcome(site=site, dry_run=True)

        pages_path = config.output.pages_dir
        ensure_disposable(pages_path, config.root, _source_paths(config, site))
        await self.cleaner.clean(pages_path)
        if config.output.scaffold_dir is not None:
            await self.cleaner.copy_scaffold(config.output.scaffold_dir, pages_path)

        emitter = self._emitter or PageEmitter(config.templates_dir)
        generator_config = GeneratorConfig(
            pages_path=pages_path, wrappers_path=config.output.wrappers_dir
        )
        outcome = BuildOutcome(site=site)
        for intent in site.intents:
            result = emitter.emit(intent, generator_config)
            outcome.written.extend(result.written)
            if result.meta:
                outcome.page_meta[intent.data.page_path] = result.meta

        outcome.data_paths = self.writer.persist(
            site.sitemap,
            site.packages_meta,
            build_site_meta(config, site),
            config.output.data_dir,
        )
        self.logger.info(
            "Generated %d files for %d packages", len(outcome.written), len(site.sitemap.packages)
        )
        return outcome

    def run_build(
        self,
        path: str | Path,
        *,
        mode: str | None = None,
        strict: bool | None = None,
        dry_run: bool = False,
    ) -> BuildOutcome:
        config = self.load(path, mode=mode, strict=strict)
        return asyncio.run(self.run(config, dry_run=dry_run))


__all__ = ["BuildOutcome", "Pipeline", "build_site_meta"]
