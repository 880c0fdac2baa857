"""CLI parser and entrypoint behaviour tests."""

from __future__ import annotations

import json

import pytest

from docsite.cli import _build_parser, main
from docsite.pipeline import Pipeline
from tests._fixtures.site_builder import SiteBuilder


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "build"])
    assert args.verbose is True
    assert args.command == "build"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["build", "--verbose"])
    assert args.verbose is True
    assert args.command == "build"


def test_cli_build_flags() -> None:
    parser = _build_parser()
    args = parser.parse_args(["build", "site", "--mode", "production", "--strict", "--dry-run"])
    assert args.path == "site"
    assert args.mode == "production"
    assert args.strict is True
    assert args.dry_run is True


def test_cli_leaves_strict_unset_by_default() -> None:
    args = _build_parser().parse_args(["sitemap"])
    assert args.strict is None
    assert args.mode is None
    assert args.path == "."


def test_cli_rejects_unknown_mode() -> None:
    with pytest.raises(SystemExit):
        _build_parser().parse_args(["build", "--mode", "staging"])


def test_sitemap_command_prints_json(site_builder: SiteBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    site_builder.package("alpha", {"README.md": "# Alpha\n", "CHANGELOG.md": "x\n"})

    main(["sitemap", str(site_builder.path())])

    payload = json.loads(capsys.readouterr().out)
    assert payload["packages"][0]["homePath"] == "/packages/alpha"
    assert not (site_builder.path() / "site").exists()


def test_build_reports_configuration_errors(site_builder: SiteBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["build", str(site_builder.path())])

    assert excinfo.value.code == 1
    assert "configuration" in capsys.readouterr().err


def test_build_writes_site(site_builder: SiteBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    site_builder.package("alpha", {"README.md": "# Alpha\n", "CHANGELOG.md": "x\n"})

    main(["build", str(site_builder.path())])

    assert "Generated" in capsys.readouterr().out
    assert (site_builder.path() / "site" / "data" / "pages-list.json").exists()


def test_sitemap_reports_filesystem_errors(
    site_builder: SiteBuilder, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def _unreadable(self: Pipeline, config: object) -> None:
        raise PermissionError(13, "Permission denied", "packages")

    monkeypatch.setattr(Pipeline, "assemble", _unreadable)

    with pytest.raises(SystemExit) as excinfo:
        main(["sitemap", str(site_builder.path())])

    assert excinfo.value.code == 1
    err = capsys.readouterr().err
    assert "docsite sitemap failed (filesystem)" in err
    assert "Permission denied" in err
