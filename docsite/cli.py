"""CLI entrypoints for docsite commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import MODES, ConfigurationError
from .logging import configure_logging
from .pipeline import Pipeline
from .writer import dump_json


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root or its .docsite.yml (defaults to current directory).",
    )


def _add_build_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--mode",
        choices=MODES,
        default=None,
        help="Override the configured build mode.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Treat colliding sitemap paths as configuration errors.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docsite",
        description="Generate documentation site pages and data from packages and docs trees.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser(
        "build",
        help="Clean the output and regenerate every page and data file.",
    )
    _add_verbose_option(build_parser, suppress_default=True)
    _add_path_argument(build_parser)
    _add_build_options(build_parser)
    build_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Scan and assemble the sitemap without writing anything.",
    )

    sitemap_parser = subparsers.add_parser(
        "sitemap",
        help="Print the sitemap JSON without writing files.",
    )
    _add_verbose_option(sitemap_parser, suppress_default=True)
    _add_path_argument(sitemap_parser)
    _add_build_options(sitemap_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for docsite commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    pipeline = Pipeline()

    if args.command == "build":
        try:
            outcome = pipeline.run_build(
                args.path,
                mode=args.mode,
                strict=args.strict,
                dry_run=bool(args.dry_run),
            )
        except ConfigurationError as exc:
            parser.exit(1, f"docsite build failed (configuration): {exc}\n")
        except OSError as exc:
            parser.exit(1, f"docsite build failed (filesystem): {exc}\nRun with --verbose for more details.\n")
        if outcome.dry_run:
            print(f"{len(outcome.site.intents)} pages would be generated (dry-run)")
        else:
            print(f"Generated {len(outcome.written)} files")
            if outcome.data_paths is not None:
                print(f"Site data written to {_relativize(outcome.data_paths.pages_list.parent)}")
    elif args.command == "sitemap":
        try:
            config = pipeline.load(args.path, mode=args.mode, strict=args.strict)
            site = pipeline.assemble(config)
        except ConfigurationError as exc:
            parser.exit(1, f"docsite sitemap failed (configuration): {exc}\n")
        except OSError as exc:
            parser.exit(1, f"docsite sitemap failed (filesystem): {exc}\nRun with --verbose for more details.\n")
        sys.stdout.write(dump_json(site.sitemap.to_dict()))
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
