"""Logging utilities for docsite commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

_LOGGER_NAME = "docsite"
# Scanner warnings (missing readme, missing changelog) are issued through the
# warnings module; logging.captureWarnings reroutes them to this logger.
_WARNINGS_LOGGER_NAME = "py.warnings"

_CONSOLE_FORMAT = "[docsite] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the docsite hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def _reset_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def _build_handlers(level: int, log_file: Path | None) -> List[logging.Handler]:
    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    handlers: List[logging.Handler] = [console]

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        handlers.append(file_handler)
    return handlers


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure build logging and fold content warnings into the same sinks.

    The console handler and the optional ``log_file`` handler are shared by the
    ``docsite`` logger and the ``py.warnings`` logger, so a package without a
    README is reported next to the build progress instead of on bare stderr.
    Calling this again replaces the previous handlers.
    """
    level = logging.DEBUG if verbose else logging.INFO
    handlers = _build_handlers(level, log_file)

    logger = logging.getLogger(_LOGGER_NAME)
    warnings_logger = logging.getLogger(_WARNINGS_LOGGER_NAME)
    for target in (logger, warnings_logger):
        _reset_handlers(target)
        target.setLevel(level)
        target.propagate = False
        for handler in handlers:
            target.addHandler(handler)

    logging.captureWarnings(True)
    return logger


def reset_logging() -> None:
    """Detach docsite handlers and hand warnings back to the warnings module."""
    logging.captureWarnings(False)
    for name in (_LOGGER_NAME, _WARNINGS_LOGGER_NAME):
        target = logging.getLogger(name)
        _reset_handlers(target)
        target.propagate = True


__all__ = ["configure_logging", "get_logger", "reset_logging"]
