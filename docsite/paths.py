"""Path, route and naming helpers used when wiring generated pages together.

Everything here is pure string manipulation: no filesystem access. Paths are
normalised to forward slashes first so the results do not depend on the host
path conventions.
"""

from __future__ import annotations

import os
import posixpath
import re
from typing import Iterable, Union

PathLike = Union[str, os.PathLike]

MODULE_SUFFIXES = (".js", ".jsx", ".ts", ".tsx", ".mjs")

_UNSAFE_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')
_WORD_BOUNDARY = re.compile(r"[-_\s]+")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def to_posix(path: PathLike) -> str:
    """Return ``path`` as a string with forward-slash separators."""
    return os.fspath(path).replace("\\", "/")


def strip_module_suffix(path: str) -> str:
    root, ext = posixpath.splitext(path)
    if ext in MODULE_SUFFIXES:
        return root
    return path


def relative_import_path(from_file: PathLike, to_file: PathLike) -> str:
    """Return an import specifier leading from ``from_file``'s directory to ``to_file``.

    Module extensions are stripped and the result always starts with ``./`` or
    ``../`` so it can never be mistaken for a package import.
    """
    from_dir = posixpath.dirname(to_posix(from_file)) or "."
    relative = posixpath.relpath(to_posix(to_file), from_dir)
    relative = strip_module_suffix(relative)
    if relative == ".." or relative.startswith("../"):
        return relative
    return f"./{relative}"


def to_route_path(segments: Union[str, Iterable[str]]) -> str:
    """Join ``segments`` into a route with exactly one leading slash."""
    if isinstance(segments, str):
        segments = [segments]
    parts = []
    for segment in segments:
        for part in to_posix(segment).split("/"):
            if part and part != ".":
                parts.append(part)
    return "/" + "/".join(parts)


def route_for_output(output_path: str) -> str:
    """Return the route served by a generated file at ``output_path``."""
    route = to_route_path(strip_module_suffix(to_posix(output_path)))
    if route == "/index":
        return "/"
    if route.endswith("/index"):
        return route[: -len("/index")]
    return route


def join_output(*segments: str) -> str:
    """Join output path segments relative to the pages root."""
    return to_route_path(segments).lstrip("/")


def slugify(name: str) -> str:
    """Derive a filesystem- and URL-safe key from a display name."""
    slug = "-".join(name.strip().lower().split())
    slug = _UNSAFE_FILENAME_CHARS.sub("", slug)
    return slug.strip(".") or "docs"


def title_case(identifier: str) -> str:
    """Turn ids such as ``my-package`` or ``gettingStarted`` into display titles."""
    spaced = _CAMEL_BOUNDARY.sub(" ", identifier)
    words = [word for word in _WORD_BOUNDARY.split(spaced) if word]
    return " ".join(word[:1].upper() + word[1:] for word in words)


__all__ = [
    "MODULE_SUFFIXES",
    "join_output",
    "relative_import_path",
    "route_for_output",
    "slugify",
    "strip_module_suffix",
    "title_case",
    "to_posix",
    "to_route_path",
]
