"""Identifier sanitising and namespace path derivation."""

from __future__ import annotations

import re
from typing import Iterable, Tuple

from .paths import split_segments

NamespacePath = Tuple[str, ...]

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")


class SanitizationError(ValueError):
    """Raised when a name has no alphanumeric characters to build an identifier from."""


def sanitize_identifier(name: str) -> str:
    """Turn an arbitrary file or directory name into a C++ identifier.

    Every non-alphanumeric character becomes ``_``, leading underscores are
    stripped, and a leading digit gets a ``_`` prefix. The result is stable
    under repeated application.
    """
    replaced = _NON_ALNUM.sub("_", name)
    stripped = replaced.lstrip("_")
    if not stripped:
        raise SanitizationError(f"Cannot derive an identifier from name {name!r}")
    if stripped[0].isdigit():
        return "_" + stripped
    return stripped


def namespace_path_for(relative_directory: Iterable[str]) -> NamespacePath:
    """Sanitise each root-relative directory segment independently."""
    return tuple(sanitize_identifier(segment) for segment in relative_directory)


def relative_segments(directory: str, root_segment_count: int) -> Tuple[str, ...]:
    """Return the raw segments of ``directory`` below the input root."""
    segments = split_segments(directory)
    if len(segments) < root_segment_count:
        raise ValueError(
            f"Directory {directory!r} is shallower than the input root "
            f"({root_segment_count} segments)"
        )
    return tuple(segments[root_segment_count:])


def derive_namespace_path(directory: str, root_segment_count: int) -> NamespacePath:
    """Map a directory path that still carries the input root prefix to a namespace path."""
    return namespace_path_for(relative_segments(directory, root_segment_count))


__all__ = [
    "NamespacePath",
    "SanitizationError",
    "derive_namespace_path",
    "namespace_path_for",
    "relative_segments",
    "sanitize_identifier",
]
