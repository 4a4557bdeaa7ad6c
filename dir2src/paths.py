"""Directory path normalisation shared by traversal and output layout."""

from __future__ import annotations

from typing import List

SEPARATOR = "/"


def normalize_directory(path: str) -> str:
    """Return ``path`` with ``/`` separators and a trailing separator.

    Backslashes are accepted so Windows-style arguments behave the same as
    POSIX ones. An empty string stays empty.
    """
    if not path:
        return path
    normalised = path.replace("\\", SEPARATOR)
    if not normalised.endswith(SEPARATOR):
        normalised += SEPARATOR
    return normalised


def split_segments(path: str) -> List[str]:
    """Split a path on either separator, dropping empty segments."""
    return [segment for segment in path.replace("\\", SEPARATOR).split(SEPARATOR) if segment]


def join_segments(root: str, segments: List[str] | tuple[str, ...]) -> str:
    """Join ``segments`` below the directory ``root`` and keep the trailing separator."""
    joined = normalize_directory(root)
    for segment in segments:
        joined += segment + SEPARATOR
    return joined


__all__ = ["SEPARATOR", "join_segments", "normalize_directory", "split_segments"]
