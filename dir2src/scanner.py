"""Input tree traversal producing file entries in pre-order."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence, Set

from .filesystem import InputReadError, read_bytes
from .logging import get_logger
from .models import FileEntry, SourceFile
from .naming import relative_segments
from .paths import normalize_directory, split_segments

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
}

_EXCLUDED_FILES = {
    ".DS_Store",
    "Thumbs.db",
}


@dataclass
class IgnoreRule:
    """Represents an exclusion pattern from .dir2src.yml."""

    pattern: str
    directory_only: bool
    anchored: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            return fnmatchcase(rel_path, self.pattern)

        return fnmatchcase(rel_path.rsplit("/", 1)[-1], self.pattern)


def build_ignore_rule(pattern: str) -> IgnoreRule | None:
    pattern = pattern.strip().replace("\\", "/")
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern.rstrip("/")

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern.lstrip("/")

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        has_slash="/" in pattern,
    )


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    return any(rule.matches(rel_path, is_dir) for rule in rules)


class TreeScanner:
    """Walks an input root depth-first and yields its files in pre-order.

    Files of a directory are yielded, sorted by name, before any of its
    subdirectories is entered, and subdirectories are visited in sorted
    order. Every directory's files are therefore contiguous in the stream
    and unrelated branches never interleave.
    """

    def __init__(
        self,
        exclude_paths: Iterable[str] = (),
        *,
        skip_directories: Iterable[str | Path] = (),
    ) -> None:
        self._rules: List[IgnoreRule] = []
        for pattern in exclude_paths:
            rule = build_ignore_rule(pattern)
            if rule is not None:
                self._rules.append(rule)
        self._skip: Set[Path] = {Path(path).resolve() for path in skip_directories}
        self.logger = get_logger("scanner")

    def walk(self, root: str) -> Iterator[SourceFile]:
        """Yield every file below ``root`` without reading it."""
        root_dir = normalize_directory(root)
        root_path = Path(root_dir)
        if not root_path.exists():
            raise FileNotFoundError(f"Input path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Input path is not a directory: {root}")

        root_segment_count = len(split_segments(root_dir))

        for dirpath, dirnames, filenames in os.walk(root_dir, onerror=_raise_walk_error):
            directory = normalize_directory(dirpath)
            relative = relative_segments(directory, root_segment_count)
            rel_dir = "/".join(relative)

            kept_dirs = []
            for name in sorted(dirnames):
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if name in _EXCLUDED_DIRS or _should_ignore(rel_path, True, self._rules):
                    self.logger.debug("Skipping directory %s", rel_path)
                    continue
                if self._skip and Path(directory, name).resolve() in self._skip:
                    self.logger.debug("Skipping output directory %s", rel_path)
                    continue
                kept_dirs.append(name)
            dirnames[:] = kept_dirs

            for filename in sorted(filenames):
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if filename in _EXCLUDED_FILES or _should_ignore(rel_path, False, self._rules):
                    self.logger.debug("Skipping file %s", rel_path)
                    continue
                yield SourceFile(
                    path=directory + filename,
                    directory=directory,
                    relative_directory=relative,
                    file_name=filename,
                )

    def load(self, source: SourceFile) -> FileEntry:
        """Read the bytes of a discovered file."""
        return FileEntry(
            relative_directory=source.relative_directory,
            file_name=source.file_name,
            contents=read_bytes(source.path),
            source_path=source.path,
        )

    def scan(self, root: str) -> Iterator[FileEntry]:
        """Yield a FileEntry with contents for every file below ``root``."""
        for source in self.walk(root):
            yield self.load(source)


def _raise_walk_error(error: OSError) -> None:
    raise InputReadError(error.filename or "<unknown>", error)


__all__ = ["IgnoreRule", "TreeScanner", "build_ignore_rule"]
