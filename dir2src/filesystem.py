"""File read, write and directory creation used by the generator."""

from __future__ import annotations

from pathlib import Path

from .logging import get_logger

_LOGGER = get_logger("filesystem")


class GenerationError(RuntimeError):
    """Base class for failures that abort a generation run."""


class InputReadError(GenerationError):
    """Raised when an input file cannot be opened or read."""

    def __init__(self, path: str | Path, error: OSError) -> None:
        self.path = str(path)
        self.errno = error.errno
        super().__init__(f"Failed to read input file {self.path}: {_describe(error)}")


class OutputWriteError(GenerationError):
    """Raised when an output file or directory cannot be created."""

    def __init__(self, path: str | Path, error: OSError) -> None:
        self.path = str(path)
        self.errno = error.errno
        super().__init__(f"Failed to write output {self.path}: {_describe(error)}")


def read_bytes(path: str | Path) -> bytes:
    """Return the full contents of ``path``."""
    try:
        with open(path, "rb") as handle:
            return handle.read()
    except OSError as exc:
        raise InputReadError(path, exc) from exc


def ensure_directory(path: str | Path) -> None:
    """Create ``path`` and its parents; an existing directory is fine."""
    try:
        Path(path).mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputWriteError(path, exc) from exc


def write_text(path: str | Path, contents: str) -> None:
    """Write ``contents`` to ``path``, replacing any previous file."""
    try:
        # newline="" keeps the generated "\n" line endings on every platform.
        with open(path, "w", encoding="utf-8", newline="") as handle:
            handle.write(contents)
    except OSError as exc:
        raise OutputWriteError(path, exc) from exc
    _LOGGER.debug("Wrote %s (%d bytes)", path, len(contents))


def _describe(error: OSError) -> str:
    if error.errno is None:
        return str(error)
    return f"[errno {error.errno}] {error.strerror or error}"


__all__ = [
    "GenerationError",
    "InputReadError",
    "OutputWriteError",
    "ensure_directory",
    "read_bytes",
    "write_text",
]
