"""Core data models shared across dir2src components."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple

from .naming import NamespacePath


@dataclass(frozen=True)
class SourceFile:
    """A discovered input file whose bytes have not been read yet."""

    path: str
    directory: str
    relative_directory: Tuple[str, ...]
    file_name: str


@dataclass(frozen=True)
class FileEntry:
    """An input file with its contents, tagged with its root-relative directory."""

    relative_directory: Tuple[str, ...]
    file_name: str
    contents: bytes
    source_path: str = ""


@dataclass(frozen=True)
class EmbeddedArrayDeclaration:
    """Name, nesting and size of one embedded array; carries no payload."""

    namespace_path: NamespacePath
    array_name: str
    length: int

    @property
    def qualified_name(self) -> str:
        return "::".join((*self.namespace_path, self.array_name))


@dataclass(frozen=True)
class GeneratedModule:
    """A per-file source module produced by a run."""

    declaration: EmbeddedArrayDeclaration
    path: Path


@dataclass
class GenerationResult:
    """Outputs of a full generation run."""

    header_path: Path
    modules: List[GeneratedModule] = field(default_factory=list)
    dry_run: bool = False

    @property
    def declarations(self) -> List[EmbeddedArrayDeclaration]:
        return [module.declaration for module in self.modules]
