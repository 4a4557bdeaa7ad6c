"""Pipeline orchestration for a full dir2src run."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Tuple

from .config import GeneratorConfig
from .emit import HeaderEmitter, ModuleEmitter, create_environment
from .filesystem import GenerationError, ensure_directory, write_text
from .logging import get_logger
from .models import EmbeddedArrayDeclaration, GeneratedModule, GenerationResult, SourceFile
from .naming import NamespacePath, derive_namespace_path, sanitize_identifier
from .paths import join_segments, normalize_directory, split_segments
from .scanner import TreeScanner


class DuplicateSymbolError(GenerationError):
    """Raised when two inputs map to the same qualified name in the generated header."""


@dataclass(frozen=True)
class PlannedModule:
    """Names and output location computed for a discovered file before it is read."""

    source: SourceFile
    namespace_path: NamespacePath
    array_name: str
    output_directory: str
    output_path: str


class Generator:
    """Coordinates traversal, module emission and header synchronisation."""

    def __init__(
        self,
        config: GeneratorConfig,
        *,
        scanner: TreeScanner | None = None,
        module_emitter: ModuleEmitter | None = None,
        header_emitter: HeaderEmitter | None = None,
    ) -> None:
        self.config = config
        self.output_root = normalize_directory(config.output_path)
        self.root_segment_count = len(split_segments(normalize_directory(config.input_path)))
        self.scanner = scanner or TreeScanner(
            config.exclude_paths,
            skip_directories=[self.output_root],
        )
        environment = None
        if module_emitter is None or header_emitter is None:
            environment = create_environment(config.templates_dir)
        self.module_emitter = module_emitter or ModuleEmitter(
            config.root_namespace,
            byte_style=config.byte_style,
            environment=environment,
        )
        self.header_emitter = header_emitter or HeaderEmitter(
            config.root_namespace,
            environment=environment,
        )
        self.logger = get_logger("generator")

    @property
    def header_path(self) -> Path:
        return Path(self.output_root + self.config.header_name)

    def run(self) -> GenerationResult:
        """Regenerate every module and the aggregate header."""
        self.logger.info("Embedding files from %s into %s", self.config.input_path, self.output_root)
        sources = list(self.scanner.walk(self.config.input_path))
        self.logger.debug("Scanner discovered %d files", len(sources))

        plan = self.plan(sources)

        if self.config.jobs > 1 and len(plan) > 1:
            with ThreadPoolExecutor(max_workers=self.config.jobs) as executor:
                # map() yields in submission order, which keeps the header in traversal order.
                modules = list(executor.map(self._emit_module, plan))
        else:
            modules = [self._emit_module(planned) for planned in plan]

        header_text = self.header_emitter.render(module.declaration for module in modules)
        if not self.config.dry_run:
            ensure_directory(self.output_root)
            write_text(self.header_path, header_text)

        self.logger.info(
            "Generated %d modules and %s%s",
            len(modules),
            self.header_path,
            " (dry-run)" if self.config.dry_run else "",
        )
        return GenerationResult(header_path=self.header_path, modules=modules, dry_run=self.config.dry_run)

    def plan(self, sources: List[SourceFile]) -> List[PlannedModule]:
        """Derive names and output paths, rejecting files that would collide."""
        planned: List[PlannedModule] = []
        seen: Dict[Tuple[NamespacePath, str], str] = {}
        for source in sources:
            namespace_path = derive_namespace_path(source.directory, self.root_segment_count)
            array_name = sanitize_identifier(source.file_name)
            key = (namespace_path, array_name)
            previous = seen.get(key)
            if previous is not None:
                raise DuplicateSymbolError(
                    f"{source.path} and {previous} both map to {self._qualify(*key)}"
                )
            seen[key] = source.path

            output_directory = join_segments(self.output_root, source.relative_directory)
            planned.append(
                PlannedModule(
                    source=source,
                    namespace_path=namespace_path,
                    array_name=array_name,
                    output_directory=output_directory,
                    output_path=output_directory + source.file_name + self.config.source_extension,
                )
            )

        # An array and a namespace sharing a scope and an identifier cannot both be declared.
        for module in planned:
            for depth, name in enumerate(module.namespace_path):
                clash = seen.get((module.namespace_path[:depth], name))
                if clash is not None:
                    directory = join_segments(
                        self.config.input_path, module.source.relative_directory[: depth + 1]
                    )
                    raise DuplicateSymbolError(
                        f"{clash} and directory {directory} both map to "
                        f"{self._qualify(module.namespace_path[:depth], name)}"
                    )
        return planned

    def _qualify(self, namespace_path: NamespacePath, name: str) -> str:
        return "::".join((self.config.root_namespace, *namespace_path, name))

    def _emit_module(self, planned: PlannedModule) -> GeneratedModule:
        entry = self.scanner.load(planned.source)
        declaration = EmbeddedArrayDeclaration(
            namespace_path=planned.namespace_path,
            array_name=planned.array_name,
            length=len(entry.contents),
        )
        text = self.module_emitter.render_declaration(declaration, entry.contents)
        if not self.config.dry_run:
            ensure_directory(planned.output_directory)
            write_text(planned.output_path, text)
        self.logger.debug("Embedded %s as %s", planned.source.path, declaration.qualified_name)
        return GeneratedModule(declaration=declaration, path=Path(planned.output_path))


__all__ = ["DuplicateSymbolError", "Generator", "PlannedModule"]
