"""Per-file source module rendering."""

from __future__ import annotations

from jinja2 import Environment

from ..models import EmbeddedArrayDeclaration, FileEntry
from ..naming import namespace_path_for, sanitize_identifier
from .bytes import render_byte_body
from .environment import MODULE_TEMPLATE, create_environment


def declaration_for(entry: FileEntry) -> EmbeddedArrayDeclaration:
    """Build the declaration shared by a file's module and the aggregate header."""
    return EmbeddedArrayDeclaration(
        namespace_path=namespace_path_for(entry.relative_directory),
        array_name=sanitize_identifier(entry.file_name),
        length=len(entry.contents),
    )


class ModuleEmitter:
    """Renders one self-contained module defining a single embedded array."""

    def __init__(
        self,
        root_namespace: str = "Bin",
        *,
        byte_style: str = "decimal",
        environment: Environment | None = None,
    ) -> None:
        self.root_namespace = root_namespace
        self.byte_style = byte_style
        self._env = environment or create_environment()

    def render(self, entry: FileEntry) -> str:
        return self.render_declaration(declaration_for(entry), entry.contents)

    def render_declaration(self, declaration: EmbeddedArrayDeclaration, contents: bytes) -> str:
        if declaration.length != len(contents):
            raise ValueError(
                f"Declared length {declaration.length} for {declaration.qualified_name} "
                f"does not match {len(contents)} bytes of content"
            )
        template = self._env.get_template(MODULE_TEMPLATE)
        return (
            template.render(
                root_namespace=self.root_namespace,
                namespace_path=list(declaration.namespace_path),
                array_name=declaration.array_name,
                length=declaration.length,
                body=render_byte_body(contents, style=self.byte_style),
            ).strip()
            + "\n"
        )


__all__ = ["ModuleEmitter", "declaration_for"]
