"""Jinja2 environment shared by the module and header emitters."""

from __future__ import annotations

from pathlib import Path
from typing import List

from jinja2 import Environment, FileSystemLoader, StrictUndefined

MODULE_TEMPLATE = "module.cpp.j2"
HEADER_TEMPLATE = "header.h.j2"

_DEFAULT_TEMPLATES_DIR = Path(__file__).with_name("templates")


def create_environment(templates_dir: Path | None = None) -> Environment:
    """Return an environment that prefers ``templates_dir`` over the built-in templates."""
    directories: List[str] = []
    if templates_dir:
        directories.append(str(templates_dir))
    default_dir = str(_DEFAULT_TEMPLATES_DIR)
    if default_dir not in directories:
        directories.append(default_dir)
    loader = FileSystemLoader(directories)
    return Environment(
        loader=loader,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=StrictUndefined,
    )


__all__ = ["HEADER_TEMPLATE", "MODULE_TEMPLATE", "create_environment"]
