"""Source and header emitters for embedded byte arrays."""

from .bytes import BYTE_STYLES, render_byte_body
from .environment import create_environment
from .header import HeaderEmitter, HeaderSynchronizer, diff_namespaces
from .module import ModuleEmitter, declaration_for

__all__ = [
    "BYTE_STYLES",
    "HeaderEmitter",
    "HeaderSynchronizer",
    "ModuleEmitter",
    "create_environment",
    "declaration_for",
    "diff_namespaces",
    "render_byte_body",
]
