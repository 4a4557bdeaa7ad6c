"""Aggregate header generation with minimal namespace reopening.

The header declares every embedded array ``extern``. Consecutive
declarations usually share most of their namespace path, so instead of
wrapping each declaration in its full path the synchronizer keeps the
currently open path and, per declaration, closes only the namespaces that
diverge from the next path and opens only the new ones.

The prefix is recomputed for every declaration. A stream in which files of
one directory are not contiguous therefore reopens that namespace again but
never produces unbalanced braces.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from jinja2 import Environment

from ..models import EmbeddedArrayDeclaration
from .environment import HEADER_TEMPLATE, create_environment


@dataclass(frozen=True)
class NamespaceTransition:
    """Namespaces to close (innermost first) and open (outermost first)."""

    close: Tuple[str, ...]
    open: Tuple[str, ...]
    common: int


def common_prefix_length(current: Sequence[str], target: Sequence[str]) -> int:
    length = 0
    for left, right in zip(current, target):
        if left != right:
            break
        length += 1
    return length


def diff_namespaces(current: Sequence[str], target: Sequence[str]) -> NamespaceTransition:
    """Return the closes and opens that turn ``current`` into ``target``."""
    common = common_prefix_length(current, target)
    return NamespaceTransition(
        close=tuple(reversed(current[common:])),
        open=tuple(target[common:]),
        common=common,
    )


class HeaderSynchronizer:
    """Streams header lines while tracking which namespaces are still open."""

    def __init__(self, root_namespace: str = "Bin") -> None:
        self.root_namespace = root_namespace
        self._open: List[str] = []
        self._lines: List[str] = []
        self._started = False
        self._finished = False

    @property
    def open_path(self) -> Tuple[str, ...]:
        return tuple(self._open)

    def begin(self) -> None:
        if self._started:
            raise RuntimeError("Header synchronizer already started")
        self._started = True
        self._open_block(self.root_namespace)

    def declare(self, declaration: EmbeddedArrayDeclaration) -> None:
        if not self._started:
            self.begin()
        if self._finished:
            raise RuntimeError("Cannot declare after the header has been finished")

        transition = diff_namespaces(self._open, declaration.namespace_path)
        for name in transition.close:
            self._close_block(name)
        del self._open[transition.common :]
        for name in transition.open:
            self._open_block(name)
            self._open.append(name)

        self._lines.append(
            f"extern std::array<uint8_t, {declaration.length}> {declaration.array_name};"
        )

    def finish(self) -> str:
        """Close every open namespace plus the root and return the header body."""
        if self._finished:
            raise RuntimeError("Header synchronizer already finished")
        if not self._started:
            self.begin()
        for name in reversed(self._open):
            self._close_block(name)
        self._open.clear()
        self._close_block(self.root_namespace)
        self._finished = True
        return "\n".join(self._lines)

    def _open_block(self, name: str) -> None:
        if self._lines and self._lines[-1]:
            self._lines.append("")
        self._lines.append(f"namespace {name} {{")
        self._lines.append("")

    def _close_block(self, name: str) -> None:
        if self._lines and self._lines[-1] and not self._lines[-1].startswith("}"):
            self._lines.append("")
        self._lines.append(f"}} // end of namespace {name}")


class HeaderEmitter:
    """Renders the aggregate header for an ordered declaration stream."""

    def __init__(self, root_namespace: str = "Bin", *, environment: Environment | None = None) -> None:
        self.root_namespace = root_namespace
        self._env = environment or create_environment()

    def render(self, declarations: Iterable[EmbeddedArrayDeclaration]) -> str:
        synchronizer = HeaderSynchronizer(self.root_namespace)
        synchronizer.begin()
        for declaration in declarations:
            synchronizer.declare(declaration)
        body = synchronizer.finish()
        template = self._env.get_template(HEADER_TEMPLATE)
        return template.render(body=body).strip() + "\n"


__all__ = [
    "HeaderEmitter",
    "HeaderSynchronizer",
    "NamespaceTransition",
    "common_prefix_length",
    "diff_namespaces",
]
