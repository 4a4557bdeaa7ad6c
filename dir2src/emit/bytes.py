"""Fixed-width rendering of byte sequences as array literal bodies."""

from __future__ import annotations

from typing import Callable, Dict, List

BYTES_PER_LINE = 12
INDENT = "    "

_FORMATTERS: Dict[str, Callable[[int], str]] = {
    "decimal": lambda value: f"{value:03d}",
    "hex": lambda value: f"0x{value:02x}",
}

BYTE_STYLES = tuple(_FORMATTERS)


def render_byte_body(data: bytes, *, style: str = "decimal") -> str:
    """Render ``data`` as the body of a ``std::array`` initialiser.

    Twelve entries per line, each line indented, entries separated by
    ``", "``. Lines end with a comma except the last one, which has no
    trailing comma and no line break. Empty input renders as ``""``.

    >>> render_byte_body(bytes([1, 2, 255]))
    '    001, 002, 255'
    """
    try:
        formatter = _FORMATTERS[style]
    except KeyError:
        raise ValueError(f"Unknown byte style {style!r}; expected one of {', '.join(BYTE_STYLES)}") from None

    lines: List[str] = []
    for start in range(0, len(data), BYTES_PER_LINE):
        chunk = data[start : start + BYTES_PER_LINE]
        lines.append(INDENT + ", ".join(formatter(value) for value in chunk))
    return ",\n".join(lines)


__all__ = ["BYTES_PER_LINE", "BYTE_STYLES", "INDENT", "render_byte_body"]
