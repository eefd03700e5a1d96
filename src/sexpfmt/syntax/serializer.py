"""
Canonical text rendering.

Lists render as `(a b c)` with single spaces; atoms render bare when that
re-scans to the same bytes, otherwise as "..." with inner quotes doubled.
"""

from __future__ import annotations

from typing import Iterator, List, Tuple

from sexpfmt.core.errors import AllocationFailure
from sexpfmt.core.node import Atom, Node, SList

# bytes that force quoting besides the non-printables
_SPECIAL = frozenset(b' ()"')


def needs_quote(data: bytes) -> bool:
    if not data:
        return True
    # a bare atom starting with ';' would re-scan as a comment
    if data[0] == 0x3B:
        return True
    for ch in data:
        if ch < 0x20 or ch > 0x7E or ch in _SPECIAL:
            return True
    return False


def quote(data: bytes) -> bytes:
    return b'"' + data.replace(b'"', b'""') + b'"'


def render_atom(atom: Atom) -> bytes:
    data = atom.data
    return quote(data) if needs_quote(data) else data


def _chunks(node: Node) -> Iterator[bytes]:
    # explicit stack of (list, index) frames
    if isinstance(node, Atom):
        yield render_atom(node)
        return
    if not isinstance(node, SList):
        raise TypeError(f"Cannot render {type(node).__name__}")
    stack: List[Tuple[SList, int]] = [(node, 0)]
    yield b"("
    while stack:
        lst, i = stack.pop()
        if i >= len(lst.children):
            yield b")"
            continue
        stack.append((lst, i + 1))
        if i > 0:
            yield b" "
        child = lst.children[i]
        if isinstance(child, Atom):
            yield render_atom(child)
        elif isinstance(child, SList):
            yield b"("
            stack.append((child, 0))
        else:
            raise TypeError(f"Cannot render {type(child).__name__} inside a list")


def render(node: Node) -> bytes:
    """Render `node` as canonical bytes. Nothing is returned on failure."""
    try:
        return b"".join(_chunks(node))
    except MemoryError as exc:
        raise AllocationFailure("Out of memory while rendering") from exc


def render_text(node: Node, encoding: str = "utf-8") -> str:
    return render(node).decode(encoding, "surrogateescape")
