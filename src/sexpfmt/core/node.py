"""
Tree model: two node kinds, Atom (opaque bytes) and SList (owned children).

A tree is single-rooted. A node never has two parents, and lists never
contain themselves.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Union

from .errors import AllocationFailure


@dataclass(frozen=True)
class Atom:
    data: bytes

    def __post_init__(self):
        if not isinstance(self.data, bytes):
            # accept bytearray / memoryview but always store an owned copy
            object.__setattr__(self, "data", bytes(self.data))

    @classmethod
    def of(cls, text: str, encoding: str = "utf-8") -> "Atom":
        return cls(text.encode(encoding, "surrogateescape"))

    @property
    def text(self) -> str:
        return self.data.decode("utf-8", "surrogateescape")

    def __len__(self) -> int:
        return len(self.data)


@dataclass
class SList:
    children: List["Node"] = field(default_factory=list)

    def append(self, child: "Node") -> None:
        # unchecked; the parser only ever appends freshly built nodes
        self.children.append(child)

    def __len__(self) -> int:
        return len(self.children)

    def __iter__(self) -> Iterator["Node"]:
        return iter(self.children)

    def __getitem__(self, i):
        return self.children[i]


Node = Union[Atom, SList]


def is_node(obj) -> bool:
    return isinstance(obj, (Atom, SList))


def as_atom(node) -> Optional[Atom]:
    return node if isinstance(node, Atom) else None


def as_list(node) -> Optional[SList]:
    return node if isinstance(node, SList) else None


def new_list(children: Optional[Iterable[Node]] = None) -> SList:
    lst = SList()
    for child in children or ():
        append(lst, child)
    return lst


def _reaches(root: Node, target: SList) -> bool:
    stack = [root]
    while stack:
        n = stack.pop()
        if n is target:
            return True
        if isinstance(n, SList):
            stack.extend(n.children)
    return False


def append(lst: SList, child: Node) -> SList:
    """
    Append `child` to `lst` and return `lst`.

    Raises TypeError for non-nodes, ValueError if the append would make
    `lst` reachable from itself, AllocationFailure if the list cannot grow.
    """
    if not isinstance(lst, SList):
        raise TypeError(f"append target must be SList, got {type(lst).__name__}")
    if not is_node(child):
        raise TypeError(f"child must be Atom or SList, got {type(child).__name__}")
    if isinstance(child, SList) and _reaches(child, lst):
        raise ValueError("Appending this child would create a cycle")
    try:
        lst.children.append(child)
    except MemoryError as exc:
        raise AllocationFailure("Could not grow list") from exc
    return lst


def release(node: Optional[Node]) -> None:
    """
    Deep-destroy a tree: every list reachable from `node` is emptied.

    Iterative, so arbitrarily deep trees are fine. Atoms are immutable and
    need no work.
    """
    if node is None:
        return
    stack: List[SList] = [node] if isinstance(node, SList) else []
    while stack:
        lst = stack.pop()
        for child in lst.children:
            if isinstance(child, SList):
                stack.append(child)
        lst.children.clear()


def walk(node: Node) -> Iterator[Node]:
    """Pre-order traversal."""
    stack: List[Node] = [node]
    while stack:
        n = stack.pop()
        yield n
        if isinstance(n, SList):
            stack.extend(reversed(n.children))
