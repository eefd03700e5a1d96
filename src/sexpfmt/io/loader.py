"""
File helpers: read a file of top-level values, write canonical renderings.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional

from sexpfmt.core.node import Node
from sexpfmt.io.config import DEFAULT_CONFIG, SExprConfig
from sexpfmt.syntax.parser import parse_all
from sexpfmt.syntax.serializer import render

logger = logging.getLogger(__name__)


def load_file(path: str | Path, *, config: Optional[SExprConfig] = None) -> List[Node]:
    p = Path(path)
    data = p.read_bytes()
    nodes = parse_all(data, config=config)
    logger.debug(f"Loaded {len(nodes)} value(s) from {p} ({len(data)} bytes)")
    return nodes


def canonical_bytes(nodes: Iterable[Node], *, config: Optional[SExprConfig] = None) -> bytes:
    """One rendered value per line."""
    cfg = config or DEFAULT_CONFIG
    out = b"\n".join(render(n) for n in nodes)
    if out and cfg.trailing_newline:
        out += b"\n"
    return out


def dump_file(path: str | Path, nodes: Iterable[Node], *, config: Optional[SExprConfig] = None) -> int:
    p = Path(path)
    data = canonical_bytes(nodes, config=config)
    p.write_bytes(data)
    logger.debug(f"Wrote {len(data)} bytes to {p}")
    return len(data)
