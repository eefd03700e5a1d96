"""
Recursive-descent parser.

    value := atom | list
    list  := '(' WS? (value (WS value)* WS?)? ')'

Exactly one whitespace token (a comment counts) separates list elements.
On any failure the list under construction is released before the error
propagates; callers never receive a partial tree.
"""

from __future__ import annotations

import logging
from typing import Iterator, List, NamedTuple, Optional, Union

from sexpfmt.core.errors import (
    AllocationFailure,
    DepthLimitExceeded,
    SExprError,
    UnexpectedToken,
)
from sexpfmt.core.node import Atom, Node, SList, release
from sexpfmt.io.config import DEFAULT_CONFIG, SExprConfig
from .scanner import Scanner, Token, TokenKind

logger = logging.getLogger(__name__)

Buffer = Union[bytes, bytearray, memoryview, str]


class ParseResult(NamedTuple):
    tree: Node
    end: int


def _as_bytes(buffer: Buffer, encoding: str) -> bytes:
    if isinstance(buffer, str):
        return buffer.encode(encoding, "surrogateescape")
    if isinstance(buffer, (bytes, bytearray, memoryview)):
        return bytes(buffer)
    raise TypeError(f"Expected bytes-like or str buffer, got {type(buffer).__name__}")


def atom_from_token(tok: Token) -> Atom:
    raw = tok.raw
    if tok.quoted:
        return Atom(raw[1:-1].replace(b'""', b'"'))
    return Atom(raw)


class Parser:
    def __init__(self, buf: bytes, start: int = 0, config: Optional[SExprConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self.scanner = Scanner(buf, start)

    def parse_value(self) -> Optional[Node]:
        """Skip leading blanks and parse one value; None if only blanks remain."""
        sc = self.scanner
        sc.skip_whitespace()
        tok = sc.peek()
        if tok.kind is TokenKind.EOF:
            return None
        return self._parse_element(depth=0)

    def _parse_element(self, depth: int) -> Node:
        sc = self.scanner
        tok = sc.peek()
        if tok.kind is TokenKind.ATOM:
            sc.next()
            return atom_from_token(tok)
        if tok.kind is TokenKind.LPAREN:
            return self._parse_list(depth + 1)
        raise UnexpectedToken("atom or '('", tok.describe(), tok.start)

    def _parse_list(self, depth: int) -> SList:
        # one Python frame per nesting level; elements are handled inline
        sc = self.scanner
        opener = sc.next()
        assert opener.kind is TokenKind.LPAREN
        if depth > self.config.max_depth:
            raise DepthLimitExceeded(self.config.max_depth, opener.start)

        lst = SList()
        try:
            sc.skip_whitespace()
            if sc.match(TokenKind.RPAREN):
                return lst
            while True:
                tok = sc.peek()
                if tok.kind is TokenKind.ATOM:
                    sc.next()
                    lst.append(atom_from_token(tok))
                elif tok.kind is TokenKind.LPAREN:
                    lst.append(self._parse_list(depth + 1))
                else:
                    raise UnexpectedToken("atom or '('", tok.describe(), tok.start)
                has_space = sc.skip_whitespace()
                if sc.match(TokenKind.RPAREN):
                    return lst
                if not has_space:
                    tok = sc.peek()
                    raise UnexpectedToken("whitespace or ')'", tok.describe(), tok.start)
        except Exception:
            release(lst)
            raise


def _parse_at(buf: bytes, start: int, config: SExprConfig) -> Optional[ParseResult]:
    if not 0 <= start <= len(buf):
        raise ValueError(f"start offset {start} outside buffer of length {len(buf)}")
    parser = Parser(buf, start, config)
    try:
        tree = parser.parse_value()
    except SExprError as e:
        logger.debug(f"Parse failed starting at offset {start}: {e}")
        raise
    except MemoryError as exc:
        logger.debug(f"Out of memory while parsing from offset {start}")
        raise AllocationFailure("Out of memory while building tree", parser.scanner.offset) from exc
    except RecursionError as exc:
        # only reachable when max_depth is configured above the interpreter limit
        raise DepthLimitExceeded(config.max_depth, parser.scanner.offset) from exc
    if tree is None:
        return None
    return ParseResult(tree, parser.scanner.skip_blank())


def parse(buffer: Buffer, start: int = 0, *, config: Optional[SExprConfig] = None) -> Optional[ParseResult]:
    """
    Parse one value from `buffer[start:]`.

    Returns ParseResult(tree, end), where `end` is the byte offset just past
    the value and any whitespace/comments after it, or None when nothing but
    whitespace/comments remains. Raises an SExprError subclass on bad input.
    """
    cfg = config or DEFAULT_CONFIG
    return _parse_at(_as_bytes(buffer, cfg.encoding), start, cfg)


def iter_values(buffer: Buffer, *, config: Optional[SExprConfig] = None) -> Iterator[Node]:
    cfg = config or DEFAULT_CONFIG
    buf = _as_bytes(buffer, cfg.encoding)
    pos = 0
    while True:
        res = _parse_at(buf, pos, cfg)
        if res is None:
            return
        yield res.tree
        pos = res.end


def parse_all(buffer: Buffer, *, config: Optional[SExprConfig] = None) -> List[Node]:
    out: List[Node] = []
    try:
        for node in iter_values(buffer, config=config):
            out.append(node)
    except Exception:
        for node in out:
            release(node)
        raise
    return out


def parse_one(buffer: Buffer, *, config: Optional[SExprConfig] = None) -> Node:
    """Parse a buffer that must hold exactly one value."""
    cfg = config or DEFAULT_CONFIG
    buf = _as_bytes(buffer, cfg.encoding)
    res = _parse_at(buf, 0, cfg)
    if res is None:
        raise UnexpectedToken("a value", "end of input", len(buf))
    if res.end != len(buf):
        release(res.tree)
        raise UnexpectedToken("end of input", "trailing content", res.end)
    return res.tree
