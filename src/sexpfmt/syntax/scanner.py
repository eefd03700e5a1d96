"""
Scanner: byte buffer -> tokens, with exactly one token of pushback.

Comments (`;` to end of line) come out as WHITESPACE tokens, so the parser
never sees them as a separate kind.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from sexpfmt.core.errors import PushbackViolation, UnterminatedQuote

QUOTE = 0x22       # "
LPAREN = 0x28      # (
RPAREN = 0x29      # )
SEMICOLON = 0x3B   # ;

WHITESPACE_BYTES = frozenset(b" \t\r\n")
DELIMITER_BYTES = WHITESPACE_BYTES | {LPAREN, RPAREN}


class TokenKind(Enum):
    WHITESPACE = " "
    LPAREN = "("
    RPAREN = ")"
    ATOM = "atom"
    EOF = "eof"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    start: int
    end: int
    raw: bytes = b""        # source slice, ATOM only
    quoted: bool = False

    def describe(self) -> str:
        if self.kind is TokenKind.ATOM:
            return f"atom {self.raw!r}"
        if self.kind is TokenKind.EOF:
            return "end of input"
        if self.kind is TokenKind.WHITESPACE:
            return "whitespace"
        return f"'{self.kind.value}'"


class Scanner:
    """Pull-style tokenizer over `buf[pos:]`."""

    def __init__(self, buf: bytes, pos: int = 0):
        self.buf = buf
        self.pos = pos
        self.end = len(buf)
        self._token: Optional[Token] = None
        self._putback = False

    # ---- lookahead contract ----

    def next(self) -> Token:
        if self._putback:
            self._putback = False
            return self._token
        self._token = self._scan()
        return self._token

    def putback(self) -> None:
        if self._putback:
            raise PushbackViolation("Only one token may be pushed back at a time")
        if self._token is None:
            raise PushbackViolation("No token to push back")
        self._putback = True

    def peek(self) -> Token:
        tok = self.next()
        self.putback()
        return tok

    def match(self, kind: TokenKind) -> Optional[Token]:
        """Consume and return the next token if it is `kind`, else push it back."""
        tok = self.next()
        if tok.kind is not kind:
            self.putback()
            return None
        return tok

    def skip_whitespace(self) -> bool:
        """Consume whitespace tokens; return True if any were consumed."""
        seen = False
        while self.match(TokenKind.WHITESPACE):
            seen = True
        return seen

    def skip_blank(self) -> int:
        """
        Consume whitespace and comments without scanning whatever follows
        them, so a malformed next value is left for the next parse call.
        Returns the new offset.
        """
        if self._putback:
            if self._token.kind is not TokenKind.WHITESPACE:
                return self._token.start
            self._putback = False
        while self.pos < self.end and (
            self.buf[self.pos] in WHITESPACE_BYTES or self.buf[self.pos] == SEMICOLON
        ):
            self._token = self._scan()
        return self.pos

    @property
    def offset(self) -> int:
        """Offset of the first byte not yet handed out (a pushed-back token counts as unconsumed)."""
        if self._putback:
            return self._token.start
        return self.pos

    # ---- token recognisers ----

    def _scan(self) -> Token:
        if self.pos >= self.end:
            return Token(TokenKind.EOF, self.end, self.end)

        ch = self.buf[self.pos]
        if ch == QUOTE:
            return self._scan_quoted()
        if ch == LPAREN or ch == RPAREN:
            start = self.pos
            self.pos += 1
            return Token(TokenKind.LPAREN if ch == LPAREN else TokenKind.RPAREN, start, self.pos)
        if ch == SEMICOLON:
            return self._scan_comment()
        if ch in WHITESPACE_BYTES:
            return self._scan_whitespace()
        return self._scan_unquoted()

    def _scan_quoted(self) -> Token:
        buf, start, end = self.buf, self.pos, self.end
        p = start + 1
        while p < end:
            if buf[p] == QUOTE:
                if p + 1 < end and buf[p + 1] == QUOTE:
                    p += 2
                    continue
                break
            p += 1
        if p >= end:
            raise UnterminatedQuote("Unterminated quoted atom", start)
        p += 1
        self.pos = p
        return Token(TokenKind.ATOM, start, p, bytes(buf[start:p]), quoted=True)

    def _scan_unquoted(self) -> Token:
        buf, start, end = self.buf, self.pos, self.end
        p = start
        while p < end and buf[p] not in DELIMITER_BYTES:
            p += 1
        self.pos = p
        return Token(TokenKind.ATOM, start, p, bytes(buf[start:p]))

    def _scan_whitespace(self) -> Token:
        buf, start, end = self.buf, self.pos, self.end
        p = start
        while p < end and buf[p] in WHITESPACE_BYTES:
            p += 1
        self.pos = p
        return Token(TokenKind.WHITESPACE, start, p)

    def _scan_comment(self) -> Token:
        start = self.pos
        nl = self.buf.find(b"\n", start)
        self.pos = self.end if nl < 0 else nl + 1
        return Token(TokenKind.WHITESPACE, start, self.pos)
