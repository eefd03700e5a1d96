from sexpfmt.core.errors import (
    AllocationFailure,
    DepthLimitExceeded,
    PushbackViolation,
    SExprError,
    UnexpectedToken,
    UnterminatedQuote,
)
from sexpfmt.core.node import Atom, Node, SList, append, as_atom, as_list, new_list, release, walk
from sexpfmt.io.config import SExprConfig
from sexpfmt.io.loader import dump_file, load_file
from sexpfmt.syntax.parser import ParseResult, iter_values, parse, parse_all, parse_one
from sexpfmt.syntax.serializer import needs_quote, render, render_text

__all__ = [
    "Atom",
    "SList",
    "Node",
    "new_list",
    "append",
    "release",
    "as_atom",
    "as_list",
    "walk",
    "parse",
    "parse_all",
    "parse_one",
    "iter_values",
    "ParseResult",
    "render",
    "render_text",
    "needs_quote",
    "load_file",
    "dump_file",
    "SExprConfig",
    "SExprError",
    "UnterminatedQuote",
    "UnexpectedToken",
    "DepthLimitExceeded",
    "AllocationFailure",
    "PushbackViolation",
]
