"""Test error reporting and logging around parse failures."""
import logging

import pytest
from sexpfmt import parse, parse_all, SExprError
from sexpfmt.core.errors import (
    AllocationFailure,
    PushbackViolation,
    UnexpectedToken,
    UnterminatedQuote,
)
from sexpfmt.syntax import parser as parser_mod


def test_parse_failure_logs_debug(caplog):
    with caplog.at_level(logging.DEBUG, logger="sexpfmt.syntax.parser"):
        with pytest.raises(UnexpectedToken):
            parse(b"(a b")

    assert any(
        record.levelname == "DEBUG" and "offset 0" in record.message
        for record in caplog.records
    )


def test_successful_parse_logs_nothing(caplog):
    with caplog.at_level(logging.DEBUG, logger="sexpfmt.syntax.parser"):
        parse(b"(a b)")
    assert not caplog.records


def test_logging_infrastructure_exists():
    from sexpfmt.syntax import parser
    from sexpfmt.io import loader

    assert isinstance(parser.logger, logging.Logger)
    assert isinstance(loader.logger, logging.Logger)


def test_error_messages_carry_offset():
    with pytest.raises(UnterminatedQuote) as ei:
        parse(b'(ok "nope)')
    assert ei.value.offset == 4
    assert "offset 4" in str(ei.value)


def test_memory_error_becomes_allocation_failure(monkeypatch):
    def boom(tok):
        raise MemoryError

    monkeypatch.setattr(parser_mod, "atom_from_token", boom)
    with pytest.raises(AllocationFailure) as ei:
        parse(b"(a)")
    assert isinstance(ei.value, SExprError)
    assert isinstance(ei.value.__cause__, MemoryError)


def test_pushback_violation_is_not_a_parse_error():
    assert not issubclass(PushbackViolation, SExprError)
    assert issubclass(PushbackViolation, AssertionError)


def test_parse_all_failure_returns_nothing():
    with pytest.raises(SExprError):
        parse_all(b"(a) (b) (c")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
