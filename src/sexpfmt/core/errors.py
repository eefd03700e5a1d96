from typing import Optional


class SExprError(ValueError):
    """Base class for every recoverable parse/render failure."""

    def __init__(self, message: str, offset: Optional[int] = None):
        self.offset = offset
        if offset is not None:
            message = f"{message} (at offset {offset})"
        super().__init__(message)


class UnterminatedQuote(SExprError):
    pass


class UnexpectedToken(SExprError):
    def __init__(self, expected: str, found: str, offset: Optional[int] = None):
        self.expected = expected
        self.found = found
        super().__init__(f"Expected {expected}, got {found}", offset)


class DepthLimitExceeded(UnexpectedToken):
    def __init__(self, limit: int, offset: Optional[int] = None):
        self.limit = limit
        super().__init__(f"nesting depth <= {limit}", "deeper list", offset)


class AllocationFailure(SExprError):
    pass


class PushbackViolation(AssertionError):
    """Raised when a second token is pushed back before the first is consumed."""
