"""Exceptions raised by bezierc2.

Only structural misuse is reported through exceptions. Degenerate geometry
(coincident knots, zero pivots, negative discriminants) propagates as NaN or
inf through the arithmetic instead.
"""


class DimensionMismatchError(ValueError):
    """Raised when an operand's length differs from the expected dimension.

    Args:
        expected (int): The dimension required by the receiver.
        got (int): The dimension that was supplied.
        message (str | None): Optional custom message.
    """

    def __init__(self, expected: int, got: int, message: str | None = None) -> None:
        self.expected = expected
        self.got = got
        if message is None:
            message = f"Dimension mismatch: expected {expected}, got {got}."
        super().__init__(message)


class InvalidSwizzleError(ValueError):
    """Raised for an invalid swizzle name or swizzle assignment."""
