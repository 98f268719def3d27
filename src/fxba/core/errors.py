"""
Error classes for fxba.

Every solver reports failure by raising one of the exceptions below. Each
exception carries an :class:`ErrorKind`, which holds the numeric error code and
the short message shown on the calculator display. The state machine is the
only place that turns an exception into the ``ERROR`` state.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """Error taxonomy with numeric code and short display message."""

    NO_SOLUTION = (1, "No Solution")
    OVERFLOW = (2, "Overflow")
    ITERATION = (3, "No Converge")
    INVALID_INPUT = (4, "Bad Input")
    MULTIPLE_IRR = (5, "Multi IRR")
    CAPACITY = (8, "Memory Full")

    def __init__(self, code: int, message: str):
        self.code = code
        self.message = message

    @classmethod
    def from_code(cls, code: int) -> ErrorKind | None:
        """Look up a kind by its numeric code, None if unknown."""
        for kind in cls:
            if kind.code == code:
                return kind
        return None


GENERIC_ERROR_MESSAGE = "Error"


def error_message(kind: ErrorKind | None) -> str:
    """Short display string for an error kind."""
    if kind is None:
        return GENERIC_ERROR_MESSAGE
    return kind.message


class CalculatorError(Exception):
    """
    Base class for all solver and worksheet errors.

    **Common Causes:**
    - A solver precondition failed (no sign change for IRR, zero life)
    - A Newton-Raphson iteration exhausted its budget
    - A fixed-capacity container is full

    **Example Usage:**
        ```python
        from fxba.core.errors import CalculatorError
        from fxba.engines.tvm import TVMData, solve

        tvm = TVMData(n=10, pv=0.0, pmt=0.0, fv=0.0)
        try:
            solve(tvm, "I/Y")
        except CalculatorError as e:
            print(e.kind.code, e.kind.message)  # 4 Bad Input
        ```
    """

    kind: ErrorKind = ErrorKind.INVALID_INPUT

    def __init__(self, message: str | None = None):
        super().__init__(message or self.kind.message)

    @property
    def code(self) -> int:
        return self.kind.code


class NoSolutionError(CalculatorError):
    """No solution exists (no sign change, zero contribution margin, ...)."""

    kind = ErrorKind.NO_SOLUTION


class NumericOverflowError(CalculatorError):
    """Result is not finite or overflowed a float."""

    kind = ErrorKind.OVERFLOW


class IterationLimitError(CalculatorError):
    """Newton-Raphson exhausted its iteration budget."""

    kind = ErrorKind.ITERATION


class InvalidInputError(CalculatorError):
    """Structurally impossible request (zero flows, zero life, all-zero TVM)."""

    kind = ErrorKind.INVALID_INPUT


class MultipleIRRError(CalculatorError):
    """IRR did not converge, typically a sign of several roots."""

    kind = ErrorKind.MULTIPLE_IRR


class CapacityError(CalculatorError):
    """
    Insert into a full fixed-capacity container.

    Attributes:
        capacity: The container's maximum number of entries
    """

    kind = ErrorKind.CAPACITY

    def __init__(self, capacity: int, what: str = "entries"):
        self.capacity = capacity
        super().__init__(f"{what} full ({capacity} max)")
