"""
Interface protocols for fxba.
Defines the contracts that shells and worksheet strategies must satisfy.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from .events import KeyEvent
from .features import Feature

if TYPE_CHECKING:
    # Only imported for type checking to avoid runtime cycles
    from .calculator import Calculator


@runtime_checkable
class ICalculatorShell(Protocol):
    """
    Contract for the I/O shell that drives the core.
    Responsibilities: decode keys, keep time, and draw the calculator.
    """

    def get_key(self) -> KeyEvent | None:
        """Non-blocking poll; None when no key is pending."""
        ...

    def wait_key(self) -> KeyEvent:
        """Block until a key is available."""
        ...

    def now_ms(self) -> int:
        """Monotonic milliseconds."""
        ...

    def sleep_ms(self, ms: int) -> None: ...

    def render(self, calc: Calculator) -> None:
        """Draw the calculator after each event. The core never renders."""
        ...


@runtime_checkable
class IWorksheet(Protocol):
    """
    Contract for a worksheet strategy.
    Responsibilities: map variable labels onto one register set, and solve
    the labels that can be computed.
    """

    kind: str
    # Feature gating the whole worksheet, None when always available
    feature: Feature | None

    def variables(self, calc: Calculator) -> list[str]:
        """Labels in cursor order (may depend on state, e.g. cash-flow groups)."""
        ...

    def recall(self, calc: Calculator, var: str) -> float: ...

    def is_storable(self, calc: Calculator, var: str) -> bool:
        """Whether a displayed value may be written into ``var``."""
        ...

    def store(self, calc: Calculator, var: str, value: float) -> None:
        """Write an entered value. May raise CalculatorError (e.g. capacity)."""
        ...

    def compute(self, calc: Calculator, var: str) -> float:
        """
        Solve ``var`` without mutating ``calc``.

        Raises:
            CalculatorError: On any solver failure
        """
        ...

    def record(self, calc: Calculator, var: str, value: float) -> None:
        """Write a computed value (and any outputs derived with it)."""
        ...

    def cycle_setting(self, calc: Calculator) -> None:
        """Advance the worksheet's mode setting (BGN/END, method, ...)."""
        ...

    def reset(self, calc: Calculator) -> None:
        """Clear the worksheet's registers."""
        ...


# Kind -> worksheet strategy, filled by fxba.worksheets.register_defaults()
WorksheetRegistry: dict[str, IWorksheet] = {}
