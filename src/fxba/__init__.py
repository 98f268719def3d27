"""
fxba - Financial calculator core

fxba is the engine of a BA II Plus style financial calculator: pure solver
functions for each worksheet, a registry of worksheet strategies that map
keypad labels onto registers, and a small state machine that turns key events
into stores, recalls and computations. Rendering and key decoding belong to
a shell that implements :class:`~fxba.core.interfaces.ICalculatorShell`.

Key Features:
- **TVM**: N, I/Y, PV, PMT, FV with P/Y, C/Y and BGN/END, plus amortization
- **Cash flows**: NPV, IRR and the Professional NFV, payback, MIRR
- **Bonds**: price, yield, accrued interest and duration
- **Depreciation**: SL, SYD, DB, DB-SL and the French methods
- **Statistics**: 1/2-variable statistics and four regression families
- **Business**: breakeven and profit margin (Professional model)

Quick Start:
    ```python
    from fxba import Calculator, feed, parse_keys

    calc = feed(Calculator(), parse_keys("12 P/Y 360 N 5.4 I/Y 250000 PV CPT PMT"))
    print(calc.tvm.pmt)  # about -1403.83
    ```

Extending the System:
    Register a strategy implementing ``IWorksheet`` under a new kind in
    ``WorksheetRegistry`` and select it with a WORKSHEET key.
"""

# Version information
__version__ = "0.1.0"
__description__ = "Financial calculator core"

# Register the default worksheets
import fxba.worksheets

from .core import (
    AppState,
    Calculator,
    CalculatorError,
    CalculatorModel,
    ErrorKind,
    ICalculatorShell,
    IWorksheet,
    KeyAction,
    KeyEvent,
    ScriptedShell,
    W,
    WorksheetRegistry,
    feed,
    handle_event,
    parse_keys,
    run_event_loop,
)
from .scenarios import run_scenarios

__all__ = [
    # Calculator
    "AppState",
    "Calculator",
    "CalculatorModel",
    "W",
    # Events and loop
    "KeyAction",
    "KeyEvent",
    "ScriptedShell",
    "feed",
    "handle_event",
    "parse_keys",
    "run_event_loop",
    # Errors
    "CalculatorError",
    "ErrorKind",
    # Interfaces and registry
    "ICalculatorShell",
    "IWorksheet",
    "WorksheetRegistry",
    # Scenarios
    "run_scenarios",
]
