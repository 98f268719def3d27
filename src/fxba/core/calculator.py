"""
The Calculator aggregate: every register set plus input and state fields.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from fxba.engines.cashflow import CashFlowList
from fxba.engines.daycount import DateWorksheet
from fxba.engines.profit import BreakevenData, ProfitMarginData
from fxba.engines.statistics import StatData
from fxba.engines.tvm import TVMData

from .errors import ErrorKind
from .features import CalculatorModel
from .kinds import W
from .memory import MemoryRegisters
from .registers import (
    AmortizationData,
    BondWorksheet,
    CashFlowRates,
    DepreciationWorksheet,
    StatRegisters,
)
from .utils import format_number, parse_display


class AppState(Enum):
    INPUT = "input"
    COMPUTE = "compute"
    RESULT = "result"
    ERROR = "error"
    WAIT_STO = "wait_sto"
    WAIT_RCL = "wait_rcl"


@dataclass
class Calculator:
    """
    Aggregate calculator state, owned by the shell.

    The core never keeps a reference to a Calculator between calls: every
    state-machine function takes it as an argument, mutates it and returns.

    Attributes:
        model: Standard or Professional, gates Pro-only features
        display: Input buffer without sign (or the formatted result/error)
        has_decimal: The buffer contains a decimal point
        is_negative: The value being entered is negative
        state_deadline: STO/RCL expiry in ms, 0 when not armed
        error_code: Kind of the current error, None outside ERROR
        worksheet: Active worksheet kind (see :class:`~fxba.core.kinds.W`)
        variable_index: Cursor position within the worksheet's variables
        display_decimals: Fixed decimal places, -1 for floating
    """

    model: CalculatorModel = CalculatorModel.STANDARD
    tvm: TVMData = field(default_factory=TVMData)
    amortization: AmortizationData = field(default_factory=AmortizationData)
    cashflow: CashFlowList = field(default_factory=CashFlowList)
    cashflow_rates: CashFlowRates = field(default_factory=CashFlowRates)
    bond: BondWorksheet = field(default_factory=BondWorksheet)
    depreciation: DepreciationWorksheet = field(default_factory=DepreciationWorksheet)
    statistics: StatData = field(default_factory=StatData)
    stat_registers: StatRegisters = field(default_factory=StatRegisters)
    breakeven: BreakevenData = field(default_factory=BreakevenData)
    profit_margin: ProfitMarginData = field(default_factory=ProfitMarginData)
    date: DateWorksheet = field(default_factory=DateWorksheet)
    memory: MemoryRegisters = field(default_factory=MemoryRegisters)

    state: AppState = AppState.INPUT
    display: str = ""
    has_decimal: bool = False
    is_negative: bool = False
    state_deadline: int = 0
    error_code: ErrorKind | None = None
    error_message: str = ""
    worksheet: str = W.TVM
    variable_index: int = 0
    display_decimals: int = -1

    @property
    def input_value(self) -> float:
        """Numeric value of the buffer, 0.0 when empty."""
        if not self.display:
            return 0.0
        value = parse_display(self.display)
        return -value if self.is_negative else value

    @property
    def display_text(self) -> str:
        """What the shell should show on the main line."""
        if self.state is AppState.ERROR:
            return self.display
        if not self.display:
            return "-0" if self.is_negative else "0"
        return f"-{self.display}" if self.is_negative else self.display

    def clear_input(self) -> None:
        self.display = ""
        self.has_decimal = False
        self.is_negative = False

    def show_value(self, value: float) -> None:
        """Load a value into the buffer as the displayed number."""
        text = format_number(abs(value), self.display_decimals)
        self.display = text
        self.is_negative = value < 0
        self.has_decimal = "." in text

    def set_display_decimals(self, decimals: int) -> None:
        """Fix the number of decimals (0-9) or -1 for floating; others ignored."""
        if -1 <= decimals <= 9:
            self.display_decimals = decimals

    def reset_tvm(self) -> None:
        """Zero N, I/Y, PV, PMT and FV; P/Y, C/Y and BGN/END are kept."""
        for var in ("N", "I/Y", "PV", "PMT", "FV"):
            self.tvm.set(var, 0.0)
        self.clear_input()
        self.state = AppState.INPUT
