"""
Pure solver functions, one module per calculator worksheet.

Engines take explicit inputs, return values, and raise a
:class:`~fxba.core.errors.CalculatorError` subclass on failure. They never
touch a :class:`~fxba.core.calculator.Calculator`.
"""

from .bond import BondInput, BondResult, bond_calculate
from .cashflow import CashFlow, CashFlowList
from .daycount import DateWorksheet, DayCount
from .depreciation import DepreciationInput, DepreciationMethod, DepreciationResult
from .profit import BreakevenData, ProfitMarginData
from .statistics import RegressionType, StatData
from .tvm import PaymentMode, TVMData

__all__ = [
    "BondInput",
    "BondResult",
    "BreakevenData",
    "CashFlow",
    "CashFlowList",
    "DateWorksheet",
    "DayCount",
    "DepreciationInput",
    "DepreciationMethod",
    "DepreciationResult",
    "PaymentMode",
    "ProfitMarginData",
    "RegressionType",
    "StatData",
    "TVMData",
    "bond_calculate",
]
