"""
Worksheet strategies for fxba.

Each worksheet maps the variable labels the keypad addresses (N, PMT, NPV,
CF0, ...) onto one register set of the calculator and knows which labels it
can solve. Strategies are looked up by worksheet kind (see
:class:`~fxba.core.kinds.W`) in :data:`~fxba.core.interfaces.WorksheetRegistry`.
"""

from ._base import BaseWorksheet
from .bond import BondWorksheetStrategy
from .cashflow import CashFlowWorksheet
from .date import DateWorksheetStrategy
from .depreciation import DepreciationWorksheetStrategy
from .profit import BreakevenWorksheet, ProfitMarginWorksheet
from .registry import register_defaults
from .statistics import StatisticsWorksheet
from .tvm import AmortizationWorksheet, TVMWorksheet

# Register all default worksheets when module is imported
register_defaults()

__all__ = [
    "BaseWorksheet",
    "TVMWorksheet",
    "AmortizationWorksheet",
    "CashFlowWorksheet",
    "BondWorksheetStrategy",
    "DepreciationWorksheetStrategy",
    "StatisticsWorksheet",
    "DateWorksheetStrategy",
    "BreakevenWorksheet",
    "ProfitMarginWorksheet",
    "register_defaults",
]
