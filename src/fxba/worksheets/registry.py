"""
Worksheet registry setup for fxba.
"""

from fxba.core.interfaces import WorksheetRegistry
from fxba.core.kinds import W

from .bond import BondWorksheetStrategy
from .cashflow import CashFlowWorksheet
from .date import DateWorksheetStrategy
from .depreciation import DepreciationWorksheetStrategy
from .profit import BreakevenWorksheet, ProfitMarginWorksheet
from .statistics import StatisticsWorksheet
from .tvm import AmortizationWorksheet, TVMWorksheet


def register_defaults():
    """
    Register the default worksheet strategies in the global registry.

    Registered Worksheets:
        Financial:
            - 'tvm': N, I/Y, PV, PMT, FV with P/Y and C/Y
            - 'amort': amortization over the TVM loan
            - 'cashflow': uneven cash flows, NPV/IRR and the Pro extensions

        Securities and assets:
            - 'bond': price, yield, accrued interest, duration
            - 'depreciation': six depreciation methods

        Analysis:
            - 'statistics': 1/2-variable statistics and regression
            - 'date': days between dates

        Business (Professional model):
            - 'breakeven', 'profit_margin'

    Note:
        This function is called when :mod:`fxba.worksheets` is imported.
    """
    WorksheetRegistry[W.TVM] = TVMWorksheet()
    WorksheetRegistry[W.AMORTIZATION] = AmortizationWorksheet()
    WorksheetRegistry[W.CASHFLOW] = CashFlowWorksheet()

    WorksheetRegistry[W.BOND] = BondWorksheetStrategy()
    WorksheetRegistry[W.DEPRECIATION] = DepreciationWorksheetStrategy()

    WorksheetRegistry[W.STATISTICS] = StatisticsWorksheet()
    WorksheetRegistry[W.DATE] = DateWorksheetStrategy()

    WorksheetRegistry[W.BREAKEVEN] = BreakevenWorksheet()
    WorksheetRegistry[W.PROFIT_MARGIN] = ProfitMarginWorksheet()
