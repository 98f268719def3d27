"""
Breakeven and profit-margin worksheets (Professional model).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fxba.core.features import Feature
from fxba.core.kinds import W
from fxba.engines.profit import (
    BreakevenData,
    ProfitMarginData,
    breakeven_solve,
    margin_solve,
)

from ._base import BaseWorksheet

if TYPE_CHECKING:
    from fxba.core.calculator import Calculator


class BreakevenWorksheet(BaseWorksheet):
    """Any of FC, VC, P, PFT and Q from the other four."""

    kind = W.BREAKEVEN
    feature = Feature.BREAKEVEN
    FIELDS = {
        "FC": "fixed_cost",
        "VC": "variable_cost",
        "P": "price",
        "PFT": "profit",
        "Q": "quantity",
    }
    COMPUTED = frozenset(FIELDS)

    def target(self, calc: Calculator) -> BreakevenData:
        return calc.breakeven

    def _compute(self, calc: Calculator, var: str) -> float:
        return breakeven_solve(calc.breakeven, var)

    def reset(self, calc: Calculator) -> None:
        calc.breakeven = BreakevenData()


class ProfitMarginWorksheet(BaseWorksheet):
    kind = W.PROFIT_MARGIN
    feature = Feature.PROFIT_MARGIN
    FIELDS = {
        "CST": "cost",
        "SEL": "selling_price",
        "MAR": "margin",
        "MU": "markup",
    }
    COMPUTED = frozenset(FIELDS)

    def target(self, calc: Calculator) -> ProfitMarginData:
        return calc.profit_margin

    def _compute(self, calc: Calculator, var: str) -> float:
        return margin_solve(calc.profit_margin, var)

    def reset(self, calc: Calculator) -> None:
        calc.profit_margin = ProfitMarginData()
