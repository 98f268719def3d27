"""
Breakeven, profit margin and percentage helpers.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from fxba.core.errors import InvalidInputError, NoSolutionError


@dataclass
class BreakevenData:
    """
    Breakeven worksheet registers.

    Attributes:
        fixed_cost: FC
        variable_cost: VC, per unit
        price: P, per unit
        profit: PFT
        quantity: Q
    """

    fixed_cost: float = 0.0
    variable_cost: float = 0.0
    price: float = 0.0
    profit: float = 0.0
    quantity: float = 0.0

    @property
    def contribution(self) -> float:
        return self.price - self.variable_cost

    @property
    def revenue(self) -> float:
        return self.quantity * self.price


def breakeven_quantity(be: BreakevenData, target_profit: float = 0.0) -> float:
    """
    Units needed to reach ``target_profit`` (0 for the breakeven point).

    Raises:
        NoSolutionError: If the contribution margin is not positive
    """
    if be.contribution <= 0:
        raise NoSolutionError("price must exceed variable cost")
    return (be.fixed_cost + target_profit) / be.contribution


def breakeven_profit(be: BreakevenData) -> float:
    return be.quantity * be.contribution - be.fixed_cost


def breakeven_solve(be: BreakevenData, var: str) -> float:
    """
    Solve the breakeven equation ``PFT = Q*(P - VC) - FC`` for one register.

    Raises:
        NoSolutionError: When solving for Q with a non-positive contribution,
            or for P/VC with Q = 0
        InvalidInputError: For an unknown register label
    """
    if var == "Q":
        return breakeven_quantity(be, be.profit)
    if var == "PFT":
        return breakeven_profit(be)
    if var == "FC":
        return be.quantity * be.contribution - be.profit
    if var in ("P", "VC"):
        if be.quantity == 0:
            raise NoSolutionError("quantity is zero")
        per_unit = (be.fixed_cost + be.profit) / be.quantity
        if var == "P":
            return be.variable_cost + per_unit
        return be.price - per_unit
    raise InvalidInputError(f"unknown breakeven variable {var!r}")


@dataclass
class ProfitMarginData:
    cost: float = 0.0
    selling_price: float = 0.0
    margin: float = 0.0  # percent of selling price
    markup: float = 0.0  # percent of cost


def margin(cost: float, selling_price: float) -> float:
    """Gross margin in percent of the selling price; 0 when the price is 0."""
    if selling_price == 0:
        return 0.0
    return (selling_price - cost) / selling_price * 100.0


def markup(cost: float, selling_price: float) -> float:
    """Markup in percent of cost; 0 when the cost is 0."""
    if cost == 0:
        return 0.0
    return (selling_price - cost) / cost * 100.0


def sell_from_margin(cost: float, margin_pct: float) -> float:
    if margin_pct >= 100.0:
        raise NoSolutionError("margin must be below 100%")
    return cost / (1.0 - margin_pct / 100.0)


def sell_from_markup(cost: float, markup_pct: float) -> float:
    return cost * (1.0 + markup_pct / 100.0)


def cost_from_margin(selling_price: float, margin_pct: float) -> float:
    return selling_price * (1.0 - margin_pct / 100.0)


def cost_from_markup(selling_price: float, markup_pct: float) -> float:
    if markup_pct <= -100.0:
        raise NoSolutionError("markup must be above -100%")
    return selling_price / (1.0 + markup_pct / 100.0)


def margin_solve(pm: ProfitMarginData, var: str) -> float:
    """Solve the profit-margin worksheet for CST, SEL, MAR or MU."""
    if var == "MAR":
        return margin(pm.cost, pm.selling_price)
    if var == "MU":
        return markup(pm.cost, pm.selling_price)
    if var == "SEL":
        return sell_from_margin(pm.cost, pm.margin)
    if var == "CST":
        return cost_from_margin(pm.selling_price, pm.margin)
    raise InvalidInputError(f"unknown profit-margin variable {var!r}")


# ---------------------------------------------------------------------------
# Percentages
# ---------------------------------------------------------------------------


def percent_change(old: float, new: float) -> float:
    """``(new - old) / old`` in percent; +/-inf from zero, 0 if both are zero."""
    if old == 0:
        if new == 0:
            return 0.0
        return math.inf if new > 0 else -math.inf
    return (new - old) / old * 100.0


def percent_difference(a: float, b: float) -> float:
    """``|a - b|`` relative to the mean of a and b, in percent."""
    mean = (a + b) / 2.0
    if mean == 0:
        return 0.0
    return abs(a - b) / mean * 100.0


def percent_of_total(part: float, total: float) -> float:
    if total == 0:
        return 0.0
    return part / total * 100.0


def value_from_percent(total: float, percent: float) -> float:
    return total * percent / 100.0


def add_percent(value: float, percent: float) -> float:
    return value * (1.0 + percent / 100.0)


def subtract_percent(value: float, percent: float) -> float:
    return value * (1.0 - percent / 100.0)
