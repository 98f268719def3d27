"""
Worksheet register sets that sit next to the engine inputs.

Engine dataclasses (TVMData, CashFlowList, BondInput, ...) hold what a solver
needs. The classes here add the worksheet-only registers the calculator keeps
around them: interest rates typed into the NPV worksheet, the last computed
outputs, the depreciation year being viewed, and so on.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from fxba.core.config import DEFAULT_DATE_1
from fxba.engines.bond import BondInput
from fxba.engines.depreciation import DepreciationInput, DepreciationMethod


@dataclass
class AmortizationData:
    """P1..P2 range and the BAL/PRN/INT outputs for it."""

    p1: int = 1
    p2: int = 1
    balance: float = 0.0
    principal: float = 0.0
    interest: float = 0.0


@dataclass
class CashFlowRates:
    """
    NPV worksheet registers.

    Attributes:
        rate: I, discount (and MIRR finance) rate in percent per period
        reinvest_rate: RI, MIRR reinvestment rate in percent per period
    """

    rate: float = 0.0
    reinvest_rate: float = 0.0
    npv: float = 0.0
    irr: float = 0.0
    nfv: float = 0.0
    payback: float = 0.0
    discounted_payback: float = 0.0
    mirr: float = 0.0


def _default_bond() -> BondInput:
    return BondInput(
        settlement=DEFAULT_DATE_1,
        maturity=20340101,
        coupon_rate=0.0,
    )


@dataclass
class BondWorksheet:
    """Bond terms plus the price/yield pair and derived outputs."""

    terms: BondInput = field(default_factory=_default_bond)
    price: float = 0.0
    yield_: float = 0.0
    accrued_interest: float = 0.0
    dirty_price: float = 0.0
    duration: float = 0.0
    modified_duration: float = 0.0


@dataclass
class DepreciationWorksheet:
    """Asset, method and the year being viewed, with that year's outputs."""

    asset: DepreciationInput = field(
        default_factory=lambda: DepreciationInput(cost=0.0, salvage=0.0, life=0.0)
    )
    method: DepreciationMethod = DepreciationMethod.SL
    year: int = 1
    depreciation: float = 0.0
    book_value: float = 0.0
    remaining: float = 0.0


@dataclass
class StatRegisters:
    """Pending inputs for the statistics worksheet and prediction."""

    x_pred: float = 0.0
    y_pred: float = 0.0
