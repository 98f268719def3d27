"""
Feature availability by calculator model (Standard vs Professional).
"""

from __future__ import annotations

from enum import Enum


class CalculatorModel(Enum):
    STANDARD = "standard"
    PROFESSIONAL = "professional"

    @property
    def display_name(self) -> str:
        if self is CalculatorModel.PROFESSIONAL:
            return "BA II Plus Professional"
        return "BA II Plus"

    @property
    def indicator(self) -> str:
        return "PRO" if self is CalculatorModel.PROFESSIONAL else "STD"

    def toggled(self) -> CalculatorModel:
        if self is CalculatorModel.PROFESSIONAL:
            return CalculatorModel.STANDARD
        return CalculatorModel.PROFESSIONAL


class Feature(Enum):
    # Shared
    TVM = "tvm"
    AMORTIZATION = "amort"
    NPV = "npv"
    IRR = "irr"
    BOND_PRICE = "bond_price"
    BOND_YIELD = "bond_yield"
    BOND_ACCRUED = "bond_accrued"
    DEPR_SL = "depr_sl"
    DEPR_SYD = "depr_syd"
    DEPR_SLF = "depr_slf"
    DEPR_DBF = "depr_dbf"
    STAT_1VAR = "stat_1var"
    STAT_2VAR = "stat_2var"
    REGRESSION = "regression"
    DATE = "date"
    MEMORY = "memory"
    # Professional only
    NFV = "nfv"
    PAYBACK = "payback"
    DISCOUNTED_PAYBACK = "discounted_payback"
    MIRR = "mirr"
    BOND_DURATION = "bond_duration"
    BOND_MODIFIED_DURATION = "bond_modified_duration"
    DEPR_DB = "depr_db"
    DEPR_DBSL = "depr_dbsl"
    FORECAST = "forecast"
    BREAKEVEN = "breakeven"
    PROFIT_MARGIN = "profit_margin"
    MEMORY_PLUS = "memory_plus"


PRO_ONLY: frozenset[Feature] = frozenset(
    {
        Feature.NFV,
        Feature.PAYBACK,
        Feature.DISCOUNTED_PAYBACK,
        Feature.MIRR,
        Feature.BOND_DURATION,
        Feature.BOND_MODIFIED_DURATION,
        Feature.DEPR_DB,
        Feature.DEPR_DBSL,
        Feature.FORECAST,
        Feature.BREAKEVEN,
        Feature.PROFIT_MARGIN,
        Feature.MEMORY_PLUS,
    }
)


def is_available(model: CalculatorModel, feature: Feature) -> bool:
    """Whether ``feature`` can be used on ``model``."""
    if model is CalculatorModel.PROFESSIONAL:
        return True
    return feature not in PRO_ONLY


def available_features(model: CalculatorModel) -> list[Feature]:
    return [f for f in Feature if is_available(model, f)]
