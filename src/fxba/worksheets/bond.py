"""
Bond worksheet.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fxba.core.errors import InvalidInputError
from fxba.core.features import Feature
from fxba.core.kinds import W
from fxba.core.registers import BondWorksheet
from fxba.engines import bond
from fxba.engines.daycount import format_display_date, parse_display_date

from ._base import BaseWorksheet

if TYPE_CHECKING:
    from fxba.core.calculator import Calculator

_DATES = {"SDT": "settlement", "RDT": "maturity"}
_TERMS = {"CPN": "coupon_rate", "RV": "redemption", "FRQ": "frequency"}


class BondWorksheetStrategy(BaseWorksheet):
    """
    SDT/RDT are entered in the display date format of the date worksheet.
    SET cycles the day-count convention.
    """

    kind = W.BOND
    FIELDS = {
        "SDT": "settlement",
        "CPN": "coupon_rate",
        "RDT": "maturity",
        "RV": "redemption",
        "FRQ": "frequency",
        "YLD": "yield_",
        "PRI": "price",
        "AI": "accrued_interest",
        "DUR": "duration",
        "MOD": "modified_duration",
    }
    COMPUTED = frozenset({"YLD", "PRI", "AI", "DUR", "MOD"})
    FEATURES = {
        "YLD": Feature.BOND_YIELD,
        "PRI": Feature.BOND_PRICE,
        "AI": Feature.BOND_ACCRUED,
        "DUR": Feature.BOND_DURATION,
        "MOD": Feature.BOND_MODIFIED_DURATION,
    }

    def target(self, calc: Calculator) -> BondWorksheet:
        return calc.bond

    def recall(self, calc: Calculator, var: str) -> float:
        terms = calc.bond.terms
        if var in _DATES:
            return format_display_date(getattr(terms, _DATES[var]), calc.date.fmt)
        if var in _TERMS:
            return float(getattr(terms, _TERMS[var]))
        return super().recall(calc, var)

    def store(self, calc: Calculator, var: str, value: float) -> None:
        terms = calc.bond.terms
        if var in _DATES:
            setattr(terms, _DATES[var], parse_display_date(value, calc.date.fmt))
        elif var == "FRQ":
            terms.frequency = int(value)
        elif var in _TERMS:
            setattr(terms, _TERMS[var], float(value))
        else:
            super().store(calc, var, value)

    def _compute(self, calc: Calculator, var: str) -> float:
        ws = calc.bond
        if var == "PRI":
            return bond.price_from_yield(ws.terms, ws.yield_)
        if var == "YLD":
            if ws.price <= 0:
                raise InvalidInputError("price must be positive to solve for yield")
            return bond.yield_from_price(ws.terms, ws.price)
        if var == "AI":
            return bond.accrued_interest(ws.terms)
        if var == "DUR":
            return bond.macaulay_duration(ws.terms, ws.yield_)
        return bond.modified_duration(ws.terms, ws.yield_)

    def record(self, calc: Calculator, var: str, value: float) -> None:
        ws = calc.bond
        if var not in ("PRI", "YLD"):
            super().record(calc, var, value)
            return
        yield_ = value if var == "YLD" else ws.yield_
        accrued = bond.accrued_interest(ws.terms)
        duration = bond.macaulay_duration(ws.terms, yield_)
        modified = bond.modified_duration(ws.terms, yield_)
        if var == "PRI":
            ws.price = value
        else:
            ws.yield_ = value
        ws.accrued_interest = accrued
        ws.dirty_price = ws.price + accrued
        ws.duration = duration
        ws.modified_duration = modified

    def cycle_setting(self, calc: Calculator) -> None:
        terms = calc.bond.terms
        terms.day_count = terms.day_count.next()

    def reset(self, calc: Calculator) -> None:
        calc.bond = BondWorksheet()
