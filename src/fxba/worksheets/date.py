"""
Date worksheet: days between dates, or a date from a day count.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fxba.core.features import Feature
from fxba.core.kinds import W
from fxba.engines.daycount import (
    DateWorksheet,
    format_display_date,
    parse_display_date,
)

from ._base import BaseWorksheet

if TYPE_CHECKING:
    from fxba.core.calculator import Calculator

_DATE_FIELDS = ("DT1", "DT2")


class DateWorksheetStrategy(BaseWorksheet):
    """
    DT1 and DT2 are display-encoded dates (MM.DDYYYY or DD.MMYYYY). Any of
    the three labels can be computed from the other two. SET toggles
    ACT and 30/360; adding days always uses the actual calendar.
    """

    kind = W.DATE
    FIELDS = {"DT1": "dt1", "DT2": "dt2", "DBD": "dbd"}
    COMPUTED = frozenset(FIELDS)
    FEATURES = {label: Feature.DATE for label in FIELDS}

    def target(self, calc: Calculator) -> DateWorksheet:
        return calc.date

    def recall(self, calc: Calculator, var: str) -> float:
        if var in _DATE_FIELDS:
            return format_display_date(getattr(calc.date, self._field(var)), calc.date.fmt)
        return super().recall(calc, var)

    def store(self, calc: Calculator, var: str, value: float) -> None:
        ws = calc.date
        if var in _DATE_FIELDS:
            setattr(ws, self._field(var), parse_display_date(value, ws.fmt))
        else:
            setattr(ws, self._field(var), int(round(value)))

    def _compute(self, calc: Calculator, var: str) -> float:
        ws = calc.date
        if var == "DBD":
            return float(ws.compute_dbd())
        if var == "DT1":
            return format_display_date(ws.compute_dt1(), ws.fmt)
        return format_display_date(ws.compute_dt2(), ws.fmt)

    def cycle_setting(self, calc: Calculator) -> None:
        calc.date.act = not calc.date.act

    def reset(self, calc: Calculator) -> None:
        calc.date = DateWorksheet(fmt=calc.date.fmt)
