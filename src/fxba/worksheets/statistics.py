"""
Statistics worksheet: data entry, summary statistics and prediction.
"""

from __future__ import annotations

from fxba.core.calculator import AppState, Calculator
from fxba.core.errors import InvalidInputError
from fxba.core.features import Feature
from fxba.core.kinds import W
from fxba.core.registers import StatRegisters
from fxba.engines.statistics import (
    StatData,
    one_var,
    predict_x,
    predict_y,
    regression,
    two_var,
)

from ._base import BaseWorksheet

_ONE_VAR = {"N": "n", "XBAR": "mean", "SX": "sx", "SIGX": "sigma_x"}
_TWO_VAR = {"YBAR": "mean_y", "SY": "sy", "SIGY": "sigma_y"}
_REGRESSION = {"A": "a", "B": "b", "R": "r"}


class StatisticsWorksheet(BaseWorksheet):
    """
    Storing X appends a point; storing Y attaches a y value to the last point.

    Summary labels are always derived from the data, so they can be recalled
    but not stored. X' and Y' hold the prediction inputs: computing Y' uses
    the stored X' and vice versa.
    """

    kind = W.STATISTICS
    FIELDS = {
        "X": "x",
        "Y": "y",
        **{label: label for label in (*_ONE_VAR, *_TWO_VAR, *_REGRESSION)},
        "X'": "x_pred",
        "Y'": "y_pred",
    }
    COMPUTED = frozenset({*_ONE_VAR, *_TWO_VAR, *_REGRESSION, "X'", "Y'"})
    FEATURES = {
        **{label: Feature.STAT_1VAR for label in _ONE_VAR},
        **{label: Feature.STAT_2VAR for label in _TWO_VAR},
        **{label: Feature.REGRESSION for label in _REGRESSION},
        "X'": Feature.FORECAST,
        "Y'": Feature.FORECAST,
    }

    def target(self, calc: Calculator) -> StatRegisters:
        return calc.stat_registers

    def recall(self, calc: Calculator, var: str) -> float:
        stat = calc.statistics
        if var == "X":
            return stat.x[-1] if stat.x else 0.0
        if var == "Y":
            return stat.y[-1] if stat.y else 0.0
        if var in ("X'", "Y'"):
            return super().recall(calc, var)
        self._field(var)
        return self._summary(stat, var)

    def is_storable(self, calc: Calculator, var: str) -> bool:
        # Points and summaries only take a freshly typed value, never a shown one
        return var in ("X'", "Y'") or calc.state is AppState.INPUT

    def store(self, calc: Calculator, var: str, value: float) -> None:
        stat = calc.statistics
        if var == "X":
            stat.add_x(value)
        elif var == "Y":
            if not stat.x:
                raise InvalidInputError("enter X before Y")
            stat.set_y(len(stat) - 1, value)
        elif var in ("X'", "Y'"):
            super().store(calc, var, value)
        else:
            self._field(var)
            raise InvalidInputError(f"{var} is computed from the data")

    def _summary(self, stat: StatData, var: str) -> float:
        if var in _ONE_VAR:
            return float(getattr(one_var(stat), _ONE_VAR[var]))
        if var in _TWO_VAR:
            return getattr(two_var(stat), _TWO_VAR[var])
        return getattr(regression(stat), _REGRESSION[var])

    def _compute(self, calc: Calculator, var: str) -> float:
        if var == "Y'":
            return predict_y(regression(calc.statistics), calc.stat_registers.x_pred)
        if var == "X'":
            return predict_x(regression(calc.statistics), calc.stat_registers.y_pred)
        return self._summary(calc.statistics, var)

    def record(self, calc: Calculator, var: str, value: float) -> None:
        if var in ("X'", "Y'"):
            super().record(calc, var, value)

    def cycle_setting(self, calc: Calculator) -> None:
        stat = calc.statistics
        stat.regression = stat.regression.next()

    def reset(self, calc: Calculator) -> None:
        calc.statistics.clear()
        calc.stat_registers = StatRegisters()
