"""
Depreciation worksheet.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fxba.core.features import Feature, is_available
from fxba.core.kinds import W
from fxba.core.registers import DepreciationWorksheet
from fxba.engines.depreciation import DepreciationMethod, depreciate

from ._base import BaseWorksheet

if TYPE_CHECKING:
    from fxba.core.calculator import Calculator

METHOD_FEATURES = {
    DepreciationMethod.SL: Feature.DEPR_SL,
    DepreciationMethod.SYD: Feature.DEPR_SYD,
    DepreciationMethod.DB: Feature.DEPR_DB,
    DepreciationMethod.DB_SL: Feature.DEPR_DBSL,
    DepreciationMethod.SLF: Feature.DEPR_SLF,
    DepreciationMethod.DBF: Feature.DEPR_DBF,
}

_ASSET = {
    "LIF": "life",
    "M01": "start_month",
    "CST": "cost",
    "SAL": "salvage",
    "DB": "db_rate",
}


class DepreciationWorksheetStrategy(BaseWorksheet):
    """
    LIF, M01, CST, SAL and DB describe the asset; YR selects the year whose
    DEP, RBV (remaining book value) and RDV (remaining depreciable value) are
    computed. SET cycles through the methods the model offers.
    """

    kind = W.DEPRECIATION
    FIELDS = {
        "LIF": "life",
        "M01": "start_month",
        "CST": "cost",
        "SAL": "salvage",
        "DB": "db_rate",
        "YR": "year",
        "DEP": "depreciation",
        "RBV": "book_value",
        "RDV": "remaining",
    }
    COMPUTED = frozenset({"DEP", "RBV", "RDV"})

    def target(self, calc: Calculator) -> DepreciationWorksheet:
        return calc.depreciation

    def feature_for(self, calc: Calculator, var: str) -> Feature | None:
        return METHOD_FEATURES[calc.depreciation.method]

    def recall(self, calc: Calculator, var: str) -> float:
        if var in _ASSET:
            return float(getattr(calc.depreciation.asset, _ASSET[var]))
        return super().recall(calc, var)

    def store(self, calc: Calculator, var: str, value: float) -> None:
        ws = calc.depreciation
        if var == "M01":
            ws.asset.start_month = int(value)
        elif var in _ASSET:
            setattr(ws.asset, _ASSET[var], float(value))
        elif var == "YR":
            ws.year = int(value)
        else:
            super().store(calc, var, value)

    def _compute(self, calc: Calculator, var: str) -> float:
        ws = calc.depreciation
        result = depreciate(ws.asset, ws.method, ws.year)
        if var == "DEP":
            return result.depreciation
        if var == "RBV":
            return result.book_value_end
        return result.remaining

    def record(self, calc: Calculator, var: str, value: float) -> None:
        ws = calc.depreciation
        result = depreciate(ws.asset, ws.method, ws.year)
        ws.depreciation = result.depreciation
        ws.book_value = result.book_value_end
        ws.remaining = result.remaining

    def cycle_setting(self, calc: Calculator) -> None:
        ws = calc.depreciation
        method = ws.method.next()
        while not is_available(calc.model, METHOD_FEATURES[method]):
            method = method.next()
        ws.method = method

    def reset(self, calc: Calculator) -> None:
        calc.depreciation = DepreciationWorksheet()
