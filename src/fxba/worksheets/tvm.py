"""
TVM and amortization worksheets.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fxba.core.features import Feature
from fxba.core.kinds import W
from fxba.core.registers import AmortizationData
from fxba.engines import tvm

from ._base import BaseWorksheet

if TYPE_CHECKING:
    from fxba.core.calculator import Calculator


class TVMWorksheet(BaseWorksheet):
    """
    N, I/Y, PV, PMT and FV plus the P/Y and C/Y settings.

    Entering P/Y also sets C/Y to the same value, as on the keypad; enter C/Y
    afterwards when the compounding frequency differs. SET toggles END/BGN.
    """

    kind = W.TVM
    FIELDS = {
        "N": "n",
        "I/Y": "i_y",
        "PV": "pv",
        "PMT": "pmt",
        "FV": "fv",
        "P/Y": "p_y",
        "C/Y": "c_y",
    }
    COMPUTED = frozenset(tvm.TVM_VARIABLES)
    FEATURES = {var: Feature.TVM for var in tvm.TVM_VARIABLES}

    def target(self, calc: Calculator) -> tvm.TVMData:
        return calc.tvm

    def store(self, calc: Calculator, var: str, value: float) -> None:
        super().store(calc, var, value)
        if var == "P/Y":
            calc.tvm.c_y = float(value)

    def _compute(self, calc: Calculator, var: str) -> float:
        return tvm.solve(calc.tvm, var)

    def cycle_setting(self, calc: Calculator) -> None:
        calc.tvm.mode = calc.tvm.mode.toggled()

    def reset(self, calc: Calculator) -> None:
        calc.reset_tvm()


class AmortizationWorksheet(BaseWorksheet):
    """P1..P2 range over the TVM loan, solving BAL, PRN and INT together."""

    kind = W.AMORTIZATION
    FIELDS = {
        "P1": "p1",
        "P2": "p2",
        "BAL": "balance",
        "PRN": "principal",
        "INT": "interest",
    }
    COMPUTED = frozenset({"BAL", "PRN", "INT"})
    FEATURES = {var: Feature.AMORTIZATION for var in COMPUTED}

    _RESULT_FIELDS = {"BAL": "balance", "PRN": "principal", "INT": "interest"}

    def target(self, calc: Calculator) -> AmortizationData:
        return calc.amortization

    def store(self, calc: Calculator, var: str, value: float) -> None:
        if var in ("P1", "P2"):
            setattr(calc.amortization, self._field(var), int(value))
            return
        super().store(calc, var, value)

    def _compute(self, calc: Calculator, var: str) -> float:
        result = tvm.amortize(calc.tvm, calc.amortization.p1, calc.amortization.p2)
        return getattr(result, self._RESULT_FIELDS[var])

    def record(self, calc: Calculator, var: str, value: float) -> None:
        result = tvm.amortize(calc.tvm, calc.amortization.p1, calc.amortization.p2)
        calc.amortization.balance = result.balance
        calc.amortization.principal = result.principal
        calc.amortization.interest = result.interest

    def reset(self, calc: Calculator) -> None:
        calc.amortization = AmortizationData()
