"""
Cash-flow worksheet: CF0, Cnn/Fnn groups and the NPV family of outputs.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from fxba.core.config import MAX_CASH_FLOWS
from fxba.core.errors import InvalidInputError
from fxba.core.features import Feature
from fxba.core.kinds import W
from fxba.core.registers import CashFlowRates
from fxba.engines import cashflow

from ._base import BaseWorksheet

if TYPE_CHECKING:
    from fxba.core.calculator import Calculator

_GROUP_LABEL = re.compile(r"^([CF])(\d{2})$")


def group_label(prefix: str, index: int) -> str:
    """Label of group ``index`` (0-based), e.g. ``C01`` or ``F12``."""
    return f"{prefix}{index + 1:02d}"


class CashFlowWorksheet(BaseWorksheet):
    """
    Uneven cash flows.

    ``Cnn`` is the amount and ``Fnn`` the repeat count of group ``nn``. Storing
    ``Cnn`` for the first unused group appends it with a count of 1. The rate
    registers I and RI are percentages per period.
    """

    kind = W.CASHFLOW
    FIELDS = {
        "I": "rate",
        "RI": "reinvest_rate",
        "NPV": "npv",
        "IRR": "irr",
        "NFV": "nfv",
        "PB": "payback",
        "DPB": "discounted_payback",
        "MIRR": "mirr",
    }
    COMPUTED = frozenset({"NPV", "IRR", "NFV", "PB", "DPB", "MIRR"})
    FEATURES = {
        "NPV": Feature.NPV,
        "IRR": Feature.IRR,
        "NFV": Feature.NFV,
        "PB": Feature.PAYBACK,
        "DPB": Feature.DISCOUNTED_PAYBACK,
        "MIRR": Feature.MIRR,
    }

    def target(self, calc: Calculator) -> CashFlowRates:
        return calc.cashflow_rates

    def variables(self, calc: Calculator) -> list[str]:
        count = len(calc.cashflow)
        labels = ["CF0"]
        for index in range(count):
            labels += [group_label("C", index), group_label("F", index)]
        if count < MAX_CASH_FLOWS:
            labels.append(group_label("C", count))
        return labels + list(self.FIELDS)

    @staticmethod
    def _group(var: str) -> tuple[str, int] | None:
        match = _GROUP_LABEL.match(var)
        if match is None:
            return None
        return match.group(1), int(match.group(2)) - 1

    def recall(self, calc: Calculator, var: str) -> float:
        if var == "CF0":
            return calc.cashflow.cf0
        group = self._group(var)
        if group is None:
            return super().recall(calc, var)
        prefix, index = group
        if not 0 <= index < len(calc.cashflow):
            return 0.0
        flow = calc.cashflow.flows[index]
        return flow.amount if prefix == "C" else float(flow.count)

    def store(self, calc: Calculator, var: str, value: float) -> None:
        flows = calc.cashflow
        if var == "CF0":
            flows.cf0 = float(value)
            return
        group = self._group(var)
        if group is None:
            super().store(calc, var, value)
            return
        prefix, index = group
        if prefix == "C" and index == len(flows):
            flows.add(value, 1)
        elif not 0 <= index < len(flows):
            raise InvalidInputError(f"{var} is past the last cash flow")
        elif prefix == "C":
            flows.update(index, value)
        else:
            flows.update(index, flows.flows[index].amount, count=int(round(value)))

    def _compute(self, calc: Calculator, var: str) -> float:
        flows = calc.cashflow
        rate = calc.cashflow_rates.rate / 100.0
        if var == "NPV":
            return cashflow.npv(flows, rate)
        if var == "IRR":
            return cashflow.irr(flows) * 100.0
        if var == "NFV":
            return cashflow.nfv(flows, rate)
        if var == "PB":
            return cashflow.payback(flows)
        if var == "DPB":
            return cashflow.discounted_payback(flows, rate)
        reinvest = calc.cashflow_rates.reinvest_rate / 100.0
        return cashflow.mirr(flows, rate, reinvest) * 100.0

    def reset(self, calc: Calculator) -> None:
        calc.cashflow.clear()
        calc.cashflow_rates = CashFlowRates()
