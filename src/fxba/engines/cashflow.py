"""
Cash-flow engine: grouped cash flows and NPV, IRR, NFV, payback and MIRR.

Rates passed to these functions are periodic decimals (0.10 for 10%); the
worksheet layer converts from the percent values shown on the display.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np

from fxba.core.config import INITIAL_GUESS, MAX_CASH_FLOWS, MAX_FLOW_COUNT
from fxba.core.errors import (
    CapacityError,
    InvalidInputError,
    MultipleIRRError,
    NoSolutionError,
)
from fxba.core.utils import warn_once

from ._solver import newton

logger = logging.getLogger(__name__)


@dataclass
class CashFlow:
    """One group: ``amount`` repeated for ``count`` consecutive periods."""

    amount: float
    count: int = 1


def _clamp_count(count: int) -> int:
    count = int(count)
    if count < 1 or count > MAX_FLOW_COUNT:
        clamped = max(1, min(MAX_FLOW_COUNT, count))
        warn_once(
            "CF_COUNT_CLAMPED",
            str(count),
            f"cash-flow count {count} clamped to {clamped} (allowed 1..{MAX_FLOW_COUNT})",
        )
        return clamped
    return count


@dataclass
class CashFlowList:
    """
    CF0 plus up to 32 ordered ``(amount, count)`` groups.

    Group order defines period order: group 0 covers periods
    ``1..count_0``, group 1 the next ``count_1`` periods, and so on.
    """

    cf0: float = 0.0
    flows: list[CashFlow] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.flows)

    @property
    def total_periods(self) -> int:
        return sum(flow.count for flow in self.flows)

    def add(self, amount: float, count: int = 1) -> int:
        """
        Append a group.

        Returns:
            Index of the new group

        Raises:
            CapacityError: If 32 groups are already stored
        """
        if len(self.flows) >= MAX_CASH_FLOWS:
            raise CapacityError(MAX_CASH_FLOWS, "cash flows")
        self.flows.append(CashFlow(float(amount), _clamp_count(count)))
        return len(self.flows) - 1

    def update(self, index: int, amount: float, count: int | None = None) -> None:
        """Replace a group's amount (and count); no-op when out of range."""
        if not 0 <= index < len(self.flows):
            return
        flow = self.flows[index]
        flow.amount = float(amount)
        if count is not None:
            flow.count = _clamp_count(count)

    def delete(self, index: int) -> None:
        """Remove a group, shifting later groups down; no-op when out of range."""
        if 0 <= index < len(self.flows):
            del self.flows[index]

    def clear(self) -> None:
        self.cf0 = 0.0
        self.flows.clear()

    def expand(self) -> np.ndarray:
        """Per-period amounts for periods ``1..total_periods``."""
        if not self.flows:
            return np.zeros(0)
        return np.repeat(
            np.array([f.amount for f in self.flows], dtype=float),
            [f.count for f in self.flows],
        )

    def has_sign_change(self) -> bool:
        values = [self.cf0] + [f.amount for f in self.flows]
        return any(v > 0 for v in values) and any(v < 0 for v in values)


def _check_rate(rate: float) -> None:
    if rate <= -1.0:
        raise InvalidInputError(f"rate {rate!r} must be greater than -100%")


def npv(cf: CashFlowList, rate: float) -> float:
    """
    Net present value at a periodic ``rate``.

    The discount factor is carried forward and multiplied by ``1/(1+rate)``
    once per period rather than re-raised to a power.
    """
    _check_rate(rate)
    step = 1.0 / (1.0 + rate)
    factor = 1.0
    total = cf.cf0
    for flow in cf.flows:
        for _ in range(flow.count):
            factor *= step
            total += flow.amount * factor
    return total


def npv_and_derivative(cf: CashFlowList, rate: float) -> tuple[float, float]:
    """NPV and dNPV/drate in a single pass over the flows."""
    one_plus = 1.0 + rate
    step = 1.0 / one_plus
    factor = 1.0
    value = cf.cf0
    slope = 0.0
    t = 0
    for flow in cf.flows:
        for _ in range(flow.count):
            t += 1
            factor *= step
            value += flow.amount * factor
            slope -= t * flow.amount * factor / one_plus
    return value, slope


def irr(cf: CashFlowList) -> float:
    """
    Internal rate of return as a periodic decimal.

    Raises:
        InvalidInputError: If there are no cash-flow groups
        NoSolutionError: Without both a positive and a negative flow
        MultipleIRRError: If Newton-Raphson does not converge
    """
    if not cf.flows:
        raise InvalidInputError("IRR needs at least one cash flow after CF0")
    if not cf.has_sign_change():
        raise NoSolutionError()

    rate = newton(lambda r: npv_and_derivative(cf, r), INITIAL_GUESS, label="irr")
    if rate is None:
        logger.debug("irr: no convergence over %d flow groups", len(cf.flows))
        raise MultipleIRRError()
    return rate


def nfv(cf: CashFlowList, rate: float) -> float:
    """Net future value: every flow compounded to the last period."""
    _check_rate(rate)
    amounts = cf.expand()
    n = amounts.size
    exponents = n - np.arange(1, n + 1)
    growth = 1.0 + rate
    return float(cf.cf0 * growth**n + np.sum(amounts * growth**exponents))


def _payback(cf0: float, values: np.ndarray) -> float:
    if cf0 >= 0:
        return 0.0
    cumulative = cf0 + np.cumsum(values)
    crossed = np.flatnonzero(cumulative >= 0)
    if crossed.size == 0:
        return -1.0
    idx = int(crossed[0])
    amount = values[idx]
    if amount > 0:
        previous = cumulative[idx - 1] if idx > 0 else cf0
        return idx + (-previous / amount)
    return float(idx + 1)


def payback(cf: CashFlowList) -> float:
    """
    Periods until cumulative cash flow turns non-negative.

    Returns:
        Fractional period (linear interpolation within the crossing period),
        0 if CF0 is already non-negative, -1 if never recovered
    """
    return _payback(cf.cf0, cf.expand())


def discounted_payback(cf: CashFlowList, rate: float) -> float:
    """Payback on flows discounted at ``rate``; same return convention."""
    _check_rate(rate)
    amounts = cf.expand()
    factors = np.cumprod(np.full(amounts.size, 1.0 / (1.0 + rate)))
    return _payback(cf.cf0, amounts * factors)


def mirr(cf: CashFlowList, finance_rate: float, reinvest_rate: float) -> float:
    """
    Modified IRR as a periodic decimal.

    Negative flows are discounted to t=0 at ``finance_rate``; positive flows
    (including a non-negative CF0) are compounded to the final period at
    ``reinvest_rate``.

    Raises:
        InvalidInputError: If there are zero periods
        NoSolutionError: If there is no negative flow
    """
    _check_rate(finance_rate)
    _check_rate(reinvest_rate)
    amounts = cf.expand()
    n = amounts.size
    if n == 0:
        raise InvalidInputError("MIRR needs at least one period")

    periods = np.arange(1, n + 1)
    negative = amounts < 0

    pv_negative = float(
        np.sum(-amounts[negative] / (1.0 + finance_rate) ** periods[negative])
    )
    fv_positive = float(
        np.sum(amounts[~negative] * (1.0 + reinvest_rate) ** (n - periods[~negative]))
    )
    if cf.cf0 < 0:
        pv_negative += -cf.cf0
    else:
        fv_positive += cf.cf0 * (1.0 + reinvest_rate) ** n

    if pv_negative == 0:
        raise NoSolutionError()
    return (fv_positive / pv_negative) ** (1.0 / n) - 1.0
