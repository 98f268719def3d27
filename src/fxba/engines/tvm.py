"""
Time-value-of-money engine.

Solves the five-variable annuity system (N, I/Y, PV, PMT, FV) under the
calculator's sign convention: money received is positive, money paid out is
negative, so a loan has ``PV > 0`` and ``PMT < 0``.

Each ``calc_*`` function is pure: it reads a :class:`TVMData` and returns the
solved value, or raises a :class:`~fxba.core.errors.CalculatorError`. Use
:func:`solve` to dispatch by variable label and :func:`solved` to get a copy
with the solved slot written.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from enum import Enum

import numpy as np
import pandas as pd

from fxba.core.config import (
    DEFAULT_C_Y,
    DEFAULT_P_Y,
    INITIAL_GUESS,
    RATE_LOWER_BOUND,
    RATE_UPPER_BOUND,
)
from fxba.core.errors import (
    InvalidInputError,
    IterationLimitError,
    NoSolutionError,
)

from ._solver import newton

logger = logging.getLogger(__name__)

TVM_VARIABLES = ("N", "I/Y", "PV", "PMT", "FV")

# Below this magnitude the annuity factor is evaluated at a nudged rate
_ZERO_RATE_NUDGE = 1e-12


class PaymentMode(Enum):
    END = "END"  # ordinary annuity
    BEGIN = "BGN"  # annuity due

    def toggled(self) -> PaymentMode:
        return PaymentMode.BEGIN if self is PaymentMode.END else PaymentMode.END


@dataclass
class TVMData:
    """
    TVM registers.

    Attributes:
        n: Number of periods (may be fractional)
        i_y: Nominal annual interest rate in percent
        pv: Present value
        pmt: Periodic payment
        fv: Future value
        p_y: Payments per year
        c_y: Compounding periods per year
        mode: END (ordinary annuity) or BEGIN (annuity due)
    """

    n: float = 0.0
    i_y: float = 0.0
    pv: float = 0.0
    pmt: float = 0.0
    fv: float = 0.0
    p_y: float = DEFAULT_P_Y
    c_y: float = DEFAULT_C_Y
    mode: PaymentMode = PaymentMode.END

    @property
    def rate(self) -> float:
        """Periodic rate as a decimal."""
        return periodic_rate(self.i_y, self.p_y, self.c_y)

    @property
    def multiplier(self) -> float:
        return mode_multiplier(self.rate, self.mode)

    def get(self, var: str) -> float:
        return getattr(self, _FIELDS[var])

    def set(self, var: str, value: float) -> None:
        setattr(self, _FIELDS[var], float(value))


_FIELDS = {"N": "n", "I/Y": "i_y", "PV": "pv", "PMT": "pmt", "FV": "fv"}


def periodic_rate(annual_rate: float, p_y: float, c_y: float) -> float:
    """
    Convert a nominal annual percentage into a periodic decimal rate.

    When payment and compounding frequencies differ, the effective rate per
    compounding period is converted to the payment period.

    Raises:
        InvalidInputError: If P/Y or C/Y is not positive
    """
    if p_y <= 0 or c_y <= 0:
        raise InvalidInputError("P/Y and C/Y must be positive")
    if annual_rate == 0:
        return 0.0
    if p_y == c_y:
        return annual_rate / (100.0 * p_y)
    return (1.0 + annual_rate / (100.0 * c_y)) ** (c_y / p_y) - 1.0


def annual_rate(rate: float, p_y: float, c_y: float) -> float:
    """Inverse of :func:`periodic_rate`: periodic decimal to annual percent."""
    if p_y == c_y:
        return rate * 100.0 * p_y
    return ((1.0 + rate) ** (p_y / c_y) - 1.0) * 100.0 * c_y


def mode_multiplier(rate: float, mode: PaymentMode) -> float:
    return 1.0 + rate if mode is PaymentMode.BEGIN else 1.0


def calc_fv(tvm: TVMData) -> float:
    i, n = tvm.rate, tvm.n
    if i == 0:
        return -(tvm.pv + tvm.pmt * n)
    growth = (1.0 + i) ** n
    return -(tvm.pv * growth + tvm.pmt * (growth - 1.0) / i * tvm.multiplier)


def calc_pv(tvm: TVMData) -> float:
    i, n = tvm.rate, tvm.n
    if i == 0:
        return -(tvm.fv + tvm.pmt * n)
    discount = (1.0 + i) ** -n
    return -(tvm.fv * discount + tvm.pmt * (1.0 - discount) / i * tvm.multiplier)


def calc_pmt(tvm: TVMData) -> float:
    """
    Solve for the periodic payment.

    Raises:
        InvalidInputError: If N is zero at a non-zero rate
    """
    i, n = tvm.rate, tvm.n
    if i == 0:
        if n == 0:
            return 0.0
        return -(tvm.pv + tvm.fv) / n
    discount = (1.0 + i) ** -n
    annuity = (1.0 - discount) / i * tvm.multiplier
    if annuity == 0:
        raise InvalidInputError("payment undefined for N = 0")
    return -(tvm.pv + tvm.fv * discount) / annuity


def calc_n(tvm: TVMData) -> float:
    """
    Solve for the number of periods.

    Raises:
        InvalidInputError: If the rate and the payment are both zero
        NoSolutionError: If the log argument is not positive
    """
    i = tvm.rate
    if i == 0:
        if tvm.pmt == 0:
            raise InvalidInputError("N undefined with zero rate and zero payment")
        return -(tvm.pv + tvm.fv) / tvm.pmt

    m = tvm.multiplier
    numerator = tvm.pmt * m - tvm.fv * i
    denominator = tvm.pmt * m + tvm.pv * i
    if denominator == 0:
        raise NoSolutionError()
    ratio = numerator / denominator
    if ratio <= 0:
        raise NoSolutionError()
    return math.log(ratio) / math.log1p(i)


def _iy_objective(tvm: TVMData):
    n, pv, pmt, fv = tvm.n, tvm.pv, tvm.pmt, tvm.fv
    begin = tvm.mode is PaymentMode.BEGIN

    def f(i: float) -> tuple[float, float]:
        if abs(i) < _ZERO_RATE_NUDGE:
            i = _ZERO_RATE_NUDGE
        m = 1.0 + i if begin else 1.0
        discount = (1.0 + i) ** -n
        annuity = (1.0 - discount) / i * m
        value = pv + pmt * annuity + fv * discount

        d_discount = -n * discount / (1.0 + i)
        d_annuity = m * (n * discount * i / (1.0 + i) - 1.0 + discount) / (i * i)
        if begin:
            d_annuity += annuity / m
        return value, pmt * d_annuity + fv * d_discount

    return f


def calc_iy(tvm: TVMData) -> float:
    """
    Solve for the nominal annual rate I/Y.

    Uses Newton-Raphson on ``PV + PMT*A(i) + FV*D(i)`` with the analytical
    derivative. When there is no payment the compound-rate closed form is
    used directly.

    Raises:
        InvalidInputError: If PV, PMT and FV are all zero, or N <= 0
        IterationLimitError: If Newton-Raphson does not converge
    """
    if tvm.pv == 0 and tvm.pmt == 0 and tvm.fv == 0:
        raise InvalidInputError("PV, PMT and FV are all zero")
    if tvm.n <= 0:
        raise InvalidInputError("I/Y needs N > 0")

    # INITIAL_GUESS is an annual rate
    guess = periodic_rate(INITIAL_GUESS * 100.0, tvm.p_y, tvm.c_y)
    if tvm.pv != 0 and tvm.fv != 0:
        ratio = -tvm.fv / tvm.pv
        if ratio > 0:
            estimate = ratio ** (1.0 / tvm.n) - 1.0
            if tvm.pmt == 0:
                if not RATE_LOWER_BOUND <= estimate <= RATE_UPPER_BOUND:
                    raise IterationLimitError(
                        f"periodic rate {estimate!r} outside the solver bounds"
                    )
                return annual_rate(estimate, tvm.p_y, tvm.c_y)
            if 0 < estimate <= 1:
                guess = estimate

    rate = newton(_iy_objective(tvm), guess, label="tvm.i_y")
    if rate is None:
        raise IterationLimitError()
    return annual_rate(rate, tvm.p_y, tvm.c_y)


_SOLVERS = {
    "N": calc_n,
    "I/Y": calc_iy,
    "PV": calc_pv,
    "PMT": calc_pmt,
    "FV": calc_fv,
}


def solve(tvm: TVMData, var: str) -> float:
    """Solve for one TVM variable without touching ``tvm``."""
    try:
        solver = _SOLVERS[var]
    except KeyError:
        raise InvalidInputError(f"unknown TVM variable {var!r}") from None
    value = solver(tvm)
    logger.debug("tvm solve %s -> %r", var, value)
    return value


def solved(tvm: TVMData, var: str) -> TVMData:
    """Return a copy of ``tvm`` with ``var`` replaced by its solved value."""
    result = replace(tvm)
    result.set(var, solve(tvm, var))
    return result


# ---------------------------------------------------------------------------
# Amortization
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AmortizationResult:
    """
    Totals over a range of payments P1..P2.

    ``principal`` is the balance reduction and ``interest`` the remainder of
    the payments, so ``principal + interest == -PMT * count``.
    """

    start: int
    end: int
    balance: float
    principal: float
    interest: float


def balance_at(tvm: TVMData, period: float) -> float:
    """Closed-form remaining balance after ``period`` payments (END timing)."""
    i = tvm.rate
    if i == 0:
        return tvm.pv + tvm.pmt * period
    growth = (1.0 + i) ** period
    return tvm.pv * growth + tvm.pmt * (growth - 1.0) / i


def period_split(tvm: TVMData, period: int) -> tuple[float, float]:
    """Interest and principal of a single payment, as ``(interest, principal)``."""
    if period < 1:
        raise InvalidInputError("period must be >= 1")
    before = balance_at(tvm, period - 1)
    interest = before * tvm.rate
    return interest, before - balance_at(tvm, period)


def amortize(tvm: TVMData, start: int, end: int) -> AmortizationResult:
    """
    Balance, principal and interest for payments ``start``..``end``.

    Raises:
        InvalidInputError: If ``start < 1`` or ``end < start``
    """
    start, end = int(start), int(end)
    if start < 1 or end < start:
        raise InvalidInputError(f"invalid payment range {start}..{end}")
    count = end - start + 1
    balance = balance_at(tvm, end)
    principal = balance_at(tvm, start - 1) - balance
    interest = -tvm.pmt * count - principal
    return AmortizationResult(start, end, balance, principal, interest)


def amortization_schedule(tvm: TVMData, start: int = 1, end: int | None = None):
    """
    Per-payment schedule as a DataFrame.

    Args:
        tvm: Loan registers (PMT should already be solved)
        start: First payment number
        end: Last payment number, defaults to ``ceil(N)``

    Returns:
        DataFrame with columns ``period``, ``interest``, ``principal``,
        ``balance``
    """
    if end is None:
        end = math.ceil(tvm.n)
    if start < 1 or end < start:
        raise InvalidInputError(f"invalid payment range {start}..{end}")

    periods = np.arange(start - 1, end + 1, dtype=float)
    i = tvm.rate
    if i == 0:
        balances = tvm.pv + tvm.pmt * periods
    else:
        growth = (1.0 + i) ** periods
        balances = tvm.pv * growth + tvm.pmt * (growth - 1.0) / i

    return pd.DataFrame(
        {
            "period": periods[1:].astype(int),
            "interest": balances[:-1] * i,
            "principal": balances[:-1] - balances[1:],
            "balance": balances[1:],
        }
    )
