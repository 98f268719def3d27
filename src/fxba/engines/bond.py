"""
Bond engine: price, yield to maturity, accrued interest and duration.

Prices, redemption and accrued interest are in percent of par; coupon rate
and yield are annual percentages.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from fxba.core.config import (
    BOND_YIELD_STEP,
    DEFAULT_BOND_FREQUENCY,
    DEFAULT_BOND_REDEMPTION,
    RATE_LOWER_BOUND,
    RATE_UPPER_BOUND,
)
from fxba.core.errors import InvalidInputError, IterationLimitError

from ._solver import newton
from .daycount import DayCount, day_count

logger = logging.getLogger(__name__)

COUPON_FREQUENCIES = (1, 2, 4, 12)


@dataclass
class BondInput:
    """
    Bond terms.

    Attributes:
        settlement: Settlement date as YYYYMMDD
        maturity: Maturity date as YYYYMMDD
        coupon_rate: Annual coupon in percent of par
        redemption: Redemption value in percent of par
        frequency: Coupons per year (1, 2, 4 or 12)
        day_count: Day-count convention
    """

    settlement: int
    maturity: int
    coupon_rate: float
    redemption: float = DEFAULT_BOND_REDEMPTION
    frequency: int = DEFAULT_BOND_FREQUENCY
    day_count: DayCount = DayCount.ACT_ACT

    def __post_init__(self):
        self.day_count = DayCount.parse(self.day_count)


@dataclass(frozen=True)
class BondResult:
    price: float
    yield_: float
    accrued_interest: float
    dirty_price: float
    duration: float
    modified_duration: float


def _check_frequency(bond: BondInput) -> int:
    if bond.frequency not in COUPON_FREQUENCIES:
        raise InvalidInputError(
            f"coupon frequency must be one of {COUPON_FREQUENCIES}, got {bond.frequency}"
        )
    return bond.frequency


def periods_remaining(bond: BondInput) -> float:
    """
    Coupon periods from settlement to maturity (may be fractional).

    Period length is the convention's year basis divided by the frequency,
    in whole days.

    Raises:
        InvalidInputError: For invalid dates, settlement not before maturity,
            or an unsupported frequency
    """
    freq = _check_frequency(bond)
    days = day_count(bond.settlement, bond.maturity, bond.day_count)
    if days <= 0:
        raise InvalidInputError("settlement must be before maturity")
    days_per_period = bond.day_count.year_basis // freq
    return days / days_per_period


def _price(bond: BondInput, n: float, yield_: float) -> float:
    coupon = bond.coupon_rate / bond.frequency
    y = yield_ / 100.0 / bond.frequency
    if y == 0:
        return coupon * n + bond.redemption
    discount = (1.0 + y) ** -n
    return coupon * (1.0 - discount) / y + bond.redemption * discount


def price_from_yield(bond: BondInput, yield_: float) -> float:
    """Clean price for an annual yield in percent."""
    return _price(bond, periods_remaining(bond), yield_)


def yield_from_price(bond: BondInput, price: float) -> float:
    """
    Yield to maturity (annual percent) for a clean price.

    Newton-Raphson with a central-difference derivative. The initial guess is
    the coupon rate, or 5% for a zero-coupon bond.

    Raises:
        IterationLimitError: If the solver does not converge
    """
    n = periods_remaining(bond)
    scale = 100.0 * bond.frequency
    h = BOND_YIELD_STEP

    def f(y: float) -> tuple[float, float]:
        diff = _price(bond, n, y) - price
        slope = (_price(bond, n, y + h) - _price(bond, n, y - h)) / (2.0 * h)
        return diff, slope

    guess = bond.coupon_rate if bond.coupon_rate > 0 else 5.0
    result = newton(
        f,
        guess,
        lower=RATE_LOWER_BOUND * scale,
        upper=RATE_UPPER_BOUND * scale,
        label="bond.yield",
    )
    if result is None:
        raise IterationLimitError()
    return result


def accrued_interest(bond: BondInput) -> float:
    """Coupon per period times the fraction of the current period elapsed."""
    n = periods_remaining(bond)
    elapsed = n - math.floor(n)
    return bond.coupon_rate / bond.frequency * elapsed


def macaulay_duration(bond: BondInput, yield_: float) -> float:
    """
    Macaulay duration in years.

    Sums over ``ceil(n)`` whole periods with redemption in the last one;
    0.0 when the price is not positive.
    """
    n = periods_remaining(bond)
    price = _price(bond, n, yield_)
    if price <= 0:
        return 0.0
    coupon = bond.coupon_rate / bond.frequency
    y = yield_ / 100.0 / bond.frequency
    periods = math.ceil(n)

    weighted = 0.0
    for t in range(1, periods + 1):
        cash = coupon + (bond.redemption if t == periods else 0.0)
        weighted += t * cash / (1.0 + y) ** t
    return weighted / price / bond.frequency


def modified_duration(bond: BondInput, yield_: float) -> float:
    return macaulay_duration(bond, yield_) / (1.0 + yield_ / 100.0 / bond.frequency)


def bond_calculate(
    bond: BondInput, price: float | None = None, yield_: float | None = None
) -> BondResult:
    """
    Complete bond result from either a known price or a known yield.

    A positive ``price`` takes precedence and the yield is solved for.

    Raises:
        InvalidInputError: If neither price nor yield is given
        IterationLimitError: If solving for yield fails
    """
    if price is not None and price > 0:
        yield_ = yield_from_price(bond, price)
    elif yield_ is not None:
        price = price_from_yield(bond, yield_)
    else:
        raise InvalidInputError("bond needs a price or a yield")

    accrued = accrued_interest(bond)
    result = BondResult(
        price=price,
        yield_=yield_,
        accrued_interest=accrued,
        dirty_price=price + accrued,
        duration=macaulay_duration(bond, yield_),
        modified_duration=modified_duration(bond, yield_),
    )
    logger.debug("bond %s", result)
    return result
