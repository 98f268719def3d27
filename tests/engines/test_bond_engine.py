"""
Tests for the bond engine.
"""

import pytest

from fxba.core.errors import InvalidInputError
from fxba.engines import bond
from fxba.engines.bond import BondInput
from fxba.engines.daycount import DayCount


@pytest.fixture
def ten_year():
    """10-year 6% semiannual bond on 30/360, bought on a coupon date."""
    return BondInput(
        settlement=20240101,
        maturity=20340101,
        coupon_rate=6,
        redemption=100,
        frequency=2,
        day_count="30/360",
    )


class TestPeriods:
    """Coupon periods between settlement and maturity."""

    def test_whole_periods_on_30_360(self, ten_year):
        assert bond.periods_remaining(ten_year) == pytest.approx(20.0)

    def test_actual_days_use_182_day_periods(self):
        terms = BondInput(20240101, 20250101, 5, day_count=DayCount.ACT_ACT)
        assert bond.periods_remaining(terms) == pytest.approx(366 / 182)

    def test_day_count_string_is_parsed(self, ten_year):
        assert ten_year.day_count is DayCount.THIRTY_360

    def test_unsupported_frequency(self, ten_year):
        ten_year.frequency = 3
        with pytest.raises(InvalidInputError, match="frequency"):
            bond.periods_remaining(ten_year)

    def test_settlement_after_maturity(self):
        terms = BondInput(20300101, 20240101, 5)
        with pytest.raises(InvalidInputError):
            bond.periods_remaining(terms)

    def test_invalid_date(self):
        terms = BondInput(20240231, 20340101, 5)
        with pytest.raises(InvalidInputError):
            bond.periods_remaining(terms)


class TestPriceAndYield:
    """Price from yield and its inverse."""

    def test_par_bond(self, ten_year):
        assert bond.price_from_yield(ten_year, 6) == pytest.approx(100.0)

    def test_premium_bond(self, ten_year):
        assert bond.price_from_yield(ten_year, 5) == pytest.approx(107.79, abs=0.01)

    def test_discount_bond(self, ten_year):
        assert bond.price_from_yield(ten_year, 7) < 100.0

    def test_zero_yield_sums_cash_flows(self, ten_year):
        assert bond.price_from_yield(ten_year, 0) == pytest.approx(160.0)

    def test_yield_recovers_input(self, ten_year):
        price = bond.price_from_yield(ten_year, 5.25)
        assert bond.yield_from_price(ten_year, price) == pytest.approx(5.25, abs=1e-6)

    def test_zero_coupon_yield(self):
        terms = BondInput(20240101, 20340101, 0, frequency=2, day_count="30/360")
        price = 100 / 1.025**20
        assert bond.yield_from_price(terms, price) == pytest.approx(5.0, abs=1e-6)


class TestAccruedAndDuration:
    """Accrued interest and duration."""

    def test_no_accrual_on_coupon_date(self, ten_year):
        assert bond.accrued_interest(ten_year) == pytest.approx(0.0)

    def test_half_period_accrued(self, ten_year):
        ten_year.settlement = 20240401
        assert bond.accrued_interest(ten_year) == pytest.approx(1.5)

    def test_accrual_follows_fractional_periods(self):
        # 1917 actual days over 182-day periods leaves 0.533 of a period
        terms = BondInput(20240101, 20290401, 6, frequency=2)
        assert bond.accrued_interest(terms) == pytest.approx(1.5989, abs=1e-4)

    def test_zero_coupon_duration_equals_maturity(self):
        terms = BondInput(20240101, 20340101, 0, frequency=2, day_count="30/360")
        assert bond.macaulay_duration(terms, 5) == pytest.approx(10.0)
        assert bond.modified_duration(terms, 5) == pytest.approx(10.0 / 1.025)

    def test_coupon_bond_duration_below_maturity(self, ten_year):
        duration = bond.macaulay_duration(ten_year, 6)
        assert 7.0 < duration < 10.0
        assert bond.modified_duration(ten_year, 6) < duration


class TestBondCalculate:
    """Full result from price or yield."""

    def test_from_yield(self, ten_year):
        result = bond.bond_calculate(ten_year, yield_=6)
        assert result.price == pytest.approx(100.0)
        assert result.dirty_price == pytest.approx(result.price + result.accrued_interest)

    def test_price_takes_precedence(self, ten_year):
        result = bond.bond_calculate(ten_year, price=100, yield_=9)
        assert result.yield_ == pytest.approx(6.0, abs=1e-6)

    def test_dirty_price_includes_accrual(self, ten_year):
        ten_year.settlement = 20240401
        result = bond.bond_calculate(ten_year, yield_=6)
        assert result.dirty_price == pytest.approx(result.price + 1.5)

    def test_needs_price_or_yield(self, ten_year):
        with pytest.raises(InvalidInputError):
            bond.bond_calculate(ten_year)
