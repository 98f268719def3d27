"""
Tests for the depreciation engine.
"""

import pytest

from fxba.core.errors import InvalidInputError, NoSolutionError
from fxba.core.utils import FxbaWarning
from fxba.engines import depreciation as dep
from fxba.engines.depreciation import DepreciationInput, DepreciationMethod as M


@pytest.fixture
def asset():
    """10,000 asset, 1,000 salvage, five-year life."""
    return DepreciationInput(cost=10_000, salvage=1_000, life=5)


class TestMethods:
    """Per-year amounts for each method."""

    def test_straight_line(self):
        assert dep.straight_line(10_000, 1_000, 5, 3) == pytest.approx(1800)

    def test_straight_line_fractional_life(self):
        assert dep.straight_line(10_000, 1_000, 4.5, 4) == pytest.approx(2000)
        assert dep.straight_line(10_000, 1_000, 4.5, 5) == pytest.approx(1000)
        assert dep.straight_line(10_000, 1_000, 4.5, 6) == 0.0

    @pytest.mark.parametrize("year,expected", [(1, 3000), (2, 2400), (5, 600), (6, 0)])
    def test_sum_of_years_digits(self, year, expected):
        assert dep.sum_of_years_digits(10_000, 1_000, 5, year) == pytest.approx(expected)

    @pytest.mark.parametrize("year,expected", [(1, 4000), (2, 2400), (3, 1440), (4, 864), (5, 296)])
    def test_double_declining_balance_stops_at_salvage(self, year, expected):
        assert dep.declining_balance(10_000, 1_000, 5, 200, year) == pytest.approx(expected)

    def test_declining_balance_switches_to_straight_line(self):
        assert dep.declining_balance(10_000, 0, 5, 200, 4) == pytest.approx(864)
        assert dep.declining_balance_sl(10_000, 0, 5, 200, 4) == pytest.approx(1080)
        assert dep.declining_balance_sl(10_000, 0, 5, 200, 5) == pytest.approx(1080)

    def test_french_coefficients(self):
        assert dep.french_coefficient(3) == 1.25
        assert dep.french_coefficient(5) == 1.75
        assert dep.french_coefficient(10) == 2.25

    def test_french_straight_line_prorates_first_and_trailing_year(self):
        assert dep.straight_line_french(10_000, 1_000, 5, 7, 1) == pytest.approx(900)
        assert dep.straight_line_french(10_000, 1_000, 5, 7, 3) == pytest.approx(1800)
        assert dep.straight_line_french(10_000, 1_000, 5, 7, 6) == pytest.approx(900)
        assert dep.straight_line_french(10_000, 1_000, 5, 7, 7) == 0.0

    def test_french_declining_balance_first_year(self):
        # 1.75 / 5 over the six months from July
        assert dep.declining_balance_french(10_000, 0, 5, 7, 1) == pytest.approx(1750)

    def test_partial_year_factor(self):
        assert dep.partial_year_factor(1, 1, 5) == 1.0
        assert dep.partial_year_factor(4, 1, 5) == pytest.approx(0.75)
        assert dep.partial_year_factor(4, 6, 5) == pytest.approx(0.25)

    def test_zero_life_rejected(self):
        with pytest.raises(InvalidInputError):
            dep.straight_line(10_000, 1_000, 0)

    def test_year_zero_rejected(self):
        with pytest.raises(InvalidInputError):
            dep.sum_of_years_digits(10_000, 1_000, 5, 0)

    def test_non_positive_db_rate(self):
        with pytest.raises(NoSolutionError):
            dep.declining_balance(10_000, 1_000, 5, 0, 1)


class TestDepreciate:
    """Replayed book values and totals."""

    def test_first_year(self, asset):
        result = dep.depreciate(asset, M.SL, 1)
        assert result.depreciation == pytest.approx(1800)
        assert result.book_value_start == pytest.approx(10_000)
        assert result.book_value_end == pytest.approx(8_200)
        assert result.remaining == pytest.approx(7_200)

    @pytest.mark.parametrize("method", list(M))
    def test_never_below_salvage(self, asset, method):
        result = dep.depreciate(asset, method, 8)
        assert result.book_value_end >= asset.salvage - 1e-9
        assert result.accumulated <= asset.cost - asset.salvage + 1e-9

    def test_after_life_is_zero(self, asset):
        result = dep.depreciate(asset, M.SL, 6)
        assert result.depreciation == 0.0
        assert result.book_value_end == pytest.approx(1_000)
        assert result.remaining == 0.0

    def test_start_month_clamped_with_warning(self, asset):
        asset.start_month = 13
        with pytest.warns(FxbaWarning, match="start month"):
            result = dep.depreciate(asset, M.SLF, 1)
        assert result.depreciation == pytest.approx(150)

    def test_method_cycle_wraps(self):
        assert M.DBF.next() is M.SL
        assert M.SL.next() is M.SYD


class TestSchedule:
    def test_straight_line_schedule(self, asset):
        frame = dep.depreciation_schedule(asset, M.SL)
        assert list(frame["year"]) == [1, 2, 3, 4, 5]
        assert frame["depreciation"].sum() == pytest.approx(9_000)
        assert frame["book_value_end"].iloc[-1] == pytest.approx(1_000)

    def test_french_schedule_has_trailing_year(self, asset):
        asset.start_month = 7
        assert dep.schedule_years(asset, M.SLF) == 6
        assert dep.schedule_years(asset, M.SL) == 5

    def test_explicit_year_count(self, asset):
        frame = dep.depreciation_schedule(asset, M.SYD, years=2)
        assert len(frame) == 2
        assert "accumulated" in frame.columns
