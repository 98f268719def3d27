"""
Tests for the TVM engine.
"""

from dataclasses import replace

import pytest

from fxba.core.errors import InvalidInputError, IterationLimitError, NoSolutionError
from fxba.engines import tvm
from fxba.engines.tvm import PaymentMode, TVMData


def _annual(**values) -> TVMData:
    return replace(TVMData(p_y=1, c_y=1), **values)


class TestRateConversion:
    """Nominal annual percent <-> periodic decimal."""

    def test_equal_frequencies(self):
        assert tvm.periodic_rate(12, 12, 12) == pytest.approx(0.01)

    def test_zero_rate(self):
        assert tvm.periodic_rate(0, 12, 4) == 0.0

    def test_compounding_differs_from_payments(self):
        expected = 1.03 ** (1 / 3) - 1
        assert tvm.periodic_rate(12, 12, 4) == pytest.approx(expected)

    def test_annual_rate_inverts_periodic_rate(self):
        rate = tvm.periodic_rate(6.5, 12, 4)
        assert tvm.annual_rate(rate, 12, 4) == pytest.approx(6.5)

    @pytest.mark.parametrize("p_y,c_y", [(0, 12), (12, 0), (-1, 1)])
    def test_non_positive_frequency_rejected(self, p_y, c_y):
        with pytest.raises(InvalidInputError):
            tvm.periodic_rate(5, p_y, c_y)


class TestClosedFormSolvers:
    """PV, PMT, FV and N."""

    def test_mortgage_payment(self, mortgage):
        assert tvm.calc_pmt(mortgage) == pytest.approx(-1403.83, abs=0.01)

    def test_zero_rate_payment_is_exact(self):
        assert tvm.calc_pmt(_annual(n=10, pv=1000)) == -100.0

    def test_zero_pv_and_fv_payment(self):
        assert tvm.calc_pmt(_annual(n=10, i_y=5)) == pytest.approx(0.0)

    def test_payment_with_zero_periods_rejected(self):
        with pytest.raises(InvalidInputError):
            tvm.calc_pmt(_annual(n=0, i_y=5, pv=1000))

    def test_present_value(self):
        assert tvm.calc_pv(_annual(n=5, i_y=6, fv=10_000)) == pytest.approx(
            -7472.58, abs=0.01
        )

    def test_semiannual_present_value(self):
        data = TVMData(n=20, i_y=5, pmt=30, fv=1000, p_y=2, c_y=2)
        assert tvm.calc_pv(data) == pytest.approx(-1077.95, abs=0.1)

    def test_annuity_due_future_value(self):
        data = TVMData(n=180, i_y=6, pmt=-500, p_y=12, c_y=12, mode=PaymentMode.BEGIN)
        assert tvm.calc_fv(data) == pytest.approx(146136.40, abs=0.1)

    def test_large_future_value(self):
        assert tvm.calc_fv(_annual(n=30, i_y=5, pv=1_000_000)) == pytest.approx(
            -4321942.38, abs=1.0
        )

    def test_periods_at_zero_rate(self):
        assert tvm.calc_n(_annual(pv=1000, pmt=-100)) == pytest.approx(10.0)

    def test_periods_recovers_mortgage_term(self, mortgage):
        mortgage.pmt = tvm.calc_pmt(mortgage)
        assert tvm.calc_n(mortgage) == pytest.approx(360.0, abs=1e-4)

    def test_periods_without_rate_or_payment_rejected(self):
        with pytest.raises(InvalidInputError):
            tvm.calc_n(_annual(pv=1000, fv=-2000))

    def test_payment_below_interest_has_no_solution(self):
        data = TVMData(i_y=12, pv=1000, pmt=-5, p_y=12, c_y=12)
        with pytest.raises(NoSolutionError):
            tvm.calc_n(data)


class TestInterestRateSolver:
    """Newton-Raphson I/Y."""

    def test_bond_yield(self):
        data = _annual(n=10, pv=-950, pmt=60, fv=1000)
        assert tvm.calc_iy(data) == pytest.approx(6.71, abs=0.02)

    def test_recovers_mortgage_rate(self, mortgage):
        mortgage.pmt = tvm.calc_pmt(mortgage)
        assert tvm.calc_iy(mortgage) == pytest.approx(5.4, abs=1e-4)

    def test_closed_form_without_payment(self):
        data = _annual(n=10, pv=-1000, fv=2000)
        assert tvm.calc_iy(data) == pytest.approx((2 ** 0.1 - 1) * 100)

    def test_annuity_due_rate(self):
        data = TVMData(n=15, pmt=-2000, fv=58648.57, p_y=1, c_y=1, mode=PaymentMode.BEGIN)
        assert tvm.calc_iy(data) == pytest.approx(8.0, abs=1e-3)

    def test_all_zero_rejected(self):
        with pytest.raises(InvalidInputError):
            tvm.calc_iy(_annual(n=10))

    def test_non_positive_periods_rejected(self):
        with pytest.raises(InvalidInputError):
            tvm.calc_iy(_annual(n=0, pv=-100, fv=110))

    def test_no_root_exhausts_iterations(self):
        data = _annual(n=10, pv=100, pmt=10, fv=100)
        with pytest.raises(IterationLimitError):
            tvm.calc_iy(data)

    @pytest.mark.parametrize("n", [60, 120, 360])
    def test_recovers_monthly_loan_rate(self, n):
        data = TVMData(n=n, i_y=6, pv=20_000, p_y=12, c_y=12)
        data.pmt = tvm.calc_pmt(data)
        data.i_y = 0.0
        assert tvm.calc_iy(data) == pytest.approx(6.0, abs=1e-6)

    def test_quarterly_compounding_rate(self):
        data = TVMData(n=240, i_y=7.5, pv=150_000, p_y=12, c_y=4)
        data.pmt = tvm.calc_pmt(data)
        assert tvm.calc_iy(data) == pytest.approx(7.5, abs=1e-6)

    def test_closed_form_outside_bounds(self):
        # growth of 1e12 in one period is far above the 1000% cap
        with pytest.raises(IterationLimitError):
            tvm.calc_iy(_annual(n=1, pv=-1, fv=1e12))

    def test_closed_form_at_bound_edge(self):
        assert tvm.calc_iy(_annual(n=1, pv=-1, fv=11)) == pytest.approx(1000.0)


class TestSolveDispatch:
    """solve() and solved()."""

    def test_solve_does_not_mutate(self, mortgage):
        before = replace(mortgage)
        tvm.solve(mortgage, "PMT")
        assert mortgage == before

    def test_solved_writes_only_the_target(self, mortgage):
        result = tvm.solved(mortgage, "PMT")
        assert result.pmt == pytest.approx(-1403.83, abs=0.01)
        assert (result.n, result.i_y, result.pv, result.fv) == (360, 5.4, 250_000, 0)
        assert mortgage.pmt == 0.0

    def test_unknown_variable(self, mortgage):
        with pytest.raises(InvalidInputError):
            tvm.solve(mortgage, "P/Y")

    def test_get_and_set_by_label(self):
        data = TVMData()
        data.set("I/Y", 7)
        assert data.get("I/Y") == 7.0
        assert data.i_y == 7.0

    def test_mode_toggle(self):
        assert PaymentMode.END.toggled() is PaymentMode.BEGIN
        assert PaymentMode.BEGIN.toggled() is PaymentMode.END


class TestAmortization:
    """Closed-form balance and P1..P2 totals."""

    @pytest.fixture
    def loan(self, mortgage):
        return tvm.solved(mortgage, "PMT")

    def test_first_year_totals(self, loan):
        result = tvm.amortize(loan, 1, 12)
        assert result.principal + result.interest == pytest.approx(-loan.pmt * 12)
        assert result.balance == pytest.approx(loan.pv - result.principal)

    def test_first_payment_split(self, loan):
        interest, principal = tvm.period_split(loan, 1)
        assert interest == pytest.approx(250_000 * 0.054 / 12)
        assert interest + principal == pytest.approx(-loan.pmt)

    def test_full_term_repays_principal(self, loan):
        result = tvm.amortize(loan, 1, 360)
        assert result.balance == pytest.approx(0.0, abs=1e-4)
        assert result.principal == pytest.approx(loan.pv, abs=1e-4)

    def test_zero_rate_balance(self):
        data = _annual(n=10, pv=1000, pmt=-100)
        assert tvm.balance_at(data, 4) == pytest.approx(600.0)

    @pytest.mark.parametrize("start,end", [(0, 5), (6, 5)])
    def test_invalid_range(self, loan, start, end):
        with pytest.raises(InvalidInputError):
            tvm.amortize(loan, start, end)

    def test_schedule_frame(self, loan):
        frame = tvm.amortization_schedule(loan)
        assert list(frame.columns) == ["period", "interest", "principal", "balance"]
        assert len(frame) == 360
        assert frame["principal"].sum() == pytest.approx(loan.pv, abs=1e-4)
        assert frame["balance"].iloc[-1] == pytest.approx(0.0, abs=1e-4)

    def test_schedule_matches_range_totals(self, loan):
        frame = tvm.amortization_schedule(loan, 13, 24)
        totals = tvm.amortize(loan, 13, 24)
        assert frame["interest"].sum() == pytest.approx(totals.interest)
        assert frame["period"].tolist() == list(range(13, 25))
