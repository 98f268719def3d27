"""
Property-based tests using Hypothesis for solver round trips and register
identities.
"""

import pytest
from hypothesis import assume, given, settings
from hypothesis import strategies as st

from fxba.core.config import MEMORY_SLOTS
from fxba.core.memory import MemoryRegisters
from fxba.engines import bond, cashflow, depreciation, tvm
from fxba.engines.bond import BondInput
from fxba.engines.cashflow import CashFlowList
from fxba.engines.depreciation import DepreciationInput, DepreciationMethod
from fxba.engines.tvm import PaymentMode, TVMData

pytestmark = pytest.mark.property

finite = dict(allow_infinity=False, allow_nan=False)

rate_strategy = st.floats(min_value=0.5, max_value=15.0, **finite).map(
    lambda x: round(x, 4)
)

monetary_amount_strategy = st.floats(min_value=1000.0, max_value=1_000_000.0, **finite).map(
    lambda x: round(x, 2)
)


class TestBondProperties:
    """Price and yield are inverses."""

    @given(
        yield_=rate_strategy,
        coupon=st.floats(min_value=0.0, max_value=12.0, **finite).map(lambda x: round(x, 3)),
        years=st.integers(min_value=1, max_value=30),
        frequency=st.sampled_from([1, 2, 4, 12]),
    )
    @settings(max_examples=50, deadline=None)
    def test_yield_from_price_recovers_yield(self, yield_, coupon, years, frequency):
        terms = BondInput(
            settlement=20240101,
            maturity=20240101 + years * 10000,
            coupon_rate=coupon,
            frequency=frequency,
            day_count="30/360",
        )
        price = bond.price_from_yield(terms, yield_)
        assert bond.yield_from_price(terms, price) == pytest.approx(yield_, abs=1e-5)


class TestCashFlowProperties:
    """NPV vanishes at the IRR."""

    @given(
        cf0=st.floats(min_value=100.0, max_value=100_000.0, **finite),
        weights=st.lists(
            st.floats(min_value=0.1, max_value=1.0, **finite), min_size=1, max_size=10
        ),
        multiple=st.floats(min_value=1.2, max_value=3.0, **finite),
    )
    @settings(max_examples=50, deadline=None)
    def test_npv_at_irr_is_zero(self, cf0, weights, multiple):
        total = cf0 * multiple
        scale = total / sum(weights)
        cf = CashFlowList(cf0=-cf0)
        for w in weights:
            cf.add(w * scale)
        inflow = sum(f.amount for f in cf.flows)
        assume(1.2 * cf0 <= inflow <= 3.0 * cf0 + 1e-6)

        rate = cashflow.irr(cf)
        assert rate > 0
        assert cashflow.npv(cf, rate) == pytest.approx(0.0, abs=1e-6 * cf0 + 1e-3)

    @given(rate=st.floats(min_value=0.0, max_value=0.5, **finite))
    @settings(max_examples=30, deadline=None)
    def test_nfv_is_npv_compounded(self, rate):
        cf = CashFlowList(cf0=-1000)
        cf.add(300, 2)
        cf.add(700, 1)
        expected = cashflow.npv(cf, rate) * (1 + rate) ** cf.total_periods
        assert cashflow.nfv(cf, rate) == pytest.approx(expected, rel=1e-9, abs=1e-6)


class TestTVMProperties:
    """Solving for one variable and back recovers the inputs."""

    @given(
        n=st.integers(min_value=1, max_value=360),
        i_y=st.floats(min_value=0.0, max_value=20.0, **finite).map(lambda x: round(x, 3)),
        pv=monetary_amount_strategy,
    )
    @settings(max_examples=50, deadline=None)
    def test_amortized_principal_sums_to_pv(self, n, i_y, pv):
        loan = tvm.solved(TVMData(n=n, i_y=i_y, pv=pv, p_y=12, c_y=12), "PMT")
        result = tvm.amortize(loan, 1, n)
        assert result.principal == pytest.approx(pv, rel=1e-6)
        assert result.balance == pytest.approx(0.0, abs=1e-6 * pv)

    @given(
        n=st.integers(min_value=1, max_value=120),
        i_y=rate_strategy,
        pmt=st.floats(min_value=-5_000.0, max_value=-1.0, **finite),
        fv=st.floats(min_value=0.0, max_value=100_000.0, **finite),
        mode=st.sampled_from(list(PaymentMode)),
    )
    @settings(max_examples=50, deadline=None)
    def test_present_value_round_trip(self, n, i_y, pmt, fv, mode):
        data = TVMData(n=n, i_y=i_y, pmt=pmt, fv=fv, p_y=1, c_y=1, mode=mode)
        with_pv = tvm.solved(data, "PV")
        assert tvm.calc_fv(with_pv) == pytest.approx(fv, rel=1e-9, abs=1e-6 * max(abs(pmt) * n, 1.0))


class TestDepreciationProperties:
    @given(
        cost=monetary_amount_strategy,
        salvage_share=st.floats(min_value=0.0, max_value=0.5, **finite),
        life=st.integers(min_value=1, max_value=20),
        method=st.sampled_from(list(DepreciationMethod)),
    )
    @settings(max_examples=50, deadline=None)
    def test_book_value_never_below_salvage(self, cost, salvage_share, life, method):
        asset = DepreciationInput(cost=cost, salvage=cost * salvage_share, life=life)
        for year in range(1, life + 3):
            result = depreciation.depreciate(asset, method, year)
            assert result.book_value_end >= asset.salvage - 1e-6
            assert result.depreciation >= 0.0


class TestMemoryProperties:
    @given(
        slot=st.integers(min_value=-5, max_value=MEMORY_SLOTS + 5),
        value=st.floats(min_value=-1e12, max_value=1e12, **finite),
    )
    def test_store_is_idempotent(self, slot, value):
        memory = MemoryRegisters()
        memory.store(slot, value)
        first = memory.recall(slot)
        memory.store(slot, value)
        assert memory.recall(slot) == first
        if 0 <= slot < MEMORY_SLOTS:
            assert first == value
        else:
            assert first == 0.0
            assert memory.sum_all() == 0.0
