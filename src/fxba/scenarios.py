"""
Reference scenario battery.

Each scenario sets up worksheet registers, runs one or more solvers and
compares the outcome against a textbook answer within a tolerance. The
battery backs ``fxba selftest`` and doubles as an end-to-end check of the
engines.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace

from fxba.core.calculator import Calculator
from fxba.core.errors import CalculatorError
from fxba.core.events import parse_keys
from fxba.core.machine import feed
from fxba.engines import cashflow, tvm
from fxba.engines.bond import BondInput, price_from_yield
from fxba.engines.cashflow import CashFlowList
from fxba.engines.depreciation import DepreciationInput, DepreciationMethod, depreciate
from fxba.engines.statistics import StatData, one_var
from fxba.engines.tvm import PaymentMode, TVMData

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Scenario:
    name: str
    expected: float
    tolerance: float
    run: Callable[[], float]


@dataclass(frozen=True)
class ScenarioResult:
    """
    Outcome of one scenario.

    Attributes:
        actual: Computed value, or None if the scenario raised
        error: Message of an unexpected CalculatorError, else ""
    """

    name: str
    expected: float
    actual: float | None
    tolerance: float
    error: str = ""

    @property
    def passed(self) -> bool:
        if self.actual is None:
            return False
        return abs(self.actual - self.expected) <= self.tolerance

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "expected": self.expected,
            "actual": self.actual,
            "tolerance": self.tolerance,
            "passed": self.passed,
            "error": self.error,
        }


def _tvm(**values) -> TVMData:
    data = TVMData(p_y=1.0, c_y=1.0)
    return replace(data, **values)


def _flows(cf0: float, *groups: tuple[float, int]) -> CashFlowList:
    cf = CashFlowList(cf0=cf0)
    for amount, count in groups:
        cf.add(amount, count)
    return cf


def _mortgage_payment() -> float:
    return tvm.calc_pmt(_tvm(n=360, i_y=5.4, pv=250_000, p_y=12, c_y=12))


def _mortgage_payment_keypad() -> float:
    calc = feed(Calculator(), parse_keys("12 P/Y 360 N 5.4 I/Y 250000 PV CPT PMT"))
    return calc.tvm.pmt


def _retirement_chain() -> float:
    saved = tvm.calc_fv(_tvm(n=30, i_y=2.5, pv=-80_000))
    real_rate = (1.05 / 1.025 - 1.0) * 100.0
    needed = tvm.calc_pv(
        _tvm(n=25, i_y=real_rate, pmt=-abs(saved), mode=PaymentMode.BEGIN)
    )
    return tvm.calc_pmt(_tvm(n=30, i_y=8, fv=abs(needed)))


def _horizon_yield() -> float:
    coupons = tvm.calc_fv(_tvm(n=3, i_y=6, pmt=80))
    sale = tvm.calc_pv(_tvm(n=7, i_y=7, pmt=80, fv=1000))
    return tvm.calc_iy(_tvm(n=3, pv=-1000, fv=abs(coupons) + abs(sale)))


def _dirty_to_clean() -> float:
    pv = tvm.calc_pv(_tvm(n=6.71, i_y=6, pmt=5, fv=100))
    return pv - 5 * 3.5 / 12


def _sample_sd() -> float:
    stat = StatData()
    for x in (12, -5, 8, 15):
        stat.add_x(x)
    return one_var(stat).sx


def _mean(*xs: float) -> float:
    stat = StatData()
    for x in xs:
        stat.add_x(x)
    return one_var(stat).mean


def _depreciation(method: DepreciationMethod) -> float:
    asset = DepreciationInput(cost=10_000, salvage=1_000, life=5)
    return depreciate(asset, method, 1).depreciation


def _bond_price() -> float:
    terms = BondInput(
        settlement=20240101,
        maturity=20340101,
        coupon_rate=6,
        redemption=100,
        frequency=2,
        day_count="30/360",
    )
    return price_from_yield(terms, 5)


def _irr_without_sign_change() -> float:
    try:
        cashflow.irr(_flows(1000, (500, 1), (500, 1)))
    except CalculatorError as exc:
        return float(exc.code)
    return 0.0


_PROJECT = _flows(-50_000, (12_000, 1), (15_000, 1), (18_000, 1), (20_000, 1), (22_000, 1))

SCENARIOS: list[Scenario] = [
    Scenario("Mortgage payment", -1403.83, 0.01, _mortgage_payment),
    Scenario("Mortgage payment (keypad)", -1403.83, 0.01, _mortgage_payment_keypad),
    Scenario(
        "20-year savings payment",
        -24392.92,
        0.01,
        lambda: tvm.calc_pmt(_tvm(n=20, i_y=7, fv=1_000_000)),
    ),
    Scenario(
        "Present value of 10000",
        -7472.58,
        0.01,
        lambda: tvm.calc_pv(_tvm(n=5, i_y=6, fv=10_000)),
    ),
    Scenario("Project NPV", 14149.99, 0.10, lambda: cashflow.npv(_PROJECT, 0.10)),
    Scenario("Project IRR", 0.1935, 0.005, lambda: cashflow.irr(_PROJECT)),
    Scenario(
        "Semiannual bond PV",
        -1077.95,
        0.10,
        lambda: tvm.calc_pv(_tvm(n=20, i_y=5, pmt=30, fv=1000, p_y=2, c_y=2)),
    ),
    Scenario(
        "Annuity due FV",
        146136.40,
        0.10,
        lambda: tvm.calc_fv(
            _tvm(n=180, i_y=6, pmt=-500, p_y=12, c_y=12, mode=PaymentMode.BEGIN)
        ),
    ),
    Scenario(
        "Car loan payment",
        -2027.64,
        0.01,
        lambda: tvm.calc_pmt(_tvm(n=60, i_y=8, pv=100_000, p_y=12, c_y=12)),
    ),
    Scenario(
        "Uneven NPV",
        27480.41,
        0.10,
        lambda: cashflow.npv(
            _flows(-100_000, (25_000, 3), (35_000, 2), (50_000, 1)), 0.12
        ),
    ),
    Scenario("Retirement chain payment", -28153.50, 5.00, _retirement_chain),
    Scenario(
        "Annuity due savings FV",
        58648.57,
        0.10,
        lambda: tvm.calc_fv(_tvm(n=15, i_y=8, pmt=-2000, mode=PaymentMode.BEGIN)),
    ),
    Scenario(
        "Short project NPV",
        -210.38,
        0.10,
        lambda: cashflow.npv(_flows(-10_000, (3000, 1), (4000, 1), (5000, 1)), 0.10),
    ),
    Scenario(
        "Bond yield",
        6.71,
        0.02,
        lambda: tvm.calc_iy(_tvm(n=10, pv=-950, pmt=60, fv=1000)),
    ),
    Scenario("Price less accrued coupon", -96.06, 0.5, _dirty_to_clean),
    Scenario(
        "Dividend NPV",
        45.82,
        0.10,
        lambda: cashflow.npv(_flows(0, (2.40, 1), (52.80, 1)), 0.10),
    ),
    Scenario("Sample standard deviation", 8.81, 0.20, _sample_sd),
    Scenario("Horizon yield", 9.38, 0.02, _horizon_yield),
    Scenario(
        "Straight-line depreciation",
        1800.0,
        0.01,
        lambda: _depreciation(DepreciationMethod.SL),
    ),
    Scenario(
        "Sum-of-years depreciation",
        3000.0,
        0.01,
        lambda: _depreciation(DepreciationMethod.SYD),
    ),
    Scenario(
        "Double declining balance",
        4000.0,
        0.01,
        lambda: _depreciation(DepreciationMethod.DB),
    ),
    Scenario("Bond price at 5% yield", 107.79, 0.5, _bond_price),
    Scenario("Mean of five points", 30.0, 0.001, lambda: _mean(10, 20, 30, 40, 50)),
    Scenario(
        "Zero-rate payment",
        -100.0,
        1e-9,
        lambda: tvm.calc_pmt(_tvm(n=10, pv=1000)),
    ),
    Scenario(
        "Zero PV and FV payment",
        0.0,
        1e-9,
        lambda: tvm.calc_pmt(_tvm(n=10, i_y=5)),
    ),
    Scenario("IRR without sign change (error code)", 1.0, 0.0, _irr_without_sign_change),
    Scenario(
        "Large future value",
        -4321942.38,
        1.0,
        lambda: tvm.calc_fv(_tvm(n=30, i_y=5, pv=1_000_000)),
    ),
    Scenario("Single point mean", 42.0, 0.001, lambda: _mean(42)),
]


def run_scenario(scenario: Scenario) -> ScenarioResult:
    try:
        actual = float(scenario.run())
    except CalculatorError as exc:
        logger.debug("scenario %r raised %s", scenario.name, exc.kind.name)
        return ScenarioResult(
            scenario.name,
            scenario.expected,
            None,
            scenario.tolerance,
            error=exc.kind.message,
        )
    return ScenarioResult(scenario.name, scenario.expected, actual, scenario.tolerance)


def run_scenarios(scenarios: list[Scenario] | None = None) -> list[ScenarioResult]:
    """Run the battery (or ``scenarios``) and return one result per case."""
    return [run_scenario(s) for s in (SCENARIOS if scenarios is None else scenarios)]


def summarize(results: list[ScenarioResult]) -> tuple[int, int]:
    """``(passed, total)``."""
    return sum(r.passed for r in results), len(results)
