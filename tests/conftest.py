"""
Shared fixtures for the fxba test suite.
"""

import pytest

from fxba.core.calculator import Calculator
from fxba.core.features import CalculatorModel
from fxba.core.utils import reset_warnings
from fxba.engines.cashflow import CashFlowList
from fxba.engines.tvm import TVMData


@pytest.fixture(autouse=True)
def _fresh_warnings():
    """warn_once remembers what it emitted; start every test clean."""
    reset_warnings()
    yield
    reset_warnings()


@pytest.fixture
def calc():
    """Standard-model calculator in its power-on state."""
    return Calculator()


@pytest.fixture
def pro_calc():
    """Professional-model calculator."""
    return Calculator(model=CalculatorModel.PROFESSIONAL)


@pytest.fixture
def mortgage():
    """30-year monthly mortgage of 250,000 at 5.4%, PMT not yet solved."""
    return TVMData(n=360, i_y=5.4, pv=250_000, p_y=12, c_y=12)


@pytest.fixture
def project_flows():
    """Five-year project: -50,000 then 12k, 15k, 18k, 20k, 22k."""
    cf = CashFlowList(cf0=-50_000)
    for amount in (12_000, 15_000, 18_000, 20_000, 22_000):
        cf.add(amount)
    return cf
