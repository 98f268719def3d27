"""
Tests for the reference scenario battery.
"""

import pytest

from fxba.core.errors import NoSolutionError
from fxba.scenarios import (
    SCENARIOS,
    Scenario,
    ScenarioResult,
    run_scenario,
    run_scenarios,
    summarize,
)


@pytest.mark.parametrize("scenario", SCENARIOS, ids=lambda s: s.name)
def test_scenario_passes(scenario):
    result = run_scenario(scenario)
    assert result.passed, f"{result.name}: got {result.actual} ({result.error})"


def test_summarize_full_battery():
    results = run_scenarios()
    assert summarize(results) == (len(SCENARIOS), len(SCENARIOS))


def test_scenario_names_are_unique():
    names = [s.name for s in SCENARIOS]
    assert len(names) == len(set(names))


class TestScenarioResult:
    def test_within_tolerance(self):
        assert ScenarioResult("x", 1.0, 1.05, 0.1).passed

    def test_outside_tolerance(self):
        assert not ScenarioResult("x", 1.0, 1.2, 0.1).passed

    def test_missing_actual_fails(self):
        assert not ScenarioResult("x", 0.0, None, 1e9, error="No Solution").passed

    def test_to_dict(self):
        d = ScenarioResult("x", 1.0, 1.0, 0.0).to_dict()
        assert set(d) == {"name", "expected", "actual", "tolerance", "passed", "error"}
        assert d["passed"] is True


def test_calculator_error_becomes_failed_result():
    def boom():
        raise NoSolutionError("nothing to find")

    result = run_scenario(Scenario("boom", 0.0, 1.0, boom))
    assert result.actual is None
    assert result.error == "No Solution"
    assert summarize(run_scenarios([Scenario("boom", 0.0, 1.0, boom)])) == (0, 1)
