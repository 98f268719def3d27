"""
Tests for the calculator state machine.
"""

import pytest

from fxba.core.calculator import AppState, Calculator
from fxba.core.config import MAX_INPUT_LENGTH, STO_RCL_TIMEOUT_MS
from fxba.core.errors import ErrorKind, InvalidInputError, NoSolutionError
from fxba.core.events import KeyAction, KeyEvent, parse_keys
from fxba.core.kinds import W
from fxba.core.machine import (
    check_timeout,
    current_variable,
    error_set,
    feed,
    get_worksheet,
    handle_event,
)
from fxba.engines.tvm import PaymentMode


def run(calc, script, now_ms=0):
    return feed(calc, parse_keys(script), now_ms)


class TestNumberEntry:
    """Digits, decimal point, sign and backspace."""

    def test_typing_a_number(self, calc):
        run(calc, "123.45")
        assert calc.display == "123.45"
        assert calc.input_value == pytest.approx(123.45)
        assert calc.state is AppState.INPUT

    def test_leading_zero_is_replaced(self, calc):
        run(calc, "0 5")
        assert calc.display == "5"

    def test_decimal_on_empty_buffer(self, calc):
        handle_event(calc, KeyEvent.simple(KeyAction.DECIMAL), 0)
        assert calc.display == "0."
        assert calc.has_decimal

    def test_second_decimal_point_ignored(self, calc):
        run(calc, "1..2")
        assert calc.display == "1.2"

    def test_buffer_is_capped(self, calc):
        run(calc, "9" * (MAX_INPUT_LENGTH + 5))
        assert len(calc.display) == MAX_INPUT_LENGTH

    def test_negate(self, calc):
        run(calc, "5 +/-")
        assert calc.input_value == -5.0
        assert calc.display_text == "-5"

    def test_backspace_removes_decimal_point(self, calc):
        run(calc, "12. BS")
        assert calc.display == "12"
        assert not calc.has_decimal

    def test_backspace_to_empty_clears_sign(self, calc):
        run(calc, "7 +/- BS")
        assert calc.display == ""
        assert not calc.is_negative
        assert calc.display_text == "0"

    def test_digit_after_cpt_starts_fresh_buffer(self, calc):
        run(calc, "250000 CPT 3")
        assert calc.display == "3"
        assert calc.state is AppState.INPUT

    def test_decimal_after_cpt_starts_fresh_buffer(self, calc):
        run(calc, "42 CPT .5")
        assert calc.display == "0.5"

    def test_number_typed_after_cpt_is_stored(self, calc):
        run(calc, "250000 CPT 3 PV")
        assert calc.tvm.pv == 3.0

    def test_digit_after_result_starts_fresh_buffer(self, calc):
        run(calc, "250000 PV 7")
        assert calc.display == "7"

    def test_clear_entry(self, calc):
        run(calc, "42 CE")
        assert calc.display == ""
        assert calc.state is AppState.INPUT


class TestVariables:
    """Store, recall and compute through variable keys."""

    def test_store_then_show(self, calc):
        run(calc, "100 PV")
        assert calc.tvm.pv == 100.0
        assert calc.state is AppState.RESULT
        assert calc.display_text == "100"

    def test_typing_replaces_a_result(self, calc):
        run(calc, "100 PV 5")
        assert calc.display == "5"
        assert calc.state is AppState.INPUT

    def test_variable_without_typing_only_recalls(self, calc):
        calc.tvm.n = 360
        run(calc, "N")
        assert calc.tvm.n == 360
        assert calc.display_text == "360"

    def test_storing_p_y_sets_c_y(self, calc):
        run(calc, "4 P/Y")
        assert (calc.tvm.p_y, calc.tvm.c_y) == (4.0, 4.0)

    def test_mortgage_payment(self, calc):
        run(calc, "12 P/Y 360 N 5.4 I/Y 250000 PV CPT PMT")
        assert calc.tvm.pmt == pytest.approx(-1403.83, abs=0.01)
        assert calc.state is AppState.RESULT
        assert calc.display_text.startswith("-1403.8")

    def test_fixed_decimals(self, calc):
        calc.set_display_decimals(2)
        run(calc, "12 P/Y 360 N 5.4 I/Y 250000 PV CPT PMT")
        assert calc.display_text == "-1403.83"

    def test_cpt_enter_computes_cursor_variable(self, calc):
        run(calc, "1 P/Y 10 N 1000 PV")
        calc.variable_index = 3
        run(calc, "CPT ENTER")
        assert calc.tvm.pmt == pytest.approx(-100.0)

    def test_enter_stores_into_cursor_variable(self, calc):
        run(calc, "WS:tvm 360 ENTER")
        assert calc.tvm.n == 360.0

    def test_variable_on_another_worksheet(self, calc):
        run(calc, "WS:cashflow 250 tvm:FV")
        assert calc.worksheet == W.CASHFLOW
        assert calc.tvm.fv == 250.0

    def test_non_computable_variable(self, calc):
        run(calc, "CPT P/Y")
        assert calc.state is AppState.ERROR
        assert calc.error_code is ErrorKind.INVALID_INPUT


class TestErrors:
    """ERROR state entry, display and recovery."""

    def test_failed_rate_leaves_registers_untouched(self, calc):
        run(calc, "1 P/Y 10 N 100 PV 10 PMT 100 FV CPT I/Y")
        assert calc.state is AppState.ERROR
        assert calc.error_code is ErrorKind.ITERATION
        assert calc.display_text == "No Converge"
        assert (calc.tvm.n, calc.tvm.pv, calc.tvm.pmt, calc.tvm.fv) == (10, 100, 10, 100)
        assert calc.tvm.i_y == 0.0

    def test_any_key_clears_error_and_is_consumed(self, calc):
        run(calc, "CPT P/Y 5")
        assert calc.state is AppState.INPUT
        assert calc.error_code is None
        assert calc.display == ""

    def test_error_set_from_kind(self, calc):
        calc.tvm.pv = 7
        error_set(calc, ErrorKind.OVERFLOW)
        assert calc.display == "Overflow"
        assert calc.tvm.pv == 7

    def test_error_set_from_exception(self, calc):
        error_set(calc, NoSolutionError())
        assert calc.error_code is ErrorKind.NO_SOLUTION
        assert calc.error_message == "No Solution"

    def test_professional_feature_on_standard(self, calc):
        run(calc, "WS:cashflow -100 CF0 60 C01 60 C02 CPT PB")
        assert calc.state is AppState.ERROR
        assert calc.error_code is ErrorKind.INVALID_INPUT
        assert calc.cashflow_rates.payback == 0.0

    def test_professional_feature_on_professional(self, pro_calc):
        run(pro_calc, "WS:cashflow -100 CF0 50 C01 50 C02 50 C03 CPT PB")
        assert pro_calc.cashflow_rates.payback == pytest.approx(2.0)

    def test_unknown_worksheet_lookup(self):
        with pytest.raises(InvalidInputError):
            get_worksheet("nope")


class TestWorksheets:
    """Selection, cursor, settings and clearing."""

    def test_select_shows_first_variable(self, calc):
        calc.cashflow.cf0 = -500
        run(calc, "WS:cashflow")
        assert calc.worksheet == W.CASHFLOW
        assert calc.variable_index == 0
        assert calc.display_text == "-500"
        assert calc.state is AppState.RESULT

    def test_unknown_worksheet_is_ignored(self, calc):
        run(calc, "WS:nope")
        assert calc.worksheet == W.TVM

    def test_professional_worksheet_ignored_on_standard(self, calc, pro_calc):
        run(calc, "WS:breakeven")
        run(pro_calc, "WS:breakeven")
        assert calc.worksheet == W.TVM
        assert pro_calc.worksheet == W.BREAKEVEN

    def test_cursor_wraps(self, calc):
        run(calc, "UP")
        assert current_variable(calc) == "C/Y"
        assert calc.display_text == "12"
        run(calc, "DOWN DOWN")
        assert current_variable(calc) == "I/Y"

    def test_set_toggles_payment_mode(self, calc):
        run(calc, "SET")
        assert calc.tvm.mode is PaymentMode.BEGIN
        run(calc, "SET")
        assert calc.tvm.mode is PaymentMode.END

    def test_clear_tvm_keeps_frequencies(self, calc):
        run(calc, "4 P/Y 10 N 5 I/Y 100 PV SET CLRTVM")
        assert (calc.tvm.n, calc.tvm.i_y, calc.tvm.pv) == (0, 0, 0)
        assert calc.tvm.p_y == 4.0
        assert calc.tvm.mode is PaymentMode.BEGIN

    def test_clear_worksheet(self, calc):
        run(calc, "WS:cashflow -100 CF0 50 C01 10 I DOWN CLRWORK")
        assert len(calc.cashflow) == 0
        assert calc.cashflow.cf0 == 0.0
        assert calc.cashflow_rates.rate == 0.0
        assert calc.variable_index == 0

    def test_cash_flow_entry_and_npv(self, calc):
        run(calc, "WS:cashflow -1000 CF0 300 C01 2 F01 500 C02 10 I CPT NPV")
        expected = -1000 + 300 / 1.1 + 300 / 1.21 + 500 / 1.331
        assert calc.cashflow_rates.npv == pytest.approx(expected)
        assert calc.cashflow.total_periods == 3

    def test_cash_flow_past_the_end(self, calc):
        run(calc, "WS:cashflow 100 C05")
        assert calc.state is AppState.ERROR
        assert len(calc.cashflow) == 0


class TestMemory:
    """STO/RCL with a slot digit and the timeout."""

    def test_store_and_recall(self, calc):
        run(calc, "42 STO 3")
        assert calc.memory.recall(3) == 42.0
        assert calc.state is AppState.RESULT
        run(calc, "CE RCL 3")
        assert calc.display_text == "42"

    def test_non_digit_cancels_and_is_consumed(self, calc):
        run(calc, "42 STO CPT")
        assert calc.state is AppState.INPUT
        assert calc.memory.sum_all() == 0.0

    def test_timeout_cancels_before_the_digit(self, calc):
        feed(calc, parse_keys("42 STO"), now_ms=0)
        feed(calc, parse_keys("3"), now_ms=STO_RCL_TIMEOUT_MS)
        assert calc.memory.recall(3) == 0.0
        assert calc.state is AppState.INPUT
        assert calc.display == "423"

    def test_digit_within_the_window(self, calc):
        feed(calc, parse_keys("42 STO"), now_ms=0)
        feed(calc, parse_keys("3"), now_ms=STO_RCL_TIMEOUT_MS - 1)
        assert calc.memory.recall(3) == 42.0

    def test_check_timeout(self, calc):
        feed(calc, parse_keys("RCL"), now_ms=1000)
        assert calc.state_deadline == 1000 + STO_RCL_TIMEOUT_MS
        assert check_timeout(calc, 2000) is False
        assert check_timeout(calc, 1000 + STO_RCL_TIMEOUT_MS) is True
        assert calc.state is AppState.INPUT
        assert check_timeout(calc, 10**9) is False


def test_feed_returns_the_calculator():
    calc = Calculator()
    assert feed(calc, []) is calc
