"""
Calculator state machine.

Every function takes the :class:`~fxba.core.calculator.Calculator` to act on,
mutates it and returns. :func:`handle_event` is the single entry point a shell
needs; the smaller helpers are public so shells and tests can drive one
transition at a time.

Solver failures arrive as :class:`~fxba.core.errors.CalculatorError`
exceptions. This module is the only place that turns them into the ERROR
state, and it does so before any register is written, so a failed compute
leaves every worksheet exactly as it was.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .calculator import AppState, Calculator
from .config import MAX_INPUT_LENGTH, MEMORY_SLOTS, STO_RCL_TIMEOUT_MS
from .errors import CalculatorError, ErrorKind, InvalidInputError, error_message
from .events import KeyAction, KeyEvent
from .features import is_available
from .interfaces import IWorksheet, WorksheetRegistry

logger = logging.getLogger(__name__)


def get_worksheet(kind: str) -> IWorksheet:
    """
    Look up the registered strategy for a worksheet kind.

    Raises:
        InvalidInputError: If no worksheet is registered under ``kind``
    """
    try:
        return WorksheetRegistry[kind]
    except KeyError:
        raise InvalidInputError(f"unknown worksheet {kind!r}") from None


def current_variable(calc: Calculator) -> str:
    """Label under the cursor of the active worksheet."""
    labels = get_worksheet(calc.worksheet).variables(calc)
    return labels[calc.variable_index % len(labels)]


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


def error_set(calc: Calculator, error: CalculatorError | ErrorKind) -> None:
    """Enter ERROR showing the short message for ``error``. Registers are kept."""
    kind = error if isinstance(error, ErrorKind) else error.kind
    calc.error_code = kind
    calc.error_message = error_message(kind)
    calc.display = calc.error_message
    calc.has_decimal = False
    calc.is_negative = False
    calc.state_deadline = 0
    calc.state = AppState.ERROR
    logger.debug("error %s: %s", kind.name, error)


def error_clear(calc: Calculator) -> None:
    """Leave ERROR for INPUT, clearing only the display."""
    calc.error_code = None
    calc.error_message = ""
    calc.clear_input()
    calc.state = AppState.INPUT


# ---------------------------------------------------------------------------
# Input buffer
# ---------------------------------------------------------------------------


def _begin_entry(calc: Calculator) -> None:
    # A shown result or an armed CPT is replaced by the next number typed
    if calc.state in (AppState.RESULT, AppState.COMPUTE):
        calc.clear_input()
    calc.state = AppState.INPUT


def append_digit(calc: Calculator, digit: int) -> None:
    if not 0 <= digit <= 9:
        return
    _begin_entry(calc)
    if len(calc.display) >= MAX_INPUT_LENGTH:
        return
    if calc.display == "0":
        calc.display = str(digit)
    else:
        calc.display += str(digit)


def append_decimal(calc: Calculator) -> None:
    _begin_entry(calc)
    if calc.has_decimal or len(calc.display) >= MAX_INPUT_LENGTH:
        return
    calc.display = (calc.display or "0") + "."
    calc.has_decimal = True


def toggle_negative(calc: Calculator) -> None:
    calc.is_negative = not calc.is_negative


def backspace(calc: Calculator) -> None:
    if not calc.display:
        return
    if calc.display[-1] == ".":
        calc.has_decimal = False
    calc.display = calc.display[:-1]
    if not calc.display:
        calc.is_negative = False
    if calc.state is AppState.RESULT:
        calc.state = AppState.INPUT


def clear_entry(calc: Calculator) -> None:
    calc.clear_input()
    calc.state_deadline = 0
    calc.state = AppState.INPUT


# ---------------------------------------------------------------------------
# Variables and worksheets
# ---------------------------------------------------------------------------


def _show(calc: Calculator, value: float) -> None:
    calc.show_value(value)
    calc.state = AppState.RESULT


def _show_recalled(calc: Calculator, ws: IWorksheet, var: str) -> None:
    calc.clear_input()
    try:
        value = ws.recall(calc, var)
    except CalculatorError as exc:
        error_set(calc, exc)
        return
    _show(calc, value)


def compute_variable(calc: Calculator, var: str, kind: str | None = None) -> None:
    """Solve ``var`` on a worksheet, record it and show it, or enter ERROR."""
    try:
        ws = get_worksheet(kind or calc.worksheet)
        value = ws.compute(calc, var)
        ws.record(calc, var, value)
    except CalculatorError as exc:
        error_set(calc, exc)
        return
    logger.debug("cpt %s/%s -> %r", ws.kind, var, value)
    _show(calc, value)


def enter_variable(calc: Calculator, var: str, kind: str | None = None) -> None:
    """Store the buffer into ``var`` if anything was typed, then show ``var``."""
    try:
        ws = get_worksheet(kind or calc.worksheet)
        if calc.display and ws.is_storable(calc, var):
            ws.store(calc, var, calc.input_value)
        value = ws.recall(calc, var)
    except CalculatorError as exc:
        error_set(calc, exc)
        return
    _show(calc, value)


def press_variable(calc: Calculator, var: str, kind: str | None = None) -> None:
    """A variable key: compute after CPT, otherwise store-and-show."""
    if calc.state is AppState.COMPUTE:
        compute_variable(calc, var, kind)
    else:
        enter_variable(calc, var, kind)


def press_cpt(calc: Calculator) -> None:
    calc.state = AppState.COMPUTE


def select_worksheet(calc: Calculator, kind: str | None) -> None:
    """Make ``kind`` active; unknown or unavailable sheets are ignored."""
    ws = WorksheetRegistry.get(kind or "")
    if ws is None:
        logger.debug("ignoring unknown worksheet %r", kind)
        return
    if ws.feature is not None and not is_available(calc.model, ws.feature):
        logger.debug("worksheet %s not available on %s", kind, calc.model.name)
        return
    calc.worksheet = ws.kind
    calc.variable_index = 0
    _show_recalled(calc, ws, current_variable(calc))


def move_cursor(calc: Calculator, step: int) -> None:
    ws = get_worksheet(calc.worksheet)
    labels = ws.variables(calc)
    calc.variable_index = (calc.variable_index + step) % len(labels)
    _show_recalled(calc, ws, labels[calc.variable_index])


def cycle_setting(calc: Calculator) -> None:
    get_worksheet(calc.worksheet).cycle_setting(calc)


def clear_worksheet(calc: Calculator) -> None:
    get_worksheet(calc.worksheet).reset(calc)
    calc.variable_index = 0
    clear_entry(calc)


def clear_tvm(calc: Calculator) -> None:
    calc.reset_tvm()


# ---------------------------------------------------------------------------
# Memory
# ---------------------------------------------------------------------------


def arm_memory(calc: Calculator, state: AppState, now_ms: int) -> None:
    """Wait up to the STO/RCL timeout for a slot digit."""
    calc.state = state
    calc.state_deadline = now_ms + STO_RCL_TIMEOUT_MS


def memory_digit(calc: Calculator, slot: int) -> None:
    """Complete a pending STO or RCL on ``slot``."""
    if not 0 <= slot < MEMORY_SLOTS:
        cancel_memory(calc)
        return
    if calc.state is AppState.WAIT_STO:
        value = calc.input_value
        calc.memory.store(slot, value)
    else:
        value = calc.memory.recall(slot)
    calc.state_deadline = 0
    calc.clear_input()
    _show(calc, value)


def cancel_memory(calc: Calculator) -> None:
    calc.state_deadline = 0
    calc.state = AppState.INPUT


def check_timeout(calc: Calculator, now_ms: int) -> bool:
    """
    Expire a pending STO/RCL whose deadline has passed.

    Returns:
        True if the state changed
    """
    if calc.state not in (AppState.WAIT_STO, AppState.WAIT_RCL):
        return False
    if calc.state_deadline and now_ms >= calc.state_deadline:
        logger.debug("%s timed out", calc.state.name)
        cancel_memory(calc)
        return True
    return False


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


def handle_event(calc: Calculator, event: KeyEvent, now_ms: int) -> None:
    """
    Apply one key event.

    In ERROR any key only clears the error. While waiting for a memory slot,
    a digit completes the operation and any other key cancels it; in both
    cases the key is consumed.
    """
    check_timeout(calc, now_ms)

    if calc.state is AppState.ERROR:
        error_clear(calc)
        return

    action = event.action
    if calc.state in (AppState.WAIT_STO, AppState.WAIT_RCL):
        if action is KeyAction.DIGIT and event.digit is not None:
            memory_digit(calc, event.digit)
        else:
            cancel_memory(calc)
        return

    if action is KeyAction.DIGIT:
        if event.digit is not None:
            append_digit(calc, event.digit)
    elif action is KeyAction.DECIMAL:
        append_decimal(calc)
    elif action is KeyAction.NEGATE:
        toggle_negative(calc)
    elif action is KeyAction.BACKSPACE:
        backspace(calc)
    elif action is KeyAction.CLEAR:
        clear_entry(calc)
    elif action is KeyAction.CLEAR_WORK:
        clear_worksheet(calc)
    elif action is KeyAction.CLEAR_TVM:
        clear_tvm(calc)
    elif action is KeyAction.CPT:
        press_cpt(calc)
    elif action is KeyAction.VARIABLE:
        if event.var:
            press_variable(calc, event.var, event.worksheet)
    elif action is KeyAction.ENTER:
        press_variable(calc, current_variable(calc))
    elif action is KeyAction.UP:
        move_cursor(calc, -1)
    elif action is KeyAction.DOWN:
        move_cursor(calc, 1)
    elif action is KeyAction.SET:
        cycle_setting(calc)
    elif action is KeyAction.WORKSHEET:
        select_worksheet(calc, event.worksheet)
    elif action is KeyAction.STO:
        arm_memory(calc, AppState.WAIT_STO, now_ms)
    elif action is KeyAction.RCL:
        arm_memory(calc, AppState.WAIT_RCL, now_ms)


def feed(calc: Calculator, events: Iterable[KeyEvent], now_ms: int = 0) -> Calculator:
    """Apply a sequence of events at a fixed time. Returns ``calc``."""
    for event in events:
        handle_event(calc, event, now_ms)
    return calc

