"""
Cooperative event loop and a scripted shell.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable

from .calculator import Calculator
from .config import TICK_MS
from .events import KeyAction, KeyEvent
from .interfaces import ICalculatorShell
from .machine import check_timeout, handle_event

logger = logging.getLogger(__name__)


def run_event_loop(
    shell: ICalculatorShell, calc: Calculator, tick_ms: int = TICK_MS
) -> int:
    """
    Drive ``calc`` from ``shell`` until an OFF key arrives.

    Keys are polled without blocking. When none is pending the STO/RCL
    timeout is checked and the loop sleeps for one tick. The shell renders
    after every handled key and after a timeout fires.

    Returns:
        Number of key events handled
    """
    handled = 0
    shell.render(calc)
    while True:
        event = shell.get_key()
        now = shell.now_ms()
        if event is None:
            if check_timeout(calc, now):
                shell.render(calc)
            shell.sleep_ms(tick_ms)
            continue
        if event.action is KeyAction.OFF:
            logger.debug("event loop stopped after %d keys", handled)
            return handled
        handle_event(calc, event, now)
        handled += 1
        shell.render(calc)


class ScriptedShell:
    """
    Shell that replays a fixed key sequence against a simulated clock.

    Each render appends ``calc.display_text`` to :attr:`frames`. Once the
    script is exhausted an OFF key is delivered, so :func:`run_event_loop`
    always terminates.

    Args:
        events: Keys to deliver, in order; ``None`` entries are idle polls
        key_interval_ms: Simulated time that passes between keys
    """

    def __init__(self, events: Iterable[KeyEvent | None], key_interval_ms: int = 0):
        self._pending: deque[KeyEvent | None] = deque(events)
        self.key_interval_ms = key_interval_ms
        self.clock_ms = 0
        self.frames: list[str] = []

    def get_key(self) -> KeyEvent | None:
        if not self._pending:
            return KeyEvent.simple(KeyAction.OFF)
        self.clock_ms += self.key_interval_ms
        return self._pending.popleft()

    def wait_key(self) -> KeyEvent:
        while True:
            event = self.get_key()
            if event is not None:
                return event
            self.sleep_ms(TICK_MS)

    def now_ms(self) -> int:
        return self.clock_ms

    def sleep_ms(self, ms: int) -> None:
        self.clock_ms += ms

    def render(self, calc: Calculator) -> None:
        self.frames.append(calc.display_text)
