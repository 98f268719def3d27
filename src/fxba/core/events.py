"""
Key events consumed by the calculator state machine.
"""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple, Optional


class KeyAction(Enum):
    """Logical key actions, already decoded from raw key codes by the shell."""

    DIGIT = "digit"
    DECIMAL = "decimal"
    NEGATE = "negate"
    BACKSPACE = "backspace"
    CLEAR = "clear"  # CE/C: clear entry
    CLEAR_WORK = "clear_work"  # reset the active worksheet
    CLEAR_TVM = "clear_tvm"
    CPT = "cpt"
    VARIABLE = "variable"
    ENTER = "enter"
    UP = "up"
    DOWN = "down"
    SET = "set"  # cycle worksheet setting (BGN/END, method, ...)
    WORKSHEET = "worksheet"
    STO = "sto"
    RCL = "rcl"
    OFF = "off"  # ends the event loop


class KeyEvent(NamedTuple):
    """
    A decoded key press.

    Attributes:
        action: What the key does
        digit: 0-9 for DIGIT events
        var: Variable label for VARIABLE events (e.g. "PMT", "NPV")
        worksheet: Worksheet kind for WORKSHEET events, or to address a
            variable on a worksheet other than the active one
    """

    action: KeyAction
    digit: Optional[int] = None
    var: Optional[str] = None
    worksheet: Optional[str] = None

    @classmethod
    def digit_key(cls, d: int) -> KeyEvent:
        return cls(KeyAction.DIGIT, digit=d)

    @classmethod
    def variable(cls, var: str, worksheet: str | None = None) -> KeyEvent:
        return cls(KeyAction.VARIABLE, var=var, worksheet=worksheet)

    @classmethod
    def select(cls, worksheet: str) -> KeyEvent:
        return cls(KeyAction.WORKSHEET, worksheet=worksheet)

    @classmethod
    def simple(cls, action: KeyAction) -> KeyEvent:
        return cls(action)


def keys_for_number(text: str) -> list[KeyEvent]:
    """
    Build the key sequence that types ``text`` into the input buffer.

    A leading ``-`` is typed as a trailing sign change, like on the keypad.
    """
    negative = text.startswith("-")
    body = text[1:] if negative else text
    events: list[KeyEvent] = []
    for ch in body:
        if ch == ".":
            events.append(KeyEvent.simple(KeyAction.DECIMAL))
        elif ch.isdigit():
            events.append(KeyEvent.digit_key(int(ch)))
        else:
            raise ValueError(f"cannot type {ch!r} on the keypad")
    if negative:
        events.append(KeyEvent.simple(KeyAction.NEGATE))
    return events


_KEY_WORDS = {
    "CPT": KeyAction.CPT,
    "ENTER": KeyAction.ENTER,
    "UP": KeyAction.UP,
    "DOWN": KeyAction.DOWN,
    "SET": KeyAction.SET,
    "STO": KeyAction.STO,
    "RCL": KeyAction.RCL,
    "CE": KeyAction.CLEAR,
    "CLRWORK": KeyAction.CLEAR_WORK,
    "CLRTVM": KeyAction.CLEAR_TVM,
    "+/-": KeyAction.NEGATE,
    "BS": KeyAction.BACKSPACE,
    "OFF": KeyAction.OFF,
}


def parse_keys(script: str) -> list[KeyEvent]:
    """
    Parse a whitespace-separated key script.

    Numbers are typed digit by digit, ``WS:<kind>`` selects a worksheet, the
    words in ``_KEY_WORDS`` map to their keys and any other token is a
    variable label on the active worksheet (``NPV``) or, written as
    ``<kind>:<label>``, on a named one (``tvm:PMT``).
    """
    events: list[KeyEvent] = []
    for token in script.split():
        word = token.upper()
        if word in _KEY_WORDS:
            events.append(KeyEvent.simple(_KEY_WORDS[word]))
        elif token[0].isdigit() or token[0] == "." or (
            token[0] == "-" and len(token) > 1 and token[1] != "/"
        ):
            events.extend(keys_for_number(token))
        elif word.startswith("WS:"):
            events.append(KeyEvent.select(token[3:].lower()))
        elif ":" in token:
            kind, _, var = token.partition(":")
            events.append(KeyEvent.variable(var.upper(), kind.lower()))
        else:
            events.append(KeyEvent.variable(word))
    return events
