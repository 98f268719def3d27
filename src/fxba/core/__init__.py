"""
Core module for fxba.

This module contains the calculator aggregate, the state machine that drives
it, and the shared plumbing (errors, configuration, events, features, memory)
the engines and worksheets are built on.
"""

from .calculator import AppState, Calculator
from .errors import (
    CalculatorError,
    CapacityError,
    ErrorKind,
    InvalidInputError,
    IterationLimitError,
    MultipleIRRError,
    NoSolutionError,
    NumericOverflowError,
)
from .events import KeyAction, KeyEvent, keys_for_number, parse_keys
from .features import CalculatorModel, Feature, is_available
from .interfaces import ICalculatorShell, IWorksheet, WorksheetRegistry
from .kinds import W
from .loop import ScriptedShell, run_event_loop
from .machine import check_timeout, feed, handle_event
from .memory import MemoryRegisters
from .utils import FxbaWarning, format_number

__all__ = [
    "AppState",
    "Calculator",
    "CalculatorError",
    "CalculatorModel",
    "CapacityError",
    "ErrorKind",
    "Feature",
    "FxbaWarning",
    "ICalculatorShell",
    "IWorksheet",
    "InvalidInputError",
    "IterationLimitError",
    "KeyAction",
    "KeyEvent",
    "MemoryRegisters",
    "MultipleIRRError",
    "NoSolutionError",
    "NumericOverflowError",
    "ScriptedShell",
    "W",
    "WorksheetRegistry",
    "check_timeout",
    "feed",
    "format_number",
    "handle_event",
    "is_available",
    "keys_for_number",
    "parse_keys",
    "run_event_loop",
]
