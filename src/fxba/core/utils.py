"""
Utility helpers for fxba: display formatting, parsing and warnings.
"""

from __future__ import annotations

import math
import warnings


class FxbaWarning(UserWarning):
    """Warning for recoverable input normalisation (clamped counts, months)."""


# Global set to track warnings per key to avoid spam
_warned: set[tuple[str, str]] = set()


def warn_once(code: str, key: str, msg: str, *, category=FxbaWarning):
    """Warn once per (key, code) to avoid spam."""
    marker = (key, code)
    if marker not in _warned:
        _warned.add(marker)
        warnings.warn(msg, category, stacklevel=3)


def reset_warnings() -> None:
    """Forget which warnings were emitted (used by tests)."""
    _warned.clear()


def format_number(value: float, decimals: int = -1) -> str:
    """
    Format a value for the calculator display.

    Zero shows as ``"0"``. Magnitudes at or above 1e10, or below 1e-9, use
    scientific notation with four decimals. Otherwise nine decimals are
    printed and trailing zeros stripped, unless ``decimals`` fixes the
    number of places (0-9).

    Args:
        value: Number to format
        decimals: Fixed decimal places, or -1 for floating display

    Returns:
        Display string
    """
    if math.isnan(value):
        return "Error"
    if math.isinf(value):
        return "-Inf" if value < 0 else "Inf"
    if value == 0:
        return "0"

    magnitude = abs(value)
    if magnitude >= 1e10 or magnitude < 1e-9:
        return f"{value:.4e}"

    if decimals >= 0:
        text = f"{value:.{decimals}f}"
        # -0.00 after rounding
        if float(text) == 0:
            text = text.lstrip("-")
        return text

    text = f"{value:.9f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def parse_display(text: str) -> float:
    """Parse an input buffer string, treating empty or bare sign as zero."""
    if text in ("", "-", ".", "-."):
        return 0.0
    return float(text)
