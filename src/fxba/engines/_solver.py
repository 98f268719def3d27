"""
Shared Newton-Raphson loop for the TVM, IRR and bond-yield solvers.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable

from fxba.core.config import (
    DERIVATIVE_FLOOR,
    MAX_ITERATIONS,
    RATE_LOWER_BOUND,
    RATE_UPPER_BOUND,
    TOLERANCE,
)

logger = logging.getLogger(__name__)


def newton(
    func: Callable[[float], tuple[float, float]],
    guess: float,
    *,
    lower: float = RATE_LOWER_BOUND,
    upper: float = RATE_UPPER_BOUND,
    tol: float = TOLERANCE,
    max_iter: int = MAX_ITERATIONS,
    label: str = "newton",
) -> float | None:
    """
    Bounded Newton-Raphson iteration.

    Args:
        func: Returns ``(f(x), f'(x))`` for an iterate ``x``
        guess: Starting point
        lower: Lower bound applied to every iterate
        upper: Upper bound applied to every iterate
        tol: Converge when ``|f| < tol`` or the step is below ``tol``
        max_iter: Iteration budget
        label: Name used in debug logging

    Returns:
        The root, or None when the budget is exhausted, the derivative
        vanishes, ``func`` overflows, or the iterate is pinned against a
        bound.
    """
    x = guess
    for iteration in range(1, max_iter + 1):
        try:
            f, df = func(x)
        except OverflowError:
            logger.debug("%s: overflow evaluating x=%r", label, x)
            return None
        if not (math.isfinite(f) and math.isfinite(df)):
            logger.debug("%s: non-finite value at x=%r", label, x)
            return None
        if abs(f) < tol:
            logger.debug("%s converged on |f| after %d iterations", label, iteration)
            return x
        if abs(df) < DERIVATIVE_FLOOR:
            logger.debug("%s: derivative vanished at x=%r", label, x)
            return None

        raw = x - f / df
        bounded = min(upper, max(lower, raw))
        if abs(bounded - x) < tol:
            if bounded != raw:
                # Stuck at a bound, not a root
                logger.debug("%s: iterate pinned at bound %r", label, bounded)
                return None
            logger.debug("%s converged on step after %d iterations", label, iteration)
            return bounded
        x = bounded

    logger.debug("%s: no convergence in %d iterations", label, max_iter)
    return None
