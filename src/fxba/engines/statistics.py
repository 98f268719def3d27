"""
Statistics engine: 1- and 2-variable statistics, regression and prediction.

Data points are held in plain lists (at most 50) and converted to numpy
arrays for each computation. A point entered without a y value takes part
in 1-variable statistics only.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from fxba.core.config import STAT_MAX_POINTS
from fxba.core.errors import CapacityError


class RegressionType(Enum):
    LIN = "LIN"  # y = a + b*x
    LOG = "LOG"  # y = a + b*ln(x)
    EXP = "EXP"  # y = a * e^(b*x)
    PWR = "PWR"  # y = a * x^b

    def next(self) -> RegressionType:
        members = list(RegressionType)
        return members[(members.index(self) + 1) % len(members)]


@dataclass
class StatData:
    """Parallel x/y data with a per-point has-y flag."""

    x: list[float] = field(default_factory=list)
    y: list[float] = field(default_factory=list)
    has_y: list[bool] = field(default_factory=list)
    regression: RegressionType = RegressionType.LIN

    def __len__(self) -> int:
        return len(self.x)

    def _append(self, x: float, y: float, has_y: bool) -> int:
        if len(self.x) >= STAT_MAX_POINTS:
            raise CapacityError(STAT_MAX_POINTS, "statistics points")
        self.x.append(float(x))
        self.y.append(float(y))
        self.has_y.append(has_y)
        return len(self.x) - 1

    def add_x(self, x: float) -> int:
        """Add a 1-variable point. Raises CapacityError past 50 points."""
        return self._append(x, 0.0, False)

    def add_xy(self, x: float, y: float) -> int:
        """Add a 2-variable point. Raises CapacityError past 50 points."""
        return self._append(x, y, True)

    def set_y(self, index: int, y: float) -> None:
        """Attach a y value to an existing point; no-op when out of range."""
        if 0 <= index < len(self.x):
            self.y[index] = float(y)
            self.has_y[index] = True

    def remove_last(self) -> None:
        if self.x:
            self.x.pop()
            self.y.pop()
            self.has_y.pop()

    def clear(self) -> None:
        self.x.clear()
        self.y.clear()
        self.has_y.clear()

    def xs(self) -> np.ndarray:
        return np.asarray(self.x, dtype=float)

    def pairs(self) -> tuple[np.ndarray, np.ndarray]:
        """x and y arrays restricted to points that carry a y value."""
        mask = np.asarray(self.has_y, dtype=bool)
        if mask.size == 0:
            return np.zeros(0), np.zeros(0)
        return self.xs()[mask], np.asarray(self.y, dtype=float)[mask]


@dataclass(frozen=True)
class OneVarResult:
    n: int = 0
    sum_x: float = 0.0
    sum_x2: float = 0.0
    mean: float = 0.0
    sx: float = 0.0
    sigma_x: float = 0.0
    min: float = 0.0
    max: float = 0.0


@dataclass(frozen=True)
class TwoVarResult:
    n: int = 0
    sum_x: float = 0.0
    sum_x2: float = 0.0
    sum_y: float = 0.0
    sum_y2: float = 0.0
    sum_xy: float = 0.0
    mean_x: float = 0.0
    mean_y: float = 0.0
    sx: float = 0.0
    sy: float = 0.0
    sigma_x: float = 0.0
    sigma_y: float = 0.0


@dataclass(frozen=True)
class RegressionResult:
    regression: RegressionType = RegressionType.LIN
    a: float = 0.0
    b: float = 0.0
    r: float = 0.0
    n: int = 0

    @property
    def r_squared(self) -> float:
        return self.r * self.r


def _spread(n: int, total: float, total_sq: float) -> tuple[float, float, float]:
    """Mean, sample and population standard deviation from running sums."""
    mean = total / n
    population = max(total_sq / n - mean * mean, 0.0)
    sample = 0.0
    if n > 1:
        sample = max((total_sq - n * mean * mean) / (n - 1), 0.0)
    return mean, math.sqrt(sample), math.sqrt(population)


def one_var(stat: StatData) -> OneVarResult:
    """1-variable statistics over every point's x value."""
    xs = stat.xs()
    n = xs.size
    if n == 0:
        return OneVarResult()
    total = float(xs.sum())
    total_sq = float(np.dot(xs, xs))
    mean, sx, sigma = _spread(n, total, total_sq)
    return OneVarResult(
        n=n,
        sum_x=total,
        sum_x2=total_sq,
        mean=mean,
        sx=sx,
        sigma_x=sigma,
        min=float(xs.min()),
        max=float(xs.max()),
    )


def two_var(stat: StatData) -> TwoVarResult:
    """2-variable statistics over the points that carry a y value."""
    xs, ys = stat.pairs()
    n = xs.size
    if n == 0:
        return TwoVarResult()
    sum_x, sum_y = float(xs.sum()), float(ys.sum())
    sum_x2, sum_y2 = float(np.dot(xs, xs)), float(np.dot(ys, ys))
    mean_x, sx, sigma_x = _spread(n, sum_x, sum_x2)
    mean_y, sy, sigma_y = _spread(n, sum_y, sum_y2)
    return TwoVarResult(
        n=n,
        sum_x=sum_x,
        sum_x2=sum_x2,
        sum_y=sum_y,
        sum_y2=sum_y2,
        sum_xy=float(np.dot(xs, ys)),
        mean_x=mean_x,
        mean_y=mean_y,
        sx=sx,
        sy=sy,
        sigma_x=sigma_x,
        sigma_y=sigma_y,
    )


def least_squares(xs: np.ndarray, ys: np.ndarray) -> tuple[float, float, float]:
    """
    Ordinary least squares shared by all regression families.

    Returns:
        ``(a, b, r)`` for ``y = a + b*x``; zeros for fewer than two points
    """
    n = xs.size
    if n < 2:
        return 0.0, 0.0, 0.0
    mean_x = xs.sum() / n
    mean_y = ys.sum() / n
    sxy = float(np.dot(xs, ys) - n * mean_x * mean_y)
    sxx = float(np.dot(xs, xs) - n * mean_x * mean_x)
    syy = float(np.dot(ys, ys) - n * mean_y * mean_y)
    b = sxy / sxx if sxx != 0 else 0.0
    a = float(mean_y - b * mean_x)
    r = sxy / math.sqrt(sxx * syy) if sxx > 0 and syy > 0 else 0.0
    return a, b, r


def regression(stat: StatData, kind: RegressionType | None = None) -> RegressionResult:
    """
    Fit one of the four regression families.

    Log transforms drop points whose transformed coordinate is not positive.
    EXP and PWR fit ``ln y`` and exponentiate the intercept.
    """
    kind = kind or stat.regression
    xs, ys = stat.pairs()

    if kind is RegressionType.LOG:
        keep = xs > 0
        xs, ys = np.log(xs[keep]), ys[keep]
    elif kind is RegressionType.EXP:
        keep = ys > 0
        xs, ys = xs[keep], np.log(ys[keep])
    elif kind is RegressionType.PWR:
        keep = (xs > 0) & (ys > 0)
        xs, ys = np.log(xs[keep]), np.log(ys[keep])

    n = int(xs.size)
    if n < 2:
        return RegressionResult(regression=kind, n=n)

    a, b, r = least_squares(xs, ys)
    if kind in (RegressionType.EXP, RegressionType.PWR):
        a = math.exp(a)
    return RegressionResult(regression=kind, a=a, b=b, r=r, n=n)


def predict_y(reg: RegressionResult, x: float) -> float:
    """Y' for a given x; 0 outside the family's domain."""
    kind = reg.regression
    if kind is RegressionType.LIN:
        return reg.a + reg.b * x
    if kind is RegressionType.LOG:
        return reg.a + reg.b * math.log(x) if x > 0 else 0.0
    if kind is RegressionType.EXP:
        return reg.a * math.exp(reg.b * x)
    if kind is RegressionType.PWR:
        return reg.a * x**reg.b if x > 0 else 0.0
    return 0.0


def predict_x(reg: RegressionResult, y: float) -> float:
    """X' for a given y; 0 on division by zero or outside the domain."""
    kind = reg.regression
    if reg.b == 0:
        return 0.0
    if kind is RegressionType.LIN:
        return (y - reg.a) / reg.b
    if kind is RegressionType.LOG:
        return math.exp((y - reg.a) / reg.b)
    if reg.a == 0 or y / reg.a <= 0:
        return 0.0
    if kind is RegressionType.EXP:
        return math.log(y / reg.a) / reg.b
    if kind is RegressionType.PWR:
        return (y / reg.a) ** (1.0 / reg.b)
    return 0.0
