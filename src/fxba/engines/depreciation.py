"""
Depreciation engine: six methods, evaluated per year.

Every query recomputes from year 1, so a result is a deterministic function
of ``(input, method, year)`` and nothing is carried between calls.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from enum import Enum

import pandas as pd

from fxba.core.config import DEFAULT_DB_RATE
from fxba.core.errors import InvalidInputError, NoSolutionError
from fxba.core.utils import warn_once


class DepreciationMethod(Enum):
    SL = "SL"  # straight line
    SYD = "SYD"  # sum-of-years' digits
    DB = "DB"  # declining balance
    DB_SL = "DB-SL"  # declining balance with straight-line crossover
    SLF = "SLF"  # French straight line
    DBF = "DBF"  # French declining balance

    def next(self) -> DepreciationMethod:
        members = list(DepreciationMethod)
        return members[(members.index(self) + 1) % len(members)]


@dataclass
class DepreciationInput:
    """
    Asset being depreciated.

    Attributes:
        cost: Acquisition cost
        salvage: Salvage value at end of life
        life: Useful life in years (may be fractional)
        db_rate: Declining-balance rate in percent (200 = double declining)
        start_month: Month of acquisition, 1-12, used by the French methods
    """

    cost: float
    salvage: float
    life: float
    db_rate: float = DEFAULT_DB_RATE
    start_month: int = 1


@dataclass(frozen=True)
class DepreciationResult:
    year: int
    depreciation: float
    book_value_start: float
    book_value_end: float
    accumulated: float
    remaining: float


def french_coefficient(life: float) -> float:
    if life <= 4.0:
        return 1.25
    if life <= 6.0:
        return 1.75
    return 2.25


def partial_year_factor(start_month: int, year: int, life: float) -> float:
    """
    Fraction of ``year`` that is depreciated.

    The acquisition year covers the months from ``start_month`` to December.
    When that year is partial, the months it missed are taken in the trailing
    year ``ceil(life) + 1``. All other years are full.
    """
    if year == 1:
        return (12 - start_month + 1) / 12.0
    if start_month > 1 and year == math.ceil(life) + 1:
        return (start_month - 1) / 12.0
    return 1.0


def _check(life: float, year: int) -> None:
    if life <= 0:
        raise InvalidInputError("life must be positive")
    if year < 1:
        raise InvalidInputError("year must be >= 1")


def _db_rate(db_rate: float, life: float) -> float:
    if db_rate <= 0:
        raise NoSolutionError("declining-balance rate must be positive")
    return db_rate / 100.0 / life


def straight_line(cost: float, salvage: float, life: float, year: int = 1) -> float:
    """Straight-line amount, prorated in a fractional last year."""
    _check(life, year)
    annual = (cost - salvage) / life
    whole = math.floor(life)
    if year <= whole:
        return annual
    if year == whole + 1 and life > whole:
        return annual * (life - whole)
    return 0.0


def sum_of_years_digits(cost: float, salvage: float, life: float, year: int) -> float:
    _check(life, year)
    if year > int(life):
        return 0.0
    total = life * (life + 1.0) / 2.0
    return (cost - salvage) * (life - year + 1.0) / total


def declining_balance(
    cost: float, salvage: float, life: float, db_rate: float, year: int
) -> float:
    """Declining balance on a rolling book value, never below salvage."""
    _check(life, year)
    rate = _db_rate(db_rate, life)
    book = cost
    for _ in range(1, year):
        book -= book * rate
        if book < salvage:
            book = salvage
            break
    dep = book * rate
    if book - dep < salvage:
        dep = book - salvage
    return max(dep, 0.0)


def _crossover(
    book: float, salvage: float, remaining_life: float, db_dep: float, factor: float
) -> float:
    if remaining_life > 0:
        sl_dep = (book - salvage) / remaining_life * factor
    else:
        sl_dep = book - salvage
    dep = max(sl_dep, db_dep)
    if book - dep < salvage:
        dep = book - salvage
    return max(dep, 0.0)


def declining_balance_sl(
    cost: float, salvage: float, life: float, db_rate: float, year: int
) -> float:
    """Declining balance switching to straight line once that is larger."""
    _check(life, year)
    rate = _db_rate(db_rate, life)
    book = cost
    dep = 0.0
    for y in range(1, year + 1):
        dep = _crossover(book, salvage, life - y + 1.0, book * rate, 1.0)
        book -= dep
    return dep


def straight_line_french(
    cost: float, salvage: float, life: float, start_month: int, year: int
) -> float:
    _check(life, year)
    last_year = math.ceil(life) + (1 if start_month > 1 else 0)
    if year > last_year:
        return 0.0
    return (cost - salvage) / life * partial_year_factor(start_month, year, life)


def declining_balance_french(
    cost: float, salvage: float, life: float, start_month: int, year: int
) -> float:
    """French declining balance: life-banded coefficient, prorated years, SL crossover."""
    _check(life, year)
    rate = french_coefficient(life) / life
    book = cost
    dep = 0.0
    for y in range(1, year + 1):
        factor = partial_year_factor(start_month, y, life)
        dep = _crossover(book, salvage, life - y + 1.0, book * rate * factor, factor)
        book -= dep
    return dep


def _normalized_month(start_month: int) -> int:
    month = int(start_month)
    if month < 1 or month > 12:
        clamped = max(1, min(12, month))
        warn_once(
            "DEPR_MONTH_CLAMPED",
            str(month),
            f"start month {month} clamped to {clamped}",
        )
        return clamped
    return month


def year_amount(inp: DepreciationInput, method: DepreciationMethod, year: int) -> float:
    """Unclamped depreciation amount the method assigns to ``year``."""
    month = _normalized_month(inp.start_month)
    if method is DepreciationMethod.SL:
        return straight_line(inp.cost, inp.salvage, inp.life, year)
    if method is DepreciationMethod.SYD:
        return sum_of_years_digits(inp.cost, inp.salvage, inp.life, year)
    if method is DepreciationMethod.DB:
        return declining_balance(inp.cost, inp.salvage, inp.life, inp.db_rate, year)
    if method is DepreciationMethod.DB_SL:
        return declining_balance_sl(inp.cost, inp.salvage, inp.life, inp.db_rate, year)
    if method is DepreciationMethod.SLF:
        return straight_line_french(inp.cost, inp.salvage, inp.life, month, year)
    if method is DepreciationMethod.DBF:
        return declining_balance_french(inp.cost, inp.salvage, inp.life, month, year)
    raise InvalidInputError(f"unknown depreciation method {method!r}")


def depreciate(
    inp: DepreciationInput, method: DepreciationMethod, year: int
) -> DepreciationResult:
    """
    Depreciation for ``year`` plus book values and running totals.

    Years 1..year are replayed; each year's amount is capped so the book value
    never falls below salvage.

    Raises:
        InvalidInputError: If life <= 0 or year < 1
        NoSolutionError: For the DB methods with a non-positive rate
    """
    _check(inp.life, year)
    book = inp.cost
    accumulated = 0.0
    dep = 0.0
    start = book
    for y in range(1, year + 1):
        start = book
        dep = min(year_amount(inp, method, y), max(book - inp.salvage, 0.0))
        dep = max(dep, 0.0)
        accumulated += dep
        book -= dep
    return DepreciationResult(
        year=year,
        depreciation=dep,
        book_value_start=start,
        book_value_end=book,
        accumulated=accumulated,
        remaining=max(book - inp.salvage, 0.0),
    )


def schedule_years(inp: DepreciationInput, method: DepreciationMethod) -> int:
    """Number of years until the asset is fully depreciated."""
    years = math.ceil(inp.life)
    french = method in (DepreciationMethod.SLF, DepreciationMethod.DBF)
    if french and inp.start_month > 1:
        years += 1
    return max(years, 1)


def depreciation_schedule(
    inp: DepreciationInput, method: DepreciationMethod, years: int | None = None
) -> pd.DataFrame:
    """
    Year-by-year schedule as a DataFrame.

    Columns: ``year``, ``depreciation``, ``book_value_start``,
    ``book_value_end``, ``accumulated``, ``remaining``.
    """
    if years is None:
        years = schedule_years(inp, method)
    rows = [depreciate(inp, method, y) for y in range(1, years + 1)]
    return pd.DataFrame([asdict(r) for r in rows])
