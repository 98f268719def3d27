"""
Date arithmetic and day-count conventions.

Dates cross the public API as YYYYMMDD integers (bond worksheet) or in the
calculator's display encodings ``MM.DDYYYY`` (US) and ``DD.MMYYYY`` (EUR).
Internally they are :class:`datetime.date` values. Supported years are
1900-2099, matching the date worksheet's range.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum

from fxba.core.config import DEFAULT_DATE_1, DEFAULT_DATE_2
from fxba.core.errors import InvalidInputError

MIN_YEAR = 1900
MAX_YEAR = 2099

# Day 1 is 1900-01-01
_EPOCH_ORDINAL = date(1900, 1, 1).toordinal() - 1

DAY_NAMES = ("SUN", "MON", "TUE", "WED", "THU", "FRI", "SAT")


class DayCount(Enum):
    """Day-count convention used for bond periods and accrual."""

    ACT_ACT = "ACT/ACT"
    THIRTY_360 = "30/360"
    ACT_360 = "ACT/360"
    ACT_365 = "ACT/365"

    @classmethod
    def parse(cls, value: str | DayCount) -> DayCount:
        if isinstance(value, DayCount):
            return value
        for conv in cls:
            if conv.value == value.upper():
                return conv
        raise InvalidInputError(f"unknown day-count convention {value!r}")

    @property
    def year_basis(self) -> int:
        """Days per year used to size coupon periods."""
        if self in (DayCount.THIRTY_360, DayCount.ACT_360):
            return 360
        return 365

    def next(self) -> DayCount:
        members = list(DayCount)
        return members[(members.index(self) + 1) % len(members)]


class DateFormat(Enum):
    US = "US"  # MM.DDYYYY
    EUR = "EUR"  # DD.MMYYYY


def is_leap_year(year: int) -> bool:
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def days_in_month(month: int, year: int) -> int:
    """Days in ``month`` of ``year``, 0 for an invalid month."""
    if month < 1 or month > 12:
        return 0
    if month == 2:
        return 29 if is_leap_year(year) else 28
    if month in (4, 6, 9, 11):
        return 30
    return 31


def is_valid_date(year: int, month: int, day: int) -> bool:
    if year < MIN_YEAR or year > MAX_YEAR:
        return False
    if month < 1 or month > 12:
        return False
    return 1 <= day <= days_in_month(month, year)


def from_yyyymmdd(value: int) -> date:
    """
    Convert a YYYYMMDD integer into a date.

    Raises:
        InvalidInputError: If the integer is not a valid date in 1900-2099
    """
    value = int(value)
    year, rest = divmod(value, 10000)
    month, day = divmod(rest, 100)
    if not is_valid_date(year, month, day):
        raise InvalidInputError(f"invalid date {value}")
    return date(year, month, day)


def to_yyyymmdd(d: date) -> int:
    return d.year * 10000 + d.month * 100 + d.day


def date_to_days(value: int) -> int:
    """Days since the epoch, with 1900-01-01 as day 1."""
    return from_yyyymmdd(value).toordinal() - _EPOCH_ORDINAL


def days_to_date(days: int) -> int:
    """Inverse of :func:`date_to_days`, returning YYYYMMDD."""
    return to_yyyymmdd(date.fromordinal(days + _EPOCH_ORDINAL))


def days_30_360(d1: date, d2: date) -> int:
    """
    US 30/360 day count with the February end-of-month rule.

    The 31st becomes the 30th (the end date only when the start date is
    already the 30th), and a start date on the last day of February counts
    as the 30th.
    """
    day1, day2 = d1.day, d2.day
    if day1 == 31:
        day1 = 30
    if day2 == 31 and day1 >= 30:
        day2 = 30
    if d1.month == 2 and d1.day == days_in_month(2, d1.year):
        day1 = 30
    if d2.month == 2 and d2.day == days_in_month(2, d2.year) and day1 == 30:
        day2 = 30
    return 360 * (d2.year - d1.year) + 30 * (d2.month - d1.month) + (day2 - day1)


def day_count(start: int, end: int, convention: DayCount = DayCount.ACT_ACT) -> int:
    """
    Days between two YYYYMMDD dates under a convention.

    Only 30/360 changes the count; the ACT conventions count actual days and
    differ only in their year basis.
    """
    d1 = from_yyyymmdd(start)
    d2 = from_yyyymmdd(end)
    if convention is DayCount.THIRTY_360:
        return days_30_360(d1, d2)
    return (d2 - d1).days


def year_fraction(
    start: int, end: int, convention: DayCount = DayCount.ACT_ACT
) -> float:
    return day_count(start, end, convention) / convention.year_basis


def add_days(value: int, days: int) -> int:
    """Add (or subtract) actual days to a YYYYMMDD date."""
    result = from_yyyymmdd(value) + timedelta(days=days)
    if not MIN_YEAR <= result.year <= MAX_YEAR:
        raise InvalidInputError(f"date out of range: {to_yyyymmdd(result)}")
    return to_yyyymmdd(result)


def day_of_week(value: int) -> int:
    """Day of week with 0 = Sunday."""
    return (from_yyyymmdd(value).weekday() + 1) % 7


def day_name(value: int) -> str:
    return DAY_NAMES[day_of_week(value)]


def parse_display_date(value: float, fmt: DateFormat = DateFormat.US) -> int:
    """
    Decode a display-encoded date (``12.252024`` is 2024-12-25 in US format).

    Returns:
        The date as YYYYMMDD

    Raises:
        InvalidInputError: If the encoded date is not valid
    """
    first = int(value)
    packed = int(round((value - first) * 1_000_000))
    second, year = divmod(packed, 10000)
    if fmt is DateFormat.US:
        month, day = first, second
    else:
        day, month = first, second
    if not is_valid_date(year, month, day):
        raise InvalidInputError(f"invalid date {value}")
    return year * 10000 + month * 100 + day


def format_display_date(value: int, fmt: DateFormat = DateFormat.US) -> float:
    d = from_yyyymmdd(value)
    if fmt is DateFormat.US:
        first, second = d.month, d.day
    else:
        first, second = d.day, d.month
    return first + (second * 10000 + d.year) / 1_000_000


@dataclass
class DateWorksheet:
    """Days-between-dates worksheet (DT1, DT2, DBD)."""

    dt1: int = DEFAULT_DATE_1
    dt2: int = DEFAULT_DATE_2
    dbd: int = 0
    act: bool = True
    fmt: DateFormat = DateFormat.US

    @property
    def convention(self) -> DayCount:
        return DayCount.ACT_ACT if self.act else DayCount.THIRTY_360

    def compute_dbd(self) -> int:
        return day_count(self.dt1, self.dt2, self.convention)

    def compute_dt2(self) -> int:
        return add_days(self.dt1, self.dbd)

    def compute_dt1(self) -> int:
        return add_days(self.dt2, -self.dbd)
