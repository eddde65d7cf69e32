"""
daterules Calendar Dates

Immutable proleptic Gregorian civil dates with no time or timezone.

Arithmetic is done on a day count (days since 0001-01-01, which is day 1,
matching ``datetime.date.toordinal``) so any integer year is supported,
not just the 1..9999 range of ``datetime.date``.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Union

from ..exceptions import InvalidDateError
from .enums import Weekday


# Day 0 of the era arithmetic is 0000-03-01; 0001-01-01 is ordinal 1
_ORDINAL_OFFSET = 305

_DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


# =============================================================================
# Calendar Helpers
# =============================================================================

def is_leap_year(year: int) -> bool:
    """Divisible by 4, not by 100 unless by 400."""
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_month(year: int, month: int) -> int:
    if not 1 <= month <= 12:
        raise InvalidDateError(
            message=f"Month out of range: {month}",
            details={"year": year, "month": month},
        )
    if month == 2 and is_leap_year(year):
        return 29
    return _DAYS_IN_MONTH[month - 1]


def is_valid(year: int, month: int, day: int) -> bool:
    """Check a (year, month, day) triple without raising."""
    if not 1 <= month <= 12:
        return False
    return 1 <= day <= days_in_month(year, month)


def _to_ordinal(year: int, month: int, day: int) -> int:
    # Shift the year to start in March so the leap day is the last day
    y = year - 1 if month <= 2 else year
    era = y // 400
    yoe = y - era * 400
    mp = (month + 9) % 12
    doy = (153 * mp + 2) // 5 + day - 1
    doe = yoe * 365 + yoe // 4 - yoe // 100 + doy
    return era * 146097 + doe - _ORDINAL_OFFSET


def _from_ordinal(ordinal: int) -> tuple[int, int, int]:
    z = ordinal + _ORDINAL_OFFSET
    era = z // 146097
    doe = z - era * 146097
    yoe = (doe - doe // 1460 + doe // 36524 - doe // 146096) // 365
    doy = doe - (365 * yoe + yoe // 4 - yoe // 100)
    mp = (5 * doy + 2) // 153
    day = doy - (153 * mp + 2) // 5 + 1
    month = mp + 3 if mp < 10 else mp - 9
    year = yoe + era * 400 + (1 if month <= 2 else 0)
    return year, month, day


# =============================================================================
# Calendar Date
# =============================================================================

@dataclass(frozen=True, order=True)
class CalendarDate:
    """
    A civil date in the proleptic Gregorian calendar.

    Ordering is total by (year, month, day). Construction validates the
    triple and raises InvalidDateError; nothing is ever rounded to a
    "nearest valid date".

    Attributes:
        year: Any integer year (astronomical numbering, year 0 exists)
        month: 1..12
        day: 1..days_in_month(year, month)
    """
    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        if not is_valid(self.year, self.month, self.day):
            raise InvalidDateError(
                message=f"Invalid date: {self.year:04d}-{self.month:02d}-{self.day:02d}",
                details={"year": self.year, "month": self.month, "day": self.day},
            )

    def __str__(self) -> str:
        return self.isoformat()

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_ordinal(cls, ordinal: int) -> CalendarDate:
        """Inverse of ``ordinal``; day 1 is 0001-01-01."""
        return cls(*_from_ordinal(ordinal))

    @classmethod
    def from_date(cls, d: date) -> CalendarDate:
        return cls(d.year, d.month, d.day)

    @classmethod
    def from_iso(cls, text: str) -> CalendarDate:
        """Parse ``YYYY-MM-DD`` (a leading minus is allowed for BCE years)."""
        sign = 1
        body = text.strip()
        if body.startswith("-"):
            sign, body = -1, body[1:]
        parts = body.split("-")
        if len(parts) != 3 or not all(p.isdigit() for p in parts):
            raise InvalidDateError(
                message=f"Not an ISO date: {text!r}",
                details={"value": text},
            )
        return cls(sign * int(parts[0]), int(parts[1]), int(parts[2]))

    @classmethod
    def of(cls, value: DateLike) -> CalendarDate:
        """Coerce a CalendarDate, datetime.date or ISO string."""
        if isinstance(value, CalendarDate):
            return value
        if isinstance(value, date):
            return cls.from_date(value)
        if isinstance(value, str):
            return cls.from_iso(value)
        raise TypeError(f"Cannot interpret {value!r} as a date")

    # -------------------------------------------------------------------------
    # Derived Values
    # -------------------------------------------------------------------------

    @property
    def ordinal(self) -> int:
        """Day count with 0001-01-01 as day 1."""
        return _to_ordinal(self.year, self.month, self.day)

    @property
    def weekday(self) -> Weekday:
        # 0001-01-01 is a Monday
        return Weekday.from_ordinal(self.ordinal - 1)

    @property
    def day_of_year(self) -> int:
        return self.ordinal - _to_ordinal(self.year, 1, 1) + 1

    @property
    def is_leap_year(self) -> bool:
        return is_leap_year(self.year)

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def add_days(self, n: int) -> CalendarDate:
        """Return the date ``n`` days later (earlier if ``n`` is negative)."""
        if n == 0:
            return self
        return CalendarDate.from_ordinal(self.ordinal + n)

    def days_until(self, other: CalendarDate) -> int:
        """Signed number of days from this date to ``other``."""
        return other.ordinal - self.ordinal

    def replace(self, year: Optional[int] = None, month: Optional[int] = None,
                day: Optional[int] = None) -> CalendarDate:
        return CalendarDate(
            self.year if year is None else year,
            self.month if month is None else month,
            self.day if day is None else day,
        )

    # -------------------------------------------------------------------------
    # Interop
    # -------------------------------------------------------------------------

    def to_date(self) -> date:
        """Convert to ``datetime.date`` (years 1..9999 only)."""
        try:
            return date(self.year, self.month, self.day)
        except ValueError as e:
            raise InvalidDateError(
                message=f"{self} is outside the datetime.date range",
                details={"year": self.year},
            ) from e

    def isoformat(self) -> str:
        if self.year < 0:
            return f"-{-self.year:04d}-{self.month:02d}-{self.day:02d}"
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"


DateLike = Union[CalendarDate, date, str]


# =============================================================================
# Functional Interface
# =============================================================================

def weekday_of(d: DateLike) -> Weekday:
    return CalendarDate.of(d).weekday


def add_days(d: DateLike, n: int) -> CalendarDate:
    return CalendarDate.of(d).add_days(n)


def day_of_year(d: DateLike) -> int:
    return CalendarDate.of(d).day_of_year


def compare(a: DateLike, b: DateLike) -> int:
    """Return -1, 0 or 1 as ``a`` is before, equal to or after ``b``."""
    left, right = CalendarDate.of(a), CalendarDate.of(b)
    if left < right:
        return -1
    if left > right:
        return 1
    return 0
