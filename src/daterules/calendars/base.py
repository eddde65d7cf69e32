"""
daterules Business Day Calendars

Provides the protocol and a RuleSet-backed implementation for holiday
calendars used in business day calculations (payroll cut-offs, SLA
deadlines, settlement dates).

Which rules count as holidays is configurable, so one RuleSet can back
several calendars (e.g. with and without substitute days).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, Protocol, runtime_checkable

from ..engine.rule_set import RuleSet
from ..models.dates import CalendarDate, DateLike
from ..models.enums import WEEKEND, Weekday
from ..models.rules import DailySetRule


@runtime_checkable
class HolidayCalendar(Protocol):
    """
    Protocol for holiday calendars.

    Implementations must provide methods to check if a date is a holiday
    or business day, so business day arithmetic can run against any
    jurisdiction's rules.
    """

    def is_holiday(self, d: DateLike) -> bool:
        """
        Check if a date is a holiday.

        Args:
            d: Date to check

        Returns:
            True if the date is a holiday, False otherwise
        """
        ...

    def is_business_day(self, d: DateLike) -> bool:
        """
        Check if a date is a business day.

        Args:
            d: Date to check

        Returns:
            True if the date is neither a weekend day nor a holiday
        """
        ...

    def holidays_in_range(self, start: DateLike, end: DateLike) -> list[CalendarDate]:
        """
        Get all holidays within a date range.

        Args:
            start: Start date (inclusive)
            end: End date (inclusive)

        Returns:
            Holiday dates within the range, ascending, without duplicates
        """
        ...


@dataclass
class BaseCalendar(ABC):
    """
    Abstract base class for holiday calendars.

    Business day arithmetic over CalendarDate values. Dates may be given
    as CalendarDate, datetime.date or ISO strings. Subclasses must
    implement `is_holiday()`.
    """

    weekend_days: frozenset[Weekday] = field(default_factory=lambda: WEEKEND)

    @abstractmethod
    def is_holiday(self, d: DateLike) -> bool:
        """Check if a date is a holiday."""
        ...

    def is_weekend(self, d: DateLike) -> bool:
        return CalendarDate.of(d).weekday in self.weekend_days

    def is_business_day(self, d: DateLike) -> bool:
        """
        Check if a date is a business day.

        A business day is a non-weekend day that is not a holiday. A
        holiday falling on a weekend changes nothing here; whether it
        moves to a weekday is up to the rules (see LieuRule).
        """
        if self.is_weekend(d):
            return False
        return not self.is_holiday(d)

    def holidays_in_range(self, start: DateLike, end: DateLike) -> list[CalendarDate]:
        """Get all holidays within a date range (both ends inclusive)."""
        current, end = CalendarDate.of(start), CalendarDate.of(end)
        holidays = []
        while current <= end:
            if self.is_holiday(current):
                holidays.append(current)
            current = current.add_days(1)
        return holidays

    def add_business_days(self, start: DateLike, days: int) -> CalendarDate:
        """
        Move a date by a number of business days.

        Args:
            start: Starting date (not counted)
            days: Business days to move; negative moves backwards

        Returns:
            The business day reached, or ``start`` itself when days is 0
        """
        current = CalendarDate.of(start)
        if days == 0:
            return current

        step = 1 if days > 0 else -1
        remaining = abs(days)
        while remaining > 0:
            current = current.add_days(step)
            if self.is_business_day(current):
                remaining -= 1

        return current

    def subtract_business_days(self, start: DateLike, days: int) -> CalendarDate:
        """
        Move a date backwards by a number of business days.

        Args:
            start: Starting date (not counted)
            days: Business days to move back

        Returns:
            The business day reached
        """
        return self.add_business_days(start, -days)

    def business_days_between(self, start: DateLike, end: DateLike) -> int:
        """
        Count business days between two dates.

        Args:
            start: Start date (exclusive)
            end: End date (inclusive)

        Returns:
            Number of business days in (start, end]; 0 if end <= start
        """
        current, end = CalendarDate.of(start), CalendarDate.of(end)
        count = 0
        while current < end:
            current = current.add_days(1)
            if self.is_business_day(current):
                count += 1
        return count

    def next_business_day(self, d: DateLike) -> CalendarDate:
        """
        Get the first business day on or after a date.

        Args:
            d: Starting date

        Returns:
            ``d`` if it is a business day, otherwise the next one
        """
        current = CalendarDate.of(d)
        while not self.is_business_day(current):
            current = current.add_days(1)
        return current

    def previous_business_day(self, d: DateLike) -> CalendarDate:
        """
        Get the last business day on or before a date.

        Args:
            d: Starting date

        Returns:
            ``d`` if it is a business day, otherwise the previous one
        """
        current = CalendarDate.of(d)
        while not self.is_business_day(current):
            current = current.add_days(-1)
        return current


@dataclass
class RuleSetCalendar(BaseCalendar):
    """
    A calendar whose holidays are the dates matched by a RuleSet.

    Usage:
        calendar = RuleSetCalendar(rule_set=england_wales_rule_set())
        calendar.add_business_days("2021-12-24", 1)    # 2021-12-29

    Attributes:
        rule_set: Rules to consult (required, keyword-only)
        holiday_rules: Names of the rules that mark holidays. Defaults to
            every rule except daily-set rules, which describe the shape
            of the week rather than holidays.
    """

    rule_set: RuleSet = field(kw_only=True)
    holiday_rules: Optional[frozenset[str]] = None

    def __post_init__(self) -> None:
        if self.holiday_rules is None:
            self.holiday_rules = frozenset(
                rule.name for rule in self.rule_set if not isinstance(rule, DailySetRule)
            )
        else:
            self.holiday_rules = frozenset(self.holiday_rules)
            for name in self.holiday_rules:
                self.rule_set.get(name)

    def holiday_names(self, d: DateLike) -> list[str]:
        """Holiday rules matching ``d``, in definition order."""
        return [name for name in self.rule_set.matches(d) if name in self.holiday_rules]

    def is_holiday(self, d: DateLike) -> bool:
        return bool(self.holiday_names(d))

    def holidays_in_range(self, start: DateLike, end: DateLike) -> list[CalendarDate]:
        """
        Get all holidays within a date range.

        Enumerates the holiday rules' occurrences instead of testing
        every day. Several rules on one date give one entry.

        Args:
            start: Start date (inclusive)
            end: End date (inclusive)

        Returns:
            Holiday dates within the range, ascending
        """
        hits = self.rule_set.occurrences_between(
            start, end, names=[n for n in self.rule_set.names if n in self.holiday_rules],
        )
        return list(dict.fromkeys(d for d, _ in hits))


@dataclass
class NoHolidayCalendar(BaseCalendar):
    """
    A calendar with no holidays.

    Only weekends are non-business days.
    """

    def is_holiday(self, d: DateLike) -> bool:
        return False
