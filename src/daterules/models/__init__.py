"""
daterules Models

Value types and the Rule union.
"""
from __future__ import annotations

from .dates import (
    CalendarDate,
    DateLike,
    add_days,
    compare,
    day_of_year,
    days_in_month,
    is_leap_year,
    is_valid,
    weekday_of,
)
from .enums import WEEKEND, RuleKind, ShiftDirection, Weekday
from .rules import (
    MAX_SHIFT_DAYS,
    RULE_TYPES,
    AnnualRule,
    DailySetRule,
    LieuRule,
    NthWeekdayRule,
    Rule,
    ShiftPolicy,
    SpecificRule,
)

__all__ = [
    # Dates
    "CalendarDate",
    "DateLike",
    "add_days",
    "compare",
    "day_of_year",
    "days_in_month",
    "is_leap_year",
    "is_valid",
    "weekday_of",
    # Enums
    "Weekday",
    "WEEKEND",
    "RuleKind",
    "ShiftDirection",
    # Rules
    "Rule",
    "RULE_TYPES",
    "DailySetRule",
    "AnnualRule",
    "SpecificRule",
    "NthWeekdayRule",
    "LieuRule",
    "ShiftPolicy",
    "MAX_SHIFT_DAYS",
]
