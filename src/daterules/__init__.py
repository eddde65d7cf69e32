"""
daterules - Named, composable date rules for holiday and working-day logic

daterules classifies calendar dates against named recurrence rules
("Christmas", "Weekend", "1st Monday in May", "Boxing Day substitute")
and answers: which rules match this date, where does each rule fall in a
given year, and when does a rule next occur.

Key Features:
- Five rule variants: daily-set, annual, specific, nth-weekday, lieu
- Lieu (substitute) days that shift off weekends and avoid colliding
  with other holidays
- Lieu dependencies resolved and checked for cycles when the RuleSet is
  built, never at query time
- Business day arithmetic over any RuleSet
- Descriptor input validated with pydantic

Quick Start:
    from daterules import RuleSet, build_rule_set

    rules = build_rule_set([
        {"kind": "daily_set", "name": "Weekend", "weekdays": ["sat", "sun"]},
        {"kind": "annual", "name": "Christmas", "month": 12, "day": 25},
        {"kind": "lieu", "name": "Christmas lieu", "referent": "Christmas"},
    ])

    rules.matches("2021-12-27")                   # ["Christmas lieu"]
    rules.occurrences_in_year(2021)               # {"Weekend": None, ...}
    rules.next_occurrence("Christmas", "2024-12-26")   # 2025-12-25

Version: 0.1.0
"""
from __future__ import annotations

__version__ = "0.1.0"

# =============================================================================
# Models
# =============================================================================
from .models import (
    MAX_SHIFT_DAYS,
    RULE_TYPES,
    WEEKEND,
    AnnualRule,
    CalendarDate,
    DailySetRule,
    DateLike,
    LieuRule,
    NthWeekdayRule,
    Rule,
    RuleKind,
    ShiftDirection,
    ShiftPolicy,
    SpecificRule,
    Weekday,
    add_days,
    compare,
    day_of_year,
    days_in_month,
    is_leap_year,
    is_valid,
    weekday_of,
)

# =============================================================================
# Engine
# =============================================================================
from .engine import (
    DEFAULT_SEARCH_YEARS,
    OccurrenceCache,
    OccurrenceEnumerator,
    RuleSet,
    resolve_evaluation_order,
)

# =============================================================================
# Descriptors
# =============================================================================
from .packs import (
    SCHEMA_VERSION,
    RuleSetSchema,
    build_rule,
    build_rule_set,
    load_rule_set,
)

# =============================================================================
# Calendars
# =============================================================================
from .calendars import (
    BaseCalendar,
    HolidayCalendar,
    NoHolidayCalendar,
    RuleSetCalendar,
    england_wales_rule_set,
    england_wales_rules,
)

# =============================================================================
# Exceptions
# =============================================================================
from .exceptions import (
    CyclicReferenceError,
    DateRulesError,
    InvalidDateError,
    InvalidRuleDefinitionError,
    NoSuchOccurrenceError,
    OccurrenceNotFoundError,
    RuleSetDependencyError,
    RuleSetVersionMismatch,
    UnknownReferentError,
    UnknownRuleError,
)

__all__ = [
    "__version__",
    # Models
    "CalendarDate",
    "DateLike",
    "Weekday",
    "WEEKEND",
    "RuleKind",
    "ShiftDirection",
    "Rule",
    "RULE_TYPES",
    "DailySetRule",
    "AnnualRule",
    "SpecificRule",
    "NthWeekdayRule",
    "LieuRule",
    "ShiftPolicy",
    "MAX_SHIFT_DAYS",
    "add_days",
    "compare",
    "day_of_year",
    "days_in_month",
    "is_leap_year",
    "is_valid",
    "weekday_of",
    # Engine
    "RuleSet",
    "DEFAULT_SEARCH_YEARS",
    "OccurrenceEnumerator",
    "OccurrenceCache",
    "resolve_evaluation_order",
    # Descriptors
    "SCHEMA_VERSION",
    "RuleSetSchema",
    "build_rule",
    "build_rule_set",
    "load_rule_set",
    # Calendars
    "HolidayCalendar",
    "BaseCalendar",
    "NoHolidayCalendar",
    "RuleSetCalendar",
    "england_wales_rules",
    "england_wales_rule_set",
    # Exceptions
    "DateRulesError",
    "InvalidDateError",
    "InvalidRuleDefinitionError",
    "RuleSetVersionMismatch",
    "RuleSetDependencyError",
    "UnknownReferentError",
    "CyclicReferenceError",
    "UnknownRuleError",
    "NoSuchOccurrenceError",
    "OccurrenceNotFoundError",
]
