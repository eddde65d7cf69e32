"""
daterules Calendars

Business day calendars backed by a RuleSet.

Provides:
- HolidayCalendar protocol for custom implementations
- BaseCalendar with common business day logic
- RuleSetCalendar, which takes its holidays from a RuleSet
- England and Wales bank holiday rules

Usage:
    from daterules.calendars import RuleSetCalendar, england_wales_rule_set

    rules = england_wales_rule_set(
        good_fridays={2024: "2024-03-29"},
        easter_mondays={2024: "2024-04-01"},
    )
    calendar = RuleSetCalendar(rule_set=rules)

    # SLA deadline: 10 business days after a request
    deadline = calendar.add_business_days("2024-12-18", 10)
"""
from __future__ import annotations

from .base import BaseCalendar, HolidayCalendar, NoHolidayCalendar, RuleSetCalendar
from .england_wales import (
    BANK_HOLIDAY,
    ENGLAND_WALES_DESCRIPTORS,
    england_wales_rule_set,
    england_wales_rules,
)

__all__ = [
    # Protocols and base classes
    "HolidayCalendar",
    "BaseCalendar",
    "NoHolidayCalendar",
    "RuleSetCalendar",
    # England and Wales
    "BANK_HOLIDAY",
    "ENGLAND_WALES_DESCRIPTORS",
    "england_wales_rules",
    "england_wales_rule_set",
]
