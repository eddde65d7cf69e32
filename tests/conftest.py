"""
Pytest configuration and fixtures for daterules tests.

Provides helper factories and common rule set fixtures.
"""
import pytest

from daterules import (
    AnnualRule,
    CalendarDate,
    DailySetRule,
    LieuRule,
    NthWeekdayRule,
    RuleSet,
    ShiftPolicy,
    Weekday,
)


# =============================================================================
# Factory Helpers
# =============================================================================

def d(text: str) -> CalendarDate:
    """Shorthand for CalendarDate.from_iso."""
    return CalendarDate.from_iso(text)


def make_weekend(name: str = "Weekend") -> DailySetRule:
    return DailySetRule(name, weekdays=frozenset({Weekday.SATURDAY, Weekday.SUNDAY}))


def make_lieu(
    name: str,
    referent: str,
    avoid: tuple = (),
    **policy,
) -> LieuRule:
    """Create a lieu rule with a weekend-blocking forward policy by default."""
    return LieuRule(name, referent=referent, policy=ShiftPolicy(avoid=avoid, **policy))


def make_christmas_rule_set() -> RuleSet:
    """
    Christmas and Boxing Day with collision-aware lieu days.

    Matches the England and Wales substitute day convention.
    """
    return RuleSet(
        [
            DailySetRule("Workday", weekdays=frozenset({
                Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY,
                Weekday.THURSDAY, Weekday.FRIDAY,
            })),
            make_weekend(),
            AnnualRule("Christmas", month=12, day=25),
            AnnualRule("Boxing Day", month=12, day=26),
            make_lieu("Christmas lieu", "Christmas", avoid=("Boxing Day",)),
            make_lieu("Boxing Day lieu", "Boxing Day", avoid=("Christmas lieu",)),
        ],
        name="christmas",
    )


def make_bank_holiday_rule_set() -> RuleSet:
    """Workday/weekend base layer with May bank holidays on top."""
    return RuleSet(
        [
            DailySetRule("Workday", weekdays=frozenset({
                Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY,
                Weekday.THURSDAY, Weekday.FRIDAY,
            }), classification="workday"),
            DailySetRule("Weekend", weekdays=frozenset({
                Weekday.SATURDAY, Weekday.SUNDAY,
            }), classification="weekend"),
            NthWeekdayRule(
                "Early May", month=5, weekday=Weekday.MONDAY, n=1,
                classification="bank_holiday",
            ),
            NthWeekdayRule(
                "Spring", month=5, weekday=Weekday.MONDAY, n=-1,
                classification="bank_holiday",
            ),
        ],
        name="bank-holidays",
    )


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def christmas_rules() -> RuleSet:
    return make_christmas_rule_set()


@pytest.fixture
def bank_holiday_rules() -> RuleSet:
    return make_bank_holiday_rule_set()
