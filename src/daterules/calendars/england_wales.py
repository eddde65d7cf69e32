"""
England and Wales Bank Holidays

Bank holidays under the Banking and Financial Dealings Act 1971:
- New Year's Day (January 1) - since 1974
- Good Friday / Easter Monday - supplied by the caller per year
- Early May bank holiday (1st Monday in May) - since 1978
- Spring bank holiday (last Monday in May)
- Summer bank holiday (last Monday in August)
- Christmas Day (December 25)
- Boxing Day (December 26)

Substitute days: when New Year's Day, Christmas Day or Boxing Day falls
on a weekend, the next weekday that isn't already a bank holiday is
given instead. Christmas Day's substitute skips Boxing Day, and Boxing
Day's substitute skips Christmas Day's substitute, so a Saturday
Christmas gives Monday 27th and Tuesday 28th.

Easter moves with the lunar calendar and is never computed here; pass
the dates in. One-off holidays (royal events, moved May holidays) go in
``extra`` as specific-rule descriptors.
"""
from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from ..engine.rule_set import RuleSet
from ..models.dates import CalendarDate, DateLike
from ..packs.loader import build_rule_set

BANK_HOLIDAY = "bank_holiday"

ENGLAND_WALES_DESCRIPTORS: tuple[dict[str, Any], ...] = (
    {"kind": "daily_set", "name": "Workday", "classification": "workday",
     "weekdays": ["mon", "tue", "wed", "thu", "fri"]},
    {"kind": "daily_set", "name": "Weekend", "classification": "weekend",
     "weekdays": ["sat", "sun"]},
    {"kind": "annual", "name": "New Year's Day", "classification": BANK_HOLIDAY,
     "month": 1, "day": 1, "first_year": 1974},
    {"kind": "nth_weekday", "name": "Early May bank holiday", "classification": BANK_HOLIDAY,
     "month": 5, "weekday": "monday", "n": 1, "first_year": 1978},
    {"kind": "nth_weekday", "name": "Spring bank holiday", "classification": BANK_HOLIDAY,
     "month": 5, "weekday": "monday", "n": -1, "first_year": 1971},
    {"kind": "nth_weekday", "name": "Summer bank holiday", "classification": BANK_HOLIDAY,
     "month": 8, "weekday": "monday", "n": -1, "first_year": 1971},
    {"kind": "annual", "name": "Christmas Day", "classification": BANK_HOLIDAY,
     "month": 12, "day": 25},
    {"kind": "annual", "name": "Boxing Day", "classification": BANK_HOLIDAY,
     "month": 12, "day": 26},
    {"kind": "lieu", "name": "New Year's Day (substitute)", "classification": BANK_HOLIDAY,
     "referent": "New Year's Day"},
    {"kind": "lieu", "name": "Christmas Day (substitute)", "classification": BANK_HOLIDAY,
     "referent": "Christmas Day", "avoid": ["Boxing Day"]},
    {"kind": "lieu", "name": "Boxing Day (substitute)", "classification": BANK_HOLIDAY,
     "referent": "Boxing Day", "avoid": ["Christmas Day (substitute)"]},
)


def _specific(label: str, dates: Mapping[int, DateLike]) -> list[dict[str, Any]]:
    descriptors = []
    for year, value in sorted(dates.items()):
        d = CalendarDate.of(value)
        descriptors.append({
            "kind": "specific",
            "name": f"{label} {year}",
            "classification": BANK_HOLIDAY,
            "on": d.to_date(),
        })
    return descriptors


def england_wales_rules(
    good_fridays: Optional[Mapping[int, DateLike]] = None,
    easter_mondays: Optional[Mapping[int, DateLike]] = None,
    extra: Iterable[Mapping[str, Any]] = (),
) -> list[dict[str, Any]]:
    """
    Rule descriptors for England and Wales.

    Args:
        good_fridays: Good Friday date keyed by year
        easter_mondays: Easter Monday date keyed by year
        extra: Further descriptors appended last (highest precedence)
    """
    return [
        *(dict(d) for d in ENGLAND_WALES_DESCRIPTORS),
        *_specific("Good Friday", good_fridays or {}),
        *_specific("Easter Monday", easter_mondays or {}),
        *(dict(d) for d in extra),
    ]


def england_wales_rule_set(
    good_fridays: Optional[Mapping[int, DateLike]] = None,
    easter_mondays: Optional[Mapping[int, DateLike]] = None,
    extra: Iterable[Mapping[str, Any]] = (),
) -> RuleSet:
    """Build the England and Wales RuleSet."""
    return build_rule_set(
        england_wales_rules(good_fridays, easter_mondays, extra),
        name="england-and-wales",
    )
