"""
daterules Occurrence Enumerator

Derives the concrete dates rules occupy, and tests dates against rules
that need the rest of the Rule Set (lieu rules).

Every public call takes an optional ``memo`` dict keyed by
(rule name, year). It is owned by the caller and lives for one query, so
a lieu chain resolves each referent once without any state surviving
between queries.
"""
from __future__ import annotations

from typing import Mapping, Optional

from ..exceptions import InvalidDateError, NoSuchOccurrenceError
from ..models.dates import CalendarDate, is_leap_year
from ..models.rules import (
    MAX_SHIFT_DAYS,
    AnnualRule,
    DailySetRule,
    LieuRule,
    NthWeekdayRule,
    Rule,
    SpecificRule,
)

Memo = dict[tuple[str, int], Optional[CalendarDate]]


def _unsupported(rule: object) -> TypeError:
    return TypeError(f"Unsupported rule type: {type(rule).__name__}")


class OccurrenceEnumerator:
    """
    Computes occurrences and matches over a fixed mapping of rules.

    The mapping must already be validated (known referents, no cycles);
    RuleSet guarantees that before building an enumerator.
    """

    def __init__(self, rules: Mapping[str, Rule]) -> None:
        self._rules = rules

    # -------------------------------------------------------------------------
    # Occurrences
    # -------------------------------------------------------------------------

    def occurrence_in_year(
        self,
        name: str,
        year: int,
        memo: Optional[Memo] = None,
    ) -> Optional[CalendarDate]:
        """
        The single date a rule maps to for ``year``, or None.

        None means the rule does not occur that year: a daily-set rule,
        a rule outside its first/last year, a specific rule for another
        year, 29 February in a common year, or a lieu rule whose referent
        doesn't occur.

        Raises:
            NoSuchOccurrenceError: Nth-weekday rule asks for an occurrence
                the month doesn't have, or a lieu search is exhausted
        """
        if memo is None:
            memo = {}
        key = (name, year)
        if key in memo:
            return memo[key]

        rule = self._rules[name]
        if not rule.in_effect(year):
            result = None
        elif isinstance(rule, DailySetRule):
            result = None
        elif isinstance(rule, AnnualRule):
            try:
                result = rule.occurrence_in_year(year)
            except InvalidDateError:
                result = None
        elif isinstance(rule, SpecificRule):
            result = rule.occurrence_in_year(year)
        elif isinstance(rule, NthWeekdayRule):
            result = rule.occurrence_in_year(year)
        elif isinstance(rule, LieuRule):
            result = self._lieu_occurrence(rule, year, memo)
        else:
            raise _unsupported(rule)

        memo[key] = result
        return result

    def _lieu_occurrence(
        self,
        rule: LieuRule,
        year: int,
        memo: Memo,
    ) -> Optional[CalendarDate]:
        origin = self.occurrence_in_year(rule.referent, year, memo)
        if origin is None:
            return None

        policy = rule.policy
        if not policy.is_blocked(origin):
            return origin

        for candidate in policy.candidates(origin):
            if policy.is_blocked(candidate):
                continue
            if any(self.matches(other, candidate, memo) for other in rule.dependencies):
                continue
            return candidate

        raise NoSuchOccurrenceError(
            message=(
                f"No free day within {MAX_SHIFT_DAYS} days of {origin} "
                f"for lieu rule '{rule.name}'"
            ),
            details={"year": year, "origin": str(origin)},
            rule_name=rule.name,
        )

    # -------------------------------------------------------------------------
    # Matching
    # -------------------------------------------------------------------------

    def matches(self, name: str, d: CalendarDate, memo: Optional[Memo] = None) -> bool:
        """Check whether rule ``name`` matches ``d``."""
        rule = self._rules[name]
        if isinstance(rule, LieuRule):
            return self._lieu_matches(name, d, memo if memo is not None else {})
        if not rule.in_effect(d.year):
            return False
        if isinstance(rule, (DailySetRule, AnnualRule, SpecificRule, NthWeekdayRule)):
            return rule.matches(d)
        raise _unsupported(rule)

    def _lieu_matches(self, name: str, d: CalendarDate, memo: Memo) -> bool:
        # A shift can carry the lieu date across a year end in either direction
        for year in (d.year - 1, d.year, d.year + 1):
            try:
                if self.occurrence_in_year(name, year, memo) == d:
                    return True
            except NoSuchOccurrenceError:
                continue
        return False

    # -------------------------------------------------------------------------
    # Range Enumeration
    # -------------------------------------------------------------------------

    def dates_in_year(
        self,
        name: str,
        year: int,
        memo: Optional[Memo] = None,
    ) -> list[CalendarDate]:
        """
        Every date within calendar ``year`` that the rule occupies, sorted.

        Daily-set rules yield all matching days. Lieu rules include
        shifted dates carried in from the neighbouring years. Rules with
        no such occurrence in a year contribute nothing for that year.
        """
        if memo is None:
            memo = {}
        rule = self._rules[name]

        if isinstance(rule, DailySetRule):
            if not rule.in_effect(year):
                return []
            start = CalendarDate(year, 1, 1)
            days = 366 if is_leap_year(year) else 365
            return [
                d for d in (start.add_days(i) for i in range(days))
                if d.weekday in rule.weekdays
            ]

        source_years = (year - 1, year, year + 1) if isinstance(rule, LieuRule) else (year,)
        found: set[CalendarDate] = set()
        for source in source_years:
            try:
                occurrence = self.occurrence_in_year(name, source, memo)
            except NoSuchOccurrenceError:
                continue
            if occurrence is not None and occurrence.year == year:
                found.add(occurrence)
        return sorted(found)
