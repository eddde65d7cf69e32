"""
daterules Rule Set

An ordered, named, immutable collection of rules and the query surface
over it.

Construction validates everything up front:
- every entry is a rule and every name is unique
- lieu referents exist and are not daily-set rules
- the lieu dependency graph is acyclic

After construction no query can fail because of the rule definitions
themselves; only per-query conditions (no such occurrence, search
exhausted, unknown rule name) are raised, and they leave the Rule Set
usable.
"""
from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, Optional

from ..exceptions import (
    InvalidRuleDefinitionError,
    NoSuchOccurrenceError,
    OccurrenceNotFoundError,
    UnknownRuleError,
)
from ..models.dates import CalendarDate, DateLike
from ..models.rules import RULE_TYPES, DailySetRule, LieuRule, Rule
from .dependencies import resolve_evaluation_order
from .occurrences import Memo, OccurrenceEnumerator

logger = logging.getLogger(__name__)


# Default number of years next/previous_occurrence will scan
DEFAULT_SEARCH_YEARS = 50


class RuleSet:
    """
    A validated calendar of named rules.

    Rule order matters twice: ``matches`` reports names in definition
    order, and ``classify`` lets later rules override earlier ones, so
    rule sets are written general-to-specific (a "Workday" rule first,
    holidays after).

    Usage:
        rules = RuleSet([
            DailySetRule("Weekend", weekdays={Weekday.SATURDAY, Weekday.SUNDAY}),
            AnnualRule("Christmas", month=12, day=25),
            LieuRule("Christmas lieu", referent="Christmas"),
        ], name="example")

        rules.matches("2021-12-25")          # ["Weekend", "Christmas"]
        rules.occurrence_in_year("Christmas lieu", 2021)   # 2021-12-27
    """

    def __init__(
        self,
        rules: Iterable[Rule],
        name: str = "",
        search_years: int = DEFAULT_SEARCH_YEARS,
    ) -> None:
        if search_years < 1:
            raise ValueError(f"search_years must be at least 1, got {search_years}")

        by_name: dict[str, Rule] = {}
        for rule in rules:
            if not isinstance(rule, RULE_TYPES):
                raise InvalidRuleDefinitionError(
                    message=f"Not a rule: {rule!r}",
                    details={"type": type(rule).__name__},
                )
            if rule.name in by_name:
                raise InvalidRuleDefinitionError(
                    message=f"Duplicate rule name '{rule.name}'",
                    rule_name=rule.name,
                )
            by_name[rule.name] = rule

        order = resolve_evaluation_order(by_name)
        for rule in by_name.values():
            if isinstance(rule, LieuRule) and isinstance(by_name[rule.referent], DailySetRule):
                raise InvalidRuleDefinitionError(
                    message=(
                        f"Lieu rule '{rule.name}' refers to daily-set rule "
                        f"'{rule.referent}', which has no single occurrence"
                    ),
                    details={"referent": rule.referent},
                    rule_name=rule.name,
                )

        self.name = name
        self.search_years = search_years
        self._rules: Mapping[str, Rule] = MappingProxyType(by_name)
        self._index = {rule_name: i for i, rule_name in enumerate(by_name)}
        self._order = order
        self._enumerator = OccurrenceEnumerator(self._rules)

        logger.debug(
            "Built rule set %r with %d rules; evaluation order: %s",
            name, len(by_name), ", ".join(order),
        )

    @classmethod
    def from_descriptors(
        cls,
        descriptors: Iterable[Any],
        name: str = "",
        search_years: int = DEFAULT_SEARCH_YEARS,
    ) -> RuleSet:
        """Build from plain mappings (see daterules.packs.schema)."""
        from ..packs.loader import build_rule_set

        return build_rule_set(descriptors, name=name, search_years=search_years)

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def names(self) -> tuple[str, ...]:
        """Rule names in definition order."""
        return tuple(self._rules)

    @property
    def evaluation_order(self) -> tuple[str, ...]:
        """Concrete rules first, then lieu rules after their dependencies."""
        return self._order

    @property
    def rules(self) -> Mapping[str, Rule]:
        return self._rules

    def get(self, name: str) -> Rule:
        try:
            return self._rules[name]
        except KeyError:
            raise UnknownRuleError(
                message=f"Unknown rule '{name}'",
                details={"rule_set": self.name},
                rule_name=name,
            ) from None

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules.values())

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"RuleSet(name={self.name!r}, rules={list(self._rules)!r})"

    # -------------------------------------------------------------------------
    # Matching
    # -------------------------------------------------------------------------

    def matches(self, d: DateLike) -> list[str]:
        """Names of every rule matching ``d``, in definition order."""
        d = CalendarDate.of(d)
        memo: Memo = {}
        return [name for name in self._rules if self._enumerator.matches(name, d, memo)]

    def is_match(self, name: str, d: DateLike) -> bool:
        self.get(name)
        return self._enumerator.matches(name, CalendarDate.of(d))

    def classify(self, d: DateLike) -> Optional[str]:
        """
        Classification of the highest-precedence matching rule.

        Later rules take precedence over earlier ones. Returns None when
        nothing matches.
        """
        d = CalendarDate.of(d)
        memo: Memo = {}
        for name in reversed(self.names):
            if self._enumerator.matches(name, d, memo):
                return self._rules[name].label
        return None

    # -------------------------------------------------------------------------
    # Occurrences
    # -------------------------------------------------------------------------

    def occurrence_in_year(self, name: str, year: int) -> Optional[CalendarDate]:
        """
        The date rule ``name`` maps to in ``year``, or None.

        Raises:
            UnknownRuleError: If no rule has that name
            NoSuchOccurrenceError: If the rule can't occur that year
        """
        self.get(name)
        return self._enumerator.occurrence_in_year(name, year)

    def occurrences_in_year(self, year: int) -> dict[str, Optional[CalendarDate]]:
        """
        Every rule's occurrence for ``year``, keyed in definition order.

        Rules are evaluated in dependency order so referents resolve
        before the lieu rules derived from them. A rule that cannot occur
        this year maps to None.
        """
        memo: Memo = {}
        resolved: dict[str, Optional[CalendarDate]] = {}
        for name in self._order:
            try:
                resolved[name] = self._enumerator.occurrence_in_year(name, year, memo)
            except NoSuchOccurrenceError as e:
                logger.warning("Rule %r has no occurrence in %d: %s", name, year, e.message)
                resolved[name] = None
        return {name: resolved[name] for name in self._rules}

    def dates_in_year(self, name: str, year: int) -> list[CalendarDate]:
        """Every date in calendar ``year`` that rule ``name`` occupies."""
        self.get(name)
        return self._enumerator.dates_in_year(name, year)

    def occurrences_between(
        self,
        start: DateLike,
        end: DateLike,
        names: Optional[Iterable[str]] = None,
    ) -> list[tuple[CalendarDate, str]]:
        """
        All (date, rule name) pairs with ``start <= date <= end``.

        Sorted by date, then by definition order.

        Args:
            start: First date (inclusive)
            end: Last date (inclusive)
            names: Restrict to these rules (default: all)
        """
        start, end = CalendarDate.of(start), CalendarDate.of(end)
        selected = list(self._rules) if names is None else [self.get(n).name for n in names]
        memo: Memo = {}
        hits: list[tuple[CalendarDate, str]] = []
        for year in range(start.year, end.year + 1):
            for name in selected:
                for d in self._enumerator.dates_in_year(name, year, memo):
                    if start <= d <= end:
                        hits.append((d, name))
        hits.sort(key=lambda hit: (hit[0], self._index[hit[1]]))
        return hits

    # -------------------------------------------------------------------------
    # Bounded Search
    # -------------------------------------------------------------------------

    def next_occurrence(
        self,
        name: str,
        from_date: DateLike,
        inclusive: bool = False,
        max_years: Optional[int] = None,
    ) -> CalendarDate:
        """
        First date after ``from_date`` that rule ``name`` occupies.

        Scans year by year: the year of ``from_date`` first, then up to
        ``max_years`` (default ``search_years``) further years, so
        ``max_years + 1`` calendar years in all.

        Raises:
            UnknownRuleError: If no rule has that name
            OccurrenceNotFoundError: If the search is exhausted
        """
        self.get(name)
        start = CalendarDate.of(from_date)
        limit = self.search_years if max_years is None else max_years
        memo: Memo = {}
        for year in range(start.year, start.year + limit + 1):
            candidates = [
                d for d in self._enumerator.dates_in_year(name, year, memo)
                if d > start or (inclusive and d == start)
            ]
            if candidates:
                return candidates[0]
        raise OccurrenceNotFoundError(
            message=f"No occurrence of '{name}' within {limit} years after {start}",
            details={"from": str(start), "max_years": limit},
            rule_name=name,
        )

    def previous_occurrence(
        self,
        name: str,
        from_date: DateLike,
        inclusive: bool = False,
        max_years: Optional[int] = None,
    ) -> CalendarDate:
        """
        Last date before ``from_date`` that rule ``name`` occupies.

        Mirrors next_occurrence: the year of ``from_date`` and then up to
        ``max_years`` (default ``search_years``) earlier years.

        Raises:
            UnknownRuleError: If no rule has that name
            OccurrenceNotFoundError: If the search is exhausted
        """
        self.get(name)
        start = CalendarDate.of(from_date)
        limit = self.search_years if max_years is None else max_years
        memo: Memo = {}
        for year in range(start.year, start.year - limit - 1, -1):
            candidates = [
                d for d in self._enumerator.dates_in_year(name, year, memo)
                if d < start or (inclusive and d == start)
            ]
            if candidates:
                return candidates[-1]
        raise OccurrenceNotFoundError(
            message=f"No occurrence of '{name}' within {limit} years before {start}",
            details={"from": str(start), "max_years": limit},
            rule_name=name,
        )
