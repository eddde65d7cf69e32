"""
daterules Occurrence Cache

Optional read-through memo of occurrence_in_year results keyed by
(rule name, year). A RuleSet is immutable, so cached values never go
stale; the lock only guards the dict itself so one cache can be shared
between threads.
"""
from __future__ import annotations

import logging
import threading
from typing import Optional

from ..exceptions import NoSuchOccurrenceError
from ..models.dates import CalendarDate
from .rule_set import RuleSet

logger = logging.getLogger(__name__)


class OccurrenceCache:
    """
    Memoizes per-rule, per-year occurrences of one RuleSet.

    Errors are not cached: a rule that raises NoSuchOccurrenceError
    raises again on every call.
    """

    def __init__(self, rule_set: RuleSet) -> None:
        self.rule_set = rule_set
        self._lock = threading.Lock()
        self._values: dict[tuple[str, int], Optional[CalendarDate]] = {}

    def occurrence_in_year(self, name: str, year: int) -> Optional[CalendarDate]:
        key = (name, year)
        with self._lock:
            if key in self._values:
                return self._values[key]
        # Computed outside the lock; concurrent misses compute the same value
        value = self.rule_set.occurrence_in_year(name, year)
        with self._lock:
            self._values.setdefault(key, value)
        return value

    def occurrences_in_year(self, year: int) -> dict[str, Optional[CalendarDate]]:
        """
        Every rule's occurrence for ``year``, as RuleSet.occurrences_in_year.

        Filled rule by rule through occurrence_in_year, so a rule with no
        possible occurrence maps to None here without that None being
        cached for the per-rule call.
        """
        values: dict[str, Optional[CalendarDate]] = {}
        for name in self.rule_set.names:
            try:
                values[name] = self.occurrence_in_year(name, year)
            except NoSuchOccurrenceError as e:
                logger.warning("Rule %r has no occurrence in %d: %s", name, year, e.message)
                values[name] = None
        return values

    def clear(self) -> None:
        with self._lock:
            self._values.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)
