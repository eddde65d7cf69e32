"""
daterules Engine

Dependency resolution, occurrence enumeration and the RuleSet query
surface.
"""
from __future__ import annotations

from .cache import OccurrenceCache
from .dependencies import dependency_graph, resolve_evaluation_order
from .occurrences import OccurrenceEnumerator
from .rule_set import DEFAULT_SEARCH_YEARS, RuleSet

__all__ = [
    "RuleSet",
    "DEFAULT_SEARCH_YEARS",
    "OccurrenceEnumerator",
    "OccurrenceCache",
    "dependency_graph",
    "resolve_evaluation_order",
]
