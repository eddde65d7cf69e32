"""
daterules Enumerations

All enums inherit from (str, Enum) for JSON serialization compatibility.
"""
from __future__ import annotations

from enum import Enum
from typing import Union


# =============================================================================
# Weekday
# =============================================================================

class Weekday(str, Enum):
    """Day of the week. Ordering follows ISO: Monday first."""
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @property
    def ordinal(self) -> int:
        """0 for Monday through 6 for Sunday (same as ``date.weekday()``)."""
        return _WEEKDAY_ORDER.index(self)

    @property
    def abbreviation(self) -> str:
        return self.value[:3]

    @classmethod
    def from_ordinal(cls, ordinal: int) -> Weekday:
        return _WEEKDAY_ORDER[ordinal % 7]

    @classmethod
    def parse(cls, value: Union[str, Weekday]) -> Weekday:
        """Accept a Weekday, a full name or a three-letter abbreviation."""
        if isinstance(value, Weekday):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Weekday must be a name, got {value!r}")
        key = value.strip().lower()
        for day in _WEEKDAY_ORDER:
            if key in (day.value, day.abbreviation):
                return day
        raise ValueError(f"Unknown weekday: {value!r}")


_WEEKDAY_ORDER = tuple(Weekday)

WEEKEND = frozenset({Weekday.SATURDAY, Weekday.SUNDAY})


# =============================================================================
# Rule Kinds
# =============================================================================

class RuleKind(str, Enum):
    """Variants of the Rule union."""
    DAILY_SET = "daily_set"
    ANNUAL = "annual"
    SPECIFIC = "specific"
    NTH_WEEKDAY = "nth_weekday"
    LIEU = "lieu"


# =============================================================================
# Lieu Shift Direction
# =============================================================================

class ShiftDirection(str, Enum):
    """Which way a lieu date moves away from a blocked day."""
    FORWARD = "forward"        # Next free day (substitute day off)
    BACKWARD = "backward"      # Previous free day
    NEAREST = "nearest"        # Closest free day, forward on ties
