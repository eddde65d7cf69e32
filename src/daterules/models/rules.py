"""
daterules Rule Models

The Rule union: one frozen dataclass per recurrence pattern.

Key components:
- DailySetRule: weekday membership ("Weekend")
- AnnualRule: fixed month/day every year ("Christmas")
- SpecificRule: one fully-qualified date ("Good Friday 2024")
- NthWeekdayRule: N-th (or N-th from last) weekday of a month
- LieuRule: derived from another rule, shifted off blocked days

Concrete rules test dates on their own. Lieu rules need the rest of the
Rule Set to resolve their referent, so their derivation lives in
daterules.engine.occurrences.

Every rule validates itself on construction and raises
InvalidRuleDefinitionError for malformed parameters.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Iterable, Iterator, Optional, Union

from ..exceptions import (
    InvalidDateError,
    InvalidRuleDefinitionError,
    NoSuchOccurrenceError,
)
from .dates import CalendarDate, DateLike, days_in_month
from .enums import WEEKEND, RuleKind, ShiftDirection, Weekday


# Upper bound on how far a lieu date may move from its referent
MAX_SHIFT_DAYS = 366

# Longest month is 31 days, so no weekday occurs more than five times
MAX_WEEKDAY_OCCURRENCES = 5


# =============================================================================
# Shared Behaviour
# =============================================================================

class _RuleBase:
    """Behaviour common to every rule variant."""

    kind: ClassVar[RuleKind]

    name: str
    classification: Optional[str]
    first_year: Optional[int]
    last_year: Optional[int]

    @property
    def label(self) -> str:
        """Classification reported by RuleSet.classify()."""
        return self.classification or self.name

    def in_effect(self, year: int) -> bool:
        """Check the optional first/last year bounds (inclusive)."""
        if self.first_year is not None and year < self.first_year:
            return False
        if self.last_year is not None and year > self.last_year:
            return False
        return True

    def _invalid(self, message: str, **details: object) -> InvalidRuleDefinitionError:
        return InvalidRuleDefinitionError(
            message=message,
            details={"kind": self.kind.value, **details},
            rule_name=self.name if isinstance(self.name, str) else None,
        )

    def _require_int(self, field_name: str) -> None:
        value = getattr(self, field_name)
        # bool is an int subclass but never a valid month, day or count
        if not isinstance(value, int) or isinstance(value, bool):
            raise self._invalid(
                f"{field_name} must be an integer, got {value!r}",
                **{field_name: repr(value)},
            )

    def _validate_common(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise self._invalid("Rule name must be a non-empty string")
        for bound in ("first_year", "last_year"):
            if getattr(self, bound) is not None:
                self._require_int(bound)
        if (
            self.first_year is not None
            and self.last_year is not None
            and self.first_year > self.last_year
        ):
            raise self._invalid(
                f"first_year {self.first_year} is after last_year {self.last_year}",
                first_year=self.first_year,
                last_year=self.last_year,
            )


def _parse_weekdays(values: Iterable[Union[str, Weekday]]) -> frozenset[Weekday]:
    if isinstance(values, (str, Weekday)):
        raise ValueError(f"Expected a collection of weekdays, got {values!r}")
    try:
        items = list(values)
    except TypeError:
        raise ValueError(f"Expected a collection of weekdays, got {values!r}") from None
    return frozenset(Weekday.parse(v) for v in items)


# =============================================================================
# Daily-Set Rule
# =============================================================================

@dataclass(frozen=True)
class DailySetRule(_RuleBase):
    """
    Matches every date whose weekday is in a set.

    Has no single yearly occurrence.

    Attributes:
        name: Unique rule name
        weekdays: Weekdays that match (at least one)
    """
    kind: ClassVar[RuleKind] = RuleKind.DAILY_SET

    name: str
    weekdays: frozenset[Weekday]
    classification: Optional[str] = None
    first_year: Optional[int] = None
    last_year: Optional[int] = None

    def __post_init__(self) -> None:
        self._validate_common()
        try:
            weekdays = _parse_weekdays(self.weekdays)
        except ValueError as e:
            raise self._invalid(str(e)) from e
        if not weekdays:
            raise self._invalid("Weekday set must not be empty")
        object.__setattr__(self, "weekdays", weekdays)

    def matches(self, d: DateLike) -> bool:
        return CalendarDate.of(d).weekday in self.weekdays


# =============================================================================
# Annual Rule
# =============================================================================

@dataclass(frozen=True)
class AnnualRule(_RuleBase):
    """
    Matches a fixed (month, day) in every year.

    29 February only matches in leap years; it is never moved to the 28th.
    """
    kind: ClassVar[RuleKind] = RuleKind.ANNUAL

    name: str
    month: int
    day: int
    classification: Optional[str] = None
    first_year: Optional[int] = None
    last_year: Optional[int] = None

    def __post_init__(self) -> None:
        self._validate_common()
        self._require_int("month")
        self._require_int("day")
        if not 1 <= self.month <= 12:
            raise self._invalid(f"Month out of range: {self.month}", month=self.month)
        # 2000 is a leap year, so this accepts 29 February
        if not 1 <= self.day <= days_in_month(2000, self.month):
            raise self._invalid(
                f"Day {self.day} never occurs in month {self.month}",
                month=self.month,
                day=self.day,
            )

    def matches(self, d: DateLike) -> bool:
        d = CalendarDate.of(d)
        return d.month == self.month and d.day == self.day

    def occurrence_in_year(self, year: int) -> CalendarDate:
        """
        Build this year's date.

        Raises:
            InvalidDateError: For 29 February in a common year
        """
        return CalendarDate(year, self.month, self.day)


# =============================================================================
# Specific Rule
# =============================================================================

@dataclass(frozen=True)
class SpecificRule(_RuleBase):
    """Matches exactly one date."""
    kind: ClassVar[RuleKind] = RuleKind.SPECIFIC

    name: str
    on: CalendarDate
    classification: Optional[str] = None
    first_year: Optional[int] = None
    last_year: Optional[int] = None

    def __post_init__(self) -> None:
        self._validate_common()
        try:
            on = CalendarDate.of(self.on)
        except (InvalidDateError, TypeError) as e:
            raise self._invalid(f"Invalid date for specific rule: {self.on!r}") from e
        object.__setattr__(self, "on", on)

    def matches(self, d: DateLike) -> bool:
        return CalendarDate.of(d) == self.on

    def occurrence_in_year(self, year: int) -> Optional[CalendarDate]:
        return self.on if self.on.year == year else None


# =============================================================================
# Nth-Weekday-Of-Month Rule
# =============================================================================

@dataclass(frozen=True)
class NthWeekdayRule(_RuleBase):
    """
    Matches the N-th occurrence of a weekday in a month, every year.

    n counts from the start of the month for 1..5 and from the end for
    -1..-5 (-1 is the last occurrence).

    Examples:
        NthWeekdayRule("Early May", month=5, weekday=Weekday.MONDAY, n=1)
        NthWeekdayRule("Spring", month=5, weekday=Weekday.MONDAY, n=-1)
    """
    kind: ClassVar[RuleKind] = RuleKind.NTH_WEEKDAY

    name: str
    month: int
    weekday: Weekday
    n: int
    classification: Optional[str] = None
    first_year: Optional[int] = None
    last_year: Optional[int] = None

    def __post_init__(self) -> None:
        self._validate_common()
        self._require_int("month")
        self._require_int("n")
        if not 1 <= self.month <= 12:
            raise self._invalid(f"Month out of range: {self.month}", month=self.month)
        if self.n == 0 or abs(self.n) > MAX_WEEKDAY_OCCURRENCES:
            raise self._invalid(
                f"n must be 1..5 or -1..-5, got {self.n}",
                n=self.n,
            )
        try:
            object.__setattr__(self, "weekday", Weekday.parse(self.weekday))
        except ValueError as e:
            raise self._invalid(str(e)) from e

    def occurrence_in_year(self, year: int) -> CalendarDate:
        """
        Compute the date this rule occupies in ``year``.

        Raises:
            NoSuchOccurrenceError: If the month has fewer than |n|
                occurrences of the weekday
        """
        last_day = days_in_month(year, self.month)
        first = next(
            day for day in range(1, 8)
            if CalendarDate(year, self.month, day).weekday == self.weekday
        )
        if self.n > 0:
            day = first + (self.n - 1) * 7
        else:
            last = first
            while last + 7 <= last_day:
                last += 7
            day = last + (self.n + 1) * 7

        if not 1 <= day <= last_day:
            raise NoSuchOccurrenceError(
                message=(
                    f"No occurrence {self.n} of {self.weekday.value} "
                    f"in {year:04d}-{self.month:02d}"
                ),
                details={"year": year, "month": self.month, "n": self.n},
                rule_name=self.name,
            )
        return CalendarDate(year, self.month, day)

    def matches(self, d: DateLike) -> bool:
        d = CalendarDate.of(d)
        if d.month != self.month or d.weekday != self.weekday:
            return False
        try:
            return self.occurrence_in_year(d.year) == d
        except NoSuchOccurrenceError:
            return False


# =============================================================================
# Lieu-Of Rule
# =============================================================================

@dataclass(frozen=True)
class ShiftPolicy:
    """
    How a lieu date moves off its referent's date.

    Attributes:
        blocked: Weekdays the lieu date may not fall on
        avoid: Other rule names whose dates the lieu date may not take
        direction: Which way to search for a free day
    """
    blocked: frozenset[Weekday] = WEEKEND
    avoid: tuple[str, ...] = ()
    direction: ShiftDirection = ShiftDirection.FORWARD

    def __post_init__(self) -> None:
        try:
            blocked = _parse_weekdays(self.blocked)
            direction = ShiftDirection(self.direction)
        except (ValueError, TypeError) as e:
            raise InvalidRuleDefinitionError(
                message=f"Invalid shift policy: {e}",
                details={"blocked": repr(self.blocked), "direction": repr(self.direction)},
            ) from e
        if not isinstance(self.avoid, (tuple, list)) or not all(
            isinstance(name, str) and name for name in self.avoid
        ):
            raise InvalidRuleDefinitionError(
                message=f"avoid must be a collection of rule names, got {self.avoid!r}",
                details={"avoid": repr(self.avoid)},
            )
        object.__setattr__(self, "blocked", blocked)
        object.__setattr__(self, "avoid", tuple(self.avoid))
        object.__setattr__(self, "direction", direction)

    def is_blocked(self, d: CalendarDate) -> bool:
        return d.weekday in self.blocked

    def candidates(self, origin: CalendarDate) -> Iterator[CalendarDate]:
        """Dates to try, nearest first, in the policy's direction."""
        for step in range(1, MAX_SHIFT_DAYS + 1):
            if self.direction == ShiftDirection.FORWARD:
                yield origin.add_days(step)
            elif self.direction == ShiftDirection.BACKWARD:
                yield origin.add_days(-step)
            else:
                yield origin.add_days(step)
                yield origin.add_days(-step)


@dataclass(frozen=True)
class LieuRule(_RuleBase):
    """
    Observes a referent rule on a substitute date.

    When the referent's occurrence falls on a blocked weekday, the lieu
    date is the nearest day in the policy's direction that is not blocked
    and does not match the referent or any avoided rule. When no shift is
    needed the lieu rule coincides with the referent.

    Attributes:
        name: Unique rule name
        referent: Name of the rule this one is derived from
        policy: Shift policy
    """
    kind: ClassVar[RuleKind] = RuleKind.LIEU

    name: str
    referent: str
    policy: ShiftPolicy = field(default_factory=ShiftPolicy)
    classification: Optional[str] = None
    first_year: Optional[int] = None
    last_year: Optional[int] = None

    def __post_init__(self) -> None:
        self._validate_common()
        if not isinstance(self.referent, str) or not self.referent.strip():
            raise self._invalid("Lieu rule needs a referent rule name")
        if not isinstance(self.policy, ShiftPolicy):
            raise self._invalid(f"policy must be a ShiftPolicy, got {type(self.policy).__name__}")
        if len(self.policy.blocked) == len(Weekday):
            raise self._invalid(
                "Every weekday is blocked; a lieu date can never be found",
                blocked=sorted(w.value for w in self.policy.blocked),
            )

    @property
    def dependencies(self) -> tuple[str, ...]:
        """Rules that must be resolved before this one."""
        return (self.referent, *self.policy.avoid)


Rule = Union[DailySetRule, AnnualRule, SpecificRule, NthWeekdayRule, LieuRule]

RULE_TYPES: tuple[type, ...] = (
    DailySetRule,
    AnnualRule,
    SpecificRule,
    NthWeekdayRule,
    LieuRule,
)
