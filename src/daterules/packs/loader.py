"""
daterules Descriptor Loader

Converts validated descriptor schemas into rule models and builds
RuleSets from them. Reading descriptors from files is left to the
caller; this module only accepts in-memory mappings.

Every malformed descriptor surfaces as InvalidRuleDefinitionError at
build time, with pydantic's error list in ``details``.
"""
from __future__ import annotations

from typing import Any, Iterable, Mapping, Union

from pydantic import TypeAdapter, ValidationError

from ..engine.rule_set import DEFAULT_SEARCH_YEARS, RuleSet
from ..exceptions import InvalidRuleDefinitionError, RuleSetVersionMismatch
from ..models import (
    RULE_TYPES,
    AnnualRule,
    CalendarDate,
    DailySetRule,
    LieuRule,
    NthWeekdayRule,
    Rule,
    ShiftDirection,
    ShiftPolicy,
    SpecificRule,
    Weekday,
)
from .schema import (
    SCHEMA_VERSION,
    AnnualSchema,
    DailySetSchema,
    LieuSchema,
    NthWeekdaySchema,
    RuleDescriptor,
    SpecificSchema,
    check_schema_version,
    validate_rule_set,
)

_descriptor_adapter: TypeAdapter[Any] = TypeAdapter(RuleDescriptor)


# =============================================================================
# Schema to Model Converters
# =============================================================================

def _convert_daily_set(schema: DailySetSchema) -> DailySetRule:
    """Convert DailySetSchema to DailySetRule model."""
    return DailySetRule(
        name=schema.name,
        weekdays=frozenset(Weekday(w) for w in schema.weekdays),
        classification=schema.classification,
        first_year=schema.first_year,
        last_year=schema.last_year,
    )


def _convert_annual(schema: AnnualSchema) -> AnnualRule:
    """Convert AnnualSchema to AnnualRule model."""
    return AnnualRule(
        name=schema.name,
        month=schema.month,
        day=schema.day,
        classification=schema.classification,
        first_year=schema.first_year,
        last_year=schema.last_year,
    )


def _convert_specific(schema: SpecificSchema) -> SpecificRule:
    """Convert SpecificSchema to SpecificRule model."""
    return SpecificRule(
        name=schema.name,
        on=CalendarDate.from_date(schema.on),
        classification=schema.classification,
        first_year=schema.first_year,
        last_year=schema.last_year,
    )


def _convert_nth_weekday(schema: NthWeekdaySchema) -> NthWeekdayRule:
    """Convert NthWeekdaySchema to NthWeekdayRule model."""
    return NthWeekdayRule(
        name=schema.name,
        month=schema.month,
        weekday=Weekday(schema.weekday),
        n=schema.n,
        classification=schema.classification,
        first_year=schema.first_year,
        last_year=schema.last_year,
    )


def _convert_lieu(schema: LieuSchema) -> LieuRule:
    """Convert LieuSchema to LieuRule model."""
    return LieuRule(
        name=schema.name,
        referent=schema.referent,
        policy=ShiftPolicy(
            blocked=frozenset(Weekday(w) for w in schema.blocked),
            avoid=tuple(schema.avoid),
            direction=ShiftDirection(schema.direction),
        ),
        classification=schema.classification,
        first_year=schema.first_year,
        last_year=schema.last_year,
    )


_CONVERTERS = {
    "daily_set": _convert_daily_set,
    "annual": _convert_annual,
    "specific": _convert_specific,
    "nth_weekday": _convert_nth_weekday,
    "lieu": _convert_lieu,
}


def convert_descriptor(schema: Any) -> Rule:
    """Convert any validated descriptor schema to its rule model."""
    return _CONVERTERS[schema.kind](schema)


# =============================================================================
# Builders
# =============================================================================

def _validation_error(e: ValidationError, name: Any = None) -> InvalidRuleDefinitionError:
    return InvalidRuleDefinitionError(
        message=f"Rule descriptor validation failed: {e.error_count()} errors",
        details={"errors": e.errors(include_url=False)},
        rule_name=name if isinstance(name, str) else None,
    )


def build_rule(descriptor: Union[Mapping[str, Any], Rule]) -> Rule:
    """
    Build one rule from a descriptor mapping.

    Rule objects are passed through unchanged.

    Raises:
        InvalidRuleDefinitionError: If the descriptor is malformed
    """
    if isinstance(descriptor, RULE_TYPES):
        return descriptor
    try:
        schema = _descriptor_adapter.validate_python(descriptor)
    except ValidationError as e:
        name = descriptor.get("name") if isinstance(descriptor, Mapping) else None
        raise _validation_error(e, name) from e
    return convert_descriptor(schema)


def build_rule_set(
    descriptors: Iterable[Union[Mapping[str, Any], Rule]],
    name: str = "",
    search_years: int = DEFAULT_SEARCH_YEARS,
) -> RuleSet:
    """
    Build a RuleSet from descriptor mappings and/or rule objects.

    Raises:
        InvalidRuleDefinitionError: If any descriptor is malformed
        UnknownReferentError: If a lieu rule names a missing rule
        CyclicReferenceError: If lieu rules form a cycle
    """
    rules = [build_rule(d) for d in descriptors]
    return RuleSet(rules, name=name, search_years=search_years)


def load_rule_set(data: Mapping[str, Any]) -> RuleSet:
    """
    Build a RuleSet from a full rule set mapping.

    Expected shape:
        {"schema_version": "1.0.0", "name": "...", "rules": [...]}

    Raises:
        RuleSetVersionMismatch: If the major schema version differs
        InvalidRuleDefinitionError: If validation fails
    """
    data = dict(data)
    if not check_schema_version(data):
        raise RuleSetVersionMismatch(
            message=(
                f"Rule set schema version {data.get('schema_version')} "
                f"is incompatible with {SCHEMA_VERSION}"
            ),
            details={"expected": SCHEMA_VERSION, "actual": data.get("schema_version")},
        )

    try:
        schema = validate_rule_set(data)
    except ValidationError as e:
        raise _validation_error(e) from e

    return RuleSet(
        [convert_descriptor(rule) for rule in schema.rules],
        name=schema.name,
        search_years=schema.search_years,
    )
