"""
daterules Rule Descriptors

Pydantic schemas for in-memory rule descriptors and the loader that
turns them into a RuleSet.
"""
from __future__ import annotations

from .loader import build_rule, build_rule_set, convert_descriptor, load_rule_set
from .schema import (
    SCHEMA_VERSION,
    AnnualSchema,
    DailySetSchema,
    LieuSchema,
    NthWeekdaySchema,
    RuleDescriptor,
    RuleSetSchema,
    SpecificSchema,
    check_schema_version,
    validate_rule_set,
)

__all__ = [
    "SCHEMA_VERSION",
    "RuleDescriptor",
    "RuleSetSchema",
    "DailySetSchema",
    "AnnualSchema",
    "SpecificSchema",
    "NthWeekdaySchema",
    "LieuSchema",
    "validate_rule_set",
    "check_schema_version",
    "build_rule",
    "build_rule_set",
    "convert_descriptor",
    "load_rule_set",
]
