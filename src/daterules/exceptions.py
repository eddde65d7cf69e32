"""
daterules Exception Hierarchy

Domain-specific exceptions for date rule construction and queries.
All exceptions include error codes for tracking and logging.

Exception codes follow the pattern: DR_<SPECIFIC>

Construction-time errors (invalid rules, unknown referents, cycles) fail
the whole Rule Set build. Query-time errors (no such occurrence, search
exhausted) only affect the query that raised them.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class DateRulesError(Exception):
    """
    Base exception for all daterules errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (DR_*)
        details: Additional context about the error
        rule_name: Associated rule name if applicable
    """
    message: str
    code: str = "DR_INTERNAL_ERROR"
    details: dict[str, Any] = field(default_factory=dict)
    rule_name: Optional[str] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        parts = [f"[{self.code}] {self.message}"]
        if self.rule_name:
            parts.append(f"(rule: {self.rule_name})")
        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Serialize exception for logging/API responses."""
        result: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.rule_name:
            result["rule_name"] = self.rule_name
        return result


# =============================================================================
# Date Errors
# =============================================================================

@dataclass
class InvalidDateError(DateRulesError):
    """A (year, month, day) triple is not a valid Gregorian date."""
    code: str = "DR_INVALID_DATE"


# =============================================================================
# Construction Errors
# =============================================================================

@dataclass
class InvalidRuleDefinitionError(DateRulesError):
    """Rule parameters are malformed (month 13, empty weekday set, ...)."""
    code: str = "DR_INVALID_RULE"


@dataclass
class RuleSetVersionMismatch(DateRulesError):
    """Descriptor schema version doesn't match the supported version."""
    code: str = "DR_SCHEMA_VERSION_MISMATCH"


@dataclass
class RuleSetDependencyError(DateRulesError):
    """Lieu rule dependency graph cannot be resolved."""
    code: str = "DR_DEPENDENCY_ERROR"


@dataclass
class UnknownReferentError(RuleSetDependencyError):
    """A lieu rule refers to a rule that is not in the Rule Set."""
    code: str = "DR_UNKNOWN_REFERENT"


@dataclass
class CyclicReferenceError(RuleSetDependencyError):
    """Lieu rules refer to each other in a cycle."""
    code: str = "DR_CYCLIC_REFERENCE"


# =============================================================================
# Query Errors
# =============================================================================

@dataclass
class UnknownRuleError(DateRulesError):
    """A query named a rule that is not in the Rule Set."""
    code: str = "DR_UNKNOWN_RULE"


@dataclass
class NoSuchOccurrenceError(DateRulesError):
    """A rule cannot produce an occurrence (e.g. 5th Monday in a 4-Monday month)."""
    code: str = "DR_NO_SUCH_OCCURRENCE"


@dataclass
class OccurrenceNotFoundError(DateRulesError):
    """Bounded forward/backward search found no occurrence."""
    code: str = "DR_OCCURRENCE_NOT_FOUND"
