"""
daterules Rule Descriptor Schemas

Pydantic models for validating in-memory rule descriptors (plain dicts
produced by whatever reads the caller's configuration).

Each descriptor carries a ``kind`` that selects its variant:

    {"kind": "annual", "name": "Christmas Day", "month": 12, "day": 25}
    {"kind": "lieu", "name": "Christmas (substitute)", "referent": "Christmas Day",
     "avoid": ["Boxing Day"]}

Schema versioning:
- schema_version field tracks breaking changes
- Loaders check major version compatibility
"""
from __future__ import annotations

from datetime import date
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..models.dates import days_in_month
from ..models.enums import Weekday


# =============================================================================
# Schema Version
# =============================================================================

SCHEMA_VERSION = "1.0.0"


# =============================================================================
# Enums as Literals
# =============================================================================

ShiftDirectionValue = Literal["forward", "backward", "nearest"]


def _weekday_names(values: list[str]) -> list[str]:
    return [Weekday.parse(v).value for v in values]


# =============================================================================
# Base Schema
# =============================================================================

class RuleSchemaBase(BaseModel):
    """Fields shared by every rule descriptor."""
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, description="Unique rule name")
    classification: Optional[str] = Field(
        None, description="Label reported by classify() (defaults to name)"
    )
    description: Optional[str] = Field(None, description="Human-readable description")
    first_year: Optional[int] = Field(None, description="First year the rule applies")
    last_year: Optional[int] = Field(None, description="Last year the rule applies")

    @model_validator(mode="after")
    def validate_year_range(self) -> "RuleSchemaBase":
        if (
            self.first_year is not None
            and self.last_year is not None
            and self.first_year > self.last_year
        ):
            raise ValueError(
                f"first_year {self.first_year} is after last_year {self.last_year}"
            )
        return self


# =============================================================================
# Variant Schemas
# =============================================================================

class DailySetSchema(RuleSchemaBase):
    """Weekday-membership rule, e.g. the weekend."""
    kind: Literal["daily_set"]
    weekdays: list[str] = Field(..., min_length=1, description="Weekday names")

    @field_validator("weekdays")
    @classmethod
    def validate_weekdays(cls, v: list[str]) -> list[str]:
        return _weekday_names(v)


class AnnualSchema(RuleSchemaBase):
    """Fixed month/day every year."""
    kind: Literal["annual"]
    month: int = Field(..., ge=1, le=12)
    day: int = Field(..., ge=1, le=31)

    @model_validator(mode="after")
    def validate_day_in_month(self) -> "AnnualSchema":
        # Checked against a leap year so 29 February is accepted
        if self.day > days_in_month(2000, self.month):
            raise ValueError(f"Day {self.day} never occurs in month {self.month}")
        return self


class SpecificSchema(RuleSchemaBase):
    """A single fully-qualified date."""
    kind: Literal["specific"]
    on: date = Field(..., description="ISO date, e.g. 2024-03-29")


class NthWeekdaySchema(RuleSchemaBase):
    """N-th weekday of a month; negative n counts from the end."""
    kind: Literal["nth_weekday"]
    month: int = Field(..., ge=1, le=12)
    weekday: str
    n: int = Field(..., ge=-5, le=5, description="1..5, or -1 (last) .. -5")

    @field_validator("weekday")
    @classmethod
    def validate_weekday(cls, v: str) -> str:
        return Weekday.parse(v).value

    @field_validator("n")
    @classmethod
    def validate_n(cls, v: int) -> int:
        if v == 0:
            raise ValueError("n must not be 0")
        return v


class LieuSchema(RuleSchemaBase):
    """Substitute observance of another rule."""
    kind: Literal["lieu"]
    referent: str = Field(..., min_length=1, description="Rule this one is derived from")
    blocked: list[str] = Field(
        default_factory=lambda: ["saturday", "sunday"],
        description="Weekdays the lieu date may not fall on",
    )
    avoid: list[str] = Field(
        default_factory=list,
        description="Rules whose dates the lieu date may not take",
    )
    direction: ShiftDirectionValue = Field("forward", description="Search direction")

    @field_validator("blocked")
    @classmethod
    def validate_blocked(cls, v: list[str]) -> list[str]:
        names = _weekday_names(v)
        if len(set(names)) == len(Weekday):
            raise ValueError("Every weekday is blocked; a lieu date can never be found")
        return names


RuleDescriptor = Annotated[
    Union[DailySetSchema, AnnualSchema, SpecificSchema, NthWeekdaySchema, LieuSchema],
    Field(discriminator="kind"),
]


# =============================================================================
# Rule Set Schema
# =============================================================================

class RuleSetSchema(BaseModel):
    """A named list of rule descriptors."""
    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(SCHEMA_VERSION, description="Descriptor schema version")
    name: str = Field("", description="Rule set name (e.g. a jurisdiction)")
    description: Optional[str] = None
    search_years: int = Field(50, ge=1, description="Cap for next/previous searches")
    rules: list[RuleDescriptor] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_unique_names(self) -> "RuleSetSchema":
        seen: set[str] = set()
        for rule in self.rules:
            if rule.name in seen:
                raise ValueError(f"Duplicate rule name: '{rule.name}'")
            seen.add(rule.name)
        return self


# =============================================================================
# Validation Functions
# =============================================================================

def validate_rule_set(data: dict[str, Any]) -> RuleSetSchema:
    """
    Validate a rule set dictionary against the schema.

    Raises:
        pydantic.ValidationError: If validation fails
    """
    return RuleSetSchema.model_validate(data)


def check_schema_version(data: dict[str, Any]) -> bool:
    """Check the major version of a descriptor's schema_version."""
    version = str(data.get("schema_version", SCHEMA_VERSION))
    return version.split(".")[0] == SCHEMA_VERSION.split(".")[0]
