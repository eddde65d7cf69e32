"""
daterules Dependency Resolution Tests

Validates that Rule Set construction:
- Rejects unknown referents and unknown avoided rules
- Rejects cycles, including self-reference
- Orders lieu rules after everything they depend on
- Rejects duplicate names and daily-set referents
"""
from __future__ import annotations

import pytest

from daterules import (
    AnnualRule,
    CyclicReferenceError,
    InvalidRuleDefinitionError,
    RuleSet,
    RuleSetDependencyError,
    UnknownReferentError,
    resolve_evaluation_order,
)

from tests.conftest import make_lieu, make_weekend


# =============================================================================
# Unknown References
# =============================================================================

class TestUnknownReferences:
    """Test that dangling names fail the build."""

    def test_unknown_referent(self) -> None:
        with pytest.raises(UnknownReferentError) as exc_info:
            RuleSet([make_lieu("Orphan lieu", "Missing")])
        error = exc_info.value
        assert error.code == "DR_UNKNOWN_REFERENT"
        assert error.rule_name == "Orphan lieu"
        assert error.details == {"referent": "Missing", "role": "referent"}

    def test_unknown_avoided_rule(self) -> None:
        with pytest.raises(UnknownReferentError) as exc_info:
            RuleSet([
                AnnualRule("Christmas", month=12, day=25),
                make_lieu("Christmas lieu", "Christmas", avoid=("Boxing Day",)),
            ])
        assert exc_info.value.details["role"] == "avoided rule"

    def test_is_a_dependency_error(self) -> None:
        with pytest.raises(RuleSetDependencyError):
            RuleSet([make_lieu("Orphan lieu", "Missing")])


# =============================================================================
# Cycles
# =============================================================================

class TestCycles:
    """Test cycle detection across referent and avoid edges."""

    def test_two_rule_cycle(self) -> None:
        with pytest.raises(CyclicReferenceError) as exc_info:
            RuleSet([make_lieu("A", "B"), make_lieu("B", "A")])
        error = exc_info.value
        assert error.code == "DR_CYCLIC_REFERENCE"
        assert error.details["cycle"] == ["A", "B", "A"]
        assert "A -> B -> A" in error.message

    def test_self_reference(self) -> None:
        with pytest.raises(CyclicReferenceError) as exc_info:
            RuleSet([make_lieu("Loop", "Loop")])
        assert exc_info.value.details["cycle"] == ["Loop", "Loop"]

    def test_cycle_through_avoid_list(self) -> None:
        with pytest.raises(CyclicReferenceError):
            RuleSet([
                AnnualRule("Christmas", month=12, day=25),
                AnnualRule("Boxing Day", month=12, day=26),
                make_lieu("Christmas lieu", "Christmas", avoid=("Boxing Day lieu",)),
                make_lieu("Boxing Day lieu", "Boxing Day", avoid=("Christmas lieu",)),
            ])

    def test_longer_cycle_behind_valid_rules(self) -> None:
        with pytest.raises(CyclicReferenceError) as exc_info:
            RuleSet([
                AnnualRule("Holiday", month=1, day=1),
                make_lieu("Fine", "Holiday"),
                make_lieu("X", "Y"),
                make_lieu("Y", "Z"),
                make_lieu("Z", "X"),
            ])
        assert exc_info.value.details["cycle"] == ["X", "Y", "Z", "X"]


# =============================================================================
# Evaluation Order
# =============================================================================

class TestEvaluationOrder:
    """Test the topological evaluation order."""

    def test_concrete_rules_first_in_definition_order(self, christmas_rules: RuleSet) -> None:
        assert christmas_rules.evaluation_order == (
            "Workday",
            "Weekend",
            "Christmas",
            "Boxing Day",
            "Christmas lieu",
            "Boxing Day lieu",
        )

    def test_lieu_after_avoided_lieu(self) -> None:
        rules = {
            rule.name: rule
            for rule in [
                make_lieu("Boxing Day lieu", "Boxing Day", avoid=("Christmas lieu",)),
                AnnualRule("Boxing Day", month=12, day=26),
                make_lieu("Christmas lieu", "Christmas"),
                AnnualRule("Christmas", month=12, day=25),
            ]
        }
        order = resolve_evaluation_order(rules)
        assert order == ("Boxing Day", "Christmas", "Christmas lieu", "Boxing Day lieu")

    def test_every_dependency_precedes_its_dependent(self) -> None:
        rule_set = RuleSet([
            make_lieu("C", "B"),
            make_lieu("B", "A", avoid=("D",)),
            AnnualRule("A", month=3, day=1),
            AnnualRule("D", month=3, day=2),
        ])
        order = rule_set.evaluation_order
        position = {name: i for i, name in enumerate(order)}
        for rule in rule_set:
            for dep in getattr(rule, "dependencies", ()):
                assert position[dep] < position[rule.name]

    def test_definition_order_preserved_for_queries(self) -> None:
        rule_set = RuleSet([
            make_lieu("Second", "First"),
            AnnualRule("First", month=3, day=1),
        ])
        assert rule_set.names == ("Second", "First")
        assert list(rule_set.occurrences_in_year(2024)) == ["Second", "First"]


# =============================================================================
# Other Construction Checks
# =============================================================================

class TestConstruction:
    """Test the remaining whole-set checks."""

    def test_duplicate_names_rejected(self) -> None:
        with pytest.raises(InvalidRuleDefinitionError) as exc_info:
            RuleSet([
                AnnualRule("Holiday", month=1, day=1),
                AnnualRule("Holiday", month=2, day=1),
            ])
        assert exc_info.value.rule_name == "Holiday"

    def test_daily_set_referent_rejected(self) -> None:
        with pytest.raises(InvalidRuleDefinitionError) as exc_info:
            RuleSet([make_weekend(), make_lieu("Weekend lieu", "Weekend")])
        assert exc_info.value.details == {"referent": "Weekend"}

    def test_avoiding_daily_set_allowed(self) -> None:
        rule_set = RuleSet([
            make_weekend(),
            AnnualRule("Holiday", month=1, day=1),
            make_lieu("Holiday lieu", "Holiday", avoid=("Weekend",)),
        ])
        assert "Holiday lieu" in rule_set

    def test_non_rule_rejected(self) -> None:
        with pytest.raises(InvalidRuleDefinitionError):
            RuleSet([{"kind": "annual", "name": "Not built", "month": 1, "day": 1}])

    def test_empty_rule_set(self) -> None:
        rule_set = RuleSet([])
        assert len(rule_set) == 0
        assert rule_set.matches("2024-01-01") == []
        assert rule_set.classify("2024-01-01") is None
