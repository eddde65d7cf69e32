"""
daterules Lieu Dependency Resolution

Builds the directed graph of lieu rule dependencies (referent and avoid
edges) and produces a linear evaluation order with a depth-first
topological sort. Concrete rules have no dependencies and come first in
definition order; lieu rules follow, each after everything it depends on.

Resolution happens once, when a Rule Set is built. Queries never see an
unresolved or cyclic graph.
"""
from __future__ import annotations

from typing import Mapping

from ..exceptions import CyclicReferenceError, UnknownReferentError
from ..models.rules import LieuRule, Rule


def dependency_graph(rules: Mapping[str, Rule]) -> dict[str, tuple[str, ...]]:
    """
    Map each rule name to the names it depends on.

    Raises:
        UnknownReferentError: If a lieu rule names a rule that doesn't exist
    """
    graph: dict[str, tuple[str, ...]] = {}
    for name, rule in rules.items():
        if not isinstance(rule, LieuRule):
            graph[name] = ()
            continue
        for dep in rule.dependencies:
            if dep not in rules:
                role = "referent" if dep == rule.referent else "avoided rule"
                raise UnknownReferentError(
                    message=f"Lieu rule '{name}' refers to unknown {role} '{dep}'",
                    details={"referent": dep, "role": role},
                    rule_name=name,
                )
        graph[name] = rule.dependencies
    return graph


def resolve_evaluation_order(rules: Mapping[str, Rule]) -> tuple[str, ...]:
    """
    Order rules so every lieu rule comes after its dependencies.

    Args:
        rules: Rules by name, in definition order

    Returns:
        Concrete rule names in definition order, then lieu rule names in
        topological order

    Raises:
        UnknownReferentError: If a dependency doesn't exist
        CyclicReferenceError: If lieu rules depend on each other in a cycle
    """
    graph = dependency_graph(rules)
    order = [name for name, deps in graph.items() if not deps]
    completed: set[str] = set(order)
    visiting: set[str] = set()

    def visit(name: str, path: list[str]) -> None:
        if name in completed:
            return
        if name in visiting:
            cycle = path[path.index(name):] + [name]
            raise CyclicReferenceError(
                message=f"Cyclic lieu reference: {' -> '.join(cycle)}",
                details={"cycle": cycle},
                rule_name=name,
            )

        visiting.add(name)
        for dep in graph[name]:
            visit(dep, path + [name])
        visiting.remove(name)

        completed.add(name)
        order.append(name)

    for name in graph:
        visit(name, [])

    return tuple(order)
