"""Path-aware index of constraints derived from a contract's rules."""

from __future__ import annotations

import copy
from typing import Any, Mapping, Optional

from schemagraph.core.constraints.models import ConstraintSet, merge_constraints
from schemagraph.core.constraints.predicates import (
    And,
    Each,
    Implication,
    Key,
    Not,
    Or,
    PredicateNode,
    Rule,
    parse_ast,
)
from schemagraph.core.constraints.walker import AstWalker

ITEM_SEGMENT = "[]"


class RuleIndex:
    """Constraints by key path, built from ``{name: rule}`` mappings.

    Paths join key names with ``/``; ``[]`` marks the members of an array,
    so ``"tags"`` holds the container's constraints and ``"tags/[]"`` the
    constraints every tag must satisfy.
    """

    def __init__(
        self, rules: Mapping[str, Any], walker: Optional[AstWalker] = None
    ) -> None:
        self.walker = walker or AstWalker()
        self.rules = {str(name): parse_ast(rule) for name, rule in rules.items()}
        self.constraints_by_path: dict[str, ConstraintSet] = {}

        for rule in self.rules.values():
            self._collect(rule, [])

    def constraints_for(self, path: str) -> ConstraintSet:
        """Constraints indexed at ``path``; a fresh empty set if none."""
        found = self.constraints_by_path.get(path)
        return copy.deepcopy(found) if found is not None else ConstraintSet()

    def is_required(self, name: str) -> Optional[bool]:
        """Whether key ``name`` must be present, from its rule's top-level tag.

        Rules guarded by an implication only apply when the key is given, so
        the key is optional. Returns None when there is no rule for ``name``.
        """
        node = self.rules.get(name)
        if node is None:
            return None
        while isinstance(node, Rule):
            node = parse_ast(node.child)
        return not isinstance(node, Implication)

    def _collect(self, node: Optional[PredicateNode], path: list[str]) -> None:
        if isinstance(node, Key):
            child = parse_ast(node.child)
            if child is None:
                return
            new_path = path + [str(node.name)]
            self._index(child, new_path)
            self._collect(child, new_path)
        elif isinstance(node, Each):
            child = parse_ast(node.child)
            if child is None:
                return
            item_path = path + [ITEM_SEGMENT]
            self._index(child, item_path)
            self._collect(child, item_path)
        elif isinstance(node, (Rule, Not)):
            self._collect(parse_ast(node.child), path)
        elif isinstance(node, (And, Or, Implication)):
            for child in node.children:
                self._collect(parse_ast(child), path)

    def _index(self, node: PredicateNode, path: list[str]) -> None:
        pruned = prune_nested(node)
        if pruned is None:
            return
        constraints = self.walker.walk(pruned)
        constraints.required = None

        key = "/".join(path)
        if key in self.constraints_by_path:
            merge_constraints(self.constraints_by_path[key], constraints)
        else:
            self.constraints_by_path[key] = constraints


def prune_nested(node: Any) -> Optional[PredicateNode]:
    """Drop nested ``key``/``each`` subtrees so only this level's rules remain."""
    node = parse_ast(node)
    if node is None or isinstance(node, (Key, Each)):
        return None
    if isinstance(node, (And, Or)):
        children = tuple(c for c in map(prune_nested, node.children) if c is not None)
        return type(node)(children) if children else None
    if isinstance(node, Implication):
        return Implication(tuple(prune_nested(c) for c in node.children))
    if isinstance(node, Rule):
        child = prune_nested(node.child)
        return Rule(child) if child is not None else None
    if isinstance(node, Not):
        return Not(prune_nested(node.child))
    return node
