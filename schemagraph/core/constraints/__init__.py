"""Constraint extraction: predicate ASTs, the walker, the applier and the rule index."""

from schemagraph.core.constraints.applier import ConstraintApplier, apply_constraints
from schemagraph.core.constraints.models import (
    ConstraintSet,
    intersect_constraints,
    merge_constraints,
)
from schemagraph.core.constraints.predicates import (
    And,
    Each,
    Implication,
    Key,
    Not,
    Or,
    Predicate,
    PredicateNode,
    Rule,
    Span,
    parse_ast,
    pred,
)
from schemagraph.core.constraints.rule_index import RuleIndex
from schemagraph.core.constraints.walker import AstWalker, PredicateHandler, walk

__all__ = [
    "ConstraintSet",
    "merge_constraints",
    "intersect_constraints",
    "PredicateNode",
    "Predicate",
    "Rule",
    "And",
    "Or",
    "Not",
    "Implication",
    "Key",
    "Each",
    "Span",
    "pred",
    "parse_ast",
    "AstWalker",
    "PredicateHandler",
    "walk",
    "ConstraintApplier",
    "apply_constraints",
    "RuleIndex",
]
