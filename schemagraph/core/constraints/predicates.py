"""Predicate-AST nodes for validation rules.

A validation rule is a small boolean-logic tree. Leaves are named predicates
(``gt?``, ``filled?``, ``included_in?`` ...) with arguments; inner nodes
combine them. Nodes are immutable and can be composed with operators::

    rule = pred("filled?") & pred("gt?", 0)        # And
    rule = pred("nil?") | pred("int?")             # Or
    rule = ~pred("empty?")                         # Not
    rule = pred("key?", "email") >> pred("email?") # Implication

``parse_ast`` converts the nested list/tuple representation exported by
validation libraries into nodes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class PredicateNode:
    """Base class for all predicate-AST nodes."""

    __slots__ = ()

    def __and__(self, other: "PredicateNode") -> "And":
        return And((self, other))

    def __or__(self, other: "PredicateNode") -> "Or":
        return Or((self, other))

    def __invert__(self) -> "Not":
        return Not(self)

    def __rshift__(self, other: "PredicateNode") -> "Implication":
        return Implication((self, other))


@dataclass(frozen=True)
class Predicate(PredicateNode):
    name: str
    args: tuple = ()


@dataclass(frozen=True)
class Rule(PredicateNode):
    child: Any


@dataclass(frozen=True)
class And(PredicateNode):
    children: tuple = ()


@dataclass(frozen=True)
class Or(PredicateNode):
    children: tuple = ()


@dataclass(frozen=True)
class Not(PredicateNode):
    child: Any


@dataclass(frozen=True)
class Implication(PredicateNode):
    """``children`` is (antecedent, consequent)."""

    children: tuple = ()


@dataclass(frozen=True)
class Key(PredicateNode):
    name: str
    child: Any


@dataclass(frozen=True)
class Each(PredicateNode):
    child: Any


@dataclass(frozen=True)
class Span:
    """Bounded interval used as the argument of ``range?``."""

    start: Any = None
    end: Any = None
    exclude_end: bool = False

    @classmethod
    def from_range(cls, rng: range) -> "Span":
        return cls(rng.start, rng.stop, exclude_end=True)


def pred(name: str, *args: Any) -> Predicate:
    """Build a predicate leaf, e.g. ``pred("size?", 1, 10)``."""
    return Predicate(name, tuple(args))


LOGIC_TAGS = frozenset(
    {"predicate", "rule", "and", "or", "implication", "not", "key", "each"}
)

_WRAPPED = {"rule": Rule, "not": Not, "each": Each}
_GROUPS = {"and": And, "or": Or, "implication": Implication}


def parse_ast(raw: Any) -> Optional[PredicateNode]:
    """Convert a raw nested-sequence rule AST into predicate nodes.

    Accepts node instances unchanged. Unrecognized shapes return None.

    Args:
        raw: e.g. ``("and", [("predicate", ("gt?", [("num", 5)])), ...])``

    Returns:
        The equivalent PredicateNode, or None
    """
    if isinstance(raw, PredicateNode):
        return raw
    if not isinstance(raw, (list, tuple)) or not raw:
        return None

    tag = raw[0]
    if not isinstance(tag, str):
        return None

    if tag not in LOGIC_TAGS:
        # shorthand predicate: ("gt?", args)
        if len(raw) == 2:
            return Predicate(tag, _as_args(raw[1]))
        return None

    payload = raw[1] if len(raw) > 1 else None

    if tag == "predicate":
        if isinstance(payload, (list, tuple)) and payload and isinstance(payload[0], str):
            args = payload[1] if len(payload) > 1 else ()
            return Predicate(payload[0], _as_args(args))
        return None

    if tag in _WRAPPED:
        child = parse_ast(payload)
        return _WRAPPED[tag](child) if child is not None else None

    if tag == "key":
        if isinstance(payload, (list, tuple)) and len(payload) >= 2:
            child = parse_ast(payload[-1])
            if child is not None:
                return Key(str(payload[0]), child)
        return None

    children = _group_children(raw)
    return _GROUPS[tag](tuple(c for c in map(parse_ast, children) if c is not None))


def _group_children(raw: Any) -> list:
    # ("and", [a, b]) and ("and", a, b) are both in use
    payload = raw[1] if len(raw) > 1 else []
    if (
        len(raw) == 2
        and isinstance(payload, (list, tuple))
        and not (payload and isinstance(payload[0], str))
    ):
        return list(payload)
    return list(raw[1:])


def _as_args(args: Any) -> tuple:
    if isinstance(args, tuple):
        return args
    if isinstance(args, list):
        return tuple(args)
    return (args,)
