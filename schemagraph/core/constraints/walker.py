"""Predicate-AST walker: derives structural constraints from rule trees.

The walker interprets a validation rule tree and returns the facts a schema
can express (bounds, enums, patterns, nullability, formats). It is pure and
never raises on malformed input: shapes it does not recognize contribute
nothing, and predicate names it does not know are kept in
``unhandled_predicates``.

Example:
    >>> walker = AstWalker()
    >>> c = walker.walk(pred("filled?") & pred("gt?", 0))
    >>> c.minimum, c.exclusive_minimum, c.nullable
    (0, True, False)
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from schemagraph.core.constraints.arguments import (
    extract_list,
    extract_literal,
    extract_numeric,
    extract_pattern,
    extract_range,
)
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
)
from schemagraph.core.type_mapping import SchemaTypes, python_type_info

logger = logging.getLogger(__name__)

FORMAT_PREDICATES: dict[str, str] = {
    "uuid?": "uuid",
    "email?": "email",
    "uri?": "uri",
    "url?": "uri",
    "date?": "date",
    "date_time?": "date-time",
    "time?": "date-time",
}

# Type checks already expressed by the schema's own type.
TYPE_CHECK_PREDICATES = frozenset(
    {"str?", "int?", "float?", "decimal?", "number?", "array?", "hash?", "list?", "dict?"}
)


class PredicateHandler:
    """Maps a single predicate leaf to the constraints it implies."""

    def __init__(self) -> None:
        self._table: dict[str, Callable[[str, tuple], ConstraintSet]] = {
            "key?": self._key,
            "size?": self._size,
            "min_size?": self._size,
            "max_size?": self._max_size,
            "bytesize?": self._bytesize,
            "min_bytesize?": self._bytesize,
            "max_bytesize?": self._bytesize,
            "range?": self._range,
            "empty?": self._empty,
            "maybe": self._nullable,
            "nil?": self._nullable,
            "filled?": self._filled,
            "included_in?": self._included_in,
            "excluded_from?": self._excluded_from,
            "eql?": self._eql,
            "true?": self._bool_literal,
            "false?": self._bool_literal,
            "gt?": self._lower,
            "gteq?": self._lower,
            "min?": self._lower,
            "lt?": self._upper,
            "lteq?": self._upper,
            "max?": self._upper,
            "multiple_of?": self._multiple_of,
            "divisible_by?": self._multiple_of,
            "format?": self._format,
            "bool?": self._boolean,
            "boolean?": self._boolean,
            "type?": self._type,
            "odd?": self._parity,
            "even?": self._parity,
        }
        for name in FORMAT_PREDICATES:
            self._table[name] = self._semantic_format
        for name in TYPE_CHECK_PREDICATES:
            self._table[name] = self._noop

    @property
    def handled_predicates(self) -> frozenset[str]:
        return frozenset(self._table)

    def handle(self, predicate: Predicate) -> ConstraintSet:
        if not isinstance(predicate.name, str):
            return ConstraintSet()
        effect = self._table.get(predicate.name)
        if effect is None:
            logger.debug(
                "Unhandled predicate recorded",
                extra={"context": {"predicate": predicate.name}},
            )
            return ConstraintSet(unhandled_predicates=[str(predicate.name)])
        args = predicate.args if isinstance(predicate.args, tuple) else (predicate.args,)
        return effect(predicate.name, args)

    def _noop(self, name: str, args: tuple) -> ConstraintSet:
        return ConstraintSet()

    def _key(self, name: str, args: tuple) -> ConstraintSet:
        return ConstraintSet(required=True)

    def _size(self, name: str, args: tuple) -> ConstraintSet:
        c = ConstraintSet()
        first = args[0] if args else None
        if name == "size?" and _is_span(first):
            span = extract_range(first)
            if span is not None:
                c.min_size = extract_numeric(span.start)
                c.max_size = extract_numeric(span.end)
            return c
        c.min_size = extract_numeric(first)
        if name == "size?" and len(args) > 1:
            c.max_size = extract_numeric(args[1])
        return c

    def _max_size(self, name: str, args: tuple) -> ConstraintSet:
        return ConstraintSet(max_size=extract_numeric(_first(args)))

    def _bytesize(self, name: str, args: tuple) -> ConstraintSet:
        c = ConstraintSet()
        if name in ("bytesize?", "min_bytesize?"):
            c.min_size = extract_numeric(_first(args))
        if name == "bytesize?":
            c.max_size = extract_numeric(args[1]) if len(args) > 1 else None
        elif name == "max_bytesize?":
            c.max_size = extract_numeric(_first(args))
        return c

    def _range(self, name: str, args: tuple) -> ConstraintSet:
        c = ConstraintSet()
        span = extract_range(_first(args))
        if span is None:
            return c
        c.minimum = span.start
        c.maximum = span.end
        c.exclusive_maximum = span.exclude_end
        return c

    def _empty(self, name: str, args: tuple) -> ConstraintSet:
        return ConstraintSet(min_size=0, max_size=0)

    def _nullable(self, name: str, args: tuple) -> ConstraintSet:
        return ConstraintSet(nullable=True)

    def _filled(self, name: str, args: tuple) -> ConstraintSet:
        return ConstraintSet(nullable=False)

    def _included_in(self, name: str, args: tuple) -> ConstraintSet:
        return ConstraintSet(enum=extract_list(_first(args)))

    def _excluded_from(self, name: str, args: tuple) -> ConstraintSet:
        return ConstraintSet(excluded_values=extract_list(_first(args)))

    def _eql(self, name: str, args: tuple) -> ConstraintSet:
        value = extract_literal(_first(args))
        return ConstraintSet(enum=None if value is None else [value])

    def _bool_literal(self, name: str, args: tuple) -> ConstraintSet:
        return ConstraintSet(enum=[name == "true?"])

    def _lower(self, name: str, args: tuple) -> ConstraintSet:
        value = extract_numeric(_first(args))
        if value is None:
            return ConstraintSet()
        return ConstraintSet(minimum=value, exclusive_minimum=True if name == "gt?" else None)

    def _upper(self, name: str, args: tuple) -> ConstraintSet:
        value = extract_numeric(_first(args))
        if value is None:
            return ConstraintSet()
        return ConstraintSet(maximum=value, exclusive_maximum=True if name == "lt?" else None)

    def _multiple_of(self, name: str, args: tuple) -> ConstraintSet:
        value = extract_numeric(_first(args))
        return ConstraintSet(extensions={"multipleOf": value} if value is not None else None)

    def _format(self, name: str, args: tuple) -> ConstraintSet:
        return ConstraintSet(pattern=extract_pattern(_first(args)))

    def _semantic_format(self, name: str, args: tuple) -> ConstraintSet:
        return ConstraintSet(format=FORMAT_PREDICATES[name])

    def _boolean(self, name: str, args: tuple) -> ConstraintSet:
        return ConstraintSet(type_predicate=SchemaTypes.BOOLEAN)

    def _type(self, name: str, args: tuple) -> ConstraintSet:
        literal = extract_literal(_first(args))
        info = python_type_info(literal)
        if info is not None:
            return ConstraintSet(type_predicate=info.type)
        if isinstance(literal, type):
            return ConstraintSet(type_predicate=literal.__name__)
        return ConstraintSet(type_predicate=literal)

    def _parity(self, name: str, args: tuple) -> ConstraintSet:
        return ConstraintSet(parity=name.rstrip("?"))


class AstWalker:
    """Walks a predicate tree and folds it into one ConstraintSet."""

    def __init__(self, predicate_handler: PredicateHandler | None = None) -> None:
        self.predicate_handler = predicate_handler or PredicateHandler()

    def walk(self, node: Any) -> ConstraintSet:
        """Extract constraints from a rule tree.

        Args:
            node: A PredicateNode or a raw nested-sequence AST

        Returns:
            A fresh ConstraintSet (empty for unrecognized input)
        """
        return self._visit(parse_ast(node))

    def _visit(self, node: PredicateNode | None) -> ConstraintSet:
        if isinstance(node, Predicate):
            return self.predicate_handler.handle(node)
        if isinstance(node, (Rule, Key, Each)):
            # transparent wrappers; each's member constraints are the caller's
            # to place on the items schema
            return self._visit(parse_ast(node.child))
        if isinstance(node, Not):
            # polarity lives in predicate names (nil? / filled?), not here
            return self._visit(parse_ast(node.child))
        if isinstance(node, (And, Implication)):
            acc = ConstraintSet()
            for child in node.children:
                merge_constraints(acc, self._visit(parse_ast(child)))
            return acc
        if isinstance(node, Or):
            branches = [self._visit(parse_ast(child)) for child in node.children]
            return intersect_constraints(branches)
        return ConstraintSet()


def walk(node: Any) -> ConstraintSet:
    """Walk a rule tree with a default walker."""
    return AstWalker().walk(node)


def _first(args: tuple) -> Any:
    return args[0] if args else None


def _is_span(arg: Any) -> bool:
    if isinstance(arg, (Span, range)):
        return True
    return isinstance(arg, (list, tuple)) and len(arg) >= 2 and arg[0] == "range"
