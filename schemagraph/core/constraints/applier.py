"""Applies static field metadata and extracted constraints to a schema node.

Static metadata is declared per field (``Field(max_length=...)``, contract
key options) and always wins; rule-derived constraints only fill what is
still unset. Routing is type-aware: length and pattern rules only reach
string schemas, bounds only numeric schemas, item counts only arrays.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from schemagraph.core.constraints.models import ConstraintSet
from schemagraph.core.schema.models import SchemaNode
from schemagraph.core.type_mapping import SchemaTypes

UNHANDLED_EXTENSION = "x-unhandledPredicates"
EXCLUDED_VALUES_EXTENSION = "x-excludedValues"
TYPE_PREDICATE_EXTENSION = "x-typePredicate"
PARITY_EXTENSION = "x-numberParity"


class ConstraintApplier:
    """Mutates one schema node from field metadata and a ConstraintSet."""

    def __init__(
        self,
        schema: SchemaNode,
        constraints: Optional[ConstraintSet] = None,
        meta: Optional[Mapping[str, Any]] = None,
        unhandled_key: str = UNHANDLED_EXTENSION,
        ignored_predicates: frozenset[str] = frozenset(),
    ) -> None:
        self.schema = schema
        self.constraints = constraints or ConstraintSet()
        self.meta = dict(meta or {})
        self.unhandled_key = unhandled_key
        self.ignored_predicates = ignored_predicates

    def apply(self) -> SchemaNode:
        self.apply_meta()
        self.apply_rule_constraints()
        return self.schema

    def apply_meta(self) -> None:
        schema, meta = self.schema, self.meta

        if schema.type == SchemaTypes.STRING:
            _set(schema, "min_length", _first_of(meta, "min_length", "min_size"))
            _set(schema, "max_length", _first_of(meta, "max_length", "max_size"))
            _set(schema, "pattern", meta.get("pattern"))
        elif schema.type == SchemaTypes.ARRAY:
            _set(schema, "min_items", _first_of(meta, "min_items", "min_size"))
            _set(schema, "max_items", _first_of(meta, "max_items", "max_size"))
        elif schema.type in SchemaTypes.NUMERIC:
            self._apply_numeric_meta()

        _set(schema, "description", _first_of(meta, "description", "desc"))
        _set(schema, "format", meta.get("format"))
        _set(schema, "enum", _listify(_first_of(meta, "enum", "values")))
        _set(schema, "examples", _listify(meta.get("examples"), meta.get("example")))
        _set(schema, "deprecated", meta.get("deprecated"))
        if meta.get("nullable") is not None:
            schema.nullable = bool(meta["nullable"])

        for key, value in meta.items():
            if isinstance(key, str) and key.startswith("x-"):
                schema.extensions.setdefault(key, value)

    def _apply_numeric_meta(self) -> None:
        schema, meta = self.schema, self.meta
        if meta.get("gt") is not None:
            _set(schema, "minimum", meta["gt"], exclusive=("exclusive_minimum", True))
        else:
            _set(schema, "minimum", _first_of(meta, "gteq", "ge", "minimum"))
        if meta.get("lt") is not None:
            _set(schema, "maximum", meta["lt"], exclusive=("exclusive_maximum", True))
        else:
            _set(schema, "maximum", _first_of(meta, "lteq", "le", "maximum"))
        _set(schema, "multiple_of", meta.get("multiple_of"))

    def apply_rule_constraints(self) -> None:
        schema, c = self.schema, self.constraints

        if schema.type == SchemaTypes.STRING:
            _set(schema, "min_length", c.min_size)
            _set(schema, "max_length", c.max_size)
            _set(schema, "pattern", c.pattern)
        elif schema.type == SchemaTypes.ARRAY:
            _set(schema, "min_items", c.min_size)
            _set(schema, "max_items", c.max_size)
        elif schema.type in SchemaTypes.NUMERIC:
            _set(schema, "minimum", c.minimum, exclusive=("exclusive_minimum", c.exclusive_minimum))
            _set(schema, "maximum", c.maximum, exclusive=("exclusive_maximum", c.exclusive_maximum))
            if c.extensions and "multipleOf" in c.extensions:
                _set(schema, "multiple_of", c.extensions["multipleOf"])

        _set(schema, "enum", list(c.enum) if c.enum is not None else None)
        _set(schema, "nullable", c.nullable)
        _set(schema, "format", c.format)

        if c.excluded_values is not None:
            schema.extensions.setdefault(EXCLUDED_VALUES_EXTENSION, list(c.excluded_values))
        if c.type_predicate is not None:
            schema.extensions.setdefault(TYPE_PREDICATE_EXTENSION, c.type_predicate)
        if c.parity is not None:
            schema.extensions.setdefault(PARITY_EXTENSION, c.parity)
        for key, value in (c.extensions or {}).items():
            if key != "multipleOf":
                schema.extensions.setdefault(key, value)

        self._attach_unhandled()

    def _attach_unhandled(self) -> None:
        unhandled = [
            name
            for name in self.constraints.unhandled_predicates
            if name not in self.ignored_predicates
        ]
        if unhandled:
            self.schema.extensions.setdefault(self.unhandled_key, unhandled)


def apply_constraints(
    schema: SchemaNode,
    constraints: Optional[ConstraintSet] = None,
    meta: Optional[Mapping[str, Any]] = None,
    **options: Any,
) -> SchemaNode:
    """Apply ``meta`` then ``constraints`` to ``schema`` in place."""
    return ConstraintApplier(schema, constraints, meta, **options).apply()


def _set(
    schema: SchemaNode,
    attr: str,
    value: Any,
    exclusive: Optional[tuple[str, Optional[bool]]] = None,
) -> None:
    """Set ``attr`` only when it is unset and ``value`` is present."""
    if value is None or getattr(schema, attr) is not None:
        return
    setattr(schema, attr, value)
    if exclusive is not None and exclusive[1] is not None:
        setattr(schema, exclusive[0], exclusive[1])


def _first_of(meta: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if meta.get(key) is not None:
            return meta[key]
    return None


def _listify(*values: Any) -> Optional[list]:
    for value in values:
        if value is None:
            continue
        if isinstance(value, (list, tuple, set, frozenset)):
            return list(value)
        return [value]
    return None
