"""Constraint accumulator extracted from validation rule trees."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Optional


@dataclass
class ConstraintSet:
    """Structural facts extracted from one field's rule tree.

    Every field is None until a rule sets it. ``nullable`` and ``required``
    are tri-state: None means the rules said nothing.
    """

    enum: Optional[list[Any]] = None
    nullable: Optional[bool] = None
    min_size: Optional[int] = None
    max_size: Optional[int] = None
    minimum: Any = None
    maximum: Any = None
    exclusive_minimum: Optional[bool] = None
    exclusive_maximum: Optional[bool] = None
    pattern: Optional[str] = None
    excluded_values: Optional[list[Any]] = None
    type_predicate: Any = None
    parity: Optional[str] = None
    format: Optional[str] = None
    required: Optional[bool] = None
    unhandled_predicates: list[str] = field(default_factory=list)
    extensions: Optional[dict[str, Any]] = None

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) in (None, [], {}) for f in fields(self))


# Merged first-non-nil-wins. Bounds carry their exclusivity flag with them.
_SET_ONCE = (
    "enum",
    "nullable",
    "min_size",
    "max_size",
    "pattern",
    "excluded_values",
    "type_predicate",
    "parity",
    "format",
)
_BOUNDS = (("minimum", "exclusive_minimum"), ("maximum", "exclusive_maximum"))


def merge_constraints(
    target: ConstraintSet, incoming: Optional[ConstraintSet]
) -> ConstraintSet:
    """Fold ``incoming`` into ``target`` in place and return ``target``.

    The first non-None value of a field survives, except ``required``,
    which the incoming (more specific) rule overwrites.
    """
    if incoming is None:
        return target

    for name in _SET_ONCE:
        if getattr(target, name) is None and getattr(incoming, name) is not None:
            setattr(target, name, getattr(incoming, name))

    for bound, flag in _BOUNDS:
        if getattr(target, bound) is None and getattr(incoming, bound) is not None:
            setattr(target, bound, getattr(incoming, bound))
            setattr(target, flag, getattr(incoming, flag))
        elif getattr(target, flag) is None and getattr(target, bound) is None:
            setattr(target, flag, getattr(incoming, flag))

    for name in incoming.unhandled_predicates:
        if name not in target.unhandled_predicates:
            target.unhandled_predicates.append(name)

    if incoming.extensions:
        target.extensions = {**incoming.extensions, **(target.extensions or {})}

    if incoming.required is not None:
        target.required = incoming.required

    return target


def intersect_constraints(branches: list[ConstraintSet]) -> ConstraintSet:
    """Combine independently walked ``or`` branches into their common facts.

    Enums intersect, lower bounds take the tightest (largest) value and
    upper bounds the smallest, each only when every branch declares one;
    a bound keeps the exclusivity of the branch it came from. ``nullable``
    is True only when every branch says so and False when any branch
    declares False.
    Scalar facts survive only when every branch agrees.
    """
    if not branches:
        return ConstraintSet()
    if len(branches) == 1:
        return branches[0]

    base = branches[0]
    for other in branches[1:]:
        _intersect_pair(base, other)
    return base


def _intersect_pair(base: ConstraintSet, other: ConstraintSet) -> None:
    if base.enum is not None and other.enum is not None:
        base.enum = [v for v in base.enum if v in other.enum]
    else:
        base.enum = None

    base.min_size = _pick(max, base.min_size, other.min_size)
    base.max_size = _pick(min, base.max_size, other.max_size)
    base.minimum, base.exclusive_minimum = _pick_bound(
        max, base.minimum, base.exclusive_minimum, other.minimum, other.exclusive_minimum
    )
    base.maximum, base.exclusive_maximum = _pick_bound(
        min, base.maximum, base.exclusive_maximum, other.maximum, other.exclusive_maximum
    )
    base.nullable = _both(base.nullable, other.nullable)

    for name in ("pattern", "format", "type_predicate", "parity", "excluded_values", "required"):
        if getattr(base, name) != getattr(other, name):
            setattr(base, name, None)

    if base.extensions and other.extensions:
        base.extensions = {
            k: v for k, v in base.extensions.items() if other.extensions.get(k) == v
        } or None
    else:
        base.extensions = None

    for name in other.unhandled_predicates:
        if name not in base.unhandled_predicates:
            base.unhandled_predicates.append(name)


def _pick(fn, left, right):
    if left is None or right is None:
        return None
    return fn(left, right)


def _pick_bound(fn, left, left_flag, right, right_flag):
    """Tightest bound plus the exclusivity flag of the branch that set it."""
    if left is None or right is None:
        return None, None
    if left == right:
        if left_flag is None and right_flag is None:
            return left, None
        return left, bool(left_flag and right_flag)
    chosen = fn(left, right)
    return chosen, left_flag if chosen == left else right_flag


def _both(left: Optional[bool], right: Optional[bool]) -> Optional[bool]:
    if left is False or right is False:
        return False
    if left is True and right is True:
        return True
    return None
