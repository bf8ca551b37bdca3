"""Helpers that compose schema nodes without mutating shared named nodes."""

from __future__ import annotations

from typing import MutableMapping, Optional, Sequence

from schemagraph.core.schema.models import SchemaNode
from schemagraph.core.type_mapping import SchemaTypes


def reference(canonical_name: str) -> SchemaNode:
    """Build a cycle placeholder pointing at ``canonical_name``."""
    return SchemaNode(canonical_name=canonical_name)


def object_schema(**attrs) -> SchemaNode:
    return SchemaNode(type=SchemaTypes.OBJECT, **attrs)


def array_schema(items: Optional[SchemaNode], **attrs) -> SchemaNode:
    return SchemaNode(
        type=SchemaTypes.ARRAY,
        items=items if items is not None else SchemaNode(type=SchemaTypes.STRING),
        **attrs,
    )


def compose_all_of(
    parent: SchemaNode, child: SchemaNode, canonical_name: Optional[str] = None
) -> SchemaNode:
    """``all_of = [parent, child]``: inheritance as parent plus child-only fields."""
    return SchemaNode(canonical_name=canonical_name, all_of=[parent, child])


def compose_any_of(
    alternatives: Sequence[SchemaNode], nullable: Optional[bool] = None
) -> SchemaNode:
    """A node matching at least one of ``alternatives``."""
    return SchemaNode(any_of=list(alternatives), nullable=nullable or None)


def make_nullable(node: SchemaNode) -> SchemaNode:
    """Mark a node nullable; named nodes are wrapped so they stay untouched."""
    if node.canonical_name is not None:
        return compose_any_of([node], nullable=True)
    node.nullable = True
    return node


def resolve_reference(
    node: SchemaNode, cache: MutableMapping
) -> SchemaNode:
    """Return the full node a cycle placeholder stands for.

    Non-placeholders are returned unchanged; an unknown name returns the
    placeholder itself.
    """
    if not node.is_reference:
        return node
    for built in cache.values():
        if (
            isinstance(built, SchemaNode)
            and built.canonical_name == node.canonical_name
            and not built.is_reference
        ):
            return built
    return node
