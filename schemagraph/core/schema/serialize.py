"""Neutral dict rendering of a schema graph.

Named nodes below the root are emitted once under ``definitions`` and
referenced with ``$ref``; output-format specifics (OpenAPI 2/3 naming, where
definitions live) are left to exporters built on top of this.
"""

from __future__ import annotations

from typing import Any

from schemagraph.core.schema.models import SchemaNode

REF_PREFIX = "#/definitions/"

_SCALARS = (
    ("type", "type"),
    ("format", "format"),
    ("description", "description"),
    ("discriminator", "discriminator"),
    ("nullable", "nullable"),
    ("deprecated", "deprecated"),
    ("enum", "enum"),
    ("examples", "examples"),
    ("min_length", "minLength"),
    ("max_length", "maxLength"),
    ("pattern", "pattern"),
    ("minimum", "minimum"),
    ("maximum", "maximum"),
    ("exclusive_minimum", "exclusiveMinimum"),
    ("exclusive_maximum", "exclusiveMaximum"),
    ("multiple_of", "multipleOf"),
    ("min_items", "minItems"),
    ("max_items", "maxItems"),
)


def dump_graph(root: SchemaNode) -> dict[str, Any]:
    """Render ``root`` and every named node it reaches.

    Returns:
        ``{"schema": <root>, "definitions": {name: <schema>}}``
    """
    definitions: dict[str, dict[str, Any]] = {}
    pending: list[SchemaNode] = []
    schema = _dump(root, definitions, pending, is_root=True)

    while pending:
        node = pending.pop()
        if node.canonical_name in definitions and definitions[node.canonical_name]:
            continue
        definitions[node.canonical_name] = {}
        definitions[node.canonical_name] = _dump(node, definitions, pending, is_root=True)

    if root.canonical_name is not None:
        definitions.setdefault(root.canonical_name, schema)
    return {"schema": schema, "definitions": dict(sorted(definitions.items()))}


def _dump(
    node: SchemaNode,
    definitions: dict[str, dict[str, Any]],
    pending: list[SchemaNode],
    is_root: bool = False,
) -> dict[str, Any]:
    if node.canonical_name is not None and not is_root:
        if not node.is_reference and node.canonical_name not in definitions:
            pending.append(node)
        return {"$ref": f"{REF_PREFIX}{node.canonical_name}"}

    out: dict[str, Any] = {}
    for attr, key in _SCALARS:
        value = getattr(node, attr)
        if value is not None:
            out[key] = value

    if node.properties:
        out["properties"] = {
            name: _dump(prop, definitions, pending) for name, prop in node.properties.items()
        }
    if node.required:
        out["required"] = list(node.required)
    if node.items is not None:
        out["items"] = _dump(node.items, definitions, pending)
    if isinstance(node.additional_properties, SchemaNode):
        out["additionalProperties"] = _dump(node.additional_properties, definitions, pending)
    elif node.additional_properties is not None:
        out["additionalProperties"] = node.additional_properties
    if node.all_of:
        out["allOf"] = [_dump(n, definitions, pending) for n in node.all_of]
    if node.any_of:
        out["anyOf"] = [_dump(n, definitions, pending) for n in node.any_of]
    out.update(node.extensions)
    return out
