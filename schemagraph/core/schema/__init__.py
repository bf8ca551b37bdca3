"""Schema package: the node model, composition helpers and graph rendering."""

from schemagraph.core.schema.composition import (
    array_schema,
    compose_all_of,
    compose_any_of,
    make_nullable,
    object_schema,
    reference,
    resolve_reference,
)
from schemagraph.core.schema.models import SchemaNode
from schemagraph.core.schema.serialize import dump_graph

__all__ = [
    "SchemaNode",
    "reference",
    "object_schema",
    "array_schema",
    "compose_all_of",
    "compose_any_of",
    "make_nullable",
    "resolve_reference",
    "dump_graph",
]
