"""Public Python API for schemagraph package.

This module provides the main entry points for building schema graphs.
"""

from typing import Any, MutableMapping, Optional

from schemagraph.core.builder import SchemaGraphBuilder
from schemagraph.core.schema.models import SchemaNode
from schemagraph.core.schema.serialize import dump_graph
from schemagraph.handlers.registry import HandlerRegistry
from schemagraph.models.builder_config import BuilderConfig


def build_schema(
    subject: Any,
    registry: Optional[HandlerRegistry] = None,
    config: Optional[BuilderConfig] = None,
    stack: Optional[list] = None,
    cache: Optional[MutableMapping] = None,
) -> Optional[SchemaNode]:
    """Build the schema graph for a contract, model, union, Arrow schema or type.

    Pass the same ``cache`` to several calls to share named nodes between
    them; each call otherwise starts from an empty cache.

    Args:
        subject: The type description to resolve
        registry: Handler registry (the built-in handlers when None)
        config: Builder configuration (defaults when None)
        stack: Visitation stack, for callers resuming a build
        cache: Identity to built-node cache

    Returns:
        The root SchemaNode, or None when no handler accepts the subject

    Raises:
        UnresolvedSubjectError: If a union variant cannot be resolved

    Example:
        >>> node = build_schema(PetContract)
        >>> sorted(node.properties)
        ['name', 'nickname', 'pet_type']
    """
    builder = SchemaGraphBuilder(registry=registry, config=config)
    return builder.build(subject, stack=stack, cache=cache)


def build_document(
    subject: Any,
    registry: Optional[HandlerRegistry] = None,
    config: Optional[BuilderConfig] = None,
) -> dict:
    """Build ``subject`` and render it with named nodes as definitions."""
    root = build_schema(subject, registry=registry, config=config)
    if root is None:
        return {"schema": None, "definitions": {}}
    return dump_graph(root)
