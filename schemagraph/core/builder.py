"""Schema-graph builder: cycle-safe recursive resolution of subjects.

Each named subject moves through Unvisited -> InProgress (its identity is on
``stack``) -> Built (stored in ``cache``). A request for an identity that is
still in progress returns a reference placeholder, which is how
self-referential and mutually recursive graphs terminate. Once the outermost
build finishes, placeholders inside ``any_of`` lists are swapped for the
built nodes. ``stack`` and ``cache`` are passed explicitly through every
recursive call; separate top-level builds share nothing.
"""

from __future__ import annotations

import logging
import sys
import threading
from contextlib import contextmanager
from typing import Any, Iterator, Mapping, MutableMapping, Optional

from schemagraph.core.constraints.applier import apply_constraints
from schemagraph.core.constraints.models import ConstraintSet
from schemagraph.core.constraints.walker import AstWalker
from schemagraph.core.exceptions import describe_subject
from schemagraph.core.schema.composition import make_nullable, reference, resolve_reference
from schemagraph.core.schema.models import SchemaNode
from schemagraph.handlers.registry import HandlerRegistry, default_registry
from schemagraph.models.builder_config import BuilderConfig

logger = logging.getLogger(__name__)

_limit_lock = threading.Lock()
_limit_holders = 0
_saved_limit = 0


@contextmanager
def raised_recursion_limit(limit: int) -> Iterator[None]:
    """Raise the interpreter recursion limit to at least ``limit`` while held.

    Nested and concurrent holders share one raise; the previous limit is
    restored when the last holder exits.
    """
    global _limit_holders, _saved_limit
    with _limit_lock:
        if _limit_holders == 0:
            _saved_limit = sys.getrecursionlimit()
            if limit > _saved_limit:
                sys.setrecursionlimit(limit)
        _limit_holders += 1
    try:
        yield
    finally:
        with _limit_lock:
            _limit_holders -= 1
            if _limit_holders == 0:
                sys.setrecursionlimit(_saved_limit)


def fill_placeholders(root: SchemaNode, cache: Mapping) -> None:
    """Swap cycle placeholders inside ``any_of`` lists for the built nodes.

    Walks every node reachable from ``root`` once, iteratively. Placeholders
    under ``properties``, ``items`` and ``all_of`` stay as references.
    """
    seen = set()
    pending = [root]
    while pending:
        node = pending.pop()
        if id(node) in seen:
            continue
        seen.add(id(node))

        if node.any_of:
            node.any_of[:] = [resolve_reference(variant, cache) for variant in node.any_of]
            pending.extend(node.any_of)
        pending.extend(node.properties.values())
        if node.items is not None:
            pending.append(node.items)
        if isinstance(node.additional_properties, SchemaNode):
            pending.append(node.additional_properties)
        if node.all_of:
            pending.extend(node.all_of)


class SchemaGraphBuilder:
    """Resolves subjects to schema nodes through a handler registry."""

    def __init__(
        self,
        registry: Optional[HandlerRegistry] = None,
        config: Optional[BuilderConfig] = None,
    ) -> None:
        self.registry = registry if registry is not None else default_registry()
        self.config = config or BuilderConfig()
        self.walker = AstWalker()

    def build(
        self,
        subject: Any,
        stack: Optional[list] = None,
        cache: Optional[MutableMapping] = None,
    ) -> Optional[SchemaNode]:
        """Build the schema node for ``subject``.

        Args:
            subject: Contract, model, union, Arrow schema or type annotation
            stack: Identities currently being built (shared across recursion)
            cache: Identity to built node (shared across recursion)

        Returns:
            The schema node, a reference placeholder for an identity already
            in progress, or None when no handler accepts the subject
        """
        stack = [] if stack is None else stack
        cache = {} if cache is None else cache
        if stack:
            return self._build(subject, stack, cache)

        with raised_recursion_limit(self.config.recursion_limit):
            node = self._build(subject, stack, cache)
        if node is not None:
            fill_placeholders(node, cache)
        return node

    def _build(self, subject: Any, stack: list, cache: MutableMapping) -> Optional[SchemaNode]:
        handler = self.registry.find(subject)
        if handler is None:
            logger.debug(
                "No handler for subject",
                extra={"context": {"subject": describe_subject(subject)}},
            )
            return None

        identity = handler.identify(subject)
        if identity is None:
            return handler.build(subject, self, stack, cache)

        if identity in cache:
            logger.debug(
                "Cache hit",
                extra={"context": {"identity": describe_subject(identity), "handler": handler.name}},
            )
            return cache[identity]

        if identity in stack:
            name = handler.canonical_name(subject)
            logger.debug(
                "Cycle detected, returning reference",
                extra={"context": {"identity": describe_subject(identity), "depth": len(stack)}},
            )
            return reference(name)

        stack.append(identity)
        try:
            node = handler.build(subject, self, stack, cache)
        finally:
            stack.pop()

        if node is not None:
            cache[identity] = node
        return node

    def build_field(
        self,
        subject: Any,
        stack: list,
        cache: MutableMapping,
        context: Optional[Mapping[str, Any]] = None,
    ) -> SchemaNode:
        """Build a property or item schema, falling back to ``default_type``."""
        node = self.build(subject, stack, cache) if subject is not None else None
        if node is None:
            if subject is not None:
                logger.warning(
                    "Unresolved property type, using default type",
                    extra={
                        "context": {
                            **(context or {}),
                            "type": describe_subject(subject),
                            "default_type": self.config.default_type,
                        }
                    },
                )
            node = SchemaNode(type=self.config.default_type)
        return node

    def apply_field(
        self,
        node: SchemaNode,
        constraints: Optional[ConstraintSet] = None,
        meta: Optional[Mapping[str, Any]] = None,
    ) -> SchemaNode:
        """Apply field metadata and rule constraints to a property schema.

        Named nodes are shared across the graph and are never mutated; only
        nullability reaches them, by wrapping.
        """
        constraints = constraints or ConstraintSet()
        meta = meta or {}
        if not self.config.include_unhandled:
            constraints.unhandled_predicates = []

        if node.canonical_name is not None:
            nullable = constraints.nullable
            if nullable is None:
                nullable = meta.get("nullable")
            return make_nullable(node) if nullable else node

        return apply_constraints(
            node,
            constraints,
            meta,
            unhandled_key=self.config.unhandled_extension_key,
            ignored_predicates=frozenset(self.config.ignored_predicates),
        )
