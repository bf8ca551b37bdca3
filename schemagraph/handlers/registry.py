"""Handler registry for ordered, priority-insertable schema handlers.

The registry is an explicit object rather than module state, so separate
builds (and tests) can each hold their own ordering::

    registry = default_registry()
    registry.register(MyHandler(), before="model")
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, Optional, Union

from schemagraph.core.exceptions import HandlerError
from schemagraph.core.subjects import classify
from schemagraph.handlers.base import SchemaHandler

logger = logging.getLogger(__name__)

Anchor = Union[SchemaHandler, str, None]


class HandlerRegistry:
    """Ordered collection of schema handlers; the first match wins."""

    def __init__(self, handlers: Optional[list[SchemaHandler]] = None) -> None:
        self._handlers: list[SchemaHandler] = []
        for handler in handlers or []:
            self.register(handler)

    def register(
        self,
        handler: SchemaHandler,
        before: Anchor = None,
        after: Anchor = None,
    ) -> "HandlerRegistry":
        """Register a handler.

        Args:
            handler: Object satisfying the SchemaHandler protocol
            before: Insert immediately before this handler (or handler name)
            after: Insert immediately after this handler (or handler name)

        Returns:
            The registry, for chaining

        Raises:
            HandlerError: If ``handler`` does not satisfy the protocol
        """
        if not isinstance(handler, SchemaHandler):
            raise HandlerError(
                "Handler must provide name, kinds, handles, identify, "
                "canonical_name and build",
                context={"handler": repr(handler)},
            )
        if handler in self:
            return self

        # before wins; after is tried when the before anchor is missing
        if before is not None:
            index = self._index_of(before)
            if index is not None:
                self._handlers.insert(index, handler)
                return self
        if after is not None:
            index = self._index_of(after)
            if index is not None:
                self._handlers.insert(index + 1, handler)
                return self

        if before is not None or after is not None:
            logger.debug(
                "Anchor handler not found, appending",
                extra={"context": {"handler": handler.name, "anchor": _name(before or after)}},
            )
        self._handlers.append(handler)
        return self

    def unregister(self, handler: Union[SchemaHandler, str]) -> "HandlerRegistry":
        index = self._index_of(handler)
        if index is not None:
            del self._handlers[index]
        return self

    def find(self, subject: Any) -> Optional[SchemaHandler]:
        """Return the first handler that handles ``subject``, or None."""
        kind = classify(subject)
        for handler in self._handlers:
            if handler.handles(subject, kind):
                return handler
        return None

    def handles(self, subject: Any) -> bool:
        return self.find(subject) is not None

    def clear(self) -> "HandlerRegistry":
        self._handlers.clear()
        return self

    def names(self) -> list[str]:
        return [h.name for h in self._handlers]

    def to_list(self) -> list[SchemaHandler]:
        return list(self._handlers)

    def __iter__(self) -> Iterator[SchemaHandler]:
        return iter(list(self._handlers))

    def __len__(self) -> int:
        return len(self._handlers)

    def __contains__(self, handler: object) -> bool:
        return any(h is handler for h in self._handlers)

    def _index_of(self, anchor: Union[SchemaHandler, str]) -> Optional[int]:
        for index, handler in enumerate(self._handlers):
            if handler is anchor or (isinstance(anchor, str) and handler.name == anchor):
                return index
        return None


def _name(anchor: Anchor) -> str:
    return anchor if isinstance(anchor, str) else getattr(anchor, "name", repr(anchor))


def default_registry() -> HandlerRegistry:
    """A fresh registry with the built-in handlers in priority order."""
    from schemagraph.handlers.arrow import ArrowHandler
    from schemagraph.handlers.contract import ContractHandler
    from schemagraph.handlers.entity import ModelHandler
    from schemagraph.handlers.types import TypeHandler
    from schemagraph.handlers.union import UnionHandler

    return HandlerRegistry(
        [ContractHandler(), ModelHandler(), UnionHandler(), ArrowHandler(), TypeHandler()]
    )
