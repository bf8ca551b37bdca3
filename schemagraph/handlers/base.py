"""Handler protocol for schema builders."""

from __future__ import annotations

from typing import (
    TYPE_CHECKING,
    Any,
    Hashable,
    MutableMapping,
    Optional,
    Protocol,
    runtime_checkable,
)

from schemagraph.core.schema.models import SchemaNode
from schemagraph.core.subjects import SubjectKind, classify

if TYPE_CHECKING:
    from schemagraph.core.builder import SchemaGraphBuilder


@runtime_checkable
class SchemaHandler(Protocol):
    """Protocol for pluggable subject-to-schema resolvers.

    ``handles`` receives the subject's kind, resolved once by the registry.
    ``identify`` returns a hashable identity for subjects that become named,
    cached nodes, or None for anonymous ones (rebuilt on every use).
    """

    name: str
    kinds: frozenset

    def handles(self, subject: Any, kind: Optional[SubjectKind] = None) -> bool:
        ...

    def identify(self, subject: Any) -> Optional[Hashable]:
        ...

    def canonical_name(self, subject: Any) -> Optional[str]:
        ...

    def build(
        self,
        subject: Any,
        builder: "SchemaGraphBuilder",
        stack: list,
        cache: MutableMapping,
    ) -> Optional[SchemaNode]:
        ...


class BaseHandler:
    """Default handler behaviour: match on declared kinds, anonymous nodes."""

    name: str = "base"
    kinds: frozenset = frozenset()

    def handles(self, subject: Any, kind: Optional[SubjectKind] = None) -> bool:
        return (kind if kind is not None else classify(subject)) in self.kinds

    def identify(self, subject: Any) -> Optional[Hashable]:
        return None

    def canonical_name(self, subject: Any) -> Optional[str]:
        return None

    def build(
        self,
        subject: Any,
        builder: "SchemaGraphBuilder",
        stack: list,
        cache: MutableMapping,
    ) -> Optional[SchemaNode]:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
