"""Schema handler for union (sum) types."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, MutableMapping, Optional

from schemagraph.core.exceptions import UnresolvedSubjectError
from schemagraph.core.schema.composition import compose_any_of
from schemagraph.core.schema.models import SchemaNode
from schemagraph.core.subjects import SubjectKind, union_members
from schemagraph.handlers.base import BaseHandler

if TYPE_CHECKING:
    from schemagraph.core.builder import SchemaGraphBuilder


class UnionHandler(BaseHandler):
    """Builds ``any_of`` nodes whose alternatives are the resolved variants.

    Variants share the caller's stack and cache, so a variant already built
    elsewhere in the graph is the same node object here. A variant no
    handler recognizes raises UnresolvedSubjectError: dropping it would
    describe a narrower type than the one declared.
    """

    name = "union"
    kinds = frozenset({SubjectKind.UNION})

    def build(
        self,
        subject: Any,
        builder: "SchemaGraphBuilder",
        stack: list,
        cache: MutableMapping,
    ) -> Optional[SchemaNode]:
        members, nullable = union_members(subject)
        alternatives = []
        for member in members:
            node = builder.build(member, stack, cache)
            if node is None:
                raise UnresolvedSubjectError(member, context={"union": repr(subject)})
            alternatives.append(node)
        return compose_any_of(alternatives, nullable=nullable)
