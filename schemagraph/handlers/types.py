"""Schema handler for plain Python types and typing annotations."""

from __future__ import annotations

import collections.abc as cabc
import enum
import typing
from typing import (
    TYPE_CHECKING,
    Annotated,
    Any,
    Iterable,
    Literal,
    MutableMapping,
    Optional,
    get_args,
    get_origin,
)

from schemagraph.core.schema.composition import (
    array_schema,
    compose_any_of,
    make_nullable,
    object_schema,
)
from schemagraph.core.schema.models import SchemaNode
from schemagraph.core.subjects import (
    NoneType,
    SubjectKind,
    classify,
    is_union,
    union_members,
)
from schemagraph.core.type_mapping import (
    literal_schema_type,
    python_type_info,
    string_to_schema_type,
)
from schemagraph.handlers.base import BaseHandler

if TYPE_CHECKING:
    from schemagraph.core.builder import SchemaGraphBuilder

# Constraint attributes carried by annotated-types / pydantic metadata objects.
_METADATA_ATTRS = {
    "gt": "gt",
    "ge": "ge",
    "lt": "lt",
    "le": "le",
    "min_length": "min_size",
    "max_length": "max_size",
    "pattern": "pattern",
    "multiple_of": "multiple_of",
}


def annotated_meta(metadata: Iterable[Any]) -> dict[str, Any]:
    """Collect static field metadata from ``Annotated`` extras or FieldInfo metadata.

    Accepts annotated-types constraint objects (``Gt(0)``, ``MaxLen(5)``),
    pydantic ``Field(...)`` instances, plain dicts and description strings.
    """
    meta: dict[str, Any] = {}
    for item in metadata:
        if isinstance(item, str):
            meta.setdefault("description", item)
        elif isinstance(item, dict):
            meta.update(item)
        else:
            if getattr(item, "description", None) is not None:
                meta.setdefault("description", item.description)
            if getattr(item, "examples", None):
                meta.setdefault("examples", item.examples)
            extra = getattr(item, "json_schema_extra", None)
            if isinstance(extra, dict):
                meta.update(extra)
            for attr, key in _METADATA_ATTRS.items():
                value = getattr(item, attr, None)
                if value is not None and not callable(value):
                    meta[key] = value
            nested = getattr(item, "metadata", None)
            if isinstance(nested, list):
                meta.update(annotated_meta(nested))
    return meta


class TypeHandler(BaseHandler):
    """Builds anonymous schemas for builtins, typing generics, literals and enums."""

    name = "type"
    kinds = frozenset({SubjectKind.TYPE})

    def build(
        self,
        subject: Any,
        builder: "SchemaGraphBuilder",
        stack: list,
        cache: MutableMapping,
    ) -> Optional[SchemaNode]:
        inner, meta, nullable = self.unwrap(subject, builder.config.max_unwrap_depth)

        if inner is not subject and classify(inner) is not SubjectKind.TYPE:
            node = builder.build(inner, stack, cache)
        else:
            node = self._build_type(inner, builder, stack, cache)
        if node is None:
            return None

        if meta:
            node = builder.apply_field(node, meta=meta)
        if nullable:
            node = make_nullable(node)
        return node

    def unwrap(self, subject: Any, max_depth: int) -> tuple[Any, dict[str, Any], bool]:
        """Strip Annotated, NewType and Optional layers, at most ``max_depth`` deep."""
        meta: dict[str, Any] = {}
        nullable = False
        for _ in range(max_depth):
            if get_origin(subject) is Annotated:
                args = get_args(subject)
                meta = {**annotated_meta(subject.__metadata__), **meta}
                subject = args[0]
            elif hasattr(subject, "__supertype__"):
                subject = subject.__supertype__
            elif is_union(subject):
                members, has_none = union_members(subject)
                if len(members) != 1:
                    break
                nullable = nullable or has_none
                subject = members[0]
            else:
                break
        return subject, meta, nullable

    def _build_type(
        self,
        subject: Any,
        builder: "SchemaGraphBuilder",
        stack: list,
        cache: MutableMapping,
    ) -> Optional[SchemaNode]:
        if subject is Any or isinstance(subject, typing.TypeVar):
            return SchemaNode()
        if subject is NoneType:
            return SchemaNode(nullable=True)
        if isinstance(subject, str):
            type_name = string_to_schema_type(subject)
            return SchemaNode(type=type_name) if type_name else None

        origin = get_origin(subject)
        if origin is Literal:
            return self._literal(get_args(subject))
        if origin is not None:
            return self._generic(subject, origin, builder, stack, cache)

        if isinstance(subject, type) and issubclass(subject, enum.Enum):
            return self._literal(tuple(member.value for member in subject))
        if subject in (list, tuple, set, frozenset):
            return array_schema(SchemaNode())
        if subject is dict:
            return object_schema(additional_properties=True)

        info = python_type_info(subject)
        if info is None:
            return None
        return SchemaNode(type=info.type, format=info.format)

    def _literal(self, values: tuple) -> SchemaNode:
        present = [v for v in values if v is not None]
        return SchemaNode(
            type=literal_schema_type(present),
            enum=present,
            nullable=True if len(present) != len(values) else None,
        )

    def _generic(
        self,
        subject: Any,
        origin: Any,
        builder: "SchemaGraphBuilder",
        stack: list,
        cache: MutableMapping,
    ) -> Optional[SchemaNode]:
        args = get_args(subject)
        context = {"type": repr(subject)}

        if isinstance(origin, type) and issubclass(origin, cabc.Mapping):
            value = args[1] if len(args) == 2 else Any
            if value is Any:
                return object_schema(additional_properties=True)
            return object_schema(
                additional_properties=builder.build_field(value, stack, cache, context)
            )

        if isinstance(origin, type) and issubclass(origin, cabc.Iterable):
            if origin is tuple and args and args[-1] is not Ellipsis and len(set(args)) > 1:
                variants = [builder.build_field(a, stack, cache, context) for a in args]
                return array_schema(
                    compose_any_of(variants), min_items=len(args), max_items=len(args)
                )
            item = args[0] if args else Any
            return array_schema(builder.build_field(item, stack, cache, context))

        return None
