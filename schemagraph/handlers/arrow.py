"""Schema handler for pyarrow schemas and data types."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Hashable, MutableMapping, Optional

import pyarrow as pa

from schemagraph.core.schema.composition import array_schema, object_schema
from schemagraph.core.schema.models import SchemaNode
from schemagraph.core.subjects import SubjectKind
from schemagraph.core.type_mapping import arrow_type_to_schema
from schemagraph.handlers.base import BaseHandler

if TYPE_CHECKING:
    from schemagraph.core.builder import SchemaGraphBuilder

NAME_METADATA_KEY = b"name"
DESCRIPTION_METADATA_KEY = b"description"


class ArrowHandler(BaseHandler):
    """Builds object schemas from Arrow schemas.

    A schema carrying ``name`` in its metadata becomes a named, cached node;
    Arrow types themselves are always anonymous. Non-nullable fields are
    required.
    """

    name = "arrow"
    kinds = frozenset({SubjectKind.ARROW})

    def identify(self, subject: Any) -> Optional[Hashable]:
        name = self.canonical_name(subject)
        return ("arrow", name) if name is not None else None

    def canonical_name(self, subject: Any) -> Optional[str]:
        if isinstance(subject, pa.Schema) and subject.metadata:
            raw = subject.metadata.get(NAME_METADATA_KEY)
            if raw:
                return raw.decode("utf-8")
        return None

    def build(
        self,
        subject: Any,
        builder: "SchemaGraphBuilder",
        stack: list,
        cache: MutableMapping,
    ) -> Optional[SchemaNode]:
        if isinstance(subject, pa.DataType):
            return self.type_schema(subject)

        schema = object_schema(
            canonical_name=self.canonical_name(subject),
            description=_description(subject.metadata),
        )
        for field in subject:
            schema.add_property(field.name, self.field_schema(field), required=not field.nullable)
        return schema

    def field_schema(self, field: pa.Field) -> SchemaNode:
        node = self.type_schema(field.type)
        if field.nullable:
            node.nullable = True
        description = _description(field.metadata)
        if description:
            node.description = description
        return node

    def type_schema(self, arrow_type: pa.DataType) -> SchemaNode:
        """Convert an Arrow type, expanding lists, structs and maps."""
        types = pa.types
        if types.is_list(arrow_type) or types.is_large_list(arrow_type):
            return array_schema(self.field_schema(arrow_type.value_field))
        if types.is_fixed_size_list(arrow_type):
            size = arrow_type.list_size
            return array_schema(
                self.field_schema(arrow_type.value_field), min_items=size, max_items=size
            )
        if types.is_struct(arrow_type):
            node = object_schema()
            for i in range(arrow_type.num_fields):
                child = arrow_type.field(i)
                node.add_property(child.name, self.field_schema(child), required=not child.nullable)
            return node
        if types.is_map(arrow_type):
            return object_schema(additional_properties=self.type_schema(arrow_type.item_type))
        if types.is_dictionary(arrow_type):
            return self.type_schema(arrow_type.value_type)

        info = arrow_type_to_schema(arrow_type)
        return SchemaNode(type=info.type, format=info.format)


def _description(metadata: Optional[dict]) -> Optional[str]:
    if not metadata:
        return None
    raw = metadata.get(DESCRIPTION_METADATA_KEY)
    return raw.decode("utf-8") if raw else None
