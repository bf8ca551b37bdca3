"""Schema handler for entities: pydantic models and dataclasses."""

from __future__ import annotations

import dataclasses
import inspect
import logging
import typing
from typing import TYPE_CHECKING, Any, Hashable, MutableMapping, NamedTuple, Optional

from pydantic import BaseModel

from schemagraph.core.schema.composition import compose_all_of, object_schema
from schemagraph.core.schema.models import SchemaNode
from schemagraph.core.subjects import SubjectKind, is_model_class
from schemagraph.handlers.base import BaseHandler
from schemagraph.handlers.types import annotated_meta

if TYPE_CHECKING:
    from schemagraph.core.builder import SchemaGraphBuilder

logger = logging.getLogger(__name__)


class EntityField(NamedTuple):
    """One introspected field of an entity."""

    name: str
    type: Any
    required: bool
    meta: dict
    discriminator: bool = False


class ModelHandler(BaseHandler):
    """Builds named object schemas for pydantic models and dataclasses.

    A subclass whose parent marks a discriminator field is composed as
    ``all_of = [parent, child-only fields]``. Without a discriminator the
    subclass has the same shape as its parent plus its own fields, so the
    properties are flattened into one object schema.
    """

    name = "model"
    kinds = frozenset({SubjectKind.MODEL})

    def identify(self, subject: Any) -> Optional[Hashable]:
        return subject

    def canonical_name(self, subject: Any) -> Optional[str]:
        return getattr(subject, "__schema_name__", None) or subject.__name__

    def build(
        self,
        subject: Any,
        builder: "SchemaGraphBuilder",
        stack: list,
        cache: MutableMapping,
    ) -> Optional[SchemaNode]:
        key = builder.config.discriminator_key
        fields = self.fields(subject, key)
        name = self.canonical_name(subject)
        parent = self.parent(subject)

        if parent is not None and self.discriminator(parent, key) is not None:
            parent_schema = builder.build(parent, stack, cache)
            inherited = {f.name for f in self.fields(parent, key)}
            child = object_schema(description=_doc(subject))
            self._add_properties(
                child, subject, [f for f in fields if f.name not in inherited], builder, stack, cache
            )
            logger.debug(
                "Composed entity with discriminated parent",
                extra={"context": {"entity": name, "parent": self.canonical_name(parent)}},
            )
            return compose_all_of(parent_schema, child, canonical_name=name)

        schema = object_schema(canonical_name=name, description=_doc(subject))
        self._add_properties(schema, subject, fields, builder, stack, cache)
        schema.discriminator = self.discriminator(subject, key)
        return schema

    def parent(self, subject: type) -> Optional[type]:
        """The nearest entity base class of the same family, if any."""
        pydantic_model = issubclass(subject, BaseModel)
        for base in subject.__bases__:
            if not is_model_class(base):
                continue
            if pydantic_model == issubclass(base, BaseModel):
                return base
        return None

    def discriminator(self, subject: type, key: str) -> Optional[str]:
        for field in self.fields(subject, key):
            if field.discriminator:
                return field.name
        return None

    def fields(self, subject: type, key: str) -> list[EntityField]:
        if issubclass(subject, BaseModel):
            return _pydantic_fields(subject, key)
        return _dataclass_fields(subject, key)

    def _add_properties(
        self,
        schema: SchemaNode,
        subject: type,
        fields: list[EntityField],
        builder: "SchemaGraphBuilder",
        stack: list,
        cache: MutableMapping,
    ) -> None:
        for field in fields:
            prop = builder.build_field(
                field.type,
                stack,
                cache,
                context={"entity": self.canonical_name(subject), "field": field.name},
            )
            prop = builder.apply_field(prop, meta=field.meta)
            schema.add_property(field.name, prop, required=field.required)


def _pydantic_fields(model: type[BaseModel], key: str) -> list[EntityField]:
    result = []
    for name, info in model.model_fields.items():
        meta: dict[str, Any] = {}
        if isinstance(info.json_schema_extra, dict):
            meta.update(info.json_schema_extra)
        if info.description:
            meta["description"] = info.description
        if info.examples:
            meta["examples"] = info.examples
        if info.deprecated:
            meta["deprecated"] = True
        meta.update(annotated_meta(info.metadata))
        result.append(
            EntityField(
                name=info.alias or name,
                type=_resolved(model, name, info.annotation),
                required=info.is_required(),
                meta=meta,
                discriminator=bool(meta.pop(key, False)),
            )
        )
    return result


def _dataclass_fields(cls: type, key: str) -> list[EntityField]:
    hints = typing.get_type_hints(cls, include_extras=True)
    result = []
    for field in dataclasses.fields(cls):
        meta = dict(field.metadata)
        required = (
            field.default is dataclasses.MISSING
            and field.default_factory is dataclasses.MISSING
        )
        result.append(
            EntityField(
                name=field.name,
                type=hints.get(field.name, field.type),
                required=required,
                meta=meta,
                discriminator=bool(meta.pop(key, False)),
            )
        )
    return result


def _doc(cls: type) -> Optional[str]:
    doc = vars(cls).get("__doc__")
    if not doc or (dataclasses.is_dataclass(cls) and doc.startswith(f"{cls.__name__}(")):
        return None
    return inspect.cleandoc(doc)


def _resolved(model: type, name: str, annotation: Any) -> Any:
    """Re-evaluate an annotation pydantic left as a forward reference."""
    if not _has_forward_ref(annotation):
        return annotation
    try:
        return typing.get_type_hints(model, include_extras=True).get(name, annotation)
    except NameError as e:
        logger.warning(
            "Unresolvable forward reference",
            extra={"context": {"entity": model.__name__, "field": name, "error": str(e)}},
        )
        return annotation


def _has_forward_ref(annotation: Any) -> bool:
    if isinstance(annotation, (str, typing.ForwardRef)):
        return True
    return any(_has_forward_ref(arg) for arg in typing.get_args(annotation))
