"""Schema node: the universal output unit of the schema graph.

A node is either a plain typed schema (``type`` set, with properties, items
and constraints) or a composition node (``all_of`` for inheritance,
``any_of`` for unions). Nodes may be shared by reference between several
parents; named nodes (``canonical_name`` set) are the ones exporters emit as
reusable definitions.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class SchemaNode(BaseModel):
    """Schema definition for one type's shape, constraints and composition."""

    model_config = ConfigDict(extra="forbid")

    type: Optional[str] = Field(
        default=None, description="Type tag; None for composition-only nodes"
    )
    canonical_name: Optional[str] = Field(
        default=None, description="Identity used for de-duplication and references"
    )
    format: Optional[str] = None
    description: Optional[str] = None
    properties: dict[str, "SchemaNode"] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)
    items: Optional["SchemaNode"] = None
    additional_properties: Union[bool, "SchemaNode", None] = None
    all_of: Optional[list["SchemaNode"]] = None
    any_of: Optional[list["SchemaNode"]] = None
    discriminator: Optional[str] = None
    nullable: Optional[bool] = None
    deprecated: Optional[bool] = None
    enum: Optional[list[Any]] = None
    examples: Optional[list[Any]] = None
    extensions: dict[str, Any] = Field(default_factory=dict)
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None
    minimum: Optional[Any] = None
    maximum: Optional[Any] = None
    exclusive_minimum: Optional[bool] = None
    exclusive_maximum: Optional[bool] = None
    multiple_of: Optional[Any] = None
    min_items: Optional[int] = None
    max_items: Optional[int] = None

    def add_property(
        self, name: str, schema: "SchemaNode", required: bool = False
    ) -> "SchemaNode":
        key = str(name)
        self.properties[key] = schema
        if required and key not in self.required:
            self.required.append(key)
        return schema

    @property
    def is_empty(self) -> bool:
        return not self.properties

    @property
    def is_composition(self) -> bool:
        return bool(self.all_of) or bool(self.any_of)

    @property
    def is_reference(self) -> bool:
        """True for a cycle placeholder: a name and nothing else."""
        return (
            self.canonical_name is not None
            and self.type is None
            and not self.properties
            and not self.is_composition
        )

    def __repr__(self) -> str:
        # the default repr walks the whole graph
        label = self.canonical_name or self.type or ("allOf" if self.all_of else "anyOf")
        return f"SchemaNode({label!r})"


SchemaNode.model_rebuild()
