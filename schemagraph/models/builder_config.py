"""Builder configuration model."""

from pydantic import BaseModel, Field, field_validator

from schemagraph.core.constraints.applier import UNHANDLED_EXTENSION
from schemagraph.core.constraints.walker import TYPE_CHECK_PREDICATES
from schemagraph.core.type_mapping import SchemaTypes


class BuilderConfig(BaseModel):
    """Configuration for schema-graph builds."""

    default_type: str = Field(
        default=SchemaTypes.STRING,
        description="Schema type used for properties whose type no handler resolves",
    )
    max_unwrap_depth: int = Field(
        default=5,
        description="How many Annotated/NewType/Optional layers are unwrapped per type",
        ge=1,
    )
    unhandled_extension_key: str = Field(
        default=UNHANDLED_EXTENSION,
        description="Extension key recording predicates with no known mapping",
    )
    include_unhandled: bool = Field(
        default=True,
        description="Record unhandled predicates on schema nodes",
    )
    discriminator_key: str = Field(
        default="is_discriminator",
        description="Field metadata flag marking a model's discriminator field",
    )
    ignored_predicates: list[str] = Field(
        default_factory=lambda: sorted(TYPE_CHECK_PREDICATES),
        description="Predicate names never recorded as unhandled",
    )
    recursion_limit: int = Field(
        default=20000,
        description="Interpreter recursion limit held while a top-level build runs",
        ge=1000,
    )

    @field_validator("default_type")
    @classmethod
    def validate_default_type(cls, v):
        """Validate default_type is a known schema type."""
        v = v.strip().lower()
        if v not in SchemaTypes.ALL:
            raise ValueError(
                f"default_type must be one of {sorted(SchemaTypes.ALL)}, got '{v}'"
            )
        return v

    @field_validator("max_unwrap_depth")
    @classmethod
    def validate_max_unwrap_depth(cls, v):
        """Validate max_unwrap_depth is at least 1."""
        if v < 1:
            raise ValueError("max_unwrap_depth must be at least 1")
        return v

    @field_validator("unhandled_extension_key")
    @classmethod
    def validate_unhandled_extension_key(cls, v):
        """Validate the extension key is a vendor extension."""
        if not v.startswith("x-"):
            raise ValueError("unhandled_extension_key must start with 'x-'")
        return v
