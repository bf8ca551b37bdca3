"""Shared type mapping utilities for schema type names.

This module provides centralized mappings from Python types, type-name
strings and Arrow types to schema type tags, used by the handlers to keep
type inference consistent across subject kinds.
"""

import datetime as dt
import decimal
import uuid
from typing import Any, NamedTuple, Optional

import pyarrow as pa


class SchemaTypes:
    """Schema type tags."""

    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"

    ALL = frozenset({STRING, INTEGER, NUMBER, BOOLEAN, OBJECT, ARRAY})
    NUMERIC = frozenset({INTEGER, NUMBER})


class TypeInfo(NamedTuple):
    """Schema type tag plus optional semantic format."""

    type: str
    format: Optional[str] = None


# Python classes to schema types. bool precedes int: bool is an int subclass.
PYTHON_TYPE_TO_SCHEMA: dict[type, TypeInfo] = {
    bool: TypeInfo(SchemaTypes.BOOLEAN),
    int: TypeInfo(SchemaTypes.INTEGER),
    float: TypeInfo(SchemaTypes.NUMBER),
    decimal.Decimal: TypeInfo(SchemaTypes.NUMBER),
    str: TypeInfo(SchemaTypes.STRING),
    bytes: TypeInfo(SchemaTypes.STRING, "binary"),
    dt.datetime: TypeInfo(SchemaTypes.STRING, "date-time"),
    dt.date: TypeInfo(SchemaTypes.STRING, "date"),
    dt.time: TypeInfo(SchemaTypes.STRING, "time"),
    uuid.UUID: TypeInfo(SchemaTypes.STRING, "uuid"),
    dict: TypeInfo(SchemaTypes.OBJECT),
    list: TypeInfo(SchemaTypes.ARRAY),
    tuple: TypeInfo(SchemaTypes.ARRAY),
    set: TypeInfo(SchemaTypes.ARRAY),
    frozenset: TypeInfo(SchemaTypes.ARRAY),
}

# Lowercase type-name strings to schema types.
STRING_TO_SCHEMA_TYPE: dict[str, str] = {
    "str": SchemaTypes.STRING,
    "string": SchemaTypes.STRING,
    "int": SchemaTypes.INTEGER,
    "integer": SchemaTypes.INTEGER,
    "float": SchemaTypes.NUMBER,
    "double": SchemaTypes.NUMBER,
    "decimal": SchemaTypes.NUMBER,
    "number": SchemaTypes.NUMBER,
    "bool": SchemaTypes.BOOLEAN,
    "boolean": SchemaTypes.BOOLEAN,
    "dict": SchemaTypes.OBJECT,
    "hash": SchemaTypes.OBJECT,
    "object": SchemaTypes.OBJECT,
    "list": SchemaTypes.ARRAY,
    "array": SchemaTypes.ARRAY,
}


def python_type_info(py_type: Any) -> Optional[TypeInfo]:
    """Look up the schema type for a Python class, honouring subclasses.

    Args:
        py_type: A Python class (e.g. ``int``, ``datetime.date``)

    Returns:
        TypeInfo, or None when the class has no schema equivalent
    """
    if not isinstance(py_type, type):
        return None
    info = PYTHON_TYPE_TO_SCHEMA.get(py_type)
    if info is not None:
        return info
    # datetime subclasses date, so exact lookups above run first
    for base, mapped in PYTHON_TYPE_TO_SCHEMA.items():
        if issubclass(py_type, base):
            return mapped
    return None


def string_to_schema_type(type_name: str) -> Optional[str]:
    """Convert a type name string (e.g. "Integer", "str") to a schema type."""
    return STRING_TO_SCHEMA_TYPE.get(type_name.strip().lower())


def literal_schema_type(values: list[Any]) -> Optional[str]:
    """Infer a schema type shared by every literal value, if any."""
    types = {python_type_info(type(v)) for v in values if v is not None}
    if len(types) == 1:
        info = types.pop()
        return info.type if info else None
    return None


def arrow_type_to_schema(arrow_type: pa.DataType) -> TypeInfo:
    """Convert a scalar Arrow type to a schema type.

    Nested Arrow types (list, struct, map) are expanded by the Arrow handler;
    for those this returns the container tag only.

    Args:
        arrow_type: Arrow DataType

    Returns:
        TypeInfo for the Arrow type (unknown types map to string)
    """
    types = pa.types
    if types.is_boolean(arrow_type):
        return TypeInfo(SchemaTypes.BOOLEAN)
    if types.is_integer(arrow_type):
        return TypeInfo(SchemaTypes.INTEGER)
    if types.is_floating(arrow_type) or types.is_decimal(arrow_type):
        return TypeInfo(SchemaTypes.NUMBER)
    if types.is_timestamp(arrow_type) or types.is_date64(arrow_type):
        return TypeInfo(SchemaTypes.STRING, "date-time")
    if types.is_date32(arrow_type):
        return TypeInfo(SchemaTypes.STRING, "date")
    if types.is_time(arrow_type):
        return TypeInfo(SchemaTypes.STRING, "time")
    if types.is_binary(arrow_type) or types.is_large_binary(arrow_type):
        return TypeInfo(SchemaTypes.STRING, "binary")
    if types.is_list(arrow_type) or types.is_large_list(arrow_type):
        return TypeInfo(SchemaTypes.ARRAY)
    if types.is_struct(arrow_type) or types.is_map(arrow_type):
        return TypeInfo(SchemaTypes.OBJECT)
    return TypeInfo(SchemaTypes.STRING)
