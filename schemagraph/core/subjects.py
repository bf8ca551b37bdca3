"""Subject kinds: the closed set of things a schema can be built from.

A subject is classified once, at the handler registry boundary, so handlers
declare the kinds they accept instead of probing subjects themselves.
"""

from __future__ import annotations

import dataclasses
import types
import typing
from enum import Enum
from typing import Any, Union, get_args, get_origin

import pyarrow as pa
from pydantic import BaseModel

NoneType = type(None)


class SubjectKind(str, Enum):
    """Kind of a schema subject."""

    CONTRACT = "contract"  # schemagraph.contracts.Contract subclasses/instances
    MODEL = "model"  # pydantic models and dataclasses
    UNION = "union"  # Union[...] with two or more non-None members
    ARROW = "arrow"  # pyarrow schemas and data types
    TYPE = "type"  # builtins, typing generics, literals, enums
    OTHER = "other"


def is_union(subject: Any) -> bool:
    """True for ``Union[...]`` and ``X | Y`` annotations."""
    origin = get_origin(subject)
    return origin is Union or (
        hasattr(types, "UnionType") and origin is types.UnionType
    )


def union_members(subject: Any) -> tuple[list[Any], bool]:
    """Split a union into its non-None members and a nullable flag."""
    args = get_args(subject)
    members = [a for a in args if a is not NoneType]
    return members, len(members) != len(args)


def is_model_class(subject: Any) -> bool:
    if not isinstance(subject, type):
        return False
    if issubclass(subject, BaseModel):
        return subject is not BaseModel
    return dataclasses.is_dataclass(subject)


def is_contract(subject: Any) -> bool:
    from schemagraph.contracts.base import Contract

    if isinstance(subject, type):
        return issubclass(subject, Contract) and subject is not Contract
    return isinstance(subject, Contract)


def classify(subject: Any) -> SubjectKind:
    """Resolve the kind of a subject.

    Args:
        subject: Anything a handler might build a schema from

    Returns:
        The subject's SubjectKind (OTHER when nothing matches)
    """
    if is_contract(subject):
        return SubjectKind.CONTRACT
    if is_model_class(subject):
        return SubjectKind.MODEL
    if is_union(subject):
        members, _ = union_members(subject)
        return SubjectKind.UNION if len(members) >= 2 else SubjectKind.TYPE
    if isinstance(subject, (pa.Schema, pa.DataType)):
        return SubjectKind.ARROW
    if (
        isinstance(subject, (type, str, typing.TypeVar))
        or get_origin(subject) is not None
        or subject is typing.Any
        or hasattr(subject, "__supertype__")
    ):
        return SubjectKind.TYPE
    return SubjectKind.OTHER
