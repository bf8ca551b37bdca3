"""Core module for schemagraph package."""

from schemagraph.core.builder import SchemaGraphBuilder
from schemagraph.core.exceptions import (
    ConfigError,
    HandlerError,
    SchemaGraphError,
    TargetError,
    UnresolvedSubjectError,
)
from schemagraph.core.subjects import SubjectKind, classify

__all__ = [
    "SchemaGraphBuilder",
    "SubjectKind",
    "classify",
    "SchemaGraphError",
    "UnresolvedSubjectError",
    "HandlerError",
    "ConfigError",
    "TargetError",
]
