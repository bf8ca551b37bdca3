"""Schema Graph - schema graphs from validation contracts and type descriptions.

Resolves contracts, pydantic models, dataclasses, unions and Arrow schemas
into a graph of schema nodes, deriving field constraints from validation
rule trees.
"""

__version__ = "0.1.0"

# Public API
from schemagraph.api import build_document, build_schema

# Contracts
from schemagraph.contracts import Contract, optional, pred, required

# Core classes
from schemagraph.core.builder import SchemaGraphBuilder
from schemagraph.core.constraints import AstWalker, ConstraintSet, walk

# Exceptions
from schemagraph.core.exceptions import (
    ConfigError,
    HandlerError,
    SchemaGraphError,
    TargetError,
    UnresolvedSubjectError,
)
from schemagraph.core.schema import SchemaNode, dump_graph
from schemagraph.handlers import HandlerRegistry, default_registry

# Configuration
from schemagraph.models import BuilderConfig, load_config

__all__ = [
    # Version
    "__version__",
    # Public API
    "build_schema",
    "build_document",
    "dump_graph",
    "load_config",
    # Contracts
    "Contract",
    "required",
    "optional",
    "pred",
    # Core classes
    "SchemaGraphBuilder",
    "SchemaNode",
    "ConstraintSet",
    "AstWalker",
    "walk",
    "HandlerRegistry",
    "default_registry",
    "BuilderConfig",
    # Exceptions
    "SchemaGraphError",
    "UnresolvedSubjectError",
    "HandlerError",
    "ConfigError",
    "TargetError",
]
