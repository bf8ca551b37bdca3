"""Schema handlers and the ordered registry that selects among them."""

from schemagraph.handlers.arrow import ArrowHandler
from schemagraph.handlers.base import BaseHandler, SchemaHandler
from schemagraph.handlers.contract import ContractHandler
from schemagraph.handlers.entity import ModelHandler
from schemagraph.handlers.registry import HandlerRegistry, default_registry
from schemagraph.handlers.types import TypeHandler
from schemagraph.handlers.union import UnionHandler

__all__ = [
    "SchemaHandler",
    "BaseHandler",
    "HandlerRegistry",
    "default_registry",
    "ContractHandler",
    "ModelHandler",
    "UnionHandler",
    "ArrowHandler",
    "TypeHandler",
]
