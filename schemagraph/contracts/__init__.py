"""Validation contracts whose rule trees feed schema constraints."""

from schemagraph.contracts.base import Contract, ContractKey, optional, required
from schemagraph.core.constraints.predicates import Each, Key, Span, pred

__all__ = [
    "Contract",
    "ContractKey",
    "required",
    "optional",
    "pred",
    "Each",
    "Key",
    "Span",
]
