"""Declarative validation contracts.

A contract declares its keys as class attributes. Each key carries a type,
a rule tree and static metadata; the rule tree for the whole key is exposed
through ``Contract.rules()`` the way validation libraries export it::

    class PetContract(Contract):
        pet_type = required(str, pred("included_in?", ["cat", "dog"]))
        name = required(str, pred("filled?"), pred("max_size?", 50))
        nickname = optional(str | None, pred("nil?") | pred("min_size?", 2))

Required keys compile to ``key? & key(name, rule)``; optional keys to
``key? >> key(name, rule)``, so the rule only applies when the key is given.
Subclasses inherit their parent's keys.
"""

from __future__ import annotations

import logging
import sys
import typing
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional

from schemagraph.core.constraints.predicates import (
    And,
    Implication,
    Key,
    Predicate,
    PredicateNode,
)

logger = logging.getLogger(__name__)


@dataclass
class ContractKey:
    """One declared key of a contract."""

    type: Any = None
    rule: Optional[PredicateNode] = None
    required: bool = True
    meta: dict[str, Any] = field(default_factory=dict)
    name: Optional[str] = None

    def __set_name__(self, owner: type, name: str) -> None:
        if self.name is None:
            self.name = name

    def to_ast(self) -> PredicateNode:
        check = Predicate("key?", (self.name,))
        body = Key(self.name, self.rule) if self.rule is not None else None
        if self.required:
            return And((check, body) if body is not None else (check,))
        return Implication((check, body if body is not None else And(())))


def required(type_: Any = None, *rules: PredicateNode, **meta: Any) -> ContractKey:
    """Declare a key that must be present."""
    return ContractKey(type=type_, rule=_combine(rules), required=True, meta=meta)


def optional(type_: Any = None, *rules: PredicateNode, **meta: Any) -> ContractKey:
    """Declare a key whose rules only apply when it is present."""
    return ContractKey(type=type_, rule=_combine(rules), required=False, meta=meta)


def _combine(rules: tuple) -> Optional[PredicateNode]:
    if not rules:
        return None
    if len(rules) == 1:
        return rules[0]
    return And(tuple(rules))


class Contract:
    """Base class for validation contracts."""

    __schema_name__: ClassVar[Optional[str]] = None
    __keys__: ClassVar[dict[str, ContractKey]] = {}
    __own_keys__: ClassVar[dict[str, ContractKey]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        own = {
            name: value
            for name, value in vars(cls).items()
            if isinstance(value, ContractKey)
        }
        # keys live only in the key dicts; a key may share a classmethod's name
        for name in own:
            delattr(cls, name)
        keys: dict[str, ContractKey] = {}
        for base in reversed(cls.__mro__[1:]):
            keys.update(vars(base).get("__own_keys__", {}))
        keys.update(own)
        cls.__own_keys__ = own
        cls.__keys__ = keys

    @classmethod
    def schema_name(cls) -> str:
        return cls.__schema_name__ or cls.__name__

    @classmethod
    def keys(cls) -> dict[str, ContractKey]:
        return dict(cls.__keys__)

    @classmethod
    def own_keys(cls) -> dict[str, ContractKey]:
        return dict(cls.__own_keys__)

    @classmethod
    def types(cls) -> dict[str, Any]:
        return {name: key.type for name, key in cls.__keys__.items()}

    @classmethod
    def rules(cls) -> dict[str, PredicateNode]:
        return {name: key.to_ast() for name, key in cls.__keys__.items()}

    @classmethod
    def parent(cls) -> Optional[type["Contract"]]:
        """The nearest contract this one extends, if any."""
        for base in cls.__bases__:
            if issubclass(base, Contract) and base is not Contract:
                return base
        return None

    @classmethod
    def resolve_type(cls, type_: Any) -> Any:
        """Evaluate string annotations (``list["Node"]``) in the contract's module.

        Strings naming nothing in scope (``"integer"``) are returned as given
        and left to the type handler.
        """
        if type_ is None:
            return None
        holder = type(
            "_KeyType",
            (),
            {"__annotations__": {"value": type_}, "__module__": cls.__module__},
        )
        module = sys.modules.get(cls.__module__)
        localns = dict(vars(module)) if module is not None else {}
        localns[cls.__name__] = cls
        try:
            return typing.get_type_hints(holder, localns=localns, include_extras=True)["value"]
        except NameError as e:
            logger.debug(
                "Type left unevaluated",
                extra={"context": {"contract": cls.__name__, "type": repr(type_), "error": str(e)}},
            )
            return type_
