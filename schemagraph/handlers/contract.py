"""Schema handler for validation contracts."""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, Any, Hashable, MutableMapping, Optional

from schemagraph.contracts.base import Contract, ContractKey
from schemagraph.core.constraints.rule_index import ITEM_SEGMENT, RuleIndex
from schemagraph.core.schema.composition import compose_all_of, object_schema
from schemagraph.core.schema.models import SchemaNode
from schemagraph.core.subjects import SubjectKind
from schemagraph.core.type_mapping import SchemaTypes
from schemagraph.handlers.base import BaseHandler

if TYPE_CHECKING:
    from schemagraph.core.builder import SchemaGraphBuilder

logger = logging.getLogger(__name__)


class ContractHandler(BaseHandler):
    """Builds object schemas from contract keys and their rule trees.

    Key types give each property its shape; the rule tree of every key is
    walked into constraints layered on top. A contract extending another
    contract composes ``all_of = [parent, child-only keys]``.
    """

    name = "contract"
    kinds = frozenset({SubjectKind.CONTRACT})

    def identify(self, subject: Any) -> Optional[Hashable]:
        return _contract_class(subject)

    def canonical_name(self, subject: Any) -> Optional[str]:
        return _contract_class(subject).schema_name()

    def build(
        self,
        subject: Any,
        builder: "SchemaGraphBuilder",
        stack: list,
        cache: MutableMapping,
    ) -> Optional[SchemaNode]:
        contract = _contract_class(subject)
        name = contract.schema_name()
        index = RuleIndex(contract.rules(), builder.walker)
        parent = contract.parent()

        if parent is None:
            schema = object_schema(canonical_name=name, description=_doc(contract))
            self._add_properties(schema, contract, contract.keys(), index, builder, stack, cache)
            return schema

        logger.debug(
            "Composing contract with parent",
            extra={"context": {"contract": name, "parent": parent.schema_name()}},
        )
        parent_schema = builder.build(parent, stack, cache)
        parent_keys = parent.keys()
        own = {k: v for k, v in contract.keys().items() if k not in parent_keys}

        child = object_schema(description=_doc(contract))
        self._add_properties(child, contract, own, index, builder, stack, cache)
        return compose_all_of(parent_schema, child, canonical_name=name)

    def _add_properties(
        self,
        schema: SchemaNode,
        contract: type[Contract],
        keys: dict[str, ContractKey],
        index: RuleIndex,
        builder: "SchemaGraphBuilder",
        stack: list,
        cache: MutableMapping,
    ) -> None:
        for key_name, key in keys.items():
            prop = self._property(contract, key_name, key, index, builder, stack, cache)
            required = index.is_required(key_name)
            schema.add_property(key_name, prop, required=key.required if required is None else required)

    def _property(
        self,
        contract: type[Contract],
        key_name: str,
        key: ContractKey,
        index: RuleIndex,
        builder: "SchemaGraphBuilder",
        stack: list,
        cache: MutableMapping,
    ) -> SchemaNode:
        constraints = index.constraints_for(key_name)
        type_ = contract.resolve_type(key.type)

        if type_ is None:
            declared = constraints.type_predicate
            prop = SchemaNode(
                type=declared if declared in SchemaTypes.ALL else builder.config.default_type
            )
        else:
            prop = builder.build_field(
                type_, stack, cache, context={"contract": contract.schema_name(), "key": key_name}
            )

        prop = builder.apply_field(prop, constraints, key.meta)

        if prop.type == SchemaTypes.ARRAY and prop.items is not None:
            item_constraints = index.constraints_for(f"{key_name}/{ITEM_SEGMENT}")
            if not item_constraints.is_empty():
                prop.items = builder.apply_field(prop.items, item_constraints)
        return prop


def _contract_class(subject: Any) -> type[Contract]:
    return subject if isinstance(subject, type) else type(subject)


def _doc(contract: type) -> Optional[str]:
    doc = vars(contract).get("__doc__")
    return inspect.cleandoc(doc) if doc else None
