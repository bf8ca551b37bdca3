"""Unit tests for the schema-graph builder."""

import logging
import sys
from dataclasses import dataclass
from typing import List, Optional, Union

import pytest

from schemagraph.contracts import Contract, optional, pred, required
from schemagraph.core.builder import SchemaGraphBuilder
from schemagraph.core.exceptions import UnresolvedSubjectError
from schemagraph.core.schema.composition import resolve_reference
from schemagraph.core.schema.models import SchemaNode
from schemagraph.core.subjects import SubjectKind
from schemagraph.handlers.base import BaseHandler
from schemagraph.handlers.registry import HandlerRegistry
from schemagraph.models.builder_config import BuilderConfig


class TreeContract(Contract):
    value = required(int)
    children = optional(List["TreeContract"])


class AuthorContract(Contract):
    name = required(str)
    books = optional(List["BookContract"])


class BookContract(Contract):
    title = required(str)
    author = required(AuthorContract)


class Opaque:
    """A class no handler knows."""


class LooseContract(Contract):
    blob = required(Opaque, pred("filled?"))
    parent = optional(Optional["LooseContract"])


@dataclass
class Chain:
    value: int
    next: Optional[Union["Chain", "Tail"]] = None


@dataclass
class Tail:
    label: str


class TestStateMachine:
    """Tests for caching and cycle guarding."""

    def test_cache_returns_identical_object(self, builder, cache):
        first = builder.build(TreeContract, cache=cache)
        second = builder.build(TreeContract, cache=cache)
        assert first is second

    def test_separate_caches_build_separately(self, builder):
        first = builder.build(TreeContract)
        second = builder.build(TreeContract)
        assert first is not second
        assert first == second

    def test_stack_is_empty_after_build(self, builder):
        stack = []
        builder.build(BookContract, stack=stack)
        assert stack == []

    def test_anonymous_subjects_are_not_cached(self, builder, cache):
        builder.build(int, cache=cache)
        builder.build(Union[int, str], cache=cache)
        assert cache == {}

    def test_no_handler_returns_none(self, builder):
        assert builder.build(object()) is None


class TestCycles:
    """Tests for recursive type graphs."""

    def test_self_reference(self, builder, cache):
        root = builder.build(TreeContract, cache=cache)
        items = root.properties["children"].items
        assert items.is_reference
        assert items.canonical_name == root.canonical_name
        assert resolve_reference(items, cache) is root

    def test_mutual_recursion(self, builder, cache):
        author = builder.build(AuthorContract, cache=cache)
        book = author.properties["books"].items

        assert book is cache[BookContract]
        assert set(book.properties) == {"title", "author"}
        back = book.properties["author"]
        assert back.is_reference
        assert back.canonical_name == "AuthorContract"
        assert resolve_reference(back, cache) is author

    def test_mutual_recursion_from_other_side(self, builder, cache):
        book = builder.build(BookContract, cache=cache)
        author = book.properties["author"]
        assert author is cache[AuthorContract]
        assert author.properties["books"].items.canonical_name == "BookContract"

    def test_deep_ring_terminates(self, builder, cache, monkeypatch):
        module = sys.modules[__name__]
        limit = sys.getrecursionlimit()
        size = 1000
        ring = []
        for i in range(size):
            cls = type(
                f"Ring{i}",
                (Contract,),
                {"value": required(int), "next": required(f"Ring{(i + 1) % size}")},
            )
            monkeypatch.setattr(module, cls.__name__, cls, raising=False)
            ring.append(cls)

        root = builder.build(ring[0], cache=cache)
        node = root
        for _ in range(size - 1):
            node = node.properties["next"]
            assert not node.is_reference
        closing = node.properties["next"]
        assert closing.is_reference
        assert closing.canonical_name == root.canonical_name == "Ring0"
        assert len(cache) == size
        assert sys.getrecursionlimit() == limit

    def test_union_variants_are_resolved_nodes(self, builder, cache):
        chain = builder.build(Chain, cache=cache)
        link = chain.properties["next"]
        assert link.nullable is True
        assert link.any_of[0] is chain
        assert link.any_of[1] is cache[Tail]
        assert not any(variant.is_reference for variant in link.any_of)

    def test_variants_resolved_when_built_from_union(self, builder, cache):
        schema = builder.build(Union[Chain, Tail], cache=cache)
        chain = schema.any_of[0]
        assert chain is cache[Chain]
        assert chain.properties["next"].any_of[0] is chain


class TestFieldFallback:
    """Tests for unresolved property types."""

    def test_default_type_with_warning(self, builder, caplog):
        with caplog.at_level(logging.WARNING, logger="schemagraph"):
            schema = builder.build(LooseContract)
        blob = schema.properties["blob"]
        assert blob.type == "string"
        assert blob.nullable is False
        assert any("Unresolved property type" in r.getMessage() for r in caplog.records)

    def test_configured_default_type(self, registry):
        builder = SchemaGraphBuilder(registry=registry, config=BuilderConfig(default_type="object"))
        assert builder.build(LooseContract).properties["blob"].type == "object"

    def test_nullable_named_reference_is_wrapped(self, builder, cache):
        schema = builder.build(LooseContract, cache=cache)
        parent = schema.properties["parent"]
        assert parent.nullable is True
        assert parent.any_of[0] is schema
        assert schema.nullable is None


class TestApplyField:
    """Tests for applying field constraints through the builder."""

    def test_shared_named_node_is_not_mutated(self, builder):
        shared = SchemaNode(type="object", canonical_name="Shared")
        result = builder.apply_field(shared, meta={"description": "x"})
        assert result is shared
        assert shared.description is None

    def test_include_unhandled_disabled(self, registry):
        builder = SchemaGraphBuilder(registry=registry, config=BuilderConfig(include_unhandled=False))

        class Moody(Contract):
            mood = required(str, pred("wobbly?"))

        assert builder.build(Moody).properties["mood"].extensions == {}


class RecordingHandler(BaseHandler):
    """Records the stack and cache it is handed."""

    name = "recording"
    kinds = frozenset({SubjectKind.TYPE})

    def __init__(self):
        self.seen = []

    def identify(self, subject):
        return subject

    def canonical_name(self, subject):
        return subject.__name__

    def build(self, subject, builder, stack, cache):
        self.seen.append((list(stack), cache))
        return SchemaNode(type="string", canonical_name=subject.__name__)


class TestHandlerConsultation:
    """Tests for handler dispatch."""

    def test_first_matching_handler_builds(self, registry):
        recorder = RecordingHandler()
        registry.register(recorder, before="type")
        cache = {}
        node = SchemaGraphBuilder(registry=registry).build(int, cache=cache)

        assert node.canonical_name == "int"
        assert recorder.seen == [([int], cache)]
        assert cache[int] is node

    def test_unresolved_union_variant_raises_and_unwinds(self, builder, cache):
        class BrokenContract(Contract):
            choice = required(Union[int, Opaque])

        stack = []
        with pytest.raises(UnresolvedSubjectError) as exc_info:
            builder.build(BrokenContract, stack=stack, cache=cache)
        assert exc_info.value.subject is Opaque
        assert stack == []
        assert BrokenContract not in cache

    def test_empty_registry(self):
        builder = SchemaGraphBuilder(registry=HandlerRegistry())
        assert builder.build(int) is None
