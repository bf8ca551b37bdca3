"""Unit tests for the handler registry."""

import pytest

from schemagraph.core.exceptions import HandlerError
from schemagraph.core.schema.models import SchemaNode
from schemagraph.core.subjects import SubjectKind
from schemagraph.handlers.base import BaseHandler, SchemaHandler
from schemagraph.handlers.registry import HandlerRegistry, default_registry


class MockHandler(BaseHandler):
    """Handles dicts tagged ``{"type": "mock"}``."""

    name = "mock"
    kinds = frozenset({SubjectKind.OTHER})

    def handles(self, subject, kind=None):
        return isinstance(subject, dict) and subject.get("type") in ("mock", "both")

    def build(self, subject, builder, stack, cache):
        return SchemaNode(type="object", description=subject.get("desc"))


class AnotherMockHandler(BaseHandler):
    """Handles dicts tagged ``{"type": "another"}``."""

    name = "another"
    kinds = frozenset({SubjectKind.OTHER})

    def handles(self, subject, kind=None):
        return isinstance(subject, dict) and subject.get("type") in ("another", "both")

    def build(self, subject, builder, stack, cache):
        return SchemaNode(type="string")


@pytest.fixture
def mock():
    return MockHandler()


@pytest.fixture
def another():
    return AnotherMockHandler()


class TestRegistration:
    """Tests for registering handlers."""

    def test_register_adds_handler(self, mock):
        registry = HandlerRegistry()
        registry.register(mock)
        assert len(registry) == 1
        assert mock in registry

    def test_register_prevents_duplicates(self, mock):
        registry = HandlerRegistry()
        registry.register(mock).register(mock)
        assert len(registry) == 1

    def test_register_returns_registry(self, mock):
        registry = HandlerRegistry()
        assert registry.register(mock) is registry

    def test_register_rejects_non_handlers(self):
        with pytest.raises(HandlerError) as exc_info:
            HandlerRegistry().register(object())
        assert "must provide" in str(exc_info.value)

    def test_register_before(self, mock, another):
        registry = HandlerRegistry([mock])
        registry.register(another, before=mock)
        assert registry.to_list() == [another, mock]

    def test_register_after(self, mock, another):
        registry = HandlerRegistry([mock])
        registry.register(another, after=mock)
        assert registry.to_list() == [mock, another]

    def test_register_by_anchor_name(self, registry, mock):
        registry.register(mock, before="model")
        assert registry.names() == ["contract", "mock", "model", "union", "arrow", "type"]

    def test_missing_anchor_appends(self, mock, another):
        registry = HandlerRegistry([mock])
        registry.register(another, before="nonexistent")
        assert registry.to_list() == [mock, another]

    def test_missing_before_falls_back_to_after(self, registry, mock):
        registry.register(mock, before="nonexistent", after="contract")
        assert registry.names() == ["contract", "mock", "model", "union", "arrow", "type"]

    def test_before_takes_precedence_over_after(self, registry, mock):
        registry.register(mock, before="arrow", after="contract")
        assert registry.names() == ["contract", "model", "union", "mock", "arrow", "type"]

    def test_both_anchors_missing_appends(self, registry, mock):
        registry.register(mock, before="nonexistent", after="missing")
        assert registry.names()[-1] == "mock"

    def test_to_list_is_a_copy(self, mock):
        registry = HandlerRegistry([mock])
        registry.to_list().clear()
        assert len(registry) == 1


class TestLookup:
    """Tests for finding handlers."""

    def test_find_returns_matching_handler(self, mock):
        registry = HandlerRegistry([mock])
        assert registry.find({"type": "mock"}) is mock

    def test_find_returns_none_for_no_match(self, mock):
        registry = HandlerRegistry([mock])
        assert registry.find({"type": "unknown"}) is None
        assert not registry.handles({"type": "unknown"})

    def test_before_wins_for_shared_subject(self, mock, another):
        registry = HandlerRegistry([mock])
        registry.register(another, before=mock)
        assert registry.find({"type": "both"}) is another

    def test_after_loses_for_shared_subject(self, mock, another):
        registry = HandlerRegistry([mock])
        registry.register(another, after=mock)
        assert registry.find({"type": "both"}) is mock


class TestIntrospection:
    """Tests for unregister, clear and iteration."""

    def test_unregister(self, mock, another):
        registry = HandlerRegistry([mock, another])
        assert registry.unregister(mock) is registry
        assert registry.to_list() == [another]

    def test_unregister_by_name(self, registry):
        registry.unregister("arrow")
        assert "arrow" not in registry.names()

    def test_unregister_missing_is_noop(self, mock):
        registry = HandlerRegistry()
        assert len(registry.unregister(mock)) == 0

    def test_clear(self, registry):
        registry.clear()
        assert len(registry) == 0

    def test_iteration_order(self, mock, another):
        registry = HandlerRegistry([mock, another])
        assert [h.name for h in registry] == ["mock", "another"]


class TestDefaultRegistry:
    """Tests for the built-in handler set."""

    def test_order(self):
        assert default_registry().names() == ["contract", "model", "union", "arrow", "type"]

    def test_fresh_instances(self):
        assert default_registry() is not default_registry()

    def test_builtins_satisfy_protocol(self):
        assert all(isinstance(h, SchemaHandler) for h in default_registry())

    def test_dispatch_by_kind(self):
        registry = default_registry()
        assert registry.find(int).name == "type"
        assert registry.find(int | str).name == "union"
        assert registry.find({"no": "handler"}) is None
