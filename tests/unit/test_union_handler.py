"""Unit tests for union handling."""

from dataclasses import dataclass
from typing import Optional, Union

import pytest

from schemagraph.core.exceptions import UnresolvedSubjectError
from schemagraph.handlers.union import UnionHandler


@dataclass
class Card:
    number: str
    expiry: str


@dataclass
class Cash:
    amount: float


@dataclass
class Voucher:
    code: str


class Opaque:
    pass


Payment = Union[Card, Cash, Voucher]


class TestUnionHandler:
    """Tests for UnionHandler."""

    def test_handles_only_multi_member_unions(self):
        handler = UnionHandler()
        assert handler.handles(Payment)
        assert handler.handles(Union[int, str])
        assert not handler.handles(Optional[int])
        assert not handler.handles(int)

    def test_unions_are_anonymous(self):
        assert UnionHandler().identify(Payment) is None

    def test_any_of_variants(self, builder, cache):
        schema = builder.build(Payment, cache=cache)
        assert schema.type is None
        assert schema.canonical_name is None
        assert len(schema.any_of) == 3
        assert [v.canonical_name for v in schema.any_of] == ["Card", "Cash", "Voucher"]
        assert all(v.properties for v in schema.any_of)
        assert schema.nullable is None

    def test_variants_share_cached_nodes(self, builder, cache):
        card = builder.build(Card, cache=cache)
        schema = builder.build(Payment, cache=cache)
        assert schema.any_of[0] is card

    def test_optional_union_is_nullable(self, builder):
        schema = builder.build(Optional[Union[Card, Cash]])
        assert len(schema.any_of) == 2
        assert schema.nullable is True

    def test_primitive_union(self, builder):
        schema = builder.build(Union[int, str])
        assert [v.type for v in schema.any_of] == ["integer", "string"]

    def test_unresolved_variant_raises(self, builder):
        with pytest.raises(UnresolvedSubjectError) as exc_info:
            builder.build(Union[Card, Opaque])
        assert exc_info.value.subject is Opaque
        assert "Opaque" in str(exc_info.value)
