"""Unit tests for ConstraintSet merging and intersection."""

import pytest

from schemagraph.core.constraints.models import (
    ConstraintSet,
    intersect_constraints,
    merge_constraints,
)


class TestConstraintSet:
    """Tests for the accumulator itself."""

    def test_new_set_is_empty(self):
        assert ConstraintSet().is_empty()

    def test_false_is_not_empty(self):
        assert not ConstraintSet(nullable=False).is_empty()

    def test_unhandled_lists_are_not_shared(self):
        a, b = ConstraintSet(), ConstraintSet()
        a.unhandled_predicates.append("x?")
        assert b.unhandled_predicates == []


class TestMergeConstraints:
    """Tests for first-non-nil-wins merging."""

    def test_fills_unset_fields(self):
        target = ConstraintSet(min_size=1)
        merge_constraints(target, ConstraintSet(max_size=5, pattern="^a"))
        assert (target.min_size, target.max_size, target.pattern) == (1, 5, "^a")

    def test_first_value_survives(self):
        target = ConstraintSet(enum=["a"], nullable=False)
        merge_constraints(target, ConstraintSet(enum=["b"], nullable=True))
        assert target.enum == ["a"]
        assert target.nullable is False

    def test_required_is_overwritten(self):
        target = ConstraintSet(required=True)
        merge_constraints(target, ConstraintSet(required=False))
        assert target.required is False

    def test_required_kept_when_incoming_unset(self):
        target = ConstraintSet(required=True)
        merge_constraints(target, ConstraintSet())
        assert target.required is True

    def test_bound_travels_with_its_flag(self):
        target = ConstraintSet()
        merge_constraints(target, ConstraintSet(minimum=3, exclusive_minimum=True))
        merge_constraints(target, ConstraintSet(minimum=9, exclusive_minimum=False))
        assert (target.minimum, target.exclusive_minimum) == (3, True)

    def test_unhandled_union_preserves_order(self):
        target = ConstraintSet(unhandled_predicates=["b?"])
        merge_constraints(target, ConstraintSet(unhandled_predicates=["a?", "b?", "c?"]))
        assert target.unhandled_predicates == ["b?", "a?", "c?"]

    def test_extensions_first_wins(self):
        target = ConstraintSet(extensions={"multipleOf": 2})
        merge_constraints(target, ConstraintSet(extensions={"multipleOf": 5, "x-a": 1}))
        assert target.extensions == {"multipleOf": 2, "x-a": 1}

    def test_none_incoming(self):
        target = ConstraintSet(min_size=1)
        assert merge_constraints(target, None) is target


class TestIntersectConstraints:
    """Tests for combining or-branches."""

    def test_no_branches(self):
        assert intersect_constraints([]).is_empty()

    def test_three_branches(self):
        branches = [
            ConstraintSet(enum=[1, 2, 3], minimum=0),
            ConstraintSet(enum=[2, 3], minimum=2),
            ConstraintSet(enum=[3, 2, 9], minimum=1),
        ]
        c = intersect_constraints(branches)
        assert c.enum == [2, 3]
        assert c.minimum == 2

    def test_bound_keeps_flag_of_its_branch(self):
        c = intersect_constraints(
            [
                ConstraintSet(maximum=10, exclusive_maximum=True),
                ConstraintSet(maximum=8),
            ]
        )
        assert (c.maximum, c.exclusive_maximum) == (8, None)

    def test_extensions_keep_agreement(self):
        c = intersect_constraints(
            [
                ConstraintSet(extensions={"multipleOf": 2, "x-a": 1}),
                ConstraintSet(extensions={"multipleOf": 2, "x-a": 2}),
            ]
        )
        assert c.extensions == {"multipleOf": 2}

    def test_required_must_agree(self):
        c = intersect_constraints([ConstraintSet(required=True), ConstraintSet()])
        assert c.required is None

    @pytest.mark.parametrize(
        "flags,expected",
        [
            ((True, True), True),
            ((True, None), None),
            ((None, True), None),
            ((None, None), None),
            ((True, False), False),
            ((None, False), False),
            ((True, True, None), None),
        ],
    )
    def test_nullable_only_when_every_branch_is_nullable(self, flags, expected):
        c = intersect_constraints([ConstraintSet(nullable=flag) for flag in flags])
        assert c.nullable is expected
