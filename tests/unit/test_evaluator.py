"""Tests for fieldwise.comparison.evaluator module."""

from types import SimpleNamespace

import pytest

from fieldwise.comparison.evaluator import MismatchOutcome, compare, compare_to_type, evaluate, values_match
from fieldwise.comparison.scanner import MatchRecord, scan
from fieldwise.reflection.members import MemberDescriptor
from fieldwise.reflection.scope import (
    ALL_FIELDS,
    ALL_MEMBERS,
    NON_PUBLIC_FIELDS,
    PUBLIC_FIELDS,
    PUBLIC_PROPERTIES,
)
from fieldwise.types import MemberKind, OutcomeKind

from samples import Base, Derived, Gauge, Inner, Node, OtherInner, Outer, Point, Segment, SutClass


def record(expected, actual=...):
    if actual is ...:
        return MatchRecord(MemberDescriptor.root(expected))
    return MatchRecord(MemberDescriptor.root(expected), MemberDescriptor.root(actual))


class TestEvaluate:
    """Tests for classifying a single record."""

    def test_equal_values_pass(self):
        assert values_match(record(2, 2))
        assert evaluate(record(2, 2)) is None

    def test_different_values(self):
        outcome = evaluate(record(2, 3))

        assert outcome is not None
        assert outcome.kind is OutcomeKind.VALUES_DIFFER
        assert (outcome.expected_value, outcome.actual_value) == (2, 3)
        assert not outcome.types_differ

    def test_absent_member(self):
        outcome = evaluate(record(2))

        assert outcome is not None
        assert outcome.kind is OutcomeKind.EXPECTED_FIELD_ABSENT_FROM_ACTUAL
        assert outcome.actual is None

    def test_none_matches_only_none(self):
        assert values_match(record(None, None))
        assert not values_match(record(None, 0))
        assert not values_match(record(0, None))

    def test_negated_reports_equality(self):
        outcome = evaluate(record(2, 2), negated=True)

        assert outcome is not None
        assert outcome.kind is OutcomeKind.NEGATED_BUT_EQUAL
        assert evaluate(record(2, 3), negated=True) is None

    def test_negated_absent_member_passes(self):
        assert evaluate(record(2), negated=True) is None

    @pytest.mark.parametrize(("expected", "actual"), [(1, 1), (1, 2), (None, None), ("a", None), ((1,), [1])])
    def test_negation_inverts_outcome(self, expected, actual):
        pair = record(expected, actual)

        assert (evaluate(pair) is None) != (evaluate(pair, negated=True) is None)

    def test_type_difference(self):
        outcome = evaluate(record(1, "1"))

        assert outcome is not None
        assert outcome.types_differ
        assert (outcome.expected_type, outcome.actual_type) == (int, str)

    def test_outcome_exposes_its_record(self):
        pair = record(2, 3)

        assert evaluate(pair).record == pair


class TestScenarios:
    """Reference comparisons between two SutClass instances."""

    def test_identical_public_fields(self):
        assert compare(SutClass(2, 42), SutClass(2, 42), PUBLIC_FIELDS) == []

    def test_different_public_field(self):
        outcomes = compare(SutClass(3, 42), SutClass(2, 42), PUBLIC_FIELDS)

        assert len(outcomes) == 1
        outcome = outcomes[0]
        assert outcome.kind is OutcomeKind.VALUES_DIFFER
        assert outcome.path == "the_field"
        assert (outcome.expected_value, outcome.actual_value) == (2, 3)

    def test_properties_outside_scope_are_ignored(self):
        assert compare(SutClass(2, 43), SutClass(2, 42), PUBLIC_FIELDS) == []

    def test_private_fields(self):
        assert compare(SutClass(2, 42, 4, None), SutClass(2, 42, 4, None), NON_PUBLIC_FIELDS) == []

    def test_backing_field_reported_by_property_name(self):
        outcomes = compare(SutClass(2, 43, 4, None), SutClass(2, 42, 4, None), NON_PUBLIC_FIELDS)

        assert len(outcomes) == 1
        assert outcomes[0].path == "the_property"
        assert outcomes[0].expected.kind is MemberKind.AUTO_PROPERTY
        assert outcomes[0].label == "autoproperty 'the_property' (field '_the_property')"

    def test_single_private_difference_under_widest_scope(self):
        outcomes = compare(SutClass(2, 42, 5, None), SutClass(2, 42, 4, None), ALL_MEMBERS)

        assert [(o.kind, o.path) for o in outcomes] == [(OutcomeKind.VALUES_DIFFER, "_the_private_field")]

    def test_public_properties(self):
        assert compare(SutClass(1, 42), SutClass(2, 42), PUBLIC_PROPERTIES) == []
        assert [o.path for o in compare(SutClass(2, 43), SutClass(2, 42), PUBLIC_PROPERTIES)] == ["the_property"]


class TestProperties:
    """Invariants holding across comparisons."""

    graphs = [
        SutClass(1, 2, 3, "p"),
        Outer("a", Inner(1)),
        SimpleNamespace(items=[1, 2], nested=Outer("b", Inner(2))),
    ]

    @pytest.mark.parametrize("graph", graphs)
    @pytest.mark.parametrize("scope", [PUBLIC_FIELDS, ALL_FIELDS, ALL_MEMBERS])
    def test_reflexivity(self, graph, scope):
        assert compare(graph, graph, scope) == []

    def test_symmetry_of_detection(self):
        left = Outer("a", Inner(1))
        right = Outer("a", Inner(2))

        forward = compare(left, right, ALL_FIELDS)
        backward = compare(right, left, ALL_FIELDS)

        assert [o.path for o in forward] == [o.path for o in backward] == ["inner.count"]
        assert forward[0].expected_value == backward[0].actual_value

    def test_scope_monotonicity(self):
        actual = SutClass(1, 2, 3, "p")
        expected = SutClass(9, 8, 7, "q")

        narrow = {o.path for o in compare(actual, expected, PUBLIC_FIELDS)}
        wider = {o.path for o in compare(actual, expected, ALL_FIELDS)}
        widest = {o.path for o in compare(actual, expected, ALL_MEMBERS)}

        assert narrow <= wider <= widest
        assert narrow < widest

    @pytest.mark.parametrize("level", [1, 2])
    def test_scope_monotonicity_with_backing_field(self, level):
        actual = Gauge(level)
        expected = SimpleNamespace(level=1)

        def reported(scope):
            return {(o.kind, o.path) for o in compare(actual, expected, scope, strict=True)}

        assert reported(PUBLIC_FIELDS) <= reported(ALL_FIELDS) <= reported(ALL_MEMBERS)
        assert reported(PUBLIC_FIELDS) == ({(OutcomeKind.VALUES_DIFFER, "level")} if level == 2 else set())

    def test_cycle_against_itself(self):
        node = Node("a")
        node.next = node

        assert compare(node, node, ALL_FIELDS) == []
        assert compare(node, node, ALL_FIELDS, negated=True)[0].path == "name"

    def test_order_is_stable(self):
        actual = SutClass(1, 2, 3, "p")
        expected = SutClass(9, 8, 7, "q")

        first = [o.path for o in compare(actual, expected, ALL_MEMBERS)]
        assert first == [o.path for o in compare(actual, expected, ALL_MEMBERS)]
        assert first[:4] == ["the_field", "the_property", "_the_private_field", "__the_private_property"]


class TestCompare:
    """Tests for the scan-and-evaluate entry point."""

    def test_missing_member(self):
        outcomes = compare(SimpleNamespace(the_field=2), SimpleNamespace(the_field=2, extra=1), ALL_FIELDS)

        assert [(o.kind, o.path) for o in outcomes] == [(OutcomeKind.EXPECTED_FIELD_ABSENT_FROM_ACTUAL, "extra")]

    def test_strict_reports_unexpected_members(self):
        outcomes = compare(SimpleNamespace(the_field=2, extra=1), SimpleNamespace(the_field=2), ALL_FIELDS, strict=True)

        assert len(outcomes) == 1
        outcome = outcomes[0]
        assert outcome.kind is OutcomeKind.ACTUAL_HAS_UNEXPECTED_FIELD
        assert outcome.path == "extra"
        assert outcome.expected is None
        assert outcome.record is None
        assert outcome.actual_value == 1

    def test_strict_ignored_when_negated(self):
        outcomes = compare(SimpleNamespace(a=2, extra=1), SimpleNamespace(a=2), ALL_FIELDS, negated=True, strict=True)

        assert [o.kind for o in outcomes] == [OutcomeKind.NEGATED_BUT_EQUAL]

    def test_negated_reports_each_equal_member(self):
        outcomes = compare(SutClass(2, 42, 4, "p"), SutClass(2, 43, 5, "q"), ALL_FIELDS, negated=True)

        assert [(o.kind, o.path) for o in outcomes] == [(OutcomeKind.NEGATED_BUT_EQUAL, "the_field")]

    def test_composite_against_scalar_reports_types(self):
        outcomes = compare(Outer("a", 5), Outer("a", Inner(5)), ALL_FIELDS)

        assert len(outcomes) == 1
        assert outcomes[0].path == "inner"
        assert outcomes[0].types_differ
        assert outcomes[0].actual_type is int

    def test_different_composite_types_are_left_to_type_checks(self):
        assert compare(Outer("a", OtherInner(3)), Outer("a", Inner(2)), ALL_FIELDS) == []
        assert compare(Outer("a", (1, 2)), Outer("a", [1, 3]), ALL_FIELDS) == []

    def test_class_against_composite_reports_types(self):
        outcomes = compare(Outer("a", Inner), Outer("a", Inner(2)), ALL_FIELDS, strict=True)

        assert [(o.kind, o.path) for o in outcomes] == [(OutcomeKind.VALUES_DIFFER, "inner")]
        assert outcomes[0].types_differ
        assert outcomes[0].actual_type is type

    def test_whole_values(self):
        outcomes = compare(3, 2, ALL_FIELDS)

        assert len(outcomes) == 1
        assert outcomes[0].path == ""
        assert outcomes[0].label == "value"

    def test_outcomes_are_immutable(self):
        outcome = compare(3, 2, ALL_FIELDS)[0]

        assert isinstance(outcome, MismatchOutcome)
        with pytest.raises(AttributeError):
            outcome.path = "other"

    def test_records_feed_evaluation(self):
        records = scan(SutClass(3, 42), SutClass(2, 42), PUBLIC_FIELDS)

        assert [evaluate(r).path for r in records] == ["the_field"]


class TestCompareToType:
    """Tests for comparing an object with the members a type declares."""

    def test_matching_shape(self):
        assert compare_to_type(Point(1, 2), Point, ALL_FIELDS) == []
        assert compare_to_type(SimpleNamespace(x=1, y=2), Point, ALL_FIELDS) == []

    def test_primitive_of_wrong_class(self):
        outcomes = compare_to_type(SimpleNamespace(x="1", y=2), Point, ALL_FIELDS)

        assert len(outcomes) == 1
        outcome = outcomes[0]
        assert outcome.kind is OutcomeKind.TYPES_DIFFER
        assert outcome.path == "x"
        assert outcome.types_differ
        assert (outcome.expected_type, outcome.actual_type) == (int, str)

    def test_missing_and_unexpected_members(self):
        outcomes = compare_to_type(SimpleNamespace(x=1, z=3), Point, ALL_FIELDS)

        assert [(o.kind, o.path) for o in outcomes] == [
            (OutcomeKind.EXPECTED_FIELD_ABSENT_FROM_ACTUAL, "y"),
            (OutcomeKind.ACTUAL_HAS_UNEXPECTED_FIELD, "z"),
        ]
        assert all(o.against_type for o in outcomes)

    def test_different_composite_classes_are_accepted(self):
        assert compare_to_type(SimpleNamespace(start=Inner(1), end=Point(0, 0)), Segment, ALL_FIELDS) == []

    def test_scalar_for_composite_member(self):
        outcomes = compare_to_type(SimpleNamespace(start=3, end=Point(0, 0)), Segment, ALL_FIELDS)

        assert [(o.kind, o.path) for o in outcomes] == [(OutcomeKind.TYPES_DIFFER, "start")]
        assert outcomes[0].expected_type is Point

    def test_none_values_are_not_type_checked(self):
        assert compare_to_type(SimpleNamespace(x=None, y=2), Point, ALL_FIELDS) == []

    def test_inherited_declarations(self):
        assert compare_to_type(Derived(1, 2), Derived, ALL_FIELDS) == []
        assert [o.path for o in compare_to_type(Derived(1, 2), Base, ALL_FIELDS)] == ["derived_value"]
