"""Mismatch evaluation: turns scanned member pairs into reported outcomes."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from fieldwise.comparison.scanner import DEFAULT_SCANNER, GraphScanner, MatchRecord
from fieldwise.reflection.members import MemberDescriptor
from fieldwise.reflection.scope import ALL_MEMBERS, ScopeSelection
from fieldwise.types import OutcomeKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MismatchOutcome:
    """A reported difference between the actual and the expected object.

    ``expected`` is None only for ``ACTUAL_HAS_UNEXPECTED_FIELD`` outcomes;
    ``actual`` is None only for ``EXPECTED_FIELD_ABSENT_FROM_ACTUAL`` ones.
    ``against_type`` marks outcomes of a comparison with a type's declared
    members, whose expected side holds no value.
    """

    kind: OutcomeKind
    label: str
    path: str
    expected: MemberDescriptor | None
    actual: MemberDescriptor | None
    against_type: bool = False

    @property
    def record(self) -> MatchRecord | None:
        if self.expected is None:
            return None
        return MatchRecord(self.expected, self.actual)

    @property
    def expected_value(self) -> Any:
        return None if self.expected is None else self.expected.value

    @property
    def actual_value(self) -> Any:
        return None if self.actual is None else self.actual.value

    @property
    def expected_type(self) -> type | None:
        if self.expected is None:
            return None
        if self.against_type:
            return self.expected.declared_type
        return type(self.expected.value)

    @property
    def actual_type(self) -> type | None:
        return None if self.actual is None else type(self.actual.value)

    @property
    def types_differ(self) -> bool:
        if self.kind is OutcomeKind.TYPES_DIFFER:
            return True
        if self.against_type or self.expected is None or self.actual is None:
            return False
        if self.expected.value is None or self.actual.value is None:
            return False
        return self.expected_type is not self.actual_type


def values_match(record: MatchRecord) -> bool:
    """Return True if both members exist and hold equal values."""
    if record.actual is None:
        return False
    if record.expected.value is None:
        return record.actual.value is None
    return bool(record.expected.value == record.actual.value)


def evaluate(record: MatchRecord, negated: bool = False) -> MismatchOutcome | None:
    """Classify ``record``; return None when it satisfies the caller's expectation.

    With ``negated`` the caller expects a difference, so equal values are reported.
    """
    if values_match(record) != negated:
        return None

    expected = record.expected
    if negated:
        kind = OutcomeKind.NEGATED_BUT_EQUAL
    elif record.actual is None:
        kind = OutcomeKind.EXPECTED_FIELD_ABSENT_FROM_ACTUAL
    else:
        kind = OutcomeKind.VALUES_DIFFER
    return MismatchOutcome(kind=kind, label=expected.label, path=expected.path, expected=expected, actual=record.actual)


def compare(
    actual: Any,
    expected: Any,
    scope: ScopeSelection,
    negated: bool = False,
    strict: bool = False,
    scanner: GraphScanner = DEFAULT_SCANNER,
) -> list[MismatchOutcome]:
    """Compare two object graphs member by member.

    Parameters
    ----------
    actual : Any
        The object under test.
    expected : Any
        The reference object.
    scope : ScopeSelection
        Members taking part in the comparison.
    negated : bool, default False
        Report members holding equal values instead of differing ones.
    strict : bool, default False
        Also report members of ``actual`` that ``expected`` does not have.
        Ignored when ``negated``.

    Returns
    -------
    list[MismatchOutcome]
        Outcomes in scan order; empty when the comparison succeeds.
    """
    outcomes = [
        outcome
        for outcome in (evaluate(record, negated) for record in scanner.scan(actual, expected, scope))
        if outcome is not None
    ]

    if strict and not negated and actual is not None:
        for record in scanner.scan(expected, actual, scope):
            if record.found:
                continue
            member = record.expected
            outcomes.append(
                MismatchOutcome(
                    kind=OutcomeKind.ACTUAL_HAS_UNEXPECTED_FIELD,
                    label=member.label,
                    path=member.path,
                    expected=None,
                    actual=member,
                )
            )

    logger.debug(
        "Compared %s with %s: %d outcome(s)", type(actual).__qualname__, type(expected).__qualname__, len(outcomes)
    )
    return outcomes


def compare_to_type(
    actual: Any,
    tp: type,
    scope: ScopeSelection,
    scanner: GraphScanner = DEFAULT_SCANNER,
) -> list[MismatchOutcome]:
    """Compare the members of ``actual`` with those ``tp`` declares.

    A declared member missing from ``actual``, a member of ``actual`` that
    ``tp`` does not declare, and a value whose class differs from the
    annotated one are reported. Differing classes are only reported when one
    side is primitive; members without a usable annotation and None values
    are not type checked.
    """
    introspector = scanner.introspector
    outcomes: list[MismatchOutcome] = []

    for record in scanner.scan_type(actual, tp, scope):
        member = record.expected
        if record.actual is None:
            kind = OutcomeKind.EXPECTED_FIELD_ABSENT_FROM_ACTUAL
        else:
            declared, value = member.declared_type, record.actual.value
            if declared is None or value is None or type(value) is declared:
                continue
            if not introspector.is_primitive_type(declared) and not introspector.is_primitive(value):
                continue
            kind = OutcomeKind.TYPES_DIFFER
        outcomes.append(
            MismatchOutcome(
                kind=kind,
                label=member.label,
                path=member.path,
                expected=member,
                actual=record.actual,
                against_type=True,
            )
        )

    declared_members = introspector.declared_members(tp, ALL_MEMBERS)
    for member in introspector.list_members(actual, scope):
        if introspector.find_member(declared_members, member) is None:
            outcomes.append(
                MismatchOutcome(
                    kind=OutcomeKind.ACTUAL_HAS_UNEXPECTED_FIELD,
                    label=member.label,
                    path=member.path,
                    expected=None,
                    actual=member,
                    against_type=True,
                )
            )

    logger.debug("Compared %s with type %s: %d outcome(s)", type(actual).__qualname__, tp.__qualname__, len(outcomes))
    return outcomes
