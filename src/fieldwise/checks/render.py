"""Diagnostic rendering of comparison outcomes."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from rich.pretty import pretty_repr

from fieldwise.checks.base import MismatchReport
from fieldwise.comparison.evaluator import MismatchOutcome
from fieldwise.types import OutcomeKind

DEFAULT_SUBJECT = "checked value"
_SINGLE_LINE = 1_000_000


def _truncate(text: str, max_len: int) -> str:
    """Truncate a rendered value if too long."""
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def format_value(value: Any, max_len: int = 80) -> str:
    """Single-line dump of ``value`` for failure messages."""
    text = pretty_repr(value, max_width=_SINGLE_LINE, max_length=10, max_string=max_len)
    return _truncate(text, max_len)


def type_name(tp: type | None) -> str | None:
    if tp is None:
        return None
    if tp.__module__ == "builtins":
        return tp.__qualname__
    return f"{tp.__module__}.{tp.__qualname__}"


def _owner_phrase(subject: str, outcome: MismatchOutcome) -> str:
    if not outcome.path:
        return f"The {subject}"
    return f"The {subject}'s {outcome.label}"


def render_outcome(outcome: MismatchOutcome, subject: str = DEFAULT_SUBJECT, max_value_length: int = 80) -> MismatchReport:
    """Build the report of one outcome.

    Parameters
    ----------
    outcome : MismatchOutcome
        Outcome produced by the comparison engine.
    subject : str
        How the object under test is named in the message.
    max_value_length : int
        Maximum length of each value dump.
    """
    expected_side = "expected type" if outcome.against_type else "expected value"
    match outcome.kind:
        case OutcomeKind.TYPES_DIFFER:
            message = f"{_owner_phrase(subject, outcome)} is of a different type than the {expected_side}."
        case OutcomeKind.VALUES_DIFFER if outcome.types_differ:
            message = f"{_owner_phrase(subject, outcome)} is of a different type than the expected one."
        case OutcomeKind.VALUES_DIFFER:
            message = f"{_owner_phrase(subject, outcome)} does not have the expected value."
        case OutcomeKind.EXPECTED_FIELD_ABSENT_FROM_ACTUAL:
            message = f"The {expected_side}'s {outcome.label} is absent from the {subject}."
        case OutcomeKind.ACTUAL_HAS_UNEXPECTED_FIELD:
            message = f"{_owner_phrase(subject, outcome)} is absent from the {expected_side}."
        case OutcomeKind.NEGATED_BUT_EQUAL:
            message = f"{_owner_phrase(subject, outcome)} has the same value in the comparand, whereas it must not."

    show_types = outcome.types_differ
    return MismatchReport(
        kind=outcome.kind,
        path=outcome.path,
        label=outcome.label,
        message=message,
        expected=None
        if outcome.expected is None or outcome.against_type
        else format_value(outcome.expected_value, max_value_length),
        actual=None if outcome.actual is None else format_value(outcome.actual_value, max_value_length),
        expected_type=type_name(outcome.expected_type) if show_types else None,
        actual_type=type_name(outcome.actual_type) if show_types else None,
    )


def _value_line(value: str, tp_name: str | None) -> str:
    if tp_name is None:
        return f"\t[{value}]"
    return f"\t[{value}] of type: [{tp_name}]"


def render_message(report: MismatchReport, subject: str = DEFAULT_SUBJECT) -> str:
    """Multi-line failure message for one report.

    Example::

        The checked value's field 'TheField' does not have the expected value.
        The checked value:
        \t[3]
        The expected value:
        \t[2]
    """
    lines = [report.message]
    if report.actual is not None:
        lines.append(f"The {subject}:")
        lines.append(_value_line(report.actual, report.actual_type))
    if report.expected is not None:
        header = "The expected value: different from" if report.kind is OutcomeKind.NEGATED_BUT_EQUAL else "The expected value:"
        lines.append(header)
        lines.append(_value_line(report.expected, report.expected_type))
    elif report.expected_type is not None:
        lines.append("The expected value:")
        lines.append(f"\tan instance of [{report.expected_type}]")
    return "\n".join(lines)


def render_failure(reports: Iterable[MismatchReport], subject: str = DEFAULT_SUBJECT) -> str:
    """Failure message covering several reports, separated by blank lines."""
    return "\n\n".join(render_message(report, subject) for report in reports)
