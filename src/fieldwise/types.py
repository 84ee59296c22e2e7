"""Shared types for the fieldwise comparison engine."""

from enum import Enum


class MemberKind(Enum):
    """How the raw name of a member relates to its name in source code."""

    NORMAL = "normal"  # Name used as written
    AUTO_PROPERTY = "auto_property"  # Backing field of a property
    ANONYMOUS_CLASS = "anonymous_class"  # Field decorated by a class generator
    PRIVATE = "private"  # Class-private name mangling


class MemberCategory(Enum):
    """Kind of slot a member value was read from."""

    FIELD = "field"
    PROPERTY = "property"
    VALUE = "value"  # The compared value itself


class Visibility(Enum):
    """Member visibility, derived from the leading underscore convention."""

    PUBLIC = "public"
    NON_PUBLIC = "non_public"


class OutcomeKind(Enum):
    """Classification of a reported mismatch."""

    VALUES_DIFFER = "values_differ"
    EXPECTED_FIELD_ABSENT_FROM_ACTUAL = "expected_field_absent_from_actual"
    ACTUAL_HAS_UNEXPECTED_FIELD = "actual_has_unexpected_field"
    NEGATED_BUT_EQUAL = "negated_but_equal"
    TYPES_DIFFER = "types_differ"
