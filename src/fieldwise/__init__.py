"""fieldwise - Structural, member-by-member equality checks for tests."""

from .checks import CheckResult, MismatchReport, check_that, render_message, render_outcome
from .comparison import MatchRecord, MismatchOutcome, compare, compare_to_type, evaluate, scan
from .config import FieldwiseConfig, load_config
from .errors import CheckFailedError, InvalidComparandError
from .reflection import (
    ALL_FIELDS,
    ALL_MEMBERS,
    ALL_PROPERTIES,
    NON_PUBLIC_FIELDS,
    NON_PUBLIC_PROPERTIES,
    NOTHING,
    PUBLIC_FIELDS,
    PUBLIC_PROPERTIES,
    MemberDescriptor,
    ScopeSelection,
    select,
)
from .types import MemberKind, OutcomeKind
from .version import __version__


__all__ = [
    # Fluent checks
    "check_that",
    "CheckResult",
    "MismatchReport",
    "CheckFailedError",
    "render_outcome",
    "render_message",
    # Engine
    "scan",
    "evaluate",
    "compare",
    "compare_to_type",
    "MatchRecord",
    "MismatchOutcome",
    "MemberDescriptor",
    "MemberKind",
    "OutcomeKind",
    "InvalidComparandError",
    # Scopes
    "ScopeSelection",
    "select",
    "NOTHING",
    "PUBLIC_FIELDS",
    "NON_PUBLIC_FIELDS",
    "PUBLIC_PROPERTIES",
    "NON_PUBLIC_PROPERTIES",
    "ALL_FIELDS",
    "ALL_PROPERTIES",
    "ALL_MEMBERS",
    # Configuration
    "FieldwiseConfig",
    "load_config",
]
