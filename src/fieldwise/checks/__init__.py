"""Fluent checks and diagnostic rendering."""

from .base import CheckResult, MismatchReport
from .fluent import Check, Considering, check_that
from .render import format_value, render_failure, render_message, render_outcome

__all__ = [
    # Results
    "CheckResult",
    "MismatchReport",
    # Fluent checks
    "Check",
    "Considering",
    "check_that",
    # Rendering
    "format_value",
    "render_outcome",
    "render_message",
    "render_failure",
]
