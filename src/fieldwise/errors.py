"""Error types raised by fieldwise."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fieldwise.checks.base import CheckResult


class InvalidComparandError(ValueError):
    """Raised when the expected object of a comparison is unusable (e.g. None)."""


class CheckFailedError(AssertionError):
    """AssertionError with attached CheckResult."""

    def __init__(self, result: CheckResult):
        self.check_result = result
        message = f"{result.check_name} failed"
        if result.message:
            message += f":\n{result.message}"
        super().__init__(message)
