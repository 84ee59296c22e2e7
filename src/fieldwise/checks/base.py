"""Check result types."""

from pydantic import BaseModel, Field, SerializationInfo, field_serializer

from fieldwise.types import OutcomeKind


class MismatchReport(BaseModel):
    """Rendered form of one mismatch.

    Attributes:
    ----------
    kind: OutcomeKind
        Classification of the mismatch
    path: str
        Dotted path of the member, empty for the compared value itself
    label: str
        Member description used in messages, e.g. ``field 'inner.count'``
    message: str
        One-line description of the problem
    expected: str | None
        Dump of the expected value, if any
    actual: str | None
        Dump of the actual value, if any
    expected_type: str | None
        Expected value's type name, set when the types differ
    actual_type: str | None
        Actual value's type name, set when the types differ
    """

    kind: OutcomeKind
    path: str
    label: str
    message: str
    expected: str | None = None
    actual: str | None = None
    expected_type: str | None = None
    actual_type: str | None = None


class CheckResult(BaseModel):
    """Result of a fluent check.

    Attributes:
    ----------
    check_name: str
        Name of the check that was evaluated
    passed: bool
        Whether the check passed
    negated: bool
        Whether the check was negated with ``not_``
    scope: str
        Description of the compared members
    mismatches: list[MismatchReport]
        Rendered mismatches, the first one only unless configured otherwise
    message: str | None
        Failure message built from the mismatches
    """

    check_name: str
    passed: bool
    negated: bool = False
    scope: str = ""
    mismatches: list[MismatchReport] = Field(default_factory=list)
    message: str | None = None

    @field_serializer("message")
    def _truncate(self, v: str | None, info: SerializationInfo) -> str | None:
        """Truncate the message to its first line when requested."""
        ctx = info.context or {}
        if v is not None and ctx.get("truncate"):
            first_line, _, rest = v.partition("\n")
            return first_line + ("..." if rest else "")
        return v

    def __repr__(self) -> str:
        return self.model_dump_json(
            indent=2,
            exclude_none=True,
            context={"truncate": True},
        )

    def __bool__(self) -> bool:
        return self.passed
