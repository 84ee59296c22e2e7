"""Fluent checks built on the structural comparison engine.

Usage::

    check_that(sut).has_fields_with_same_values(expected)
    check_that(sut).not_.has_fields_with_same_values(other)
    check_that(sut).considering().public.fields.and_.non_public.properties.is_equal_to(expected)
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Sequence
from typing import Any

from fieldwise.checks.base import CheckResult
from fieldwise.checks.render import format_value, render_failure, render_outcome, type_name
from fieldwise.comparison.evaluator import MismatchOutcome, compare, compare_to_type
from fieldwise.config import FieldwiseConfig, get_config
from fieldwise.errors import CheckFailedError
from fieldwise.reflection.scope import NOTHING, ScopeSelection, selection_for

logger = logging.getLogger(__name__)


def _build_result(
    check_name: str,
    outcomes: Sequence[MismatchOutcome],
    *,
    negated: bool,
    scope: ScopeSelection,
    config: FieldwiseConfig,
) -> CheckResult:
    reported = outcomes if config.report_all else outcomes[:1]
    reports = [render_outcome(outcome, config.subject, config.max_value_length) for outcome in reported]
    passed = not outcomes
    return CheckResult(
        check_name=check_name,
        passed=passed,
        negated=negated,
        scope=scope.describe(),
        mismatches=reports,
        message=None if passed else render_failure(reports, config.subject),
    )


def _raise_on_failure(result: CheckResult) -> None:
    if not result.passed:
        logger.debug("%s failed with %d mismatch(es)", result.check_name, len(result.mismatches))
        raise CheckFailedError(result)


class Check:
    """Entry point of the fluent checks on one object under test."""

    def __init__(self, sut: Any, *, negated: bool = False, config: FieldwiseConfig | None = None) -> None:
        self.sut = sut
        self.negated = negated
        self._config = config

    @property
    def config(self) -> FieldwiseConfig:
        return self._config if self._config is not None else get_config()

    @property
    def not_(self) -> Check:
        """Negated version of this check."""
        return Check(self.sut, negated=not self.negated, config=self._config)

    @property
    def and_(self) -> Check:
        return self

    def _chain(self) -> Check:
        return Check(self.sut, config=self._config)

    def evaluate_fields(
        self,
        expected: Any,
        *,
        negated: bool | None = None,
        scope: ScopeSelection | None = None,
        check_name: str = "has_fields_with_same_values",
    ) -> CheckResult:
        """Compare the fields of the object under test with ``expected`` without raising.

        Each member is checked on its own: a negated comparison reports the
        members holding the same value as the comparand.
        """
        config = self.config
        negated = self.negated if negated is None else negated
        scope = config.scope if scope is None else scope
        outcomes = compare(self.sut, expected, scope, negated=negated)
        return _build_result(check_name, outcomes, negated=negated, scope=scope, config=config)

    def has_fields_with_same_values(self, expected: Any) -> Check:
        """Check that every field of ``expected`` has the same value on the object under test.

        Raises
        ------
        CheckFailedError
            On the first differing or missing field (or equal field, when negated).
        """
        _raise_on_failure(self.evaluate_fields(expected))
        return self._chain()

    def has_not_fields_with_same_values(self, expected: Any) -> Check:
        """Check that no field of the object under test has the same value as in ``expected``."""
        result = self.evaluate_fields(
            expected, negated=not self.negated, check_name="has_not_fields_with_same_values"
        )
        _raise_on_failure(result)
        return self._chain()

    def has_fields_equal_to_those(self, expected: Any) -> Check:
        """Deprecated alias of :meth:`has_fields_with_same_values`."""
        warnings.warn(
            "has_fields_equal_to_those is deprecated, use has_fields_with_same_values instead.",
            DeprecationWarning,
            stacklevel=2,
        )
        return self.has_fields_with_same_values(expected)

    def has_fields_not_equal_to_those(self, expected: Any) -> Check:
        """Deprecated alias of :meth:`has_not_fields_with_same_values`."""
        warnings.warn(
            "has_fields_not_equal_to_those is deprecated, use has_not_fields_with_same_values instead.",
            DeprecationWarning,
            stacklevel=2,
        )
        return self.has_not_fields_with_same_values(expected)

    def is_instance_of_type(self, tp: type) -> Check:
        """Check that the class of the object under test is exactly ``tp``."""
        return self.considering().is_instance_of_type(tp)

    def is_no_instance_of_type(self, tp: type) -> Check:
        return self.considering().is_no_instance_of_type(tp)

    def considering(self) -> Considering:
        """Start selecting the members an equality or type check takes into account."""
        return Considering(self)


class _MemberPicker:
    def __init__(self, considering: Considering, *, public: bool, non_public: bool) -> None:
        self._considering = considering
        self._public = public
        self._non_public = non_public

    def _pick(self, *, fields: bool, properties: bool) -> Considering:
        selection = selection_for(
            public=self._public, non_public=self._non_public, fields=fields, properties=properties
        )
        return self._considering.including(selection)

    @property
    def fields(self) -> Considering:
        return self._pick(fields=True, properties=False)

    @property
    def properties(self) -> Considering:
        return self._pick(fields=False, properties=True)


class Considering:
    """Equality checks restricted to a selection of members.

    Selections accumulate: ``public.fields.and_.non_public.properties`` compares
    both kinds of members.
    """

    def __init__(self, check: Check, scope: ScopeSelection = NOTHING) -> None:
        self._check = check
        self.scope = scope

    def including(self, selection: ScopeSelection) -> Considering:
        return Considering(self._check, self.scope | selection)

    @property
    def public(self) -> _MemberPicker:
        return _MemberPicker(self, public=True, non_public=False)

    @property
    def non_public(self) -> _MemberPicker:
        return _MemberPicker(self, public=False, non_public=True)

    @property
    def all(self) -> _MemberPicker:
        return _MemberPicker(self, public=True, non_public=True)

    @property
    def and_(self) -> Considering:
        return self

    def evaluate(self, expected: Any, *, negated: bool | None = None) -> CheckResult:
        """Compare the selected members with ``expected`` without raising.

        Members present on only one side are reported. A negated evaluation
        passes when at least one difference is found.
        """
        check = self._check
        config = check.config
        negated = check.negated if negated is None else negated
        if self.scope.is_empty:
            logger.warning("No members selected: the comparison with %s checks nothing", type(expected).__qualname__)

        outcomes = compare(check.sut, expected, self.scope, strict=True)
        if not negated:
            return _build_result("is_equal_to", outcomes, negated=False, scope=self.scope, config=config)

        passed = bool(outcomes)
        return CheckResult(
            check_name="is_not_equal_to",
            passed=passed,
            negated=True,
            scope=self.scope.describe(),
            message=None
            if passed
            else f"The {config.subject} has the same {self.scope.describe()} as the expected one, whereas it must not.",
        )

    def is_equal_to(self, expected: Any) -> Check:
        """Check that the selected members of the object under test equal those of ``expected``."""
        _raise_on_failure(self.evaluate(expected))
        return self._check._chain()

    def is_not_equal_to(self, expected: Any) -> Check:
        """Check that the selected members differ from those of ``expected`` in at least one place."""
        _raise_on_failure(self.evaluate(expected, negated=not self._check.negated))
        return self._check._chain()

    def evaluate_type(self, tp: type, *, negated: bool | None = None) -> CheckResult:
        """Check the object under test against ``tp`` without raising.

        With no member selected, the exact class of the object is compared
        with ``tp``. Otherwise the selected members are compared with those
        ``tp`` declares (see :func:`compare_to_type`).
        """
        check = self._check
        config = check.config
        negated = check.negated if negated is None else negated
        sut = check.sut
        expected_name = type_name(tp)

        outcomes: list[MismatchOutcome] | None
        if sut is None:
            outcomes = None
        elif self.scope.is_empty:
            outcomes = [] if type(sut) is tp else None
        else:
            outcomes = compare_to_type(sut, tp, self.scope)

        if negated:
            passed = bool(outcomes is None or outcomes)
            return CheckResult(
                check_name="is_no_instance_of_type",
                passed=passed,
                negated=True,
                scope=self.scope.describe(),
                message=None
                if passed
                else f"The {config.subject} is an instance of [{expected_name}] whereas it must not.",
            )
        if outcomes is None:
            return CheckResult(
                check_name="is_instance_of_type",
                passed=False,
                scope=self.scope.describe(),
                message=(
                    f"The {config.subject} is not an instance of [{expected_name}].\n"
                    f"The {config.subject}:\n"
                    f"\t[{format_value(sut, config.max_value_length)}] of type: [{type_name(type(sut))}]"
                ),
            )
        return _build_result("is_instance_of_type", outcomes, negated=False, scope=self.scope, config=config)

    def is_instance_of_type(self, tp: type) -> Check:
        """Check that the object under test is shaped like an instance of ``tp``."""
        _raise_on_failure(self.evaluate_type(tp))
        return self._check._chain()

    def is_no_instance_of_type(self, tp: type) -> Check:
        """Check that the object under test is not shaped like an instance of ``tp``."""
        _raise_on_failure(self.evaluate_type(tp, negated=not self._check.negated))
        return self._check._chain()


def check_that(sut: Any, *, config: FieldwiseConfig | None = None) -> Check:
    """Start a fluent check on ``sut``."""
    return Check(sut, config=config)
