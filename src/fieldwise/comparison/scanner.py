"""Graph scanner: pairs the members of an expected object graph with an actual one."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from fieldwise.errors import InvalidComparandError
from fieldwise.reflection.members import DEFAULT_INTROSPECTOR, MemberDescriptor, TypeIntrospector
from fieldwise.reflection.scope import ALL_MEMBERS, ScopeSelection

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MatchRecord:
    """An expected member and its structural counterpart on the actual object.

    ``actual`` is None exactly when no corresponding member was found.
    """

    expected: MemberDescriptor
    actual: MemberDescriptor | None = None

    @property
    def found(self) -> bool:
        return self.actual is not None


@dataclass(slots=True)
class ScanState:
    """Composite values already scanned during one top-level comparison, by identity."""

    # Keeps the visited objects alive so that their ids cannot be reused mid-scan.
    visited: dict[int, Any] = field(default_factory=dict)

    def visit(self, value: Any) -> bool:
        """Mark ``value`` as visited; return False if it already was."""
        key = id(value)
        if key in self.visited:
            return False
        self.visited[key] = value
        return True

    def __contains__(self, value: Any) -> bool:
        return id(value) in self.visited


class GraphScanner:
    """Walks the expected object's members and pairs them with the actual object's.

    Leaf-comparable members produce one record each; composite members are
    descended into once per scan, their path extended with a dotted prefix.
    Below the top level, a pair of non-primitive values of different types
    produces no record: type identity is checked by
    :meth:`Considering.is_instance_of_type` instead.
    """

    def __init__(self, introspector: TypeIntrospector = DEFAULT_INTROSPECTOR) -> None:
        self.introspector = introspector

    def scan(
        self,
        actual: Any,
        expected: Any,
        scope: ScopeSelection,
        state: ScanState | None = None,
    ) -> list[MatchRecord]:
        """Pair every selected member of ``expected`` with its counterpart on ``actual``.

        Parameters
        ----------
        actual : Any
            The object under test.
        expected : Any
            The reference object; its members drive the scan.
        scope : ScopeSelection
            Members taking part in the comparison.
        state : ScanState, optional
            Visited values; a fresh state is used when omitted.

        Returns
        -------
        list[MatchRecord]
            Records in base-first member order.

        Raises
        ------
        InvalidComparandError
            If ``expected`` is None.
        """
        if expected is None:
            raise InvalidComparandError("Cannot compare fields against None: the expected value has no members")

        state = ScanState() if state is None else state
        state.visit(expected)

        if scope.is_empty:
            return []
        if self.introspector.is_primitive(actual) or not self.introspector.has_members(expected):
            return [MatchRecord(MemberDescriptor.root(expected), MemberDescriptor.root(actual))]
        return self._scan_members(actual, expected, scope, state, prefix="")

    def _scan_members(
        self, actual: Any, expected: Any, scope: ScopeSelection, state: ScanState, prefix: str
    ) -> list[MatchRecord]:
        introspector = self.introspector
        # Counterparts are looked up among every member so that the scope only decides what is compared.
        candidates = introspector.list_members(actual, ALL_MEMBERS, prefix)
        records: list[MatchRecord] = []

        for member in introspector.list_members(expected, scope, prefix):
            counterpart = introspector.find_member(candidates, member)
            if counterpart is None:
                logger.debug("No counterpart for %s on %s", member.label, type(actual).__qualname__)
                records.append(MatchRecord(member))
                continue

            expected_value, actual_value = member.value, counterpart.value
            if (
                type(actual_value) is not type(expected_value)
                and not introspector.is_primitive(expected_value)
                and not introspector.is_primitive(actual_value)
            ):
                logger.debug(
                    "Skipping %s: %s vs %s is left to type checks",
                    member.label,
                    type(expected_value).__qualname__,
                    type(actual_value).__qualname__,
                )
                continue

            if introspector.is_leaf_comparable(expected_value) or introspector.is_primitive(actual_value):
                records.append(MatchRecord(member, counterpart))
                continue

            if not state.visit(expected_value):
                logger.debug("Skipping %s: already scanned", member.label)
                continue

            records.extend(
                self._scan_members(actual_value, expected_value, scope, state, prefix=f"{member.path}.")
            )

        return records

    def scan_type(self, actual: Any, tp: type, scope: ScopeSelection) -> list[MatchRecord]:
        """Pair the members declared by ``tp`` with those of ``actual``.

        Records carry the declared member (with ``declared_type``) on the
        expected side; nothing is descended into.
        """
        introspector = self.introspector
        candidates = introspector.list_members(actual, ALL_MEMBERS)
        return [
            MatchRecord(member, introspector.find_member(candidates, member))
            for member in introspector.declared_members(tp, scope)
        ]


DEFAULT_SCANNER = GraphScanner()


def scan(
    actual: Any,
    expected: Any,
    scope: ScopeSelection,
    visited: ScanState | None = None,
) -> list[MatchRecord]:
    """Scan with the default introspector; see :meth:`GraphScanner.scan`."""
    return DEFAULT_SCANNER.scan(actual, expected, scope, visited)
