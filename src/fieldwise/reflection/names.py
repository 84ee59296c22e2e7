"""Recovery of source-level member names from decorated attribute names.

Python stores some attributes under names that differ from the ones written
in the class body: class-private attributes are mangled to ``_Owner__name``,
properties are commonly backed by ``_name`` fields, and generated classes
(enums, code-generated models) decorate names with sunders or a trailing
underscore. The comparison engine matches members by their source names, so
that an object using one convention can be compared with another.

The conventions are kept in an ordered rule table. Add a convention with
:meth:`NameDemangler.with_rule` rather than by editing the scanner.
"""

from __future__ import annotations

import builtins
import keyword
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from functools import cached_property

from fieldwise.types import MemberKind


Condition = Callable[[type | None, str], bool]


def backs_property(owner: type | None, name: str) -> bool:
    """Return True if ``name`` is a property declared on the owner's class chain."""
    if owner is None:
        return False
    for klass in owner.__mro__:
        if isinstance(klass.__dict__.get(name), (property, cached_property)):
            return True
    return False


def is_reserved(owner: type | None, name: str) -> bool:
    """Return True if ``name`` cannot be used verbatim as an attribute name."""
    return keyword.iskeyword(name) or keyword.issoftkeyword(name) or hasattr(builtins, name)


@dataclass(frozen=True, slots=True)
class DemangleRule:
    """One naming convention: a pattern, how to rebuild the source name, and its kind.

    Attributes
    ----------
    kind
        Classification assigned to names recovered by this rule.
    pattern
        Regular expression matched against the whole raw name.
    template
        Format string rebuilding the source name from the pattern's named groups.
    condition
        Optional predicate ``(owner, source_name) -> bool``; the rule only
        applies when it accepts the recovered name.
    """

    kind: MemberKind
    pattern: re.Pattern[str]
    template: str = "{name}"
    condition: Condition | None = field(default=None, compare=False)

    def apply(self, raw_name: str, owner: type | None = None) -> str | None:
        match = self.pattern.fullmatch(raw_name)
        if match is None:
            return None
        source_name = self.template.format(**match.groupdict())
        if self.condition is not None and not self.condition(owner, source_name):
            return None
        return source_name


_PRIVATE = re.compile(r"_(?P<owner>[A-Za-z0-9]\w*?)__(?P<name>[A-Za-z]\w*?)(?<!__)")

DEFAULT_RULES: tuple[DemangleRule, ...] = (
    DemangleRule(MemberKind.AUTO_PROPERTY, _PRIVATE, condition=backs_property),
    DemangleRule(MemberKind.AUTO_PROPERTY, re.compile(r"_(?P<name>[A-Za-z]\w*)"), condition=backs_property),
    DemangleRule(MemberKind.ANONYMOUS_CLASS, re.compile(r"_(?P<name>[A-Za-z](?:[A-Za-z0-9]|_(?!_))*?)_")),
    DemangleRule(MemberKind.ANONYMOUS_CLASS, re.compile(r"(?P<name>[A-Za-z]\w*?)_"), condition=is_reserved),
    DemangleRule(MemberKind.PRIVATE, _PRIVATE, template="__{name}"),
)


class NameDemangler:
    """Evaluates demangling rules in priority order; the first match wins."""

    def __init__(self, rules: Sequence[DemangleRule] = DEFAULT_RULES) -> None:
        self._rules = tuple(rules)

    @property
    def rules(self) -> tuple[DemangleRule, ...]:
        return self._rules

    def with_rule(self, rule: DemangleRule, *, first: bool = False) -> NameDemangler:
        """Return a new demangler with ``rule`` added before or after the existing ones."""
        rules = (rule, *self._rules) if first else (*self._rules, rule)
        return NameDemangler(rules)

    def demangle(self, raw_name: str, owner: type | None = None) -> tuple[str, MemberKind]:
        """Return the source name of ``raw_name`` and its classification.

        Names matching no rule are returned unchanged as ``MemberKind.NORMAL``.
        """
        for rule in self._rules:
            source_name = rule.apply(raw_name, owner)
            if source_name is not None:
                return source_name, rule.kind
        return raw_name, MemberKind.NORMAL


DEFAULT_DEMANGLER = NameDemangler()


def demangle(raw_name: str, owner: type | None = None) -> tuple[str, MemberKind]:
    """Demangle ``raw_name`` with the default rule table."""
    return DEFAULT_DEMANGLER.demangle(raw_name, owner)
