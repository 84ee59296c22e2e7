"""Member discovery: which fields and properties an object exposes, and their values."""

from __future__ import annotations

import inspect
import logging
import numbers
import types
from collections.abc import Sequence
from dataclasses import dataclass, replace
from enum import Enum
from functools import cached_property
from typing import Any, ClassVar, Union, get_origin

from fieldwise.reflection.names import DEFAULT_DEMANGLER, NameDemangler
from fieldwise.reflection.scope import ScopeSelection
from fieldwise.types import MemberCategory, MemberKind, Visibility

logger = logging.getLogger(__name__)

LEAF_MARKER = "__fieldwise_leaf__"

_IDENTITY_LEAVES = (
    type,
    types.ModuleType,
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    Enum,
)
_PRIMITIVES = (numbers.Number, str, bytes, bytearray, Enum, type)
_IGNORED_SLOTS = frozenset({"__dict__", "__weakref__"})


@dataclass(frozen=True, slots=True)
class MemberDescriptor:
    """One discovered field or property, with its captured value.

    Attributes
    ----------
    declared_name
        Attribute name as stored on the object (possibly mangled).
    source_name
        Name as written in source code.
    kind
        How ``declared_name`` relates to ``source_name``.
    category
        Whether the value was read from a field, a property, or is the compared value itself.
    visibility
        Public unless the declared name starts with an underscore.
    owner
        Class of the chain the member is attributed to.
    chain_position
        Index of ``owner`` in the base-first class chain.
    prefix
        Dotted path of the enclosing members, ending with a dot (empty at top level).
    value
        Value captured when the member was listed.
    declared_type
        Class the member is annotated with, for members read from a type rather than an instance.
    """

    declared_name: str
    source_name: str
    kind: MemberKind
    category: MemberCategory
    visibility: Visibility
    owner: type
    chain_position: int
    prefix: str = ""
    value: Any = None
    declared_type: type | None = None

    @classmethod
    def root(cls, value: Any) -> MemberDescriptor:
        """Pseudo-member standing for a whole compared value."""
        return cls(
            declared_name="",
            source_name="",
            kind=MemberKind.NORMAL,
            category=MemberCategory.VALUE,
            visibility=Visibility.PUBLIC,
            owner=type(value),
            chain_position=0,
            value=value,
        )

    @property
    def path(self) -> str:
        return f"{self.prefix}{self.source_name}"

    @property
    def label(self) -> str:
        if self.category is MemberCategory.VALUE:
            return "value"
        if self.category is MemberCategory.PROPERTY:
            return f"property '{self.path}'"
        if self.kind is MemberKind.AUTO_PROPERTY:
            return f"autoproperty '{self.path}' (field '{self.declared_name}')"
        return f"field '{self.path}'"

    def captured(self, value: Any) -> MemberDescriptor:
        return replace(self, value=value)


def _visibility(raw_name: str) -> Visibility:
    return Visibility.NON_PUBLIC if raw_name.startswith("_") else Visibility.PUBLIC


def _mangle(klass: type, name: str) -> str:
    if name.startswith("__") and not name.endswith("__"):
        return f"_{klass.__name__.lstrip('_')}{name}"
    return name


def _slot_names(klass: type) -> list[str]:
    slots = klass.__dict__.get("__slots__", ())
    if isinstance(slots, str):
        slots = (slots,)
    return [_mangle(klass, name) for name in slots if name not in _IGNORED_SLOTS]


def _annotations(obj: Any) -> dict[str, Any]:
    try:
        return inspect.get_annotations(obj, eval_str=True)
    except NameError:
        logger.debug("Cannot resolve annotations of %s", getattr(obj, "__qualname__", obj))
        return inspect.get_annotations(obj)


def _is_class_var(hint: Any) -> bool:
    return hint is ClassVar or get_origin(hint) is ClassVar


def _runtime_class(hint: Any) -> type | None:
    """Class an annotation constrains values to, if it names a single one."""
    if isinstance(hint, type):
        return hint
    origin = get_origin(hint)
    if origin is Union or origin is types.UnionType or not isinstance(origin, type):
        return None
    return origin


def _annotated_names(klass: type) -> list[str]:
    try:
        return list(inspect.get_annotations(klass))
    except NameError:
        # Unresolvable forward references: fall back to instance attribute order.
        logger.debug("Cannot read annotations of %s", klass.__qualname__)
        return []


class TypeIntrospector:
    """Lists the members of objects and decides how their values compare.

    Instance attributes are attributed to the class declaring them through
    ``__slots__`` or annotations; the remaining ones belong to the most derived
    class. Class-level (static) attributes never take part.
    """

    def __init__(self, demangler: NameDemangler = DEFAULT_DEMANGLER) -> None:
        self.demangler = demangler

    def type_chain(self, tp: type) -> list[type]:
        """Classes of ``tp``'s inheritance chain, base first, without ``object``."""
        return [klass for klass in reversed(tp.__mro__) if klass is not object]

    def list_members(self, instance: Any, scope: ScopeSelection, prefix: str = "") -> list[MemberDescriptor]:
        """Members of ``instance`` selected by ``scope``, values captured.

        Order: base class first; within a class, fields (slots, then annotated
        attributes) before properties.
        """
        if scope.is_empty:
            return []

        tp = type(instance)
        chain = self.type_chain(tp)
        property_names = {
            name
            for klass in chain
            for name, attr in vars(klass).items()
            if isinstance(attr, (property, cached_property))
        }
        attributes: dict[str, Any] = dict(vars(instance)) if hasattr(instance, "__dict__") else {}
        claimed: set[str] = set()
        members: list[MemberDescriptor] = []

        def add(raw_name: str, category: MemberCategory, klass: type, position: int, value: Any) -> None:
            visibility = _visibility(raw_name)
            if not scope.includes(category, visibility):
                return
            source_name, kind = self.demangler.demangle(raw_name, tp)
            members.append(
                MemberDescriptor(
                    declared_name=raw_name,
                    source_name=source_name,
                    kind=kind,
                    category=category,
                    visibility=visibility,
                    owner=klass,
                    chain_position=position,
                    prefix=prefix,
                    value=value,
                )
            )

        last = len(chain) - 1
        for position, klass in enumerate(chain):
            if scope.includes_fields:
                for raw_name in _slot_names(klass):
                    if raw_name in claimed:
                        continue
                    try:
                        value = klass.__dict__[raw_name].__get__(instance, tp)
                    except AttributeError:
                        continue  # unset slot
                    claimed.add(raw_name)
                    add(raw_name, MemberCategory.FIELD, klass, position, value)

                for raw_name in _annotated_names(klass):
                    if raw_name in claimed or raw_name not in attributes:
                        continue
                    claimed.add(raw_name)
                    add(raw_name, MemberCategory.FIELD, klass, position, attributes[raw_name])

                if position == last:
                    for raw_name, value in attributes.items():
                        if raw_name in claimed or raw_name in property_names:
                            continue
                        claimed.add(raw_name)
                        add(raw_name, MemberCategory.FIELD, klass, position, value)

            if scope.includes_properties:
                for raw_name, attr in vars(klass).items():
                    if not isinstance(attr, (property, cached_property)) or raw_name in claimed:
                        continue
                    claimed.add(raw_name)
                    if scope.includes(MemberCategory.PROPERTY, _visibility(raw_name)):
                        add(raw_name, MemberCategory.PROPERTY, klass, position, getattr(instance, raw_name))

        return members

    def declared_members(self, tp: type, scope: ScopeSelection) -> list[MemberDescriptor]:
        """Members an instance of ``tp`` is declared to have, without values.

        Fields come from ``__slots__`` and class annotations (``ClassVar``
        excluded), properties from the class chain; ``declared_type`` holds the
        annotated class, or None when the annotation does not name one.
        Attributes only assigned at runtime are unknown to the type.
        """
        if scope.is_empty:
            return []

        chain = self.type_chain(tp)
        claimed: set[str] = set()
        members: list[MemberDescriptor] = []

        def add(raw_name: str, category: MemberCategory, klass: type, position: int, hint: Any) -> None:
            claimed.add(raw_name)
            visibility = _visibility(raw_name)
            if not scope.includes(category, visibility):
                return
            source_name, kind = self.demangler.demangle(raw_name, tp)
            members.append(
                MemberDescriptor(
                    declared_name=raw_name,
                    source_name=source_name,
                    kind=kind,
                    category=category,
                    visibility=visibility,
                    owner=klass,
                    chain_position=position,
                    declared_type=_runtime_class(hint),
                )
            )

        for position, klass in enumerate(chain):
            if scope.includes_fields:
                hints = _annotations(klass)
                for raw_name in _slot_names(klass):
                    if raw_name not in claimed:
                        add(raw_name, MemberCategory.FIELD, klass, position, hints.get(raw_name))
                for raw_name, hint in hints.items():
                    if raw_name in claimed or _is_class_var(hint):
                        continue
                    if isinstance(getattr(tp, raw_name, None), (property, cached_property)):
                        continue
                    add(raw_name, MemberCategory.FIELD, klass, position, hint)

            if scope.includes_properties:
                for raw_name, attr in vars(klass).items():
                    if not isinstance(attr, (property, cached_property)) or raw_name in claimed:
                        continue
                    getter = attr.fget if isinstance(attr, property) else attr.func
                    hint = _annotations(getter).get("return") if getter is not None else None
                    add(raw_name, MemberCategory.PROPERTY, klass, position, hint)

        return members

    def find_member(
        self, candidates: Sequence[MemberDescriptor], expected: MemberDescriptor
    ) -> MemberDescriptor | None:
        """Find the member of ``candidates`` structurally corresponding to ``expected``.

        Raw names are tried first, then demangled names from the most derived
        class up to the root. Members of the same category win over others.
        """
        same_name = [c for c in candidates if c.declared_name == expected.declared_name]
        for candidate in same_name:
            if candidate.category is expected.category:
                return candidate
        if same_name:
            return same_name[0]

        derived_first = list(reversed(candidates))
        for candidate in derived_first:
            if candidate.source_name == expected.source_name and candidate.category is expected.category:
                return candidate
        for candidate in derived_first:
            if candidate.source_name == expected.source_name:
                return candidate
        return None

    def get_value(self, member: MemberDescriptor, instance: Any) -> Any:
        """Read the current value of ``member`` on ``instance``."""
        if member.category is MemberCategory.VALUE:
            return instance
        if member.category is MemberCategory.FIELD:
            attributes = getattr(instance, "__dict__", None)
            if attributes is not None and member.declared_name in attributes:
                return attributes[member.declared_name]
        return getattr(instance, member.declared_name)

    def is_leaf_comparable(self, value: Any) -> bool:
        """Return True if ``value`` is compared with ``==`` rather than member by member.

        A type opts in or out explicitly with a ``__fieldwise_leaf__`` class
        attribute; otherwise any type overriding ``object.__eq__`` is a leaf.
        """
        if value is None or isinstance(value, _IDENTITY_LEAVES):
            return True
        tp = type(value)
        marker = getattr(tp, LEAF_MARKER, None)
        if marker is not None:
            return bool(marker)
        return tp.__eq__ is not object.__eq__

    def is_primitive(self, value: Any) -> bool:
        return value is None or isinstance(value, _PRIMITIVES)

    def is_primitive_type(self, tp: type) -> bool:
        return tp is type(None) or issubclass(tp, _PRIMITIVES)

    def has_members(self, value: Any) -> bool:
        """Return True if ``value`` can hold fields or properties of its own."""
        if isinstance(value, type):
            return False
        if hasattr(value, "__dict__"):
            return True
        return any(
            _slot_names(klass) or any(isinstance(attr, (property, cached_property)) for attr in vars(klass).values())
            for klass in self.type_chain(type(value))
        )


DEFAULT_INTROSPECTOR = TypeIntrospector()
