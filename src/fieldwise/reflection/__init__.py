"""Reflection helpers: member discovery, name demangling and scope selection."""

from .members import DEFAULT_INTROSPECTOR, MemberDescriptor, TypeIntrospector
from .names import DEFAULT_DEMANGLER, DemangleRule, NameDemangler, demangle
from .scope import (
    ALL_FIELDS,
    ALL_MEMBERS,
    ALL_PROPERTIES,
    NON_PUBLIC_FIELDS,
    NON_PUBLIC_PROPERTIES,
    NOTHING,
    PUBLIC_FIELDS,
    PUBLIC_PROPERTIES,
    ScopeSelection,
    select,
)

__all__ = [
    # Members
    "MemberDescriptor",
    "TypeIntrospector",
    "DEFAULT_INTROSPECTOR",
    # Names
    "DemangleRule",
    "NameDemangler",
    "DEFAULT_DEMANGLER",
    "demangle",
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
]
