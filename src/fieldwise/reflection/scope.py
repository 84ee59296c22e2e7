"""Selection of the members taking part in a structural comparison."""

from __future__ import annotations

from dataclasses import dataclass

from fieldwise.types import MemberCategory, Visibility


@dataclass(frozen=True, slots=True)
class ScopeSelection:
    """Which member kinds participate in a comparison.

    Selections only grow: combining two of them with ``|`` keeps every toggle
    set in either. An empty selection is legal and compares nothing.
    """

    public_fields: bool = False
    non_public_fields: bool = False
    public_properties: bool = False
    non_public_properties: bool = False

    def union(self, other: ScopeSelection) -> ScopeSelection:
        return ScopeSelection(
            public_fields=self.public_fields or other.public_fields,
            non_public_fields=self.non_public_fields or other.non_public_fields,
            public_properties=self.public_properties or other.public_properties,
            non_public_properties=self.non_public_properties or other.non_public_properties,
        )

    def __or__(self, other: ScopeSelection) -> ScopeSelection:
        if not isinstance(other, ScopeSelection):
            return NotImplemented
        return self.union(other)

    def includes(self, category: MemberCategory, visibility: Visibility) -> bool:
        """Return True if members of this category and visibility are selected."""
        public = visibility is Visibility.PUBLIC
        if category is MemberCategory.FIELD:
            return self.public_fields if public else self.non_public_fields
        if category is MemberCategory.PROPERTY:
            return self.public_properties if public else self.non_public_properties
        return not self.is_empty

    @property
    def includes_fields(self) -> bool:
        return self.public_fields or self.non_public_fields

    @property
    def includes_properties(self) -> bool:
        return self.public_properties or self.non_public_properties

    @property
    def is_empty(self) -> bool:
        return not (self.includes_fields or self.includes_properties)

    def describe(self) -> str:
        """Human readable summary, e.g. ``public fields, non-public properties``."""
        parts = [
            label
            for label, enabled in (
                ("public fields", self.public_fields),
                ("non-public fields", self.non_public_fields),
                ("public properties", self.public_properties),
                ("non-public properties", self.non_public_properties),
            )
            if enabled
        ]
        return ", ".join(parts) or "nothing"


NOTHING = ScopeSelection()
PUBLIC_FIELDS = ScopeSelection(public_fields=True)
NON_PUBLIC_FIELDS = ScopeSelection(non_public_fields=True)
PUBLIC_PROPERTIES = ScopeSelection(public_properties=True)
NON_PUBLIC_PROPERTIES = ScopeSelection(non_public_properties=True)
ALL_FIELDS = PUBLIC_FIELDS | NON_PUBLIC_FIELDS
ALL_PROPERTIES = PUBLIC_PROPERTIES | NON_PUBLIC_PROPERTIES
ALL_MEMBERS = ALL_FIELDS | ALL_PROPERTIES

TOGGLES: dict[str, ScopeSelection] = {
    "nothing": NOTHING,
    "public_fields": PUBLIC_FIELDS,
    "non_public_fields": NON_PUBLIC_FIELDS,
    "public_properties": PUBLIC_PROPERTIES,
    "non_public_properties": NON_PUBLIC_PROPERTIES,
    "all_fields": ALL_FIELDS,
    "all_properties": ALL_PROPERTIES,
    "all": ALL_MEMBERS,
}


def select(*toggles: str) -> ScopeSelection:
    """Build a selection from toggle names (see ``TOGGLES``), combined by union.

    Raises
    ------
    ValueError
        If a toggle name is unknown.
    """
    selection = NOTHING
    for toggle in toggles:
        key = toggle.strip().lower().replace("-", "_")
        if key not in TOGGLES:
            msg = f"Unknown scope toggle: {toggle!r} (expected one of {', '.join(TOGGLES)})"
            raise ValueError(msg)
        selection = selection | TOGGLES[key]
    return selection


def selection_for(*, public: bool, non_public: bool, fields: bool, properties: bool) -> ScopeSelection:
    """Selection covering the given visibilities of the given member categories."""
    return ScopeSelection(
        public_fields=public and fields,
        non_public_fields=non_public and fields,
        public_properties=public and properties,
        non_public_properties=non_public and properties,
    )
