"""Disclosure state models for the master/detail panel pair.

A :class:`DisclosureState` describes which of the two detail panels is
visible and which record drives them. Values are immutable; the
disclosure coordinator replaces the current value on every transition.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SelectionMode(Enum):
    """Cardinality rule for row selection in the master list.

    Values:
        SINGLE: A row click replaces both the selection and the disclosed record.
        MULTI: Rows are checked independently of the disclosed record.
    """

    SINGLE = "single"
    MULTI = "multi"

    @classmethod
    def parse(cls, value: str | SelectionMode) -> SelectionMode:
        if isinstance(value, SelectionMode):
            return value
        return cls(value.strip().lower())


class PanelPhase(Enum):
    """Visible panel combination derived from a :class:`DisclosureState`."""

    CLOSED = "closed"
    PRIMARY_ONLY = "primary_only"
    PRIMARY_AND_NESTED = "primary_and_nested"


@dataclass(slots=True, frozen=True)
class DisclosureState:
    """Visibility of the primary/nested panels plus the disclosed record.

    Attributes:
        active_record_id: The record currently driving panel content.
        primary_open: Whether the primary detail panel is visible.
        nested_open: Whether the nested panel is visible on top of it.

    Raises:
        ValueError: If the combination breaks the panel nesting rules.
    """

    active_record_id: str | None = None
    primary_open: bool = False
    nested_open: bool = False

    def __post_init__(self) -> None:
        if self.nested_open and not self.primary_open:
            raise ValueError("nested panel cannot be open without the primary panel")
        if self.primary_open and self.active_record_id is None:
            raise ValueError("primary panel requires an active record")
        if not self.primary_open and self.active_record_id is not None:
            raise ValueError("closed primary panel cannot keep an active record")

    @classmethod
    def closed(cls) -> DisclosureState:
        return cls()

    @property
    def phase(self) -> PanelPhase:
        if not self.primary_open:
            return PanelPhase.CLOSED
        if self.nested_open:
            return PanelPhase.PRIMARY_AND_NESTED
        return PanelPhase.PRIMARY_ONLY


__all__ = ["SelectionMode", "PanelPhase", "DisclosureState"]
