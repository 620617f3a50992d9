"""Disclosure coordinator for the role master/detail view.

The coordinator is the single owner of :class:`DisclosureState`. The view
forwards raw UI input (row clicks, backdrop clicks, escape, buttons) to
the methods below and renders whatever the published events tell it to.

Panel state machine::

    CLOSED --select_record--> PRIMARY_ONLY --reveal_nested--> PRIMARY_AND_NESTED
    PRIMARY_AND_NESTED --dismiss_nested--> PRIMARY_ONLY
    PRIMARY_ONLY | PRIMARY_AND_NESTED --dismiss_primary / commit--> CLOSED

There is no terminal state; the machine is reused for the life of the view.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Protocol, Sequence

from ..errors import InvalidStateError, SaveError, ValidationError
from ..events import (
    CommitRejected,
    NestedPanelHidden,
    NestedPanelShown,
    PrimaryPanelHidden,
    PrimaryPanelShown,
    RemoveAffordanceChanged,
    SelectionModeChanged,
    StatusMessage,
)
from ..models.disclosure import DisclosureState, PanelPhase, SelectionMode

if TYPE_CHECKING:  # pragma: no cover - imports for type checking only
    from ..domain.record_store import RecordStore
    from ..events import EventBus
    from ..models.records import RoleRecord

LOGGER = logging.getLogger(__name__)

MSG_CHANGES_CANCELLED = "Changes cancelled"
MSG_ROLE_SAVED = "Role saved successfully"
MSG_ROLE_SAVE_FAILED = "Failed to save role: "
MSG_NOTHING_DISCLOSED = "No role selected"

Validator = Callable[[], Sequence[ValidationError]]
RecordUpdater = Callable[["RoleRecord"], "RoleRecord"]


class PanelContentProvider(Protocol):
    """Protocol for materializing panel content for a record."""

    def build_primary(self, record: RoleRecord) -> Any:
        """Return content for the primary detail panel."""
        ...

    def build_nested(self, record: RoleRecord) -> Any:
        """Return content for the nested detail panel."""
        ...


@dataclass(slots=True, frozen=True)
class CommitResult:
    """Result of a commit attempt.

    Attributes:
        success: Whether the record was saved and the panels closed.
        errors: Validation failures, first one names the field to focus.
        message: Human-readable status message.
        record_id: The record the commit applied to, if any.
        save_error: The store failure when persistence failed.
    """

    success: bool
    errors: tuple[ValidationError, ...]
    message: str
    record_id: str | None = None
    save_error: SaveError | None = None

    @property
    def first_error(self) -> ValidationError | None:
        return self.errors[0] if self.errors else None


class DisclosureCoordinator:
    """Owns panel visibility and the identity of the disclosed record.

    The five transition methods (:meth:`select_record`,
    :meth:`dismiss_primary`, :meth:`reveal_nested`, :meth:`dismiss_nested`,
    :meth:`set_selection_mode`) plus :meth:`commit` are the only legal
    mutators of disclosure state. The ``handle_*`` helpers map raw shell
    input onto them.

    Events Emitted:
        - PrimaryPanelShown / PrimaryPanelHidden
        - NestedPanelShown / NestedPanelHidden
        - SelectionModeChanged, RemoveAffordanceChanged
        - CommitRejected, StatusMessage
        - RowsInvalidated (via the record store flush)
    """

    __slots__ = (
        "_store",
        "_content",
        "_bus",
        "_state",
        "_mode",
    )

    def __init__(
        self,
        record_store: RecordStore,
        content_provider: PanelContentProvider,
        event_bus: EventBus,
        *,
        selection_mode: SelectionMode | str = SelectionMode.MULTI,
    ) -> None:
        """Initialize the coordinator.

        Args:
            record_store: Store holding the records and their flags.
            content_provider: Builds primary/nested panel content.
            event_bus: Event bus for publishing events.
            selection_mode: Initial row selection cardinality.
        """
        self._store = record_store
        self._content = content_provider
        self._bus = event_bus
        self._state = DisclosureState.closed()
        self._mode = SelectionMode.parse(selection_mode)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def state(self) -> DisclosureState:
        return self._state

    @property
    def phase(self) -> PanelPhase:
        return self._state.phase

    @property
    def active_record_id(self) -> str | None:
        return self._state.active_record_id

    @property
    def selection_mode(self) -> SelectionMode:
        return self._mode

    @property
    def remove_enabled(self) -> bool:
        """Whether the batch-remove affordance should be enabled."""
        return self._store.has_selection

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def select_record(self, record_id: str) -> DisclosureState:
        """Disclose ``record_id`` in the primary panel.

        Reselecting the disclosed record keeps the panel state and only
        republishes freshly built primary content.

        Raises:
            KeyError: If the record does not exist in the store.
        """
        record = self._store.get(record_id)
        previous = self._state

        if previous.primary_open and previous.active_record_id == record_id:
            LOGGER.debug("DisclosureCoordinator.select_record: refresh record_id=%s", record_id)
            self._publish_primary(record)
            # A single-mode click on the disclosed row may have changed its selection
            self._store.flush_dirty()
            return self._state

        if previous.active_record_id is not None and previous.active_record_id in self._store:
            self._store.set_active(previous.active_record_id, False)
        self._store.set_active(record_id, True)

        self._state = DisclosureState(active_record_id=record_id, primary_open=True)
        LOGGER.debug(
            "DisclosureCoordinator.select_record: %s -> %s (record_id=%s)",
            previous.phase.value,
            self._state.phase.value,
            record_id,
        )

        if previous.nested_open:
            self._bus.publish(NestedPanelHidden(record_id=previous.active_record_id or record_id))
        self._publish_primary(record)
        self._store.flush_dirty()
        return self._state

    def dismiss_primary(self) -> DisclosureState:
        """Close both panels and clear the disclosed record.

        Does nothing when the primary panel is already closed. In single
        selection mode the disclosed row is also deselected.
        """
        previous = self._state
        if not previous.primary_open:
            LOGGER.debug("DisclosureCoordinator.dismiss_primary: already closed")
            return self._state

        record_id = self._require_active()
        if record_id in self._store:
            self._store.set_active(record_id, False)
            if self._mode is SelectionMode.SINGLE:
                self._store.set_selected(record_id, False)

        self._state = DisclosureState.closed()
        LOGGER.debug(
            "DisclosureCoordinator.dismiss_primary: %s -> closed (record_id=%s)",
            previous.phase.value,
            record_id,
        )

        if previous.nested_open:
            self._bus.publish(NestedPanelHidden(record_id=record_id))
        self._bus.publish(PrimaryPanelHidden(record_id=record_id))
        self._store.flush_dirty()
        return self._state

    def reveal_nested(self) -> DisclosureState:
        """Open the nested panel for the disclosed record.

        Raises:
            InvalidStateError: If the primary panel is not open.
        """
        if not self._state.primary_open:
            raise InvalidStateError("cannot reveal the nested panel while the primary panel is closed")

        record_id = self._require_active()
        record = self._store.get(record_id)

        self._state = DisclosureState(
            active_record_id=record_id,
            primary_open=True,
            nested_open=True,
        )
        LOGGER.debug("DisclosureCoordinator.reveal_nested: record_id=%s", record_id)
        self._bus.publish(NestedPanelShown(record_id=record_id, content=self._content.build_nested(record)))
        return self._state

    def dismiss_nested(self) -> DisclosureState:
        """Close the nested panel only; the primary panel stays open."""
        if not self._state.nested_open:
            LOGGER.debug("DisclosureCoordinator.dismiss_nested: already closed")
            return self._state

        record_id = self._require_active()
        self._state = DisclosureState(active_record_id=record_id, primary_open=True)
        LOGGER.debug("DisclosureCoordinator.dismiss_nested: record_id=%s", record_id)
        self._bus.publish(NestedPanelHidden(record_id=record_id))
        return self._state

    def set_selection_mode(self, mode: SelectionMode | str) -> SelectionMode:
        """Switch row selection cardinality and clear every selection.

        The disclosed record is not affected.

        Emits:
            SelectionModeChanged: Always.
            RemoveAffordanceChanged: With ``enabled=False``.
        """
        new_mode = SelectionMode.parse(mode)
        cleared = self._store.clear_selection()
        self._mode = new_mode
        LOGGER.debug(
            "DisclosureCoordinator.set_selection_mode: mode=%s cleared=%d",
            new_mode.value,
            len(cleared),
        )
        if not cleared:
            # The store only announces the affordance when the selection changes
            self._bus.publish(RemoveAffordanceChanged(enabled=False))
        self._bus.publish(SelectionModeChanged(mode=new_mode.value))
        self._store.flush_dirty()
        return new_mode

    def commit(
        self,
        validate: Validator,
        apply: RecordUpdater | None = None,
    ) -> CommitResult:
        """Validate the form, persist the disclosed record and close the panels.

        Args:
            validate: Callback returning the form's validation errors.
            apply: Optional callback returning the record with the form
                values written onto it; the stored record is saved as-is
                when omitted.

        Returns:
            CommitResult describing the outcome. On validation or save
            failure the disclosure state is left untouched.
        """
        if not self._state.primary_open:
            LOGGER.debug("DisclosureCoordinator.commit: nothing disclosed")
            return CommitResult(success=False, errors=(), message=MSG_NOTHING_DISCLOSED)

        record_id = self._require_active()

        errors = tuple(validate())
        if errors:
            first = errors[0]
            LOGGER.debug(
                "DisclosureCoordinator.commit: rejected record_id=%s field=%s",
                record_id,
                first.field,
            )
            self._bus.publish(CommitRejected(record_id=record_id, field=first.field, message=first.message))
            self._bus.publish(StatusMessage(message=first.message))
            return CommitResult(success=False, errors=errors, message=first.message, record_id=record_id)

        record = self._store.get(record_id).copy()
        updated = apply(record) if apply is not None else record
        try:
            self._store.save(updated)
        except SaveError as exc:
            message = f"{MSG_ROLE_SAVE_FAILED}{exc.message}"
            LOGGER.warning("DisclosureCoordinator.commit: save failed record_id=%s: %s", record_id, exc)
            self._bus.publish(StatusMessage(message=message))
            return CommitResult(
                success=False,
                errors=(),
                message=message,
                record_id=record_id,
                save_error=exc,
            )

        self._bus.publish(StatusMessage(message=MSG_ROLE_SAVED))
        self.dismiss_primary()
        return CommitResult(success=True, errors=(), message=MSG_ROLE_SAVED, record_id=record_id)

    # ------------------------------------------------------------------
    # Shell Input Routing
    # ------------------------------------------------------------------

    def handle_row_click(self, record_id: str, *, toggle: bool = False) -> DisclosureState:
        """Apply a row click according to the current selection mode.

        Single mode replaces the selection and the disclosed record in one
        step; ``toggle`` is ignored. In multi mode a ``toggle`` click flips
        the row's membership in the selection set without touching the
        disclosed record, and a plain click discloses the row.
        """
        if self._mode is SelectionMode.SINGLE:
            self._store.replace_selection((record_id,))
            return self.select_record(record_id)

        if toggle:
            record = self._store.get(record_id)
            self._store.set_selected(record_id, not record.selected)
            self._store.flush_dirty()
            return self._state

        return self.select_record(record_id)

    def handle_escape(self) -> DisclosureState:
        """Close the top-most open panel."""
        if self._state.nested_open:
            return self.dismiss_nested()
        return self.dismiss_primary()

    def handle_backdrop_click(self) -> DisclosureState:
        """A click outside the primary panel closes it."""
        return self.dismiss_primary()

    def handle_nested_backdrop_click(self) -> DisclosureState:
        """A click on the primary panel outside the nested one closes the nested panel."""
        return self.dismiss_nested()

    def cancel(self) -> DisclosureState:
        """Discard form changes and close the panels."""
        state = self.dismiss_primary()
        self._bus.publish(StatusMessage(message=MSG_CHANGES_CANCELLED))
        return state

    # ------------------------------------------------------------------
    # Internal Helpers
    # ------------------------------------------------------------------

    def _require_active(self) -> str:
        record_id = self._state.active_record_id
        if record_id is None:
            raise InvalidStateError("no record is disclosed")
        return record_id

    def _publish_primary(self, record: RoleRecord) -> None:
        content = self._content.build_primary(record)
        self._bus.publish(PrimaryPanelShown(record_id=record.record_id, content=content))


__all__ = [
    "CommitResult",
    "DisclosureCoordinator",
    "PanelContentProvider",
    "RecordUpdater",
    "Validator",
]
