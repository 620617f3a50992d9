"""Record store domain manager.

Holds the role records shown in the master list together with their
``active`` (disclosed) and ``selected`` (checked for batch removal) flags.
Flag changes are collected as dirty row ids and published in one
``RowsInvalidated`` event per flush, so the view repaints only the rows
that actually changed.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Iterator, Sequence

from ..errors import SaveError
from ..events import (
    EventBus,
    RecordSaved,
    RecordsRemoved,
    RemoveAffordanceChanged,
    RowsInvalidated,
    SelectionChanged,
)
from ..models.records import RoleRecord

LOGGER = logging.getLogger(__name__)

Saver = Callable[[RoleRecord], None]


class RecordStore:
    """Domain manager for the selectable role records.

    The disclosure coordinator is the only caller of the mutating methods;
    the view reads records and flags for rendering.

    Events Emitted:
        - RowsInvalidated: From :meth:`flush_dirty`, listing changed rows
        - SelectionChanged: When the selected set changes
        - RemoveAffordanceChanged: When the selected set becomes empty or non-empty
        - RecordSaved: After :meth:`save` succeeds
        - RecordsRemoved: After :meth:`remove`
    """

    def __init__(
        self,
        records: Iterable[RoleRecord],
        event_bus: EventBus,
        *,
        saver: Saver | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            records: Initial records, in display order. Ids must be unique.
            event_bus: The event bus for publishing events.
            saver: Optional persistence hook invoked by :meth:`save`. Any
                exception it raises is reported as :class:`SaveError`.
        """
        self._bus = event_bus
        self._saver = saver
        self._records: dict[str, RoleRecord] = {}
        for record in records:
            if record.record_id in self._records:
                raise ValueError(f"duplicate record id: {record.record_id}")
            self._records[record.record_id] = record
        self._dirty: set[str] = set()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list(self) -> list[RoleRecord]:
        """Return all records in display order."""
        return list(self._records.values())

    def __iter__(self) -> Iterator[RoleRecord]:
        return iter(self._records.values())

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    def get(self, record_id: str) -> RoleRecord:
        """Return the record with ``record_id``.

        Raises:
            KeyError: If no such record exists.
        """
        try:
            return self._records[record_id]
        except KeyError:
            raise KeyError(f"unknown record id: {record_id}") from None

    def active_ids(self) -> tuple[str, ...]:
        return tuple(r.record_id for r in self._records.values() if r.active)

    def selected_ids(self) -> tuple[str, ...]:
        """Return ids of all selected records, in display order."""
        return tuple(r.record_id for r in self._records.values() if r.selected)

    def selected_records(self) -> list[RoleRecord]:
        return [r for r in self._records.values() if r.selected]

    @property
    def has_selection(self) -> bool:
        return any(r.selected for r in self._records.values())

    # ------------------------------------------------------------------
    # Flag Mutations
    # ------------------------------------------------------------------

    def set_active(self, record_id: str, active: bool) -> bool:
        """Set the disclosed marker on a record.

        Returns:
            True if the flag changed (and the row was marked dirty).
        """
        record = self.get(record_id)
        if record.active == active:
            return False
        record.active = active
        self._dirty.add(record_id)
        return True

    def set_selected(self, record_id: str, selected: bool) -> bool:
        """Add or remove a record from the batch selection.

        Returns:
            True if the flag changed.

        Emits:
            SelectionChanged: If the flag changed.
            RemoveAffordanceChanged: If the selection became empty or non-empty.
        """
        record = self.get(record_id)
        if record.selected == selected:
            return False
        had_selection = self.has_selection
        record.selected = selected
        self._dirty.add(record_id)
        self._publish_selection(had_selection)
        return True

    def clear_selection(self) -> tuple[str, ...]:
        """Deselect every record.

        Returns:
            The ids that were selected before the call.

        Emits:
            SelectionChanged, RemoveAffordanceChanged: If anything was selected.
        """
        cleared = self.selected_ids()
        if not cleared:
            return cleared
        for record_id in cleared:
            self._records[record_id].selected = False
            self._dirty.add(record_id)
        self._publish_selection(had_selection=True)
        return cleared

    def replace_selection(self, record_ids: Sequence[str]) -> bool:
        """Make ``record_ids`` the whole selection in a single change.

        Returns:
            True if the selected set changed.

        Raises:
            KeyError: If any id is unknown.

        Emits:
            SelectionChanged, RemoveAffordanceChanged: If the set changed.
        """
        wanted = {self.get(record_id).record_id for record_id in record_ids}
        had_selection = self.has_selection
        changed = False
        for record in self._records.values():
            selected = record.record_id in wanted
            if record.selected != selected:
                record.selected = selected
                self._dirty.add(record.record_id)
                changed = True
        if changed:
            self._publish_selection(had_selection)
        return changed

    def flush_dirty(self) -> tuple[str, ...]:
        """Publish the rows changed since the last flush and reset the dirty set.

        Emits:
            RowsInvalidated: If at least one row is dirty.
        """
        if not self._dirty:
            return ()
        ordered = tuple(rid for rid in self._records if rid in self._dirty)
        self._dirty.clear()
        LOGGER.debug("RecordStore.flush_dirty: rows=%s", ordered)
        if ordered:
            self._bus.publish(RowsInvalidated(record_ids=ordered))
        return ordered

    @property
    def dirty_ids(self) -> frozenset[str]:
        return frozenset(self._dirty)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, record: RoleRecord) -> None:
        """Persist ``record`` and replace the stored copy.

        Flags on the stored record win over flags on ``record``.

        Raises:
            KeyError: If the record is unknown.
            SaveError: If the persistence hook fails.

        Emits:
            RecordSaved: After the record is stored.
        """
        current = self.get(record.record_id)
        if self._saver is not None:
            try:
                self._saver(record)
            except SaveError:
                raise
            except Exception as exc:
                LOGGER.warning(
                    "RecordStore.save: saver failed for record_id=%s: %s",
                    record.record_id,
                    exc,
                )
                raise SaveError(str(exc), record_id=record.record_id) from exc

        record.active = current.active
        record.selected = current.selected
        self._records[record.record_id] = record
        self._dirty.add(record.record_id)
        LOGGER.debug("RecordStore.save: record_id=%s", record.record_id)
        self._bus.publish(RecordSaved(record_id=record.record_id))

    def remove(self, record_ids: Sequence[str]) -> tuple[str, ...]:
        """Remove records from the store.

        Unknown ids are ignored.

        Returns:
            The ids that were actually removed.

        Emits:
            RecordsRemoved: If anything was removed.
            SelectionChanged, RemoveAffordanceChanged: If selected rows were removed.
        """
        had_selection = self.has_selection
        removed: list[str] = []
        selection_touched = False
        for record_id in record_ids:
            record = self._records.pop(record_id, None)
            if record is None:
                continue
            removed.append(record_id)
            self._dirty.discard(record_id)
            selection_touched = selection_touched or record.selected
        if not removed:
            return ()
        LOGGER.debug("RecordStore.remove: record_ids=%s", removed)
        self._bus.publish(RecordsRemoved(record_ids=tuple(removed)))
        if selection_touched:
            self._publish_selection(had_selection)
        return tuple(removed)

    # ------------------------------------------------------------------
    # Internal Helpers
    # ------------------------------------------------------------------

    def _publish_selection(self, had_selection: bool) -> None:
        selected = self.selected_ids()
        self._bus.publish(SelectionChanged(selected_ids=selected))
        if bool(selected) != had_selection:
            self._bus.publish(RemoveAffordanceChanged(enabled=bool(selected)))


__all__ = ["RecordStore", "Saver"]
