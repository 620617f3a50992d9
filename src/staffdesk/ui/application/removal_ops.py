"""Batch removal use case.

This module provides:
- RemoveSelectedUseCase: Remove every role checked in the master list
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from ..events import RemovalRequested, StatusMessage

if TYPE_CHECKING:  # pragma: no cover - imports for type checking only
    from ..domain.record_store import RecordStore
    from ..events import EventBus
    from .disclosure import DisclosureCoordinator

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class RemovalRequest:
    """The batch that is about to be removed.

    Attributes:
        record_ids: Ids of the selected records, in list order.
        names: Display names matching ``record_ids``.
    """

    record_ids: tuple[str, ...]
    names: tuple[str, ...]

    @property
    def count(self) -> int:
        return len(self.record_ids)

    @property
    def summary(self) -> str:
        return f"Selected {self.count} role(s) for removal: {', '.join(self.names)}"


class RemovalConfirmer(Protocol):
    """Protocol for asking the user to confirm a batch removal."""

    def confirm_removal(self, request: RemovalRequest) -> bool:
        """Ask whether the batch in ``request`` may be removed.

        Returns:
            True to proceed, False to keep the records.
        """
        ...


@dataclass(slots=True, frozen=True)
class RemovalResult:
    """Result of a batch removal.

    Attributes:
        success: Whether any records were removed.
        removed: Ids of the removed records.
        dismissed_primary: Whether the disclosed record was in the batch.
        message: Human-readable status message.
    """

    success: bool
    removed: tuple[str, ...]
    dismissed_primary: bool
    message: str


class RemoveSelectedUseCase:
    """Use case for removing the selected roles.

    Orchestrates a batch removal:
    1. Collect the selected records into a RemovalRequest
    2. Announce the request and ask the confirmer
    3. Close the detail panels if the disclosed record is in the batch
    4. Remove the records from the store

    Events Emitted:
        - RemovalRequested: Once the batch is known
        - StatusMessage: With the removal summary
        - RecordsRemoved, SelectionChanged (via RecordStore)
    """

    __slots__ = (
        "_record_store",
        "_coordinator",
        "_event_bus",
        "_confirmer",
    )

    def __init__(
        self,
        record_store: RecordStore,
        coordinator: DisclosureCoordinator,
        event_bus: EventBus,
        *,
        confirmer: RemovalConfirmer | None = None,
    ) -> None:
        """Initialize the use case.

        Args:
            record_store: Store holding the records.
            coordinator: Disclosure coordinator, used to close panels
                before the disclosed record disappears.
            event_bus: Event bus for publishing events.
            confirmer: Optional confirmation prompt. Without one the
                removal proceeds immediately.
        """
        self._record_store = record_store
        self._coordinator = coordinator
        self._event_bus = event_bus
        self._confirmer = confirmer

    @property
    def confirmer(self) -> RemovalConfirmer | None:
        return self._confirmer

    @confirmer.setter
    def confirmer(self, confirmer: RemovalConfirmer | None) -> None:
        self._confirmer = confirmer

    def build_request(self) -> RemovalRequest | None:
        """Return the pending batch, or None when nothing is selected."""
        records = self._record_store.selected_records()
        if not records:
            return None
        return RemovalRequest(
            record_ids=tuple(r.record_id for r in records),
            names=tuple(r.name for r in records),
        )

    def execute(self) -> RemovalResult:
        """Remove the selected records after confirmation.

        Returns:
            RemovalResult with details about the operation.
        """
        request = self.build_request()
        if request is None:
            LOGGER.debug("RemoveSelectedUseCase: nothing selected")
            return RemovalResult(
                success=False,
                removed=(),
                dismissed_primary=False,
                message="No roles selected",
            )

        self._event_bus.publish(RemovalRequested(record_ids=request.record_ids, names=request.names))
        self._event_bus.publish(StatusMessage(message=request.summary))

        if self._confirmer is not None and not self._confirmer.confirm_removal(request):
            LOGGER.debug("RemoveSelectedUseCase: removal declined, count=%d", request.count)
            return RemovalResult(
                success=False,
                removed=(),
                dismissed_primary=False,
                message="Removal cancelled",
            )

        dismissed = self._coordinator.active_record_id in request.record_ids
        if dismissed:
            self._coordinator.dismiss_primary()

        removed = self._record_store.remove(request.record_ids)
        self._record_store.flush_dirty()

        LOGGER.debug(
            "RemoveSelectedUseCase: removed=%d, dismissed_primary=%s",
            len(removed),
            dismissed,
        )
        return RemovalResult(
            success=bool(removed),
            removed=removed,
            dismissed_primary=dismissed,
            message=f"Removed {len(removed)} role(s)",
        )


__all__ = [
    "RemovalConfirmer",
    "RemovalRequest",
    "RemovalResult",
    "RemoveSelectedUseCase",
]
