"""Event bus and event types connecting the role view to its coordinator.

The coordinator and record store never touch widgets. They publish the
events below and the presentation shell subscribes to the ones it renders.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar
from weakref import WeakMethod

logger = logging.getLogger(__name__)

E = TypeVar("E", bound="Event")

Handler = Callable[[E], None]


@dataclass(slots=True)
class Event:
    """Base class for all events in the system.

    Subclasses are slotted dataclasses::

        @dataclass(slots=True)
        class RecordSaved(Event):
            record_id: str
    """

    pass


# Event types that are published on every row repaint and should not log
_QUIET_EVENT_TYPES: set[type] = set()


# =============================================================================
# Panel Events
# =============================================================================


@dataclass(slots=True)
class PrimaryPanelShown(Event):
    """Emitted when the primary detail panel should display a record.

    Also emitted again, with freshly built content, when the already
    disclosed record is selected a second time.

    Attributes:
        record_id: The record driving the panel.
        content: Opaque content produced by the panel content provider.
    """

    record_id: str
    content: Any


@dataclass(slots=True)
class PrimaryPanelHidden(Event):
    """Emitted when the primary panel (and with it the nested one) closes.

    Attributes:
        record_id: The record that was disclosed before closing.
    """

    record_id: str


@dataclass(slots=True)
class NestedPanelShown(Event):
    """Emitted when the nested panel opens on top of the primary panel.

    Attributes:
        record_id: The active record the nested content belongs to.
        content: Opaque content produced by the panel content provider.
    """

    record_id: str
    content: Any


@dataclass(slots=True)
class NestedPanelHidden(Event):
    """Emitted when the nested panel closes while the primary stays open.

    Attributes:
        record_id: The active record, still disclosed in the primary panel.
    """

    record_id: str


# =============================================================================
# Selection Events
# =============================================================================


@dataclass(slots=True)
class RowsInvalidated(Event):
    """Emitted when specific list rows must be repainted.

    Only the rows whose active/selected flags changed are listed; the
    shell must not re-render the whole list in response.

    Attributes:
        record_ids: Ids of the rows to refresh, in store order.
    """

    record_ids: tuple[str, ...]


_QUIET_EVENT_TYPES.add(RowsInvalidated)


@dataclass(slots=True)
class SelectionChanged(Event):
    """Emitted when the set of rows checked for batch removal changes.

    Attributes:
        selected_ids: Ids of all currently selected records, in store order.
    """

    selected_ids: tuple[str, ...]


@dataclass(slots=True)
class SelectionModeChanged(Event):
    """Emitted after the list switches between single and multi selection.

    Attributes:
        mode: The new mode value ("single" or "multi").
    """

    mode: str


@dataclass(slots=True)
class RemoveAffordanceChanged(Event):
    """Emitted when the batch-remove button should be enabled or disabled.

    Attributes:
        enabled: True when at least one record is selected.
    """

    enabled: bool


# =============================================================================
# Record Events
# =============================================================================


@dataclass(slots=True)
class RecordSaved(Event):
    """Emitted after a record was persisted through the record store.

    Attributes:
        record_id: The id of the saved record.
    """

    record_id: str


@dataclass(slots=True)
class CommitRejected(Event):
    """Emitted when the save gate rejects the form.

    Attributes:
        record_id: The record whose form failed validation.
        field: The first invalid field; the shell moves focus there.
        message: Human-readable description of the failure.
    """

    record_id: str
    field: str
    message: str


@dataclass(slots=True)
class RemovalRequested(Event):
    """Emitted when a batch removal has been prepared for confirmation.

    Attributes:
        record_ids: Ids of the records in the batch.
        names: Display names of the records in the batch.
    """

    record_ids: tuple[str, ...]
    names: tuple[str, ...]


@dataclass(slots=True)
class RecordsRemoved(Event):
    """Emitted after a confirmed batch removal.

    Attributes:
        record_ids: Ids of the removed records.
    """

    record_ids: tuple[str, ...]


# =============================================================================
# UI Events
# =============================================================================


@dataclass(slots=True)
class StatusMessage(Event):
    """Emitted to show a transient notice to the user.

    Attributes:
        message: The text to display.
        timeout_ms: Duration to show the message; 0 keeps it until replaced.
    """

    message: str
    timeout_ms: int = 3000


class EventBus(Generic[E]):
    """Synchronous publish/subscribe hub between the coordinator and the view.

    ``publish`` calls every subscriber of the event's exact type, in the
    order they subscribed, before it returns. Subscribing the same handler
    twice delivers twice. Bound methods are held through ``WeakMethod``, so a
    destroyed view silently drops out; plain functions and other callables
    are kept alive by the bus.

    A subscriber that raises is logged and the remaining subscribers still
    run. The bus is meant for the Qt main thread only.
    """

    __slots__ = ("_subscribers",)

    def __init__(self) -> None:
        self._subscribers: dict[type[Event], list[_Subscriber]] = {}

    def subscribe(self, event_type: type[E], handler: Handler[E]) -> None:
        self._subscribers.setdefault(event_type, []).append(_Subscriber.wrap(handler))
        logger.debug("%s subscribed to %s", _describe(handler), event_type.__name__)

    def unsubscribe(self, event_type: type[E], handler: Handler[E]) -> None:
        """Drop the earliest registration of ``handler``; unknown handlers are ignored."""
        subscribers = self._subscribers.get(event_type, [])
        for subscriber in subscribers:
            if subscriber.is_for(handler):
                subscribers.remove(subscriber)
                logger.debug("%s unsubscribed from %s", _describe(handler), event_type.__name__)
                return

    def publish(self, event: E) -> None:
        event_type = type(event)
        subscribers = self._subscribers.get(event_type, [])
        if event_type not in _QUIET_EVENT_TYPES:
            logger.debug("Publishing %s to %d subscriber(s)", event_type.__name__, len(subscribers))

        # Handlers may subscribe or unsubscribe while the event is delivered
        for subscriber in list(subscribers):
            handler = subscriber.handler()
            if handler is None:
                if subscriber in subscribers:
                    subscribers.remove(subscriber)
                continue
            try:
                handler(event)
            except Exception:
                logger.exception("%s failed while handling %s", _describe(handler), event_type.__name__)

    def clear(self) -> None:
        self._subscribers.clear()
        logger.debug("Cleared all subscribers")

    def handler_count(self, event_type: type[E] | None = None) -> int:
        """Registrations for ``event_type``, or across all types when omitted."""
        if event_type is not None:
            return len(self._subscribers.get(event_type, []))
        return sum(len(subscribers) for subscribers in self._subscribers.values())


@dataclass(slots=True, eq=False)
class _Subscriber:
    """One registration on the bus."""

    target: Any
    weak: bool

    @classmethod
    def wrap(cls, handler: Handler) -> _Subscriber:
        if inspect.ismethod(handler):
            return cls(WeakMethod(handler), weak=True)
        return cls(handler, weak=False)

    def handler(self) -> Handler | None:
        return self.target() if self.weak else self.target

    def is_for(self, handler: Handler) -> bool:
        current = self.handler()
        return current is not None and current == handler


def _describe(handler: Handler) -> str:
    return getattr(handler, "__qualname__", None) or repr(handler)



__all__ = [
    # Core infrastructure
    "Event",
    "EventBus",
    "Handler",
    # Panel events
    "PrimaryPanelShown",
    "PrimaryPanelHidden",
    "NestedPanelShown",
    "NestedPanelHidden",
    # Selection events
    "RowsInvalidated",
    "SelectionChanged",
    "SelectionModeChanged",
    "RemoveAffordanceChanged",
    # Record events
    "RecordSaved",
    "CommitRejected",
    "RemovalRequested",
    "RecordsRemoved",
    # UI events
    "StatusMessage",
]
