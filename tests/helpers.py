"""Shared test helpers and stub classes.

Import from here instead of duplicating these helpers in individual test files.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from staffdesk.ui import events as ui_events
from staffdesk.ui.events import Event, EventBus
from staffdesk.ui.models.records import RoleRecord

ROLE_EVENT_TYPES: tuple[type[Event], ...] = tuple(
    getattr(ui_events, name)
    for name in ui_events.__all__
    if isinstance(getattr(ui_events, name), type)
    and issubclass(getattr(ui_events, name), Event)
    and getattr(ui_events, name) is not Event
)


class EventRecorder:
    """Subscribes to every role-view event type and keeps them in order.

    Example:
        recorder = EventRecorder(bus)
        coordinator.select_record("r1")
        assert recorder.types() == [PrimaryPanelShown, RowsInvalidated]
    """

    def __init__(self, bus: EventBus) -> None:
        self.events: list[Event] = []
        for event_type in ROLE_EVENT_TYPES:
            bus.subscribe(event_type, self._record)

    def _record(self, event: Event) -> None:
        self.events.append(event)

    def clear(self) -> None:
        self.events.clear()

    def types(self) -> list[type[Event]]:
        return [type(event) for event in self.events]

    def of_type(self, event_type: type[Any]) -> list[Any]:
        return [event for event in self.events if isinstance(event, event_type)]


def make_roles(count: int, *, selected: tuple[str, ...] = ()) -> list[RoleRecord]:
    """Build ``count`` roles with ids ``r1``..``rN`` and valid dates."""
    return [
        RoleRecord(
            record_id=f"r{index}",
            name=f"Role {index}",
            start_date=date(2024, 1, index),
            end_date=date(2026, 1, index),
            utilization_rate=10 * index,
            reason="Good employee",
            selected=f"r{index}" in selected,
        )
        for index in range(1, count + 1)
    ]
