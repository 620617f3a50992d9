"""Shared pytest fixtures."""

from __future__ import annotations

import logging
from datetime import date

import pytest

from staffdesk.ui.application import DisclosureCoordinator, RemoveSelectedUseCase
from staffdesk.ui.domain import RecordStore
from staffdesk.ui.events import EventBus
from staffdesk.ui.models.records import RoleRecord
from staffdesk.ui.presentation.panel_content import RolePanelContentProvider

from tests.helpers import EventRecorder, make_roles

TODAY = date(2025, 6, 1)


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def recorder(event_bus: EventBus) -> EventRecorder:
    return EventRecorder(event_bus)


@pytest.fixture
def roles() -> list[RoleRecord]:
    return make_roles(4)


@pytest.fixture
def store(roles: list[RoleRecord], event_bus: EventBus) -> RecordStore:
    return RecordStore(roles, event_bus)


@pytest.fixture
def content_provider() -> RolePanelContentProvider:
    return RolePanelContentProvider(today=lambda: TODAY)


@pytest.fixture
def coordinator(
    store: RecordStore,
    content_provider: RolePanelContentProvider,
    event_bus: EventBus,
) -> DisclosureCoordinator:
    return DisclosureCoordinator(store, content_provider, event_bus)


@pytest.fixture
def removal(
    store: RecordStore,
    coordinator: DisclosureCoordinator,
    event_bus: EventBus,
) -> RemoveSelectedUseCase:
    return RemoveSelectedUseCase(store, coordinator, event_bus)


@pytest.fixture
def restore_root_logging():
    """Undo handler and level changes made by ``setup_logging``."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
