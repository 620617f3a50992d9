"""Application bootstrap module.

This module provides the factory function that creates and wires together
all components of the role management UI, returning a configured
application ready to run.

The bootstrap process:
1. Creates the event bus
2. Loads the demo records into the record store
3. Instantiates the disclosure coordinator and removal use case
4. Creates the role management view
5. Returns configured components

Usage:
    from staffdesk.ui.bootstrap import create_application
    from staffdesk.ui.models.window_state import WindowContext

    context = WindowContext(settings=settings, role_service=RoleService())
    event_bus, coordinator, view = create_application(context)
    view.show()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .application import DisclosureCoordinator, RemoveSelectedUseCase
from .domain import RecordStore
from .events import EventBus
from .models.disclosure import SelectionMode
from .models.window_state import WindowContext
from .presentation.panel_content import RolePanelContentProvider

if TYPE_CHECKING:  # pragma: no cover - imports for type checking only
    from ..services.roles import RoleService
    from .presentation.role_view import RoleManagementView

_LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class AppComponents:
    """Everything the bootstrap wires together."""

    event_bus: EventBus
    record_store: RecordStore
    coordinator: DisclosureCoordinator
    removal: RemoveSelectedUseCase
    content_provider: RolePanelContentProvider
    role_service: RoleService
    view: RoleManagementView | None = None


def build_components(context: WindowContext) -> AppComponents:
    """Create the non-widget layers (domain and application).

    Args:
        context: The window context with settings and the role service.

    Returns:
        AppComponents with ``view`` left unset.
    """
    # =========================================================================
    # 1. Create Event Bus
    # =========================================================================
    event_bus = EventBus()
    _LOGGER.debug("Created event bus")

    # =========================================================================
    # 2. Create Record Store
    # =========================================================================
    role_service = context.role_service
    if role_service is None:
        from ..services.roles import RoleService

        role_service = RoleService()
        context.role_service = role_service

    record_store = RecordStore(
        role_service.available_roles(),
        event_bus,
        saver=role_service.save_role,
    )
    _LOGGER.debug("Created record store with %d records", len(record_store))

    # =========================================================================
    # 3. Create Coordinator and Use Cases
    # =========================================================================
    settings = context.settings
    mode = SelectionMode.parse(getattr(settings, "selection_mode", SelectionMode.MULTI.value))
    content_provider = RolePanelContentProvider()
    coordinator = DisclosureCoordinator(
        record_store,
        content_provider,
        event_bus,
        selection_mode=mode,
    )
    removal = RemoveSelectedUseCase(record_store, coordinator, event_bus)
    _LOGGER.debug("Created disclosure coordinator (mode=%s)", mode.value)

    return AppComponents(
        event_bus=event_bus,
        record_store=record_store,
        coordinator=coordinator,
        removal=removal,
        content_provider=content_provider,
        role_service=role_service,
    )


def create_application(
    context: WindowContext,
    *,
    skip_widgets: bool = False,
) -> tuple[EventBus, DisclosureCoordinator, "RoleManagementView | None"]:
    """Create and wire all application components.

    Args:
        context: The window context with settings and shared state.
        skip_widgets: If True, skip widget creation (for headless testing)
            and return None for the view.

    Returns:
        A tuple of (event_bus, coordinator, view).
    """
    _LOGGER.info("Bootstrapping UI application...")
    components = build_components(context)

    # =========================================================================
    # 4. Create Role Management View
    # =========================================================================
    if not skip_widgets:
        from .presentation.role_view import MessageBoxConfirmer, RoleManagementView

        view = RoleManagementView(
            components,
            settings=context.settings,
        )
        components.view = view
        confirm = getattr(context.settings, "confirm_removals", True)
        if confirm:
            components.removal.confirmer = MessageBoxConfirmer(parent_provider=lambda: view)
        _LOGGER.debug("Created role management view")

    _LOGGER.info("Application bootstrap complete")
    return components.event_bus, components.coordinator, components.view


def create_application_headless(context: WindowContext) -> AppComponents:
    """Create application components without UI for testing.

    Args:
        context: The window context with settings and shared state.

    Returns:
        AppComponents with no view.
    """
    return build_components(context)


__all__ = [
    "AppComponents",
    "build_components",
    "create_application",
    "create_application_headless",
]
