"""Presentation layer for the role management view.

This package contains the thin UI pieces that respond to domain events
and delegate user actions to the application layer:

1. **Panel content**: Builders turning a role record into the renderable
   content of the primary and nested detail panels.

2. **RoleManagementView** (``role_view``): The Qt shell. It imports
   PySide6 widgets and is therefore loaded on demand by the bootstrap.

Design Principles:
    - Thin components that delegate to DisclosureCoordinator
    - Subscribe to events for reactive updates
    - No business logic - only UI updates
"""

from __future__ import annotations

from .panel_content import PanelContent, RolePanelContentProvider

__all__: list[str] = [
    "PanelContent",
    "RolePanelContentProvider",
]
