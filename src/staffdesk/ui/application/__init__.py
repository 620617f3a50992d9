"""Application layer for the role management view.

This package contains the coordinator and use cases that orchestrate
domain operations. Each one encapsulates a specific user action or
workflow.

Coordinator:
    - DisclosureCoordinator: Owns primary/nested panel visibility and the
      disclosed record; routes row clicks according to the selection mode.

Use Cases:
    - RemoveSelectedUseCase: Remove the roles checked in the master list

All of them:
    - Receive dependencies via constructor injection
    - Orchestrate domain managers without direct UI coupling
    - Emit events for the presentation layer
"""

from __future__ import annotations

from .disclosure import (
    CommitResult,
    DisclosureCoordinator,
    PanelContentProvider,
)
from .removal_ops import (
    RemovalConfirmer,
    RemovalRequest,
    RemovalResult,
    RemoveSelectedUseCase,
)

__all__: list[str] = [
    # Disclosure
    "CommitResult",
    "DisclosureCoordinator",
    "PanelContentProvider",
    # Removal
    "RemovalConfirmer",
    "RemovalRequest",
    "RemovalResult",
    "RemoveSelectedUseCase",
]
