"""Domain layer for the role management view.

Domain Managers:
    - RecordStore: Role records with their active/selected flags
    - validation: The save gate applied before a record is persisted

All domain code:
    - Receives dependencies via constructor injection
    - Emits events to notify other layers of state changes
    - Has no direct dependencies on Qt or UI widgets
"""

from __future__ import annotations

from .record_store import RecordStore
from .validation import RoleDraft, validate_role_draft

__all__: list[str] = [
    "RecordStore",
    "RoleDraft",
    "validate_role_draft",
]
