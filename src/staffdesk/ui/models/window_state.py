"""Window context model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - imports for type checking only
    from ...services.roles import RoleService
    from ...services.settings import Settings, SettingsStore


@dataclass(slots=True)
class WindowContext:
    """Shared context passed to the role view when constructing the UI."""

    settings: Settings | None = None
    settings_store: SettingsStore | None = None
    role_service: RoleService | None = None


__all__ = ["WindowContext"]
