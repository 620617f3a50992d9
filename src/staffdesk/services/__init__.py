"""Service layer helpers (settings, demo role data)."""

from .roles import RoleService
from .settings import Settings, SettingsStore

__all__ = [
    "RoleService",
    "Settings",
    "SettingsStore",
]
