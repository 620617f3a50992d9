"""UI package holding the role management view and its controllers."""

from .bootstrap import AppComponents, create_application, create_application_headless
from .events import EventBus
from .models.window_state import WindowContext

__all__ = [
    # Bootstrap
    "AppComponents",
    "create_application",
    "create_application_headless",
    # Event Bus
    "EventBus",
    # Models
    "WindowContext",
]
