from .permissions import (
    get_app_context,
    get_current_user,
    require_user,
    require_event_manager,
)

__all__ = [
    "get_app_context",
    "get_current_user",
    "require_user",
    "require_event_manager",
]
