from .local_entry import LocalEntry
from .enums import UserRole, AdminStatus, InteractionType, BackendKind


__all__ = [
    "LocalEntry",
    "UserRole",
    "AdminStatus",
    "InteractionType",
    "BackendKind",
]
