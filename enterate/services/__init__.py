from .local_store import LocalStore
from .remote_store import RemoteStore
from .interaction_service import (
    InteractionLedger,
    InteractionRepository,
    LocalInteractionRepository,
    RemoteInteractionRepository,
)
from .storage_backend import (
    LocalBackend,
    RemoteBackend,
    StorageBackend,
    probe_storage_backend,
)
from .migration_service import MigrationReport, MigrationService, migrate_local_to_remote
from .event_service import EventService
from .user_service import UserService
from .notification_service import NotificationService
from .image_service import ImageService

__all__ = [
    "LocalStore",
    "RemoteStore",
    "InteractionLedger",
    "InteractionRepository",
    "LocalInteractionRepository",
    "RemoteInteractionRepository",
    "LocalBackend",
    "RemoteBackend",
    "StorageBackend",
    "probe_storage_backend",
    "MigrationReport",
    "MigrationService",
    "migrate_local_to_remote",
    "EventService",
    "UserService",
    "NotificationService",
    "ImageService",
]
