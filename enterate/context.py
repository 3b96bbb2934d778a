import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.orm import sessionmaker
from supabase import Client

from .database import (
    Settings,
    create_local_engine,
    create_session_factory,
    create_supabase_client,
    init_local_db,
)
from .schemas.event import Event
from .services.event_service import EventService
from .services.image_service import ImageService
from .services.local_store import LocalStore
from .services.migration_service import MigrationService
from .services.notification_service import NotificationService
from .services.storage_backend import StorageBackend, probe_storage_backend
from .services.user_service import UserService

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Everything a request needs, wired once at startup.

    The backend is chosen by a single probe when the context is built and is not
    re-probed afterwards, including on refresh.
    """

    settings: Settings
    local_store: LocalStore
    backend: StorageBackend
    events: EventService
    users: UserService
    notifications: NotificationService
    images: ImageService
    migration: MigrationService

    def load(self) -> List[Event]:
        """Seed local collections and run the event load path (with migration)"""
        self.local_store.initialize()
        events = self.migration.load_events()
        logger.info(f"📦 Loaded {len(events)} events from {self.backend.kind.value} storage")
        return events


def build_app_context(
    settings: Optional[Settings] = None,
    client: Optional[Client] = None,
    session_factory: Optional[sessionmaker] = None,
) -> AppContext:
    settings = settings or Settings.from_env()

    if session_factory is None:
        engine = create_local_engine(settings.local_database_url)
        init_local_db(engine)
        session_factory = create_session_factory(engine)

    local_store = LocalStore(session_factory)
    if client is None:
        client = create_supabase_client(settings)

    backend = probe_storage_backend(client, settings, local_store)
    notifications = NotificationService(local_store, settings.email_delay_seconds)

    return AppContext(
        settings=settings,
        local_store=local_store,
        backend=backend,
        events=EventService(backend),
        users=UserService(backend, local_store, notifications),
        notifications=notifications,
        images=ImageService(local_store),
        migration=MigrationService(backend, local_store),
    )
