import logging
from dataclasses import dataclass
from typing import Optional, Union

from supabase import Client

from ..database import Settings
from ..models.enums import BackendKind
from .interaction_service import (
    InteractionRepository,
    LocalInteractionRepository,
    RemoteInteractionRepository,
)
from .local_store import LocalStore
from .remote_store import RemoteStore

logger = logging.getLogger(__name__)


@dataclass
class RemoteBackend:
    """Reads and writes go through the hosted Supabase project"""

    store: RemoteStore
    kind: BackendKind = BackendKind.REMOTE

    def interactions(self) -> InteractionRepository:
        return RemoteInteractionRepository(self.store)


@dataclass
class LocalBackend:
    """Reads and writes stay in the on-device key-value store"""

    store: LocalStore
    kind: BackendKind = BackendKind.LOCAL

    def interactions(self) -> InteractionRepository:
        return LocalInteractionRepository(self.store)


StorageBackend = Union[RemoteBackend, LocalBackend]


def probe_storage_backend(
    client: Optional[Client], settings: Settings, local_store: LocalStore
) -> StorageBackend:
    """Pick the backend once at startup.

    A configured client that answers a one-row read wins; anything else (no
    client, network or auth failure, missing table) degrades to local storage.
    """
    if client is None:
        logger.warning("⚠️ No Supabase client configured, working offline")
        return LocalBackend(local_store)

    remote = RemoteStore(client, settings)
    if remote.probe():
        logger.info("🌐 Using Supabase storage")
        return RemoteBackend(remote)

    logger.warning("⚠️ Supabase unreachable, falling back to local storage")
    return LocalBackend(local_store)
