import logging
from dataclasses import dataclass, field
from typing import List

from ..mock_data import mock_events
from ..models.enums import InteractionType
from ..schemas.event import Event
from .local_store import LocalStore, created_sort_key
from .remote_store import RemoteStore
from .storage_backend import LocalBackend, StorageBackend

logger = logging.getLogger(__name__)


@dataclass
class MigrationReport:
    """Outcome of one local-to-remote copy"""

    source: str  # "local", "fixtures" or "none"
    attempted: int = 0
    migrated: int = 0
    failed: int = 0
    events: List[Event] = field(default_factory=list)


class MigrationService:
    """Loads the event collection, copying local data up on first connect"""

    def __init__(self, backend: StorageBackend, local_store: LocalStore):
        self.backend = backend
        self.local_store = local_store
        self.last_report = None

    def load_events(self) -> List[Event]:
        """Full load path used at startup and on manual refresh.

        Remote and empty triggers a migration. A failed remote read (as opposed to
        an empty one) never migrates; it serves the local copy instead.
        """
        if isinstance(self.backend, LocalBackend):
            return self.local_store.list_events() or []

        remote = self.backend.store
        events = remote.list_events()
        if events is None:
            logger.warning("⚠️ Could not read remote events, serving local copy")
            return self.local_store.list_events() or []

        if events:
            return events

        self.last_report = migrate_local_to_remote(remote, self.local_store)
        return self.last_report.events


def migrate_local_to_remote(remote: RemoteStore, local: LocalStore) -> MigrationReport:
    """Copy every local event into an empty remote, or seed the demo events.

    Each record is independent: a failure is logged and the next one is tried.
    Comments and interaction rows follow their event on a best-effort basis.
    """
    local_events = local.list_events() or []
    if local_events:
        source, candidates = "local", local_events
        logger.info(f"🔄 Migrating {len(candidates)} local events to Supabase...")
    else:
        source, candidates = "fixtures", mock_events()
        logger.info("🌱 No local events found, seeding Supabase with demo events...")

    report = MigrationReport(source=source, attempted=len(candidates))

    # Oldest first so remote insertion order follows creation order
    for event in sorted(candidates, key=created_sort_key):
        try:
            created = remote.create_event(event)
            if not created.ok:
                report.failed += 1
                logger.error(f"❌ Failed to migrate event '{event.title}': {created.reason}")
                continue

            report.migrated += 1
            _copy_dependents(remote, event, created.data.id)
        except Exception as e:
            report.failed += 1
            logger.error(f"❌ Failed to migrate event '{event.title}': {e}")

    logger.info(
        f"✅ Migration finished: {report.migrated}/{report.attempted} events copied, "
        f"{report.failed} failed"
    )

    reloaded = remote.list_events()
    report.events = reloaded if reloaded is not None else []
    return report


def _copy_dependents(remote: RemoteStore, event: Event, new_id: str):
    for user_id in event.liked_by:
        remote.upsert_interaction(new_id, user_id, InteractionType.LIKE)
    for user_id in event.attendees:
        remote.upsert_interaction(new_id, user_id, InteractionType.ATTEND)
    if event.liked_by or event.attendees:
        remote.update_event_counters(
            new_id, list(dict.fromkeys(event.liked_by)), list(dict.fromkeys(event.attendees))
        )

    for comment in event.comments:
        result = remote.create_comment(comment.model_copy(update={"event_id": new_id}))
        if not result.ok:
            logger.warning(f"Comment {comment.id} of '{event.title}' not migrated")
