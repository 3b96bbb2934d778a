import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from ..models.enums import InteractionType
from ..schemas.common import OperationResult
from ..schemas.event import Event, EventCounters, interaction_field
from .local_store import LocalStore
from .remote_store import RemoteStore

logger = logging.getLogger(__name__)


class InteractionRepository(ABC):
    """Where (event, user, kind) memberships live for one backend"""

    @abstractmethod
    def lookup_event(self, event_id: str) -> OperationResult[Event]:
        """The event, or event_not_found / event_read_failed"""
        pass

    @abstractmethod
    def set_membership(
        self, event_id: str, user_id: str, kind: InteractionType, present: bool
    ) -> bool:
        """Add or remove one membership; both directions are idempotent"""
        pass

    @abstractmethod
    def user_ids(self, event_id: str, kind: InteractionType) -> Optional[List[str]]:
        """Current members of ``kind`` for the event, or None on read failure"""
        pass

    @abstractmethod
    def save_counters(self, counters: EventCounters) -> bool:
        pass


class LocalInteractionRepository(InteractionRepository):
    """Memberships are the ``liked_by``/``attendees`` lists embedded in each event"""

    def __init__(self, store: LocalStore):
        self.store = store

    def lookup_event(self, event_id: str) -> OperationResult[Event]:
        return self.store.lookup_event(event_id)

    def set_membership(
        self, event_id: str, user_id: str, kind: InteractionType, present: bool
    ) -> bool:
        field = interaction_field(kind)
        try:
            events = self.store.get_events()
            event = next((e for e in events if e.id == event_id), None)
            if event is None:
                return False

            members = getattr(event, field)
            if present and user_id not in members:
                members.append(user_id)
            elif not present:
                setattr(event, field, [uid for uid in members if uid != user_id])

            self.store.save_events(events)
            return True
        except SQLAlchemyError as e:
            logger.error(f"❌ Error writing local {kind.value} interaction: {e}")
            return False

    def user_ids(self, event_id: str, kind: InteractionType) -> Optional[List[str]]:
        event = self.store.get_event(event_id)
        if event is None:
            return None
        return list(getattr(event, interaction_field(kind)))

    def save_counters(self, counters: EventCounters) -> bool:
        try:
            events = self.store.get_events()
            event = next((e for e in events if e.id == counters.event_id), None)
            if event is None:
                return False

            event.liked_by = counters.liked_by
            event.attendees = counters.attendees
            event.likes = counters.likes
            self.store.save_events(events)
            return True
        except SQLAlchemyError as e:
            logger.error(f"❌ Error writing local event counters: {e}")
            return False


class RemoteInteractionRepository(InteractionRepository):
    """Memberships are rows of the interactions table"""

    def __init__(self, store: RemoteStore):
        self.store = store

    def lookup_event(self, event_id: str) -> OperationResult[Event]:
        return self.store.lookup_event(event_id)

    def set_membership(
        self, event_id: str, user_id: str, kind: InteractionType, present: bool
    ) -> bool:
        return self.store.set_interaction_row(event_id, user_id, kind, present)

    def user_ids(self, event_id: str, kind: InteractionType) -> Optional[List[str]]:
        return self.store.list_interaction_user_ids(event_id, kind)

    def save_counters(self, counters: EventCounters) -> bool:
        return self.store.update_event_counters(
            counters.event_id, counters.liked_by, counters.attendees
        )


class InteractionLedger:
    """Keeps like/attend memberships and the denormalized counters in step.

    Each (event, user, kind) is either absent or present. Setting a state the pair
    is already in is a no-op, so repeated clicks never duplicate a membership.
    After every write the counters are rebuilt from the memberships themselves,
    which keeps ``likes == len(liked_by)`` on both backends.
    """

    def __init__(self, repository: InteractionRepository):
        self.repository = repository

    def set_interaction(
        self, event_id: str, user_id: str, kind: InteractionType, present: bool
    ) -> OperationResult[EventCounters]:
        found = self.repository.lookup_event(event_id)
        if not found.ok:
            return OperationResult.failure(found.reason)

        if not self.repository.set_membership(event_id, user_id, kind, present):
            return OperationResult.failure("interaction_write_failed")

        return self.recompute(event_id)

    def recompute(self, event_id: str) -> OperationResult[EventCounters]:
        """Rebuild the counters of one event from its memberships"""
        liked_by = self.repository.user_ids(event_id, InteractionType.LIKE)
        attendees = self.repository.user_ids(event_id, InteractionType.ATTEND)
        if liked_by is None or attendees is None:
            return OperationResult.failure("counter_read_failed")

        counters = EventCounters(
            event_id=event_id,
            likes=len(_unique(liked_by)),
            liked_by=_unique(liked_by),
            attendees=_unique(attendees),
        )
        if not self.repository.save_counters(counters):
            return OperationResult.failure("counter_write_failed")

        logger.info(
            f"Event {event_id} counters: {counters.likes} likes, "
            f"{len(counters.attendees)} attendees"
        )
        return OperationResult.success(counters)


def _unique(ids: List[str]) -> List[str]:
    """Drop repeated ids, keeping first-seen order"""
    return list(dict.fromkeys(ids))
