import logging
from datetime import datetime
from typing import List, Optional

from ..models.enums import InteractionType, UserRole
from ..schemas.common import OperationResult, StorageUnavailableError
from ..schemas.event import (
    Comment,
    CommentCreate,
    Event,
    EventCounters,
    EventCreate,
    EventUpdate,
    UserInteractions,
)
from ..schemas.user import User
from ..utils.constants import AppConstants
from .interaction_service import InteractionLedger
from .storage_backend import StorageBackend

logger = logging.getLogger(__name__)


class EventServiceError(Exception):
    """Base exception for event service errors"""

    pass


class EventNotFoundError(EventServiceError):
    """Event not found"""

    pass


class PermissionDeniedError(EventServiceError):
    """Permission denied for operation"""

    pass


class BusinessRuleViolationError(EventServiceError):
    """Business rule violation"""

    pass


class EventService:
    """Event reads and writes against whichever backend is active"""

    def __init__(self, backend: StorageBackend):
        self.backend = backend
        self.store = backend.store
        self.ledger = InteractionLedger(backend.interactions())

    # Reads
    def list_events(self) -> Optional[List[Event]]:
        """Newest first; None when the backend read failed"""
        return self.store.list_events()

    def search_events(
        self, term: Optional[str] = None, category: Optional[str] = None
    ) -> Optional[List[Event]]:
        """Case-insensitive text match on title/description/location, exact category"""
        events = self.list_events()
        if events is None:
            return None

        if term and term.strip():
            needle = term.strip().lower()
            events = [
                event
                for event in events
                if needle in event.title.lower()
                or needle in event.description.lower()
                or needle in event.location.lower()
            ]

        if category and category != "Todas":
            events = [event for event in events if event.category == category]

        return events

    def get_event(self, event_id: str) -> Event:
        found = self.store.lookup_event(event_id)
        if found.ok:
            return found.data
        if found.reason == "event_not_found":
            raise EventNotFoundError(f"Event {event_id} not found")
        raise StorageUnavailableError(found.reason)

    def user_interactions(self, event_id: str, user_id: str) -> UserInteractions:
        return UserInteractions.from_event(self.get_event(event_id), user_id)

    # Writes
    def create_event(self, event_data: EventCreate, creator: User) -> OperationResult[Event]:
        """Any signed-in user can publish an event"""
        _check_time_range(event_data.time, event_data.end_time)
        event = Event(
            id="",
            **event_data.model_dump(),
            organizer_name=creator.name or AppConstants.DEFAULT_ORGANIZER_NAME,
            created_by=creator.id,
            created_at=datetime.utcnow(),
        )

        result = self.store.create_event(event)
        if result.ok:
            logger.info(f"📅 Event '{event.title}' created by user {creator.id}")
        return result

    def update_event(
        self, event_id: str, event_data: EventUpdate, user: User
    ) -> OperationResult[Event]:
        event = self.get_event(event_id)
        if not self._can_edit(event, user):
            raise PermissionDeniedError("Only the organizer or a moderator can edit this event")

        changes = event_data.model_dump(exclude_unset=True)
        if "image_url" in changes and not changes["image_url"]:
            changes["image_url"] = None
        _check_time_range(changes.get("time", event.time), changes.get("end_time", event.end_time))

        # Re-validate the merged record so an invalid event never reaches storage
        updated = Event.model_validate({**event.model_dump(), **changes})
        return self.store.update_event(updated)

    def delete_event(self, event_id: str, user: User) -> OperationResult[None]:
        """Removes the event together with its comments and interactions"""
        event = self.get_event(event_id)
        if not self._can_delete(event, user):
            raise PermissionDeniedError("Only the organizer or an admin can delete this event")

        result = self.store.delete_event(event_id)
        if result.ok:
            logger.info(f"🗑️ Event {event_id} deleted by user {user.id}")
        return result

    def add_comment(
        self, event_id: str, comment_data: CommentCreate, user: User
    ) -> OperationResult[Comment]:
        self.get_event(event_id)

        comment = Comment(
            id="",
            event_id=event_id,
            user_id=user.id,
            user_name=user.name,
            user_profile_image=user.profile_image,
            content=comment_data.content,
        )
        return self.store.create_comment(comment)

    def set_like(
        self, event_id: str, user: User, present: bool
    ) -> OperationResult[EventCounters]:
        return self._set_interaction(event_id, user, InteractionType.LIKE, present)

    def set_attendance(
        self, event_id: str, user: User, present: bool
    ) -> OperationResult[EventCounters]:
        return self._set_interaction(event_id, user, InteractionType.ATTEND, present)

    def _set_interaction(
        self, event_id: str, user: User, kind: InteractionType, present: bool
    ) -> OperationResult[EventCounters]:
        result = self.ledger.set_interaction(event_id, user.id, kind, present)
        if not result.ok and result.reason == "event_not_found":
            raise EventNotFoundError(f"Event {event_id} not found")
        return result

    # Permission helpers
    def _can_edit(self, event: Event, user: User) -> bool:
        return event.created_by == user.id or user.role in (
            UserRole.MODERATOR,
            UserRole.ADMIN,
        )

    def _can_delete(self, event: Event, user: User) -> bool:
        return event.created_by == user.id or user.role == UserRole.ADMIN


def _check_time_range(start: str, end: Optional[str]):
    if end is None:
        return
    if datetime.strptime(end, "%H:%M") <= datetime.strptime(start, "%H:%M"):
        raise BusinessRuleViolationError("La hora de fin debe ser posterior a la de inicio")
