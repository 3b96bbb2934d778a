import json
import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from fastapi.encoders import jsonable_encoder
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from ..database import session_scope
from ..mock_data import mock_events, mock_users
from ..models.local_entry import LocalEntry
from ..schemas.common import OperationResult
from ..schemas.event import Comment, Event
from ..schemas.image import ImageRegistryEntry, StoredImage
from ..schemas.notification import SentNotification
from ..schemas.user import User
from ..utils.constants import LocalKeys

logger = logging.getLogger(__name__)


def created_sort_key(record) -> float:
    """Creation time as a UTC timestamp; naive datetimes are taken as UTC"""
    created = record.created_at
    if created is None:
        return 0.0
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return created.timestamp()


class LocalStore:
    """On-device key-value persistence.

    Every collection lives under one key as a JSON document. Mutations read the
    whole document, change it and write the whole document back, so the last
    write wins and there is no isolation between processes sharing the file.
    Missing users/events collections are seeded with the demo dataset, and a
    collection that no longer parses is reset to its defaults.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    # Raw key/value access
    def get_item(self, key: str) -> Optional[str]:
        with session_scope(self.session_factory) as db:
            entry = db.get(LocalEntry, key)
            return entry.value if entry else None

    def set_item(self, key: str, value: str):
        with session_scope(self.session_factory) as db:
            entry = db.get(LocalEntry, key)
            if entry:
                entry.value = value
            else:
                db.add(LocalEntry(key=key, value=value))

    def remove_item(self, key: str):
        with session_scope(self.session_factory) as db:
            entry = db.get(LocalEntry, key)
            if entry:
                db.delete(entry)

    def keys(self) -> List[str]:
        with session_scope(self.session_factory) as db:
            return [key for (key,) in db.query(LocalEntry.key).all()]

    def _write_json(self, key: str, value: Any):
        self.set_item(key, json.dumps(jsonable_encoder(value)))

    def _load_collection(
        self, key: str, model, defaults: Callable[[], List[Any]] = list
    ) -> List[Any]:
        """Decode a JSON list into models, seeding or resetting it when needed"""
        raw = self.get_item(key)
        if raw is None:
            items = defaults()
            if items:
                logger.info(f"Initialized {key} with mock data")
            self._write_json(key, items)
            return items

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError(f"expected a list, got {type(data).__name__}")
            return [model(**item) for item in data]
        except (ValueError, TypeError, ValidationError) as e:
            logger.error(f"Error parsing stored {key}, resetting: {e}")
            items = defaults()
            self._write_json(key, items)
            return items

    def initialize(self):
        """Seed the collections and the session id on first run"""
        try:
            self.get_users()
            self.get_events()
            session_id = self.get_or_create_session_id()
            logger.info(f"Session ID: {session_id}")
        except SQLAlchemyError as e:
            logger.error(f"❌ Local storage initialization failed: {e}")

    @staticmethod
    def _new_id(existing_ids) -> str:
        """Timestamp-derived id, bumped until it is unused"""
        candidate = int(time.time() * 1000)
        while str(candidate) in existing_ids:
            candidate += 1
        return str(candidate)

    # Users
    def get_users(self) -> List[User]:
        return self._load_collection(LocalKeys.USERS, User, mock_users)

    def save_users(self, users: List[User]):
        self._write_json(LocalKeys.USERS, users)

    def list_users(self) -> Optional[List[User]]:
        try:
            return self.get_users()
        except SQLAlchemyError as e:
            logger.error(f"Error reading local users: {e}")
            return None

    def get_user(self, user_id: str) -> Optional[User]:
        users = self.list_users() or []
        return next((user for user in users if user.id == user_id), None)

    def get_user_by_email(self, email: str) -> Optional[User]:
        email = email.strip().lower()
        users = self.list_users() or []
        return next((user for user in users if user.email.lower() == email), None)

    def create_user(self, user: User) -> OperationResult[User]:
        """Insert a user after a linear scan for the same e-mail"""
        try:
            users = self.get_users()
            if any(u.email.lower() == user.email.lower() for u in users):
                return OperationResult.failure("duplicate_email")

            new_user = user.model_copy(
                update={
                    "id": user.id or self._new_id({u.id for u in users}),
                    "created_at": user.created_at or datetime.utcnow(),
                }
            )
            users.append(new_user)
            self.save_users(users)
            return OperationResult.success(new_user)
        except SQLAlchemyError as e:
            logger.error(f"❌ Error creating local user: {e}")
            return OperationResult.failure("local_storage_error")

    def update_user(self, user: User) -> OperationResult[User]:
        try:
            users = self.get_users()
            index = next((i for i, u in enumerate(users) if u.id == user.id), None)
            if index is None:
                return OperationResult.failure("user_not_found")

            users[index] = user
            self.save_users(users)

            # Keep the session record in step with the stored user
            current = self.get_current_user()
            if current and current.id == user.id:
                self.set_current_user(user)
            return OperationResult.success(user)
        except SQLAlchemyError as e:
            logger.error(f"❌ Error updating local user: {e}")
            return OperationResult.failure("local_storage_error")

    # Events
    def get_events(self) -> List[Event]:
        return self._load_collection(LocalKeys.EVENTS, Event, mock_events)

    def save_events(self, events: List[Event]):
        self._write_json(LocalKeys.EVENTS, events)

    def list_events(self) -> Optional[List[Event]]:
        """All events, newest first"""
        try:
            events = self.get_events()
        except SQLAlchemyError as e:
            logger.error(f"Error reading local events: {e}")
            return None
        return sorted(events, key=created_sort_key, reverse=True)

    def get_event(self, event_id: str) -> Optional[Event]:
        found = self.lookup_event(event_id)
        return found.data if found.ok else None

    def lookup_event(self, event_id: str) -> OperationResult[Event]:
        try:
            events = self.get_events()
        except SQLAlchemyError as e:
            logger.error(f"Error reading local event {event_id}: {e}")
            return OperationResult.failure("event_read_failed")

        event = next((event for event in events if event.id == event_id), None)
        if event is None:
            return OperationResult.failure("event_not_found")
        return OperationResult.success(event)

    def create_event(self, event: Event) -> OperationResult[Event]:
        try:
            events = self.get_events()
            new_event = event.model_copy(
                update={
                    "id": self._new_id({e.id for e in events}),
                    "created_at": event.created_at or datetime.utcnow(),
                }
            )
            events.append(new_event)
            self.save_events(events)
            return OperationResult.success(new_event)
        except SQLAlchemyError as e:
            logger.error(f"❌ Error creating local event: {e}")
            return OperationResult.failure("local_storage_error")

    def update_event(self, event: Event) -> OperationResult[Event]:
        """Overwrite the stored record with the given one"""
        try:
            events = self.get_events()
            index = next((i for i, e in enumerate(events) if e.id == event.id), None)
            if index is None:
                return OperationResult.failure("event_not_found")

            updated = event.model_copy(update={"updated_at": datetime.utcnow()})
            events[index] = updated
            self.save_events(events)
            return OperationResult.success(updated)
        except SQLAlchemyError as e:
            logger.error(f"❌ Error updating local event: {e}")
            return OperationResult.failure("local_storage_error")

    def delete_event(self, event_id: str) -> OperationResult[None]:
        """Remove an event together with its embedded comments and interactions"""
        try:
            events = self.get_events()
            remaining = [e for e in events if e.id != event_id]
            if len(remaining) == len(events):
                return OperationResult.failure("event_not_found")

            self.save_events(remaining)
            return OperationResult.success()
        except SQLAlchemyError as e:
            logger.error(f"❌ Error deleting local event: {e}")
            return OperationResult.failure("local_storage_error")

    def create_comment(self, comment: Comment) -> OperationResult[Comment]:
        try:
            events = self.get_events()
            event = next((e for e in events if e.id == comment.event_id), None)
            if event is None:
                return OperationResult.failure("event_not_found")

            new_comment = comment.model_copy(
                update={"id": self._new_id({c.id for c in event.comments})}
            )
            event.comments.append(new_comment)
            self.save_events(events)
            return OperationResult.success(new_comment)
        except SQLAlchemyError as e:
            logger.error(f"❌ Error creating local comment: {e}")
            return OperationResult.failure("local_storage_error")

    # Session
    def get_or_create_session_id(self) -> str:
        session_id = self.get_item(LocalKeys.SESSION_ID)
        if not session_id:
            session_id = f"session_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"
            self.set_item(LocalKeys.SESSION_ID, session_id)
        return session_id

    def get_current_user(self) -> Optional[User]:
        """Session user, refreshed from the users collection when possible"""
        raw = self.get_item(LocalKeys.CURRENT_USER)
        if not raw:
            return None

        try:
            stored = User(**json.loads(raw))
        except (ValueError, TypeError, ValidationError) as e:
            logger.error(f"Error parsing current user: {e}")
            self.remove_item(LocalKeys.CURRENT_USER)
            return None

        latest = next((u for u in self.get_users() if u.id == stored.id), None)
        return latest or stored

    def set_current_user(self, user: Optional[User]):
        if user:
            self._write_json(LocalKeys.CURRENT_USER, user)
        else:
            self.remove_item(LocalKeys.CURRENT_USER)

    # Sent-notification log
    def get_sent_emails(self) -> List[SentNotification]:
        return self._load_collection(LocalKeys.SENT_EMAILS, SentNotification)

    def append_sent_email(self, record: SentNotification) -> OperationResult[SentNotification]:
        try:
            sent = self.get_sent_emails()
            sent.append(record)
            self._write_json(LocalKeys.SENT_EMAILS, sent)
            return OperationResult.success(record)
        except SQLAlchemyError as e:
            logger.error(f"❌ Error storing sent e-mail: {e}")
            return OperationResult.failure("local_storage_error")

    # Uploaded images
    def get_image_registry(self) -> List[ImageRegistryEntry]:
        return self._load_collection(LocalKeys.IMAGE_REGISTRY, ImageRegistryEntry)

    def save_image(self, image: StoredImage) -> OperationResult[StoredImage]:
        try:
            self._write_json(LocalKeys.image(image.id), image)
            registry = self.get_image_registry()
            registry.append(
                ImageRegistryEntry(
                    id=image.id, filename=image.filename, uploaded_at=image.uploaded_at
                )
            )
            self._write_json(LocalKeys.IMAGE_REGISTRY, registry)
            return OperationResult.success(image)
        except SQLAlchemyError as e:
            logger.error(f"❌ Error storing image: {e}")
            return OperationResult.failure("local_storage_error")

    def get_image(self, image_id: str) -> Optional[StoredImage]:
        raw = self.get_item(LocalKeys.image(image_id))
        if not raw:
            return None
        try:
            return StoredImage(**json.loads(raw))
        except (ValueError, TypeError, ValidationError) as e:
            logger.error(f"Error parsing stored image {image_id}: {e}")
            return None

    # Maintenance
    def stats(self) -> Dict[str, Any]:
        return {
            "users": len(self.get_users()),
            "events": len(self.get_events()),
            "session_id": self.get_item(LocalKeys.SESSION_ID) or "none",
        }

    def export_data(self) -> str:
        """Serialize the local collections for backup/transfer"""
        data = {
            "users": self.get_users(),
            "events": self.get_events(),
            "current_user": self.get_current_user(),
            "session_id": self.get_item(LocalKeys.SESSION_ID),
            "timestamp": datetime.utcnow(),
        }
        return json.dumps(jsonable_encoder(data), indent=2)

    def import_data(self, json_data: str) -> bool:
        try:
            data = json.loads(json_data)
            users = [User(**u) for u in data.get("users") or []]
            events = [Event(**e) for e in data.get("events") or []]
            current_user = data.get("current_user")

            if users:
                self.save_users(users)
            if events:
                self.save_events(events)
            if current_user:
                self.set_current_user(User(**current_user))
            if data.get("session_id"):
                self.set_item(LocalKeys.SESSION_ID, data["session_id"])
            logger.info("Data imported successfully")
            return True
        except (ValueError, TypeError, AttributeError, ValidationError, SQLAlchemyError) as e:
            logger.error(f"Error importing data: {e}")
            return False

    def clear_all_data(self):
        """Remove every key the app owns (for testing/reset)"""
        owned = (
            LocalKeys.USERS,
            LocalKeys.EVENTS,
            LocalKeys.CURRENT_USER,
            LocalKeys.SESSION_ID,
            LocalKeys.SENT_EMAILS,
            LocalKeys.IMAGE_REGISTRY,
        )
        for key in self.keys():
            if key in owned or key.startswith(LocalKeys.IMAGE_PREFIX):
                self.remove_item(key)
        logger.info("All application data cleared")
