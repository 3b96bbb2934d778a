import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi.encoders import jsonable_encoder
from supabase import Client

from ..database import Settings
from ..models.enums import InteractionType
from ..schemas.common import OperationResult
from ..schemas.event import Comment, Event
from ..schemas.user import User
from .local_store import created_sort_key

logger = logging.getLogger(__name__)


class RemoteStore:
    """CRUD over the hosted Supabase tables.

    Every call catches transport/query errors, logs them and hands back
    ``None``, an empty list, ``False`` or ``OperationResult.failure`` so a failing
    backend never takes a request down with it.
    """

    def __init__(self, client: Client, settings: Settings):
        self.client = client
        self.events_table = settings.events_table
        self.comments_table = settings.comments_table
        self.interactions_table = settings.interactions_table
        self.users_table = settings.users_table
        self.points_table = settings.points_table

    def probe(self) -> bool:
        """Lightweight read used to decide whether the backend is reachable"""
        try:
            self.client.table(self.events_table).select("id").limit(1).execute()
            logger.info("✅ Supabase connected successfully")
            return True
        except Exception as e:
            logger.warning(f"❌ Supabase connection failed: {e}")
            return False

    # Row mapping
    def _comment_from_row(self, row: Dict[str, Any]) -> Comment:
        return Comment(
            id=str(row["id"]),
            event_id=str(row["event_id"]),
            user_id=str(row["user_id"]),
            user_name=row.get("user_name") or "",
            user_profile_image=row.get("user_profile_image"),
            content=row.get("content") or "",
            created_at=row.get("created_at") or datetime.utcnow(),
        )

    def _event_from_row(self, row: Dict[str, Any]) -> Event:
        comments = [self._comment_from_row(c) for c in row.get(self.comments_table) or []]
        liked_by = row.get("liked_by") or []
        return Event(
            id=str(row["id"]),
            title=row.get("title") or "",
            description=row.get("description") or "",
            date=row.get("date") or "",
            time=row.get("time") or "",
            end_time=row.get("end_time"),
            location=row.get("location") or "",
            category=row.get("category") or "",
            image_url=row.get("image_url"),
            price=row.get("price") or 0,
            points=row.get("points") or 0,
            organizer_name=row.get("organizer_name") or "",
            created_by=row.get("created_by") or "",
            likes=row.get("likes") or len(liked_by),
            liked_by=liked_by,
            attendees=row.get("attendees") or [],
            comments=sorted(comments, key=created_sort_key),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    def _user_from_row(self, row: Dict[str, Any]) -> User:
        return User(
            id=str(row["id"]),
            name=row.get("name") or row.get("email", "").split("@")[0],
            email=row["email"],
            profile_image=row.get("profile_image"),
            role=row.get("role") or "user",
            admin_status=row.get("admin_status"),
            created_at=row.get("created_at"),
        )

    @staticmethod
    def _event_fields(event: Event) -> Dict[str, Any]:
        """Mutable columns of an events row"""
        return jsonable_encoder(
            {
                "title": event.title,
                "description": event.description,
                "date": event.date,
                "time": event.time,
                "end_time": event.end_time,
                "location": event.location,
                "category": event.category,
                "image_url": event.image_url,
                "price": event.price or 0,
                "points": event.points or 0,
                "organizer_name": event.organizer_name,
                "likes": event.likes or 0,
                "liked_by": event.liked_by or [],
                "attendees": event.attendees or [],
            }
        )

    # Events
    def list_events(self) -> Optional[List[Event]]:
        """Events with their comments, newest first; None when the read fails"""
        try:
            response = (
                self.client.table(self.events_table)
                .select(f"*, {self.comments_table}(*)")
                .order("created_at", desc=True)
                .execute()
            )
            events = [self._event_from_row(row) for row in response.data or []]
            logger.info(f"✅ Fetched {len(events)} events from Supabase")
            return events
        except Exception as e:
            logger.error(f"Error fetching events: {e}")
            return None

    def get_event(self, event_id: str) -> Optional[Event]:
        found = self.lookup_event(event_id)
        return found.data if found.ok else None

    def lookup_event(self, event_id: str) -> OperationResult[Event]:
        """Like get_event, but tells a missing row apart from a failed read"""
        try:
            response = (
                self.client.table(self.events_table)
                .select(f"*, {self.comments_table}(*)")
                .eq("id", event_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error fetching event {event_id}: {e}")
            return OperationResult.failure("event_read_failed")

        rows = response.data or []
        if not rows:
            return OperationResult.failure("event_not_found")
        return OperationResult.success(self._event_from_row(rows[0]))

    def create_event(self, event: Event) -> OperationResult[Event]:
        """Insert a new events row; the database assigns the id"""
        row = self._event_fields(event)
        row.update(
            {
                "created_by": event.created_by,
                "likes": 0,
                "liked_by": [],
                "attendees": [],
            }
        )
        if event.created_at:
            row["created_at"] = event.created_at.isoformat()

        try:
            response = self.client.table(self.events_table).insert(row).execute()
            if not response.data:
                return OperationResult.failure("event_not_created")
            logger.info(f"✅ Event created successfully: {event.title}")
            return OperationResult.success(self._event_from_row(response.data[0]))
        except Exception as e:
            logger.error(f"❌ Error creating event: {e}")
            return OperationResult.failure("remote_storage_error")

    def update_event(self, event: Event) -> OperationResult[Event]:
        """Overwrite every mutable field of the event row"""
        row = self._event_fields(event)
        row["updated_at"] = datetime.utcnow().isoformat()

        try:
            response = (
                self.client.table(self.events_table)
                .update(row)
                .eq("id", event.id)
                .execute()
            )
            if not response.data:
                return OperationResult.failure("event_not_found")
            updated = self._event_from_row(response.data[0])
            updated.comments = event.comments
            return OperationResult.success(updated)
        except Exception as e:
            logger.error(f"❌ Error updating event: {e}")
            return OperationResult.failure("remote_storage_error")

    def delete_event(self, event_id: str) -> OperationResult[None]:
        """Delete comments and interaction rows first, then the event row"""
        for table in (self.comments_table, self.interactions_table):
            try:
                self.client.table(table).delete().eq("event_id", event_id).execute()
            except Exception as e:
                logger.error(f"❌ Error deleting {table} rows of event {event_id}: {e}")

        try:
            response = (
                self.client.table(self.events_table)
                .delete()
                .eq("id", event_id)
                .execute()
            )
            if not response.data:
                return OperationResult.failure("event_not_found")
            logger.info(f"✅ Event {event_id} deleted successfully")
            return OperationResult.success()
        except Exception as e:
            logger.error(f"❌ Error deleting event: {e}")
            return OperationResult.failure("remote_storage_error")

    # Comments
    def create_comment(self, comment: Comment) -> OperationResult[Comment]:
        row = {
            "event_id": comment.event_id,
            "user_id": comment.user_id,
            "user_name": comment.user_name,
            "user_profile_image": comment.user_profile_image,
            "content": comment.content,
            "created_at": comment.created_at.isoformat(),
        }

        try:
            response = self.client.table(self.comments_table).insert(row).execute()
            if not response.data:
                return OperationResult.failure("comment_not_created")
            return OperationResult.success(self._comment_from_row(response.data[0]))
        except Exception as e:
            logger.error(f"❌ Error creating comment: {e}")
            return OperationResult.failure("remote_storage_error")

    # Interactions
    def upsert_interaction(
        self, event_id: str, user_id: str, kind: InteractionType
    ) -> bool:
        """Idempotent: the row is keyed on (event_id, user_id, interaction_type)"""
        try:
            self.client.table(self.interactions_table).upsert(
                {
                    "event_id": event_id,
                    "user_id": user_id,
                    "interaction_type": kind.value,
                },
                on_conflict="event_id,user_id,interaction_type",
            ).execute()
            return True
        except Exception as e:
            logger.error(f"❌ Error adding {kind.value} interaction: {e}")
            return False

    def delete_interaction(
        self, event_id: str, user_id: str, kind: InteractionType
    ) -> bool:
        try:
            (
                self.client.table(self.interactions_table)
                .delete()
                .eq("event_id", event_id)
                .eq("user_id", user_id)
                .eq("interaction_type", kind.value)
                .execute()
            )
            return True
        except Exception as e:
            logger.error(f"❌ Error removing {kind.value} interaction: {e}")
            return False

    def set_interaction_row(
        self, event_id: str, user_id: str, kind: InteractionType, present: bool
    ) -> bool:
        if present:
            return self.upsert_interaction(event_id, user_id, kind)
        return self.delete_interaction(event_id, user_id, kind)

    def list_interaction_user_ids(
        self, event_id: str, kind: InteractionType
    ) -> Optional[List[str]]:
        try:
            response = (
                self.client.table(self.interactions_table)
                .select("user_id")
                .eq("event_id", event_id)
                .eq("interaction_type", kind.value)
                .order("created_at")
                .execute()
            )
            return [str(row["user_id"]) for row in response.data or []]
        except Exception as e:
            logger.error(f"Error fetching {kind.value} interactions: {e}")
            return None

    def update_event_counters(
        self, event_id: str, liked_by: List[str], attendees: List[str]
    ) -> bool:
        """Persist the denormalized like count and id lists onto the event row"""
        try:
            response = (
                self.client.table(self.events_table)
                .update(
                    {
                        "likes": len(liked_by),
                        "liked_by": liked_by,
                        "attendees": attendees,
                    }
                )
                .eq("id", event_id)
                .execute()
            )
            return bool(response.data)
        except Exception as e:
            logger.error(f"❌ Error updating event counts: {e}")
            return False

    # Users
    def list_users(self) -> Optional[List[User]]:
        try:
            response = self.client.table(self.users_table).select("*").execute()
            return [self._user_from_row(row) for row in response.data or []]
        except Exception as e:
            logger.error(f"Error fetching users: {e}")
            return None

    def get_user(self, user_id: str) -> Optional[User]:
        try:
            response = (
                self.client.table(self.users_table)
                .select("*")
                .eq("id", user_id)
                .limit(1)
                .execute()
            )
            rows = response.data or []
            return self._user_from_row(rows[0]) if rows else None
        except Exception as e:
            logger.error(f"Error fetching user {user_id}: {e}")
            return None

    def get_user_by_email(self, email: str) -> Optional[User]:
        try:
            response = (
                self.client.table(self.users_table)
                .select("*")
                .eq("email", email.strip().lower())
                .limit(1)
                .execute()
            )
            rows = response.data or []
            if not rows:
                logger.info("👤 User not found in database")
                return None
            return self._user_from_row(rows[0])
        except Exception as e:
            logger.error(f"❌ Error fetching user by email: {e}")
            return None

    def create_user(self, user: User) -> OperationResult[User]:
        if self.get_user_by_email(user.email):
            return OperationResult.failure("duplicate_email")

        row = {
            "name": user.name,
            "email": user.email.strip().lower(),
            "profile_image": user.profile_image,
            "role": user.role.value,
            "admin_status": user.admin_status.value if user.admin_status else None,
        }
        if user.id:
            row["id"] = user.id

        try:
            response = self.client.table(self.users_table).insert(row).execute()
            if not response.data:
                return OperationResult.failure("user_not_created")
            logger.info(f"✅ User created successfully: {user.email}")
            return OperationResult.success(self._user_from_row(response.data[0]))
        except Exception as e:
            # The unique constraint on email is the final arbiter
            logger.error(f"❌ Error creating user: {e}")
            return OperationResult.failure("remote_storage_error")

    def update_user(self, user: User) -> OperationResult[User]:
        try:
            response = (
                self.client.table(self.users_table)
                .update(
                    {
                        "name": user.name,
                        "profile_image": user.profile_image,
                        "role": user.role.value,
                        "admin_status": (
                            user.admin_status.value if user.admin_status else None
                        ),
                    }
                )
                .eq("id", user.id)
                .execute()
            )
            if not response.data:
                return OperationResult.failure("user_not_found")
            return OperationResult.success(self._user_from_row(response.data[0]))
        except Exception as e:
            logger.error(f"❌ Error updating user: {e}")
            return OperationResult.failure("remote_storage_error")

    def get_user_points(self, user_id: str) -> int:
        """Sum of the points a user earned across events"""
        try:
            response = (
                self.client.table(self.points_table)
                .select("points_earned")
                .eq("user_id", user_id)
                .execute()
            )
            return sum(row.get("points_earned") or 0 for row in response.data or [])
        except Exception as e:
            logger.error(f"❌ Error getting user points: {e}")
            return 0

    # Authentication (delegated to Supabase Auth)
    def sign_up(self, email: str, password: str, name: str) -> Optional[str]:
        """Register credentials with Supabase Auth and return the auth user id"""
        try:
            auth_response = self.client.auth.sign_up(
                {
                    "email": email,
                    "password": password,
                    "options": {"data": {"name": name}},
                }
            )
            return auth_response.user.id if auth_response.user else None
        except Exception as e:
            logger.error(f"Registration error: {e}")
            return None

    def sign_in(self, email: str, password: str) -> Optional[Dict[str, Any]]:
        """Check credentials with Supabase Auth; returns the auth user profile"""
        try:
            auth_response = self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
            if not auth_response.user or not auth_response.session:
                return None
            return _auth_profile(auth_response.user, auth_response.session.access_token)
        except Exception as e:
            logger.error(f"Login error: {e}")
            return None

    def user_from_token(self, access_token: str) -> Optional[Dict[str, Any]]:
        """Verify a Supabase access token; returns the auth user profile"""
        try:
            auth_response = self.client.auth.get_user(access_token)
            if not auth_response or not auth_response.user:
                return None
            return _auth_profile(auth_response.user, access_token)
        except Exception as e:
            logger.error(f"Token verification error: {e}")
            return None


def _auth_profile(auth_user, access_token: str) -> Dict[str, Any]:
    metadata = auth_user.user_metadata or {}
    return {
        "id": auth_user.id,
        "email": auth_user.email,
        "name": metadata.get("name") or metadata.get("full_name"),
        "profile_image": metadata.get("avatar_url"),
        "access_token": access_token,
    }
