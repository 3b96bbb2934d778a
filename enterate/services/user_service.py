import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..models.enums import AdminStatus, UserRole
from ..schemas.common import OperationResult, StorageUnavailableError
from ..schemas.user import AuthSession, LoginRequest, RegisterRequest, User
from .event_service import PermissionDeniedError
from .local_store import LocalStore
from .notification_service import NotificationService
from .storage_backend import RemoteBackend, StorageBackend

logger = logging.getLogger(__name__)


class UserServiceError(Exception):
    """Base exception for user service errors"""

    pass


class UserNotFoundError(UserServiceError):
    """User not found"""

    pass


class DuplicateEmailError(UserServiceError):
    """An account with this e-mail already exists"""

    pass


class AuthenticationRequiredError(UserServiceError):
    """No signed-in user, or the credentials were rejected"""

    pass


class UserService:
    """Accounts, the current session and the admin-request flow"""

    def __init__(
        self,
        backend: StorageBackend,
        local_store: LocalStore,
        notifications: NotificationService,
    ):
        self.backend = backend
        self.store = backend.store
        self.local_store = local_store
        self.notifications = notifications

    @property
    def is_remote(self) -> bool:
        return isinstance(self.backend, RemoteBackend)

    # Lookups
    def get_user(self, user_id: str) -> User:
        user = self.store.get_user(user_id)
        if not user:
            raise UserNotFoundError(f"User {user_id} not found")
        return user

    def list_users(self) -> List[User]:
        return self.store.list_users() or []

    def current_user(self) -> Optional[User]:
        """User recorded for this device's session, if any"""
        user = self.local_store.get_current_user()
        if user and self.is_remote:
            # Roles change remotely; a failed read keeps the cached copy
            latest = self.store.get_user(user.id)
            if latest and latest != user:
                self.local_store.set_current_user(latest)
                user = latest
        return user

    def user_for_token(self, access_token: str) -> Optional[User]:
        """Remote caller behind a Supabase access token"""
        profile = self.store.user_from_token(access_token)
        if not profile or not profile.get("email"):
            return None
        return self._get_or_create(profile["email"], profile)

    # Session
    def login(self, credentials: LoginRequest) -> AuthSession:
        """Sign in, creating the account on first use.

        The remote backend checks a password or an OAuth access token with
        Supabase Auth. The local fallback keeps no credentials and signs in by
        e-mail alone.
        """
        profile: Dict[str, Any] = {
            "name": credentials.name,
            "profile_image": credentials.profile_image,
        }
        access_token = None

        if self.is_remote:
            auth_profile = self._authenticate(credentials)
            access_token = auth_profile["access_token"]
            profile = {
                "id": auth_profile["id"],
                "name": auth_profile.get("name") or credentials.name,
                "profile_image": auth_profile.get("profile_image")
                or credentials.profile_image,
            }

        user = self._get_or_create(credentials.email, profile)
        self.local_store.set_current_user(user)
        logger.info(f"✅ User signed in: {user.email}")
        return AuthSession(user=user, access_token=access_token)

    def register(self, data: RegisterRequest) -> User:
        if self.store.get_user_by_email(data.email):
            raise DuplicateEmailError("Ya existe una cuenta con este email")

        auth_id = None
        if self.is_remote:
            auth_id = self.store.sign_up(data.email, data.password, data.name)
            if not auth_id:
                raise UserServiceError("No se pudo completar el registro")

        result = self.store.create_user(
            User(
                id=auth_id or "",
                name=data.name,
                email=data.email,
                created_at=datetime.utcnow(),
            )
        )
        user = self._unwrap_user(result)
        self.local_store.set_current_user(user)
        return user

    def logout(self):
        self.local_store.set_current_user(None)

    def get_user_points(self, user: User) -> int:
        """Points earned across events; the ledger only exists remotely"""
        if not self.is_remote:
            return 0
        return self.store.get_user_points(user.id)

    # Role management
    def request_admin_role(self, user: User) -> OperationResult[User]:
        if user.role == UserRole.ADMIN:
            raise UserServiceError("El usuario ya es administrador")
        if user.admin_status == AdminStatus.PENDING:
            raise UserServiceError("Ya tienes una solicitud pendiente")

        return self.store.update_user(
            user.model_copy(update={"admin_status": AdminStatus.PENDING})
        )

    def list_admin_requests(self, reviewer: User) -> List[User]:
        self._require_manager(reviewer)
        return [
            user
            for user in self.list_users()
            if user.admin_status == AdminStatus.PENDING
        ]

    async def review_admin_request(
        self, user_id: str, approved: bool, reviewer: User
    ) -> Dict[str, Any]:
        """Approve or reject a pending request and notify the requester"""
        self._require_manager(reviewer)

        user = self.get_user(user_id)
        if user.admin_status != AdminStatus.PENDING:
            raise UserServiceError("El usuario no tiene una solicitud pendiente")

        changes: Dict[str, Any] = {
            "admin_status": AdminStatus.APPROVED if approved else AdminStatus.REJECTED
        }
        if approved:
            changes["role"] = UserRole.ADMIN

        result = self.store.update_user(user.model_copy(update=changes))
        if not result.ok:
            return {"result": result, "email_sent": False}

        email_sent = await self.notifications.send_admin_decision(
            user.name, user.email, approved
        )
        if not email_sent:
            logger.warning(f"User {user_id} reviewed but the e-mail was not sent")
        return {"result": result, "email_sent": email_sent}

    def update_role(
        self, user_id: str, role: UserRole, reviewer: User
    ) -> OperationResult[User]:
        self._require_manager(reviewer)
        if role == UserRole.ADMIN and reviewer.role != UserRole.ADMIN:
            raise PermissionDeniedError("Only admins can grant the admin role")

        user = self.get_user(user_id)
        return self.store.update_user(user.model_copy(update={"role": role}))

    # Helpers
    def _authenticate(self, credentials: LoginRequest) -> Dict[str, Any]:
        if credentials.password:
            auth_profile = self.store.sign_in(credentials.email, credentials.password)
        elif credentials.access_token:
            auth_profile = self.store.user_from_token(credentials.access_token)
            if auth_profile and (auth_profile.get("email") or "").lower() != credentials.email:
                auth_profile = None
        else:
            raise AuthenticationRequiredError("Se requiere contraseña para iniciar sesión")

        if not auth_profile:
            raise AuthenticationRequiredError("Email o contraseña incorrectos")
        return auth_profile

    def _get_or_create(self, email: str, profile: Dict[str, Any]) -> User:
        user = self.store.get_user_by_email(email)
        if user:
            return user

        logger.info(f"👤 Creating new user for {email}")
        result = self.store.create_user(
            User(
                id=profile.get("id") or "",
                name=profile.get("name") or email.split("@")[0],
                email=email,
                profile_image=profile.get("profile_image"),
                created_at=datetime.utcnow(),
            )
        )
        return self._unwrap_user(result)

    def _require_manager(self, user: User):
        if user.role not in (UserRole.MODERATOR, UserRole.ADMIN):
            raise PermissionDeniedError("Moderator or admin role required")

    def _unwrap_user(self, result: OperationResult[User]) -> User:
        if result.ok:
            return result.data
        if result.reason == "duplicate_email":
            raise DuplicateEmailError("Ya existe una cuenta con este email")
        raise StorageUnavailableError(result.reason)
