from fastapi import Depends, Header, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from typing import Optional
import logging

from ..context import AppContext
from ..models.enums import UserRole
from ..schemas.common import StorageUnavailableError
from ..schemas.user import User
from ..services.user_service import UserServiceError

security = HTTPBearer(auto_error=False)
logger = logging.getLogger(__name__)


def get_app_context(request: Request) -> AppContext:
    context = getattr(request.app.state, "context", None)
    if context is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Storage is not initialized yet",
        )
    return context


# Auth Helper Functions
async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    x_user_id: Optional[str] = Header(None),
    context: AppContext = Depends(get_app_context),
) -> Optional[User]:
    """Resolve the caller for the active backend.

    Remote: a Supabase bearer token, else the session opened by a verified
    sign-in on this device. Local: the X-User-Id header, else the session user.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if context.users.is_remote:
        if credentials:
            try:
                user = context.users.user_for_token(credentials.credentials)
            except (UserServiceError, StorageUnavailableError) as e:
                logger.error(f"Authentication error: {e}")
                raise credentials_exception
            if not user:
                raise credentials_exception
            return user
        if x_user_id:
            logger.warning("X-User-Id header rejected by the remote backend")
            raise credentials_exception
        return context.users.current_user()

    if x_user_id:
        user = context.users.store.get_user(x_user_id)
        if not user:
            logger.warning(f"Unknown user id in X-User-Id header: {x_user_id}")
            raise credentials_exception
        return user

    return context.users.current_user()


async def require_user(current_user: Optional[User] = Depends(get_current_user)) -> User:
    if current_user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Debes iniciar sesión",
        )
    return current_user


async def require_event_manager(current_user: User = Depends(require_user)) -> User:
    """Moderators and admins only"""
    if current_user.role not in (UserRole.MODERATOR, UserRole.ADMIN):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Moderator or admin role required",
        )
    return current_user
