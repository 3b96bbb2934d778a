from .common import OperationResult, StorageUnavailableError
from .event import (
    Comment,
    CommentCreate,
    Event,
    EventCreate,
    EventUpdate,
    EventCounters,
    InteractionUpdate,
    UserInteractions,
)
from .user import (
    User,
    AuthSession,
    LoginRequest,
    RegisterRequest,
    RoleUpdate,
    AdminReview,
)
from .notification import EmailTemplate, SentNotification
from .image import ImageRegistryEntry, StoredImage

__all__ = [
    "OperationResult",
    "StorageUnavailableError",
    "Comment",
    "CommentCreate",
    "Event",
    "EventCreate",
    "EventUpdate",
    "EventCounters",
    "InteractionUpdate",
    "UserInteractions",
    "User",
    "AuthSession",
    "LoginRequest",
    "RegisterRequest",
    "RoleUpdate",
    "AdminReview",
    "EmailTemplate",
    "SentNotification",
    "ImageRegistryEntry",
    "StoredImage",
]
