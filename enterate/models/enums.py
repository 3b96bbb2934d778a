from enum import Enum


class UserRole(str, Enum):
    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"


class AdminStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class InteractionType(str, Enum):
    LIKE = "like"
    ATTEND = "attend"


class BackendKind(str, Enum):
    REMOTE = "remote"
    LOCAL = "local"
