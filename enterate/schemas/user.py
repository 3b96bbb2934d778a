from pydantic import BaseModel, Field, validator, computed_field
from typing import Optional
from datetime import datetime
from ..models.enums import UserRole, AdminStatus
from ..utils.validation import ValidationHelpers


class UserBase(BaseModel):
    email: str = Field(..., description="User's email address")
    name: str = Field(
        ..., min_length=1, max_length=100, description="User's display name"
    )
    profile_image: Optional[str] = Field(None, description="Avatar URL")


class User(UserBase):
    """Account as stored in either backend"""

    id: str
    role: UserRole = UserRole.USER
    admin_status: Optional[AdminStatus] = None
    created_at: Optional[datetime] = None

    @computed_field
    @property
    def can_manage_events(self) -> bool:
        return self.role in (UserRole.MODERATOR, UserRole.ADMIN)


class LoginRequest(BaseModel):
    email: str
    password: Optional[str] = None
    # Supabase access token from an OAuth sign-in
    access_token: Optional[str] = None
    # OAuth-derived profile data, used when no password is given
    name: Optional[str] = None
    profile_image: Optional[str] = None

    @validator("email")
    def validate_email(cls, v):
        v = v.strip().lower()
        if not ValidationHelpers.validate_email(v):
            raise ValueError("Email inválido")
        return v


class AuthSession(BaseModel):
    """Signed-in user plus the bearer token for later requests"""

    user: User
    access_token: Optional[str] = None
    token_type: str = "bearer"


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str
    password: str
    confirm_password: str

    @validator("name")
    def name_not_blank(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("El nombre es obligatorio")
        return v

    @validator("email")
    def validate_email(cls, v):
        v = v.strip().lower()
        if not ValidationHelpers.validate_email(v):
            raise ValueError("Email inválido")
        return v

    @validator("confirm_password")
    def passwords_valid(cls, v, values):
        error = ValidationHelpers.password_error(values.get("password"), v)
        if error:
            raise ValueError(error)
        return v


class RoleUpdate(BaseModel):
    role: UserRole


class AdminReview(BaseModel):
    approved: bool
