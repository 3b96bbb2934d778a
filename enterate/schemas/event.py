from pydantic import BaseModel, validator, Field, computed_field
from typing import List, Optional
from datetime import datetime
from ..models.enums import InteractionType
from ..utils.constants import AppConstants
from ..utils.validation import ValidationHelpers


class Comment(BaseModel):
    id: str
    event_id: str
    user_id: str
    user_name: str = ""
    user_profile_image: Optional[str] = None
    content: str
    created_at: datetime = Field(default_factory=datetime.utcnow)


class CommentCreate(BaseModel):
    content: str = Field(..., max_length=AppConstants.MAX_COMMENT_LENGTH)

    @validator("content")
    def content_not_blank(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("El comentario no puede estar vacío")
        return v


class EventBase(BaseModel):
    title: str
    description: str = ""
    date: str
    time: str
    end_time: Optional[str] = None
    location: str = ""
    category: str = ""
    image_url: Optional[str] = None
    price: float = Field(0, ge=0)
    points: int = Field(0, ge=0)


class EventCreate(EventBase):
    title: str = Field(..., min_length=1, max_length=AppConstants.MAX_TITLE_LENGTH)
    description: str = Field(
        ..., min_length=1, max_length=AppConstants.MAX_DESCRIPTION_LENGTH
    )
    location: str = Field(..., min_length=1, max_length=AppConstants.MAX_LOCATION_LENGTH)
    category: str = Field(..., min_length=1, max_length=50)

    @validator("title", "description", "location", "category")
    def not_blank(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Este campo es obligatorio")
        return v

    @validator("date")
    def valid_date(cls, v):
        if not ValidationHelpers.validate_date(v):
            raise ValueError("La fecha debe tener el formato AAAA-MM-DD")
        return v

    @validator("time", "end_time")
    def valid_time(cls, v):
        if v is not None and not ValidationHelpers.validate_time(v):
            raise ValueError("La hora debe tener el formato HH:MM")
        return v

    @validator("image_url")
    def valid_image(cls, v):
        if v and not ValidationHelpers.validate_image_reference(v):
            raise ValueError("Debe ser una URL válida")
        return v or None


class EventUpdate(BaseModel):
    title: Optional[str] = Field(
        None, min_length=1, max_length=AppConstants.MAX_TITLE_LENGTH
    )
    description: Optional[str] = Field(
        None, min_length=1, max_length=AppConstants.MAX_DESCRIPTION_LENGTH
    )
    date: Optional[str] = None
    time: Optional[str] = None
    end_time: Optional[str] = None
    location: Optional[str] = Field(
        None, min_length=1, max_length=AppConstants.MAX_LOCATION_LENGTH
    )
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    image_url: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    points: Optional[int] = Field(None, ge=0)

    # Omit a field to keep it; only end_time and image_url can be cleared
    @validator(
        "title", "description", "date", "time", "location", "category", "price", "points",
        pre=True,
    )
    def not_null(cls, v):
        if v is None:
            raise ValueError("Este campo no puede ser nulo")
        return v

    @validator("date")
    def valid_date(cls, v):
        if v is not None and not ValidationHelpers.validate_date(v):
            raise ValueError("La fecha debe tener el formato AAAA-MM-DD")
        return v

    @validator("time", "end_time")
    def valid_time(cls, v):
        if v is not None and not ValidationHelpers.validate_time(v):
            raise ValueError("La hora debe tener el formato HH:MM")
        return v

    @validator("image_url")
    def valid_image(cls, v):
        if v and not ValidationHelpers.validate_image_reference(v):
            raise ValueError("Debe ser una URL válida")
        return v


class Event(EventBase):
    id: str
    organizer_name: str = ""
    created_by: str = ""
    likes: int = Field(0, ge=0)
    liked_by: List[str] = Field(default_factory=list)
    attendees: List[str] = Field(default_factory=list)
    comments: List[Comment] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # COMPUTED FIELDS
    @computed_field
    @property
    def attendee_count(self) -> int:
        return len(self.attendees)

    @computed_field
    @property
    def is_free(self) -> bool:
        return self.price == 0


class InteractionUpdate(BaseModel):
    present: bool


class EventCounters(BaseModel):
    """Denormalized interaction state of one event"""

    event_id: str
    likes: int
    liked_by: List[str]
    attendees: List[str]


class UserInteractions(BaseModel):
    event_id: str
    user_id: str
    is_liked: bool
    is_attending: bool

    @classmethod
    def from_event(cls, event: Event, user_id: str) -> "UserInteractions":
        return cls(
            event_id=event.id,
            user_id=user_id,
            is_liked=user_id in event.liked_by,
            is_attending=user_id in event.attendees,
        )


def interaction_field(kind: InteractionType) -> str:
    """Name of the embedded id list that mirrors an interaction kind"""
    return "liked_by" if kind == InteractionType.LIKE else "attendees"
