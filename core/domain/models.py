"""
Domain models - the core of business logic.
These models are transport-agnostic; JSON names follow the public API
(camelCase, `_id`) through field aliases.
"""

import html
from pydantic import BaseModel, Field, EmailStr, HttpUrl, field_validator
from typing import Optional, List
from datetime import datetime, timezone
from uuid import UUID

from core.domain.constants import MIN_PASSWORD_LENGTH


def _clean_text(value: str) -> str:
    """Trim, reject empty, escape HTML"""
    value = value.strip()
    if not value:
        raise ValueError("must not be empty")
    return html.escape(value)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# === USER ===

class RegisterRequest(BaseModel):
    """Payload of POST /api/auth/register"""
    name: str
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)
    photo_url: HttpUrl = Field(alias="photoURL")

    @field_validator("name")
    @classmethod
    def clean_name(cls, v: str) -> str:
        return _clean_text(v)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()

    class Config:
        populate_by_name = True


class LoginRequest(BaseModel):
    """Payload of POST /api/auth/login"""
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class UserCreate(BaseModel):
    """Data for creating a new user"""
    name: str
    email: str
    password_hash: str
    photo_url: Optional[str] = None


class User(BaseModel):
    """Full user model"""
    id: UUID
    name: str
    email: str
    password_hash: str = Field(exclude=True, repr=False)
    photo_url: Optional[str] = None
    joined_events: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    def to_public(self) -> dict:
        """Profile as returned by the auth endpoints"""
        return {
            "_id": str(self.id),
            "name": self.name,
            "email": self.email,
            "photoURL": self.photo_url,
            "joinedEvents": list(self.joined_events),
        }

    def has_joined(self, event_id) -> bool:
        return str(event_id) in self.joined_events


# === EVENT ===

class EventInput(BaseModel):
    """Payload of POST /api/events and PUT /api/events/{id}"""
    title: str
    name: str
    date: datetime
    location: str
    description: str
    # Accepted for compatibility; the server derives the count from attendees
    attendee_count: int = Field(alias="attendeeCount", ge=0)
    image_url: Optional[HttpUrl] = Field(default=None, alias="imageURL")

    @field_validator("title", "name", "location", "description")
    @classmethod
    def clean_text(cls, v: str) -> str:
        return _clean_text(v)

    @field_validator("date")
    @classmethod
    def date_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)

    @field_validator("image_url", mode="before")
    @classmethod
    def empty_image(cls, v):
        # Forms send "" for "no image"
        if isinstance(v, str) and not v.strip():
            return None
        return v

    class Config:
        populate_by_name = True


class EventCreate(BaseModel):
    """Data for creating an event"""
    title: str
    name: str
    date: datetime
    location: str
    description: str
    image_url: Optional[str] = None
    created_by: UUID

    @classmethod
    def from_input(cls, data: EventInput, owner_id: UUID) -> "EventCreate":
        return cls(
            title=data.title,
            name=data.name,
            date=data.date,
            location=data.location,
            description=data.description,
            image_url=str(data.image_url) if data.image_url else None,
            created_by=owner_id,
        )


class EventUpdate(BaseModel):
    """Owner-editable event fields"""
    title: str
    name: str
    date: datetime
    location: str
    description: str
    image_url: Optional[str] = None

    @classmethod
    def from_input(cls, data: EventInput) -> "EventUpdate":
        return cls(
            title=data.title,
            name=data.name,
            date=data.date,
            location=data.location,
            description=data.description,
            image_url=str(data.image_url) if data.image_url else None,
        )


class Event(BaseModel):
    """Full event model"""
    id: UUID = Field(alias="_id")
    title: str
    name: str
    date: datetime
    location: str
    description: str
    attendee_count: int = Field(default=0, alias="attendeeCount")
    image_url: Optional[str] = Field(default=None, alias="imageURL")
    created_by: UUID = Field(alias="createdBy")
    attendees: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    class Config:
        from_attributes = True
        populate_by_name = True

    @field_validator("date")
    @classmethod
    def date_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)

    def to_dict(self) -> dict:
        """JSON-ready representation with public field names"""
        return self.model_dump(mode="json", by_alias=True)

    def is_owned_by(self, user_id) -> bool:
        return str(self.created_by) == str(user_id)

    def has_attendee(self, user_id) -> bool:
        return str(user_id) in self.attendees
