"""
Repository interfaces - abstractions for data access.
This allows swapping implementations (Supabase -> in-memory, etc.)
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, List
from uuid import UUID
from core.domain.models import (
    User, UserCreate,
    Event, EventCreate, EventUpdate,
)


class IUserRepository(ABC):
    """Interface for user data access"""

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by internal ID"""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by (normalized) email"""
        pass

    @abstractmethod
    async def create(self, user_data: UserCreate) -> User:
        """Create a new user. Raises DuplicateEmailError if the email is taken"""
        pass


class IEventRepository(ABC):
    """Interface for event data access"""

    @abstractmethod
    async def get_by_id(self, event_id: UUID) -> Optional[Event]:
        """Get event by ID"""
        pass

    @abstractmethod
    async def list_all(self) -> List[Event]:
        """All events, newest date first"""
        pass

    @abstractmethod
    async def list_by_owner(self, owner_id: UUID) -> List[Event]:
        """Events created by a user, newest date first"""
        pass

    @abstractmethod
    async def list_upcoming(self, after: datetime, limit: int) -> List[Event]:
        """Events dated strictly after `after`, soonest first"""
        pass

    @abstractmethod
    async def create(self, event_data: EventCreate) -> Event:
        """Create a new event with no attendees"""
        pass

    @abstractmethod
    async def update(self, event_id: UUID, event_data: EventUpdate) -> Optional[Event]:
        """Replace editable fields. Attendees are left untouched"""
        pass

    @abstractmethod
    async def delete(self, event_id: UUID) -> bool:
        """Delete event and drop it from every attendee's joined events"""
        pass

    @abstractmethod
    async def join(self, event_id: UUID, user_id: UUID) -> Optional[Event]:
        """
        Add user to event attendees, bump the count and record the event
        in the user's joined events, all in one atomic step.
        Returns the updated event, or None if the user was already an
        attendee (or the event vanished).
        """
        pass
