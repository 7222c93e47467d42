"""
In-memory implementation of the repositories.
Used by tests and by DB_BACKEND=memory for local runs without Supabase.
Both repositories share one MemoryDatabase, whose lock makes every write
(including the two-collection join) atomic.
"""

import asyncio
from datetime import datetime, timezone
from typing import Dict, List, Optional
from uuid import UUID, uuid4

from core.domain.errors import DuplicateEmailError
from core.domain.models import User, UserCreate, Event, EventCreate, EventUpdate
from core.interfaces.repositories import IUserRepository, IEventRepository


def _now() -> datetime:
    return datetime.now(timezone.utc)


class MemoryDatabase:
    """The two collections plus the lock guarding them"""

    def __init__(self):
        self.users: Dict[UUID, User] = {}
        self.events: Dict[UUID, Event] = {}
        self.lock = asyncio.Lock()


class InMemoryUserRepository(IUserRepository):

    def __init__(self, db: MemoryDatabase):
        self.db = db

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        user = self.db.users.get(user_id)
        return user.model_copy(deep=True) if user else None

    async def get_by_email(self, email: str) -> Optional[User]:
        for user in self.db.users.values():
            if user.email == email:
                return user.model_copy(deep=True)
        return None

    async def create(self, user_data: UserCreate) -> User:
        async with self.db.lock:
            if any(u.email == user_data.email for u in self.db.users.values()):
                raise DuplicateEmailError()
            now = _now()
            user = User(
                id=uuid4(),
                name=user_data.name,
                email=user_data.email,
                password_hash=user_data.password_hash,
                photo_url=user_data.photo_url,
                joined_events=[],
                created_at=now,
                updated_at=now,
            )
            self.db.users[user.id] = user
            return user.model_copy(deep=True)


class InMemoryEventRepository(IEventRepository):

    def __init__(self, db: MemoryDatabase):
        self.db = db

    def _copies(self, events) -> List[Event]:
        return [e.model_copy(deep=True) for e in events]

    async def get_by_id(self, event_id: UUID) -> Optional[Event]:
        event = self.db.events.get(event_id)
        return event.model_copy(deep=True) if event else None

    async def list_all(self) -> List[Event]:
        return self._copies(sorted(self.db.events.values(), key=lambda e: e.date, reverse=True))

    async def list_by_owner(self, owner_id: UUID) -> List[Event]:
        owned = [e for e in self.db.events.values() if e.created_by == owner_id]
        return self._copies(sorted(owned, key=lambda e: e.date, reverse=True))

    async def list_upcoming(self, after: datetime, limit: int) -> List[Event]:
        upcoming = sorted(
            (e for e in self.db.events.values() if e.date > after),
            key=lambda e: e.date,
        )
        return self._copies(upcoming[:limit])

    async def create(self, event_data: EventCreate) -> Event:
        now = _now()
        event = Event(
            id=uuid4(),
            title=event_data.title,
            name=event_data.name,
            date=event_data.date,
            location=event_data.location,
            description=event_data.description,
            attendee_count=0,
            image_url=event_data.image_url,
            created_by=event_data.created_by,
            attendees=[],
            created_at=now,
            updated_at=now,
        )
        async with self.db.lock:
            self.db.events[event.id] = event
        return event.model_copy(deep=True)

    async def update(self, event_id: UUID, event_data: EventUpdate) -> Optional[Event]:
        async with self.db.lock:
            event = self.db.events.get(event_id)
            if not event:
                return None
            updated = event.model_copy(update={
                **event_data.model_dump(),
                "updated_at": _now(),
            })
            self.db.events[event_id] = updated
            return updated.model_copy(deep=True)

    async def delete(self, event_id: UUID) -> bool:
        async with self.db.lock:
            if self.db.events.pop(event_id, None) is None:
                return False
            key = str(event_id)
            for user in self.db.users.values():
                if key in user.joined_events:
                    user.joined_events.remove(key)
                    user.updated_at = _now()
            return True

    async def join(self, event_id: UUID, user_id: UUID) -> Optional[Event]:
        async with self.db.lock:
            event = self.db.events.get(event_id)
            if not event or event.has_attendee(user_id):
                return None

            now = _now()
            event.attendees.append(str(user_id))
            event.attendee_count += 1
            event.updated_at = now

            user = self.db.users.get(user_id)
            if user and not user.has_joined(event_id):
                user.joined_events.append(str(event_id))
                user.updated_at = now

            return event.model_copy(deep=True)
