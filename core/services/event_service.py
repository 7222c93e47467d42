"""
Event service - business logic for event operations.
"""

import logging
from datetime import datetime, timezone
from typing import List, Union
from uuid import UUID

from core.domain.constants import (
    UPCOMING_EVENTS_LIMIT,
    MSG_EVENT_NOT_FOUND,
    MSG_NOT_OWNER_UPDATE,
    MSG_NOT_OWNER_DELETE,
)
from core.domain.errors import AlreadyJoinedError, ForbiddenError, NotFoundError
from core.domain.models import Event, EventCreate, EventInput, EventUpdate, User
from core.interfaces.repositories import IEventRepository

logger = logging.getLogger(__name__)


def parse_event_id(raw: Union[str, UUID]) -> UUID:
    """Event ids arrive as path segments; anything unparsable is simply unknown"""
    if isinstance(raw, UUID):
        return raw
    try:
        return UUID(raw)
    except (TypeError, ValueError):
        raise NotFoundError(MSG_EVENT_NOT_FOUND)


class EventService:
    """Service for event-related operations"""

    def __init__(self, event_repo: IEventRepository, clock=None):
        self.event_repo = event_repo
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def list_events(self) -> List[Event]:
        """All events, newest date first"""
        return await self.event_repo.list_all()

    async def list_upcoming(self, limit: int = UPCOMING_EVENTS_LIMIT) -> List[Event]:
        """Future events, soonest first"""
        return await self.event_repo.list_upcoming(self._clock(), limit)

    async def list_owned(self, user: User) -> List[Event]:
        return await self.event_repo.list_by_owner(user.id)

    async def get_event(self, event_id: Union[str, UUID]) -> Event:
        event = await self.event_repo.get_by_id(parse_event_id(event_id))
        if not event:
            raise NotFoundError(MSG_EVENT_NOT_FOUND)
        return event

    async def create_event(self, user: User, data: EventInput) -> Event:
        event = await self.event_repo.create(EventCreate.from_input(data, user.id))
        logger.info(f"[EVENTS] User {user.id} created event {event.id}")
        return event

    async def update_event(self, user: User, event_id: Union[str, UUID], data: EventInput) -> Event:
        event = await self.get_event(event_id)
        if not event.is_owned_by(user.id):
            logger.warning(f"[EVENTS] User {user.id} tried to update event {event.id}")
            raise ForbiddenError(MSG_NOT_OWNER_UPDATE)

        updated = await self.event_repo.update(event.id, EventUpdate.from_input(data))
        if not updated:
            raise NotFoundError(MSG_EVENT_NOT_FOUND)
        logger.info(f"[EVENTS] Event {event.id} updated")
        return updated

    async def delete_event(self, user: User, event_id: Union[str, UUID]) -> None:
        event = await self.get_event(event_id)
        if not event.is_owned_by(user.id):
            logger.warning(f"[EVENTS] User {user.id} tried to delete event {event.id}")
            raise ForbiddenError(MSG_NOT_OWNER_DELETE)

        if not await self.event_repo.delete(event.id):
            raise NotFoundError(MSG_EVENT_NOT_FOUND)
        logger.info(f"[EVENTS] Event {event.id} deleted")

    async def join_event(self, user: User, event_id: Union[str, UUID]) -> Event:
        """
        Join user to event.
        Returns the updated event. Raises NotFoundError / AlreadyJoinedError.
        """
        event = await self.get_event(event_id)

        if event.has_attendee(user.id):
            raise AlreadyJoinedError()

        updated = await self.event_repo.join(event.id, user.id)
        if updated is None:
            # Lost a race with a concurrent join, or the event was deleted meanwhile
            if await self.event_repo.get_by_id(event.id) is None:
                raise NotFoundError(MSG_EVENT_NOT_FOUND)
            raise AlreadyJoinedError()

        logger.info(f"[EVENTS] User {user.id} joined event {event.id} ({updated.attendee_count} attending)")
        return updated
