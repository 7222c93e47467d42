"""
Supabase implementation of Event repository.
Join and delete go through Postgres functions (see schema.sql) so that the
events and users tables change in one transaction.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, List
from uuid import UUID

from core.domain.models import Event, EventCreate, EventUpdate
from core.interfaces.repositories import IEventRepository
from infrastructure.database.supabase_client import get_supabase, run_sync

logger = logging.getLogger(__name__)


class SupabaseEventRepository(IEventRepository):
    """Supabase implementation of event repository"""

    def _to_model(self, data: dict) -> Event:
        """Convert database row to Event model"""
        return Event(
            id=data["id"],
            title=data["title"],
            name=data["name"],
            date=data["date"],
            location=data["location"],
            description=data["description"],
            attendee_count=data.get("attendee_count", 0),
            image_url=data.get("image_url"),
            created_by=data["created_by"],
            attendees=data.get("attendees") or [],
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    @run_sync
    def _get_by_id_sync(self, event_id: UUID) -> Optional[dict]:
        response = get_supabase().table("events").select("*").eq("id", str(event_id)).execute()
        return response.data[0] if response.data else None

    async def get_by_id(self, event_id: UUID) -> Optional[Event]:
        data = await self._get_by_id_sync(event_id)
        return self._to_model(data) if data else None

    @run_sync
    def _list_all_sync(self) -> List[dict]:
        response = get_supabase().table("events").select("*")\
            .order("date", desc=True)\
            .execute()
        return response.data or []

    async def list_all(self) -> List[Event]:
        return [self._to_model(d) for d in await self._list_all_sync()]

    @run_sync
    def _list_by_owner_sync(self, owner_id: UUID) -> List[dict]:
        response = get_supabase().table("events").select("*")\
            .eq("created_by", str(owner_id))\
            .order("date", desc=True)\
            .execute()
        return response.data or []

    async def list_by_owner(self, owner_id: UUID) -> List[Event]:
        return [self._to_model(d) for d in await self._list_by_owner_sync(owner_id)]

    @run_sync
    def _list_upcoming_sync(self, after: datetime, limit: int) -> List[dict]:
        response = get_supabase().table("events").select("*")\
            .gt("date", after.isoformat())\
            .order("date")\
            .limit(limit)\
            .execute()
        return response.data or []

    async def list_upcoming(self, after: datetime, limit: int) -> List[Event]:
        return [self._to_model(d) for d in await self._list_upcoming_sync(after, limit)]

    @run_sync
    def _create_sync(self, event_data: EventCreate) -> dict:
        data = {
            "title": event_data.title,
            "name": event_data.name,
            "date": event_data.date.isoformat(),
            "location": event_data.location,
            "description": event_data.description,
            "image_url": event_data.image_url,
            "created_by": str(event_data.created_by),
            "attendee_count": 0,
            "attendees": [],
        }
        response = get_supabase().table("events").insert(data).execute()
        return response.data[0]

    async def create(self, event_data: EventCreate) -> Event:
        data = await self._create_sync(event_data)
        return self._to_model(data)

    @run_sync
    def _update_sync(self, event_id: UUID, event_data: EventUpdate) -> Optional[dict]:
        data = {
            "title": event_data.title,
            "name": event_data.name,
            "date": event_data.date.isoformat(),
            "location": event_data.location,
            "description": event_data.description,
            "image_url": event_data.image_url,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        response = get_supabase().table("events").update(data).eq("id", str(event_id)).execute()
        return response.data[0] if response.data else None

    async def update(self, event_id: UUID, event_data: EventUpdate) -> Optional[Event]:
        data = await self._update_sync(event_id, event_data)
        return self._to_model(data) if data else None

    @run_sync
    def _delete_sync(self, event_id: UUID) -> bool:
        response = get_supabase().rpc("delete_event", {"p_event_id": str(event_id)}).execute()
        return bool(response.data)

    async def delete(self, event_id: UUID) -> bool:
        return await self._delete_sync(event_id)

    @run_sync
    def _join_sync(self, event_id: UUID, user_id: UUID) -> Optional[dict]:
        response = get_supabase().rpc(
            "join_event",
            {"p_event_id": str(event_id), "p_user_id": str(user_id)},
        ).execute()
        logger.debug(f"[EVENT_REPO] join_event rpc returned {response.data}")
        return response.data[0] if response.data else None

    async def join(self, event_id: UUID, user_id: UUID) -> Optional[Event]:
        data = await self._join_sync(event_id, user_id)
        return self._to_model(data) if data else None
