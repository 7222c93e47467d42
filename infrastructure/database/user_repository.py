"""
Supabase implementation of User repository.
"""

import logging
from typing import Optional
from uuid import UUID

from postgrest.exceptions import APIError

from core.domain.errors import DuplicateEmailError
from core.domain.models import User, UserCreate
from core.interfaces.repositories import IUserRepository
from infrastructure.database.supabase_client import get_supabase, run_sync

logger = logging.getLogger(__name__)

# Postgres unique_violation
UNIQUE_VIOLATION = "23505"


class SupabaseUserRepository(IUserRepository):
    """Supabase implementation of user repository"""

    def _to_model(self, data: dict) -> User:
        """Convert database row to User model"""
        return User(
            id=data["id"],
            name=data["name"],
            email=data["email"],
            password_hash=data["password_hash"],
            photo_url=data.get("photo_url"),
            joined_events=data.get("joined_events") or [],
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    @run_sync
    def _get_by_id_sync(self, user_id: UUID) -> Optional[dict]:
        response = get_supabase().table("users").select("*").eq("id", str(user_id)).execute()
        return response.data[0] if response.data else None

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        data = await self._get_by_id_sync(user_id)
        return self._to_model(data) if data else None

    @run_sync
    def _get_by_email_sync(self, email: str) -> Optional[dict]:
        response = get_supabase().table("users").select("*").eq("email", email).execute()
        return response.data[0] if response.data else None

    async def get_by_email(self, email: str) -> Optional[User]:
        data = await self._get_by_email_sync(email)
        return self._to_model(data) if data else None

    @run_sync
    def _create_sync(self, user_data: UserCreate) -> dict:
        data = {
            "name": user_data.name,
            "email": user_data.email,
            "password_hash": user_data.password_hash,
            "photo_url": user_data.photo_url,
            "joined_events": [],
        }
        try:
            response = get_supabase().table("users").insert(data).execute()
        except APIError as e:
            # Two registrations racing past the service-level check
            if e.code == UNIQUE_VIOLATION:
                raise DuplicateEmailError()
            raise
        return response.data[0]

    async def create(self, user_data: UserCreate) -> User:
        data = await self._create_sync(user_data)
        return self._to_model(data)
