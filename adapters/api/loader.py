"""
API loader - initializes repositories and services from settings.
"""

from datetime import timedelta

from config.settings import settings

# Infrastructure
from infrastructure.database import (
    SupabaseUserRepository,
    SupabaseEventRepository,
    MemoryDatabase,
    InMemoryUserRepository,
    InMemoryEventRepository,
)

# Core services
from core.services import AuthService, EventService


# === REPOSITORIES ===
if settings.db_backend == "memory":
    memory_db = MemoryDatabase()
    user_repo = InMemoryUserRepository(memory_db)
    event_repo = InMemoryEventRepository(memory_db)
else:
    user_repo = SupabaseUserRepository()
    event_repo = SupabaseEventRepository()


# === BUSINESS SERVICES ===
auth_service = AuthService(
    user_repo=user_repo,
    secret=settings.jwt_secret,
    algorithm=settings.jwt_algorithm,
    token_ttl=timedelta(hours=settings.token_ttl_hours),
)
event_service = EventService(event_repo=event_repo)
