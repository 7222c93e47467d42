from infrastructure.database.user_repository import SupabaseUserRepository
from infrastructure.database.event_repository import SupabaseEventRepository
from infrastructure.database.memory_repository import (
    MemoryDatabase,
    InMemoryUserRepository,
    InMemoryEventRepository,
)

__all__ = [
    "SupabaseUserRepository",
    "SupabaseEventRepository",
    "MemoryDatabase",
    "InMemoryUserRepository",
    "InMemoryEventRepository",
]
