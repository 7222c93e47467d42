"""Data-access interfaces implemented by infrastructure.database."""

from core.interfaces.repositories import (
    IUserRepository,
    IEventRepository,
)

__all__ = [
    "IUserRepository",
    "IEventRepository",
]
