from core.services.auth_service import AuthService
from core.services.event_service import EventService, parse_event_id

__all__ = [
    "AuthService",
    "EventService",
    "parse_event_id",
]
