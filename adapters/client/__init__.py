"""
EventHub client - API client, auth session, event store and the
`eventhub` command line built on them.
"""

from adapters.client.api_client import ApiError, EventHubClient, SessionExpiredError, UserProfile
from adapters.client.session import AuthSession
from adapters.client.store import EventStore

__all__ = [
    "ApiError",
    "AuthSession",
    "EventHubClient",
    "EventStore",
    "SessionExpiredError",
    "UserProfile",
]
