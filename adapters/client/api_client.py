"""
EventHub API client - thin async wrapper over the REST endpoints.
Attaches the stored bearer token to authenticated calls and turns error
responses into typed exceptions carrying the server's message.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

import httpx
from pydantic import BaseModel, Field

from core.domain.models import Event

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Error response from the API (or no response at all, status 0)"""

    def __init__(self, status: int, message: str, errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(message)
        self.status = status
        self.message = message
        self.errors = errors or []

    def describe(self) -> str:
        """Message plus field details, for display"""
        if not self.errors:
            return self.message
        details = "; ".join(f"{e.get('field')}: {e.get('msg')}" for e in self.errors)
        return f"{self.message} ({details})"


class SessionExpiredError(ApiError):
    """401 - token missing, invalid or expired. The stored token is dropped."""


class UserProfile(BaseModel):
    """User payload returned by the auth endpoints"""
    id: str = Field(alias="_id")
    name: str
    email: str
    photo_url: Optional[str] = Field(default=None, alias="photoURL")
    joined_events: List[str] = Field(default_factory=list, alias="joinedEvents")

    class Config:
        populate_by_name = True


def event_payload(
    title: str,
    name: str,
    date: datetime,
    location: str,
    description: str,
    image_url: Optional[str] = None,
    attendee_count: int = 0,
) -> Dict[str, Any]:
    """Body for create/update requests"""
    return {
        "title": title,
        "name": name,
        "date": date.isoformat(),
        "location": location,
        "description": description,
        "attendeeCount": attendee_count,
        "imageURL": image_url or None,
    }


class EventHubClient:
    """Async client for the EventHub REST API"""

    def __init__(self, base_url: str, token_storage, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.token_storage = token_storage
        self._http = httpx.AsyncClient(base_url=base_url.rstrip("/"), transport=transport, timeout=15)

    async def close(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "EventHubClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    @property
    def token(self) -> Optional[str]:
        return self.token_storage.get()

    async def _request(self, method: str, path: str, auth: bool = False, json: Any = None) -> Any:
        headers = {}
        if auth:
            token = self.token
            if not token:
                raise SessionExpiredError(401, "Not signed in")
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = await self._http.request(method, path, json=json, headers=headers)
        except httpx.TransportError as e:
            logger.error(f"[CLIENT] {method} {path} failed: {e}")
            raise ApiError(0, f"Cannot reach server: {e}")

        try:
            body = response.json()
        except ValueError:
            body = {"message": response.text}

        if response.is_success:
            return body

        message = body.get("message") if isinstance(body, dict) else None
        message = message or response.reason_phrase or "Request failed"
        errors = body.get("errors") if isinstance(body, dict) else None
        logger.debug(f"[CLIENT] {method} {path} -> {response.status_code}: {message}")

        if response.status_code == 401:
            self.token_storage.clear()
            raise SessionExpiredError(401, message)
        raise ApiError(response.status_code, message, errors)

    # === AUTH ===

    async def register(self, name: str, email: str, password: str, photo_url: str) -> Tuple[str, UserProfile]:
        body = await self._request("POST", "/api/auth/register", json={
            "name": name,
            "email": email,
            "password": password,
            "photoURL": photo_url,
        })
        self.token_storage.set(body["token"])
        return body["token"], UserProfile.model_validate(body["user"])

    async def login(self, email: str, password: str) -> Tuple[str, UserProfile]:
        body = await self._request("POST", "/api/auth/login", json={"email": email, "password": password})
        self.token_storage.set(body["token"])
        return body["token"], UserProfile.model_validate(body["user"])

    async def verify(self) -> UserProfile:
        body = await self._request("GET", "/api/auth/verify", auth=True)
        return UserProfile.model_validate(body["user"])

    async def me(self) -> UserProfile:
        body = await self._request("GET", "/api/auth/me", auth=True)
        return UserProfile.model_validate(body["user"])

    async def refresh(self) -> str:
        body = await self._request("POST", "/api/auth/refresh", auth=True)
        self.token_storage.set(body["token"])
        return body["token"]

    # === EVENTS ===

    async def list_events(self) -> List[Event]:
        body = await self._request("GET", "/api/events")
        return [Event.model_validate(e) for e in body]

    async def upcoming_events(self) -> List[Event]:
        body = await self._request("GET", "/api/events/upcoming")
        return [Event.model_validate(e) for e in body]

    async def my_events(self) -> List[Event]:
        body = await self._request("GET", "/api/events/my-events", auth=True)
        return [Event.model_validate(e) for e in body]

    async def get_event(self, event_id: str) -> Event:
        body = await self._request("GET", f"/api/events/{event_id}", auth=True)
        return Event.model_validate(body)

    async def create_event(self, payload: Dict[str, Any]) -> Event:
        body = await self._request("POST", "/api/events", auth=True, json=payload)
        return Event.model_validate(body["event"])

    async def update_event(self, event_id: str, payload: Dict[str, Any]) -> Event:
        body = await self._request("PUT", f"/api/events/{event_id}", auth=True, json=payload)
        return Event.model_validate(body["event"])

    async def delete_event(self, event_id: str) -> None:
        await self._request("DELETE", f"/api/events/{event_id}", auth=True)

    async def join_event(self, event_id: str) -> Event:
        body = await self._request("POST", f"/api/events/{event_id}/join", auth=True)
        return Event.model_validate(body)
