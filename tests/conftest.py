"""
Shared fixtures: in-memory repositories, services with a fixed clock,
the aiohttp test client, and a scripted fake API for client-side tests.
"""

import json
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import httpx
import pytest
from argon2 import PasswordHasher

from core.domain.models import EventInput, RegisterRequest
from core.services import AuthService, EventService
from infrastructure.database import MemoryDatabase, InMemoryUserRepository, InMemoryEventRepository
from adapters.api import create_api_app

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
SECRET = "test-secret"


def event_body(**overrides) -> dict:
    """Valid create/update JSON body"""
    body = {
        "title": "Python Meetup",
        "name": "Ada Lovelace",
        "date": (NOW + timedelta(days=3)).isoformat(),
        "location": "Hub Coworking",
        "description": "Lightning talks and pizza",
        "attendeeCount": 0,
        "imageURL": "https://example.com/meetup.png",
    }
    body.update(overrides)
    return body


def user_body(**overrides) -> dict:
    body = {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "password": "secret123",
        "photoURL": "https://example.com/ada.png",
    }
    body.update(overrides)
    return body


@pytest.fixture
def db():
    return MemoryDatabase()


@pytest.fixture
def user_repo(db):
    return InMemoryUserRepository(db)


@pytest.fixture
def event_repo(db):
    return InMemoryEventRepository(db)


@pytest.fixture
def auth_service(user_repo):
    # Cheapest Argon2 parameters; the real ones are slow on purpose
    hasher = PasswordHasher(time_cost=1, memory_cost=8, parallelism=1)
    return AuthService(user_repo, secret=SECRET, hasher=hasher)


@pytest.fixture
def event_service(event_repo):
    return EventService(event_repo, clock=lambda: NOW)


@pytest.fixture
def make_user(auth_service):
    """Factory: register a user, return it"""
    counter = {"n": 0}

    async def _make_user(name: str = "User"):
        counter["n"] += 1
        _, user = await auth_service.register(RegisterRequest.model_validate(
            user_body(name=name, email=f"user{counter['n']}@example.com")
        ))
        return user
    return _make_user


@pytest.fixture
def make_event(event_service):
    """Factory: create an event owned by `owner`"""
    async def _make_event(owner, **overrides):
        return await event_service.create_event(owner, EventInput.model_validate(event_body(**overrides)))
    return _make_event


@pytest.fixture
def api_app(auth_service, event_service):
    return create_api_app(auth_service, event_service)


@pytest.fixture
async def api(aiohttp_client, api_app):
    return await aiohttp_client(api_app)


@pytest.fixture
def signup(api):
    """Factory: register through the API, return (token, user json)"""
    async def _signup(email: str = "ada@example.com", name: str = "Ada Lovelace"):
        resp = await api.post("/api/auth/register", json=user_body(email=email, name=name))
        assert resp.status == 201
        data = await resp.json()
        return data["token"], data["user"]
    return _signup


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


# === Client-side fake server ===

def server_event(**overrides) -> dict:
    """Event JSON as the API returns it"""
    event = {
        "_id": str(uuid4()),
        "title": "Python Meetup",
        "name": "Ada Lovelace",
        "date": (NOW + timedelta(days=3)).isoformat(),
        "location": "Hub Coworking",
        "description": "Lightning talks and pizza",
        "attendeeCount": 0,
        "imageURL": None,
        "createdBy": str(uuid4()),
        "attendees": [],
        "createdAt": NOW.isoformat(),
        "updatedAt": NOW.isoformat(),
    }
    event.update(overrides)
    return event


class FakeApi:
    """
    Scripted stand-in for the REST API behind httpx.MockTransport.
    Routes are (method, path) -> callable(request) -> httpx.Response.
    """

    def __init__(self):
        self.user = {
            "_id": str(uuid4()),
            "name": "Ada Lovelace",
            "email": "ada@example.com",
            "photoURL": "https://example.com/ada.png",
            "joinedEvents": [],
        }
        self.events = []
        self.requests = []
        self.valid_tokens = set()
        self.issued = 0
        self.refresh_ok = True
        self.routes = {
            ("POST", "/api/auth/login"): self._login,
            ("POST", "/api/auth/register"): self._login,
            ("GET", "/api/auth/verify"): self._user,
            ("GET", "/api/auth/me"): self._user,
            ("POST", "/api/auth/refresh"): self._refresh,
            ("GET", "/api/events"): lambda r: httpx.Response(200, json=self.events),
            ("GET", "/api/events/my-events"): lambda r: httpx.Response(200, json=self.events),
        }

    def _issue(self) -> str:
        self.issued += 1
        token = f"token-{self.issued}"
        self.valid_tokens.add(token)
        return token

    def _authorized(self, request) -> bool:
        header = request.headers.get("Authorization", "")
        return header.startswith("Bearer ") and header[7:] in self.valid_tokens

    def _login(self, request):
        return httpx.Response(200, json={"message": "Login successful", "token": self._issue(), "user": self.user})

    def _user(self, request):
        if not self._authorized(request):
            return httpx.Response(401, json={"message": "Invalid token"})
        return httpx.Response(200, json={"user": self.user})

    def _refresh(self, request):
        if not self.refresh_ok or not self._authorized(request):
            return httpx.Response(401, json={"message": "Invalid token"})
        return httpx.Response(200, json={"token": self._issue()})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": "Not Found"})
        return route(request)

    def calls(self, method: str, path: str) -> list:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    @staticmethod
    def body(request) -> dict:
        return json.loads(request.content)


@pytest.fixture
def fake_api():
    return FakeApi()


@pytest.fixture
def transport(fake_api):
    return httpx.MockTransport(fake_api.handler)
