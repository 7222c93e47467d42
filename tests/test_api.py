from datetime import timedelta
from uuid import uuid4

import pytest

from conftest import NOW, auth, event_body, user_body


async def test_root_health(api):
    resp = await api.get("/")
    assert resp.status == 200
    assert await resp.text() == "EventHub API running"


# === AUTH ===

async def test_register_returns_public_profile(api):
    resp = await api.post("/api/auth/register", json=user_body(email="Ada@Example.com"))

    assert resp.status == 201
    data = await resp.json()
    assert data["message"] == "Registered successfully"
    assert data["token"]
    assert set(data["user"]) == {"_id", "name", "email", "photoURL", "joinedEvents"}
    assert data["user"]["email"] == "ada@example.com"
    assert data["user"]["joinedEvents"] == []


async def test_register_validation_errors(api):
    resp = await api.post("/api/auth/register", json={"email": "nope", "password": "123"})

    assert resp.status == 400
    data = await resp.json()
    fields = {e["field"] for e in data["errors"]}
    assert {"email", "password"} <= fields
    assert all(e["msg"] for e in data["errors"])


async def test_register_duplicate_email(api, signup):
    await signup()

    resp = await api.post("/api/auth/register", json=user_body(name="Someone else"))
    assert resp.status == 400
    assert (await resp.json())["message"] == "Email already registered."


async def test_login(api, signup):
    _, user = await signup()

    resp = await api.post("/api/auth/login", json={"email": "ada@example.com", "password": "secret123"})
    assert resp.status == 200
    data = await resp.json()
    assert data["message"] == "Login successful"
    assert data["user"]["_id"] == user["_id"]

    resp = await api.post("/api/auth/login", json={"email": "ada@example.com", "password": "wrong!"})
    assert resp.status == 400
    assert (await resp.json())["message"] == "Invalid credentials."


async def test_verify_me_and_refresh(api, signup):
    token, user = await signup()

    for path in ("/api/auth/verify", "/api/auth/me"):
        resp = await api.get(path, headers=auth(token))
        assert resp.status == 200
        assert (await resp.json())["user"]["_id"] == user["_id"]

    resp = await api.post("/api/auth/refresh", headers=auth(token))
    assert resp.status == 200
    new_token = (await resp.json())["token"]
    resp = await api.get("/api/auth/me", headers=auth(new_token))
    assert resp.status == 200


@pytest.mark.parametrize("headers,message", [
    ({}, "Unauthorized"),
    ({"Authorization": "Bearer nonsense"}, "Invalid token"),
    ({"Authorization": "Basic abc"}, "Unauthorized"),
])
async def test_protected_routes_need_a_valid_token(api, headers, message):
    for method, path in [
        ("GET", "/api/auth/verify"),
        ("POST", "/api/auth/refresh"),
        ("GET", "/api/events/my-events"),
        ("POST", "/api/events"),
        ("POST", f"/api/events/{uuid4()}/join"),
    ]:
        resp = await api.request(method, path, headers=headers)
        assert resp.status == 401, path
        assert (await resp.json())["message"] == message


# === EVENTS ===

async def test_event_lifecycle(api, signup):
    owner_token, owner = await signup("owner@example.com", "Owner")
    guest_token, guest = await signup("guest@example.com", "Guest")

    # Create
    resp = await api.post("/api/events", json=event_body(attendeeCount=12), headers=auth(owner_token))
    assert resp.status == 201
    data = await resp.json()
    assert data["message"] == "Event created successfully"
    event = data["event"]
    assert event["createdBy"] == owner["_id"]
    assert event["attendeeCount"] == 0
    assert event["attendees"] == []
    event_id = event["_id"]

    # Public listing
    resp = await api.get("/api/events")
    assert [e["_id"] for e in await resp.json()] == [event_id]

    # Detail
    resp = await api.get(f"/api/events/{event_id}", headers=auth(guest_token))
    assert resp.status == 200
    assert (await resp.json())["title"] == "Python Meetup"

    # Join
    resp = await api.post(f"/api/events/{event_id}/join", headers=auth(guest_token))
    assert resp.status == 200
    joined = await resp.json()
    assert joined["attendeeCount"] == 1
    assert joined["attendees"] == [guest["_id"]]

    resp = await api.post(f"/api/events/{event_id}/join", headers=auth(guest_token))
    assert resp.status == 400
    assert (await resp.json())["message"] == "Already joined this event"

    resp = await api.get("/api/auth/me", headers=auth(guest_token))
    assert (await resp.json())["user"]["joinedEvents"] == [event_id]

    # Update
    resp = await api.put(f"/api/events/{event_id}", json=event_body(title="Renamed"), headers=auth(owner_token))
    assert resp.status == 200
    data = await resp.json()
    assert data["message"] == "Event updated successfully"
    assert data["event"]["title"] == "Renamed"
    assert data["event"]["attendeeCount"] == 1

    # Delete
    resp = await api.delete(f"/api/events/{event_id}", headers=auth(owner_token))
    assert resp.status == 200
    assert (await resp.json())["message"] == "Event deleted successfully"

    resp = await api.get(f"/api/events/{event_id}", headers=auth(owner_token))
    assert resp.status == 404
    resp = await api.get("/api/auth/me", headers=auth(guest_token))
    assert (await resp.json())["user"]["joinedEvents"] == []


async def test_only_owner_may_change_event(api, signup):
    owner_token, _ = await signup("owner@example.com")
    other_token, _ = await signup("other@example.com")
    resp = await api.post("/api/events", json=event_body(), headers=auth(owner_token))
    event_id = (await resp.json())["event"]["_id"]

    resp = await api.put(f"/api/events/{event_id}", json=event_body(title="Hijack"), headers=auth(other_token))
    assert resp.status == 403
    assert (await resp.json())["message"] == "Not authorized to update this event"

    resp = await api.delete(f"/api/events/{event_id}", headers=auth(other_token))
    assert resp.status == 403
    assert (await resp.json())["message"] == "Not authorized to delete this event"


@pytest.mark.parametrize("event_id", [str(uuid4()), "not-an-id"])
async def test_unknown_event_is_404(api, signup, event_id):
    token, _ = await signup()

    for method in ("GET", "PUT", "DELETE"):
        resp = await api.request(method, f"/api/events/{event_id}", json=event_body(), headers=auth(token))
        assert resp.status == 404
        assert (await resp.json())["message"] == "Event not found"

    resp = await api.post(f"/api/events/{event_id}/join", headers=auth(token))
    assert resp.status == 404


async def test_upcoming_and_my_events(api, signup):
    alice_token, _ = await signup("alice@example.com")
    bob_token, _ = await signup("bob@example.com")
    for token, title, days in [
        (alice_token, "Past", -1),
        (alice_token, "Later", 10),
        (bob_token, "Soon", 1),
    ]:
        body = event_body(title=title, date=(NOW + timedelta(days=days)).isoformat())
        resp = await api.post("/api/events", json=body, headers=auth(token))
        assert resp.status == 201

    resp = await api.get("/api/events/upcoming")
    assert [e["title"] for e in await resp.json()] == ["Soon", "Later"]

    resp = await api.get("/api/events")
    assert [e["title"] for e in await resp.json()] == ["Later", "Soon", "Past"]

    resp = await api.get("/api/events/my-events", headers=auth(alice_token))
    assert [e["title"] for e in await resp.json()] == ["Later", "Past"]


@pytest.mark.parametrize("overrides,field", [
    ({"title": ""}, "title"),
    ({"date": "next tuesday"}, "date"),
    ({"attendeeCount": -1}, "attendeeCount"),
    ({"imageURL": "not a url"}, "imageURL"),
    ({"location": None}, "location"),
])
async def test_event_validation(api, signup, overrides, field):
    token, _ = await signup()

    resp = await api.post("/api/events", json=event_body(**overrides), headers=auth(token))
    assert resp.status == 400
    assert field in {e["field"] for e in (await resp.json())["errors"]}


async def test_empty_image_url_means_no_image(api, signup):
    token, _ = await signup()

    resp = await api.post("/api/events", json=event_body(imageURL=""), headers=auth(token))
    assert resp.status == 201
    assert (await resp.json())["event"]["imageURL"] is None


@pytest.mark.parametrize("data", ["{not json", "[1, 2]"])
async def test_body_must_be_a_json_object(api, signup, data):
    token, _ = await signup()

    resp = await api.post(
        "/api/events", data=data,
        headers={**auth(token), "Content-Type": "application/json"},
    )
    assert resp.status == 400
    assert (await resp.json())["errors"][0]["field"] == "body"


async def test_unknown_route_is_json_404(api):
    resp = await api.get("/api/nowhere")
    assert resp.status == 404
    assert "message" in await resp.json()


async def test_cors_preflight_allows_frontend(api):
    resp = await api.options("/api/events", headers={
        "Origin": "http://localhost:5173",
        "Access-Control-Request-Method": "POST",
        "Access-Control-Request-Headers": "Authorization, Content-Type",
    })
    assert resp.status == 200
    assert resp.headers["Access-Control-Allow-Origin"] == "http://localhost:5173"
