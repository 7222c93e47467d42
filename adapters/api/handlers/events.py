"""
Event handlers - CRUD, listings and join.
Static paths are declared before /api/events/{event_id} so they win the match;
handlers sharing a path stay adjacent so they share one resource.
"""

from aiohttp import web

from core.domain.models import EventInput, User
from adapters.api.keys import EVENT_SERVICE
from adapters.api.middleware import login_required, read_payload

routes = web.RouteTableDef()


def _events_response(events) -> web.Response:
    return web.json_response([e.to_dict() for e in events])


@routes.get("/api/events")
async def list_events(request: web.Request) -> web.Response:
    return _events_response(await request.app[EVENT_SERVICE].list_events())


@routes.post("/api/events")
@login_required
async def create_event(request: web.Request, user: User) -> web.Response:
    data = await read_payload(request, EventInput)
    event = await request.app[EVENT_SERVICE].create_event(user, data)
    return web.json_response(
        {"message": "Event created successfully", "event": event.to_dict()},
        status=201,
    )


@routes.get("/api/events/upcoming")
async def list_upcoming(request: web.Request) -> web.Response:
    return _events_response(await request.app[EVENT_SERVICE].list_upcoming())


@routes.get("/api/events/my-events")
@login_required
async def list_my_events(request: web.Request, user: User) -> web.Response:
    return _events_response(await request.app[EVENT_SERVICE].list_owned(user))


@routes.get("/api/events/{event_id}")
@login_required
async def get_event(request: web.Request, user: User) -> web.Response:
    event = await request.app[EVENT_SERVICE].get_event(request.match_info["event_id"])
    return web.json_response(event.to_dict())


@routes.put("/api/events/{event_id}")
@login_required
async def update_event(request: web.Request, user: User) -> web.Response:
    data = await read_payload(request, EventInput)
    event = await request.app[EVENT_SERVICE].update_event(user, request.match_info["event_id"], data)
    return web.json_response({"message": "Event updated successfully", "event": event.to_dict()})


@routes.delete("/api/events/{event_id}")
@login_required
async def delete_event(request: web.Request, user: User) -> web.Response:
    await request.app[EVENT_SERVICE].delete_event(user, request.match_info["event_id"])
    return web.json_response({"message": "Event deleted successfully"})


@routes.post("/api/events/{event_id}/join")
@login_required
async def join_event(request: web.Request, user: User) -> web.Response:
    event = await request.app[EVENT_SERVICE].join_event(user, request.match_info["event_id"])
    return web.json_response(event.to_dict())
