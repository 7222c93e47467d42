"""
Auth handlers - register, login, verify, refresh, me.
"""

from aiohttp import web

from core.domain.models import RegisterRequest, LoginRequest, User
from adapters.api.keys import AUTH_SERVICE
from adapters.api.middleware import login_required, read_payload, bearer_token

routes = web.RouteTableDef()


@routes.post("/api/auth/register")
async def register(request: web.Request) -> web.Response:
    data = await read_payload(request, RegisterRequest)
    token, user = await request.app[AUTH_SERVICE].register(data)
    return web.json_response(
        {"message": "Registered successfully", "token": token, "user": user.to_public()},
        status=201,
    )


@routes.post("/api/auth/login")
async def login(request: web.Request) -> web.Response:
    data = await read_payload(request, LoginRequest)
    token, user = await request.app[AUTH_SERVICE].login(data)
    return web.json_response(
        {"message": "Login successful", "token": token, "user": user.to_public()}
    )


@routes.get("/api/auth/verify")
@login_required
async def verify(request: web.Request, user: User) -> web.Response:
    return web.json_response({"user": user.to_public()})


@routes.post("/api/auth/refresh")
async def refresh(request: web.Request) -> web.Response:
    token = await request.app[AUTH_SERVICE].refresh(bearer_token(request))
    return web.json_response({"token": token})


@routes.get("/api/auth/me")
@login_required
async def me(request: web.Request, user: User) -> web.Response:
    return web.json_response({"user": user.to_public()})
