"""
REST API application factory.
Services are passed in so tests can run against in-memory repositories.
"""

import logging
from typing import Iterable

import aiohttp_cors
from aiohttp import web

from core.services import AuthService, EventService
from adapters.api.handlers import routes
from adapters.api.keys import AUTH_SERVICE, EVENT_SERVICE
from adapters.api.middleware import error_middleware

logger = logging.getLogger(__name__)


async def handle_root(request: web.Request) -> web.Response:
    return web.Response(text="EventHub API running")


def _setup_cors(app: web.Application, origins: Iterable[str]) -> None:
    cors = aiohttp_cors.setup(app, defaults={
        origin: aiohttp_cors.ResourceOptions(
            allow_credentials=True,
            expose_headers="*",
            allow_headers="*",
            allow_methods="*",
        )
        for origin in origins if origin
    })
    for route in list(app.router.routes()):
        cors.add(route)


def create_api_app(
    auth_service: AuthService,
    event_service: EventService,
    frontend_url: str = "http://localhost:5173",
) -> web.Application:
    """Create aiohttp app with the auth and event routes."""
    app = web.Application(middlewares=[error_middleware])
    app[AUTH_SERVICE] = auth_service
    app[EVENT_SERVICE] = event_service

    app.router.add_get("/", handle_root)
    for table in routes:
        app.router.add_routes(table)

    _setup_cors(app, [frontend_url.rstrip("/")])
    logger.info(f"[API] App created, CORS origin: {frontend_url}")
    return app
