"""
Typed application keys shared by the app factory and the handlers.
"""

from aiohttp import web

from core.services import AuthService, EventService

AUTH_SERVICE = web.AppKey("auth_service", AuthService)
EVENT_SERVICE = web.AppKey("event_service", EventService)
