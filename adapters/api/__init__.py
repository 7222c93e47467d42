"""
REST API adapter - aiohttp application serving the web client.

Endpoints:
- /api/auth/*   register, login, verify, refresh, me (JWT bearer tokens)
- /api/events*  listing, CRUD, join
"""

from adapters.api.app import create_api_app

__all__ = ["create_api_app"]
