"""
Middleware and request helpers for the REST API.

- error_middleware: turns domain errors into JSON responses
- login_required: resolves the bearer token to a User
- read_payload: parses and validates a JSON body
"""

import logging
from functools import wraps
from typing import Awaitable, Callable, Optional, Type, TypeVar

from aiohttp import web
from pydantic import BaseModel, ValidationError as PydanticValidationError

from core.domain.errors import AppError, ValidationError
from core.domain.models import User
from adapters.api.keys import AUTH_SERVICE

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


@web.middleware
async def error_middleware(request: web.Request, handler) -> web.StreamResponse:
    try:
        return await handler(request)
    except AppError as e:
        if e.status >= 500:
            logger.error(f"[API] {request.method} {request.path} failed: {e.message}")
        return web.json_response(e.to_dict(), status=e.status)
    except web.HTTPException as e:
        if e.status < 400:
            raise
        headers = {"Allow": e.headers["Allow"]} if "Allow" in e.headers else None
        return web.json_response({"message": e.reason}, status=e.status, headers=headers)
    except Exception:
        logger.exception(f"[API] Unhandled error on {request.method} {request.path}")
        return web.json_response({"message": "Internal server error"}, status=500)


def bearer_token(request: web.Request) -> Optional[str]:
    """Token from `Authorization: Bearer <token>`, or None"""
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def login_required(handler: Callable[[web.Request, User], Awaitable[web.StreamResponse]]):
    """Run handler with the authenticated user as second argument"""
    @wraps(handler)
    async def wrapper(request: web.Request) -> web.StreamResponse:
        user = await request.app[AUTH_SERVICE].verify(bearer_token(request))
        return await handler(request, user)
    return wrapper


def _format_errors(error: PydanticValidationError) -> list:
    return [
        {
            "field": ".".join(str(part) for part in err["loc"]) or "body",
            "msg": err["msg"],
        }
        for err in error.errors()
    ]


async def read_payload(request: web.Request, model: Type[ModelT]) -> ModelT:
    """Parse JSON body into `model`, raising ValidationError with field details"""
    try:
        data = await request.json()
    except ValueError:
        raise ValidationError([{"field": "body", "msg": "Malformed JSON body"}])

    if not isinstance(data, dict):
        raise ValidationError([{"field": "body", "msg": "Expected a JSON object"}])

    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(_format_errors(e))
