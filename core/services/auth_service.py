"""
Auth service - registration, login and bearer token handling.
Tokens are stateless HS256 JWTs carrying the user id in the `id` claim.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
from uuid import UUID

from argon2 import PasswordHasher
from argon2.exceptions import VerificationError, InvalidHashError
from jose import JWTError, jwt

from core.domain.constants import TOKEN_TTL_HOURS, MSG_INVALID_TOKEN, MSG_USER_NOT_FOUND
from core.domain.errors import (
    AuthenticationError,
    DuplicateEmailError,
    InvalidCredentialsError,
)
from core.domain.models import User, UserCreate, RegisterRequest, LoginRequest
from core.interfaces.repositories import IUserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Service for authentication and session tokens"""

    def __init__(
        self,
        user_repo: IUserRepository,
        secret: str,
        algorithm: str = "HS256",
        token_ttl: timedelta = timedelta(hours=TOKEN_TTL_HOURS),
        hasher: Optional[PasswordHasher] = None,
    ):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self.user_repo = user_repo
        self._secret = secret
        self._algorithm = algorithm
        self.token_ttl = token_ttl
        self._hasher = hasher or PasswordHasher()

    # --- passwords ---

    async def hash_password(self, password: str) -> str:
        # Argon2 is deliberately slow; keep it off the event loop
        return await asyncio.to_thread(self._hasher.hash, password)

    async def check_password(self, password_hash: str, password: str) -> bool:
        try:
            return await asyncio.to_thread(self._hasher.verify, password_hash, password)
        except (VerificationError, InvalidHashError):
            return False

    # --- tokens ---

    def create_token(self, user_id: UUID) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "id": str(user_id),
            "iat": now,
            "exp": now + self.token_ttl,
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def decode_token(self, token: str) -> UUID:
        """Return the user id in a valid token, raise AuthenticationError otherwise"""
        try:
            claims = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError as e:
            logger.info(f"[AUTH] Token rejected: {e}")
            raise AuthenticationError(MSG_INVALID_TOKEN)

        try:
            return UUID(str(claims["id"]))
        except (KeyError, ValueError):
            logger.info("[AUTH] Token without a usable id claim")
            raise AuthenticationError(MSG_INVALID_TOKEN)

    # --- flows ---

    async def register(self, data: RegisterRequest) -> Tuple[str, User]:
        """Create account, return (token, user)"""
        if await self.user_repo.get_by_email(data.email):
            raise DuplicateEmailError()

        user = await self.user_repo.create(UserCreate(
            name=data.name,
            email=data.email,
            password_hash=await self.hash_password(data.password),
            photo_url=str(data.photo_url),
        ))
        logger.info(f"[AUTH] Registered user {user.id}")
        return self.create_token(user.id), user

    async def login(self, data: LoginRequest) -> Tuple[str, User]:
        """Check credentials, return (token, user)"""
        user = await self.user_repo.get_by_email(data.email)
        if not user or not await self.check_password(user.password_hash, data.password):
            logger.info("[AUTH] Failed login attempt")
            raise InvalidCredentialsError()

        logger.info(f"[AUTH] User {user.id} logged in")
        return self.create_token(user.id), user

    async def verify(self, token: Optional[str]) -> User:
        """Resolve the user behind a bearer token"""
        if not token:
            raise AuthenticationError()

        user_id = self.decode_token(token)
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise AuthenticationError(MSG_USER_NOT_FOUND)
        return user

    async def refresh(self, token: Optional[str]) -> str:
        """New token with a fresh expiry for a still-valid session"""
        user = await self.verify(token)
        return self.create_token(user.id)
