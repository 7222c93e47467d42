"""
Client auth session - who is signed in, plus the token refresh task.

The refresh task is owned by the session: it starts when a user signs in,
and is cancelled on logout or close. A failed refresh signs the user out.
"""

import asyncio
import logging
from typing import Optional

from core.domain.constants import TOKEN_REFRESH_INTERVAL_SECONDS
from adapters.client.api_client import ApiError, EventHubClient, UserProfile

logger = logging.getLogger(__name__)


class AuthSession:
    """Signed-in state for one client"""

    def __init__(self, client: EventHubClient, refresh_interval: float = TOKEN_REFRESH_INTERVAL_SECONDS):
        self.client = client
        self.refresh_interval = refresh_interval
        self.user: Optional[UserProfile] = None
        self.error: Optional[str] = None
        self._refresh_task: Optional[asyncio.Task] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def refreshing(self) -> bool:
        return self._refresh_task is not None and not self._refresh_task.done()

    async def restore(self) -> bool:
        """Resume a session from the stored token, if it still verifies"""
        if not self.client.token:
            return False
        try:
            user = await self.client.verify()
        except ApiError as e:
            self.client.token_storage.clear()
            self._signed_out(error="Session expired" if e.status == 401 else e.message)
            return False
        self._signed_in(user)
        return True

    async def login(self, email: str, password: str) -> UserProfile:
        try:
            _, user = await self.client.login(email, password)
        except ApiError as e:
            self.error = e.message
            raise
        self._signed_in(user)
        return user

    async def register(self, name: str, email: str, password: str, photo_url: str) -> UserProfile:
        try:
            _, user = await self.client.register(name, email, password, photo_url)
        except ApiError as e:
            self.error = e.message
            raise
        self._signed_in(user)
        return user

    async def refresh_token(self) -> bool:
        """Swap the stored token for a fresh one. False if the server refused"""
        try:
            await self.client.refresh()
        except ApiError as e:
            logger.warning(f"[SESSION] Token refresh failed: {e.message}")
            return False
        return True

    async def reload_user(self) -> Optional[UserProfile]:
        """Fetch the profile again (e.g. after joining an event)"""
        if not self.is_authenticated:
            return None
        self.user = await self.client.me()
        return self.user

    def logout(self) -> None:
        self._cancel_refresh()
        self.client.token_storage.clear()
        self._signed_out()

    async def close(self) -> None:
        """Stop the refresh task; keeps the stored token for the next run"""
        task = self._refresh_task
        self._cancel_refresh()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def __aenter__(self) -> "AuthSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # --- internals ---

    def _signed_in(self, user: UserProfile) -> None:
        self.user = user
        self.error = None
        if not self.refreshing:
            self._refresh_task = asyncio.create_task(self._refresh_loop())

    def _signed_out(self, error: Optional[str] = None) -> None:
        self.user = None
        self.error = error

    def _cancel_refresh(self) -> None:
        task, self._refresh_task = self._refresh_task, None
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()

    async def _refresh_loop(self) -> None:
        logger.info(f"[SESSION] Token refresh every {self.refresh_interval}s")
        while True:
            await asyncio.sleep(self.refresh_interval)
            if not await self.refresh_token():
                self._refresh_task = None
                self.client.token_storage.clear()
                self._signed_out(error="Session expired")
                return
