from __future__ import annotations

import asyncio
import time
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

from pydantic import BaseModel, Field

from carrier_rates.core.logging import configure_logging

logger = configure_logging(logger_name=__name__)

EXPIRY_BUFFER_SECONDS = 30.0


def _mark_retrieved(task: asyncio.Future[str]) -> None:
    # Every waiter may have been cancelled before a failed refresh finished.
    if not task.cancelled():
        task.exception()


class TokenGrant(BaseModel):
    access_token: str = Field(min_length=1)
    expires_in: float = Field(description="Lifetime of the token in seconds.")

    model_config = {"extra": "ignore"}


TokenFetcher = Callable[[], Awaitable[Union[TokenGrant, Mapping[str, Any]]]]


class TokenProvider(ABC):
    """Anything that can hand out a currently valid bearer token."""

    @abstractmethod
    async def get_token(self) -> str:
        """Return a bearer token that is valid right now."""


class TokenManager(TokenProvider):
    """
    Caches one bearer token and refreshes it through ``fetch_token``.

    A token is treated as expired ``expiry_buffer_seconds`` before the grant
    says it is, so it is replaced before the carrier would reject it.
    Concurrent callers that find the cache cold share a single refresh task:
    at most one fetch is in flight at any time. A failed fetch is raised to
    every waiter and is not cached, so the next call starts a fresh refresh.

    All state lives on one event loop. The check of ``_refreshing`` and the
    assignment of the new task happen without an ``await`` in between, which
    is what keeps two callers from starting two refreshes.
    """

    def __init__(
        self,
        fetch_token: TokenFetcher,
        *,
        clock: Callable[[], float] = time.monotonic,
        expiry_buffer_seconds: float = EXPIRY_BUFFER_SECONDS,
    ) -> None:
        self._fetch_token = fetch_token
        self._clock = clock
        self._expiry_buffer = expiry_buffer_seconds
        self._token: Optional[str] = None
        self._expires_at: Optional[float] = None
        self._refreshing: Optional[asyncio.Task[str]] = None

    def _cached(self) -> Optional[str]:
        if self._token is None or self._expires_at is None:
            return None
        if self._clock() < self._expires_at:
            return self._token
        return None

    async def get_token(self) -> str:
        token = self._cached()
        if token is not None:
            return token

        if self._refreshing is None:
            self._refreshing = asyncio.ensure_future(self._refresh())
            self._refreshing.add_done_callback(_mark_retrieved)
        # Shielded so a cancelled caller does not cancel the refresh other callers wait on.
        return await asyncio.shield(self._refreshing)

    async def _refresh(self) -> str:
        logger.debug("Refreshing access token")
        try:
            raw = await self._fetch_token()
            grant = raw if isinstance(raw, TokenGrant) else TokenGrant.model_validate(raw)
            self._token = grant.access_token
            self._expires_at = self._clock() + grant.expires_in - self._expiry_buffer
            logger.debug("Access token refreshed; valid for %.0fs", grant.expires_in)
            return grant.access_token
        finally:
            self._refreshing = None
