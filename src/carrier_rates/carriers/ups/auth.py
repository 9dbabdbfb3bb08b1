from __future__ import annotations

import httpx

from carrier_rates.core.auth import TokenGrant
from carrier_rates.core.config import UpsConfig
from carrier_rates.core.http import create_http_client


class UpsOAuthTokenFetcher:
    """OAuth2 client-credentials grant against the UPS security endpoint.

    Instances are the ``fetch_token`` callable handed to TokenManager. HTTP
    failures are raised as ``httpx.HTTPError`` and are not reclassified.
    A client passed in stays owned by the caller; one created here is closed
    by ``aclose``.
    """

    def __init__(self, config: UpsConfig, client: httpx.AsyncClient | None = None) -> None:
        if not (config.client_id and config.client_secret):
            raise ValueError("UPS client credentials are not configured")
        self._config = config
        self._owns_client = client is None
        self._client = client or create_http_client(timeout_seconds=config.timeout_seconds)

    async def __call__(self) -> TokenGrant:
        response = await self._client.post(
            self._config.token_url,
            data={"grant_type": "client_credentials"},
            auth=(self._config.client_id, self._config.client_secret),
            headers={"Accept": "application/json"},
        )
        response.raise_for_status()
        return TokenGrant.model_validate(response.json())

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "UpsOAuthTokenFetcher":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
