from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Mapping, Optional

import httpx
from pydantic import BaseModel, Field

REQUEST_TIMEOUT_SECONDS = 30.0


def create_http_client(
    base_url: str | None = None,
    verify: bool | str = True,
    timeout_seconds: float = REQUEST_TIMEOUT_SECONDS,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """
    Shared async HTTP client with sane defaults.
    No retry middleware: callers classify failures and decide whether to retry.
    """
    return httpx.AsyncClient(
        base_url=base_url or "",
        timeout=httpx.Timeout(timeout_seconds, connect=5.0),
        follow_redirects=True,
        verify=verify,
        transport=transport,
    )


class TransportFailure(str, Enum):
    HTTP_STATUS = "http_status"
    TIMEOUT = "timeout"
    CONNECTION = "connection"
    DECODE = "decode"


class TransportResponse(BaseModel):
    status: int
    data: Any = None
    headers: dict[str, str] = Field(default_factory=dict)


class TransportError(Exception):
    """Normalized transport failure.

    ``kind`` tells the caller what went wrong without inspecting message text:
    a non-2xx reply (``status``/``body``/``headers`` are set), a timeout, a
    connection-level failure, or a 2xx reply whose body is not JSON.
    """

    def __init__(
        self,
        kind: TransportFailure,
        message: str,
        *,
        status: Optional[int] = None,
        body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status = status
        self.body = body
        self.headers = {k.lower(): v for k, v in (headers or {}).items()}
        self.cause = cause

    def header(self, name: str) -> Optional[str]:
        return self.headers.get(name.lower())


class Transport(ABC):
    """Abstract JSON-over-HTTP transport used by carrier operations."""

    @abstractmethod
    async def post(
        self, url: str, body: Any, *, headers: Optional[Mapping[str, str]] = None
    ) -> TransportResponse:
        """POST ``body`` as JSON; raise TransportError on any failure."""


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class HttpxTransport(Transport):
    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout_seconds: float = REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self._client = client or create_http_client(timeout_seconds=timeout_seconds)

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client

    async def post(
        self, url: str, body: Any, *, headers: Optional[Mapping[str, str]] = None
    ) -> TransportResponse:
        try:
            response = await self._client.post(url, json=body, headers=dict(headers or {}))
        except httpx.TimeoutException as exc:
            raise TransportError(
                TransportFailure.TIMEOUT,
                f"Request to {url} timed out after {self.timeout_seconds:g}s",
                cause=exc,
            ) from exc
        except httpx.TransportError as exc:
            raise TransportError(
                TransportFailure.CONNECTION,
                f"Could not reach {url}: {exc}",
                cause=exc,
            ) from exc

        if response.is_error:
            raise TransportError(
                TransportFailure.HTTP_STATUS,
                f"{url} returned HTTP {response.status_code}",
                status=response.status_code,
                body=_response_body(response),
                headers=response.headers,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise TransportError(
                TransportFailure.DECODE,
                f"{url} returned a non-JSON body",
                status=response.status_code,
                body=response.text,
                headers=response.headers,
                cause=exc,
            ) from exc

        return TransportResponse(
            status=response.status_code,
            data=data,
            headers={k.lower(): v for k, v in response.headers.items()},
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
