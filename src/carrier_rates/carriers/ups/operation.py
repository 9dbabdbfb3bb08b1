from __future__ import annotations

import json
import uuid
from typing import Any, Optional

import httpx

from carrier_rates.carriers.base import RateOperation
from carrier_rates.carriers.ups.mapper import WireFormatError, from_wire, to_wire
from carrier_rates.core.auth import TokenProvider
from carrier_rates.core.config import UpsConfig
from carrier_rates.core.errors import (
    AuthenticationError,
    CarrierError,
    HttpClientError,
    HttpServerError,
    MalformedResponseError,
    NetworkError,
    RateLimitError,
    RequestTimeoutError,
)
from carrier_rates.core.http import Transport, TransportError, TransportFailure
from carrier_rates.core.logging import configure_logging
from carrier_rates.models import Carrier, RateQuote, RateRequest

logger = configure_logging(logger_name=__name__)

DEFAULT_TIMEOUT_MS = 30_000


def _stringify(body: Any) -> Optional[str]:
    if body is None:
        return None
    if isinstance(body, str):
        return body
    try:
        return json.dumps(body)
    except (TypeError, ValueError):
        return repr(body)


def _upstream_message(body: Any) -> Optional[str]:
    """Pull the first ``response.errors[].message`` out of a UPS error body."""
    if not isinstance(body, dict):
        return None
    response = body.get("response")
    errors = response.get("errors") if isinstance(response, dict) else None
    if isinstance(errors, list) and errors and isinstance(errors[0], dict):
        message = errors[0].get("message")
        return str(message) if message else None
    return None


def _retry_after_ms(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        seconds = float(value.strip())
    except ValueError:
        # HTTP-date form is not honoured.
        return None
    if seconds < 0:
        return None
    return int(seconds * 1000)


def _classify_status(exc: TransportError, details: dict[str, Any]) -> CarrierError:
    status = exc.status or 0
    upstream = _upstream_message(exc.body)
    details = {**details, "status": status, "body": exc.body}

    if status == 401:
        return AuthenticationError(upstream or "UPS rejected the access token", details)
    if status == 400:
        return HttpClientError(400, upstream or "UPS rejected the rate request", details)
    if status == 429:
        return RateLimitError(
            upstream or "UPS rate limit exceeded",
            _retry_after_ms(exc.header("retry-after")),
            details,
        )
    if 400 <= status < 500:
        return HttpClientError(status, upstream or f"UPS returned HTTP {status}", details)
    if status >= 500:
        return HttpServerError(status, upstream or f"UPS returned HTTP {status}", True, details)
    return HttpServerError(500, f"Unexpected HTTP {status} from UPS", True, details)


def classify_error(exc: BaseException, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> CarrierError:
    """Map any failure from the rate call onto exactly one CarrierError subclass.

    Errors that are already classified are returned untouched, so classifying
    twice is harmless.
    """
    if isinstance(exc, CarrierError):
        return exc

    details: dict[str, Any] = {"cause": repr(exc)}

    if isinstance(exc, TransportError):
        if exc.kind is TransportFailure.HTTP_STATUS:
            return _classify_status(exc, details)
        if exc.kind is TransportFailure.TIMEOUT:
            return RequestTimeoutError(exc.message, timeout_ms, details)
        if exc.kind is TransportFailure.CONNECTION:
            return NetworkError(exc.message, exc.cause or exc, details)
        if exc.kind is TransportFailure.DECODE:
            return MalformedResponseError(
                "UPS returned a body that is not valid JSON", _stringify(exc.body), details
            )

    # Transports other than HttpxTransport may let raw httpx / json errors through.
    if isinstance(exc, httpx.TimeoutException):
        return RequestTimeoutError(str(exc) or "Request timeout", timeout_ms, details)
    if isinstance(exc, httpx.TransportError):
        return NetworkError(str(exc) or "Network error", exc, details)
    if isinstance(exc, json.JSONDecodeError):
        return MalformedResponseError("UPS returned a body that is not valid JSON", exc.doc, details)
    if isinstance(exc, WireFormatError):
        return MalformedResponseError(str(exc), _stringify(exc.payload), details)

    return HttpServerError(500, f"Unexpected error calling UPS: {exc}", True, details)


class UpsRateOperation(RateOperation):
    carrier = Carrier.UPS

    def __init__(
        self, transport: Transport, token_provider: TokenProvider, config: UpsConfig
    ) -> None:
        if not config.shipper_number:
            raise ValueError("UPS shipper number is not configured")
        self._transport = transport
        self._token_provider = token_provider
        self._config = config
        self._timeout_ms = int(config.timeout_seconds * 1000)

    def _headers(self, token: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "transId": uuid.uuid4().hex,
            "transactionSrc": self._config.transaction_source,
        }

    async def execute(self, request: RateRequest) -> list[RateQuote]:
        # Token failures are the credential layer's problem and pass through as-is.
        token = await self._token_provider.get_token()
        payload = to_wire(request, self._config.shipper_number)
        headers = self._headers(token)

        logger.debug(
            "Requesting UPS rates transId=%s packages=%d",
            headers["transId"],
            len(request.packages),
        )
        try:
            response = await self._transport.post(self._config.rate_url, payload, headers=headers)
        except Exception as exc:
            error = classify_error(exc, self._timeout_ms)
            logger.warning("UPS rate request failed transId=%s: %s", headers["transId"], error)
            if error is exc:
                raise
            raise error from exc

        try:
            return from_wire(response.data)
        except WireFormatError as exc:
            error = classify_error(exc, self._timeout_ms)
            logger.error(
                "Malformed UPS rate response transId=%s: %s", headers["transId"], error.raw_response
            )
            raise error from exc
