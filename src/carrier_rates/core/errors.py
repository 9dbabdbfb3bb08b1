from __future__ import annotations

from typing import Any, Optional


class CarrierError(Exception):
    """Base class for classified carrier errors.

    Callers branch on the subclass (or on ``retryable``) to decide between
    retrying, surfacing the problem to the user and alerting operations.
    """

    code = "CARRIER_ERROR"
    retryable = False

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class AuthenticationError(CarrierError):
    """Raised when the carrier rejects our credentials."""

    code = "AUTH_FAILED"

    def __init__(
        self, message: str = "Authentication failed", details: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message, 401, details)


class ValidationError(CarrierError):
    """Raised when a rate request fails validation before reaching the carrier."""

    code = "VALIDATION_ERROR"

    def __init__(
        self, message: str = "Validation failed", details: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message, 400, details)


class HttpClientError(CarrierError):
    """Raised when the carrier rejects the request (4xx)."""

    code = "HTTP_CLIENT_ERROR"

    def __init__(
        self,
        status_code: int,
        message: str = "Client error",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, status_code, details)


class HttpServerError(CarrierError):
    """Raised when the carrier fails upstream (5xx) or a failure could not be classified."""

    code = "HTTP_SERVER_ERROR"

    def __init__(
        self,
        status_code: int,
        message: str = "Server error",
        retryable: bool = True,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, status_code, details)
        self.retryable = retryable


class RateLimitError(CarrierError):
    """Raised when requests are rate-limited."""

    code = "RATE_LIMIT"
    retryable = True

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        retry_after_ms: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, 429, details)
        self.retry_after_ms = retry_after_ms


class RequestTimeoutError(CarrierError):
    """Raised when the carrier does not answer within the transport timeout."""

    code = "TIMEOUT"
    retryable = True

    def __init__(
        self,
        message: str = "Request timeout",
        timeout_ms: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, None, details)
        self.timeout_ms = timeout_ms


class NetworkError(CarrierError):
    """Raised on DNS, connection-refused and other connectivity failures."""

    code = "NETWORK_ERROR"
    retryable = True

    def __init__(
        self,
        message: str = "Network error",
        original_error: Optional[BaseException] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, None, details)
        self.original_error = original_error


class MalformedResponseError(CarrierError):
    """Raised when a carrier payload cannot be normalized into shared models."""

    code = "MALFORMED_RESPONSE"

    def __init__(
        self,
        message: str = "Malformed response from API",
        raw_response: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, None, details)
        self.raw_response = raw_response
