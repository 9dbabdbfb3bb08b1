from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence, Union

from pydantic import ValidationError as PydanticValidationError

from carrier_rates.carriers import RateOperation, UpsRateOperation
from carrier_rates.carriers.ups import UpsOAuthTokenFetcher
from carrier_rates.core.auth import TokenManager
from carrier_rates.core.config import Settings, get_settings
from carrier_rates.core.errors import ValidationError
from carrier_rates.core.http import HttpxTransport
from carrier_rates.core.logging import configure_logging
from carrier_rates.models import RateQuote, RateRequest

logger = configure_logging(logger_name=__name__)


class ShippingService:
    """Validates rate requests and forwards them to a carrier operation.

    ``transport`` is only given when the service owns it; ``aclose`` (or
    leaving an ``async with`` block) closes it.
    """

    def __init__(
        self, rate_operation: RateOperation, transport: Optional[HttpxTransport] = None
    ) -> None:
        self._rate_operation = rate_operation
        self._transport = transport

    async def get_rates(
        self, request: Union[RateRequest, Mapping[str, Any]]
    ) -> Sequence[RateQuote]:
        if not isinstance(request, RateRequest):
            try:
                request = RateRequest.model_validate(request)
            except PydanticValidationError as exc:
                logger.info("Rejected rate request: %d validation error(s)", exc.error_count())
                raise ValidationError(
                    "Invalid rate request",
                    {"validation_errors": exc.errors(include_url=False)},
                ) from exc

        return await self._rate_operation.execute(request)

    async def aclose(self) -> None:
        if self._transport is not None:
            await self._transport.aclose()

    async def __aenter__(self) -> "ShippingService":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


def build_shipping_service(
    settings: Settings | None = None, transport: HttpxTransport | None = None
) -> ShippingService:
    """
    Wire a ShippingService against UPS from configuration.

    The token fetcher shares the transport's HTTP client, so closing the
    transport releases both. A transport passed in stays owned by the caller.
    """
    settings = settings or get_settings()
    ups = settings.ups
    if not ups.is_configured():
        raise ValueError(
            "UPS is not configured; set UPS_CLIENT_ID, UPS_CLIENT_SECRET and UPS_SHIPPER_NUMBER"
        )

    owned = None
    if transport is None:
        transport = owned = HttpxTransport(timeout_seconds=ups.timeout_seconds)
    token_manager = TokenManager(UpsOAuthTokenFetcher(ups, client=transport.client))
    return ShippingService(UpsRateOperation(transport, token_manager, ups), transport=owned)
