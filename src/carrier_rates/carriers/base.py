from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from carrier_rates.models import Carrier, RateQuote, RateRequest


class RateOperation(ABC):
    """Abstract interface for a carrier's rate-quoting operation."""

    carrier: Carrier

    @abstractmethod
    async def execute(self, request: RateRequest) -> Sequence[RateQuote]:
        """Return normalized quotes or raise exactly one CarrierError subclass."""
