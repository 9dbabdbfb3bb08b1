from .base import RateOperation
from .ups import UpsRateOperation

__all__ = [
    "RateOperation",
    "UpsRateOperation",
]
