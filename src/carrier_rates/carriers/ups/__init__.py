from .auth import UpsOAuthTokenFetcher
from .mapper import MissingFieldError, WireFormatError, from_wire, to_wire
from .operation import UpsRateOperation, classify_error

__all__ = [
    "MissingFieldError",
    "UpsOAuthTokenFetcher",
    "UpsRateOperation",
    "WireFormatError",
    "classify_error",
    "from_wire",
    "to_wire",
]
