from .entities import (
    Address,
    Carrier,
    DimensionUnit,
    Package,
    RateQuote,
    RateRequest,
    WeightUnit,
)

__all__ = [
    "Address",
    "Carrier",
    "DimensionUnit",
    "Package",
    "RateQuote",
    "RateRequest",
    "WeightUnit",
]
