from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class Carrier(str, Enum):
    UPS = "UPS"


class WeightUnit(str, Enum):
    POUNDS = "LBS"
    KILOGRAMS = "KGS"


class DimensionUnit(str, Enum):
    INCHES = "IN"
    CENTIMETERS = "CM"


class Address(BaseModel):
    name: str = Field(min_length=1)
    address_lines: list[str] = Field(min_length=1, description="Street lines in order.")
    city: str = Field(min_length=1)
    state: Optional[str] = Field(default=None, description="State or province code.")
    postal_code: str = Field(min_length=1)
    country_code: str = Field(min_length=2, max_length=2, description="ISO 3166 alpha-2, e.g., US")

    model_config = {"frozen": True}

    @field_validator("address_lines")
    @classmethod
    def reject_blank_lines(cls, value: list[str]) -> list[str]:
        if any(not line.strip() for line in value):
            raise ValueError("Address line cannot be empty")
        return value

    @field_validator("country_code")
    @classmethod
    def normalize_country(cls, value: str) -> str:
        return value.upper()


class Package(BaseModel):
    weight: float = Field(gt=0, allow_inf_nan=False)
    weight_unit: WeightUnit
    length: float = Field(gt=0, allow_inf_nan=False)
    width: float = Field(gt=0, allow_inf_nan=False)
    height: float = Field(gt=0, allow_inf_nan=False)
    dimension_unit: DimensionUnit

    model_config = {"frozen": True}


class RateRequest(BaseModel):
    ship_from: Address
    ship_to: Address
    packages: list[Package] = Field(min_length=1)

    model_config = {"frozen": True}


class RateQuote(BaseModel):
    carrier: Carrier
    service_code: str
    service_name: Optional[str] = None
    amount: float = Field(ge=0, allow_inf_nan=False, description="Total charge for the shipment.")
    currency: str = Field(description="ISO currency code, e.g., USD")
    base_charge: Optional[float] = Field(default=None, allow_inf_nan=False)
    transportation_charge: Optional[float] = Field(default=None, allow_inf_nan=False)
    alerts: Optional[list[str]] = Field(
        default=None, description="Carrier warnings attached to the rated shipment."
    )

    model_config = {"frozen": True}
