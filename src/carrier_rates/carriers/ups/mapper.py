"""Translation between domain rate models and the UPS Rating API JSON schema."""

from __future__ import annotations

import uuid
from decimal import Decimal
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from carrier_rates.models import (
    Address,
    Carrier,
    DimensionUnit,
    Package,
    RateQuote,
    RateRequest,
    WeightUnit,
)

DEFAULT_CURRENCY = "USD"
DEFAULT_SERVICE = {"Code": "03", "Description": "Ground"}
CUSTOMER_SUPPLIED_PACKAGE = {"Code": "02", "Description": "Packaging"}
BILL_SHIPPER_CHARGE_TYPE = "01"  # transportation charges

WEIGHT_UNIT_DESCRIPTIONS = {
    WeightUnit.POUNDS: "Pounds",
    WeightUnit.KILOGRAMS: "Kilograms",
}
DIMENSION_UNIT_DESCRIPTIONS = {
    DimensionUnit.INCHES: "Inches",
    DimensionUnit.CENTIMETERS: "Centimeters",
}


class WireFormatError(ValueError):
    """Raised when a UPS payload does not have the shape we expect.

    ``payload`` is the decoded response that was being read, when known.
    """

    def __init__(self, message: str, payload: Any = None) -> None:
        super().__init__(message)
        self.payload = payload


class MissingFieldError(WireFormatError):
    def __init__(self, field: str, payload: Any = None) -> None:
        super().__init__(f"Missing {field} in UPS response", payload)
        self.field = field


def decimal_string(value: float | int) -> str:
    """Render a number the way it was given: 25.5 -> "25.5", 10 / 10.0 -> "10"."""
    if isinstance(value, int):
        return str(value)
    text = format(Decimal(repr(value)), "f")
    if text.endswith(".0"):
        text = text[:-2]
    return text


def _address(address: Address) -> dict[str, Any]:
    return {
        "AddressLine": list(address.address_lines),
        "City": address.city,
        "StateProvinceCode": address.state or "",
        "PostalCode": address.postal_code,
        "CountryCode": address.country_code,
    }


def _package(package: Package) -> dict[str, Any]:
    return {
        "PackagingType": dict(CUSTOMER_SUPPLIED_PACKAGE),
        "Dimensions": {
            "UnitOfMeasurement": {
                "Code": package.dimension_unit.value,
                "Description": DIMENSION_UNIT_DESCRIPTIONS[package.dimension_unit],
            },
            "Length": decimal_string(package.length),
            "Width": decimal_string(package.width),
            "Height": decimal_string(package.height),
        },
        "PackageWeight": {
            "UnitOfMeasurement": {
                "Code": package.weight_unit.value,
                "Description": WEIGHT_UNIT_DESCRIPTIONS[package.weight_unit],
            },
            "Weight": decimal_string(package.weight),
        },
    }


def to_wire(request: RateRequest, shipper_number: str) -> dict[str, Any]:
    shipper = request.ship_from
    return {
        "RateRequest": {
            "Request": {
                "TransactionReference": {"CustomerContext": str(uuid.uuid4())},
            },
            "Shipment": {
                "Shipper": {
                    "Name": shipper.name,
                    "ShipperNumber": shipper_number,
                    "Address": _address(shipper),
                },
                "ShipTo": {
                    "Name": request.ship_to.name,
                    "Address": _address(request.ship_to),
                },
                "ShipFrom": {
                    "Name": request.ship_from.name,
                    "Address": _address(request.ship_from),
                },
                "PaymentDetails": {
                    "ShipmentCharge": [
                        {
                            "Type": BILL_SHIPPER_CHARGE_TYPE,
                            "BillShipper": {"AccountNumber": shipper_number},
                        }
                    ]
                },
                "Service": dict(DEFAULT_SERVICE),
                "NumOfPieces": str(len(request.packages)),
                "Package": [_package(p) for p in request.packages],
            },
        }
    }


def _first(node: Any) -> Any:
    # UPS returns a bare object for one item and a list for several.
    if isinstance(node, list):
        return node[0] if node else None
    return node


def _as_list(node: Any) -> list[Any]:
    if node is None:
        return []
    if isinstance(node, list):
        return node
    return [node]


def _object(node: Any) -> dict[str, Any]:
    return node if isinstance(node, dict) else {}


def _money(node: Any, field: str) -> Optional[float]:
    if not isinstance(node, dict) or node.get("MonetaryValue") in (None, ""):
        return None
    raw = node["MonetaryValue"]
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise WireFormatError(f"{field} has a non-numeric MonetaryValue: {raw!r}") from exc


def _alert_descriptions(node: Any) -> list[str]:
    return [
        str(alert["Description"])
        for alert in _as_list(node)
        if isinstance(alert, dict) and alert.get("Description")
    ]


def from_wire(data: Any) -> list[RateQuote]:
    try:
        return [_quote(data)]
    except WireFormatError as exc:
        if exc.payload is None:
            exc.payload = data
        raise


def _quote(data: Any) -> RateQuote:
    envelope = data.get("RateResponse") if isinstance(data, dict) else None
    if not isinstance(envelope, dict):
        raise MissingFieldError("RateResponse")

    shipment = _first(envelope.get("RatedShipment"))
    if not isinstance(shipment, dict):
        raise MissingFieldError("RateResponse.RatedShipment")

    service = _object(shipment.get("Service"))
    totals = _object(shipment.get("TotalCharges"))
    rated_package = _object(_first(shipment.get("RatedPackage")))

    amount = _money(totals, "TotalCharges")
    alerts = _alert_descriptions(shipment.get("RatedShipmentAlert"))
    alerts += _alert_descriptions(_object(envelope.get("Response")).get("Alert"))

    try:
        return RateQuote(
            carrier=Carrier.UPS,
            service_code=str(service.get("Code", "")),
            service_name=service.get("Description") or None,
            amount=amount if amount is not None else 0.0,
            currency=totals.get("CurrencyCode") or DEFAULT_CURRENCY,
            base_charge=_money(rated_package.get("BaseServiceCharge"), "BaseServiceCharge"),
            transportation_charge=_money(
                rated_package.get("TransportationCharges"), "TransportationCharges"
            ),
            alerts=alerts or None,
        )
    except PydanticValidationError as exc:
        raise WireFormatError(f"RatedShipment cannot be normalized: {exc}") from exc
