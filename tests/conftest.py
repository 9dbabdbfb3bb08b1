import sys
from pathlib import Path

import pytest

# Ensure the project src directory is on sys.path for test imports without installation.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from carrier_rates.core.config import UpsConfig  # noqa: E402
from carrier_rates.models import Address, Package, RateRequest  # noqa: E402


@pytest.fixture
def ups_config() -> UpsConfig:
    return UpsConfig(
        base_url="https://wwwcie.ups.com",
        client_id="client-id",
        client_secret="client-secret",
        shipper_number="A1B2C3",
    )


@pytest.fixture
def rate_request() -> RateRequest:
    return RateRequest(
        ship_from=Address(
            name="Warehouse A",
            address_lines=["100 Industrial Way"],
            city="Chicago",
            state="IL",
            postal_code="60601",
            country_code="US",
        ),
        ship_to=Address(
            name="Customer B",
            address_lines=["200 Market St", "Suite 5"],
            city="San Francisco",
            state="CA",
            postal_code="94102",
            country_code="US",
        ),
        packages=[
            Package(
                weight=5,
                weight_unit="LBS",
                length=10,
                width=8,
                height=6,
                dimension_unit="IN",
            )
        ],
    )


@pytest.fixture
def ups_response() -> dict:
    return {
        "RateResponse": {
            "Response": {"ResponseStatus": {"Code": "1", "Description": "Success"}},
            "RatedShipment": {
                "Service": {"Code": "03", "Description": "Ground"},
                "TotalCharges": {"CurrencyCode": "USD", "MonetaryValue": "15.54"},
                "RatedPackage": {
                    "BaseServiceCharge": {"MonetaryValue": "14.46"},
                    "TransportationCharges": {"MonetaryValue": "15.54"},
                },
            },
        }
    }
