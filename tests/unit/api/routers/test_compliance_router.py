"""
Tests for compliance router (hvac_crm/api/routers/compliance.py).

Endpoints run against real validators; no permissions are required.
"""

import pytest
from fastapi import status


# ============================================================================
# IDENTIFIER VALIDATION
# ============================================================================


def test_validate_nip_valid(client):
    response = client.post("/api/compliance/nip/validate", json={"value": "526-104-08-28"})

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["is_valid"] is True
    assert data["number"] == "5261040828"
    assert data["formatted"] == "526-104-08-28"


def test_validate_nip_invalid_is_not_an_http_error(client):
    response = client.post("/api/compliance/nip/validate", json={"value": "1234567890"})

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["is_valid"] is False
    assert data["error"]


def test_validate_regon(client):
    response = client.post("/api/compliance/regon/validate", json={"value": "123456785"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["is_valid"] is True


@pytest.mark.parametrize(
    "value, expected",
    [
        ("0000012345", False),
        ("1000012345", True),
        ("12345", False),
    ],
)
def test_validate_krs(client, value, expected):
    response = client.post("/api/compliance/krs/validate", json={"value": value})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["is_valid"] is expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ("00-950", True),
        ("00950", False),
    ],
)
def test_validate_postal_code(client, value, expected):
    response = client.post("/api/compliance/postal-code/validate", json={"value": value})

    assert response.json()["is_valid"] is expected


def test_missing_value_returns_422(client):
    response = client.post("/api/compliance/nip/validate", json={})

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


# ============================================================================
# VAT
# ============================================================================


def test_vat_derived_from_service_type(client):
    response = client.post(
        "/api/compliance/vat/calculate",
        json={"net_amount": "1000.00", "service_type": "maintenance"},
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {
        "net_amount": "1000.00",
        "vat_rate": "0.08",
        "vat_amount": "80.00",
        "gross_amount": "1080.00",
        "category": "reduced_first",
    }


def test_vat_explicit_category_wins(client):
    response = client.post(
        "/api/compliance/vat/calculate",
        json={"net_amount": "100", "category": "standard", "service_type": "maintenance"},
    )

    data = response.json()
    assert data["vat_amount"] == "23.00"
    assert data["category"] == "standard"


def test_vat_rejects_negative_amount(client):
    response = client.post("/api/compliance/vat/calculate", json={"net_amount": "-1"})

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


# ============================================================================
# COMPLIANCE CHECK / ENERGY PROVIDERS
# ============================================================================


def test_compliance_check_full_score(client):
    response = client.post(
        "/api/compliance/check",
        json={
            "nip": "5261040828",
            "regon": "123456785",
            "region": "mazowieckie",
            "hvac_licenses": ["F-gazy"],
        },
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["compliance_score"] == 90
    assert data["energy_provider"]["code"] == "PGE"
    assert data["hvac_licenses_valid"] is True


def test_energy_providers_without_query_lists_registry(client):
    response = client.get("/api/compliance/energy-providers")

    codes = [provider["code"] for provider in response.json()]
    assert codes[:4] == ["PGE", "TAURON", "ENEA", "ENERGA"]


def test_energy_providers_first_match(client):
    response = client.get("/api/compliance/energy-providers", params={"query": "śląskie"})

    data = response.json()
    assert len(data) == 1
    assert data[0]["code"] == "TAURON"


def test_energy_providers_no_match(client):
    response = client.get("/api/compliance/energy-providers", params={"query": "Bawaria"})

    assert response.json() == []
