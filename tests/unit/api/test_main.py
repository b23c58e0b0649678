"""
Tests for FastAPI app setup (hvac_crm/api/main.py).

Covers:
- Health check endpoint
- CORS middleware
- Global exception handling (domain, HVAC API, unexpected)
- Lifespan shutdown
"""

from unittest.mock import patch

from fastapi import status
from fastapi.testclient import TestClient

from hvac_crm import __version__
from hvac_crm.api.dependencies import get_equipment_service
from hvac_crm.domain.shared.exceptions import (
    EntityNotFoundError,
    InvalidStatusTransitionError,
)
from hvac_crm.infrastructure.hvac_api import HvacApiNetworkError


# ============================================================================
# HEALTH / CORS
# ============================================================================


def test_health_check_endpoint(client):
    with patch("hvac_crm.api.main.redis_health_check", return_value=True):
        response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == __version__
    assert data["redis"] is True


def test_health_check_reports_redis_down(client):
    with patch("hvac_crm.api.main.redis_health_check", return_value=False):
        response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["redis"] is False


def test_cors_middleware_configured(client):
    with patch("hvac_crm.api.main.redis_health_check", return_value=True):
        response = client.get("/health", headers={"Origin": "http://localhost:3000"})

    assert "access-control-allow-origin" in response.headers


def test_openapi_lists_all_routers(client):
    paths = client.get("/openapi.json").json()["paths"]

    for path in (
        "/api/compliance/nip/validate",
        "/api/quotes",
        "/api/equipment",
        "/api/tickets",
        "/api/search",
        "/api/dashboard/stats",
    ):
        assert path in paths


# ============================================================================
# EXCEPTION HANDLERS
# ============================================================================


def test_entity_not_found_maps_to_404(client, override, manager_headers):
    service = override(get_equipment_service)
    service.get_equipment.side_effect = EntityNotFoundError(
        "Equipment eq-1 not found", entity_type="equipment", entity_id="eq-1"
    )

    response = client.get("/api/equipment/eq-1", headers=manager_headers)

    assert response.status_code == status.HTTP_404_NOT_FOUND
    body = response.json()
    assert body["code"] == "ENTITY_NOT_FOUND"
    assert body["details"]["entity_id"] == "eq-1"


def test_other_domain_errors_map_to_400(client, override, manager_headers):
    service = override(get_equipment_service)
    service.get_equipment.side_effect = InvalidStatusTransitionError(
        "Cannot change", current_status="completed", requested_status="open"
    )

    response = client.get("/api/equipment/eq-1", headers=manager_headers)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    body = response.json()
    assert body["code"] == "INVALIDSTATUSTRANSITION"
    assert body["details"]["current_status"] == "completed"


def test_hvac_api_error_keeps_upstream_status(client, override, manager_headers):
    service = override(get_equipment_service)
    service.get_equipment.side_effect = HvacApiNetworkError("No response", details="refused")

    response = client.get("/api/equipment/eq-1", headers=manager_headers)

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    body = response.json()
    assert body["code"] == "HVAC_API_ERROR"
    assert body["details"]["upstream"] == "refused"


def test_unexpected_error_maps_to_500(app, override, manager_headers):
    service = override(get_equipment_service)
    service.get_equipment.side_effect = RuntimeError("boom")
    client = TestClient(app, raise_server_exceptions=False)

    response = client.get("/api/equipment/eq-1", headers=manager_headers)

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json()["code"] == "INTERNAL_SERVER_ERROR"


# ============================================================================
# LIFESPAN
# ============================================================================


def test_shutdown_releases_connections(app):
    with patch("hvac_crm.api.main.reset_dependencies") as mock_reset, patch(
        "hvac_crm.api.main.close_connections"
    ) as mock_close:
        with TestClient(app):
            mock_reset.assert_not_called()

        mock_reset.assert_called_once_with()
        mock_close.assert_called_once_with()
