"""
Tests for dashboard router (hvac_crm/api/routers/dashboard.py).
"""

from datetime import datetime

from fastapi import status

from hvac_crm.api.dependencies import get_dashboard_service
from hvac_crm.application.services import DashboardStats


def test_dashboard_stats(client, override, manager_headers):
    service = override(get_dashboard_service)
    service.get_stats.return_value = DashboardStats(
        active_tickets=3,
        scheduled_visits=2,
        equipment_in_service=1,
        overdue_maintenance=2,
        documents_indexed=1247,
        generated_at=datetime(2026, 3, 2, 9, 30),
    )

    response = client.get("/api/dashboard/stats", headers=manager_headers)

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["active_tickets"] == 3
    assert data["documents_indexed"] == 1247


def test_technician_has_no_analytics_access(client, override, technician_headers):
    service = override(get_dashboard_service)

    response = client.get("/api/dashboard/stats", headers=technician_headers)

    assert response.status_code == status.HTTP_403_FORBIDDEN
    service.get_stats.assert_not_called()
