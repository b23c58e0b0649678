"""
Tests for HvacPrefetchLoader key conventions.
"""

from unittest.mock import MagicMock

import pytest

from hvac_crm.application.services import HvacPrefetchLoader
from hvac_crm.infrastructure.hvac_api import ListResult


@pytest.fixture
def mock_client():
    client = MagicMock()
    client.get_customers.return_value = ListResult(items=[{"id": "c-1", "name": "Hotel Bałtyk"}], total=1)
    client.get_service_tickets.return_value = ListResult(
        items=[
            {"id": "t-1", "status": "open", "technicianId": "tech-1"},
            {"id": "t-2", "status": "SCHEDULED", "technicianId": "tech-1"},
            {"id": "t-3", "status": "completed", "technicianId": "tech-2"},
        ],
        total=3,
    )
    client.get_equipment.return_value = ListResult(
        items=[
            {"id": "eq-1", "status": "active", "condition": "good"},
            {"id": "eq-2", "status": "maintenance", "condition": "poor"},
        ],
        total=2,
    )
    client.get_maintenance_history.return_value = [{"id": "m-1"}]
    return client


@pytest.fixture
def loader(mock_client):
    return HvacPrefetchLoader(mock_client, limit=50)


def test_customer_data(loader, mock_client):
    assert loader("customer-data") == {"customer:c-1:profile": {"id": "c-1", "name": "Hotel Bałtyk"}}
    mock_client.get_customers.assert_called_once_with(limit=50)


def test_service_tickets_skip_closed(loader):
    assert set(loader("service-tickets")) == {"ticket:t-1:details", "ticket:t-2:details"}


def test_technician_schedules_group_open_tickets(loader):
    schedules = loader("technician-schedules")

    assert list(schedules) == ["schedule:tech-1:tickets"]
    assert [t["id"] for t in schedules["schedule:tech-1:tickets"]] == ["t-1", "t-2"]


def test_equipment_status(loader):
    assert loader("equipment-status")["equipment:eq-2:status"] == {"status": "maintenance", "condition": "poor"}


def test_maintenance_history_only_for_equipment_in_service(loader, mock_client):
    assert loader("equipment-maintenance-history") == {"equipment:eq-2:maintenance": [{"id": "m-1"}]}
    mock_client.get_maintenance_history.assert_called_once_with("eq-2")


def test_unknown_data_type_is_empty(loader):
    assert loader("weather") == {}
