"""
Tests for DashboardService statistics.
"""

from datetime import date
from unittest.mock import MagicMock

import pytest

from hvac_crm.application.services import DashboardService, EquipmentService, ServiceTicketService
from hvac_crm.infrastructure.hvac_api import ListResult
from hvac_crm.infrastructure.search import SemanticSearchError

TODAY = date(2026, 3, 2)


@pytest.fixture
def mock_client():
    client = MagicMock()
    client.get_service_tickets.return_value = ListResult(
        items=[
            {"id": "t-1", "title": "A", "status": "open"},
            {"id": "t-2", "title": "B", "status": "scheduled"},
            {"id": "t-3", "title": "C", "status": "scheduled"},
            {"id": "t-4", "title": "D", "status": "completed"},
            {"id": "t-5", "title": "E", "status": "cancelled"},
        ],
        total=5,
    )
    client.get_equipment.return_value = ListResult(
        items=[
            {"id": "eq-1", "name": "Split", "status": "repair_needed"},
            {"id": "eq-2", "name": "Rekuperator", "status": "active"},
        ],
        total=2,
    )
    client.get_maintenance_history.return_value = [
        {"id": "m-1", "status": "scheduled", "scheduledDate": "2026-02-20"},
        {"id": "m-2", "status": "scheduled", "scheduledDate": "2026-03-20"},
        {"id": "m-3", "status": "overdue"},
    ]
    return client


@pytest.fixture
def make_service(mock_client):
    def factory(weaviate=None):
        return DashboardService(
            ServiceTicketService(mock_client),
            EquipmentService(mock_client),
            weaviate=weaviate,
        )

    return factory


def test_get_stats_counts_cards(make_service, mock_client):
    # Arrange
    weaviate = MagicMock()
    weaviate.count_documents.return_value = 1247

    # Act
    stats = make_service(weaviate).get_stats(today=TODAY)

    # Assert
    assert stats.active_tickets == 3
    assert stats.scheduled_visits == 2
    assert stats.equipment_in_service == 1
    assert stats.overdue_maintenance == 2
    assert stats.documents_indexed == 1247
    mock_client.get_maintenance_history.assert_called_once_with("eq-1")


def test_weaviate_failure_counts_zero_documents(make_service):
    weaviate = MagicMock()
    weaviate.count_documents.side_effect = SemanticSearchError("down")

    assert make_service(weaviate).get_stats(today=TODAY).documents_indexed == 0


def test_no_weaviate_counts_zero_documents(make_service):
    assert make_service().get_stats(today=TODAY).documents_indexed == 0
