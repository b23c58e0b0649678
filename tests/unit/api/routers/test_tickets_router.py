"""
Tests for service tickets router (hvac_crm/api/routers/tickets.py).
"""

from datetime import datetime
from unittest.mock import MagicMock

import pytest
from fastapi import status

from hvac_crm.api.dependencies import get_ticket_service
from hvac_crm.domain.hvac.entities import ServiceTicket, TicketPriority, TicketStatus
from hvac_crm.domain.shared.exceptions import InvalidStatusTransitionError


def ticket(**data):
    mock = MagicMock()
    mock.to_dict.return_value = data
    return mock


@pytest.fixture
def ticket_service(override):
    return override(get_ticket_service)


def test_list_tickets_maps_filters(client, ticket_service, technician_headers):
    ticket_service.list_tickets.return_value = MagicMock(items=[ticket(id="t-1")], total=1)

    response = client.get(
        "/api/tickets",
        params={"status": "open", "technician_id": "tech-4"},
        headers=technician_headers,
    )

    assert response.json() == {"items": [{"id": "t-1"}], "total": 1}
    ticket_service.list_tickets.assert_called_once_with(
        filters={"status": "open", "technicianId": "tech-4"}, limit=50, offset=0
    )


def test_get_ticket(client, ticket_service, technician_headers):
    ticket_service.get_ticket.return_value = ticket(id="t-1", ticket_number="SRV-20260302-ABC123")

    response = client.get("/api/tickets/t-1", headers=technician_headers)

    assert response.json()["ticket_number"] == "SRV-20260302-ABC123"


def test_create_ticket(client, ticket_service, manager_headers):
    ticket_service.create_ticket.return_value = ticket(id="t-new")

    response = client.post(
        "/api/tickets",
        json={"title": "Brak ciepłej wody", "priority": "high", "customer_id": "cust-17"},
        headers=manager_headers,
    )

    assert response.status_code == status.HTTP_201_CREATED
    created = ticket_service.create_ticket.call_args.args[0]
    assert isinstance(created, ServiceTicket)
    assert created.title == "Brak ciepłej wody"
    assert created.priority == TicketPriority.HIGH
    assert created.status == TicketStatus.OPEN


def test_technician_cannot_create_ticket(client, ticket_service, technician_headers):
    response = client.post("/api/tickets", json={"title": "Awaria"}, headers=technician_headers)

    assert response.status_code == status.HTTP_403_FORBIDDEN
    ticket_service.create_ticket.assert_not_called()


def test_change_status_passes_schedule(client, ticket_service, technician_headers):
    ticket_service.change_status.return_value = ticket(id="t-1", status="scheduled")

    response = client.patch(
        "/api/tickets/t-1/status",
        json={"status": "scheduled", "scheduled_date": "2026-03-05T09:00:00", "technician_id": "tech-4"},
        headers=technician_headers,
    )

    assert response.json()["status"] == "scheduled"
    ticket_service.change_status.assert_called_once_with(
        "t-1",
        TicketStatus.SCHEDULED,
        scheduled_date=datetime(2026, 3, 5, 9, 0),
        technician_id="tech-4",
        actual_duration=None,
    )


def test_invalid_transition_returns_400(client, ticket_service, technician_headers):
    ticket_service.change_status.side_effect = InvalidStatusTransitionError(
        "Cannot change ticket from completed to open",
        current_status="completed",
        requested_status="open",
    )

    response = client.patch("/api/tickets/t-1/status", json={"status": "open"}, headers=technician_headers)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["details"]["requested_status"] == "open"
