"""
Tests for QuoteManagementService caching and commands.
"""

from datetime import datetime
from unittest.mock import MagicMock

import pytest

from hvac_crm.application.services import QuoteManagementService
from hvac_crm.application.services.quote_management_service import status_payload
from hvac_crm.domain.quotes.entities import Quote, QuoteItem, QuoteStatus
from hvac_crm.domain.shared.exceptions import EntityNotFoundError, InvalidStatusTransitionError
from hvac_crm.infrastructure.hvac_api import ListResult


@pytest.fixture
def mock_client():
    client = MagicMock()
    client.list_quotes.return_value = ListResult(
        items=[{"id": "q-1", "title": "Klimatyzacja biura", "status": "sent", "totalAmount": "1230.00"}],
        total=1,
    )
    client.get_quote.return_value = {"id": "q-1", "title": "Klimatyzacja biura"}
    return client


@pytest.fixture
def service(mock_client):
    return QuoteManagementService(mock_client)


# ============================================================================
# QUERIES
# ============================================================================


def test_get_quotes_maps_and_caches(service, mock_client):
    first = service.get_quotes(page=1, limit=20, filters={"status": "sent"})
    second = service.get_quotes(page=1, limit=20, filters={"status": "sent"})

    assert first is second
    assert first.quotes[0].status == QuoteStatus.SENT
    assert first.total == 1
    mock_client.list_quotes.assert_called_once_with(page=1, limit=20, filters={"status": "sent"})


def test_get_quote_not_found(service, mock_client):
    mock_client.get_quote.return_value = None

    with pytest.raises(EntityNotFoundError) as exc_info:
        service.get_quote("q-404")

    assert exc_info.value.entity_type == "quote"


def test_templates_cached_per_category(service, mock_client):
    mock_client.get_quote_templates.return_value = [{"id": "tpl-1"}]

    service.get_templates("klimatyzacja")
    service.get_templates("klimatyzacja")
    service.get_templates()

    assert mock_client.get_quote_templates.call_count == 2


def test_get_analytics_uses_upstream(service, mock_client):
    mock_client.get_quote_analytics.return_value = {"totalQuotes": 3}

    assert service.get_analytics({"dateFrom": "2026-01-01"}) == {"totalQuotes": 3}


# ============================================================================
# COMMANDS
# ============================================================================


def test_create_quote_totals_locally_before_post(service, mock_client):
    # Arrange
    mock_client.create_quote.side_effect = lambda payload: {"id": "q-2", **payload}
    quote = Quote(title="Split do biura", items=[QuoteItem(name="Split 5kW", quantity=2, unit_price=4500)])

    # Act
    created = service.create_quote(quote)

    # Assert
    payload = mock_client.create_quote.call_args.args[0]
    assert payload["totalAmount"] == "11070.00"
    assert payload["items"][0]["unitPrice"] == "4500"
    assert "id" not in payload
    assert created.id == "q-2"


def test_create_quote_invalidates_lists(service, mock_client):
    mock_client.create_quote.return_value = {"id": "q-2", "title": "Nowa"}
    service.get_quotes()

    service.create_quote(Quote(title="Nowa"))
    service.get_quotes()

    assert mock_client.list_quotes.call_count == 2


def test_update_status_invalidates_single_quote(service, mock_client):
    mock_client.update_quote_status.return_value = {"id": "q-1", "title": "Klimatyzacja biura", "status": "accepted"}
    service.get_quote("q-1")

    updated = service.update_quote_status("q-1", QuoteStatus.ACCEPTED)
    service.get_quote("q-1")

    assert updated.status == QuoteStatus.ACCEPTED
    assert mock_client.get_quote.call_count == 3
    assert mock_client.update_quote_status.call_args.args[1]["status"] == "accepted"


def test_update_status_rejects_change_from_terminal_status(service, mock_client):
    # Arrange
    mock_client.get_quote.return_value = {"id": "q-1", "title": "Klimatyzacja biura", "status": "accepted"}

    # Act & Assert
    with pytest.raises(InvalidStatusTransitionError) as exc_info:
        service.update_quote_status("q-1", QuoteStatus.DRAFT)

    assert exc_info.value.current_status == "accepted"
    assert exc_info.value.requested_status == "draft"
    mock_client.update_quote_status.assert_not_called()


def test_update_status_checks_fresh_quote_not_cached_copy(service, mock_client):
    # Arrange
    service.get_quote("q-1")
    mock_client.get_quote.return_value = {"id": "q-1", "title": "Klimatyzacja biura", "status": "rejected"}

    # Act & Assert
    with pytest.raises(InvalidStatusTransitionError):
        service.update_quote_status("q-1", QuoteStatus.SENT)
    mock_client.update_quote_status.assert_not_called()


def test_create_from_template_merges_overrides(service, mock_client):
    mock_client.create_quote_from_template.return_value = {"id": "q-3", "title": "Z szablonu"}

    service.create_from_template("tpl-1", "c-1", {"valid_until": "2026-04-01"})

    mock_client.create_quote_from_template.assert_called_once_with(
        {"templateId": "tpl-1", "customerId": "c-1", "validUntil": "2026-04-01"}
    )


def test_calculate_does_not_call_api(service, mock_client):
    quote = Quote(title="Wycena", items=[QuoteItem(name="Serwis", quantity=1, unit_price=300, vat_rate=8)])

    totals = service.calculate(quote)

    assert totals["total_amount"] == "324.00"
    mock_client.assert_not_called()
    mock_client.create_quote.assert_not_called()


# ============================================================================
# LOCAL ANALYTICS
# ============================================================================


def test_local_analytics_and_filters(service):
    quotes = [
        Quote(title="A", status=QuoteStatus.ACCEPTED),
        Quote(title="B", status=QuoteStatus.REJECTED),
    ]

    assert service.local_analytics(quotes).win_rate == 50.0
    assert [q.title for q in service.filter_quotes(quotes, "accepted")] == ["A"]


def test_status_payload_stamps():
    now = datetime(2026, 3, 1)

    assert status_payload(QuoteStatus.SENT, now=now) == {"status": "sent", "sentAt": "2026-03-01T00:00:00"}
    assert status_payload(QuoteStatus.VIEWED, now=now) == {"status": "viewed"}


# ============================================================================
# DUPLICATION AND VALUE
# ============================================================================


def test_duplicate_quote_posts_draft_copy(service, mock_client):
    # Arrange
    mock_client.get_quote.return_value = {
        "id": "q-1",
        "title": "Klimatyzacja biura",
        "status": "accepted",
        "quoteNumber": "OF-2026-001",
        "acceptedAt": "2026-02-10T10:00:00",
        "items": [{"id": "i-1", "name": "Split", "quantity": 1, "unitPrice": "1000", "vatRate": 23}],
    }
    mock_client.create_quote.side_effect = lambda payload: {"id": "q-2", **payload}

    # Act
    created = service.duplicate_quote("q-1")

    # Assert
    payload = mock_client.create_quote.call_args.args[0]
    assert payload["title"] == "Klimatyzacja biura (Kopia)"
    assert payload["status"] == "draft"
    assert payload["quoteNumber"] is None
    assert payload["acceptedAt"] is None
    assert payload["items"][0]["id"] != "i-1"
    assert "id" not in payload
    assert created.id == "q-2"


def test_quote_value_uses_margin(service, mock_client):
    mock_client.get_quote.return_value = {
        "id": "q-1",
        "title": "Klimatyzacja biura",
        "totalAmountNet": "1000.00",
        "totalVat": "230.00",
        "totalAmount": "1230.00",
        "margin": "20",
    }

    value = service.quote_value("q-1")

    assert value["gross"] == "1230.00"
    assert value["profit"] == "200.00"
    mock_client.update_quote.assert_not_called()
