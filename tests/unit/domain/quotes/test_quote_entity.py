"""
Tests for Quote and QuoteItem entities.
"""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from hvac_crm.domain.quotes.entities import (
    DiscountType,
    HvacCategory,
    Quote,
    QuoteItem,
    QuoteItemType,
    QuoteStatus,
)
from hvac_crm.domain.shared.exceptions import InvalidQuoteError, InvalidStatusTransitionError

NOW = datetime(2026, 3, 2, 9, 30)


# ============================================================================
# QUOTE ITEM VALIDATION
# ============================================================================


@pytest.mark.parametrize(
    "kwargs, field_name",
    [
        ({"quantity": 0}, "quantity"),
        ({"unit_price": -1}, "unit_price"),
        ({"discount": -5}, "discount"),
        ({"discount": 101}, "discount"),
        ({"vat_rate": -8}, "vat_rate"),
        ({"name": " "}, "name"),
    ],
)
def test_quote_item_rejects_invalid_values(kwargs, field_name):
    params = {"name": "Montaż", "quantity": 1, "unit_price": 100, **kwargs}

    with pytest.raises(InvalidQuoteError) as exc_info:
        QuoteItem(**params)

    assert exc_info.value.field_name == field_name


def test_fixed_discount_may_exceed_hundred():
    item = QuoteItem(
        name="Montaż", quantity=1, unit_price=1000, discount=250, discount_type=DiscountType.FIXED
    )

    assert item.discount == Decimal("250")


def test_quote_item_converts_numbers_to_decimal():
    item = QuoteItem(name="Rura miedziana", quantity=2.5, unit_price="19.99", unit="m")

    assert item.quantity == Decimal("2.5")
    assert item.unit_price == Decimal("19.99")
    assert item.vat_rate == Decimal("23")


def test_quote_item_from_dict_reads_api_names():
    item = QuoteItem.from_dict(
        {"name": "Klimatyzator", "quantity": 1, "unitPrice": "3200", "type": "product", "vatRate": 8}
    )

    assert item.item_type == QuoteItemType.PRODUCT
    assert item.unit_price == Decimal("3200")
    assert item.vat_rate == Decimal("8")


# ============================================================================
# QUOTE LIFECYCLE
# ============================================================================


def test_quote_requires_title():
    with pytest.raises(InvalidQuoteError):
        Quote(title="")


def test_change_status_stamps_timestamps():
    quote = Quote(title="Klimatyzacja biura")

    quote.change_status(QuoteStatus.SENT, now=NOW)
    assert quote.sent_at == NOW

    quote.change_status(QuoteStatus.REJECTED, reason="Za drogo", now=NOW)
    assert quote.rejected_at == NOW
    assert quote.rejection_reason == "Za drogo"
    assert quote.is_terminal() is True


def test_terminal_quote_cannot_change_status():
    quote = Quote(title="Wentylacja", status=QuoteStatus.ACCEPTED)

    with pytest.raises(InvalidStatusTransitionError):
        quote.change_status(QuoteStatus.DRAFT)


def test_is_expired_and_age():
    quote = Quote(title="Pompa ciepła", valid_until=NOW - timedelta(seconds=1), created_at=NOW - timedelta(days=14))

    assert quote.is_expired(NOW) is True
    assert quote.age_in_days(NOW) == 14
    assert Quote(title="Bez terminu").is_expired(NOW) is False


def test_categories_include_items_and_quote_category():
    quote = Quote(
        title="Modernizacja",
        category=HvacCategory.SERWIS,
        items=[
            QuoteItem(name="Split", quantity=1, unit_price=1, category=HvacCategory.KLIMATYZACJA),
            QuoteItem(name="Rekuperator", quantity=1, unit_price=1, category=HvacCategory.WENTYLACJA),
        ],
    )

    assert quote.categories() == {
        HvacCategory.SERWIS,
        HvacCategory.KLIMATYZACJA,
        HvacCategory.WENTYLACJA,
    }


def test_recalculate_updates_totals():
    quote = Quote(title="Klimatyzacja", items=[QuoteItem(name="Split 5kW", quantity=2, unit_price=4500)])

    quote.recalculate()

    assert quote.total_amount_net == Decimal("9000.00")
    assert quote.total_vat == Decimal("2070.00")
    assert quote.total_amount == Decimal("11070.00")


def test_from_dict_reads_api_totals_and_margin():
    quote = Quote.from_dict(
        {
            "id": "q-1",
            "title": "Ogrzewanie hali",
            "status": "SENT",
            "totalAmountNet": "1000.00",
            "totalVAT": "230.00",
            "totalAmount": "1230.00",
            "metadata": {"profitMargin": 25},
            "items": [{"name": "Nagrzewnica", "quantity": 1, "unitPrice": "1000"}],
        }
    )

    assert quote.status == QuoteStatus.SENT
    assert quote.total_vat == Decimal("230.00")
    assert quote.margin == Decimal("25")
    assert len(quote.items) == 1


def test_to_dict_uses_string_money():
    data = Quote(title="Serwis", margin=10).to_dict()

    assert data["total_amount"] == "0"
    assert data["margin"] == "10"
    assert data["status"] == "draft"
    assert data["currency"] == "PLN"
