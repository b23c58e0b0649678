"""
Tests for quote totals calculation and duplication.
"""

from datetime import datetime
from decimal import Decimal

from hvac_crm.domain.quotes.entities import DiscountType, Quote, QuoteItem, QuoteStatus
from hvac_crm.domain.quotes.services import (
    calculate_item_total,
    calculate_quote_value,
    calculate_totals,
    duplicate_quote,
)
from hvac_crm.domain.quotes.services.quote_calculator import item_discount


def test_item_total_with_percentage_discount():
    # Arrange
    item = QuoteItem(name="Montaż", quantity=1, unit_price=1000, discount=10)

    # Act
    net, vat, gross = calculate_item_total(item)

    # Assert
    assert net == Decimal("900.00")
    assert vat == Decimal("207.00")
    assert gross == Decimal("1107.00")


def test_fixed_discount_is_capped_at_item_total():
    item = QuoteItem(
        name="Przegląd", quantity=1, unit_price=200, discount=500, discount_type=DiscountType.FIXED
    )

    assert item_discount(item, Decimal("200.00")) == Decimal("200.00")
    assert calculate_item_total(item) == (Decimal("0.00"), Decimal("0.00"), Decimal("0.00"))


def test_calculate_totals_mixes_vat_rates_and_sets_item_totals():
    items = [
        QuoteItem(name="Klimatyzator", quantity=2, unit_price=4500),
        QuoteItem(name="Serwis", quantity=1, unit_price=300, vat_rate=8),
    ]

    totals = calculate_totals(items)

    assert totals.total_amount_net == Decimal("9300.00")
    assert totals.total_vat == Decimal("2094.00")
    assert totals.total_amount == Decimal("11394.00")
    assert items[0].total_price == Decimal("11070.00")
    assert items[1].total_price == Decimal("324.00")


def test_calculate_totals_of_no_items_is_zero():
    totals = calculate_totals([])

    assert totals.total_amount == Decimal("0.00")
    assert totals.to_dict()["items"] == []


def test_vat_is_rounded_per_item():
    items = [QuoteItem(name="Uszczelka", quantity=1, unit_price="0.05") for _ in range(3)]

    totals = calculate_totals(items)

    # 0.0115 rounds to 0.01 per line
    assert totals.total_vat == Decimal("0.03")


def test_calculate_quote_value_profit_from_margin():
    quote = Quote(title="Wentylacja", margin=20)
    quote.items = [QuoteItem(name="Centrala", quantity=1, unit_price=10000)]
    quote.recalculate()

    value = calculate_quote_value(quote)

    assert value.net == Decimal("10000.00")
    assert value.gross == Decimal("12300.00")
    assert value.profit == Decimal("2000.00")


def test_duplicate_quote_resets_lifecycle():
    # Arrange
    now = datetime(2026, 3, 2, 12, 0)
    original = Quote(
        title="Wentylacja hali",
        quote_number="OF-2026-001",
        status=QuoteStatus.REJECTED,
        rejected_at=datetime(2026, 2, 1),
        rejection_reason="Budżet",
        items=[QuoteItem(name="Kanał", quantity=10, unit_price=120, unit="m")],
    )

    # Act
    duplicate = duplicate_quote(original, now=now)

    # Assert
    assert duplicate.id != original.id
    assert duplicate.title == "Wentylacja hali (Kopia)"
    assert duplicate.status == QuoteStatus.DRAFT
    assert duplicate.quote_number is None
    assert duplicate.rejected_at is None
    assert duplicate.rejection_reason is None
    assert duplicate.created_at == now
    assert duplicate.items[0].id != original.items[0].id
    assert duplicate.items[0].quantity == Decimal("10")
    # Original untouched
    assert original.status == QuoteStatus.REJECTED
    assert original.items[0].name == "Kanał"
