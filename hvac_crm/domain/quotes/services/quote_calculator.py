"""
Quote Calculator Domain Service.

Pure functions computing quote money values.

Responsibility:
    - Item totals (quantity, discount, VAT)
    - Quote totals (net, VAT, gross)
    - Quote value summary with profit
    - Duplicating quote as new draft

Architecture Notes:
    - Stateless, no I/O
    - Decimal arithmetic, rounded half-up to grosze per item
"""

import copy
import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable, Optional

from hvac_crm.domain.compliance.value_objects import round_money
from hvac_crm.domain.quotes.entities.quote import DiscountType, Quote, QuoteItem, QuoteStatus
from hvac_crm.shared.utils import new_id

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")
DUPLICATE_SUFFIX = " (Kopia)"


@dataclass(frozen=True)
class QuoteTotals:
    """Result of calculate_totals()."""

    items: list[QuoteItem]
    total_amount_net: Decimal
    total_vat: Decimal
    total_amount: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "total_amount_net": str(self.total_amount_net),
            "total_vat": str(self.total_vat),
            "total_amount": str(self.total_amount),
        }


@dataclass(frozen=True)
class QuoteValue:
    """Money summary of a quote."""

    net: Decimal
    vat: Decimal
    gross: Decimal
    margin: Decimal
    profit: Decimal

    def to_dict(self) -> dict[str, str]:
        return {
            "net": str(self.net),
            "vat": str(self.vat),
            "gross": str(self.gross),
            "margin": str(self.margin),
            "profit": str(self.profit),
        }


def item_discount(item: QuoteItem, item_total: Decimal) -> Decimal:
    """
    Discount amount for a line, never larger than line total.

    Examples:
        >>> item = QuoteItem(name="Montaż", quantity=1, unit_price=1000, discount=10)
        >>> item_discount(item, Decimal("1000"))
        Decimal('100.00')
    """
    if item.discount_type == DiscountType.PERCENTAGE:
        discount = item_total * item.discount / HUNDRED
    else:
        discount = item.discount
    return round_money(min(discount, item_total))


def calculate_item_total(item: QuoteItem) -> tuple[Decimal, Decimal, Decimal]:
    """
    Calculate (net, vat, gross) for single item.

    Args:
        item: Quote line

    Returns:
        Tuple of rounded (net, vat, gross) amounts
    """
    item_total = round_money(item.quantity * item.unit_price)
    net = item_total - item_discount(item, item_total)
    vat = round_money(net * item.vat_rate / HUNDRED)
    return net, vat, net + vat


def calculate_totals(items: Iterable[QuoteItem]) -> QuoteTotals:
    """
    Fill total_price on every item and sum quote totals.

    Items are modified in place (total_price set to gross line value).

    Args:
        items: Quote lines

    Returns:
        QuoteTotals with items and summed net/VAT/gross

    Examples:
        >>> totals = calculate_totals([
        ...     QuoteItem(name="Klimatyzator", quantity=2, unit_price=4500),
        ...     QuoteItem(name="Serwis", quantity=1, unit_price=300, vat_rate=8),
        ... ])
        >>> totals.total_amount_net, totals.total_vat, totals.total_amount
        (Decimal('9300.00'), Decimal('2094.00'), Decimal('11394.00'))
    """
    calculated = list(items)
    total_net = Decimal("0.00")
    total_vat = Decimal("0.00")

    for item in calculated:
        net, vat, gross = calculate_item_total(item)
        item.total_price = gross
        total_net += net
        total_vat += vat

    return QuoteTotals(
        items=calculated,
        total_amount_net=round_money(total_net),
        total_vat=round_money(total_vat),
        total_amount=round_money(total_net + total_vat),
    )


def calculate_quote_value(quote: Quote) -> QuoteValue:
    """
    Summarize quote value using stored totals and margin.

    Profit is net amount times margin percent.
    """
    net = round_money(quote.total_amount_net)
    return QuoteValue(
        net=net,
        vat=round_money(quote.total_vat),
        gross=round_money(quote.total_amount),
        margin=quote.margin,
        profit=round_money(net * quote.margin / HUNDRED),
    )


def duplicate_quote(quote: Quote, now: Optional[datetime] = None) -> Quote:
    """
    Copy quote as new draft.

    New quote gets new id, " (Kopia)" title suffix and no quote number.
    Lifecycle timestamps and rejection reason are cleared; items get new ids.

    Examples:
        >>> original = Quote(title="Wentylacja hali", status=QuoteStatus.SENT)
        >>> duplicate_quote(original).title
        'Wentylacja hali (Kopia)'
    """
    now = now or datetime.now()
    items = []
    for item in quote.items:
        item_copy = copy.deepcopy(item)
        item_copy.id = new_id()
        items.append(item_copy)

    duplicate = copy.deepcopy(quote)
    duplicate.id = new_id()
    duplicate.title = f"{quote.title}{DUPLICATE_SUFFIX}"
    duplicate.quote_number = None
    duplicate.status = QuoteStatus.DRAFT
    duplicate.items = items
    duplicate.sent_at = None
    duplicate.accepted_at = None
    duplicate.rejected_at = None
    duplicate.rejection_reason = None
    duplicate.created_at = now
    duplicate.updated_at = now

    logger.debug(f"Duplicated quote {quote.id} as {duplicate.id}")
    return duplicate
