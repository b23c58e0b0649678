"""
Quote Entity and Quote Item.

Commercial offer (oferta) for HVAC work: installation, service contract,
design. A quote consists of priced items and moves through a sales lifecycle
from draft to accepted/rejected.

Responsibility:
    - Quote lifecycle (status changes with timestamps)
    - Item-level validation (quantity, price, discount)
    - Expiry and age calculations
    - Serialization to/from HVAC API payloads (camelCase accepted)

Architecture Notes:
    - Part of Domain Layer (quotes subdomain)
    - Totals arithmetic lives in services/quote_calculator.py
    - Money is Decimal, rounded to 2 places only when totals are calculated

Status Lifecycle:
    draft -> pending_review -> approved -> sent -> viewed -> accepted | rejected
    Any open status -> cancelled | expired
    accepted, rejected, cancelled, expired are terminal
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Final, Optional

from hvac_crm.domain.shared.exceptions import InvalidQuoteError, InvalidStatusTransitionError
from hvac_crm.shared.utils import new_id, parse_datetime, parse_decimal, parse_enum, pick


class QuoteStatus(str, Enum):
    DRAFT = "draft"
    PENDING_REVIEW = "pending_review"
    APPROVED = "approved"
    SENT = "sent"
    VIEWED = "viewed"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class QuotePriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class QuoteItemType(str, Enum):
    SERVICE = "service"
    PRODUCT = "product"
    LABOR = "labor"
    MATERIAL = "material"


class HvacCategory(str, Enum):
    """HVAC work categories (Polish names as used by the sales team)."""

    KLIMATYZACJA = "klimatyzacja"
    WENTYLACJA = "wentylacja"
    OGRZEWANIE = "ogrzewanie"
    CHLODZENIE = "chłodzenie"
    AUTOMATYKA = "automatyka"
    SERWIS = "serwis"
    KONSERWACJA = "konserwacja"
    PROJEKTOWANIE = "projektowanie"
    MONTAZ = "montaż"
    INNE = "inne"


class PaymentMethod(str, Enum):
    TRANSFER = "transfer"
    CASH = "cash"
    CARD = "card"
    LEASING = "leasing"
    INSTALLMENTS = "installments"
    BARTER = "barter"


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


TERMINAL_STATUSES: Final[frozenset[QuoteStatus]] = frozenset(
    {
        QuoteStatus.ACCEPTED,
        QuoteStatus.REJECTED,
        QuoteStatus.CANCELLED,
        QuoteStatus.EXPIRED,
    }
)

DEFAULT_VAT_RATE: Final[Decimal] = Decimal("23")


@dataclass
class QuoteItem:
    """
    Single priced line of a quote.

    Attributes:
        name: Line name (required)
        quantity: Amount (> 0)
        unit_price: Net unit price in PLN (>= 0)
        item_type: service, product, labor or material
        unit: Unit of measure ("szt.", "h", "m")
        vat_rate: VAT in percent (default 23)
        discount: Percent or fixed PLN amount (>= 0)
        discount_type: PERCENTAGE or FIXED
        category: HVAC category of this line (optional)
        total_price: Gross line total (filled by calculate_totals)
    """

    name: str
    quantity: Decimal
    unit_price: Decimal
    item_type: QuoteItemType = QuoteItemType.SERVICE
    description: Optional[str] = None
    unit: str = "szt."
    vat_rate: Decimal = DEFAULT_VAT_RATE
    discount: Decimal = Decimal("0")
    discount_type: DiscountType = DiscountType.PERCENTAGE
    category: Optional[HvacCategory] = None
    total_price: Optional[Decimal] = None
    id: str = field(default_factory=new_id)

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise InvalidQuoteError("Quote item name is required", field_name="name")

        self.quantity = Decimal(str(self.quantity))
        self.unit_price = Decimal(str(self.unit_price))
        self.vat_rate = Decimal(str(self.vat_rate))
        self.discount = Decimal(str(self.discount or 0))

        if self.quantity <= 0:
            raise InvalidQuoteError(
                f"Quantity must be greater than 0, got {self.quantity}", field_name="quantity"
            )
        if self.unit_price < 0:
            raise InvalidQuoteError(
                f"Unit price cannot be negative, got {self.unit_price}", field_name="unit_price"
            )
        if self.discount < 0:
            raise InvalidQuoteError(
                f"Discount cannot be negative, got {self.discount}", field_name="discount"
            )
        if self.discount_type == DiscountType.PERCENTAGE and self.discount > 100:
            raise InvalidQuoteError(
                f"Percentage discount cannot exceed 100, got {self.discount}", field_name="discount"
            )
        if self.vat_rate < 0:
            raise InvalidQuoteError(
                f"VAT rate cannot be negative, got {self.vat_rate}", field_name="vat_rate"
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "type": self.item_type.value,
            "category": self.category.value if self.category else None,
            "quantity": str(self.quantity),
            "unit": self.unit,
            "unit_price": str(self.unit_price),
            "vat_rate": str(self.vat_rate),
            "discount": str(self.discount),
            "discount_type": self.discount_type.value,
            "total_price": str(self.total_price) if self.total_price is not None else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "QuoteItem":
        vat_rate = pick(data, "vat_rate")
        return cls(
            id=str(data["id"]) if data.get("id") else new_id(),
            name=data["name"],
            description=data.get("description"),
            item_type=parse_enum(QuoteItemType, pick(data, "item_type") or data.get("type"), QuoteItemType.SERVICE),
            category=parse_enum(HvacCategory, data.get("category")),
            quantity=parse_decimal(data["quantity"]),
            unit=data.get("unit") or "szt.",
            unit_price=parse_decimal(pick(data, "unit_price")),
            vat_rate=parse_decimal(vat_rate) if vat_rate is not None else DEFAULT_VAT_RATE,
            discount=parse_decimal(data.get("discount")) or Decimal("0"),
            discount_type=parse_enum(DiscountType, pick(data, "discount_type"), DiscountType.PERCENTAGE),
            total_price=parse_decimal(pick(data, "total_price")),
        )


@dataclass
class Quote:
    """
    Mutable entity representing a commercial HVAC quote.

    Attributes:
        title: Quote title (required)
        customer_id, customer_name: Customer reference
        items: Priced lines
        status: Sales lifecycle status (default DRAFT)
        priority: LOW..URGENT (default MEDIUM)
        category: Main HVAC category
        total_amount_net, total_vat, total_amount: Totals (see recalculate())
        currency: Always "PLN"
        valid_until: Offer validity deadline
        payment_method, payment_terms: Payment conditions
        margin: Expected profit margin in percent
        sent_at, accepted_at, rejected_at, rejection_reason: Lifecycle stamps

    Examples:
        >>> quote = Quote(title="Klimatyzacja biura", customer_id="c-1", items=[
        ...     QuoteItem(name="Split 5kW", quantity=2, unit_price=4500),
        ... ])
        >>> quote.recalculate()
        >>> quote.total_amount
        Decimal('11070.00')
        >>> quote.change_status(QuoteStatus.SENT)
        >>> quote.sent_at is not None
        True
    """

    title: str
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None
    description: Optional[str] = None
    quote_number: Optional[str] = None
    items: list[QuoteItem] = field(default_factory=list)
    status: QuoteStatus = QuoteStatus.DRAFT
    priority: QuotePriority = QuotePriority.MEDIUM
    category: Optional[HvacCategory] = None
    total_amount_net: Decimal = Decimal("0")
    total_vat: Decimal = Decimal("0")
    total_amount: Decimal = Decimal("0")
    currency: str = "PLN"
    valid_until: Optional[datetime] = None
    payment_method: Optional[PaymentMethod] = None
    payment_terms: Optional[str] = None
    margin: Decimal = Decimal("0")
    sent_at: Optional[datetime] = None
    accepted_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None

    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        if not self.title or not self.title.strip():
            raise InvalidQuoteError("Quote title is required", field_name="title")
        self.margin = Decimal(str(self.margin or 0))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def change_status(
        self,
        new_status: QuoteStatus,
        reason: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> None:
        """
        Move quote to new status and stamp lifecycle timestamps.

        SENT stamps sent_at, ACCEPTED stamps accepted_at, REJECTED stamps
        rejected_at and stores reason.

        Raises:
            InvalidStatusTransitionError: If quote is already in a terminal status
        """
        if self.is_terminal() and new_status != self.status:
            raise InvalidStatusTransitionError(
                f"Cannot change quote status from {self.status.value} to {new_status.value}",
                current_status=self.status.value,
                requested_status=new_status.value,
            )

        now = now or datetime.now()
        if new_status == QuoteStatus.SENT:
            self.sent_at = now
        elif new_status == QuoteStatus.ACCEPTED:
            self.accepted_at = now
        elif new_status == QuoteStatus.REJECTED:
            self.rejected_at = now
            self.rejection_reason = reason

        self.status = new_status
        self.updated_at = now

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.valid_until is None:
            return False
        now = now or datetime.now()
        return now > self.valid_until

    def age_in_days(self, now: Optional[datetime] = None) -> int:
        now = now or datetime.now()
        return (now - self.created_at).days

    def categories(self) -> set[HvacCategory]:
        """Categories of all items plus quote category."""
        found = {item.category for item in self.items if item.category}
        if self.category:
            found.add(self.category)
        return found

    def recalculate(self) -> None:
        """Recompute item totals and quote totals from items."""
        # Local import: calculator depends on this module
        from hvac_crm.domain.quotes.services.quote_calculator import calculate_totals

        totals = calculate_totals(self.items)
        self.total_amount_net = totals.total_amount_net
        self.total_vat = totals.total_vat
        self.total_amount = totals.total_amount
        self.updated_at = datetime.now()

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "quote_number": self.quote_number,
            "title": self.title,
            "description": self.description,
            "customer_id": self.customer_id,
            "customer_name": self.customer_name,
            "status": self.status.value,
            "priority": self.priority.value,
            "category": self.category.value if self.category else None,
            "items": [item.to_dict() for item in self.items],
            "total_amount_net": str(self.total_amount_net),
            "total_vat": str(self.total_vat),
            "total_amount": str(self.total_amount),
            "currency": self.currency,
            "valid_until": self.valid_until.isoformat() if self.valid_until else None,
            "payment_method": self.payment_method.value if self.payment_method else None,
            "payment_terms": self.payment_terms,
            "margin": str(self.margin),
            "sent_at": self.sent_at.isoformat() if self.sent_at else None,
            "accepted_at": self.accepted_at.isoformat() if self.accepted_at else None,
            "rejected_at": self.rejected_at.isoformat() if self.rejected_at else None,
            "rejection_reason": self.rejection_reason,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Quote":
        """
        Build Quote from to_dict() output or HVAC API payload.

        HVAC API names: totalVAT, metadata.profitMargin are also accepted.
        """
        metadata = data.get("metadata") or {}
        margin = pick(data, "margin")
        if margin is None:
            margin = metadata.get("profitMargin") or metadata.get("profit_margin") or 0

        return cls(
            id=str(data["id"]) if data.get("id") else new_id(),
            quote_number=pick(data, "quote_number"),
            title=data["title"],
            description=data.get("description"),
            customer_id=pick(data, "customer_id"),
            customer_name=pick(data, "customer_name"),
            status=parse_enum(QuoteStatus, data.get("status"), QuoteStatus.DRAFT),
            priority=parse_enum(QuotePriority, data.get("priority"), QuotePriority.MEDIUM),
            category=parse_enum(HvacCategory, data.get("category")),
            items=[QuoteItem.from_dict(item) for item in data.get("items") or []],
            total_amount_net=parse_decimal(pick(data, "total_amount_net")) or Decimal("0"),
            total_vat=parse_decimal(pick(data, "total_vat") or data.get("totalVAT")) or Decimal("0"),
            total_amount=parse_decimal(pick(data, "total_amount")) or Decimal("0"),
            currency=data.get("currency") or "PLN",
            valid_until=parse_datetime(pick(data, "valid_until")),
            payment_method=parse_enum(PaymentMethod, pick(data, "payment_method")),
            payment_terms=pick(data, "payment_terms"),
            margin=parse_decimal(margin) or Decimal("0"),
            sent_at=parse_datetime(pick(data, "sent_at")),
            accepted_at=parse_datetime(pick(data, "accepted_at")),
            rejected_at=parse_datetime(pick(data, "rejected_at")),
            rejection_reason=pick(data, "rejection_reason"),
            created_at=parse_datetime(pick(data, "created_at")) or datetime.now(),
            updated_at=parse_datetime(pick(data, "updated_at")) or datetime.now(),
        )

    def __str__(self) -> str:
        return f"Quote({self.quote_number or self.id}, {self.status.value}, {self.total_amount} {self.currency})"
