from hvac_crm.domain.quotes.entities.quote import (
    DiscountType,
    HvacCategory,
    PaymentMethod,
    Quote,
    QuoteItem,
    QuoteItemType,
    QuotePriority,
    QuoteStatus,
)

__all__ = [
    "DiscountType",
    "HvacCategory",
    "PaymentMethod",
    "Quote",
    "QuoteItem",
    "QuoteItemType",
    "QuotePriority",
    "QuoteStatus",
]
