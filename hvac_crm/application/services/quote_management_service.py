"""
Quote Management Service - Application Orchestration

Responsibility:
    Quote use cases backed by the HVAC API: listing, details, creation with
    locally calculated totals, updates, status changes, duplication,
    templates and analytics. Keeps its own 5 minute cache on top of the client.

Architecture Notes:
    - Part of Application Layer (Services/Use Cases)
    - Depends on Domain Layer (Quote entity, calculator, analytics)
    - Depends on Infrastructure Layer (HvacApiClient, MemoryCache)

Contains:
    - QuotePage: List result DTO
    - QuoteManagementService

Cache Keys:
    quotes_{filters}_{page}_{limit}, quote_{id}, templates_{category|all},
    quote_analytics_{filters}

Invalidation:
    create -> "quotes_"; update / status change -> "quote_{id}" and "quotes_"
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

from hvac_crm.domain.quotes.entities import Quote, QuoteStatus
from hvac_crm.domain.quotes.services import (
    QuoteAnalytics,
    build_analytics,
    calculate_quote_value,
    calculate_totals,
    duplicate_quote,
    quick_filter,
)
from hvac_crm.domain.shared.exceptions import EntityNotFoundError
from hvac_crm.infrastructure.cache import MemoryCache
from hvac_crm.infrastructure.hvac_api import HvacApiClient
from hvac_crm.shared.utils import to_camel_payload

logger = logging.getLogger(__name__)

CACHE_TTL = 5 * 60


@dataclass
class QuotePage:
    quotes: list[Quote] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 20


def _filters_key(filters: Optional[Mapping[str, Any]]) -> str:
    return json.dumps(dict(filters or {}), sort_keys=True, default=str)


def status_payload(
    status: QuoteStatus, reason: Optional[str] = None, now: Optional[datetime] = None
) -> dict[str, Any]:
    """
    Body for PATCH /quotes/{id}/status.

    Examples:
        >>> status_payload(QuoteStatus.REJECTED, "Za drogo", datetime(2026, 3, 1))
        {'status': 'rejected', 'rejectedAt': '2026-03-01T00:00:00', 'rejectionReason': 'Za drogo'}
    """
    now = now or datetime.now()
    payload: dict[str, Any] = {"status": status.value}
    if status == QuoteStatus.SENT:
        payload["sentAt"] = now.isoformat()
    elif status == QuoteStatus.ACCEPTED:
        payload["acceptedAt"] = now.isoformat()
    elif status == QuoteStatus.REJECTED:
        payload["rejectedAt"] = now.isoformat()
        payload["rejectionReason"] = reason
    return payload


class QuoteManagementService:
    """
    Quote use cases over HVAC API.

    Args:
        client: HvacApiClient
        cache: Service-level cache (default: 5 minute MemoryCache)
    """

    def __init__(self, client: HvacApiClient, cache: Optional[MemoryCache] = None) -> None:
        self.client = client
        self.cache = cache or MemoryCache(default_ttl=CACHE_TTL)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_quotes(
        self, page: int = 1, limit: int = 20, filters: Optional[Mapping[str, Any]] = None
    ) -> QuotePage:
        cache_key = f"quotes_{_filters_key(filters)}_{page}_{limit}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        result = self.client.list_quotes(page=page, limit=limit, filters=filters)
        quote_page = QuotePage(
            quotes=[Quote.from_dict(item) for item in result.items],
            total=result.total,
            page=page,
            limit=limit,
        )
        self.cache.set(cache_key, quote_page)
        return quote_page

    def get_quote(self, quote_id: str) -> Quote:
        """
        Raises:
            EntityNotFoundError: If HVAC API has no such quote
        """
        cache_key = f"quote_{quote_id}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        data = self.client.get_quote(quote_id)
        if data is None:
            raise EntityNotFoundError(f"Quote {quote_id} not found", entity_type="quote", entity_id=quote_id)

        quote = Quote.from_dict(data)
        self.cache.set(cache_key, quote)
        return quote

    def get_templates(self, category: Optional[str] = None) -> list[dict[str, Any]]:
        cache_key = f"templates_{category or 'all'}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        templates = self.client.get_quote_templates(category)
        self.cache.set(cache_key, templates)
        return templates

    def get_analytics(self, filters: Optional[Mapping[str, Any]] = None) -> dict[str, Any]:
        """Analytics computed by HVAC API."""
        cache_key = f"quote_analytics_{_filters_key(filters)}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        analytics = self.client.get_quote_analytics(filters)
        self.cache.set(cache_key, analytics)
        return analytics

    def local_analytics(self, quotes: Iterable[Quote]) -> QuoteAnalytics:
        return build_analytics(quotes)

    def filter_quotes(self, quotes: Iterable[Quote], name: str) -> list[Quote]:
        return quick_filter(quotes, name)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def _invalidate(self, quote_id: Optional[str] = None) -> None:
        if quote_id:
            self.cache.delete(f"quote_{quote_id}")
        self.cache.invalidate_substring("quotes_")
        self.cache.invalidate_substring("quote_analytics_")

    def create_quote(self, quote: Quote) -> Quote:
        """Total items locally, then POST quote."""
        quote.recalculate()
        payload = to_camel_payload(quote.to_dict())
        payload.pop("id", None)

        created = Quote.from_dict(self.client.create_quote(payload))
        self._invalidate()
        logger.info(f"Created quote {created.id} ({created.total_amount} {created.currency})")
        return created

    def update_quote(self, quote_id: str, changes: Mapping[str, Any]) -> Quote:
        updated = Quote.from_dict(self.client.update_quote(quote_id, to_camel_payload(dict(changes))))
        self._invalidate(quote_id)
        return updated

    def update_quote_status(
        self, quote_id: str, status: QuoteStatus, reason: Optional[str] = None
    ) -> Quote:
        self.cache.delete(f"quote_{quote_id}")
        quote = self.get_quote(quote_id)
        now = datetime.now()
        quote.change_status(status, reason, now)

        payload = status_payload(status, reason, now)
        updated = Quote.from_dict(self.client.update_quote_status(quote_id, payload))
        self._invalidate(quote_id)
        logger.info(f"Quote {quote_id} status changed to {status.value}")
        return updated

    def create_from_template(
        self, template_id: str, customer_id: str, overrides: Optional[Mapping[str, Any]] = None
    ) -> Quote:
        payload = {
            "templateId": template_id,
            "customerId": customer_id,
            **to_camel_payload(dict(overrides or {})),
        }
        created = Quote.from_dict(self.client.create_quote_from_template(payload))
        self._invalidate()
        return created

    def calculate(self, quote: Quote) -> dict[str, Any]:
        """Local totals without upstream call."""
        return calculate_totals(quote.items).to_dict()

    def quote_value(self, quote_id: str) -> dict[str, str]:
        """Net, VAT, gross, margin and profit of a stored quote."""
        return calculate_quote_value(self.get_quote(quote_id)).to_dict()

    def duplicate_quote(self, quote_id: str) -> Quote:
        """Copy stored quote as a new draft and POST it."""
        draft = duplicate_quote(self.get_quote(quote_id))
        created = self.create_quote(draft)
        logger.info(f"Duplicated quote {quote_id} as {created.id}")
        return created
