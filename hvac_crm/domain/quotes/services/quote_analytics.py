"""
Quote Analytics Domain Service.

Local (in-process) analytics over a list of quotes: quick filters,
per-status and per-category metrics, win rate and conversion funnel.

Responsibility:
    - Named quick filters used by the sales UI
    - Aggregations for analytics endpoint when computed locally

Does NOT contain:
    - Fetching quotes (application layer)
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Iterable, Optional

from hvac_crm.domain.compliance.value_objects import round_money
from hvac_crm.domain.quotes.entities.quote import HvacCategory, Quote, QuoteStatus

HIGH_VALUE_THRESHOLD = Decimal("50000")

OPEN_STATUSES = frozenset(
    {
        QuoteStatus.DRAFT,
        QuoteStatus.PENDING_REVIEW,
        QuoteStatus.APPROVED,
        QuoteStatus.SENT,
        QuoteStatus.VIEWED,
    }
)

# Statuses reached at or after each funnel stage
FUNNEL_STAGES: dict[str, frozenset[QuoteStatus]] = {
    "draft": frozenset(QuoteStatus),
    "sent": frozenset(
        {QuoteStatus.SENT, QuoteStatus.VIEWED, QuoteStatus.ACCEPTED, QuoteStatus.REJECTED}
    ),
    "viewed": frozenset({QuoteStatus.VIEWED, QuoteStatus.ACCEPTED, QuoteStatus.REJECTED}),
    "accepted": frozenset({QuoteStatus.ACCEPTED}),
    "rejected": frozenset({QuoteStatus.REJECTED}),
}


@dataclass
class GroupMetrics:
    count: int = 0
    total_value: Decimal = Decimal("0.00")
    average_value: Decimal = Decimal("0.00")
    percentage: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "total_value": str(self.total_value),
            "average_value": str(self.average_value),
            "percentage": self.percentage,
        }


@dataclass
class QuoteAnalytics:
    total_quotes: int
    total_value: Decimal
    average_value: Decimal
    win_rate: float
    status_distribution: dict[str, GroupMetrics] = field(default_factory=dict)
    category_distribution: dict[str, GroupMetrics] = field(default_factory=dict)
    conversion_funnel: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_quotes": self.total_quotes,
            "total_value": str(self.total_value),
            "average_value": str(self.average_value),
            "win_rate": self.win_rate,
            "status_distribution": {k: v.to_dict() for k, v in self.status_distribution.items()},
            "category_distribution": {
                k: v.to_dict() for k, v in self.category_distribution.items()
            },
            "conversion_funnel": dict(self.conversion_funnel),
        }


# ============================================================================
# QUICK FILTERS
# ============================================================================


def _is_expired(quote: Quote, now: datetime) -> bool:
    if quote.status == QuoteStatus.EXPIRED:
        return True
    return quote.status in OPEN_STATUSES and quote.is_expired(now)


QUICK_FILTERS: dict[str, Callable[[Quote, datetime], bool]] = {
    "pending": lambda q, now: q.status in (QuoteStatus.PENDING_REVIEW, QuoteStatus.APPROVED),
    "sent": lambda q, now: q.status in (QuoteStatus.SENT, QuoteStatus.VIEWED),
    "accepted": lambda q, now: q.status == QuoteStatus.ACCEPTED,
    "expired": _is_expired,
    "high_value": lambda q, now: q.total_amount > HIGH_VALUE_THRESHOLD,
}


def quick_filter(quotes: Iterable[Quote], name: str, now: Optional[datetime] = None) -> list[Quote]:
    """
    Apply named quick filter.

    Args:
        quotes: Quotes to filter
        name: One of pending, sent, accepted, expired, high_value
        now: Reference time for expiry (default: now)

    Raises:
        ValueError: If filter name is unknown

    Examples:
        >>> quick_filter([Quote(title="A", status=QuoteStatus.ACCEPTED)], "accepted")[0].title
        'A'
    """
    predicate = QUICK_FILTERS.get(name)
    if predicate is None:
        raise ValueError(
            f"Unknown quick filter '{name}'. Available: {', '.join(QUICK_FILTERS)}"
        )
    now = now or datetime.now()
    return [quote for quote in quotes if predicate(quote, now)]


# ============================================================================
# METRICS
# ============================================================================


def _group_metrics(quotes: list[Quote], total_count: int) -> GroupMetrics:
    count = len(quotes)
    total_value = round_money(sum((q.total_amount for q in quotes), Decimal("0")))
    return GroupMetrics(
        count=count,
        total_value=total_value,
        average_value=round_money(total_value / count) if count else Decimal("0.00"),
        percentage=round(count / total_count * 100, 2) if total_count else 0.0,
    )


def metrics_by_status(quotes: Iterable[Quote]) -> dict[str, GroupMetrics]:
    """Metrics for every status present in quotes."""
    quotes = list(quotes)
    grouped: dict[str, list[Quote]] = {}
    for quote in quotes:
        grouped.setdefault(quote.status.value, []).append(quote)
    return {status: _group_metrics(group, len(quotes)) for status, group in grouped.items()}


def metrics_by_category(quotes: Iterable[Quote]) -> dict[str, GroupMetrics]:
    """
    Metrics per HVAC category.

    A quote counts in every category of its items (and its own category),
    so percentages may sum to more than 100.
    """
    quotes = list(quotes)
    result = {}
    for category in HvacCategory:
        matching = [q for q in quotes if category in q.categories()]
        if matching:
            result[category.value] = _group_metrics(matching, len(quotes))
    return result


def win_rate(quotes: Iterable[Quote]) -> float:
    """Accepted / (accepted + rejected) in percent; 0 when nothing decided."""
    quotes = list(quotes)
    accepted = sum(1 for q in quotes if q.status == QuoteStatus.ACCEPTED)
    rejected = sum(1 for q in quotes if q.status == QuoteStatus.REJECTED)
    decided = accepted + rejected
    if decided == 0:
        return 0.0
    return round(accepted / decided * 100, 2)


def conversion_funnel(quotes: Iterable[Quote]) -> dict[str, int]:
    quotes = list(quotes)
    return {
        stage: sum(1 for q in quotes if q.status in statuses)
        for stage, statuses in FUNNEL_STAGES.items()
    }


def build_analytics(quotes: Iterable[Quote]) -> QuoteAnalytics:
    """
    Compute full analytics for quotes.

    Examples:
        >>> analytics = build_analytics([
        ...     Quote(title="A", status=QuoteStatus.ACCEPTED),
        ...     Quote(title="B", status=QuoteStatus.REJECTED),
        ... ])
        >>> analytics.win_rate
        50.0
    """
    quotes = list(quotes)
    overall = _group_metrics(quotes, len(quotes))
    return QuoteAnalytics(
        total_quotes=overall.count,
        total_value=overall.total_value,
        average_value=overall.average_value,
        win_rate=win_rate(quotes),
        status_distribution=metrics_by_status(quotes),
        category_distribution=metrics_by_category(quotes),
        conversion_funnel=conversion_funnel(quotes),
    )
