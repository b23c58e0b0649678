"""
Tests for local quote analytics and quick filters.
"""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from hvac_crm.domain.quotes.entities import HvacCategory, Quote, QuoteItem, QuoteStatus
from hvac_crm.domain.quotes.services import (
    build_analytics,
    conversion_funnel,
    metrics_by_category,
    metrics_by_status,
    quick_filter,
    win_rate,
)

NOW = datetime(2026, 3, 2, 9, 30)


def make_quote(status: QuoteStatus, total: str = "0", **kwargs) -> Quote:
    return Quote(title=f"Oferta {status.value}", status=status, total_amount=Decimal(total), **kwargs)


@pytest.fixture
def quotes():
    return [
        make_quote(QuoteStatus.DRAFT, "1000"),
        make_quote(QuoteStatus.PENDING_REVIEW, "2000"),
        make_quote(QuoteStatus.SENT, "60000"),
        make_quote(QuoteStatus.VIEWED, "3000"),
        make_quote(QuoteStatus.ACCEPTED, "4000"),
        make_quote(QuoteStatus.ACCEPTED, "6000"),
        make_quote(QuoteStatus.REJECTED, "5000"),
    ]


# ============================================================================
# QUICK FILTERS
# ============================================================================


@pytest.mark.parametrize(
    "name, expected_count",
    [
        ("pending", 1),
        ("sent", 2),
        ("accepted", 2),
        ("high_value", 1),
        ("expired", 0),
    ],
)
def test_quick_filters(quotes, name, expected_count):
    assert len(quick_filter(quotes, name, now=NOW)) == expected_count


def test_expired_filter_includes_open_quotes_past_validity():
    past = NOW - timedelta(days=1)
    quotes = [
        make_quote(QuoteStatus.SENT, valid_until=past),
        make_quote(QuoteStatus.ACCEPTED, valid_until=past),
        make_quote(QuoteStatus.EXPIRED),
    ]

    result = quick_filter(quotes, "expired", now=NOW)

    assert [q.status for q in result] == [QuoteStatus.SENT, QuoteStatus.EXPIRED]


def test_expired_filter_handles_api_timestamps_with_offsets():
    # Arrange
    quotes = [
        Quote.from_dict({"title": "A", "status": "sent", "validUntil": "2026-02-20T09:30:00Z"}),
        Quote.from_dict({"title": "B", "status": "sent", "validUntil": "2026-04-01T09:30:00+01:00"}),
    ]

    # Act
    result = quick_filter(quotes, "expired", now=NOW)

    # Assert
    assert [q.title for q in result] == ["A"]


def test_analytics_of_api_quotes_with_zulu_timestamps():
    quote = Quote.from_dict(
        {"title": "A", "status": "accepted", "createdAt": "2026-02-01T08:00:00Z", "acceptedAt": "2026-02-03T08:00:00Z"}
    )

    analytics = build_analytics([quote])

    assert analytics.total_quotes == 1
    assert quote.age_in_days(now=NOW) >= 28


def test_unknown_quick_filter_raises():
    with pytest.raises(ValueError, match="Unknown quick filter"):
        quick_filter([], "favourites")


# ============================================================================
# METRICS
# ============================================================================


def test_win_rate(quotes):
    # 2 accepted / 3 decided
    assert win_rate(quotes) == 66.67


def test_win_rate_without_decisions_is_zero():
    assert win_rate([make_quote(QuoteStatus.DRAFT)]) == 0.0


def test_conversion_funnel_is_cumulative(quotes):
    funnel = conversion_funnel(quotes)

    assert funnel == {"draft": 7, "sent": 5, "viewed": 4, "accepted": 2, "rejected": 1}


def test_metrics_by_status(quotes):
    metrics = metrics_by_status(quotes)

    accepted = metrics["accepted"]
    assert accepted.count == 2
    assert accepted.total_value == Decimal("10000.00")
    assert accepted.average_value == Decimal("5000.00")
    assert accepted.percentage == 28.57


def test_metrics_by_category_counts_item_categories():
    quotes = [
        make_quote(
            QuoteStatus.SENT,
            "1000",
            items=[QuoteItem(name="Split", quantity=1, unit_price=1, category=HvacCategory.KLIMATYZACJA)],
        ),
        make_quote(QuoteStatus.SENT, "3000", category=HvacCategory.KLIMATYZACJA),
        make_quote(QuoteStatus.DRAFT, "500"),
    ]

    metrics = metrics_by_category(quotes)

    assert list(metrics) == ["klimatyzacja"]
    assert metrics["klimatyzacja"].count == 2
    assert metrics["klimatyzacja"].total_value == Decimal("4000.00")


def test_build_analytics(quotes):
    analytics = build_analytics(quotes)

    data = analytics.to_dict()
    assert analytics.total_quotes == 7
    assert analytics.total_value == Decimal("81000.00")
    assert data["total_value"] == "81000.00"
    assert data["conversion_funnel"]["accepted"] == 2
    assert data["status_distribution"]["draft"]["count"] == 1


def test_build_analytics_of_nothing():
    analytics = build_analytics([])

    assert analytics.total_quotes == 0
    assert analytics.average_value == Decimal("0.00")
    assert analytics.win_rate == 0.0
