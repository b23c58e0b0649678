"""Quote domain services: calculator and analytics."""

from hvac_crm.domain.quotes.services.quote_analytics import (
    GroupMetrics,
    QuoteAnalytics,
    build_analytics,
    conversion_funnel,
    metrics_by_category,
    metrics_by_status,
    quick_filter,
    win_rate,
)
from hvac_crm.domain.quotes.services.quote_calculator import (
    QuoteTotals,
    QuoteValue,
    calculate_item_total,
    calculate_quote_value,
    calculate_totals,
    duplicate_quote,
)

__all__ = [
    "GroupMetrics",
    "QuoteAnalytics",
    "QuoteTotals",
    "QuoteValue",
    "build_analytics",
    "calculate_item_total",
    "calculate_quote_value",
    "calculate_totals",
    "conversion_funnel",
    "duplicate_quote",
    "metrics_by_category",
    "metrics_by_status",
    "quick_filter",
    "win_rate",
]
