"""
Matchback Reporting - attribution metrics and pivot summaries.

Provides:
- CAC / ROAS metrics for overall, out-of-pattern and new-signup populations
- Campaign-over-campaign comparison and report-ready formatting
- Match x pattern and new-customer pivots, missing email statistics

File and display formatting belong to the caller; everything here returns
plain dataclasses (pivots can also be exported as pandas DataFrames).

Usage:
    from matchback.reporting import calculate_metrics, create_matched_sales_pivot

    metrics = calculate_metrics(classified_records, campaign_cost=1000)
    pivot = create_matched_sales_pivot(classified_records)
"""

from matchback.reporting.metrics import (
    AttributionMetrics,
    MetricsComparison,
    calculate_metrics,
    compare_metrics,
    format_currency,
    format_for_report,
    is_new_signup,
)
from matchback.reporting.pivot import (
    MissingEmailStats,
    PivotTable,
    PivotTotals,
    calculate_missing_email_stats,
    create_matched_sales_pivot,
    create_new_customers_pivot,
)
from matchback.reporting.recency import is_recent_signup, month_start_before

__all__ = [
    # Metrics
    "AttributionMetrics",
    "MetricsComparison",
    "calculate_metrics",
    "compare_metrics",
    "format_currency",
    "format_for_report",
    "is_new_signup",
    # Pivots
    "MissingEmailStats",
    "PivotTable",
    "PivotTotals",
    "calculate_missing_email_stats",
    "create_matched_sales_pivot",
    "create_new_customers_pivot",
    # Recency
    "is_recent_signup",
    "month_start_before",
]
