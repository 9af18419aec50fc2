"""
Attribution metrics - CAC and ROAS for a matchback campaign.

Only vendor-matched records count. Matched records are split by pattern:
- Out-of-pattern matches are credited to the campaign
- In-pattern matches are regular customers who would have come anyway

All ratios fall back to 0 when their denominator is 0.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import asdict, dataclass
from datetime import date, datetime
from typing import Any

from matchback.matching.schema import CustomerType, MatchRecord
from matchback.reporting.recency import is_recent_signup

logger = logging.getLogger(__name__)

# Legacy "recent signup" window used when a recency reference is supplied
RECENT_SIGNUP_MONTHS = 1


@dataclass(frozen=True)
class AttributionMetrics:
    """Read-only metrics derived from a batch of match records."""

    campaign_cost: float

    # Match metrics
    total_matches: int
    out_of_pattern_matches: int
    in_pattern_matches: int

    # Revenue metrics
    total_revenue: float
    out_of_pattern_revenue: float
    in_pattern_revenue: float

    # CAC: cost / matches
    cac_all_matches: float
    cac_out_of_pattern: float

    # ROAS: revenue / cost
    roas_overall: float
    roas_out_of_pattern: float

    # New customer metrics
    new_signups: int
    new_signup_revenue: float
    cac_new_signups: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary."""
        return asdict(self)


@dataclass(frozen=True)
class MetricsComparison:
    """Current campaign metrics against a previous campaign."""

    current: AttributionMetrics
    previous: AttributionMetrics
    cac_change: float  # percentage change
    roas_change: float  # percentage change
    revenue_change: float  # dollar change


def sum_revenue(records: Iterable[MatchRecord]) -> float:
    """Sum total_sales, treating missing values as 0."""
    return float(sum(record.total_sales or 0 for record in records))


def _safe_divide(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator > 0 else 0.0


def is_new_signup(
    record: MatchRecord,
    recent_signup_reference: date | datetime | None = None,
) -> bool:
    """Check if a record counts as a new signup.

    Without a reference only the classified customer type is used. With a
    reference, signups from the start of the previous month onward also count.
    """
    if record.customer_type == CustomerType.NEW_SIGNUP:
        return True
    if recent_signup_reference is None:
        return False
    return is_recent_signup(record.signup_date, recent_signup_reference, RECENT_SIGNUP_MONTHS)


def calculate_metrics(
    records: Sequence[MatchRecord],
    campaign_cost: float,
    recent_signup_reference: date | datetime | None = None,
) -> AttributionMetrics:
    """
    Calculate CAC and ROAS metrics for a campaign.

    Args:
        records: Classified match records
        campaign_cost: Total campaign spend
        recent_signup_reference: Optional date for the legacy recency-based
            new-signup rule; None counts NEW_SIGNUP customer types only

    Returns:
        AttributionMetrics
    """
    logger.info(
        f"Calculating CAC metrics for {len(records)} records, "
        f"campaign cost: ${campaign_cost:,.2f}"
    )

    matched = [r for r in records if r.matched is True]
    out_of_pattern = [r for r in matched if r.in_pattern is False]
    in_pattern = [r for r in matched if r.in_pattern is True]
    new_signups = [r for r in matched if is_new_signup(r, recent_signup_reference)]

    total_revenue = sum_revenue(matched)
    out_of_pattern_revenue = sum_revenue(out_of_pattern)

    metrics = AttributionMetrics(
        campaign_cost=campaign_cost,
        total_matches=len(matched),
        out_of_pattern_matches=len(out_of_pattern),
        in_pattern_matches=len(in_pattern),
        total_revenue=total_revenue,
        out_of_pattern_revenue=out_of_pattern_revenue,
        in_pattern_revenue=sum_revenue(in_pattern),
        cac_all_matches=_safe_divide(campaign_cost, len(matched)),
        cac_out_of_pattern=_safe_divide(campaign_cost, len(out_of_pattern)),
        roas_overall=_safe_divide(total_revenue, campaign_cost),
        roas_out_of_pattern=_safe_divide(out_of_pattern_revenue, campaign_cost),
        new_signups=len(new_signups),
        new_signup_revenue=sum_revenue(new_signups),
        cac_new_signups=_safe_divide(campaign_cost, len(new_signups)),
    )

    logger.info(
        f"Metrics calculated: {metrics.total_matches} matches, "
        f"${metrics.total_revenue:,.2f} revenue, CAC: ${metrics.cac_out_of_pattern:,.2f}, "
        f"ROAS: {metrics.roas_out_of_pattern:.2f}x"
    )

    return metrics


def _percent_change(current: float, previous: float) -> float:
    return ((current - previous) / previous) * 100 if previous else 0.0


def compare_metrics(
    current: AttributionMetrics,
    previous: AttributionMetrics,
) -> MetricsComparison:
    """Compare out-of-pattern CAC, ROAS and revenue with a previous campaign."""
    comparison = MetricsComparison(
        current=current,
        previous=previous,
        cac_change=_percent_change(current.cac_out_of_pattern, previous.cac_out_of_pattern),
        roas_change=_percent_change(current.roas_out_of_pattern, previous.roas_out_of_pattern),
        revenue_change=current.out_of_pattern_revenue - previous.out_of_pattern_revenue,
    )

    logger.info(
        f"Comparison: CAC {comparison.cac_change:+.1f}%, "
        f"ROAS {comparison.roas_change:+.1f}%, "
        f"Revenue {comparison.revenue_change:+,.2f}"
    )

    return comparison


def format_currency(amount: float) -> str:
    """Format an amount as $1,234.50."""
    return f"${amount:,.2f}"


def format_for_report(metrics: AttributionMetrics) -> dict[str, str]:
    """Format metrics as labelled strings for a client-facing report."""
    return {
        "Campaign Cost": format_currency(metrics.campaign_cost),
        "Total Matches": str(metrics.total_matches),
        "Out-of-Pattern Matches": str(metrics.out_of_pattern_matches),
        "In-Pattern Matches": str(metrics.in_pattern_matches),
        "Total Revenue": format_currency(metrics.total_revenue),
        "Out-of-Pattern Revenue": format_currency(metrics.out_of_pattern_revenue),
        "CAC (All Matches)": format_currency(metrics.cac_all_matches),
        "CAC (Out-of-Pattern)": format_currency(metrics.cac_out_of_pattern),
        "ROAS (Overall)": f"{metrics.roas_overall:.2f}x",
        "ROAS (Out-of-Pattern)": f"{metrics.roas_out_of_pattern:.2f}x",
        "New Signups": str(metrics.new_signups),
        "New Signup Revenue": format_currency(metrics.new_signup_revenue),
        "CAC (New Signups)": format_currency(metrics.cac_new_signups),
    }
