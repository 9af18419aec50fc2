"""
Customer classification - lifecycle category from signup and visit timing.

Evaluated in priority order, first match wins:
- NEW_SIGNUP: Signed up in the campaign's UTC month (even with visit data)
- EXISTING: No first-visit date
- NEW_VISITOR: First visit 1-30 days after signup
- WINBACK: First visit 5+ years after signup
- EXISTING: All others
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from datetime import date, datetime

from matchback.matching.dates import days_between, same_utc_month
from matchback.matching.schema import CustomerType, MatchRecord
from matchback.patterns.config import DEFAULT_RULES, PatternRules

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365


@dataclass
class ClassificationStatistics:
    """Customer-type counts and their share of all records."""

    total: int
    new_signups: int
    new_visitors: int
    winbacks: int
    existing: int
    percentages: dict[CustomerType, float] = field(default_factory=dict)


def is_signup_in_campaign_month(
    signup_date: date | datetime | None,
    campaign_date: date | datetime,
) -> bool:
    """Check if signup occurred in the same UTC month as the campaign."""
    if signup_date is None:
        return False
    return same_utc_month(signup_date, campaign_date)


def determine_customer_type(
    signup_date: date | datetime | None,
    visit1_date: date | datetime | None,
    campaign_date: date | datetime,
    rules: PatternRules = DEFAULT_RULES,
) -> CustomerType:
    """Determine customer type from signup, first visit and campaign dates."""
    if is_signup_in_campaign_month(signup_date, campaign_date):
        return CustomerType.NEW_SIGNUP

    # Without both dates there is no signup-to-visit gap to measure
    if visit1_date is None or signup_date is None:
        return CustomerType.EXISTING

    days_since_signup = days_between(signup_date, visit1_date)

    if rules.new_visitor_min_days <= days_since_signup <= rules.new_visitor_max_days:
        return CustomerType.NEW_VISITOR

    if days_since_signup / DAYS_PER_YEAR >= rules.winback_min_years:
        return CustomerType.WINBACK

    return CustomerType.EXISTING


def classify_customer(
    record: MatchRecord,
    campaign_date: date | datetime,
    rules: PatternRules | None = None,
) -> MatchRecord:
    """Return a copy of the record with customer_type set."""
    customer_type = determine_customer_type(
        record.signup_date,
        record.visit1_date,
        campaign_date,
        rules or DEFAULT_RULES,
    )

    logger.debug(f"Customer {record.dcm_id} classified as: {customer_type.value}")

    return replace(record, customer_type=customer_type)


def classify_customers(
    records: Sequence[MatchRecord],
    campaign_date: date | datetime,
    rules: PatternRules | None = None,
) -> list[MatchRecord]:
    """Classify every record against the campaign date, preserving order."""
    logger.info(f"Classifying {len(records)} customers")

    classified = [classify_customer(record, campaign_date, rules) for record in records]

    distribution = get_type_distribution(classified)
    logger.info(
        "Classification complete: "
        + ", ".join(f"{t.value}={count}" for t, count in distribution.items())
    )

    return classified


def get_type_distribution(records: Sequence[MatchRecord]) -> dict[CustomerType, int]:
    """Count records per customer type; unclassified records are ignored."""
    distribution = {customer_type: 0 for customer_type in CustomerType}
    for record in records:
        if record.customer_type is not None:
            distribution[record.customer_type] += 1
    return distribution


def get_classification_statistics(
    records: Sequence[MatchRecord],
) -> ClassificationStatistics:
    """Get customer-type counts and percentages."""
    distribution = get_type_distribution(records)
    total = len(records)

    return ClassificationStatistics(
        total=total,
        new_signups=distribution[CustomerType.NEW_SIGNUP],
        new_visitors=distribution[CustomerType.NEW_VISITOR],
        winbacks=distribution[CustomerType.WINBACK],
        existing=distribution[CustomerType.EXISTING],
        percentages={
            customer_type: (count / total) * 100 if total else 0.0
            for customer_type, count in distribution.items()
        },
    )
