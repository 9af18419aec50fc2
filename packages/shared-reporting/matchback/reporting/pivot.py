"""
Pivot summaries for matchback reports.

- Matched sales pivot: match status x pattern status -> count, total sales
- New customers pivot: matched recent signups by signup month
- Missing email statistics

Row totals sum across the columns of each row; column totals sum down each
column; the grand total sums the column totals.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, date, datetime

import pandas as pd

from matchback.matching.dates import month_key
from matchback.matching.schema import ClientRecord, MatchRecord
from matchback.reporting.recency import is_recent_signup

logger = logging.getLogger(__name__)

PIVOT_COLUMNS = ["Count", "Total Sales"]
NO_DATA_ROW = "No Data"

# Signups from the start of the month this many months back count as recent
NEW_CUSTOMER_LOOKBACK_MONTHS = 3

# (label, matched, in_pattern)
MATCH_PATTERN_BUCKETS: list[tuple[str, bool, bool]] = [
    ("Matched & Out-of-Pattern", True, False),
    ("Matched & In-Pattern", True, True),
    ("Not Matched & Out-of-Pattern", False, False),
    ("Not Matched & In-Pattern", False, True),
]


@dataclass
class PivotTotals:
    """Row, column and grand totals for a pivot table."""

    row_totals: list[float] = field(default_factory=list)
    column_totals: list[float] = field(default_factory=list)
    grand_total: float = 0.0


@dataclass
class PivotTable:
    """A labelled grid of values with totals."""

    rows: list[str]
    columns: list[str]
    values: list[list[float]]
    totals: PivotTotals

    def to_dataframe(self) -> pd.DataFrame:
        """Return the values as a DataFrame indexed by row label."""
        return pd.DataFrame(self.values, index=self.rows, columns=self.columns)


@dataclass
class MissingEmailStats:
    """Share of records without a usable email address."""

    total_records: int
    missing_emails: int
    missing_email_percentage: float


def _records_frame(records: Sequence[MatchRecord]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "matched": r.matched,
                "in_pattern": r.in_pattern,
                "total_sales": r.total_sales or 0.0,
            }
            for r in records
        ],
        columns=["matched", "in_pattern", "total_sales"],
    )


def _with_totals(rows: list[str], values: list[list[float]]) -> PivotTable:
    row_totals = [sum(row) for row in values]
    column_totals = [sum(row[i] for row in values) for i in range(len(PIVOT_COLUMNS))]

    return PivotTable(
        rows=rows,
        columns=list(PIVOT_COLUMNS),
        values=values,
        totals=PivotTotals(
            row_totals=row_totals,
            column_totals=column_totals,
            grand_total=sum(column_totals),
        ),
    )


def create_matched_sales_pivot(records: Sequence[MatchRecord]) -> PivotTable:
    """
    Cross-tabulate match status and pattern status.

    Records whose pattern was never determined fall outside all four buckets.
    """
    logger.info(f"Creating matched sales pivot for {len(records)} records")

    df = _records_frame(records)
    rows: list[str] = []
    values: list[list[float]] = []

    for label, matched, in_pattern in MATCH_PATTERN_BUCKETS:
        bucket = df[df["matched"].eq(matched) & df["in_pattern"].eq(in_pattern)]
        rows.append(label)
        values.append([int(len(bucket)), float(bucket["total_sales"].sum())])

    pivot = _with_totals(rows, values)

    logger.info(
        f"Matched sales pivot created: {len(rows)} rows, "
        f"grand total: {pivot.totals.grand_total}"
    )

    return pivot


def create_new_customers_pivot(
    records: Sequence[MatchRecord],
    reference_date: date | datetime | None = None,
    lookback_months: int = NEW_CUSTOMER_LOOKBACK_MONTHS,
) -> PivotTable:
    """
    Group matched recent signups by signup month (YYYY-MM).

    Args:
        records: Classified match records
        reference_date: Date the lookback is measured from; defaults to now
        lookback_months: Months before the reference month that still count

    Returns:
        PivotTable with one row per month, or a single "No Data" row
    """
    reference = reference_date or datetime.now(UTC)

    logger.info(f"Creating new customers pivot for {len(records)} records")

    new_customers = [
        r for r in records
        if r.matched is True and is_recent_signup(r.signup_date, reference, lookback_months)
    ]

    if not new_customers:
        logger.info("New customers pivot created: 0 months, 0 new customers")
        return _with_totals([NO_DATA_ROW], [[0, 0.0]])

    df = pd.DataFrame(
        {
            "month": [month_key(r.signup_date) for r in new_customers],
            "total_sales": [r.total_sales or 0.0 for r in new_customers],
        }
    )
    grouped = (
        df.groupby("month")["total_sales"]
        .agg(["size", "sum"])
        .sort_index()
    )

    rows = [str(month) for month in grouped.index]
    values = [[int(count), float(total)] for count, total in grouped.itertuples(index=False)]

    logger.info(
        f"New customers pivot created: {len(rows)} months, "
        f"{len(new_customers)} new customers"
    )

    return _with_totals(rows, values)


def calculate_missing_email_stats(
    records: Sequence[ClientRecord],
) -> MissingEmailStats:
    """Count records without a usable email address."""
    total = len(records)
    missing = sum(1 for r in records if not r.has_email)
    percentage = (missing / total) * 100 if total else 0.0

    logger.info(f"Missing email stats: {missing} of {total} ({percentage:.1f}%)")

    return MissingEmailStats(
        total_records=total,
        missing_emails=missing,
        missing_email_percentage=percentage,
    )
