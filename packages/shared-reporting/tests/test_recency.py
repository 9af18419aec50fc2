"""Tests for signup recency helpers.

The customer-type classifier and the report filters both decide whether a
customer "recently signed up". These tests pin the two definitions against
each other so any drift between them fails loudly.
"""

from datetime import UTC, date, datetime, timedelta

import pytest
from matchback.matching.schema import CustomerType
from matchback.patterns.classification import classify_customers
from matchback.reporting.metrics import calculate_metrics
from matchback.reporting.pivot import create_new_customers_pivot
from matchback.reporting.recency import is_recent_signup, month_start_before


class TestMonthStartBefore:
    """Test month_start_before."""

    @pytest.mark.parametrize(
        "reference,months_back,expected",
        [
            (datetime(2024, 9, 15, tzinfo=UTC), 0, datetime(2024, 9, 1, tzinfo=UTC)),
            (datetime(2024, 9, 15, tzinfo=UTC), 1, datetime(2024, 8, 1, tzinfo=UTC)),
            (datetime(2024, 9, 15, tzinfo=UTC), 3, datetime(2024, 6, 1, tzinfo=UTC)),
            (date(2024, 2, 29), 2, datetime(2023, 12, 1, tzinfo=UTC)),
            (datetime(2024, 1, 1), 13, datetime(2022, 12, 1, tzinfo=UTC)),
        ],
    )
    def test_month_start(self, reference, months_back, expected):
        """Test month arithmetic across year boundaries."""
        assert month_start_before(reference, months_back) == expected


class TestIsRecentSignup:
    """Test is_recent_signup."""

    def test_boundary_inclusive(self):
        """Test the first instant of the window counts."""
        reference = datetime(2024, 9, 15, tzinfo=UTC)

        assert is_recent_signup(datetime(2024, 8, 1, tzinfo=UTC), reference, 1) is True
        assert is_recent_signup(datetime(2024, 7, 31, 23, 59, tzinfo=UTC), reference, 1) is False

    def test_missing_signup(self):
        """Test a missing signup is never recent."""
        assert is_recent_signup(None, datetime(2024, 9, 15, tzinfo=UTC), 3) is False


class TestRecencyAgreesWithClassifier:
    """Recency measured from the campaign date must agree with NEW_SIGNUP."""

    def _signups_through(self, campaign_date):
        """Daily signup dates from a year before to the end of the campaign month."""
        start = campaign_date - timedelta(days=365)
        end = month_start_before(campaign_date, -1)
        days = (end - start).days
        return [start + timedelta(days=n) for n in range(days)]

    def test_zero_month_window_matches_campaign_month(self, campaign_date, make_match_record):
        """Test a zero-month window from the campaign date selects exactly NEW_SIGNUP."""
        records = [
            make_match_record(dcm_id=str(n), signup_date=signup)
            for n, signup in enumerate(self._signups_through(campaign_date))
        ]

        classified = classify_customers(records, campaign_date)

        for record in classified:
            assert is_recent_signup(record.signup_date, campaign_date, 0) == (
                record.customer_type == CustomerType.NEW_SIGNUP
            ), record.signup_date

    def test_metrics_new_signups_match_classifier(self, campaign_date, make_match_record):
        """Test metrics count the same new signups the classifier produced."""
        records = classify_customers(
            [
                make_match_record(signup_date=datetime(2024, 9, 1, tzinfo=UTC), total_sales=10.0),
                make_match_record(signup_date=datetime(2024, 8, 31, tzinfo=UTC), total_sales=20.0),
                make_match_record(signup_date=datetime(2023, 9, 10, tzinfo=UTC), total_sales=40.0),
            ],
            campaign_date,
        )
        classifier_count = sum(1 for r in records if r.customer_type == CustomerType.NEW_SIGNUP)

        metrics = calculate_metrics(records, campaign_cost=100)

        assert metrics.new_signups == classifier_count == 1
        assert metrics.new_signup_revenue == 10.0

    def test_pivot_from_campaign_date_covers_classifier_new_signups(
        self, campaign_date, make_match_record
    ):
        """Test the new-customers pivot anchored on the campaign date includes every NEW_SIGNUP."""
        records = classify_customers(
            [
                make_match_record(signup_date=signup, total_sales=1.0)
                for signup in self._signups_through(campaign_date)
            ],
            campaign_date,
        )
        new_signups = [r for r in records if r.customer_type == CustomerType.NEW_SIGNUP]

        pivot = create_new_customers_pivot(records, reference_date=campaign_date, lookback_months=0)

        assert pivot.rows == ["2024-09"]
        assert pivot.values == [[len(new_signups), float(len(new_signups))]]
