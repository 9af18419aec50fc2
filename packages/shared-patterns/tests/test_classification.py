"""Tests for customer-type classification."""

from datetime import UTC, date, datetime, timedelta, timezone

import pytest
from matchback.matching.schema import CustomerType
from matchback.patterns.classification import (
    classify_customer,
    classify_customers,
    determine_customer_type,
    get_classification_statistics,
    get_type_distribution,
    is_signup_in_campaign_month,
)
from matchback.patterns.config import PatternRules

SIGNUP = datetime(2024, 3, 1, tzinfo=UTC)


class TestIsSignupInCampaignMonth:
    """Test is_signup_in_campaign_month."""

    def test_same_month(self, campaign_date):
        """Test a signup in the campaign month matches."""
        assert is_signup_in_campaign_month(datetime(2024, 9, 1, tzinfo=UTC), campaign_date)

    def test_same_month_different_year(self, campaign_date):
        """Test the year must match too."""
        assert not is_signup_in_campaign_month(datetime(2023, 9, 1, tzinfo=UTC), campaign_date)

    def test_missing_signup(self, campaign_date):
        """Test a missing signup never matches."""
        assert not is_signup_in_campaign_month(None, campaign_date)


class TestDetermineCustomerType:
    """Test the classification rules and their priority."""

    def test_new_signup_takes_priority(self, campaign_date):
        """Test campaign-month signups are NEW_SIGNUP regardless of visits."""
        signup = datetime(2024, 9, 1, tzinfo=UTC)

        assert determine_customer_type(signup, None, campaign_date) == CustomerType.NEW_SIGNUP
        assert (
            determine_customer_type(signup, signup + timedelta(days=5), campaign_date)
            == CustomerType.NEW_SIGNUP
        )

    def test_no_first_visit_is_existing(self, campaign_date):
        """Test records without a first visit are EXISTING."""
        assert determine_customer_type(SIGNUP, None, campaign_date) == CustomerType.EXISTING

    @pytest.mark.parametrize("days", [1, 15, 30])
    def test_new_visitor_window(self, campaign_date, days):
        """Test first visits 1-30 days after signup are NEW_VISITOR."""
        visit = SIGNUP + timedelta(days=days)

        assert determine_customer_type(SIGNUP, visit, campaign_date) == CustomerType.NEW_VISITOR

    @pytest.mark.parametrize("days", [0, 0.5, 30.5, 31, 400])
    def test_outside_new_visitor_window(self, campaign_date, days):
        """Test gaps outside the window fall through to EXISTING."""
        visit = SIGNUP + timedelta(days=days)

        assert determine_customer_type(SIGNUP, visit, campaign_date) == CustomerType.EXISTING

    def test_winback(self, campaign_date):
        """Test first visits 5+ years after signup are WINBACK."""
        signup = datetime(2018, 3, 10, tzinfo=UTC)
        visit = signup + timedelta(days=365 * 5)

        assert determine_customer_type(signup, visit, campaign_date) == CustomerType.WINBACK

    def test_just_under_winback(self, campaign_date):
        """Test a gap just short of five years is EXISTING."""
        signup = datetime(2018, 3, 10, tzinfo=UTC)
        visit = signup + timedelta(days=365 * 5 - 1)

        assert determine_customer_type(signup, visit, campaign_date) == CustomerType.EXISTING

    def test_missing_signup_is_existing(self, campaign_date):
        """Test records without a signup date are EXISTING."""
        visit = datetime(2024, 9, 5, tzinfo=UTC)

        assert determine_customer_type(None, visit, campaign_date) == CustomerType.EXISTING

    def test_custom_rules(self, campaign_date):
        """Test thresholds come from the rules."""
        rules = PatternRules(new_visitor_max_days=60, winback_min_years=1)

        assert (
            determine_customer_type(SIGNUP, SIGNUP + timedelta(days=45), campaign_date, rules)
            == CustomerType.NEW_VISITOR
        )
        assert (
            determine_customer_type(SIGNUP, SIGNUP + timedelta(days=365), campaign_date, rules)
            == CustomerType.WINBACK
        )

    def test_utc_month_boundary(self):
        """Test month comparison happens on UTC calendar fields."""
        campaign = date(2024, 9, 15)
        # 03:00 UTC on 2024-09-01
        signup = datetime(2024, 8, 31, 22, 0, tzinfo=timezone(timedelta(hours=-5)))

        assert determine_customer_type(signup, None, campaign) == CustomerType.NEW_SIGNUP


class TestClassifyCustomer:
    """Test classify_customer and batch helpers."""

    def test_sets_customer_type_only(self, make_match_record, campaign_date):
        """Test only customer_type changes."""
        record = make_match_record(
            signup_date=datetime(2024, 9, 1, tzinfo=UTC),
            visit1_date=datetime(2024, 9, 5, tzinfo=UTC),
            total_visits=3,
            in_pattern=True,
        )

        result = classify_customer(record, campaign_date)

        assert result.customer_type == CustomerType.NEW_SIGNUP
        assert result.in_pattern is True
        assert result.matched is True
        assert record.customer_type is None

    def test_batch_and_distribution(self, make_match_record, campaign_date):
        """Test classification over a batch and type counts."""
        records = [
            make_match_record(dcm_id="a", signup_date=datetime(2024, 9, 2, tzinfo=UTC)),
            make_match_record(
                dcm_id="b",
                signup_date=datetime(2024, 5, 1, tzinfo=UTC),
                visit1_date=datetime(2024, 5, 10, tzinfo=UTC),
            ),
            make_match_record(
                dcm_id="c",
                signup_date=datetime(2018, 3, 10, tzinfo=UTC),
                visit1_date=datetime(2024, 9, 20, tzinfo=UTC),
            ),
            make_match_record(dcm_id="d"),
        ]

        classified = classify_customers(records, campaign_date)

        assert [r.dcm_id for r in classified] == ["a", "b", "c", "d"]
        assert get_type_distribution(classified) == {
            CustomerType.NEW_SIGNUP: 1,
            CustomerType.NEW_VISITOR: 1,
            CustomerType.WINBACK: 1,
            CustomerType.EXISTING: 1,
        }

    def test_distribution_ignores_unclassified(self, make_match_record):
        """Test records without a type are not counted."""
        distribution = get_type_distribution([make_match_record()])

        assert sum(distribution.values()) == 0

    def test_classification_statistics(self, make_match_record, campaign_date):
        """Test counts and percentages."""
        classified = classify_customers(
            [
                make_match_record(signup_date=datetime(2024, 9, 2, tzinfo=UTC)),
                make_match_record(),
            ],
            campaign_date,
        )

        stats = get_classification_statistics(classified)

        assert stats.total == 2
        assert stats.new_signups == 1
        assert stats.existing == 1
        assert stats.percentages[CustomerType.NEW_SIGNUP] == 50.0
        assert stats.percentages[CustomerType.WINBACK] == 0.0

    def test_classification_statistics_empty(self):
        """Test empty input gives zero percentages."""
        stats = get_classification_statistics([])

        assert stats.total == 0
        assert all(value == 0.0 for value in stats.percentages.values())
