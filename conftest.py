"""Shared pytest fixtures for matchback packages."""

from datetime import UTC, datetime

import pytest
from matchback.matching.schema import ClientRecord, MatchRecord


@pytest.fixture
def campaign_date():
    """Campaign date used across classification tests (September 2024)."""
    return datetime(2024, 9, 15, tzinfo=UTC)


@pytest.fixture
def sample_client_rows():
    """Sample client upload rows as parsed from a spreadsheet."""
    return [
        {
            "CustomerID": "CUST-001",
            "FirstName": "Jane",
            "LastName": "Doe",
            "EmailAddress": "jane.doe@example.com",
            "Address": "100 Main St",
            "City": "Houston",
            "State": "TX",
            "Zip": "77001",
            "Phone": "713-555-0100",
            "SignupDate": "2024-09-01",
            "Visit1": "2024-09-05",
            "TotalVisits": 3,
            "TotalSales": 150.00,
            "Market": "HOU",
        },
        {
            "CustomerID": "CUST-002",
            "FirstName": "John",
            "LastName": "Smith",
            "EmailAddress": "",
            "City": "Houston",
            "State": "TX",
            "Phone": "713-555-0101",
            "SignupDate": "2018-03-10",
            "Visit1": "2024-09-20",
            "TotalVisits": 1,
            "TotalSales": 75.50,
            "Market": "HOU",
        },
    ]


@pytest.fixture
def sample_client_records():
    """Sample ClientRecord objects for a single-market batch."""
    return [
        ClientRecord(
            first_name="Jane",
            last_name="Doe",
            email="jane.doe@example.com",
            address="100 Main St",
            city="Houston",
            state="TX",
            zip="77001",
            phone="713-555-0100",
            customer_id="CUST-001",
            signup_date=datetime(2024, 9, 1, tzinfo=UTC),
            visit1_date=datetime(2024, 9, 5, tzinfo=UTC),
            total_visits=3,
            total_sales=150.00,
            market="HOU",
        ),
        ClientRecord(
            name="John Smith",
            email=None,
            city="Houston",
            state="TX",
            phone="713-555-0101",
            customer_id="CUST-002",
            signup_date=datetime(2018, 3, 10, tzinfo=UTC),
            visit1_date=datetime(2024, 9, 20, tzinfo=UTC),
            total_visits=1,
            total_sales=75.50,
            market="HOU",
        ),
        ClientRecord(
            first_name="Ana",
            last_name="Lopez",
            email="ana@example.com",
            phone="713-555-0102",
            customer_id="CUST-003",
            signup_date=datetime(2023, 1, 15, tzinfo=UTC),
            visit1_date=datetime(2023, 6, 1, tzinfo=UTC),
            total_visits=8,
            total_sales=400.00,
            market="HOU",
        ),
    ]


@pytest.fixture
def make_match_record():
    """Factory for MatchRecord instances with sensible defaults."""

    def _make(**overrides):
        values = {
            "dcm_id": "TEST-HOU-1700000000-00001",
            "customer_id": "CUST-001",
            "signup_date": datetime(2024, 1, 15, tzinfo=UTC),
            "visit1_date": None,
            "total_visits": 0,
            "total_sales": None,
            "matched": True,
            "market": "HOU",
        }
        values.update(overrides)
        return MatchRecord(**values)

    return _make
