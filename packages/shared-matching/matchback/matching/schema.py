"""
Matchback record schema - the records that flow through the pipeline.

Records move strictly forward:
- ClientRecord: a customer as supplied by the client (contains sensitive data)
- SanitizedRecord: the vendor-safe projection (contact fields + DCM_ID only)
- MatchRecord: a reconciled record, enriched stage by stage with the vendor
  match flag, pattern flag, customer type and any pattern override

Records are frozen. Every stage returns new instances via
dataclasses.replace and only writes the fields it owns.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import date, datetime
from enum import Enum
from typing import Any


class CustomerType(str, Enum):
    """Customer lifecycle category relative to the campaign."""

    NEW_SIGNUP = "NEW_SIGNUP"  # Signed up during the campaign month
    NEW_VISITOR = "NEW_VISITOR"  # First visit 1-30 days after signup
    WINBACK = "WINBACK"  # First visit 5+ years after signup
    EXISTING = "EXISTING"


NEW_SIGNUP_CORRECTION = "NEW_SIGNUP_CORRECTION"

# Accepted source keys for each ClientRecord field: snake_case, camelCase and
# the column headers of common client spreadsheet exports
CLIENT_FIELD_ALIASES: dict[str, str] = {
    # Customer ID variants
    "CustomerID": "customer_id",
    "customer_id": "customer_id",
    "customerId": "customer_id",
    # Name variants
    "FirstName": "first_name",
    "first_name": "first_name",
    "firstName": "first_name",
    "LastName": "last_name",
    "last_name": "last_name",
    "lastName": "last_name",
    "Name": "name",
    "name": "name",
    "FullName": "name",
    # Email variants
    "EmailAddress": "email",
    "Email": "email",
    "email": "email",
    "email_address": "email",
    # Address variants
    "Address": "address",
    "address": "address",
    "Address1": "address",
    "City": "city",
    "city": "city",
    "State": "state",
    "state": "state",
    "Zip": "zip",
    "zip": "zip",
    "ZipCode": "zip",
    "postal_code": "zip",
    # Phone variants
    "Phone": "phone",
    "phone": "phone",
    "PhoneNumber": "phone",
    "phone_number": "phone",
    # Dates
    "SignupDate": "signup_date",
    "signup_date": "signup_date",
    "signupDate": "signup_date",
    "Visit1": "visit1_date",
    "Visit1Date": "visit1_date",
    "visit1_date": "visit1_date",
    "visit1Date": "visit1_date",
    "Visit2": "visit2_date",
    "Visit2Date": "visit2_date",
    "visit2_date": "visit2_date",
    "visit2Date": "visit2_date",
    "Visit3": "visit3_date",
    "Visit3Date": "visit3_date",
    "visit3_date": "visit3_date",
    "visit3Date": "visit3_date",
    # Totals
    "TotalVisits": "total_visits",
    "total_visits": "total_visits",
    "totalVisits": "total_visits",
    "TotalSales": "total_sales",
    "total_sales": "total_sales",
    "totalSales": "total_sales",
    # Market
    "Market": "market",
    "market": "market",
}

_TRUE_FLAGS = {"Y", "YES", "TRUE", "1"}


def parse_match_flag(value: Any) -> bool:
    """Interpret a match flag ('Y', 'Yes', True, 1) as a boolean."""
    # numpy scalars from DataFrame rows
    if hasattr(value, "item") and not isinstance(value, str):
        value = value.item()
    if isinstance(value, bool):
        return value
    if isinstance(value, int | float):
        return value == 1
    if isinstance(value, str):
        return value.strip().upper() in _TRUE_FLAGS
    return False


def _serialize(value: Any) -> Any:
    if isinstance(value, datetime | date):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


@dataclass(frozen=True)
class ClientRecord:
    """
    One customer as supplied by the client.

    Contact fields are safe to share with the matching vendor. Everything
    else (customer id, dates, visit counts, sales) must never leave the
    client side and is stripped by the sanitizer.

    Example:
        record = ClientRecord(
            first_name="Jane",
            last_name="Doe",
            email="jane@example.com",
            customer_id="CUST-001",
            signup_date=datetime(2024, 9, 1, tzinfo=UTC),
            total_visits=3,
            total_sales=150.00,
            market="HOU",
        )
    """

    # Contact info (vendor-safe)
    name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    phone: str | None = None

    # Sensitive business data
    customer_id: str | None = None
    signup_date: datetime | date | None = None
    visit1_date: datetime | date | None = None
    visit2_date: datetime | date | None = None
    visit3_date: datetime | date | None = None
    total_visits: int = 0
    total_sales: float | None = None
    market: str | None = None

    # Columns the schema does not know about
    extra: dict[str, Any] = field(default_factory=dict, hash=False)

    @property
    def has_email(self) -> bool:
        """Return True when a non-blank email is present."""
        return bool(self.email and self.email.strip())

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary (dates as ISO strings)."""
        data = {
            f.name: _serialize(getattr(self, f.name))
            for f in fields(self)
            if f.name != "extra"
        }
        data.update(self.extra)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ClientRecord:
        """Create a record from a plain dictionary.

        Accepts the keys in CLIENT_FIELD_ALIASES. Unknown keys are kept in
        ``extra``. When two keys map to the same field the first non-blank
        value wins. Values are taken as-is; use ClientRecordNormalizer for raw
        spreadsheet rows that still need coercion.
        """
        known: dict[str, Any] = {}
        extra: dict[str, Any] = {}

        for key, value in data.items():
            target = CLIENT_FIELD_ALIASES.get(key)
            if target is None:
                extra[key] = value
            elif known.get(target) in (None, ""):
                known[target] = value

        if known.get("total_visits") is None:
            known["total_visits"] = 0

        return cls(**known, extra=extra)


@dataclass(frozen=True)
class SanitizedRecord:
    """Vendor-safe record: the tracking identifier plus contact fields only."""

    dcm_id: str
    name: str
    email: str
    address: str
    phone: str

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary keyed by field name."""
        return {
            "dcm_id": self.dcm_id,
            "name": self.name,
            "email": self.email,
            "address": self.address,
            "phone": self.phone,
        }

    def to_vendor_row(self) -> dict[str, str]:
        """Convert to a row keyed by the vendor file column headers."""
        return {
            "DCM_ID": self.dcm_id,
            "Name": self.name,
            "Email": self.email,
            "Address": self.address,
            "Phone": self.phone,
        }


@dataclass(frozen=True)
class MatchRecord(ClientRecord):
    """
    A client record after vendor reconciliation.

    Each classification stage owns its fields:
    - reconciler: dcm_id, matched
    - pattern classifier: in_pattern
    - customer-type classifier: customer_type
    - pattern corrector: in_pattern, pattern_override
    """

    dcm_id: str = ""
    matched: bool = False
    in_pattern: bool | None = None
    customer_type: CustomerType | None = None
    pattern_override: str | None = None

    @classmethod
    def from_client_record(
        cls,
        record: ClientRecord,
        dcm_id: str,
        matched: bool,
    ) -> MatchRecord:
        """Create a MatchRecord carrying all of the original attributes."""
        values = {f.name: getattr(record, f.name) for f in fields(ClientRecord)}
        values["extra"] = dict(record.extra)
        return cls(**values, dcm_id=dcm_id, matched=matched)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MatchRecord:
        """Create a MatchRecord from a plain dictionary."""
        data = dict(data)
        dcm_id = data.pop("dcm_id", data.pop("dcmId", ""))
        matched = parse_match_flag(data.pop("matched", False))
        in_pattern = data.pop("in_pattern", data.pop("inPattern", None))
        customer_type = data.pop("customer_type", data.pop("customerType", None))
        pattern_override = data.pop("pattern_override", data.pop("patternOverride", None))

        base = ClientRecord.from_dict(data)
        return cls(
            **{f.name: getattr(base, f.name) for f in fields(ClientRecord)},
            dcm_id=dcm_id,
            matched=matched,
            in_pattern=in_pattern,
            customer_type=CustomerType(customer_type) if customer_type else None,
            pattern_override=pattern_override,
        )


# DCM_ID -> original record, scoped to one sanitize -> reconcile cycle
ReconciliationMap = dict[str, ClientRecord]
