"""Configuration for vendor sanitization."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

# Field names that must never reach the vendor. Matched case-insensitively as
# substrings of sanitized record keys.
SENSITIVE_FIELDS: tuple[str, ...] = (
    "customerId",
    "customer_id",
    "id",
    "signupDate",
    "signup_date",
    "totalSales",
    "total_sales",
    "sales",
    "visit1Date",
    "visit2Date",
    "visit3Date",
    "visit_1",
    "visit_2",
    "visit_3",
    "totalVisits",
    "total_visits",
    "visits",
    "revenue",
    "ltv",
    "lifetime_value",
)

# Tracking identifier keys are exempt even though they contain "id".
ALLOWED_FIELDS: tuple[str, ...] = ("dcmid", "dcm_id")


@dataclass
class SanitizationConfig:
    """Configuration for sanitizing client records before vendor transmission.

    Attributes:
        missing_email_warning_threshold: Missing-email percentage above which
            a warning is logged.
        sensitive_fields: Field name patterns that must not appear in output.
        allowed_fields: Lower-cased keys exempt from the leak check.
    """

    missing_email_warning_threshold: float = 30.0
    sensitive_fields: tuple[str, ...] = field(default=SENSITIVE_FIELDS)
    allowed_fields: tuple[str, ...] = field(default=ALLOWED_FIELDS)

    @classmethod
    def from_env(cls) -> SanitizationConfig:
        """Create configuration from environment variables.

        Environment variables:
            MATCHBACK_MISSING_EMAIL_WARN_PCT: Warning threshold (default: 30)
        """
        raw = os.environ.get("MATCHBACK_MISSING_EMAIL_WARN_PCT", "30")
        try:
            threshold = float(raw)
        except ValueError as e:
            raise ValueError(
                f"Invalid MATCHBACK_MISSING_EMAIL_WARN_PCT: {raw}"
            ) from e

        return cls(missing_email_warning_threshold=threshold)
