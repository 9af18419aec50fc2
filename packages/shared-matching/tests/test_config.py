"""Tests for sanitization configuration."""

import pytest
from matchback.matching.config import (
    ALLOWED_FIELDS,
    SENSITIVE_FIELDS,
    SanitizationConfig,
)


class TestSanitizationConfig:
    """Test SanitizationConfig."""

    def test_defaults(self):
        """Test default configuration values."""
        config = SanitizationConfig()

        assert config.missing_email_warning_threshold == 30.0
        assert config.sensitive_fields == SENSITIVE_FIELDS
        assert config.allowed_fields == ALLOWED_FIELDS

    def test_sensitive_fields_cover_business_data(self):
        """Test the default patterns include ids, dates, visits and money."""
        lowered = {f.lower() for f in SENSITIVE_FIELDS}

        for pattern in ("customerid", "signupdate", "totalsales", "visits", "revenue", "ltv"):
            assert pattern in lowered

    def test_from_env_default(self, monkeypatch):
        """Test from_env without overrides."""
        monkeypatch.delenv("MATCHBACK_MISSING_EMAIL_WARN_PCT", raising=False)

        assert SanitizationConfig.from_env().missing_email_warning_threshold == 30.0

    def test_from_env_override(self, monkeypatch):
        """Test from_env reads the threshold."""
        monkeypatch.setenv("MATCHBACK_MISSING_EMAIL_WARN_PCT", "12.5")

        assert SanitizationConfig.from_env().missing_email_warning_threshold == 12.5

    def test_from_env_invalid(self, monkeypatch):
        """Test a malformed threshold raises ValueError."""
        monkeypatch.setenv("MATCHBACK_MISSING_EMAIL_WARN_PCT", "lots")

        with pytest.raises(ValueError, match="Invalid MATCHBACK_MISSING_EMAIL_WARN_PCT: lots"):
            SanitizationConfig.from_env()
