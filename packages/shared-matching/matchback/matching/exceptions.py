"""Custom exceptions for the matchback core."""

from __future__ import annotations


class MatchbackError(Exception):
    """Base exception for matchback errors."""

    pass


class SensitiveDataLeakError(MatchbackError):
    """Raised when sanitized output still carries a sensitive field."""

    def __init__(self, leaks: list[str]):
        self.leaks = leaks
        super().__init__(
            f"Sanitization failed: Sensitive data detected in {len(leaks)} records"
        )


class WorkflowValidationError(MatchbackError):
    """Raised when a matching workflow is missing required inputs."""

    pass


class SchemaError(MatchbackError):
    """Raised when a record collection lacks a structurally required column."""

    pass
