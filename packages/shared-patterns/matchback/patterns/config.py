"""Classification thresholds for visit patterns and customer types."""

from __future__ import annotations

import os
from dataclasses import dataclass


def _int_from_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"Invalid {name}: {raw}") from e


@dataclass(frozen=True)
class PatternRules:
    """Thresholds used by the pattern and customer-type classifiers.

    Attributes:
        in_pattern_min_visits: Visits at which a customer counts as regular.
        new_visitor_min_days: Lower bound (inclusive) of days from signup to
            first visit for NEW_VISITOR.
        new_visitor_max_days: Upper bound (inclusive) for NEW_VISITOR.
        winback_min_years: Years from signup to first visit for WINBACK.
    """

    in_pattern_min_visits: int = 3
    new_visitor_min_days: int = 1
    new_visitor_max_days: int = 30
    winback_min_years: int = 5

    @classmethod
    def from_env(cls) -> PatternRules:
        """Create rules from environment variables.

        Environment variables:
            MATCHBACK_IN_PATTERN_MIN_VISITS: Regular-customer visit count (default: 3)
            MATCHBACK_NEW_VISITOR_MAX_DAYS: NEW_VISITOR window in days (default: 30)
            MATCHBACK_WINBACK_MIN_YEARS: WINBACK gap in years (default: 5)
        """
        return cls(
            in_pattern_min_visits=_int_from_env("MATCHBACK_IN_PATTERN_MIN_VISITS", 3),
            new_visitor_max_days=_int_from_env("MATCHBACK_NEW_VISITOR_MAX_DAYS", 30),
            winback_min_years=_int_from_env("MATCHBACK_WINBACK_MIN_YEARS", 5),
        )


DEFAULT_RULES = PatternRules()
