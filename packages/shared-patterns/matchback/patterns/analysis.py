"""
Pattern analysis - base "regular customer" detection.

Base rule: 3+ visits with a recorded first visit = "In Pattern" (regular
customer, no campaign credit). Anything else is "Out of Pattern".

Records without visit data are out of pattern, not unknown.

This module applies the base rule only; the new-signup override lives in
matchback.patterns.correction.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import date, datetime

from matchback.matching.schema import MatchRecord
from matchback.patterns.config import DEFAULT_RULES, PatternRules

logger = logging.getLogger(__name__)


@dataclass
class PatternStatistics:
    """Distribution of in/out-of-pattern records."""

    total: int
    in_pattern: int
    out_of_pattern: int
    no_visit_data: int
    percentage_in_pattern: float
    percentage_out_of_pattern: float


def is_in_pattern(
    total_visits: int,
    visit1_date: date | datetime | None,
    rules: PatternRules = DEFAULT_RULES,
) -> bool:
    """Base pattern rule: enough visits and a recorded first visit."""
    if visit1_date is None or not total_visits:
        return False
    return total_visits >= rules.in_pattern_min_visits


def analyze_pattern(
    record: MatchRecord,
    rules: PatternRules | None = None,
) -> MatchRecord:
    """Return a copy of the record with in_pattern set."""
    in_pattern = is_in_pattern(record.total_visits, record.visit1_date, rules or DEFAULT_RULES)

    logger.debug(
        f"Pattern analysis for {record.dcm_id}: {record.total_visits} visits -> "
        f"{'IN' if in_pattern else 'OUT OF'} pattern"
    )

    return replace(record, in_pattern=in_pattern)


def analyze_patterns(
    records: Sequence[MatchRecord],
    rules: PatternRules | None = None,
) -> list[MatchRecord]:
    """Apply the base pattern rule to every record, preserving order."""
    logger.info(f"Analyzing patterns for {len(records)} records")

    analyzed = [analyze_pattern(record, rules) for record in records]

    in_count = sum(1 for r in analyzed if r.in_pattern)
    logger.info(
        f"Pattern analysis complete: {in_count} in pattern, "
        f"{len(analyzed) - in_count} out of pattern"
    )

    return analyzed


def get_pattern_statistics(records: Sequence[MatchRecord]) -> PatternStatistics:
    """Get pattern statistics; records never analyzed count as no_visit_data."""
    total = len(records)
    in_pattern = sum(1 for r in records if r.in_pattern is True)
    out_of_pattern = sum(1 for r in records if r.in_pattern is False)
    no_visit_data = sum(1 for r in records if r.in_pattern is None)

    return PatternStatistics(
        total=total,
        in_pattern=in_pattern,
        out_of_pattern=out_of_pattern,
        no_visit_data=no_visit_data,
        percentage_in_pattern=(in_pattern / total) * 100 if total else 0.0,
        percentage_out_of_pattern=(out_of_pattern / total) * 100 if total else 0.0,
    )
