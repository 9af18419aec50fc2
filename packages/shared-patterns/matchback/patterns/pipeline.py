"""
Pattern pipeline - run every classification stage over a reconciled batch.

Step 1: Base pattern rule (3+ visits = in pattern)
Step 2: Customer type against the campaign date
Step 3: New-signup pattern correction (skippable)

Every stage is pure and order-preserving, so re-running the pipeline on the
same input yields identical output.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, datetime

from matchback.matching.schema import CustomerType, MatchRecord
from matchback.patterns.analysis import analyze_patterns
from matchback.patterns.classification import classify_customers
from matchback.patterns.config import PatternRules
from matchback.patterns.correction import correct_pattern_flaws_batch

logger = logging.getLogger(__name__)


@dataclass
class PatternAnalysisStatistics:
    """Summary counts for a pipeline run."""

    total_records: int = 0
    in_pattern: int = 0
    out_of_pattern: int = 0
    new_signups: int = 0
    winbacks: int = 0
    corrected: int = 0


@dataclass
class PatternAnalysisResult:
    """Classified records plus summary counts."""

    records: list[MatchRecord] = field(default_factory=list)
    statistics: PatternAnalysisStatistics = field(default_factory=PatternAnalysisStatistics)

    @property
    def record_count(self) -> int:
        """Return the number of records analyzed."""
        return len(self.records)


def run_pattern_analysis(
    records: Sequence[MatchRecord],
    campaign_date: date | datetime,
    skip_correction: bool = False,
    rules: PatternRules | None = None,
) -> PatternAnalysisResult:
    """
    Classify a reconciled batch.

    Args:
        records: Reconciled match records
        campaign_date: Campaign date used for NEW_SIGNUP detection
        skip_correction: Leave the base pattern result uncorrected
        rules: Classification thresholds

    Returns:
        PatternAnalysisResult with classified records and counts
    """
    logger.info(f"Step 1/3: Analyzing visit patterns for {len(records)} records")
    with_patterns = analyze_patterns(records, rules)

    logger.info("Step 2/3: Classifying customers")
    classified = classify_customers(with_patterns, campaign_date, rules)

    analyzed = classified
    corrected_count = 0
    if skip_correction:
        logger.info("Step 3/3: Pattern correction skipped")
    else:
        logger.info("Step 3/3: Applying pattern corrections")
        analyzed = correct_pattern_flaws_batch(classified, rules)
        corrected_count = sum(
            1 for before, after in zip(classified, analyzed) if after is not before
        )

    statistics = PatternAnalysisStatistics(
        total_records=len(analyzed),
        in_pattern=sum(1 for r in analyzed if r.in_pattern is True),
        out_of_pattern=sum(1 for r in analyzed if r.in_pattern is False),
        new_signups=sum(1 for r in analyzed if r.customer_type == CustomerType.NEW_SIGNUP),
        winbacks=sum(1 for r in analyzed if r.customer_type == CustomerType.WINBACK),
        corrected=corrected_count,
    )

    logger.info(
        f"Pattern analysis complete: {statistics.out_of_pattern} out-of-pattern, "
        f"{statistics.corrected} corrected"
    )

    return PatternAnalysisResult(records=analyzed, statistics=statistics)
