"""
Pattern correction - the new-signup override on top of the base pattern rule.

A new customer signing up in a month and visiting 3+ times in that same
month is campaign-influenced, yet the base rule marks them "In Pattern".
This override flips them to "Out of Pattern" and records
NEW_SIGNUP_CORRECTION so every change is auditable.

Applies only when all hold:
- in_pattern is True
- a first-visit date is present
- signup and first visit share the same UTC year and month
- total_visits >= 3

Re-applying is a no-op since corrected records are no longer in pattern.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field, replace

from matchback.matching.dates import same_utc_month, to_utc
from matchback.matching.schema import NEW_SIGNUP_CORRECTION, MatchRecord
from matchback.patterns.config import DEFAULT_RULES, PatternRules

logger = logging.getLogger(__name__)

MAX_LOGGED_EXAMPLES = 3


@dataclass
class CorrectionStatistics:
    """How many records the override touched."""

    total: int
    corrected: int
    percentage_corrected: float
    corrected_records: list[MatchRecord] = field(default_factory=list)


@dataclass
class CorrectionValidation:
    """Audit outcome: records that qualify for correction but lack it."""

    is_valid: bool
    errors: list[str] = field(default_factory=list)


def _is_new_signup_in_visit_month(record: MatchRecord, rules: PatternRules) -> bool:
    if record.visit1_date is None or record.signup_date is None:
        return False
    return (
        same_utc_month(record.signup_date, record.visit1_date)
        and record.total_visits >= rules.in_pattern_min_visits
    )


def correct_pattern_flaws(
    record: MatchRecord,
    rules: PatternRules | None = None,
) -> MatchRecord:
    """Apply the new-signup correction to a single record."""
    if record.in_pattern is not True:
        return record

    if not _is_new_signup_in_visit_month(record, rules or DEFAULT_RULES):
        return record

    logger.warning(
        f"PATTERN CORRECTION: {record.dcm_id} - New signup with {record.total_visits} "
        f"visits in signup month. Overriding to OUT of pattern."
    )

    return replace(record, in_pattern=False, pattern_override=NEW_SIGNUP_CORRECTION)


def correct_pattern_flaws_batch(
    records: Sequence[MatchRecord],
    rules: PatternRules | None = None,
) -> list[MatchRecord]:
    """Apply the correction to every record, preserving order."""
    logger.info(f"Applying pattern flaw correction to {len(records)} records")

    corrected = [correct_pattern_flaws(record, rules) for record in records]

    # Only count overrides made in this pass
    newly_corrected = [
        after for before, after in zip(records, corrected)
        if after is not before
    ]

    if newly_corrected:
        logger.info(
            f"Pattern correction complete: {len(newly_corrected)} records corrected "
            f"from IN to OUT of pattern"
        )
        _log_correction_examples(newly_corrected)
    else:
        logger.info("Pattern correction complete: No corrections needed")

    return corrected


def _log_correction_examples(corrected: Sequence[MatchRecord]) -> None:
    """Log the first few corrected records for the audit trail."""
    logger.debug("Pattern correction examples:")

    for record in corrected[:MAX_LOGGED_EXAMPLES]:
        signup = to_utc(record.signup_date).date().isoformat() if record.signup_date else "N/A"
        visit = to_utc(record.visit1_date).date().isoformat() if record.visit1_date else "N/A"
        logger.debug(
            f"  {record.dcm_id}: Signup {signup}, Visit {visit}, "
            f"{record.total_visits} visits -> OUT of pattern ({NEW_SIGNUP_CORRECTION})"
        )

    if len(corrected) > MAX_LOGGED_EXAMPLES:
        logger.debug(f"  ... and {len(corrected) - MAX_LOGGED_EXAMPLES} more")


def get_correction_statistics(records: Sequence[MatchRecord]) -> CorrectionStatistics:
    """Get correction counts across a batch."""
    corrected = [r for r in records if r.pattern_override == NEW_SIGNUP_CORRECTION]
    total = len(records)

    return CorrectionStatistics(
        total=total,
        corrected=len(corrected),
        percentage_corrected=(len(corrected) / total) * 100 if total else 0.0,
        corrected_records=corrected,
    )


def validate_corrections(
    records: Sequence[MatchRecord],
    rules: PatternRules | None = None,
) -> CorrectionValidation:
    """Check that no qualifying record was left in pattern."""
    rules = rules or DEFAULT_RULES
    errors: list[str] = []

    for record in records:
        if (
            record.in_pattern is True
            and record.pattern_override != NEW_SIGNUP_CORRECTION
            and _is_new_signup_in_visit_month(record, rules)
        ):
            errors.append(
                f"Record {record.dcm_id} should be OUT of pattern (new signup with "
                f"{record.total_visits} visits in signup month) but is marked IN pattern"
            )

    return CorrectionValidation(is_valid=not errors, errors=errors)
