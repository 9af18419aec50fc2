"""
Reconciliation - merge vendor match decisions back onto original records.

The vendor returns one yes/no decision per DCM_ID. Each decision is looked
up in the ReconciliationMap produced during sanitization. Decisions whose
DCM_ID is unknown cannot be attributed and are dropped; callers detect
this by comparing output length with the number of decisions.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

import pandas as pd

from matchback.matching.schema import MatchRecord, ReconciliationMap, parse_match_flag

logger = logging.getLogger(__name__)

VendorDecision = tuple[str, bool]


def extract_vendor_decisions(
    rows: pd.DataFrame | list[dict[str, Any]],
    id_column: str = "DCM_ID",
    match_column: str = "Matched",
) -> list[VendorDecision]:
    """
    Extract (dcm_id, matched) pairs from vendor response rows.

    Rows without a DCM_ID are skipped.

    Args:
        rows: Vendor response as DataFrame or list of dicts
        id_column: Column holding the DCM_ID
        match_column: Column holding the match flag

    Returns:
        List of (dcm_id, matched) tuples in row order
    """
    df = rows if isinstance(rows, pd.DataFrame) else pd.DataFrame(rows)
    decisions: list[VendorDecision] = []

    if df.empty or id_column not in df.columns:
        return decisions

    for _, row in df.iterrows():
        dcm_id = row.get(id_column)
        if not isinstance(dcm_id, str) or not dcm_id.strip():
            continue
        decisions.append((dcm_id.strip(), parse_match_flag(row.get(match_column))))

    return decisions


def reconcile(
    vendor_decisions: Iterable[VendorDecision],
    reconciliation_map: ReconciliationMap,
) -> list[MatchRecord]:
    """
    Merge vendor decisions back onto the original client records.

    Args:
        vendor_decisions: (dcm_id, matched) pairs from the vendor response
        reconciliation_map: DCM_ID -> original record from sanitization

    Returns:
        MatchRecords in decision order; unknown DCM_IDs are dropped
    """
    match_records: list[MatchRecord] = []
    dropped = 0

    for dcm_id, matched in vendor_decisions:
        original = reconciliation_map.get(dcm_id)
        if original is None:
            dropped += 1
            logger.debug(f"No original record for DCM_ID {dcm_id}")
            continue
        match_records.append(
            MatchRecord.from_client_record(original, dcm_id=dcm_id, matched=bool(matched))
        )

    matched_count = sum(1 for r in match_records if r.matched)
    logger.info(
        f"Processed vendor response: {len(match_records)} records reconciled, "
        f"{matched_count} matched"
    )

    if dropped:
        logger.warning(f"Dropped {dropped} vendor decisions with unknown DCM_IDs")

    return match_records
