"""
Matching workflow - validate a batch, sanitize it, and reconcile the reply.

1. Validate the batch (campaign, market, single-market records)
2. Sanitize client data and generate DCM_IDs
3. Hand vendor rows to the transport layer (external)
4. Reconcile the vendor response using the in-memory mapping
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import pandas as pd

from matchback.matching.config import SanitizationConfig
from matchback.matching.exceptions import WorkflowValidationError
from matchback.matching.markets import detect_markets
from matchback.matching.reconciler import extract_vendor_decisions, reconcile
from matchback.matching.sanitizer import (
    SanitizationStatistics,
    sanitize_for_vendor,
)
from matchback.matching.schema import (
    ClientRecord,
    MatchRecord,
    ReconciliationMap,
    SanitizedRecord,
)

logger = logging.getLogger(__name__)


@dataclass
class MatchingPreparation:
    """Everything the caller needs to send a batch and reconcile the reply."""

    campaign_id: str
    market: str
    sanitized_records: list[SanitizedRecord]
    reconciliation_map: ReconciliationMap
    statistics: SanitizationStatistics
    batch_timestamp: int

    @property
    def dcm_ids_generated(self) -> int:
        """Return the number of DCM_IDs issued for this batch."""
        return len(self.sanitized_records)

    def vendor_rows(self) -> list[dict[str, str]]:
        """Return the sanitized records keyed by vendor column headers."""
        return [record.to_vendor_row() for record in self.sanitized_records]


def validate_workflow(
    campaign_id: str,
    market: str,
    client_records: Sequence[ClientRecord],
) -> None:
    """
    Validate matching workflow inputs.

    Raises:
        WorkflowValidationError: If the campaign or market is blank, there are
            no records, or records span more than one market.
    """
    if not campaign_id or not campaign_id.strip():
        raise WorkflowValidationError("Campaign ID is required")

    if not market or not market.strip():
        raise WorkflowValidationError("Market is required")

    if not client_records:
        raise WorkflowValidationError("Client records are required")

    markets = detect_markets(client_records)
    if len(markets) > 1:
        raise WorkflowValidationError(
            f"Market mixing detected: {', '.join(markets)}. "
            "All records must be from the same market."
        )

    logger.info(f"Validation passed: {len(client_records)} records for {market}")


def prepare_for_vendor_matching(
    campaign_id: str,
    market: str,
    client_records: Sequence[ClientRecord],
    batch_timestamp: int | None = None,
    config: SanitizationConfig | None = None,
) -> MatchingPreparation:
    """Validate and sanitize a client batch for vendor matching."""
    logger.info(
        f"Starting vendor matching preparation for campaign {campaign_id}, market {market}"
    )

    validate_workflow(campaign_id, market, client_records)

    result = sanitize_for_vendor(
        client_records,
        campaign_id,
        market,
        batch_timestamp=batch_timestamp,
        config=config,
    )

    logger.info(
        f"Vendor matching preparation complete: "
        f"{result.statistics.total_records} records sanitized"
    )

    return MatchingPreparation(
        campaign_id=campaign_id,
        market=market,
        sanitized_records=result.sanitized_records,
        reconciliation_map=result.reconciliation_map,
        statistics=result.statistics,
        batch_timestamp=result.batch_timestamp,
    )


def process_vendor_response(
    vendor_rows: pd.DataFrame | list[dict[str, Any]],
    reconciliation_map: ReconciliationMap,
    id_column: str = "DCM_ID",
    match_column: str = "Matched",
) -> list[MatchRecord]:
    """Extract vendor decisions from response rows and reconcile them."""
    decisions = extract_vendor_decisions(vendor_rows, id_column, match_column)
    logger.info(f"Processing vendor response: {len(decisions)} decisions")
    return reconcile(decisions, reconciliation_map)
