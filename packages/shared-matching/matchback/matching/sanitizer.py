"""
Sanitization - strip client records down to vendor-safe contact data.

CRITICAL: the vendor must never see customer ids, signup or visit dates,
visit counts, sales, revenue or lifetime value. Each sanitized record holds
exactly five fields (DCM_ID, name, email, address, phone). The reverse
mapping from DCM_ID to the original record stays in memory with the caller.

After building the output a leak check scans every key against the
sensitive-field patterns. Any hit aborts the whole batch.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from matchback.matching.config import SanitizationConfig
from matchback.matching.dcm_id import current_timestamp, generate_dcm_id
from matchback.matching.exceptions import SensitiveDataLeakError
from matchback.matching.schema import (
    ClientRecord,
    ReconciliationMap,
    SanitizedRecord,
)

logger = logging.getLogger(__name__)


@dataclass
class SanitizationStatistics:
    """Batch statistics reported alongside sanitized output."""

    total_records: int
    missing_emails: int
    missing_email_percentage: float
    fields_removed: list[str] = field(default_factory=list)


@dataclass
class SanitizationResult:
    """Sanitized records plus the in-memory reverse mapping."""

    sanitized_records: list[SanitizedRecord]
    reconciliation_map: ReconciliationMap
    statistics: SanitizationStatistics
    batch_timestamp: int


def combine_name(record: ClientRecord) -> str:
    """Combine first and last name, falling back to the name field."""
    if record.first_name or record.last_name:
        return f"{record.first_name or ''} {record.last_name or ''}".strip()
    return record.name or ""


def combine_address(record: ClientRecord) -> str:
    """Join the present address, city, state and zip parts with ', '."""
    parts = [record.address, record.city, record.state, record.zip]
    return ", ".join(part for part in parts if part)


def _as_client_record(record: ClientRecord | Mapping[str, Any]) -> ClientRecord:
    if isinstance(record, ClientRecord):
        return record
    return ClientRecord.from_dict(dict(record))


def find_leaks(
    rows: Iterable[Mapping[str, Any]],
    config: SanitizationConfig | None = None,
) -> list[str]:
    """Return a description of every sensitive key found in the rows."""
    config = config or SanitizationConfig()
    sensitive = [s.lower() for s in config.sensitive_fields]
    allowed = {a.lower() for a in config.allowed_fields}
    leaks: list[str] = []

    for index, row in enumerate(rows, start=1):
        for key in row:
            lower_key = str(key).lower()
            if lower_key in allowed:
                continue
            if any(pattern in lower_key for pattern in sensitive):
                leaks.append(f'Record {index}: Found sensitive field "{key}"')

    return leaks


def validate_no_leaks(
    rows: Iterable[Mapping[str, Any]],
    config: SanitizationConfig | None = None,
) -> None:
    """
    Validate that no sensitive field names are present.

    Raises:
        SensitiveDataLeakError: If any key matches a sensitive pattern.
    """
    leaks = find_leaks(rows, config)

    if leaks:
        logger.error("SENSITIVE DATA LEAK DETECTED!")
        logger.error("\n".join(leaks))
        raise SensitiveDataLeakError(leaks)

    logger.info("Validation passed: No sensitive data leaks detected")


def sanitize_for_vendor(
    records: Sequence[ClientRecord | Mapping[str, Any]],
    campaign_id: str,
    market: str,
    batch_timestamp: int | None = None,
    config: SanitizationConfig | None = None,
) -> SanitizationResult:
    """
    Sanitize client records for vendor matching.

    Args:
        records: Client records (or plain dicts in ClientRecord shape)
        campaign_id: Campaign billing number, used as the DCM_ID prefix
        market: Market code for the batch
        batch_timestamp: Shared DCM_ID timestamp; defaults to now
        config: Sanitization configuration

    Returns:
        SanitizationResult with vendor-safe records and the DCM_ID mapping

    Raises:
        SensitiveDataLeakError: If the output would expose sensitive fields.
            No partial output is returned.
    """
    config = config or SanitizationConfig()
    timestamp = current_timestamp() if batch_timestamp is None else batch_timestamp

    logger.info(f"Sanitizing {len(records)} records for campaign {campaign_id}")

    sanitized_records: list[SanitizedRecord] = []
    reconciliation_map: ReconciliationMap = {}
    missing_emails = 0

    for index, raw in enumerate(records):
        record = _as_client_record(raw)
        dcm_id = generate_dcm_id(campaign_id, market, index + 1, timestamp)

        sanitized_records.append(
            SanitizedRecord(
                dcm_id=dcm_id,
                name=combine_name(record),
                email=record.email or "",
                address=combine_address(record),
                phone=record.phone or "",
            )
        )

        if not record.has_email:
            missing_emails += 1

        reconciliation_map[dcm_id] = record

    validate_no_leaks((r.to_dict() for r in sanitized_records), config)

    total = len(records)
    missing_pct = (missing_emails / total) * 100 if total else 0.0

    statistics = SanitizationStatistics(
        total_records=total,
        missing_emails=missing_emails,
        missing_email_percentage=missing_pct,
        fields_removed=list(config.sensitive_fields),
    )

    logger.info(
        f"Sanitization complete: {total} records, {missing_emails} missing emails "
        f"({missing_pct:.1f}%)"
    )

    if missing_pct > config.missing_email_warning_threshold:
        logger.warning(f"High percentage of missing emails: {missing_pct:.1f}%")

    return SanitizationResult(
        sanitized_records=sanitized_records,
        reconciliation_map=reconciliation_map,
        statistics=statistics,
        batch_timestamp=timestamp,
    )
