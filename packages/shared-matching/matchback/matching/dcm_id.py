"""
DCM_ID generation - opaque tracking identifiers for matchback records.

Format: {CampaignID}-{Market}-{Timestamp}-{Sequence}
Example: TIDE123-HOU-1700000000-00001

DCM_IDs are the only correlation key between a sanitized record sent to the
vendor and the original client record. They carry no client data.

Sequences are 1-indexed and zero-padded to 5 digits; larger sequences simply
render wider. Callers avoid collisions by using a fresh timestamp per batch.
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass

logger = logging.getLogger(__name__)

SEPARATOR = "-"
SEQUENCE_WIDTH = 5

_NON_ALPHANUMERIC = re.compile(r"[^a-zA-Z0-9]")
_INTEGER = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class ParsedDcmId:
    """Components of a DCM_ID. All fields are empty/zero when invalid."""

    campaign_id: str = ""
    market: str = ""
    timestamp: int = 0
    sequence: int = 0
    is_valid: bool = False


def sanitize_component(component: str) -> str:
    """Remove any characters that aren't alphanumeric."""
    return _NON_ALPHANUMERIC.sub("", component)


def current_timestamp() -> int:
    """Return the current time in epoch milliseconds."""
    return int(time.time() * 1000)


def generate_dcm_id(
    campaign_id: str,
    market: str,
    sequence: int,
    timestamp: int | None = None,
) -> str:
    """
    Generate a single DCM_ID.

    Args:
        campaign_id: Campaign billing number or identifier
        market: Market code (e.g., HOU, NYC, LA)
        sequence: Sequential number for this record (1-indexed)
        timestamp: Batch timestamp; defaults to now in epoch milliseconds

    Returns:
        DCM_ID string

    Raises:
        ValueError: If a token sanitizes to empty or a number is negative.
    """
    ts = current_timestamp() if timestamp is None else timestamp

    clean_campaign = sanitize_component(campaign_id)
    clean_market = sanitize_component(market).upper()

    if not clean_campaign:
        raise ValueError(f"Campaign ID has no alphanumeric characters: {campaign_id!r}")
    if not clean_market:
        raise ValueError(f"Market has no alphanumeric characters: {market!r}")
    if sequence < 0:
        raise ValueError(f"Sequence must be non-negative, got {sequence}")
    if ts < 0:
        raise ValueError(f"Timestamp must be non-negative, got {ts}")

    dcm_id = SEPARATOR.join(
        [clean_campaign, clean_market, str(ts), f"{sequence:0{SEQUENCE_WIDTH}d}"]
    )

    logger.debug(f"Generated DCM_ID: {dcm_id}")

    return dcm_id


def generate_batch(
    campaign_id: str,
    market: str,
    count: int,
    timestamp: int | None = None,
) -> list[str]:
    """
    Generate DCM_IDs for a batch of records.

    All IDs share one timestamp; sequences run from 1 to count.
    """
    ts = current_timestamp() if timestamp is None else timestamp

    dcm_ids = [
        generate_dcm_id(campaign_id, market, sequence, ts)
        for sequence in range(1, count + 1)
    ]

    logger.info(f"Generated {len(dcm_ids)} DCM_IDs for {campaign_id}-{market}")

    return dcm_ids


def parse_dcm_id(dcm_id: str) -> ParsedDcmId:
    """
    Parse a DCM_ID back into its components.

    Never raises: malformed input yields ParsedDcmId(is_valid=False).
    """
    if not isinstance(dcm_id, str):
        return ParsedDcmId()

    parts = dcm_id.split(SEPARATOR)
    if len(parts) != 4:
        return ParsedDcmId()

    campaign_id, market, timestamp_str, sequence_str = parts

    if not campaign_id or not market:
        return ParsedDcmId()
    if not _INTEGER.fullmatch(timestamp_str) or not _INTEGER.fullmatch(sequence_str):
        return ParsedDcmId()

    return ParsedDcmId(
        campaign_id=campaign_id,
        market=market,
        timestamp=int(timestamp_str),
        sequence=int(sequence_str),
        is_valid=True,
    )


def is_valid_dcm_id(dcm_id: str) -> bool:
    """Validate a DCM_ID format."""
    return parse_dcm_id(dcm_id).is_valid


def extract_market(dcm_id: str) -> str | None:
    """Extract market from a DCM_ID, or None when invalid."""
    parsed = parse_dcm_id(dcm_id)
    return parsed.market if parsed.is_valid else None


def extract_campaign_id(dcm_id: str) -> str | None:
    """Extract campaign ID from a DCM_ID, or None when invalid."""
    parsed = parse_dcm_id(dcm_id)
    return parsed.campaign_id if parsed.is_valid else None


def extract_sequence(dcm_id: str) -> int | None:
    """Extract sequence number from a DCM_ID, or None when invalid."""
    parsed = parse_dcm_id(dcm_id)
    return parsed.sequence if parsed.is_valid else None
