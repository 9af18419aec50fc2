"""Market detection and validation for client record batches."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import TypeVar

from matchback.matching.schema import ClientRecord

UNKNOWN_MARKET = "UNKNOWN"

R = TypeVar("R", bound=ClientRecord)


@dataclass
class MarketInfo:
    """Record count and share for a single market."""

    market: str
    count: int
    percentage: float


@dataclass
class MarketValidation:
    """Result of checking that a batch belongs to exactly one market."""

    valid: bool
    markets: list[str] = field(default_factory=list)
    error: str | None = None


def _clean_market(record: ClientRecord) -> str | None:
    if record.market and record.market.strip():
        return record.market.strip()
    return None


def detect_markets(records: Iterable[ClientRecord]) -> list[str]:
    """Return the sorted distinct markets present in the records."""
    markets = {m for m in (_clean_market(r) for r in records) if m}
    return sorted(markets)


def get_market_info(records: Sequence[ClientRecord]) -> list[MarketInfo]:
    """Count records per market, largest market first."""
    total = len(records)
    counts: dict[str, int] = {}

    for record in records:
        market = _clean_market(record)
        if market:
            counts[market] = counts.get(market, 0) + 1

    info = [
        MarketInfo(
            market=market,
            count=count,
            percentage=(count / total) * 100 if total else 0.0,
        )
        for market, count in counts.items()
    ]
    info.sort(key=lambda i: i.count, reverse=True)
    return info


def validate_market_separation(
    records: Sequence[ClientRecord],
    allowed_markets: Sequence[str] | None = None,
) -> MarketValidation:
    """Check that records don't mix markets.

    Args:
        records: Client records for one matchback batch
        allowed_markets: Optional whitelist of expected market codes

    Returns:
        MarketValidation describing the outcome
    """
    detected = detect_markets(records)

    if not detected:
        return MarketValidation(
            valid=False,
            error="No market information found in records",
        )

    if len(detected) > 1:
        return MarketValidation(
            valid=False,
            markets=detected,
            error=f"Market mixing detected: {', '.join(detected)}",
        )

    if allowed_markets and detected[0] not in allowed_markets:
        return MarketValidation(
            valid=False,
            markets=detected,
            error=(
                f"Unexpected market: {detected[0]}. "
                f"Expected one of: {', '.join(allowed_markets)}"
            ),
        )

    return MarketValidation(valid=True, markets=detected)


def group_by_market(records: Iterable[R]) -> dict[str, list[R]]:
    """Group records by market; records without one go under UNKNOWN."""
    grouped: dict[str, list[R]] = {}
    for record in records:
        market = _clean_market(record) or UNKNOWN_MARKET
        grouped.setdefault(market, []).append(record)
    return grouped
