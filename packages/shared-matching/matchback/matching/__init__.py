"""
Matchback Matching - privacy-safe vendor round trip for client records.

Provides:
- DCM_ID tracking identifiers (generate, batch, parse)
- Client record schema and upload row normalization
- Sanitization of client records for the matching vendor
- Reconciliation of vendor match decisions back onto original records

The key guarantee: the vendor only ever sees contact fields plus an opaque
DCM_ID. The DCM_ID -> record mapping never leaves the caller's process.

Usage:
    from matchback.matching import (
        normalize_client_rows,
        reconcile,
        sanitize_for_vendor,
    )

    records = normalize_client_rows(upload_rows).records
    result = sanitize_for_vendor(records, "TIDE-123", "HOU")

    # ... vendor round trip ...

    matches = reconcile(decisions, result.reconciliation_map)
"""

from matchback.matching.config import SanitizationConfig
from matchback.matching.dcm_id import (
    ParsedDcmId,
    extract_campaign_id,
    extract_market,
    extract_sequence,
    generate_batch,
    generate_dcm_id,
    is_valid_dcm_id,
    parse_dcm_id,
)
from matchback.matching.exceptions import (
    MatchbackError,
    SchemaError,
    SensitiveDataLeakError,
    WorkflowValidationError,
)
from matchback.matching.markets import (
    MarketInfo,
    MarketValidation,
    detect_markets,
    get_market_info,
    group_by_market,
    validate_market_separation,
)
from matchback.matching.normalizer import (
    ClientRecordNormalizer,
    NormalizationResult,
    normalize_client_rows,
)
from matchback.matching.reconciler import (
    extract_vendor_decisions,
    reconcile,
)
from matchback.matching.sanitizer import (
    SanitizationResult,
    SanitizationStatistics,
    sanitize_for_vendor,
    validate_no_leaks,
)
from matchback.matching.schema import (
    CLIENT_FIELD_ALIASES,
    NEW_SIGNUP_CORRECTION,
    ClientRecord,
    CustomerType,
    MatchRecord,
    ReconciliationMap,
    SanitizedRecord,
    parse_match_flag,
)
from matchback.matching.workflow import (
    MatchingPreparation,
    prepare_for_vendor_matching,
    process_vendor_response,
)

__all__ = [
    # Schema
    "ClientRecord",
    "SanitizedRecord",
    "MatchRecord",
    "CustomerType",
    "ReconciliationMap",
    "CLIENT_FIELD_ALIASES",
    "NEW_SIGNUP_CORRECTION",
    # DCM_ID
    "ParsedDcmId",
    "generate_dcm_id",
    "generate_batch",
    "parse_dcm_id",
    "is_valid_dcm_id",
    "extract_market",
    "extract_campaign_id",
    "extract_sequence",
    # Normalization
    "ClientRecordNormalizer",
    "NormalizationResult",
    "normalize_client_rows",
    # Markets
    "MarketInfo",
    "MarketValidation",
    "detect_markets",
    "get_market_info",
    "group_by_market",
    "validate_market_separation",
    # Sanitization
    "SanitizationConfig",
    "SanitizationResult",
    "SanitizationStatistics",
    "sanitize_for_vendor",
    "validate_no_leaks",
    # Reconciliation
    "extract_vendor_decisions",
    "parse_match_flag",
    "reconcile",
    # Workflow
    "MatchingPreparation",
    "prepare_for_vendor_matching",
    "process_vendor_response",
    # Exceptions
    "MatchbackError",
    "SchemaError",
    "SensitiveDataLeakError",
    "WorkflowValidationError",
]
