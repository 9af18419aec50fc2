"""
Matchback Patterns - customer pattern and lifecycle classification.

Provides:
- Base pattern rule (3+ visits = "In Pattern" regular customer)
- Customer types (NEW_SIGNUP, NEW_VISITOR, WINBACK, EXISTING)
- New-signup pattern correction with audit trail
- A pipeline running all three stages over a reconciled batch

Usage:
    from matchback.patterns import run_pattern_analysis

    result = run_pattern_analysis(match_records, campaign_date)
    print(result.statistics.corrected)
"""

from matchback.patterns.analysis import (
    PatternStatistics,
    analyze_pattern,
    analyze_patterns,
    get_pattern_statistics,
    is_in_pattern,
)
from matchback.patterns.classification import (
    ClassificationStatistics,
    classify_customer,
    classify_customers,
    determine_customer_type,
    get_classification_statistics,
    get_type_distribution,
    is_signup_in_campaign_month,
)
from matchback.patterns.config import DEFAULT_RULES, PatternRules
from matchback.patterns.correction import (
    CorrectionStatistics,
    CorrectionValidation,
    correct_pattern_flaws,
    correct_pattern_flaws_batch,
    get_correction_statistics,
    validate_corrections,
)
from matchback.patterns.pipeline import (
    PatternAnalysisResult,
    PatternAnalysisStatistics,
    run_pattern_analysis,
)

__all__ = [
    # Config
    "PatternRules",
    "DEFAULT_RULES",
    # Pattern analysis
    "PatternStatistics",
    "analyze_pattern",
    "analyze_patterns",
    "get_pattern_statistics",
    "is_in_pattern",
    # Classification
    "ClassificationStatistics",
    "classify_customer",
    "classify_customers",
    "determine_customer_type",
    "get_classification_statistics",
    "get_type_distribution",
    "is_signup_in_campaign_month",
    # Correction
    "CorrectionStatistics",
    "CorrectionValidation",
    "correct_pattern_flaws",
    "correct_pattern_flaws_batch",
    "get_correction_statistics",
    "validate_corrections",
    # Pipeline
    "PatternAnalysisResult",
    "PatternAnalysisStatistics",
    "run_pattern_analysis",
]
