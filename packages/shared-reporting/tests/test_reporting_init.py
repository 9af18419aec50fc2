"""Tests for matchback.reporting public API."""


def test_import_metrics():
    """Test that metrics functions are importable from top level."""
    from matchback.reporting import (
        AttributionMetrics,
        MetricsComparison,
        calculate_metrics,
        compare_metrics,
        format_for_report,
    )

    assert hasattr(AttributionMetrics, "to_dict")
    assert hasattr(MetricsComparison, "__dataclass_fields__")
    assert callable(calculate_metrics)
    assert callable(compare_metrics)
    assert callable(format_for_report)


def test_import_pivots():
    """Test that pivot functions are importable from top level."""
    from matchback.reporting import (
        PivotTable,
        calculate_missing_email_stats,
        create_matched_sales_pivot,
        create_new_customers_pivot,
    )

    assert hasattr(PivotTable, "to_dataframe")
    assert callable(calculate_missing_email_stats)
    assert callable(create_matched_sales_pivot)
    assert callable(create_new_customers_pivot)


def test_all_exports():
    """Test that __all__ lists the public API."""
    import matchback.reporting

    assert "calculate_metrics" in matchback.reporting.__all__
    assert "is_recent_signup" in matchback.reporting.__all__
