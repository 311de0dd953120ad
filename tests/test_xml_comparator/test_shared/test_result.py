"""Tests for run statistics."""

from xml_comparator.shared.result import ComparisonStatistics


class TestComparisonStatistics:
    """Test suite for ComparisonStatistics."""

    def test_defaults(self):
        """Test an empty statistics record."""
        statistics = ComparisonStatistics()

        assert statistics.comparisons_total == 0
        assert statistics.difference_rate == 0.0
        assert statistics.comparisons_per_second == 0.0
        assert statistics.interrupted is False

    def test_derived_values(self):
        """Test totals and rates."""
        statistics = ComparisonStatistics(
            processing_time_ms=500.0,
            comparisons_performed=40,
            comparisons_filtered=10,
            differences=4,
        )

        assert statistics.comparisons_total == 50
        assert statistics.difference_rate == 0.1
        assert statistics.comparisons_per_second == 100.0
