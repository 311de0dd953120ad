"""Run statistics for XML comparison.

Counters collected by the evaluation pipeline during one walk over a control
and a test tree.
"""

from dataclasses import dataclass


@dataclass
class ComparisonStatistics:
    """Counters of a single comparison run."""

    processing_time_ms: float = 0.0
    comparisons_performed: int = 0
    comparisons_filtered: int = 0
    differences: int = 0
    interrupted: bool = False

    @property
    def comparisons_total(self) -> int:
        """Comparisons produced by the strategies, filtered ones included."""
        return self.comparisons_performed + self.comparisons_filtered

    @property
    def difference_rate(self) -> float:
        """Share of evaluated comparisons that did not come out EQUAL."""
        if self.comparisons_performed == 0:
            return 0.0
        return self.differences / self.comparisons_performed

    @property
    def comparisons_per_second(self) -> float:
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.comparisons_total * 1000.0) / self.processing_time_ms
