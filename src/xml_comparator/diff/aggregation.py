"""Verdict aggregation over a full comparison walk.

Two aggregators drive a :class:`DOMDifferenceEngine` and fold the outcomes
into a :class:`DiffResult`:

* :class:`StopAtFirstDifference` answers yes/no questions. The first
  difference that makes the documents dissimilar is escalated to CRITICAL so
  the walk stops, and it is reported last.
* :class:`CollectAllDifferences` produces full reports. It never lets the walk
  stop; critical outcomes are recorded but handed back to the engine as
  DIFFERENT.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, List, Optional

from xml_comparator.diff.engine import DOMDifferenceEngine, TraversalStatus
from xml_comparator.diff.evaluation import ComparisonListenerSupport
from xml_comparator.diff.model import Comparison, ComparisonOutcome
from xml_comparator.shared.logging import get_logger
from xml_comparator.shared.result import ComparisonStatistics

if TYPE_CHECKING:
    from xml_comparator.shared.config import ComparisonConfig


@dataclass(frozen=True)
class Difference:
    """A reported comparison together with its final outcome."""

    comparison: Comparison
    outcome: ComparisonOutcome

    @property
    def kind(self) -> Any:
        return self.comparison.kind

    def __str__(self) -> str:
        from xml_comparator.diff.formatting import describe_difference

        return describe_difference(self)


@dataclass
class DiffResult:
    """Verdict of comparing a control and a test document."""

    identical: bool = True
    similar: bool = True
    differences: List[Difference] = field(default_factory=list)
    interrupted: bool = False
    halted_by: Optional[Difference] = None
    statistics: ComparisonStatistics = field(default_factory=ComparisonStatistics)

    @property
    def has_differences(self) -> bool:
        return bool(self.differences)

    def message(self) -> str:
        """Human readable summary, one line per difference."""
        from xml_comparator.diff.formatting import format_result

        return format_result(self)

    def __str__(self) -> str:
        return self.message()


class _VerdictAggregator:
    """Common machinery of both aggregators.

    The aggregator installs itself as the engine's difference evaluator,
    delegating to the configured one first, so it sees every comparison that
    passed the filter together with its evaluated outcome.
    """

    component = "verdict_aggregator"

    def __init__(self, config: Optional["ComparisonConfig"] = None) -> None:
        if config is None:
            from xml_comparator.shared.config import ComparisonConfig

            config = ComparisonConfig.default()
        self.config = config
        self.logger = get_logger(__name__, config.correlation_id, self.component)
        self.result = DiffResult()

    def run(
        self,
        control: Any,
        test: Any,
        listeners: Optional[ComparisonListenerSupport] = None,
    ) -> DiffResult:
        """Walk both trees and return the verdict.

        Args:
            control: Expected DOM document or node
            test: Actual DOM document or node
            listeners: Additional listeners notified by the engine

        Returns:
            DiffResult of this run
        """
        self.result = DiffResult()
        engine = DOMDifferenceEngine(self.config.override(difference_evaluator=self.evaluate))
        if listeners is not None:
            for listener in listeners.comparison_listeners:
                engine.add_comparison_listener(listener)
            for listener in listeners.match_listeners:
                engine.add_match_listener(listener)
            for listener in listeners.difference_listeners:
                engine.add_difference_listener(listener)

        status = engine.compare(control, test)
        self.result.interrupted = status is TraversalStatus.INTERRUPTED
        self.result.statistics = engine.statistics

        self.logger.info(
            "Verdict reached",
            extra={
                "identical": self.result.identical,
                "similar": self.result.similar,
                "differences": len(self.result.differences),
                "interrupted": self.result.interrupted,
            },
        )
        return self.result

    def evaluate(self, comparison: Comparison, outcome: ComparisonOutcome) -> ComparisonOutcome:
        raise NotImplementedError

    def _apply_verdict(self, comparison: Comparison, outcome: ComparisonOutcome) -> None:
        if outcome == ComparisonOutcome.EQUAL:
            return
        self.result.identical = False
        if outcome == ComparisonOutcome.CRITICAL:
            self.result.similar = False
        elif outcome == ComparisonOutcome.DIFFERENT and not comparison.recoverable:
            self.result.similar = False


class StopAtFirstDifference(_VerdictAggregator):
    """Stops the walk at the first difference that breaks similarity."""

    component = "stop_at_first_difference"

    def evaluate(self, comparison: Comparison, outcome: ComparisonOutcome) -> ComparisonOutcome:
        outcome = self.config.difference_evaluator(comparison, outcome)
        if outcome == ComparisonOutcome.DIFFERENT and not comparison.recoverable:
            outcome = ComparisonOutcome.CRITICAL

        self._apply_verdict(comparison, outcome)
        if outcome != ComparisonOutcome.EQUAL:
            difference = Difference(comparison, outcome)
            self.result.differences.append(difference)
            if outcome == ComparisonOutcome.CRITICAL:
                self.result.halted_by = difference
                self.logger.debug(
                    "Stopping at first difference",
                    extra={
                        "kind": comparison.kind.name,
                        "control_location": comparison.control.location,
                        "test_location": comparison.test.location,
                    },
                )
        return outcome


class CollectAllDifferences(_VerdictAggregator):
    """Records every difference and always finishes the walk.

    Each recorded difference carries a derived comparison whose recoverable
    flag reflects its outcome: True for SIMILAR, False for CRITICAL.

    A CRITICAL outcome is recorded as CRITICAL in the result but handed back
    to the engine as DIFFERENT, so the walk goes on. Listeners attached to the
    walk therefore receive DIFFERENT for such comparisons, and only
    ``DiffResult.differences`` keeps the CRITICAL outcome.
    """

    component = "collect_all_differences"

    def evaluate(self, comparison: Comparison, outcome: ComparisonOutcome) -> ComparisonOutcome:
        outcome = self.config.difference_evaluator(comparison, outcome)
        self._apply_verdict(comparison, outcome)
        if outcome == ComparisonOutcome.EQUAL:
            return outcome

        recorded = comparison
        if outcome == ComparisonOutcome.SIMILAR:
            recorded = comparison.with_recoverable(True)
        elif outcome == ComparisonOutcome.CRITICAL:
            recorded = comparison.with_recoverable(False)
        self.result.differences.append(Difference(recorded, outcome))

        if outcome == ComparisonOutcome.CRITICAL:
            return ComparisonOutcome.DIFFERENT
        return outcome
