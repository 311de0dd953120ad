"""Evaluation pipeline turning comparisons into outcomes.

Every comparison produced by a strategy passes through the same steps:

1. the comparison filter decides whether it takes part at all,
2. the two detail values are checked for raw equality (EQUAL or DIFFERENT),
3. the difference evaluator may reclassify that outcome,
4. listeners are notified of the final outcome.

Evaluators, filters and listeners are plain callables::

    evaluator(comparison, outcome) -> ComparisonOutcome
    comparison_filter(comparison) -> bool      # True keeps the comparison
    listener(comparison, outcome) -> None
"""

import logging
from typing import Any, Callable, List, Optional

from xml_comparator.diff.model import Comparison, ComparisonKind, ComparisonOutcome
from xml_comparator.diff.nodes import NodeKind, is_document, is_element
from xml_comparator.shared.errors import ComparisonEngineError, ComparisonError
from xml_comparator.shared.logging import CorrelationLogger, get_logger
from xml_comparator.shared.result import ComparisonStatistics

DifferenceEvaluator = Callable[[Comparison, ComparisonOutcome], ComparisonOutcome]
ComparisonFilter = Callable[[Comparison], bool]
ComparisonListener = Callable[[Comparison, ComparisonOutcome], None]

_DECLARATION_KINDS = frozenset({
    ComparisonKind.XML_VERSION,
    ComparisonKind.XML_STANDALONE,
    ComparisonKind.XML_ENCODING,
})
_TEXT_KINDS = frozenset({NodeKind.TEXT, NodeKind.CDATA_SECTION})
_VALUE_KINDS = frozenset({
    ComparisonKind.ATTR_VALUE,
    ComparisonKind.ATTR_VALUE_EXPLICITLY_SPECIFIED,
    ComparisonKind.TEXT_VALUE,
})


class DifferenceEvaluators:
    """Evaluators and evaluator combinators."""

    @staticmethod
    def default(comparison: Comparison, outcome: ComparisonOutcome) -> ComparisonOutcome:
        """Downgrade differences of recoverable comparisons to SIMILAR."""
        if outcome == ComparisonOutcome.DIFFERENT and comparison.recoverable:
            return ComparisonOutcome.SIMILAR
        return outcome

    @staticmethod
    def accept_all(comparison: Comparison, outcome: ComparisonOutcome) -> ComparisonOutcome:
        return outcome

    @staticmethod
    def downgrade_differences_to_similar(
        comparison: Comparison, outcome: ComparisonOutcome
    ) -> ComparisonOutcome:
        if outcome == ComparisonOutcome.DIFFERENT:
            return ComparisonOutcome.SIMILAR
        return outcome

    @staticmethod
    def upgrade_differences_to_critical(
        comparison: Comparison, outcome: ComparisonOutcome
    ) -> ComparisonOutcome:
        if outcome == ComparisonOutcome.DIFFERENT:
            return ComparisonOutcome.CRITICAL
        return outcome

    @staticmethod
    def ignore_text_and_attribute_values(
        comparison: Comparison, outcome: ComparisonOutcome
    ) -> ComparisonOutcome:
        """Compare structure only.

        Differing text and attribute values are SIMILAR, any other
        difference is DIFFERENT.
        """
        if outcome == ComparisonOutcome.EQUAL:
            return outcome
        if comparison.kind in _VALUE_KINDS:
            return ComparisonOutcome.SIMILAR
        return ComparisonOutcome.DIFFERENT

    @staticmethod
    def text_differences(
        delegate: Optional[DifferenceEvaluator] = None,
        attribute: Optional[DifferenceEvaluator] = None,
        cdata: Optional[DifferenceEvaluator] = None,
        comment: Optional[DifferenceEvaluator] = None,
        text: Optional[DifferenceEvaluator] = None,
    ) -> DifferenceEvaluator:
        """Route textual differences to dedicated evaluators.

        Differences of attribute values, CDATA sections, comments and text
        go to the matching per-kind evaluator. Those left unset, and all
        other differences, go to ``delegate``. Without a delegate the
        outcome is kept. EQUAL outcomes are never passed on.

        Args:
            delegate: Evaluator for everything not handled by a per-kind one
            attribute: Evaluator for ATTR_VALUE differences
            cdata: Evaluator for CDATA_VALUE differences
            comment: Evaluator for COMMENT_VALUE differences
            text: Evaluator for TEXT_VALUE differences

        Returns:
            Evaluator dispatching on the comparison kind
        """
        handlers = {
            ComparisonKind.ATTR_VALUE: attribute,
            ComparisonKind.CDATA_VALUE: cdata,
            ComparisonKind.COMMENT_VALUE: comment,
            ComparisonKind.TEXT_VALUE: text,
        }
        _check_callables(
            [candidate for candidate in (delegate, *handlers.values()) if candidate is not None],
            "evaluators",
        )

        def evaluator(comparison: Comparison, outcome: ComparisonOutcome) -> ComparisonOutcome:
            if outcome == ComparisonOutcome.EQUAL:
                return outcome
            handler = handlers.get(comparison.kind) or delegate
            if handler is None:
                return outcome
            return handler(comparison, outcome)

        return evaluator

    @staticmethod
    def first(*evaluators: DifferenceEvaluator) -> DifferenceEvaluator:
        """Use the outcome of the first evaluator that changes it."""
        _check_callables(evaluators, "evaluators")

        def evaluator(comparison: Comparison, outcome: ComparisonOutcome) -> ComparisonOutcome:
            for candidate in evaluators:
                evaluated = candidate(comparison, outcome)
                if evaluated != outcome:
                    return evaluated
            return outcome

        return evaluator

    @staticmethod
    def chain(*evaluators: DifferenceEvaluator) -> DifferenceEvaluator:
        """Feed the outcome of each evaluator into the next one."""
        _check_callables(evaluators, "evaluators")

        def evaluator(comparison: Comparison, outcome: ComparisonOutcome) -> ComparisonOutcome:
            for candidate in evaluators:
                outcome = candidate(comparison, outcome)
            return outcome

        return evaluator


class ComparisonFilters:
    """Comparison filters and filter combinators."""

    @staticmethod
    def default(comparison: Comparison) -> bool:
        """Drop comparisons that are noise for most document comparisons.

        XML declaration details are ignored, the child count of the document
        node is not compared, and missing non-element children of the
        document node (top-level whitespace, comments) are not reported.
        """
        if comparison.kind in _DECLARATION_KINDS:
            return False
        if comparison.kind == ComparisonKind.CHILD_NODELIST_LENGTH:
            return not is_document(comparison.control.target)
        if comparison.kind == ComparisonKind.CHILD_LOOKUP:
            return not (
                _is_top_level_non_element(comparison.control.target)
                or _is_top_level_non_element(comparison.test.target)
            )
        return True

    @staticmethod
    def accept_all(comparison: Comparison) -> bool:
        return True

    @staticmethod
    def text_cdata_node_type(comparison: Comparison) -> bool:
        """Drop NODE_TYPE comparisons between a text and a CDATA node."""
        if comparison.kind != ComparisonKind.NODE_TYPE:
            return True
        values = {comparison.control.value, comparison.test.value}
        return not (len(values) == 2 and values <= _TEXT_KINDS)

    @staticmethod
    def ignoring(*kinds: ComparisonKind) -> ComparisonFilter:
        """Drop every comparison of the given kinds."""
        for kind in kinds:
            if not isinstance(kind, ComparisonKind):
                raise ValueError(f"Not a ComparisonKind: {kind!r}")
        ignored = frozenset(kinds)

        def comparison_filter(comparison: Comparison) -> bool:
            return comparison.kind not in ignored

        return comparison_filter

    @staticmethod
    def all_of(*filters: ComparisonFilter) -> ComparisonFilter:
        """Keep a comparison only if every filter keeps it."""
        _check_callables(filters, "filters")

        def comparison_filter(comparison: Comparison) -> bool:
            return all(candidate(comparison) for candidate in filters)

        return comparison_filter


def _is_top_level_non_element(node: Any) -> bool:
    if node is None or is_element(node):
        return False
    return is_document(getattr(node, "parentNode", None))


def _check_callables(candidates: Any, what: str) -> None:
    for candidate in candidates:
        if not callable(candidate):
            raise ValueError(f"{what} must be callable, got {candidate!r}")


class ComparisonListenerSupport:
    """Registry of comparison, match and difference listeners."""

    def __init__(self) -> None:
        self.comparison_listeners: List[ComparisonListener] = []
        self.match_listeners: List[ComparisonListener] = []
        self.difference_listeners: List[ComparisonListener] = []

    def add_comparison_listener(self, listener: ComparisonListener) -> None:
        self.comparison_listeners.append(listener)

    def add_match_listener(self, listener: ComparisonListener) -> None:
        self.match_listeners.append(listener)

    def add_difference_listener(self, listener: ComparisonListener) -> None:
        self.difference_listeners.append(listener)

    def remove_comparison_listener(self, listener: ComparisonListener) -> None:
        self.comparison_listeners.remove(listener)

    def fire_comparison_performed(
        self, comparison: Comparison, outcome: ComparisonOutcome
    ) -> None:
        """Notify comparison listeners, then match or difference listeners."""
        for listener in self.comparison_listeners:
            listener(comparison, outcome)
        if outcome == ComparisonOutcome.EQUAL:
            for listener in self.match_listeners:
                listener(comparison, outcome)
        else:
            for listener in self.difference_listeners:
                listener(comparison, outcome)


class ComparisonPerformer:
    """Runs single comparisons through filter, evaluator and listeners.

    Failures raised by the user supplied callables are wrapped in
    :class:`ComparisonEngineError` carrying the comparison being processed.
    """

    def __init__(
        self,
        difference_evaluator: DifferenceEvaluator = DifferenceEvaluators.default,
        comparison_filter: ComparisonFilter = ComparisonFilters.default,
        listeners: Optional[ComparisonListenerSupport] = None,
        logger: Optional[CorrelationLogger] = None,
    ) -> None:
        if difference_evaluator is None:
            raise ValueError("difference_evaluator must not be None")
        if comparison_filter is None:
            raise ValueError("comparison_filter must not be None")
        self.difference_evaluator = difference_evaluator
        self.comparison_filter = comparison_filter
        self.listeners = listeners if listeners is not None else ComparisonListenerSupport()
        self.logger = logger or get_logger(__name__, component="comparison_performer")

        self.statistics = ComparisonStatistics()

    def perform(self, comparison: Comparison) -> Optional[ComparisonOutcome]:
        """Evaluate ``comparison`` and notify listeners.

        Returns:
            The final outcome, or None if the filter dropped the comparison
        """
        try:
            if not self.comparison_filter(comparison):
                self.statistics.comparisons_filtered += 1
                return None

            initial = (
                ComparisonOutcome.EQUAL if comparison.values_equal
                else ComparisonOutcome.DIFFERENT
            )
            outcome = self.difference_evaluator(comparison, initial)
            if not isinstance(outcome, ComparisonOutcome):
                raise TypeError(
                    f"difference evaluator returned {outcome!r} instead of a ComparisonOutcome"
                )

            self.statistics.comparisons_performed += 1
            if outcome != ComparisonOutcome.EQUAL:
                self.statistics.differences += 1
            if self.logger.is_enabled_for(logging.DEBUG):
                self.logger.debug(
                    f"{comparison.kind.name}: {outcome.name}",
                    extra={
                        "kind": comparison.kind.name,
                        "outcome": outcome.name,
                        "control_location": comparison.control.location,
                        "test_location": comparison.test.location,
                    },
                )

            self.listeners.fire_comparison_performed(comparison, outcome)
            return outcome
        except ComparisonError:
            raise
        except Exception as e:
            raise ComparisonEngineError(
                f"Failure while evaluating {comparison.kind.name} comparison: {e}",
                comparison=comparison,
            ) from e
