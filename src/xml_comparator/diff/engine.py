"""Recursive comparator walking a control and a test tree in lockstep.

For every pair of nodes the engine runs the node comparison strategy, then
pairs up the children with the node matcher, compares the position of every
matched child, recurses into the matched pairs, and finally reports children
that found no partner. A CRITICAL outcome, or a call to :meth:`stop`, ends
the walk; the status is returned up the call chain.
"""

import time
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from xml_comparator.diff.evaluation import (
    ComparisonListener,
    ComparisonListenerSupport,
    ComparisonPerformer,
)
from xml_comparator.diff.location import LocationPath
from xml_comparator.diff.matching import CompareUnmatchedNodeMatcher, DefaultNodeMatcher
from xml_comparator.diff.model import ABSENT, Comparison, ComparisonKind, ComparisonOutcome, Detail
from xml_comparator.diff.nodes import filtered_children, is_attribute, is_document
from xml_comparator.diff.strategies import NodeComparisonStrategy
from xml_comparator.shared.errors import ComparisonEngineError, LocationPathError
from xml_comparator.shared.logging import get_logger
from xml_comparator.shared.result import ComparisonStatistics

if TYPE_CHECKING:
    from xml_comparator.shared.config import ComparisonConfig

MS_PER_SECOND = 1000


class TraversalStatus(Enum):
    """How a (sub)tree walk ended."""

    COMPLETED = auto()     # Walk finished normally
    INTERRUPTED = auto()   # CRITICAL outcome or external stop()


class DOMDifferenceEngine:
    """Compares two DOM trees and reports every comparison to its listeners.

    The engine holds no state across :meth:`compare` calls apart from its
    configuration and registered listeners. The trees are only read.

    Example:
        >>> engine = DOMDifferenceEngine()
        >>> engine.add_difference_listener(lambda c, o: print(c.kind.name))
        >>> engine.compare(control_document, test_document)
        <TraversalStatus.COMPLETED: 1>
    """

    def __init__(self, config: Optional["ComparisonConfig"] = None) -> None:
        if config is None:
            from xml_comparator.shared.config import ComparisonConfig

            config = ComparisonConfig.default()
        self.config = config
        self.listeners = ComparisonListenerSupport()
        self.strategy = NodeComparisonStrategy(config.ignore_attribute_order)
        self.node_matcher = self._build_node_matcher(config)
        self.logger = get_logger(__name__, config.correlation_id, "difference_engine")
        self.statistics = ComparisonStatistics()
        self._stopped = False

    @staticmethod
    def _build_node_matcher(config: "ComparisonConfig") -> Any:
        matcher = config.node_matcher
        if matcher is None:
            matcher = DefaultNodeMatcher(config.element_selector, config.node_type_matcher)
        if config.compare_unmatched:
            matcher = CompareUnmatchedNodeMatcher(matcher)
        return matcher

    def add_comparison_listener(self, listener: ComparisonListener) -> None:
        self.listeners.add_comparison_listener(_checked_listener(listener))

    def add_match_listener(self, listener: ComparisonListener) -> None:
        self.listeners.add_match_listener(_checked_listener(listener))

    def add_difference_listener(self, listener: ComparisonListener) -> None:
        self.listeners.add_difference_listener(_checked_listener(listener))

    def stop(self) -> None:
        """Ask the running walk to unwind after the current comparison."""
        self._stopped = True

    @property
    def stopped(self) -> bool:
        return self._stopped

    def compare(self, control: Any, test: Any) -> TraversalStatus:
        """Compare the ``control`` tree against the ``test`` tree.

        Args:
            control: Expected DOM document or node
            test: Actual DOM document or node

        Returns:
            TraversalStatus.INTERRUPTED if the walk ended early

        Raises:
            ValueError: If either side is None
            ComparisonEngineError: If the host tree or a user callback failed
            LocationPathError: If the location bookkeeping got out of balance
        """
        if control is None:
            raise ValueError("control must not be None")
        if test is None:
            raise ValueError("test must not be None")

        self._stopped = False
        start_time = time.time()
        performer = ComparisonPerformer(
            self.config.difference_evaluator,
            self.config.effective_comparison_filter,
            self.listeners,
            self.logger,
        )
        self.statistics = performer.statistics

        self.logger.info(
            "Starting comparison",
            extra={
                "control_type": type(control).__name__,
                "test_type": type(test).__name__,
            },
        )

        try:
            status = self._compare_nodes(
                performer,
                control, self._root_path(control),
                test, self._root_path(test),
            )
        except (ComparisonEngineError, LocationPathError):
            self.logger.exception("Comparison aborted")
            raise
        except Exception as e:
            self.logger.exception(
                "Unexpected failure while walking the trees",
                extra={"error_type": type(e).__name__},
            )
            raise ComparisonEngineError(f"Caught exception during comparison: {e}") from e
        finally:
            performer.statistics.processing_time_ms = (
                (time.time() - start_time) * MS_PER_SECOND
            )

        performer.statistics.interrupted = status is TraversalStatus.INTERRUPTED
        self.logger.info(
            "Comparison finished",
            extra={
                "comparisons_performed": performer.statistics.comparisons_performed,
                "comparisons_filtered": performer.statistics.comparisons_filtered,
                "differences": performer.statistics.differences,
                "interrupted": performer.statistics.interrupted,
                "processing_time_ms": performer.statistics.processing_time_ms,
            },
        )
        return status

    def _root_path(self, node: Any) -> LocationPath:
        path = LocationPath(self.config.namespace_context)
        if not is_document(node):
            path.set_children([node])
            path.descend_to_child(0)
        return path

    def _evaluate(self, performer: ComparisonPerformer, comparison: Comparison) -> TraversalStatus:
        outcome = performer.perform(comparison)
        if outcome == ComparisonOutcome.CRITICAL:
            self.logger.debug(
                "Walk interrupted by critical outcome",
                extra={
                    "kind": comparison.kind.name,
                    "control_location": comparison.control.location,
                },
            )
            return TraversalStatus.INTERRUPTED
        if self._stopped:
            self.logger.debug("Walk interrupted by stop request")
            return TraversalStatus.INTERRUPTED
        return TraversalStatus.COMPLETED

    def _compare_nodes(
        self,
        performer: ComparisonPerformer,
        control: Any, control_path: LocationPath,
        test: Any, test_path: LocationPath,
    ) -> TraversalStatus:
        for comparison in self.strategy.compare(control, control_path, test, test_path):
            if self._evaluate(performer, comparison) is TraversalStatus.INTERRUPTED:
                return TraversalStatus.INTERRUPTED

        if is_attribute(control):
            return TraversalStatus.COMPLETED
        return self._compare_children(performer, control, control_path, test, test_path)

    def _compare_children(
        self,
        performer: ComparisonPerformer,
        control: Any, control_path: LocationPath,
        test: Any, test_path: LocationPath,
    ) -> TraversalStatus:
        control_children = filtered_children(control)
        test_children = filtered_children(test)
        control_path.set_children(control_children)
        test_path.set_children(test_children)

        pairs = self.node_matcher.match(control_children, test_children)
        control_indexes = _index_by_identity(control_children)
        test_indexes = _index_by_identity(test_children)
        indexed_pairs = []
        for pair in pairs:
            try:
                indexed_pairs.append(
                    (pair, control_indexes[id(pair.control)], test_indexes[id(pair.test)])
                )
            except KeyError as e:
                raise ComparisonEngineError(
                    "Node matcher returned a node that is not a child of the compared nodes"
                ) from e

        for pair, control_index, test_index in indexed_pairs:
            with control_path.at_child(control_index), test_path.at_child(test_index):
                comparison = Comparison(
                    ComparisonKind.CHILD_NODELIST_SEQUENCE,
                    Detail(pair.control, control_path.render(), control_index),
                    Detail(pair.test, test_path.render(), test_index),
                )
            if self._evaluate(performer, comparison) is TraversalStatus.INTERRUPTED:
                return TraversalStatus.INTERRUPTED

        for pair, control_index, test_index in indexed_pairs:
            with control_path.at_child(control_index), test_path.at_child(test_index):
                status = self._compare_nodes(
                    performer, pair.control, control_path, pair.test, test_path
                )
            if status is TraversalStatus.INTERRUPTED or self._stopped:
                return TraversalStatus.INTERRUPTED

        matched_control = {id(pair.control) for pair, _, _ in indexed_pairs}
        matched_test = {id(pair.test) for pair, _, _ in indexed_pairs}

        for index, child in enumerate(control_children):
            if id(child) in matched_control:
                continue
            with control_path.at_child(index):
                comparison = Comparison(
                    ComparisonKind.CHILD_LOOKUP,
                    Detail(child, control_path.render(), child.nodeName),
                    ABSENT,
                )
            if self._evaluate(performer, comparison) is TraversalStatus.INTERRUPTED:
                return TraversalStatus.INTERRUPTED

        for index, child in enumerate(test_children):
            if id(child) in matched_test:
                continue
            with test_path.at_child(index):
                comparison = Comparison(
                    ComparisonKind.CHILD_LOOKUP,
                    ABSENT,
                    Detail(child, test_path.render(), child.nodeName),
                )
            if self._evaluate(performer, comparison) is TraversalStatus.INTERRUPTED:
                return TraversalStatus.INTERRUPTED

        return TraversalStatus.COMPLETED


def _index_by_identity(nodes: List[Any]) -> Dict[int, int]:
    return {id(node): index for index, node in enumerate(nodes)}


def _checked_listener(listener: ComparisonListener) -> ComparisonListener:
    if listener is None:
        raise ValueError("listener must not be None")
    if not callable(listener):
        raise ValueError(f"listener must be callable, got {listener!r}")
    return listener
