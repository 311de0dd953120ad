"""Comparison API with progressive disclosure.

Module-level functions answer the common questions in one call; the
:class:`XMLComparator` class holds a configuration and listeners for reuse
across many comparisons.
"""

import time
from typing import Any, Dict, Optional

from xml_comparator.diff.aggregation import (
    CollectAllDifferences,
    DiffResult,
    StopAtFirstDifference,
)
from xml_comparator.diff.evaluation import ComparisonListener, ComparisonListenerSupport
from xml_comparator.input import SourceType, prepare, to_node
from xml_comparator.shared import ComparisonConfig, ConfigValidationError, get_logger

MS_PER_SECOND = 1000  # Milliseconds per second conversion


def compare_xml(
    control: SourceType,
    test: SourceType,
    config: Optional[ComparisonConfig] = None,
    correlation_id: Optional[str] = None,
) -> DiffResult:
    """Compare two XML documents and report every difference.

    Args:
        control: Expected XML (text, path, file, DOM node or element tree)
        test: Actual XML
        config: Optional comparison configuration
        correlation_id: Optional correlation ID for request tracking

    Returns:
        DiffResult with the verdict and all differences found

    Examples:
        >>> result = compare_xml("<a><b/><c/></a>", "<a><c/><b/></a>")
        >>> result.similar, result.identical
        (True, False)
        >>> print(compare_xml("<a/>", "<a/>").message())
        [identical]
    """
    return XMLComparator(config, correlation_id).compare(control, test)


def is_identical(
    control: SourceType,
    test: SourceType,
    config: Optional[ComparisonConfig] = None,
    correlation_id: Optional[str] = None,
) -> bool:
    """Check whether two documents are identical, stopping at the first fatal difference."""
    return XMLComparator(config, correlation_id).compare(
        control, test, stop_at_first=True
    ).identical


def is_similar(
    control: SourceType,
    test: SourceType,
    config: Optional[ComparisonConfig] = None,
    correlation_id: Optional[str] = None,
) -> bool:
    """Check whether two documents are similar, stopping at the first fatal difference.

    Examples:
        >>> is_similar('<a x="1" y="2"/>', '<a y="2" x="1"/>')
        True
    """
    return XMLComparator(config, correlation_id).compare(
        control, test, stop_at_first=True
    ).similar


class XMLComparator:
    """Configured, reusable XML comparator.

    Attributes:
        config: Current comparison configuration
        correlation_id: Correlation ID for request tracking

    Examples:
        Collect all differences:
        >>> comparator = XMLComparator()
        >>> result = comparator.compare("<a><b/></a>", "<a/>")
        >>> [d.kind.name for d in result.differences]
        ['HAS_CHILD_NODES', 'CHILD_LOOKUP']

        Observe comparisons while they happen:
        >>> seen = []
        >>> comparator.add_difference_listener(lambda c, o: seen.append(c.kind))
        >>> comparator.compare("<a>x</a>", "<a>y</a>").similar
        False
    """

    def __init__(
        self,
        config: Optional[ComparisonConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize comparator.

        Args:
            config: Comparison configuration (defaults to ComparisonConfig.default())
            correlation_id: Optional correlation ID, overrides the configured one
        """
        config = config or ComparisonConfig.default()
        if correlation_id is not None and correlation_id != config.correlation_id:
            config = config.override(correlation_id=correlation_id)
        self.config = config
        self.correlation_id = config.correlation_id

        self.logger = get_logger(__name__, self.correlation_id, "xml_comparator")
        self._listeners = ComparisonListenerSupport()

        self._comparison_count = 0
        self._similar_count = 0
        self._identical_count = 0
        self._total_processing_time = 0.0

    def add_comparison_listener(self, listener: ComparisonListener) -> None:
        """Register a listener notified of every evaluated comparison."""
        self._listeners.add_comparison_listener(self._check_listener(listener))

    def add_match_listener(self, listener: ComparisonListener) -> None:
        """Register a listener notified of comparisons that came out EQUAL."""
        self._listeners.add_match_listener(self._check_listener(listener))

    def add_difference_listener(self, listener: ComparisonListener) -> None:
        """Register a listener notified of comparisons that did not come out EQUAL."""
        self._listeners.add_difference_listener(self._check_listener(listener))

    @staticmethod
    def _check_listener(listener: Any) -> ComparisonListener:
        if listener is None or not callable(listener):
            raise ConfigValidationError(
                f"listener must be callable, got {listener!r}",
                field_name="listener",
                suggestions=["Pass a function taking (comparison, outcome)"],
            )
        return listener

    def compare(
        self,
        control: SourceType,
        test: SourceType,
        stop_at_first: bool = False,
    ) -> DiffResult:
        """Compare ``control`` against ``test``.

        Args:
            control: Expected XML
            test: Actual XML
            stop_at_first: Stop at the first difference that makes the
                documents dissimilar instead of collecting all of them

        Returns:
            DiffResult with the verdict and the differences found

        Raises:
            SourceError: If either input cannot be turned into a DOM tree
            ComparisonEngineError: If the walk failed
        """
        start_time = time.time()
        self.logger.info(
            "Starting XML comparison",
            extra={
                "control_type": type(control).__name__,
                "test_type": type(test).__name__,
                "stop_at_first": stop_at_first,
                "comparison_count": self._comparison_count + 1,
            },
        )

        control_node = self._prepare(control)
        test_node = self._prepare(test)

        if stop_at_first:
            aggregator = StopAtFirstDifference(self.config)
        else:
            aggregator = CollectAllDifferences(self.config)
        result = aggregator.run(control_node, test_node, self._listeners)

        processing_time = (time.time() - start_time) * MS_PER_SECOND
        self._comparison_count += 1
        self._total_processing_time += processing_time
        if result.similar:
            self._similar_count += 1
        if result.identical:
            self._identical_count += 1

        self.logger.info(
            "XML comparison completed",
            extra={
                "identical": result.identical,
                "similar": result.similar,
                "differences": len(result.differences),
                "processing_time_ms": processing_time,
            },
        )
        return result

    def is_identical(self, control: SourceType, test: SourceType) -> bool:
        return self.compare(control, test, stop_at_first=True).identical

    def is_similar(self, control: SourceType, test: SourceType) -> bool:
        return self.compare(control, test, stop_at_first=True).similar

    def _prepare(self, source: SourceType) -> Any:
        node = to_node(source, self.correlation_id)
        return prepare(
            node,
            ignore_comments=self.config.ignore_comments,
            ignore_whitespace=self.config.ignore_whitespace,
            normalize=self.config.normalize_whitespace,
            correlation_id=self.correlation_id,
        )

    def reconfigure(self, config: ComparisonConfig) -> None:
        """Replace the configuration; registered listeners are kept."""
        if config is None:
            raise ConfigValidationError("config must not be None", field_name="config")
        self.config = config
        self.correlation_id = config.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "xml_comparator")
        self.logger.info("Comparator reconfigured", extra={"config": config.to_dict()})

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get comparator usage statistics.

        Returns:
            Dictionary with counts and timings of the comparisons performed
        """
        return {
            "total_comparisons": self._comparison_count,
            "similar_comparisons": self._similar_count,
            "identical_comparisons": self._identical_count,
            "total_processing_time_ms": self._total_processing_time,
            "average_processing_time_ms": (
                self._total_processing_time / self._comparison_count
                if self._comparison_count > 0 else 0.0
            ),
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        """Reset comparator usage statistics."""
        self._comparison_count = 0
        self._similar_count = 0
        self._identical_count = 0
        self._total_processing_time = 0.0

        self.logger.info("Comparator statistics reset")
