"""Tests for verdict aggregation."""

from xml.dom import minidom

from xml_comparator.diff.aggregation import (
    CollectAllDifferences,
    DiffResult,
    Difference,
    StopAtFirstDifference,
)
from xml_comparator.diff.evaluation import ComparisonListenerSupport, DifferenceEvaluators
from xml_comparator.diff.model import Comparison, ComparisonKind, ComparisonOutcome, Detail
from xml_comparator.shared.config import ComparisonConfig


def _run(aggregator, control_xml, test_xml, listeners=None):
    return aggregator.run(
        minidom.parseString(control_xml), minidom.parseString(test_xml), listeners
    )


class TestStopAtFirstDifference:
    """Test suite for StopAtFirstDifference."""

    def test_identical(self):
        """Test the verdict for equal documents."""
        result = _run(StopAtFirstDifference(), "<a><b/></a>", "<a><b/></a>")

        assert result.identical is True
        assert result.similar is True
        assert result.differences == []
        assert result.interrupted is False
        assert result.halted_by is None

    def test_similar_differences_do_not_stop(self):
        """Test that recoverable differences keep the walk going."""
        result = _run(StopAtFirstDifference(), "<a><b/><c/></a>", "<a><c/><b/></a>")

        assert result.identical is False
        assert result.similar is True
        assert result.interrupted is False
        assert [d.outcome for d in result.differences] == [ComparisonOutcome.SIMILAR] * 2

    def test_stops_at_first_fatal_difference(self):
        """Test escalation of the first non-recoverable difference."""
        result = _run(
            StopAtFirstDifference(),
            "<a><b>1</b><c>2</c></a>",
            "<a><b>x</b><c>y</c></a>",
        )

        assert result.identical is False
        assert result.similar is False
        assert result.interrupted is True
        assert len(result.differences) == 1
        assert result.halted_by is result.differences[0]
        assert result.halted_by.kind is ComparisonKind.TEXT_VALUE
        assert result.halted_by.outcome is ComparisonOutcome.CRITICAL

    def test_stopping_difference_is_reported_last(self):
        """Test that similar differences before the stop are kept in order."""
        result = _run(
            StopAtFirstDifference(),
            "<r><b/><c>1</c></r>",
            "<r><c>2</c><b/></r>",
        )

        assert [d.kind for d in result.differences] == [
            ComparisonKind.CHILD_NODELIST_SEQUENCE,
            ComparisonKind.CHILD_NODELIST_SEQUENCE,
            ComparisonKind.TEXT_VALUE,
        ]
        assert result.differences[-1] is result.halted_by

    def test_listeners_see_escalated_outcome(self):
        """Test that external listeners observe the CRITICAL outcome."""
        seen = []
        listeners = ComparisonListenerSupport()
        listeners.add_difference_listener(lambda c, o: seen.append(o))

        _run(StopAtFirstDifference(), "<a>1</a>", "<a>2</a>", listeners)

        assert seen == [ComparisonOutcome.CRITICAL]

    def test_configured_evaluator_runs_first(self):
        """Test that a downgrading evaluator keeps documents similar."""
        config = ComparisonConfig(
            difference_evaluator=DifferenceEvaluators.downgrade_differences_to_similar
        )

        result = _run(StopAtFirstDifference(config), "<a>1</a>", "<a>2</a>")

        assert result.similar is True
        assert result.identical is False
        assert result.interrupted is False


class TestCollectAllDifferences:
    """Test suite for CollectAllDifferences."""

    def test_collects_everything(self):
        """Test that the walk continues past fatal differences."""
        result = _run(
            CollectAllDifferences(),
            "<a><b>1</b><c>2</c></a>",
            "<a><b>x</b><c>y</c></a>",
        )

        assert result.interrupted is False
        assert result.similar is False
        assert [d.kind for d in result.differences] == [
            ComparisonKind.TEXT_VALUE,
            ComparisonKind.TEXT_VALUE,
        ]
        assert result.halted_by is None

    def test_critical_outcomes_do_not_stop_the_walk(self):
        """Test that CRITICAL outcomes are recorded without interrupting."""
        config = ComparisonConfig(
            difference_evaluator=DifferenceEvaluators.upgrade_differences_to_critical
        )

        result = _run(
            CollectAllDifferences(config),
            "<a><b>1</b><c>2</c></a>",
            "<a><b>x</b><c>y</c></a>",
        )

        assert result.interrupted is False
        assert result.similar is False
        assert [d.outcome for d in result.differences] == [ComparisonOutcome.CRITICAL] * 2
        assert all(d.comparison.recoverable is False for d in result.differences)

    def test_listeners_see_continuing_outcome(self):
        """Test that listeners get DIFFERENT while the result keeps CRITICAL."""
        config = ComparisonConfig(
            difference_evaluator=DifferenceEvaluators.upgrade_differences_to_critical
        )
        seen = []
        listeners = ComparisonListenerSupport()
        listeners.add_difference_listener(lambda c, o: seen.append(o))

        result = _run(CollectAllDifferences(config), "<a>1</a>", "<a>2</a>", listeners)

        assert seen == [ComparisonOutcome.DIFFERENT]
        assert [d.outcome for d in result.differences] == [ComparisonOutcome.CRITICAL]

    def test_similar_differences_marked_recoverable(self):
        """Test that SIMILAR differences carry a recoverable comparison."""
        config = ComparisonConfig(
            difference_evaluator=DifferenceEvaluators.downgrade_differences_to_similar
        )

        result = _run(CollectAllDifferences(config), "<a>1</a>", "<a>2</a>")

        [difference] = result.differences
        assert difference.outcome is ComparisonOutcome.SIMILAR
        assert difference.comparison.recoverable is True
        assert difference.comparison.kind.recoverable is False
        assert result.similar is True

    def test_unevaluated_difference_on_recoverable_kind(self):
        """Test the verdict of a DIFFERENT outcome on a recoverable comparison."""
        config = ComparisonConfig(difference_evaluator=DifferenceEvaluators.accept_all)

        result = _run(CollectAllDifferences(config), "<a><b/><c/></a>", "<a><c/><b/></a>")

        assert [d.outcome for d in result.differences] == [ComparisonOutcome.DIFFERENT] * 2
        assert result.identical is False
        assert result.similar is True

    def test_statistics_attached(self):
        """Test that the run statistics are part of the result."""
        result = _run(CollectAllDifferences(), "<a>1</a>", "<a>2</a>")

        assert result.statistics.comparisons_performed > 0
        assert result.statistics.differences == 1

    def test_aggregator_is_reusable(self):
        """Test that every run starts with a fresh result."""
        aggregator = CollectAllDifferences()

        first = _run(aggregator, "<a>1</a>", "<a>2</a>")
        second = _run(aggregator, "<a/>", "<a/>")

        assert len(first.differences) == 1
        assert second.differences == []
        assert second.identical is True


class TestDiffResult:
    """Test suite for DiffResult and Difference."""

    def test_defaults(self):
        """Test an empty result."""
        result = DiffResult()

        assert result.identical and result.similar
        assert not result.has_differences
        assert result.message() == "[identical]"
        assert str(result) == "[identical]"

    def test_difference_kind(self):
        """Test the kind shortcut of a difference."""
        comparison = Comparison(ComparisonKind.TEXT_VALUE, Detail(), Detail())
        difference = Difference(comparison, ComparisonOutcome.DIFFERENT)

        assert difference.kind is ComparisonKind.TEXT_VALUE

    def test_message_lists_differences(self):
        """Test one line per difference."""
        result = _run(CollectAllDifferences(), "<a><b/><c>1</c></a>", "<a><c>2</c><b/></a>")
        lines = result.message().splitlines()

        assert result.has_differences
        assert len(lines) == 3
        assert lines[0].startswith("[not identical] Expected sequence of child nodes '0' but was '1'")
        assert lines[2].startswith("[different] Expected text value '1' but was '2'")
