"""Comparison engine for DOM trees.

This package provides the value model, location tracking, node matching,
per-kind comparison strategies, the evaluation pipeline, the recursive
comparator and verdict aggregation.
"""

from .model import (
    Comparison,
    ComparisonKind,
    ComparisonOutcome,
    Detail,
    Pair,
)
from .nodes import NodeKind, QualifiedName
from .location import LocationPath
from .matching import (
    CompareUnmatchedNodeMatcher,
    DefaultNodeMatcher,
    ElementSelectors,
    NodeTypeMatchers,
)
from .evaluation import (
    ComparisonFilters,
    ComparisonListenerSupport,
    ComparisonPerformer,
    DifferenceEvaluators,
)
from .strategies import ElementComparisonStrategy, NodeComparisonStrategy
from .engine import DOMDifferenceEngine, TraversalStatus
from .aggregation import (
    CollectAllDifferences,
    Difference,
    DiffResult,
    StopAtFirstDifference,
)
from .formatting import describe_comparison, describe_node

__all__ = [
    "Comparison",
    "ComparisonKind",
    "ComparisonOutcome",
    "Detail",
    "Pair",
    "NodeKind",
    "QualifiedName",
    "LocationPath",
    "CompareUnmatchedNodeMatcher",
    "DefaultNodeMatcher",
    "ElementSelectors",
    "NodeTypeMatchers",
    "ComparisonFilters",
    "ComparisonListenerSupport",
    "ComparisonPerformer",
    "DifferenceEvaluators",
    "ElementComparisonStrategy",
    "NodeComparisonStrategy",
    "DOMDifferenceEngine",
    "TraversalStatus",
    "CollectAllDifferences",
    "Difference",
    "DiffResult",
    "StopAtFirstDifference",
    "describe_comparison",
    "describe_node",
]
