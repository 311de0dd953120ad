"""XML Comparator.

Decides whether two XML documents are identical, similar or different, and
reports every discrepancy with its kind, its location in both documents and
the two conflicting values.

Progressive API Disclosure:
- Level 1: Simple functions - compare_xml(), is_identical(), is_similar()
- Level 2: Configured comparator - XMLComparator class with ComparisonConfig
- Level 3: Engine - DOMDifferenceEngine with listeners, evaluators and filters
"""

__version__ = "0.1.0"
__author__ = "XML Comparator Team"

# Progressive API disclosure - Level 1: Simple functions
# Progressive API disclosure - Level 2: Configured comparator
from .api import XMLComparator, compare_xml, is_identical, is_similar

# Configuration classes for advanced usage
from .shared.config import ComparisonConfig

# Level 3: Engine and pluggable behavior
from .diff import (
    CollectAllDifferences,
    ComparisonFilters,
    DifferenceEvaluators,
    DOMDifferenceEngine,
    ElementSelectors,
    StopAtFirstDifference,
)

# Core result objects for all API levels
from .diff import Comparison, ComparisonKind, ComparisonOutcome, Difference, DiffResult

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple comparison functions (progressive disclosure entry point)
    "compare_xml",
    "is_identical",
    "is_similar",

    # Level 2: Configured comparator
    "XMLComparator",
    "ComparisonConfig",

    # Level 3: Engine and pluggable behavior
    "DOMDifferenceEngine",
    "StopAtFirstDifference",
    "CollectAllDifferences",
    "DifferenceEvaluators",
    "ComparisonFilters",
    "ElementSelectors",

    # Result objects and data structures
    "Comparison",
    "ComparisonKind",
    "ComparisonOutcome",
    "Difference",
    "DiffResult",
]
