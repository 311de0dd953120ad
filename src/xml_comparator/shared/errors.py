"""Exception hierarchy for XML comparison.

Configuration problems live in :mod:`xml_comparator.shared.config`; everything
raised while acquiring input or walking the two trees derives from
:class:`ComparisonError`.
"""

from typing import Any, Optional


class ComparisonError(Exception):
    """Base exception for failures raised by the comparison machinery."""


class ComparisonEngineError(ComparisonError):
    """A failure while walking the control and test trees.

    Wraps host tree access failures and exceptions raised by user supplied
    evaluators, filters or listeners. The comparison being processed when the
    failure happened is kept for diagnostics.
    """

    def __init__(self, message: str, comparison: Optional[Any] = None) -> None:
        super().__init__(message)
        self.comparison = comparison


class LocationPathError(ComparisonError, RuntimeError):
    """The location cursor was used inconsistently (unbalanced ascend)."""


class SourceError(ComparisonError):
    """Base exception for input acquisition failures."""


class UnsupportedSourceError(SourceError, TypeError):
    """The object handed in cannot be turned into a DOM node."""


class SourceParseError(SourceError):
    """The input could not be parsed into a DOM tree."""

    def __init__(self, message: str, source_description: Optional[str] = None) -> None:
        super().__init__(message)
        self.source_description = source_description
