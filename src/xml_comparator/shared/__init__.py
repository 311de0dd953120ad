"""Shared utilities for XML comparison.

This module provides the exception hierarchy, structured logging, run
statistics and configuration objects used across all layers.
"""

from .errors import (
    ComparisonEngineError,
    ComparisonError,
    LocationPathError,
    SourceError,
    SourceParseError,
    UnsupportedSourceError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import ComparisonStatistics
from .config import (
    ComparisonConfig,
    ConfigError,
    ConfigValidationError,
)

__all__ = [
    "ComparisonEngineError",
    "ComparisonError",
    "LocationPathError",
    "SourceError",
    "SourceParseError",
    "UnsupportedSourceError",
    "CorrelationLogger",
    "get_logger",
    "ComparisonStatistics",
    "ComparisonConfig",
    "ConfigError",
    "ConfigValidationError",
]
