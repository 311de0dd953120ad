"""Configuration for XML comparison.

:class:`ComparisonConfig` is an immutable description of how two documents
are compared: which nodes are paired up, how outcomes are classified, which
comparisons are suppressed and how the input is preprocessed. Invalid values
are rejected when the configuration is created.
"""

from dataclasses import dataclass, field, fields, replace
from typing import Any, Callable, Dict, List, Mapping, Optional

from xml_comparator.diff.evaluation import ComparisonFilters, DifferenceEvaluators
from xml_comparator.diff.matching import ElementSelectors, NodeTypeMatchers


class ConfigError(ValueError):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


_FLAG_FIELDS = (
    "ignore_attribute_order",
    "compare_unmatched",
    "ignore_comments",
    "ignore_whitespace",
    "normalize_whitespace",
    "ignore_text_cdata_difference",
)

_CALLABLE_FIELDS = {
    "element_selector": "ElementSelectors.by_name",
    "node_type_matcher": "NodeTypeMatchers.default",
    "difference_evaluator": "DifferenceEvaluators.default",
    "comparison_filter": "ComparisonFilters.default",
}


@dataclass(frozen=True)
class ComparisonConfig:
    """Comprehensive configuration of a comparison run.

    Thread-safe due to frozen dataclass implementation.

    Example:
        >>> config = ComparisonConfig(ignore_attribute_order=False)
        >>> config.override(ignore_comments=True).ignore_comments
        True
    """

    # Matching
    ignore_attribute_order: bool = True
    element_selector: Callable[[Any, Any], bool] = ElementSelectors.by_name
    node_type_matcher: Callable[[int, int], bool] = NodeTypeMatchers.default
    node_matcher: Optional[Any] = None
    compare_unmatched: bool = False

    # Evaluation
    difference_evaluator: Callable[..., Any] = DifferenceEvaluators.default
    comparison_filter: Callable[[Any], bool] = ComparisonFilters.default
    ignore_text_cdata_difference: bool = False

    # Input preprocessing
    ignore_comments: bool = False
    ignore_whitespace: bool = False
    normalize_whitespace: bool = False

    # Reporting
    namespace_context: Mapping[str, str] = field(default_factory=dict)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the comparison configuration."""
        for name in _FLAG_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ConfigValidationError(
                    f"{name} must be a bool, got {type(value).__name__}",
                    field_name=name,
                    suggestions=[f"Pass True or False for {name}"],
                )

        for name, default in _CALLABLE_FIELDS.items():
            value = getattr(self, name)
            if value is None or not callable(value):
                raise ConfigValidationError(
                    f"{name} must be callable, got {value!r}",
                    field_name=name,
                    suggestions=[f"Use {default} for the default behavior"],
                )

        if self.node_matcher is not None and not callable(
            getattr(self.node_matcher, "match", None)
        ):
            raise ConfigValidationError(
                "node_matcher must provide a match(control_nodes, test_nodes) method",
                field_name="node_matcher",
                suggestions=[
                    "Use DefaultNodeMatcher(element_selector, node_type_matcher)",
                    "Leave node_matcher as None to build the default matcher",
                ],
            )

        if not isinstance(self.namespace_context, Mapping) or not all(
            isinstance(uri, str) and isinstance(prefix, str)
            for uri, prefix in self.namespace_context.items()
        ):
            raise ConfigValidationError(
                "namespace_context must map namespace URIs to prefixes (str -> str)",
                field_name="namespace_context",
                suggestions=['{"http://example.com/ns": "ex"}'],
            )

        if self.correlation_id is not None and not isinstance(self.correlation_id, str):
            raise ConfigValidationError(
                "correlation_id must be a string or None",
                field_name="correlation_id",
            )

    @property
    def effective_comparison_filter(self) -> Callable[[Any], bool]:
        """The configured filter, extended by the text/CDATA switch."""
        if self.ignore_text_cdata_difference:
            return ComparisonFilters.all_of(
                self.comparison_filter, ComparisonFilters.text_cdata_node_type
            )
        return self.comparison_filter

    def override(self, **kwargs: Any) -> "ComparisonConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Keyword arguments for configuration fields to override

        Returns:
            New ComparisonConfig instance with overrides applied

        Raises:
            ConfigValidationError: If a keyword does not name a field or a
                value is invalid
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(kwargs) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration fields: {', '.join(unknown)}",
                field_name=unknown[0],
                suggestions=sorted(known),
            )
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the plain (non-callable) settings to a dictionary.

        Callables are represented by their qualified names.
        """
        result: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Mapping):
                result[f.name] = dict(value)
            elif value is not None and callable(value):
                result[f.name] = getattr(value, "__qualname__", repr(value))
            elif value is not None and f.name == "node_matcher":
                result[f.name] = type(value).__name__
            else:
                result[f.name] = value
        return result

    @classmethod
    def default(cls) -> "ComparisonConfig":
        """Attribute order ignored, XML declaration differences filtered."""
        return cls()

    @classmethod
    def strict(cls) -> "ComparisonConfig":
        """Create configuration where every detail counts.

        Attribute order is significant and no comparison is filtered.
        """
        return cls(
            ignore_attribute_order=False,
            comparison_filter=ComparisonFilters.accept_all,
        )

    @classmethod
    def lenient(cls) -> "ComparisonConfig":
        """Create configuration ignoring comments, whitespace and text/CDATA differences."""
        return cls(
            ignore_comments=True,
            ignore_whitespace=True,
            ignore_text_cdata_difference=True,
        )
