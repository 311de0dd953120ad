"""Value model of the comparison engine.

A :class:`Comparison` records one check performed between a control and a
test node: what kind of check it was and the value found on either side. The
engine evaluates it into a :class:`ComparisonOutcome`.
"""

import functools
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Any, NamedTuple, Optional


class ComparisonKind(Enum):
    """The closed set of checks the engine performs.

    Each kind carries a human readable description and whether a difference
    of that kind is recoverable by default, i.e. leaves two documents similar.
    """

    XML_VERSION = ("xml version", True)
    XML_STANDALONE = ("xml standalone declaration", True)
    XML_ENCODING = ("xml encoding", True)
    HAS_DOCTYPE_DECLARATION = ("presence of doctype declaration", True)
    DOCTYPE_NAME = ("doctype name", False)
    DOCTYPE_PUBLIC_ID = ("doctype public identifier", False)
    DOCTYPE_SYSTEM_ID = ("doctype system identifier", True)
    SCHEMA_LOCATION = ("xsi:schemaLocation attribute", True)
    NO_NAMESPACE_SCHEMA_LOCATION = ("xsi:noNamespaceSchemaLocation attribute", True)
    NODE_TYPE = ("node type", False)
    NAMESPACE_PREFIX = ("namespace prefix", True)
    NAMESPACE_URI = ("namespace URI", False)
    TEXT_VALUE = ("text value", False)
    CDATA_VALUE = ("CDATA section value", False)
    COMMENT_VALUE = ("comment value", False)
    PROCESSING_INSTRUCTION_TARGET = ("processing instruction target", False)
    PROCESSING_INSTRUCTION_DATA = ("processing instruction data", False)
    ELEMENT_TAG_NAME = ("element tag name", False)
    ATTR_VALUE_EXPLICITLY_SPECIFIED = ("attribute value explicitly specified", True)
    ELEMENT_NUM_ATTRIBUTES = ("number of element attributes", False)
    ATTR_VALUE = ("attribute value", False)
    HAS_CHILD_NODES = ("presence of child nodes to be", False)
    CHILD_NODELIST_LENGTH = ("number of child nodes", False)
    CHILD_NODELIST_SEQUENCE = ("sequence of child nodes", True)
    CHILD_LOOKUP = ("presence of child node", False)
    ATTR_NAME_LOOKUP = ("attribute name", False)
    ATTR_SEQUENCE = ("sequence of attributes", True)

    def __init__(self, description: str, recoverable: bool) -> None:
        self.description = description
        self.recoverable = recoverable


@functools.total_ordering
class ComparisonOutcome(Enum):
    """Result of evaluating a comparison, ordered by severity."""

    EQUAL = auto()      # Values match
    SIMILAR = auto()    # Values differ in a way that keeps documents similar
    DIFFERENT = auto()  # Values differ
    CRITICAL = auto()   # Difference severe enough to abort the walk

    def __lt__(self, other: Any) -> bool:
        if other.__class__ is self.__class__:
            return self.value < other.value
        return NotImplemented


@dataclass(frozen=True)
class Detail:
    """One side of a comparison.

    ``target`` is the DOM node the value was read from, ``location`` the
    rendered path leading to it. Both are ``None`` when the side is absent,
    e.g. the test side of a failed child lookup.
    """

    target: Optional[Any] = None
    location: Optional[str] = None
    value: Any = None


ABSENT = Detail()


@dataclass(frozen=True)
class Comparison:
    """A single check performed between a control and a test node."""

    kind: ComparisonKind
    control: Detail
    test: Detail
    recoverable: Optional[bool] = None

    def __post_init__(self) -> None:
        if not isinstance(self.kind, ComparisonKind):
            raise TypeError("Comparison kind must be a ComparisonKind")
        if self.recoverable is None:
            object.__setattr__(self, "recoverable", self.kind.recoverable)

    @property
    def values_equal(self) -> bool:
        """Raw equality of the two detail values."""
        return self.control.value == self.test.value

    def with_recoverable(self, recoverable: bool) -> "Comparison":
        """Return a copy of this comparison carrying an overridden recoverable flag."""
        return replace(self, recoverable=recoverable)

    def __str__(self) -> str:
        from xml_comparator.diff.formatting import describe_comparison

        return describe_comparison(self)


class Pair(NamedTuple):
    """Control and test node the node matcher decided to compare."""

    control: Any
    test: Any
