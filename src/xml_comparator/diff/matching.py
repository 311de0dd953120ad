"""Pairing of control and test child nodes before recursion.

A node matcher receives the (doctype-filtered) children of a control node and
of its test counterpart and decides which of them are compared with each
other. Element selectors and node type matchers are plain callables taking the
control and the test node (or node type) and answering whether the two may be
compared.
"""

from typing import Any, Callable, List, Sequence, Union

from xml.dom import Node

from xml_comparator.diff.model import Pair
from xml_comparator.diff.nodes import (
    QualifiedName,
    attribute_list,
    is_element,
    is_namespace_declaration,
    merged_text,
)

ElementSelector = Callable[[Any, Any], bool]
NodeTypeMatcher = Callable[[int, int], bool]

_TEXT_TYPES = (Node.TEXT_NODE, Node.CDATA_SECTION_NODE)


def _regular_attribute_values(element: Any) -> dict:
    return {
        QualifiedName.of(attr): attr.value
        for attr in attribute_list(element)
        if not is_namespace_declaration(attr)
    }


class ElementSelectors:
    """Common element selectors."""

    @staticmethod
    def by_name(control: Any, test: Any) -> bool:
        """Elements with the same qualified name can be compared."""
        return QualifiedName.of(control) == QualifiedName.of(test)

    @staticmethod
    def by_name_and_text(control: Any, test: Any) -> bool:
        """Same qualified name and same merged direct text content."""
        return (
            ElementSelectors.by_name(control, test)
            and merged_text(control) == merged_text(test)
        )

    @staticmethod
    def by_name_and_all_attributes(control: Any, test: Any) -> bool:
        """Same qualified name and the same set of attributes with equal values.

        Namespace declarations are not taken into account.
        """
        return (
            ElementSelectors.by_name(control, test)
            and _regular_attribute_values(control) == _regular_attribute_values(test)
        )

    @staticmethod
    def by_name_and_attributes(*names: Union[str, QualifiedName]) -> ElementSelector:
        """Same qualified name and equal values for the given attributes.

        Plain strings name attributes without a namespace. An attribute missing
        on both sides counts as equal.
        """
        wanted = [
            name if isinstance(name, QualifiedName) else QualifiedName(None, name)
            for name in names
        ]

        def selector(control: Any, test: Any) -> bool:
            if not ElementSelectors.by_name(control, test):
                return False
            control_values = _regular_attribute_values(control)
            test_values = _regular_attribute_values(test)
            return all(
                control_values.get(name) == test_values.get(name) for name in wanted
            )

        return selector

    @staticmethod
    def first_matching(*selectors: ElementSelector) -> ElementSelector:
        """Elements can be compared when any of ``selectors`` says so."""
        if any(selector is None for selector in selectors):
            raise ValueError("selectors must not contain None")

        def selector(control: Any, test: Any) -> bool:
            return any(candidate(control, test) for candidate in selectors)

        return selector


class NodeTypeMatchers:
    """Node type matchers for non-element nodes."""

    @staticmethod
    def default(control_type: int, test_type: int) -> bool:
        """Equal node types; text and CDATA nodes are interchangeable."""
        return control_type == test_type or (
            control_type in _TEXT_TYPES and test_type in _TEXT_TYPES
        )

    @staticmethod
    def exact(control_type: int, test_type: int) -> bool:
        return control_type == test_type


class DefaultNodeMatcher:
    """Greedy, order-stable matcher.

    For every control node the unmatched test nodes are searched from just
    after the most recent match to the end, then from the start up to that
    match. The first candidate accepted by the element selector (two
    elements) or the node type matcher (anything else) is taken.
    """

    def __init__(
        self,
        element_selector: ElementSelector = ElementSelectors.by_name,
        node_type_matcher: NodeTypeMatcher = NodeTypeMatchers.default,
    ) -> None:
        if element_selector is None or node_type_matcher is None:
            raise ValueError("element_selector and node_type_matcher must not be None")
        self.element_selector = element_selector
        self.node_type_matcher = node_type_matcher

    def match(self, control_nodes: Sequence[Any], test_nodes: Sequence[Any]) -> List[Pair]:
        pairs: List[Pair] = []
        test_list = list(test_nodes)
        unmatched = [True] * len(test_list)
        last = -1
        for control in control_nodes:
            index = self._find_match(control, test_list, last, unmatched)
            if index < 0:
                continue
            unmatched[index] = False
            last = index
            pairs.append(Pair(control, test_list[index]))
        return pairs

    def _find_match(
        self, control: Any, test_list: List[Any], last: int, unmatched: List[bool]
    ) -> int:
        candidates = list(range(last + 1, len(test_list))) + list(range(0, last + 1))
        for index in candidates:
            if unmatched[index] and self.nodes_match(control, test_list[index]):
                return index
        return -1

    def nodes_match(self, control: Any, test: Any) -> bool:
        if is_element(control) and is_element(test):
            return bool(self.element_selector(control, test))
        return bool(self.node_type_matcher(control.nodeType, test.nodeType))


class CompareUnmatchedNodeMatcher:
    """Pairs whatever the wrapped matcher left over.

    Unmatched control nodes are paired, in document order, with the first
    test node still unmatched. Surplus nodes on either side stay unmatched.
    """

    def __init__(self, matcher: Any = None) -> None:
        self.matcher = matcher if matcher is not None else DefaultNodeMatcher()

    def match(self, control_nodes: Sequence[Any], test_nodes: Sequence[Any]) -> List[Pair]:
        control_list = list(control_nodes)
        test_list = list(test_nodes)
        matches = {
            id(pair.control): pair.test
            for pair in self.matcher.match(control_list, test_list)
        }
        matched_test = {id(test) for test in matches.values()}
        spare_tests = [node for node in test_list if id(node) not in matched_test]

        pairs: List[Pair] = []
        for control in control_list:
            if id(control) in matches:
                pairs.append(Pair(control, matches[id(control)]))
            elif spare_tests:
                pairs.append(Pair(control, spare_tests.pop(0)))
        return pairs
