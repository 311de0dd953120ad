"""Tests for element selectors and node matchers."""

from xml.dom import Node, minidom

import pytest

from xml_comparator.diff.matching import (
    CompareUnmatchedNodeMatcher,
    DefaultNodeMatcher,
    ElementSelectors,
    NodeTypeMatchers,
)


def _children(xml):
    return list(minidom.parseString(xml).documentElement.childNodes)


def _element(xml):
    return minidom.parseString(xml).documentElement


class TestElementSelectors:
    """Test suite for ElementSelectors."""

    def test_by_name(self):
        """Test matching by qualified name."""
        assert ElementSelectors.by_name(_element("<a/>"), _element("<a x='1'/>"))
        assert not ElementSelectors.by_name(_element("<a/>"), _element("<b/>"))
        assert ElementSelectors.by_name(
            _element('<p:a xmlns:p="urn:x"/>'), _element('<a xmlns="urn:x"/>')
        )
        assert not ElementSelectors.by_name(_element('<a xmlns="urn:x"/>'), _element("<a/>"))

    def test_by_name_and_text(self):
        """Test matching by name and merged text."""
        selector = ElementSelectors.by_name_and_text
        assert selector(_element("<a>x</a>"), _element("<a><![CDATA[x]]></a>"))
        assert not selector(_element("<a>x</a>"), _element("<a>y</a>"))

    def test_by_name_and_all_attributes(self):
        """Test matching by name and every attribute value."""
        selector = ElementSelectors.by_name_and_all_attributes
        assert selector(_element('<a x="1" y="2"/>'), _element('<a y="2" x="1"/>'))
        assert selector(_element('<a xmlns:p="urn:p" x="1"/>'), _element('<a x="1"/>'))
        assert not selector(_element('<a x="1"/>'), _element('<a x="1" y="2"/>'))

    def test_by_name_and_attributes(self):
        """Test matching by name and selected attribute values."""
        selector = ElementSelectors.by_name_and_attributes("id")
        assert selector(_element('<a id="1" x="1"/>'), _element('<a id="1" x="2"/>'))
        assert not selector(_element('<a id="1"/>'), _element('<a id="2"/>'))
        assert selector(_element("<a/>"), _element("<a/>"))

    def test_first_matching(self):
        """Test that any of the combined selectors may match."""
        selector = ElementSelectors.first_matching(
            ElementSelectors.by_name_and_attributes("id"),
            ElementSelectors.by_name_and_text,
        )
        assert selector(_element('<a id="1">x</a>'), _element('<a id="1">y</a>'))
        assert selector(_element('<a id="1">x</a>'), _element('<a id="2">x</a>'))
        assert not selector(_element('<a id="1">x</a>'), _element('<a id="2">y</a>'))

    def test_first_matching_rejects_none(self):
        """Test that None is not a selector."""
        with pytest.raises(ValueError):
            ElementSelectors.first_matching(ElementSelectors.by_name, None)


class TestNodeTypeMatchers:
    """Test suite for NodeTypeMatchers."""

    def test_default_treats_text_and_cdata_alike(self):
        """Test the default node type matcher."""
        assert NodeTypeMatchers.default(Node.TEXT_NODE, Node.CDATA_SECTION_NODE)
        assert NodeTypeMatchers.default(Node.COMMENT_NODE, Node.COMMENT_NODE)
        assert not NodeTypeMatchers.default(Node.TEXT_NODE, Node.COMMENT_NODE)

    def test_exact(self):
        """Test the exact node type matcher."""
        assert not NodeTypeMatchers.exact(Node.TEXT_NODE, Node.CDATA_SECTION_NODE)
        assert NodeTypeMatchers.exact(Node.TEXT_NODE, Node.TEXT_NODE)


class TestDefaultNodeMatcher:
    """Test suite for DefaultNodeMatcher."""

    def test_swapped_children(self):
        """Test pairing of reordered elements."""
        control = _children("<r><b/><c/></r>")
        test = _children("<r><c/><b/></r>")

        pairs = DefaultNodeMatcher().match(control, test)

        assert [(p.control, p.test) for p in pairs] == [
            (control[0], test[1]),
            (control[1], test[0]),
        ]

    def test_same_names_pair_in_order(self):
        """Test that equally named siblings pair up in document order."""
        control = _children("<r><x>1</x><x>2</x></r>")
        test = _children("<r><x>3</x><x>4</x></r>")

        pairs = DefaultNodeMatcher().match(control, test)

        assert [(p.control, p.test) for p in pairs] == [
            (control[0], test[0]),
            (control[1], test[1]),
        ]

    def test_search_continues_after_last_match(self):
        """Test that the search resumes just after the most recent match."""
        control = _children("<r><c/><b/></r>")
        test = _children("<r><b/><c/><b/></r>")

        pairs = DefaultNodeMatcher().match(control, test)

        assert [(p.control, p.test) for p in pairs] == [
            (control[0], test[1]),
            (control[1], test[2]),
        ]

    def test_unmatched_nodes_are_left_out(self):
        """Test that nodes without a counterpart are not paired."""
        control = _children("<r><a/><b/></r>")
        test = _children("<r><a/><c/></r>")

        pairs = DefaultNodeMatcher().match(control, test)

        assert [(p.control, p.test) for p in pairs] == [(control[0], test[0])]

    def test_text_matches_cdata(self):
        """Test that text and CDATA children pair under the default type matcher."""
        control = _children("<r>x</r>")
        test = _children("<r><![CDATA[x]]></r>")

        assert len(DefaultNodeMatcher().match(control, test)) == 1
        exact = DefaultNodeMatcher(node_type_matcher=NodeTypeMatchers.exact)
        assert exact.match(control, test) == []

    def test_element_never_matches_text(self):
        """Test that elements only pair with elements."""
        control = _children("<r><a/></r>")
        test = _children("<r>a</r>")

        assert DefaultNodeMatcher().match(control, test) == []

    def test_custom_selector(self):
        """Test pairing driven by a custom element selector."""
        control = _children('<r><a id="2"/><a id="1"/></r>')
        test = _children('<r><a id="1"/><a id="2"/></r>')
        matcher = DefaultNodeMatcher(ElementSelectors.by_name_and_attributes("id"))

        pairs = matcher.match(control, test)

        assert [(p.control, p.test) for p in pairs] == [
            (control[0], test[1]),
            (control[1], test[0]),
        ]

    def test_none_arguments_rejected(self):
        """Test that missing selectors are rejected."""
        with pytest.raises(ValueError):
            DefaultNodeMatcher(None)
        with pytest.raises(ValueError):
            DefaultNodeMatcher(node_type_matcher=None)


class TestCompareUnmatchedNodeMatcher:
    """Test suite for CompareUnmatchedNodeMatcher."""

    def test_leftovers_are_paired(self):
        """Test that unmatched control nodes take the first spare test node."""
        control = _children("<r><a/><b/></r>")
        test = _children("<r><a/><c/></r>")

        pairs = CompareUnmatchedNodeMatcher().match(control, test)

        assert [(p.control, p.test) for p in pairs] == [
            (control[0], test[0]),
            (control[1], test[1]),
        ]

    def test_surplus_stays_unmatched(self):
        """Test that surplus test nodes remain without a partner."""
        control = _children("<r><b/></r>")
        test = _children("<r><c/><d/></r>")

        pairs = CompareUnmatchedNodeMatcher().match(control, test)

        assert [(p.control, p.test) for p in pairs] == [(control[0], test[0])]

    def test_wraps_given_matcher(self):
        """Test that the wrapped matcher decides first."""
        control = _children("<r>x<a/></r>")
        test = _children("<r><a/>y</r>")
        wrapped = DefaultNodeMatcher(node_type_matcher=NodeTypeMatchers.exact)

        pairs = CompareUnmatchedNodeMatcher(wrapped).match(control, test)

        assert [(p.control, p.test) for p in pairs] == [
            (control[0], test[1]),
            (control[1], test[0]),
        ]
