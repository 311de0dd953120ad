"""Tests for LocationPath."""

from xml.dom import minidom

import pytest

from xml_comparator.diff.location import LocationPath
from xml_comparator.diff.nodes import QualifiedName
from xml_comparator.shared.errors import LocationPathError


def _root_path(document, **kwargs):
    path = LocationPath(**kwargs)
    path.set_children(document.childNodes)
    path.descend_to_child(0)
    return path


class TestLocationPath:
    """Test suite for LocationPath navigation and rendering."""

    def test_root_renders_slash(self):
        """Test that a fresh cursor renders as the root."""
        path = LocationPath()
        assert path.render() == "/"
        assert path.depth == 0

    def test_descend_to_child(self):
        """Test descending into the document element."""
        document = minidom.parseString("<root/>")
        path = _root_path(document)

        assert path.render() == "/root[1]"
        assert path.depth == 1

    def test_indices_are_counted_per_name(self):
        """Test 1-based indices counted per distinct step name."""
        document = minidom.parseString("<r><a/><b/><a/><b/></r>")
        path = _root_path(document)
        path.set_children(document.documentElement.childNodes)

        rendered = []
        for index in range(4):
            path.descend_to_child(index)
            rendered.append(path.render())
            path.ascend()

        assert rendered == ["/r[1]/a[1]", "/r[1]/b[1]", "/r[1]/a[2]", "/r[1]/b[2]"]

    def test_synthetic_names(self):
        """Test names of text, comment, processing instruction and CDATA nodes."""
        document = minidom.parseString("<r>t<!--c--><?p d?><![CDATA[x]]>u</r>")
        path = _root_path(document)
        path.set_children(document.documentElement.childNodes)

        rendered = []
        for index in range(5):
            with path.at_child(index):
                rendered.append(path.render())

        assert rendered == [
            "/r[1]/text()[1]",
            "/r[1]/comment()[1]",
            "/r[1]/processing-instruction()[1]",
            "/r[1]/text()[2]",
            "/r[1]/text()[3]",
        ]

    def test_attributes(self):
        """Test descending to registered attributes."""
        document = minidom.parseString('<r x="1"/>')
        path = _root_path(document)
        path.add_attributes([QualifiedName(None, "x")])

        path.descend_to_attribute(QualifiedName(None, "x"))
        assert path.render() == "/r[1]/@x"
        path.ascend()
        assert path.render() == "/r[1]"

    def test_unregistered_attribute_is_created(self):
        """Test that descending to an unknown attribute still works."""
        document = minidom.parseString("<r/>")
        path = _root_path(document)

        with path.at_attribute(QualifiedName(None, "missing")):
            assert path.render() == "/r[1]/@missing"

    def test_namespace_context_prefixes(self):
        """Test that mapped namespace URIs render with their prefix."""
        document = minidom.parseString('<x:a xmlns:x="urn:x" xmlns:y="urn:y" y:b="1"/>')
        plain = _root_path(document)
        prefixed = _root_path(document, namespace_context={"urn:x": "p", "urn:y": "q"})

        assert plain.render() == "/a[1]"
        assert prefixed.render() == "/p:a[1]"

        with prefixed.at_attribute(QualifiedName("urn:y", "b")):
            assert prefixed.render() == "/p:a[1]/@q:b"

    def test_unmapped_namespaces_share_local_name_indices(self):
        """Test that only mapped namespace URIs get a prefix in steps."""
        document = minidom.parseString(
            '<r xmlns:f="urn:foo" xmlns:b="urn:bar"><f:x/><x/><b:x/></r>'
        )
        path = _root_path(document, namespace_context={"urn:bar": "bar"})
        path.set_children(document.documentElement.childNodes)

        rendered = []
        for index in range(3):
            with path.at_child(index):
                rendered.append(path.render())

        assert rendered == ["/r[1]/x[1]", "/r[1]/x[2]", "/r[1]/bar:x[1]"]

    def test_ascend_above_root_fails(self):
        """Test that an unbalanced ascend is a fatal error."""
        path = LocationPath()
        with pytest.raises(LocationPathError):
            path.ascend()
        with pytest.raises(RuntimeError):
            path.ascend()

    def test_descend_to_unknown_child_fails(self):
        """Test that an out of range child index is rejected."""
        path = LocationPath()
        path.set_children([])
        with pytest.raises(LocationPathError):
            path.descend_to_child(0)

    def test_context_manager_restores_position_on_error(self):
        """Test that at_child ascends even when the body raises."""
        document = minidom.parseString("<r/>")
        path = LocationPath()
        path.set_children(document.childNodes)

        with pytest.raises(ValueError):
            with path.at_child(0):
                raise ValueError("boom")

        assert path.render() == "/"

    def test_render_is_idempotent(self):
        """Test that rendering has no side effects."""
        document = minidom.parseString("<r/>")
        path = _root_path(document)

        assert path.render() == path.render() == str(path)

    def test_set_children_replaces_and_append_children_extends(self):
        """Test registration of children on the current level."""
        document = minidom.parseString("<r><a/><a/></r>")
        children = list(document.documentElement.childNodes)
        path = _root_path(document)

        path.set_children(children[:1])
        path.append_children(children[1:])
        with path.at_child(1):
            assert path.render() == "/r[1]/a[2]"

        path.set_children(children[1:])
        with path.at_child(0):
            assert path.render() == "/r[1]/a[1]"
