"""Access helpers over the W3C DOM host tree.

The engine reads nodes exclusively through these helpers, so any object
implementing the ``xml.dom.Node`` interface can be compared. Nodes are never
mutated here.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, List, NamedTuple, Optional
from xml.dom import Node

XMLNS_NAMESPACE = "http://www.w3.org/2000/xmlns/"
XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"


class NodeKind(Enum):
    """DOM node kinds, keyed by their ``nodeType`` code."""

    ELEMENT = Node.ELEMENT_NODE
    ATTRIBUTE = Node.ATTRIBUTE_NODE
    TEXT = Node.TEXT_NODE
    CDATA_SECTION = Node.CDATA_SECTION_NODE
    ENTITY_REFERENCE = Node.ENTITY_REFERENCE_NODE
    ENTITY = Node.ENTITY_NODE
    PROCESSING_INSTRUCTION = Node.PROCESSING_INSTRUCTION_NODE
    COMMENT = Node.COMMENT_NODE
    DOCUMENT = Node.DOCUMENT_NODE
    DOCUMENT_TYPE = Node.DOCUMENT_TYPE_NODE
    DOCUMENT_FRAGMENT = Node.DOCUMENT_FRAGMENT_NODE
    NOTATION = Node.NOTATION_NODE

    @classmethod
    def of(cls, node: Any) -> "NodeKind":
        return cls(node.nodeType)

    @property
    def is_character_data(self) -> bool:
        return self in (NodeKind.TEXT, NodeKind.CDATA_SECTION, NodeKind.COMMENT)


class QualifiedName(NamedTuple):
    """Namespace URI plus local name identifying an element or attribute."""

    namespace_uri: Optional[str]
    local_name: str

    @classmethod
    def of(cls, node: Any) -> "QualifiedName":
        """Build the qualified name of a DOM node.

        Nodes without a namespace are identified by their full node name,
        namespaced nodes by their local name.
        """
        uri = namespace_uri(node)
        if uri:
            return cls(uri, node.localName or node.nodeName)
        return cls(None, node.nodeName)

    def __str__(self) -> str:
        if self.namespace_uri:
            return "{%s}%s" % (self.namespace_uri, self.local_name)
        return self.local_name


def namespace_uri(node: Any) -> Optional[str]:
    """Namespace URI of ``node``; empty strings are reported as ``None``."""
    return getattr(node, "namespaceURI", None) or None


def namespace_prefix(node: Any) -> Optional[str]:
    return getattr(node, "prefix", None) or None


def local_name(node: Any) -> str:
    """Local part of the node name, the full node name when none is set."""
    return getattr(node, "localName", None) or node.nodeName


def unprefixed_name(node: Any) -> str:
    if namespace_uri(node):
        return local_name(node)
    return node.nodeName


def is_document(node: Any) -> bool:
    return node is not None and node.nodeType == Node.DOCUMENT_NODE


def is_element(node: Any) -> bool:
    return node is not None and node.nodeType == Node.ELEMENT_NODE


def is_attribute(node: Any) -> bool:
    return node is not None and node.nodeType == Node.ATTRIBUTE_NODE


def filtered_children(node: Any) -> List[Any]:
    """Child nodes of ``node`` without document type declarations."""
    return [
        child for child in node.childNodes
        if child.nodeType != Node.DOCUMENT_TYPE_NODE
    ]


def attribute_list(element: Any) -> List[Any]:
    """Attributes of ``element`` in document order."""
    attributes = element.attributes
    if attributes is None:
        return []
    return [attributes.item(i) for i in range(attributes.length)]


def is_namespace_declaration(attr: Any) -> bool:
    if namespace_uri(attr) == XMLNS_NAMESPACE:
        return True
    name = attr.nodeName
    return name == "xmlns" or name.startswith("xmlns:")


def merged_text(element: Any) -> str:
    """Concatenated content of the direct text and CDATA children."""
    return "".join(
        child.data for child in element.childNodes
        if child.nodeType in (Node.TEXT_NODE, Node.CDATA_SECTION_NODE)
    )


def find_attribute(attributes: Iterable[Any], name: QualifiedName) -> Optional[Any]:
    for attr in attributes:
        if QualifiedName.of(attr) == name:
            return attr
    return None


@dataclass
class Attributes:
    """Attributes of one element, partitioned for comparison.

    Namespace declarations are dropped; the two schema location attributes
    are held apart from the regular attributes.
    """

    schema_location: Optional[Any] = None
    no_namespace_schema_location: Optional[Any] = None
    regular: List[Any] = field(default_factory=list)

    @classmethod
    def of(cls, element: Any) -> "Attributes":
        result = cls()
        for attr in attribute_list(element):
            if is_namespace_declaration(attr):
                continue
            if namespace_uri(attr) == XSI_NAMESPACE:
                name = local_name(attr)
                if name == "schemaLocation":
                    result.schema_location = attr
                    continue
                if name == "noNamespaceSchemaLocation":
                    result.no_namespace_schema_location = attr
                    continue
            result.regular.append(attr)
        return result

    @property
    def schema_location_value(self) -> Optional[str]:
        return None if self.schema_location is None else self.schema_location.value

    @property
    def no_namespace_schema_location_value(self) -> Optional[str]:
        if self.no_namespace_schema_location is None:
            return None
        return self.no_namespace_schema_location.value

    def find(self, name: QualifiedName) -> Optional[Any]:
        return find_attribute(self.regular, name)

    def index_of(self, attr: Any) -> int:
        for index, candidate in enumerate(self.regular):
            if candidate is attr:
                return index
        return -1
