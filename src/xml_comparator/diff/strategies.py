"""Per node kind comparison strategies.

Each strategy takes a control and a test node together with their location
paths and returns the ordered list of comparisons relevant to that kind of
node. Strategies only describe what is compared; evaluating the comparisons
is up to the engine. The location paths are left exactly where they were
found.
"""

from typing import Any, List, Optional

from xml.dom import Node

from xml_comparator.diff.location import LocationPath
from xml_comparator.diff.model import Comparison, ComparisonKind, Detail
from xml_comparator.diff.nodes import (
    Attributes,
    NodeKind,
    QualifiedName,
    filtered_children,
    is_attribute,
    local_name,
    namespace_prefix,
    namespace_uri,
    unprefixed_name,
)

ATTRIBUTE_ABSENT = "[attribute absent]"

_CHARACTER_DATA_KINDS = {
    Node.CDATA_SECTION_NODE: ComparisonKind.CDATA_VALUE,
    Node.COMMENT_NODE: ComparisonKind.COMMENT_VALUE,
    Node.TEXT_NODE: ComparisonKind.TEXT_VALUE,
}


def _detail(node: Any, path: LocationPath, value: Any) -> Detail:
    return Detail(node, path.render(), value)


def _comparison(
    kind: ComparisonKind,
    control: Any, control_path: LocationPath, control_value: Any,
    test: Any, test_path: LocationPath, test_value: Any,
) -> Comparison:
    return Comparison(
        kind,
        _detail(control, control_path, control_value),
        _detail(test, test_path, test_value),
    )


def compare_namespaces(
    control: Any, control_path: LocationPath, test: Any, test_path: LocationPath
) -> List[Comparison]:
    """NAMESPACE_URI, then NAMESPACE_PREFIX."""
    return [
        _comparison(
            ComparisonKind.NAMESPACE_URI,
            control, control_path, namespace_uri(control),
            test, test_path, namespace_uri(test),
        ),
        _comparison(
            ComparisonKind.NAMESPACE_PREFIX,
            control, control_path, namespace_prefix(control),
            test, test_path, namespace_prefix(test),
        ),
    ]


def compare_children_count(
    control: Any, control_path: LocationPath, test: Any, test_path: LocationPath
) -> Comparison:
    """Compare child counts, or child presence when either side has none.

    Document type declarations are not counted.
    """
    control_count = len(filtered_children(control))
    test_count = len(filtered_children(test))
    if control_count > 0 and test_count > 0:
        return _comparison(
            ComparisonKind.CHILD_NODELIST_LENGTH,
            control, control_path, control_count,
            test, test_path, test_count,
        )
    return _comparison(
        ComparisonKind.HAS_CHILD_NODES,
        control, control_path, control_count > 0,
        test, test_path, test_count > 0,
    )


def compare_doctypes(
    control: Optional[Any], control_path: LocationPath,
    test: Optional[Any], test_path: LocationPath,
) -> List[Comparison]:
    """Name, public and system identifier of two document type declarations.

    Nothing is compared when either declaration is missing.
    """
    if control is None or test is None:
        return []
    return [
        _comparison(
            ComparisonKind.DOCTYPE_NAME,
            control, control_path, control.name,
            test, test_path, test.name,
        ),
        _comparison(
            ComparisonKind.DOCTYPE_PUBLIC_ID,
            control, control_path, control.publicId,
            test, test_path, test.publicId,
        ),
        _comparison(
            ComparisonKind.DOCTYPE_SYSTEM_ID,
            control, control_path, control.systemId,
            test, test_path, test.systemId,
        ),
    ]


def compare_documents(
    control: Any, control_path: LocationPath, test: Any, test_path: LocationPath
) -> List[Comparison]:
    control_doctype = getattr(control, "doctype", None)
    test_doctype = getattr(test, "doctype", None)
    comparisons = [
        _comparison(
            ComparisonKind.HAS_DOCTYPE_DECLARATION,
            control, control_path, control_doctype is not None,
            test, test_path, test_doctype is not None,
        ),
    ]
    comparisons.extend(
        compare_doctypes(control_doctype, control_path, test_doctype, test_path)
    )
    for kind, attribute in (
        (ComparisonKind.XML_VERSION, "version"),
        (ComparisonKind.XML_STANDALONE, "standalone"),
        (ComparisonKind.XML_ENCODING, "encoding"),
    ):
        comparisons.append(
            _comparison(
                kind,
                control, control_path, getattr(control, attribute, None),
                test, test_path, getattr(test, attribute, None),
            )
        )
    return comparisons


def compare_character_data(
    control: Any, control_path: LocationPath, test: Any, test_path: LocationPath
) -> List[Comparison]:
    """One comparison of the raw character content.

    The kind follows the node type when both sides agree on it and falls back
    to TEXT_VALUE otherwise.
    """
    kind = ComparisonKind.TEXT_VALUE
    if control.nodeType == test.nodeType:
        kind = _CHARACTER_DATA_KINDS[control.nodeType]
    return [
        _comparison(kind, control, control_path, control.data, test, test_path, test.data)
    ]


def compare_processing_instructions(
    control: Any, control_path: LocationPath, test: Any, test_path: LocationPath
) -> List[Comparison]:
    return [
        _comparison(
            ComparisonKind.PROCESSING_INSTRUCTION_TARGET,
            control, control_path, control.target,
            test, test_path, test.target,
        ),
        _comparison(
            ComparisonKind.PROCESSING_INSTRUCTION_DATA,
            control, control_path, control.data,
            test, test_path, test.data,
        ),
    ]


def compare_attributes(
    control: Any, control_path: LocationPath, test: Any, test_path: LocationPath
) -> List[Comparison]:
    """Explicitly specified flag, then value, of two attribute nodes."""
    return [
        _comparison(
            ComparisonKind.ATTR_VALUE_EXPLICITLY_SPECIFIED,
            control, control_path, getattr(control, "specified", None),
            test, test_path, getattr(test, "specified", None),
        ),
        _comparison(
            ComparisonKind.ATTR_VALUE,
            control, control_path, control.value,
            test, test_path, test.value,
        ),
    ]


class ElementComparisonStrategy:
    """Tag name and attribute comparisons of two elements.

    Attribute order is only compared when ``ignore_attribute_order`` is false.
    In that case every matched attribute sitting at a different position on
    the test side is compared against the test attribute that occupies its
    position (its positional mirror).
    """

    def __init__(self, ignore_attribute_order: bool = True) -> None:
        self.ignore_attribute_order = ignore_attribute_order

    def compare(
        self, control: Any, control_path: LocationPath, test: Any, test_path: LocationPath
    ) -> List[Comparison]:
        comparisons = [
            _comparison(
                ComparisonKind.ELEMENT_TAG_NAME,
                control, control_path, local_name(control),
                test, test_path, local_name(test),
            )
        ]
        comparisons.extend(self.compare_attribute_sets(control, control_path, test, test_path))
        return comparisons

    def compare_attribute_sets(
        self, control: Any, control_path: LocationPath, test: Any, test_path: LocationPath
    ) -> List[Comparison]:
        control_attrs = Attributes.of(control)
        test_attrs = Attributes.of(test)

        comparisons = [
            _comparison(
                ComparisonKind.ELEMENT_NUM_ATTRIBUTES,
                control, control_path, len(control_attrs.regular),
                test, test_path, len(test_attrs.regular),
            )
        ]

        control_path.add_attributes(QualifiedName.of(attr) for attr in control_attrs.regular)
        test_path.add_attributes(QualifiedName.of(attr) for attr in test_attrs.regular)

        for control_attr in control_attrs.regular:
            name = QualifiedName.of(control_attr)
            test_attr = test_attrs.find(name)
            with control_path.at_attribute(name):
                comparisons.append(
                    _comparison(
                        ComparisonKind.ATTR_NAME_LOOKUP,
                        control, control_path, True,
                        test, test_path, test_attr is not None,
                    )
                )
                if test_attr is not None:
                    comparisons.extend(
                        self._compare_matched_attributes(
                            control_attr, control_attrs, control_path,
                            test_attr, test_attrs, test_path,
                        )
                    )

        for test_attr in test_attrs.regular:
            name = QualifiedName.of(test_attr)
            if control_attrs.find(name) is not None:
                continue
            with test_path.at_attribute(name):
                comparisons.append(
                    _comparison(
                        ComparisonKind.ATTR_NAME_LOOKUP,
                        control, control_path, False,
                        test, test_path, True,
                    )
                )

        comparisons.append(
            _comparison(
                ComparisonKind.SCHEMA_LOCATION,
                control, control_path, control_attrs.schema_location_value,
                test, test_path, test_attrs.schema_location_value,
            )
        )
        comparisons.append(
            _comparison(
                ComparisonKind.NO_NAMESPACE_SCHEMA_LOCATION,
                control, control_path, control_attrs.no_namespace_schema_location_value,
                test, test_path, test_attrs.no_namespace_schema_location_value,
            )
        )
        return comparisons

    def _compare_matched_attributes(
        self,
        control_attr: Any, control_attrs: Attributes, control_path: LocationPath,
        test_attr: Any, test_attrs: Attributes, test_path: LocationPath,
    ) -> List[Comparison]:
        # control_path is already positioned at control_attr
        comparisons: List[Comparison] = []
        if not self.ignore_attribute_order:
            sequence = self._compare_attribute_position(
                control_attr, control_attrs, control_path, test_attr, test_attrs, test_path
            )
            if sequence is not None:
                comparisons.append(sequence)

        with test_path.at_attribute(QualifiedName.of(test_attr)):
            comparisons.extend(
                compare_namespaces(control_attr, control_path, test_attr, test_path)
            )
            comparisons.extend(
                compare_attributes(control_attr, control_path, test_attr, test_path)
            )
        return comparisons

    def _compare_attribute_position(
        self,
        control_attr: Any, control_attrs: Attributes, control_path: LocationPath,
        test_attr: Any, test_attrs: Attributes, test_path: LocationPath,
    ) -> Optional[Comparison]:
        control_index = control_attrs.index_of(control_attr)
        if test_attrs.index_of(test_attr) == control_index:
            return None

        control_detail = _detail(control_attr, control_path, unprefixed_name(control_attr))
        if control_index < len(test_attrs.regular):
            mirror = test_attrs.regular[control_index]
            with test_path.at_attribute(QualifiedName.of(mirror)):
                test_detail = _detail(mirror, test_path, unprefixed_name(mirror))
        else:
            test_detail = Detail(None, test_path.render(), ATTRIBUTE_ABSENT)
        return Comparison(ComparisonKind.ATTR_SEQUENCE, control_detail, test_detail)


class NodeComparisonStrategy:
    """Comparisons common to all nodes followed by the kind specific ones.

    Emits NODE_TYPE, the namespace comparisons and (except for attributes)
    the children count comparison, then dispatches on the control node's
    kind provided the test node is of a compatible kind.
    """

    def __init__(self, ignore_attribute_order: bool = True) -> None:
        self.element_strategy = ElementComparisonStrategy(ignore_attribute_order)

    @property
    def ignore_attribute_order(self) -> bool:
        return self.element_strategy.ignore_attribute_order

    def compare(
        self, control: Any, control_path: LocationPath, test: Any, test_path: LocationPath
    ) -> List[Comparison]:
        comparisons = [
            _comparison(
                ComparisonKind.NODE_TYPE,
                control, control_path, NodeKind.of(control),
                test, test_path, NodeKind.of(test),
            )
        ]
        comparisons.extend(compare_namespaces(control, control_path, test, test_path))
        if not is_attribute(control):
            comparisons.append(compare_children_count(control, control_path, test, test_path))
        comparisons.extend(self.compare_kind_specific(control, control_path, test, test_path))
        return comparisons

    def compare_kind_specific(
        self, control: Any, control_path: LocationPath, test: Any, test_path: LocationPath
    ) -> List[Comparison]:
        control_kind = NodeKind.of(control)
        test_kind = NodeKind.of(test)

        if control_kind.is_character_data:
            if test_kind.is_character_data:
                return compare_character_data(control, control_path, test, test_path)
            return []
        if control_kind != test_kind:
            return []
        if control_kind == NodeKind.DOCUMENT:
            return compare_documents(control, control_path, test, test_path)
        if control_kind == NodeKind.ELEMENT:
            return self.element_strategy.compare(control, control_path, test, test_path)
        if control_kind == NodeKind.PROCESSING_INSTRUCTION:
            return compare_processing_instructions(control, control_path, test, test_path)
        if control_kind == NodeKind.DOCUMENT_TYPE:
            return compare_doctypes(control, control_path, test, test_path)
        if control_kind == NodeKind.ATTRIBUTE:
            return compare_attributes(control, control_path, test, test_path)
        return []
