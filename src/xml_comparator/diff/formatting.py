"""Human readable rendering of comparisons and verdicts."""

from typing import TYPE_CHECKING, Any, List

from xml.dom import Node

from xml_comparator.diff.model import Comparison, ComparisonOutcome, Detail

if TYPE_CHECKING:
    from xml_comparator.diff.aggregation import Difference, DiffResult

DOCUMENT_NODE_DESCRIPTION = "#document"


def describe_node(node: Any) -> str:
    """Short XML-ish description of a single DOM node."""
    node_type = node.nodeType
    if node_type == Node.DOCUMENT_NODE:
        return f"<{DOCUMENT_NODE_DESCRIPTION}<...>>"
    if node_type == Node.ELEMENT_NODE:
        return f"<{node.nodeName}...>"
    if node_type == Node.ATTRIBUTE_NODE:
        owner = getattr(node, "ownerElement", None)
        owner_name = owner.nodeName if owner is not None else ""
        return f'<{owner_name} {node.nodeName}="{node.value}"...>'
    if node_type == Node.TEXT_NODE:
        parent = node.parentNode
        if parent is not None and parent.nodeType == Node.ELEMENT_NODE:
            return f"<{parent.nodeName} ...>{node.data}</{parent.nodeName}>"
        return node.data
    if node_type == Node.CDATA_SECTION_NODE:
        return f"<![CDATA[{node.data}]]>"
    if node_type == Node.COMMENT_NODE:
        return f"<!--{node.data}-->"
    if node_type == Node.PROCESSING_INSTRUCTION_NODE:
        return f"<?{node.target} {node.data}?>"
    if node_type == Node.DOCUMENT_TYPE_NODE:
        parts = [node.name]
        if node.publicId:
            parts.append(f'PUBLIC "{node.publicId}"')
        if node.systemId:
            parts.append(f'"{node.systemId}"' if node.publicId else f'SYSTEM "{node.systemId}"')
        return "<!DOCTYPE %s>" % " ".join(parts)
    return f"<{node.nodeName}>"


def describe_detail(detail: Detail) -> str:
    return f"{describe_node(detail.target)} at {detail.location}"


def describe_comparison(comparison: Comparison) -> str:
    """Describe what was compared and which values were found.

    Comparisons with an absent side only name their kind.
    """
    kind = comparison.kind
    if comparison.control.target is None or comparison.test.target is None:
        return f"Difference (#{kind.name}) {kind.description}"
    return (
        f"Expected {kind.description} '{comparison.control.value}' "
        f"but was '{comparison.test.value}' - comparing "
        f"{describe_detail(comparison.control)} to {describe_detail(comparison.test)}"
    )


def describe_difference(difference: "Difference") -> str:
    if difference.outcome == ComparisonOutcome.SIMILAR:
        label = "[not identical]"
    else:
        label = "[different]"
    return f"{label} {describe_comparison(difference.comparison)}"


def format_result(result: "DiffResult") -> str:
    """Render a verdict: ``[identical]`` or one line per difference."""
    if not result.differences:
        return "[identical]"
    lines: List[str] = [describe_difference(difference) for difference in result.differences]
    return "\n".join(lines)
