"""Location tracking for the two trees under comparison.

:class:`LocationPath` is a cursor over "where the walk currently is" in one
tree. The engine registers the children (and attributes) of the current node,
descends into one of them, and ascends again once it is done; ``render()``
turns the cursor into an XPath-like string such as ``/root[1]/child[2]/@attr``.
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional

from xml.dom import Node

from xml_comparator.diff.nodes import QualifiedName
from xml_comparator.shared.errors import LocationPathError

_SYNTHETIC_NAMES = {
    Node.TEXT_NODE: "text()",
    Node.CDATA_SECTION_NODE: "text()",
    Node.COMMENT_NODE: "comment()",
    Node.PROCESSING_INSTRUCTION_NODE: "processing-instruction()",
}


class _Level:
    """One step of the path plus the steps reachable from it."""

    __slots__ = ("expression", "children", "attributes")

    def __init__(self, expression: str) -> None:
        self.expression = expression
        self.children: List["_Level"] = []
        self.attributes: Dict[QualifiedName, "_Level"] = {}


class LocationPath:
    """Navigable cursor rendering the current position in a tree.

    Sibling indices are 1-based and counted per distinct step name, so the
    second ``b`` element among ``a, b, c, b`` renders as ``b[2]``. Text and
    CDATA nodes share the synthetic name ``text()``.
    """

    def __init__(
        self,
        namespace_context: Optional[Mapping[str, str]] = None,
        root_expression: str = "",
    ) -> None:
        """Initialize a cursor positioned at the tree root.

        Args:
            namespace_context: Mapping of namespace URI to the prefix used when
                rendering qualified names
            root_expression: Expression of the root step, empty for ``/``
        """
        self._namespace_context = dict(namespace_context or {})
        self._path: List[_Level] = [_Level(root_expression)]

    @property
    def depth(self) -> int:
        """Number of steps pushed below the root."""
        return len(self._path) - 1

    def set_children(self, nodes: Iterable[Any]) -> None:
        """Register the child nodes of the current position, replacing earlier ones."""
        self._current.children = []
        self.append_children(nodes)

    def append_children(self, nodes: Iterable[Any]) -> None:
        level = self._current
        counts: Dict[str, int] = {}
        for existing in level.children:
            name = _strip_index(existing.expression)
            counts[name] = counts.get(name, 0) + 1
        for node in nodes:
            name = self._step_name(node)
            counts[name] = counts.get(name, 0) + 1
            level.children.append(_Level("%s[%d]" % (name, counts[name])))

    def add_attributes(self, names: Iterable[QualifiedName]) -> None:
        """Register attribute names reachable from the current position."""
        level = self._current
        for name in names:
            level.attributes[name] = _Level("@" + self._render_name(name))

    def descend_to_child(self, index: int) -> None:
        """Move to the ``index``-th (0-based) registered child."""
        children = self._current.children
        if not 0 <= index < len(children):
            raise LocationPathError(
                f"No child at index {index} of {self.render()!r} "
                f"({len(children)} registered)"
            )
        self._path.append(children[index])

    def descend_to_attribute(self, name: QualifiedName) -> None:
        """Move to the attribute ``name``, registering it when unknown."""
        level = self._current
        if name not in level.attributes:
            level.attributes[name] = _Level("@" + self._render_name(name))
        self._path.append(level.attributes[name])

    def ascend(self) -> None:
        """Move back to the parent position."""
        if len(self._path) == 1:
            raise LocationPathError("Cannot ascend above the root of the location path")
        self._path.pop()

    @contextmanager
    def at_child(self, index: int) -> Iterator["LocationPath"]:
        self.descend_to_child(index)
        try:
            yield self
        finally:
            self.ascend()

    @contextmanager
    def at_attribute(self, name: QualifiedName) -> Iterator["LocationPath"]:
        self.descend_to_attribute(name)
        try:
            yield self
        finally:
            self.ascend()

    def render(self) -> str:
        """Render the current position as a path string."""
        if len(self._path) == 1:
            return self._path[0].expression or "/"
        return "/".join(level.expression for level in self._path)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"LocationPath({self.render()!r})"

    @property
    def _current(self) -> _Level:
        return self._path[-1]

    def _step_name(self, node: Any) -> str:
        synthetic = _SYNTHETIC_NAMES.get(node.nodeType)
        if synthetic is not None:
            return synthetic
        return self._render_name(QualifiedName.of(node))

    def _render_name(self, name: QualifiedName) -> str:
        if name.namespace_uri is None:
            return name.local_name
        prefix = self._namespace_context.get(name.namespace_uri)
        if prefix:
            return f"{prefix}:{name.local_name}"
        return name.local_name


def _strip_index(expression: str) -> str:
    bracket = expression.rfind("[")
    return expression[:bracket] if bracket > 0 else expression
