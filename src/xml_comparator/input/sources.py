"""Input acquisition: turning caller supplied objects into DOM nodes.

The comparison engine only works on DOM nodes. :func:`to_node` is the
boundary that accepts the usual ways of handing XML around in Python and
parses or converts them with :mod:`xml.dom.minidom`.
"""

import os
import time
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import IO, Any, Optional, Union
from xml.dom import minidom
from xml.parsers.expat import ExpatError

from xml_comparator.shared.errors import SourceError, SourceParseError, UnsupportedSourceError
from xml_comparator.shared.logging import get_logger

# Type definitions for input data
SourceType = Union[str, bytes, Path, IO[Any], Any]

PREVIEW_LENGTH = 100  # Max length for content preview in logs
MS_PER_SECOND = 1000


def is_dom_node(source: Any) -> bool:
    return hasattr(source, "nodeType") and hasattr(source, "childNodes")


def is_lxml_object(source: Any) -> bool:
    """Recognize lxml elements and element trees without importing lxml."""
    if hasattr(source, "getroottree"):
        return True
    return hasattr(source, "docinfo") and hasattr(source, "getroot")


def to_node(source: SourceType, correlation_id: Optional[str] = None) -> Any:
    """Return a DOM node for ``source``.

    Args:
        source: DOM node (returned as-is), XML content as ``str`` or ``bytes``,
            a ``pathlib.Path`` or other path-like object naming a file, a
            readable file-like object, an ``xml.etree.ElementTree`` element or
            tree, or an ``lxml.etree`` element or tree
        correlation_id: Optional correlation ID for request tracking

    Returns:
        DOM Document, or the node itself for DOM input

    Raises:
        UnsupportedSourceError: If the object cannot be turned into a DOM node
        SourceParseError: If the content is not well-formed XML
        SourceError: If a file cannot be read
    """
    logger = get_logger(__name__, correlation_id, "source")

    if source is None:
        raise UnsupportedSourceError("source must not be None")
    if is_dom_node(source):
        return source

    start_time = time.time()
    if isinstance(source, (str, bytes)):
        document = parse_content(source)
        description = "content"
    elif isinstance(source, (Path, os.PathLike)):
        document = parse_file(Path(source))
        description = "file"
    elif hasattr(source, "read"):
        document = _parse(lambda: minidom.parse(source), "file-like object")
        description = "file-like object"
    elif is_lxml_object(source):
        document = _from_lxml(source)
        description = "lxml tree"
    elif isinstance(source, ET.ElementTree):
        document = parse_content(ET.tostring(source.getroot()))
        description = "ElementTree"
    elif ET.iselement(source):
        document = parse_content(ET.tostring(source))
        description = "ElementTree element"
    else:
        raise UnsupportedSourceError(
            f"Cannot compare objects of type {type(source).__name__}; "
            "pass a DOM node, XML text, a path, a file or an element tree"
        )

    logger.debug(
        "Source converted to DOM",
        extra={
            "source_kind": description,
            "processing_time_ms": (time.time() - start_time) * MS_PER_SECOND,
        },
    )
    return document


def parse_content(content: Union[str, bytes]) -> Any:
    """Parse XML text into a DOM document."""
    return _parse(lambda: minidom.parseString(content), _preview(content))


def parse_file(path: Path) -> Any:
    """Parse an XML file into a DOM document."""
    if not path.exists():
        raise SourceError(f"File not found: {path}")
    if not path.is_file():
        raise SourceError(f"Path is not a file: {path}")
    try:
        with path.open("rb") as file:
            return _parse(lambda: minidom.parse(file), str(path))
    except OSError as e:
        raise SourceError(f"Cannot read {path}: {e}") from e


def _from_lxml(source: Any) -> Any:
    import lxml.etree

    return parse_content(lxml.etree.tostring(source))


def _parse(parse: Any, description: str) -> Any:
    try:
        return parse()
    except ExpatError as e:
        raise SourceParseError(
            f"Not well-formed XML ({description}): {e}", source_description=description
        ) from e


def _preview(content: Union[str, bytes]) -> str:
    text = content if isinstance(content, str) else content.decode("utf-8", "replace")
    if len(text) > PREVIEW_LENGTH:
        return text[:PREVIEW_LENGTH] + "..."
    return text
