"""Preprocessing of DOM trees before comparison.

Every transform works on a deep copy; the caller's tree is left untouched.
"""

import re
from typing import Any, Callable, Optional

from xml.dom import Node

from xml_comparator.shared.logging import get_logger

_WHITESPACE_RUN = re.compile(r"[ \t\r\n]+")
_TEXT_TYPES = (Node.TEXT_NODE, Node.CDATA_SECTION_NODE)


def _copy(node: Any) -> Any:
    return node.cloneNode(True)


def _walk_remove(node: Any, should_remove: Callable[[Any], bool]) -> None:
    for child in list(node.childNodes):
        if should_remove(child):
            node.removeChild(child)
            child.unlink()
        else:
            _walk_remove(child, should_remove)


def _rewrite_text(node: Any, rewrite: Callable[[str], str]) -> None:
    """Apply ``rewrite`` to every text and CDATA node, dropping empty results."""
    for child in list(node.childNodes):
        if child.nodeType in _TEXT_TYPES:
            data = rewrite(child.data)
            if data:
                child.data = data
            else:
                node.removeChild(child)
                child.unlink()
        else:
            _rewrite_text(child, rewrite)


def strip_comments(node: Any) -> Any:
    """Copy of ``node`` without comment nodes."""
    copy = _copy(node)
    _walk_remove(copy, lambda child: child.nodeType == Node.COMMENT_NODE)
    return copy


def strip_whitespace(node: Any) -> Any:
    """Copy of ``node`` with text trimmed and whitespace-only text removed."""
    copy = _copy(node)
    copy.normalize()
    _rewrite_text(copy, lambda data: data.strip(" \t\r\n"))
    return copy


def normalize_whitespace(node: Any) -> Any:
    """Copy of ``node`` with whitespace runs collapsed to single spaces.

    Text is trimmed as well; text that ends up empty is removed.
    """
    copy = _copy(node)
    copy.normalize()
    _rewrite_text(copy, lambda data: _WHITESPACE_RUN.sub(" ", data).strip(" "))
    return copy


def prepare(
    node: Any,
    ignore_comments: bool = False,
    ignore_whitespace: bool = False,
    normalize: bool = False,
    correlation_id: Optional[str] = None,
) -> Any:
    """Apply the configured preprocessing to ``node``.

    Whitespace normalization takes precedence over whitespace stripping.
    Returns ``node`` itself when nothing is to be done.
    """
    logger = get_logger(__name__, correlation_id, "transforms")
    applied = []
    if ignore_comments:
        node = strip_comments(node)
        applied.append("strip_comments")
    if normalize:
        node = normalize_whitespace(node)
        applied.append("normalize_whitespace")
    elif ignore_whitespace:
        node = strip_whitespace(node)
        applied.append("strip_whitespace")
    if applied:
        logger.debug("Input preprocessed", extra={"transforms": applied})
    return node
