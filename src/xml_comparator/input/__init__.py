"""Input acquisition and preprocessing for XML comparison."""

from .sources import SourceType, parse_content, parse_file, to_node
from .transforms import normalize_whitespace, prepare, strip_comments, strip_whitespace

__all__ = [
    "SourceType",
    "parse_content",
    "parse_file",
    "to_node",
    "normalize_whitespace",
    "prepare",
    "strip_comments",
    "strip_whitespace",
]
