"""Public comparison API."""

from .comparator import XMLComparator, compare_xml, is_identical, is_similar

__all__ = [
    "XMLComparator",
    "compare_xml",
    "is_identical",
    "is_similar",
]
