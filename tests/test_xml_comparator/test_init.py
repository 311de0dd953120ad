"""Test module for xml_comparator package initialization."""


def test_package_import() -> None:
    """Test that the package can be imported successfully."""
    # Arrange & Act
    import xml_comparator

    # Assert
    assert xml_comparator is not None


def test_package_has_version() -> None:
    """Test that the package has a version attribute."""
    # Arrange & Act
    import xml_comparator

    # Assert
    assert isinstance(xml_comparator.__version__, str)
    assert xml_comparator.__version__ == "0.1.0"


def test_package_has_author() -> None:
    """Test that the package has an author attribute."""
    # Arrange & Act
    import xml_comparator

    # Assert
    assert xml_comparator.__author__ == "XML Comparator Team"


def test_package_all_exports() -> None:
    """Test that every name in __all__ is importable from the package."""
    # Arrange & Act
    import xml_comparator

    # Assert
    for name in xml_comparator.__all__:
        assert hasattr(xml_comparator, name), name
    for name in ("compare_xml", "is_identical", "is_similar", "XMLComparator", "DiffResult"):
        assert name in xml_comparator.__all__


def test_simple_usage() -> None:
    """Test the one-call entry points exported at package level."""
    # Arrange
    from xml_comparator import compare_xml, is_identical, is_similar

    # Act
    result = compare_xml("<a><b/><c/></a>", "<a><c/><b/></a>")

    # Assert
    assert result.similar is True
    assert result.identical is False
    assert is_identical("<a/>", "<a/>")
    assert not is_similar("<a>1</a>", "<a>2</a>")
