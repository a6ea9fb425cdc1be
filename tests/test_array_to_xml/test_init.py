"""Test module for array_to_xml package initialization."""


def test_package_import() -> None:
    """Test that the package can be imported successfully."""
    # Arrange & Act
    import array_to_xml

    # Assert
    assert array_to_xml is not None


def test_package_has_version() -> None:
    """Test that the package has a version attribute."""
    import array_to_xml

    assert isinstance(array_to_xml.__version__, str)
    assert array_to_xml.__version__ == "0.1.0"


def test_package_has_author() -> None:
    """Test that the package has an author attribute."""
    import array_to_xml

    assert array_to_xml.__author__ == "Array to XML Team"


def test_package_exports_resolve() -> None:
    """Test that every name in __all__ is importable from the package."""
    import array_to_xml

    for name in array_to_xml.__all__:
        assert hasattr(array_to_xml, name), name

    assert "to_string" in array_to_xml.__all__
    assert "ArrayToXML" in array_to_xml.__all__
    assert array_to_xml.to_xml is array_to_xml.to_string
