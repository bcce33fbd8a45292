"""Test module for xml_roundtrip_validator package initialization."""


def test_package_import() -> None:
    """Test that the package can be imported successfully."""
    # Arrange & Act
    import xml_roundtrip_validator

    # Assert
    assert xml_roundtrip_validator is not None


def test_package_has_version() -> None:
    """Test that the package has a version attribute."""
    # Arrange & Act
    import xml_roundtrip_validator

    # Assert
    assert isinstance(xml_roundtrip_validator.__version__, str)
    assert xml_roundtrip_validator.__version__ == "0.1.0"


def test_package_has_author() -> None:
    """Test that the package has an author attribute."""
    import xml_roundtrip_validator

    assert xml_roundtrip_validator.__author__ == "XML Round-trip Validator Team"


def test_package_all_exports() -> None:
    """Test that __all__ contains expected exports."""
    # Arrange & Act
    import xml_roundtrip_validator

    # Assert
    expected = {
        "validate",
        "validate_all",
        "RoundtripValidator",
        "ValidatorConfig",
        "RoundtripError",
        "XMLSyntaxError",
        "XMLValidationError",
    }
    assert expected.issubset(set(xml_roundtrip_validator.__all__))
    for name in xml_roundtrip_validator.__all__:
        assert hasattr(xml_roundtrip_validator, name)


def test_simple_api_usable_from_package_root() -> None:
    """Test the level 1 functions work straight from the package."""
    from xml_roundtrip_validator import validate, validate_all

    assert validate(b"<Root></Root>") is None
    assert validate_all(b"<Root></Root>") == []
