"""Tests for the top-level package exports."""

import xml2xlsx


class TestPackageExports:
    """Test the progressive API surface of the package."""

    def test_version(self):
        """Test version metadata is exposed."""
        assert xml2xlsx.__version__ == "0.1.0"

    def test_level_one_functions(self):
        """Test simple conversion functions are importable from the package."""
        for name in ("convert_file", "convert_generic", "convert_svd", "classify"):
            assert callable(getattr(xml2xlsx, name))

    def test_all_names_resolve(self):
        """Test every name in __all__ is defined."""
        for name in xml2xlsx.__all__:
            assert hasattr(xml2xlsx, name), name
