"""Unit tests for package metadata."""

import sharkbait


class TestPackageMetadata:
    """Test package-level metadata and exports."""

    def test_version_exists(self) -> None:
        """Test that __version__ is defined."""
        assert isinstance(sharkbait.__version__, str)
        assert sharkbait.__version__ == "0.1.0"

    def test_all_exports(self) -> None:
        """Test that __all__ is sorted and every name resolves."""
        assert sharkbait.__all__ == sorted(sharkbait.__all__)
        for name in sharkbait.__all__:
            assert hasattr(sharkbait, name), name

    def test_quick_start(self) -> None:
        """Test the top-level API wires together."""
        registry = sharkbait.ToolRegistry()

        assert registry.list_names() == ["run_command"]
        assert sharkbait.CommandClassifier().is_blocked("rm -rf /")
