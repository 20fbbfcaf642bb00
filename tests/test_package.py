"""Tests for astound package exports and metadata."""

import pytest

import astound


class TestPackageMetadata:
    """Package-level exports and metadata."""

    def test_version_string(self) -> None:
        assert isinstance(astound.__version__, str)
        assert "0.1.0" in astound.__version__

    def test_all_exports_resolvable(self) -> None:
        for name in astound.__all__:
            getattr(astound, name)

    def test_build_is_callable_after_pipeline_import(self) -> None:
        import astound.pipeline  # noqa: F401

        assert callable(astound.build)

    def test_invalid_attribute_raises(self) -> None:
        with pytest.raises(AttributeError, match="no attribute"):
            astound.nonexistent_thing  # type: ignore[attr-defined]  # noqa: B018
