"""Integration tests for the AdapterRegistry."""

from __future__ import annotations

import pytest

from responsive_images.adapters.pillow import PillowAdapter
from responsive_images.core.exceptions import ConfigurationError
from responsive_images.core.registry import AdapterRegistry


class TestAdapterRegistryDiscovery:
    """Tests for auto-discovery of image adapters."""

    def setup_method(self) -> None:
        """Reset the singleton before each test."""
        AdapterRegistry.reset()

    def teardown_method(self) -> None:
        """Reset the singleton after each test."""
        AdapterRegistry.reset()

    def test_discovers_bundled_adapters(self) -> None:
        """Pillow and OpenCV adapters are found after discovery."""
        registry = AdapterRegistry()
        registry.discover()

        assert registry.get("pillow") is PillowAdapter
        assert "opencv" in registry.all_adapters()

    def test_create_binds_source(self) -> None:
        """``create`` discovers lazily and binds the source bytes."""
        adapter = AdapterRegistry().create("pillow", b"bytes")

        assert isinstance(adapter, PillowAdapter)
        assert adapter.source == b"bytes"

    def test_create_unknown_adapter_raises(self) -> None:
        """Unknown adapter names are configuration errors."""
        with pytest.raises(ConfigurationError, match="Unknown image adapter 'sharp'"):
            AdapterRegistry().create("sharp", b"")

    def test_get_returns_none_for_unknown(self) -> None:
        """Looking up a non-existent adapter returns ``None``."""
        registry = AdapterRegistry()
        registry.discover()

        assert registry.get("nonexistent") is None

    def test_singleton_returns_same_instance(self) -> None:
        """Multiple instantiations return the same singleton."""
        assert AdapterRegistry() is AdapterRegistry()

    def test_reset_clears_singleton(self) -> None:
        """After reset, a new instance is created."""
        a = AdapterRegistry()
        AdapterRegistry.reset()
        assert a is not AdapterRegistry()
