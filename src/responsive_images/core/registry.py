"""AdapterRegistry — singleton that auto-discovers image adapter backends."""

from __future__ import annotations

import importlib
import logging
import pkgutil
from typing import TYPE_CHECKING

from responsive_images.core.exceptions import ConfigurationError

if TYPE_CHECKING:
    from responsive_images.core.base_adapter import ImageAdapter

logger = logging.getLogger(__name__)

DEFAULT_ADAPTER = "pillow"


class AdapterRegistry:
    """Singleton registry of ``ImageAdapter`` subclasses.

    On first :meth:`discover` the registry scans ``responsive_images.adapters.*``
    sub-packages for an ``adapter`` module and records every concrete
    ``ImageAdapter`` it defines under the class's ``name``.  Adapters are
    stored as classes because each invocation needs its own instance bound
    to the source bytes.
    """

    _instance: AdapterRegistry | None = None
    _adapters: dict[str, type[ImageAdapter]]

    def __new__(cls) -> AdapterRegistry:
        """Return the singleton instance, creating it on first call."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._adapters = {}
        return cls._instance

    def discover(self) -> None:
        """Scan ``responsive_images.adapters`` and register every adapter class."""
        from responsive_images.core.base_adapter import ImageAdapter

        adapters_package = importlib.import_module("responsive_images.adapters")

        for _importer, module_name, is_pkg in pkgutil.iter_modules(adapters_package.__path__):
            if not is_pkg:
                continue
            try:
                adapter_module = importlib.import_module(f"responsive_images.adapters.{module_name}.adapter")
            except ImportError as exc:
                logger.debug("Skipping adapter package %s: %s", module_name, exc)
                continue

            for attr_name in dir(adapter_module):
                attr = getattr(adapter_module, attr_name)
                if (
                    isinstance(attr, type)
                    and issubclass(attr, ImageAdapter)
                    and attr is not ImageAdapter
                    and not getattr(attr, "__abstractmethods__", None)
                ):
                    self.register(attr)

    def register(self, adapter_cls: type[ImageAdapter]) -> None:
        """Register an adapter class under its ``name``."""
        self._adapters[adapter_cls.name] = adapter_cls
        logger.info("Registered image adapter: %s", adapter_cls.name)

    def get(self, name: str) -> type[ImageAdapter] | None:
        """Look up an adapter class by name, or ``None`` if unknown."""
        return self._adapters.get(name)

    def create(self, name: str, source: bytes) -> ImageAdapter:
        """Instantiate the adapter *name* for *source*.

        Discovery runs lazily the first time a lookup misses.

        Raises:
            ConfigurationError: If no adapter with that name exists.
        """
        if name not in self._adapters:
            self.discover()
        adapter_cls = self._adapters.get(name)
        if adapter_cls is None:
            msg = f"Unknown image adapter '{name}'. Available: {sorted(self._adapters)}"
            raise ConfigurationError(msg)
        return adapter_cls(source)

    def all_adapters(self) -> dict[str, type[ImageAdapter]]:
        """Return all registered adapters as a name → class mapping."""
        return dict(self._adapters)

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton — intended for testing only."""
        cls._instance = None
