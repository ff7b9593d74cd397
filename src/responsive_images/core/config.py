"""ConfigManager — static loader options and named presets backed by TOML files."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from responsive_images.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG_DIR = Path.home() / ".config" / "responsive-images"


class ConfigManager:
    """Hierarchical store for the static loader options.

    Global defaults live in ``config.toml``; every ``presets/<name>.toml``
    defines a named preset whose values win over the global ones.  A
    preset typically describes one family of images, e.g.::

        # presets/hero.toml
        sizes = [480, 960, 1920]
        placeholder = true

    Args:
        config_dir: Root directory for configuration files.
                    Defaults to ``~/.config/responsive-images/``.
    """

    def __init__(self, config_dir: Path | None = None) -> None:
        self._config_dir = config_dir or _DEFAULT_CONFIG_DIR
        self._global: dict[str, Any] = {}
        self._presets: dict[str, dict[str, Any]] = {}

    @property
    def config_dir(self) -> Path:
        """Return the configuration directory path."""
        return self._config_dir

    @property
    def presets(self) -> list[str]:
        """Return the names of all loaded presets, sorted."""
        return sorted(self._presets)

    def load(self) -> None:
        """Load ``config.toml`` and every preset from ``config_dir``.

        Missing files are silently skipped.

        Raises:
            ConfigurationError: If a file exists but is not valid TOML.
        """
        global_file = self._config_dir / "config.toml"
        if global_file.is_file():
            self._global = self._read_toml(global_file)
            logger.info("Loaded global options from %s", global_file)

        presets_dir = self._config_dir / "presets"
        if presets_dir.is_dir():
            for toml_file in sorted(presets_dir.glob("*.toml")):
                self._presets[toml_file.stem] = self._read_toml(toml_file)
                logger.info("Loaded preset '%s'", toml_file.stem)

    def get(self, key: str, *, preset: str | None = None, default: Any = None) -> Any:
        """Retrieve an option, preferring the preset value when one is given.

        Args:
            key: Option name.
            preset: Preset to consult before the global options.
            default: Fallback value when the key is not found.

        Returns:
            The option value, or *default*.
        """
        if preset and preset in self._presets:
            value = self._presets[preset].get(key)
            if value is not None:
                return value
        return self._global.get(key, default)

    def set_global(self, key: str, value: Any) -> None:
        """Set a global option (in-memory only)."""
        self._global[key] = value

    def static_options(self, preset: str | None = None) -> dict[str, Any]:
        """Return the global options overlaid with *preset*.

        Args:
            preset: Name of a loaded preset, or ``None`` for globals only.

        Raises:
            ConfigurationError: If *preset* was not loaded.
        """
        merged = dict(self._global)
        if preset is not None:
            if preset not in self._presets:
                msg = f"Unknown preset '{preset}'. Available: {self.presets}"
                raise ConfigurationError(msg)
            merged.update(self._presets[preset])
        return merged

    @staticmethod
    def _read_toml(path: Path) -> dict[str, Any]:
        try:
            with path.open("rb") as fh:
                return tomllib.load(fh)
        except tomllib.TOMLDecodeError as exc:
            msg = f"Invalid TOML in '{path}'"
            raise ConfigurationError(msg) from exc
