"""Loader options — parsing of static options and per-resource query strings."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import PurePath
from typing import Any
from urllib.parse import parse_qsl

from responsive_images.core.base_adapter import MIME_JPEG, MIME_PNG, MIME_WEBP
from responsive_images.core.datatypes import AdapterOptions, Color
from responsive_images.core.exceptions import ConfigurationError
from responsive_images.core.registry import DEFAULT_ADAPTER

logger = logging.getLogger(__name__)

# ── Constants ─────────────────────────────────────────────────────────────

MIMES: dict[str, str] = {
    "jpg": MIME_JPEG,
    "jpeg": MIME_JPEG,
    "png": MIME_PNG,
    "webp": MIME_WEBP,
}

EXTS: dict[str, str] = {
    MIME_JPEG: "jpg",
    MIME_PNG: "png",
    MIME_WEBP: "webp",
}

DEFAULT_NAME = "[hash]-[width].[ext]"
DEFAULT_QUALITY = 85
DEFAULT_PLACEHOLDER_SIZE = 40

# camelCase spellings used in bundler configs → field names.
_ALIASES: dict[str, str] = {
    "placeholderSize": "placeholder_size",
    "outputPath": "output_path",
    "publicPath": "public_path",
}

_TRUE = frozenset({"true", "1", "yes", "on"})
_FALSE = frozenset({"false", "0", "no", "off", ""})

PathOption = str | Callable[[str], str] | None


# ── Query parsing ─────────────────────────────────────────────────────────


def parse_query(query: str) -> dict[str, Any]:
    """Parse a resource query such as ``?sizes[]=100&sizes[]=200&placeholder``.

    Supported forms:

    * ``key=value`` pairs; repeated keys or a ``key[]`` suffix build lists,
      and ``sizes=100,200`` is split on commas.
    * Bare keys (``?placeholder``) become ``True``.
    * A JSON object (``?{"sizes": [100, 200]}``).

    Args:
        query: The query string, with or without the leading ``?``.

    Returns:
        A mapping of option names to raw values.

    Raises:
        ConfigurationError: If a JSON query does not decode to an object.
    """
    query = query.removeprefix("?")
    if not query:
        return {}

    if query.startswith("{"):
        try:
            parsed = json.loads(query)
        except json.JSONDecodeError as exc:
            msg = f"Resource query is not valid JSON: {query!r}"
            raise ConfigurationError(msg) from exc
        if not isinstance(parsed, dict):
            msg = f"Resource query must be a JSON object, got {type(parsed).__name__}"
            raise ConfigurationError(msg)
        return parsed

    result: dict[str, Any] = {}
    for part in query.split("&"):
        if not part:
            continue
        if "=" not in part:
            result[part] = True
            continue
        ((key, value),) = parse_qsl(part, keep_blank_values=True)
        if key.endswith("[]"):
            result.setdefault(key[:-2], []).append(value)
        elif key in result:
            existing = result[key]
            result[key] = [*existing, value] if isinstance(existing, list) else [existing, value]
        elif key in {"size", "sizes"} and "," in value:
            result[key] = [v for v in value.split(",") if v]
        else:
            result[key] = value
    return result


# ── Value coercion ────────────────────────────────────────────────────────


def _as_bool(name: str, value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int | float):
        return bool(value)
    if isinstance(value, str) and value.strip().lower() in _TRUE | _FALSE:
        return value.strip().lower() in _TRUE
    msg = f"Option '{name}' must be a boolean, got {value!r}"
    raise ConfigurationError(msg)


def _as_int(name: str, value: Any, default: int) -> int:
    """Parse an integer option; missing or zero values fall back to *default*."""
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        msg = f"Option '{name}' must be a number, got {value!r}"
        raise ConfigurationError(msg)
    try:
        parsed = int(float(value))
    except (TypeError, ValueError) as exc:
        msg = f"Option '{name}' must be a number, got {value!r}"
        raise ConfigurationError(msg) from exc
    return parsed or default


def _size_source(mapping: Mapping[str, Any]) -> Any:
    if mapping.get("size") is not None:
        return mapping["size"]
    return mapping.get("sizes")


# ── Options ───────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class LoaderOptions:
    """Fully parsed configuration for one loader invocation.

    Size-related values are kept raw: the planner owns their numeric
    validation so that malformed sizes surface as ``PlanningError``.

    Attributes:
        query_sizes: ``size``/``sizes`` from the resource query.
        sizes: ``size``/``sizes`` from the static options.
        min: Lower bound of a generated range.
        max: Upper bound of a generated range.
        steps: Number of widths in a generated range (``None`` → 4).
        quality: JPEG/WebP quality, 1-100.
        background: Colour used to flatten transparency.
        format: Explicit output format (``jpg``, ``jpeg``, ``png``, ``webp``).
        placeholder: Whether to inline a low-resolution placeholder.
        placeholder_size: Width of the placeholder in pixels.
        disable: Skip resizing and emit the source bytes unchanged.
        name: Output filename template.
        output_path: Prefix or callable mapping file names to output paths.
        public_path: Prefix or callable mapping file names to public URLs.
        context: Directory the ``[path]`` token is relative to.
        adapter: Registry name of the image adapter.
    """

    query_sizes: Any = None
    sizes: Any = None
    min: Any = None
    max: Any = None
    steps: Any = None
    quality: int = DEFAULT_QUALITY
    background: Color | None = None
    format: str | None = None
    placeholder: bool = False
    placeholder_size: int = DEFAULT_PLACEHOLDER_SIZE
    disable: bool = False
    name: str = DEFAULT_NAME
    output_path: PathOption = None
    public_path: PathOption = None
    context: str | None = None
    adapter: str = DEFAULT_ADAPTER

    @classmethod
    def from_mapping(
        cls,
        static: Mapping[str, Any] | None = None,
        query: Mapping[str, Any] | None = None,
    ) -> LoaderOptions:
        """Merge static options with a resource query and parse the result.

        Query values override static ones; query ``size``/``sizes`` are
        additionally kept apart because they outrank a generated range.

        Args:
            static: Options from the build configuration.
            query: Options parsed from the resource query.

        Raises:
            ConfigurationError: If an option has an unusable type or value.
        """
        static = {_ALIASES.get(k, k): v for k, v in (static or {}).items()}
        query = {_ALIASES.get(k, k): v for k, v in (query or {}).items()}
        merged = {**static, **query}

        quality = _as_int("quality", merged.get("quality"), DEFAULT_QUALITY)
        if not 1 <= quality <= 100:
            msg = f"Option 'quality' must be between 1 and 100, got {quality}"
            raise ConfigurationError(msg)

        placeholder_size = _as_int("placeholder_size", merged.get("placeholder_size"), DEFAULT_PLACEHOLDER_SIZE)
        if placeholder_size < 1:
            msg = f"Option 'placeholder_size' must be positive, got {placeholder_size}"
            raise ConfigurationError(msg)

        fmt = merged.get("format")
        if fmt is not None:
            fmt = str(fmt).lower()

        return cls(
            query_sizes=_size_source(query),
            sizes=_size_source(static),
            min=merged.get("min"),
            max=merged.get("max"),
            steps=merged.get("steps"),
            quality=quality,
            background=merged.get("background"),
            format=fmt,
            placeholder=_as_bool("placeholder", merged.get("placeholder")),
            placeholder_size=placeholder_size,
            disable=_as_bool("disable", merged.get("disable")),
            name=str(merged.get("name") or DEFAULT_NAME),
            output_path=merged.get("output_path"),
            public_path=merged.get("public_path"),
            context=merged.get("context"),
            adapter=str(merged.get("adapter") or DEFAULT_ADAPTER),
        )

    @property
    def adapter_options(self) -> AdapterOptions:
        """Return the encoder settings handed to every resize."""
        return AdapterOptions(quality=self.quality, background=self.background)


def resolve_mime(options: LoaderOptions, resource_path: str | PurePath) -> tuple[str, str]:
    """Determine the target mime type and file extension.

    An explicit ``format`` wins; otherwise the extension of *resource_path*
    decides.

    Returns:
        A ``(mime, ext)`` pair, e.g. ``("image/jpeg", "jpg")``.

    Raises:
        ConfigurationError: If the format or extension is not supported.
    """
    if options.format:
        if options.format not in MIMES:
            msg = f"Format '{options.format}' not supported. Choose from: {sorted(MIMES)}"
            raise ConfigurationError(msg)
        mime = MIMES[options.format]
        return mime, EXTS[mime]

    ext = PurePath(resource_path).suffix.lstrip(".").lower()
    mime = MIMES.get(ext)
    if mime is None:
        msg = f"No mime type for file with extension '{ext}' supported"
        raise ConfigurationError(msg)
    return mime, ext
