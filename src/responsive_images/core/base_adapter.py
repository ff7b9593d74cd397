"""ImageAdapter ABC — the capability every image backend implements."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod

from PIL import ImageColor

from responsive_images.core.datatypes import Color, ImageMetadata, ResizeRequest, ResizeResult
from responsive_images.core.exceptions import ConfigurationError

MIME_JPEG = "image/jpeg"
MIME_PNG = "image/png"
MIME_WEBP = "image/webp"


class ImageAdapter(ABC):
    """Template Method base for image backends.

    The loader only ever awaits :meth:`metadata` and :meth:`resize`.  The
    default implementations run the blocking ``_read_metadata`` and
    ``_do_resize`` hooks in a worker thread so that every resize of an
    invocation can be in flight at the same time.  Backends with a native
    async API may override the coroutines instead.

    Args:
        source: Raw bytes of the source image.
    """

    # ── metadata (override in subclass) ────────────────────────
    name: str
    display_name: str
    supported_mimes: frozenset[str] = frozenset({MIME_JPEG, MIME_PNG, MIME_WEBP})

    def __init__(self, source: bytes) -> None:
        self.source = source

    # ── public coroutine API ──────────────────────────────────
    async def metadata(self) -> ImageMetadata:
        """Return the native dimensions of the source image."""
        return await asyncio.to_thread(self._read_metadata)

    async def resize(self, request: ResizeRequest) -> ResizeResult:
        """Resize the source to ``request.width`` and encode it as ``request.mime``."""
        return await asyncio.to_thread(self._do_resize, request)

    # ── blocking hooks ─────────────────────────────────────────
    @abstractmethod
    def _read_metadata(self) -> ImageMetadata:
        """Decode just enough of the source to report its size.

        Raises:
            AdapterError: If the source cannot be decoded.
        """
        ...

    @abstractmethod
    def _do_resize(self, request: ResizeRequest) -> ResizeResult:
        """Produce the encoded bytes for one resize request.

        Must not mutate shared state: several calls run concurrently
        against the same adapter.

        Raises:
            AdapterError: If decoding or encoding fails.
        """
        ...


# ── Helpers shared by the bundled adapters ───────────────────────────────


def scaled_height(src_width: int, src_height: int, width: int) -> int:
    """Return the height matching *width* at the source aspect ratio."""
    return max(1, round(src_height * width / src_width))


def parse_color(color: Color) -> tuple[int, int, int]:
    """Turn a background option into an RGB triple.

    Accepts CSS colour strings (``"#fff"``, ``"white"``, ``"rgb(0,0,0)"``),
    ``0xRRGGBB`` integers and 3/4-tuples.

    Raises:
        ConfigurationError: If the colour cannot be understood.
    """
    if isinstance(color, bool):
        msg = f"Invalid background colour {color!r}"
        raise ConfigurationError(msg)
    if isinstance(color, int):
        if not 0 <= color <= 0xFFFFFF:
            msg = f"Background colour {color:#x} is outside 0x000000-0xFFFFFF"
            raise ConfigurationError(msg)
        return (color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF
    if isinstance(color, tuple):
        if len(color) not in (3, 4):
            msg = f"Background colour tuple must have 3 or 4 items, got {color!r}"
            raise ConfigurationError(msg)
        return color[0], color[1], color[2]
    try:
        rgb = ImageColor.getrgb(str(color))
    except ValueError as exc:
        msg = f"Invalid background colour {color!r}"
        raise ConfigurationError(msg) from exc
    return rgb[0], rgb[1], rgb[2]
