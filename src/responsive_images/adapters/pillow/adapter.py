"""Pillow-backed image adapter — the default backend."""

from __future__ import annotations

import io
import logging

from PIL import Image, UnidentifiedImageError

from responsive_images.core.base_adapter import (
    MIME_JPEG,
    MIME_PNG,
    MIME_WEBP,
    ImageAdapter,
    parse_color,
    scaled_height,
)
from responsive_images.core.datatypes import ImageMetadata, ResizeRequest, ResizeResult
from responsive_images.core.exceptions import AdapterError

logger = logging.getLogger(__name__)

PIL_FORMATS: dict[str, str] = {
    MIME_JPEG: "JPEG",
    MIME_PNG: "PNG",
    MIME_WEBP: "WEBP",
}


def _has_alpha(img: Image.Image) -> bool:
    return img.mode in {"RGBA", "LA", "PA"} or (img.mode == "P" and "transparency" in img.info)


def _flatten(img: Image.Image, background: tuple[int, int, int]) -> Image.Image:
    """Composite *img* onto an opaque background colour."""
    rgba = img.convert("RGBA")
    canvas = Image.new("RGB", rgba.size, background)
    canvas.paste(rgba, mask=rgba.getchannel("A"))
    return canvas


class PillowAdapter(ImageAdapter):
    """Resize and encode with Pillow.

    Every resize decodes its own copy of the source so that concurrent
    calls never share an ``Image`` object.
    """

    name = "pillow"
    display_name = "Pillow"

    def _open(self) -> Image.Image:
        try:
            img = Image.open(io.BytesIO(self.source))
            img.load()
        except (UnidentifiedImageError, OSError) as exc:
            msg = "Source image could not be decoded"
            raise AdapterError(msg) from exc
        return img

    def _read_metadata(self) -> ImageMetadata:
        try:
            with Image.open(io.BytesIO(self.source)) as img:
                return ImageMetadata(width=img.width, height=img.height, format=img.format)
        except (UnidentifiedImageError, OSError) as exc:
            msg = "Source image could not be decoded"
            raise AdapterError(msg) from exc

    def _do_resize(self, request: ResizeRequest) -> ResizeResult:
        fmt = PIL_FORMATS.get(request.mime)
        if fmt is None:
            msg = f"Pillow adapter cannot encode '{request.mime}'"
            raise AdapterError(msg)

        img = self._open()
        height = scaled_height(img.width, img.height, request.width)
        resized = img.resize((request.width, height), resample=Image.Resampling.LANCZOS)

        options = request.options
        if options.background is not None and _has_alpha(resized):
            resized = _flatten(resized, parse_color(options.background))

        save_kwargs: dict[str, object] = {}
        match fmt:
            case "JPEG":
                if resized.mode not in {"RGB", "L"}:
                    resized = resized.convert("RGB")
                save_kwargs["quality"] = options.quality
            case "WEBP":
                if resized.mode not in {"RGB", "RGBA"}:
                    resized = resized.convert("RGBA" if _has_alpha(resized) else "RGB")
                save_kwargs["quality"] = options.quality
            case "PNG":
                save_kwargs["optimize"] = True

        buffer = io.BytesIO()
        try:
            resized.save(buffer, format=fmt, **save_kwargs)
        except (OSError, ValueError) as exc:
            msg = f"Failed to encode {request.width}px image as {request.mime}"
            raise AdapterError(msg) from exc

        logger.debug("Pillow encoded %dx%d %s (%d bytes)", request.width, height, fmt, buffer.tell())
        return ResizeResult(data=buffer.getvalue(), width=request.width, height=height)
