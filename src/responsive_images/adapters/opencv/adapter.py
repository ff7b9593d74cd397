"""OpenCV-backed image adapter."""

from __future__ import annotations

import logging

import cv2
import numpy as np

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

# ── Encoders ──────────────────────────────────────────────────────────────

ENCODERS: dict[str, str] = {
    MIME_JPEG: ".jpg",
    MIME_PNG: ".png",
    MIME_WEBP: ".webp",
}

PNG_COMPRESSION = 6


def _flatten(pixels: np.ndarray, background: tuple[int, int, int]) -> np.ndarray:
    """Blend a BGRA array onto an opaque RGB *background*, returning BGR."""
    red, green, blue = background
    alpha = pixels[:, :, 3:4].astype(np.float32) / 255.0
    colour = pixels[:, :, :3].astype(np.float32)
    backdrop = np.array([blue, green, red], dtype=np.float32)
    blended = colour * alpha + backdrop * (1.0 - alpha)
    return np.clip(np.rint(blended), 0, 255).astype(np.uint8)


def _encode_params(mime: str, quality: int) -> list[int]:
    match mime:
        case "image/jpeg":
            return [cv2.IMWRITE_JPEG_QUALITY, quality]
        case "image/webp":
            return [cv2.IMWRITE_WEBP_QUALITY, quality]
        case _:
            return [cv2.IMWRITE_PNG_COMPRESSION, PNG_COMPRESSION]


class OpenCVAdapter(ImageAdapter):
    """Resize with ``cv2.resize`` and encode with ``cv2.imencode``.

    Downscaling uses area interpolation, upscaling bicubic.  Pixels stay
    in OpenCV's BGR(A) channel order throughout.
    """

    name = "opencv"
    display_name = "OpenCV"

    def _decode(self) -> np.ndarray:
        buffer = np.frombuffer(self.source, dtype=np.uint8)
        try:
            pixels = cv2.imdecode(buffer, cv2.IMREAD_UNCHANGED)
        except cv2.error as exc:
            msg = "Source image could not be decoded"
            raise AdapterError(msg) from exc
        if pixels is None:
            msg = "Source image could not be decoded"
            raise AdapterError(msg)
        return pixels

    def _read_metadata(self) -> ImageMetadata:
        height, width = self._decode().shape[:2]
        return ImageMetadata(width=width, height=height)

    def _do_resize(self, request: ResizeRequest) -> ResizeResult:
        ext = ENCODERS.get(request.mime)
        if ext is None:
            msg = f"OpenCV adapter cannot encode '{request.mime}'"
            raise AdapterError(msg)

        pixels = self._decode()
        src_height, src_width = pixels.shape[:2]
        height = scaled_height(src_width, src_height, request.width)
        interpolation = cv2.INTER_AREA if request.width < src_width else cv2.INTER_CUBIC

        try:
            resized = cv2.resize(pixels, (request.width, height), interpolation=interpolation)
            has_alpha = resized.ndim == 3 and resized.shape[2] == 4
            if has_alpha and request.options.background is not None:
                resized = _flatten(resized, parse_color(request.options.background))
            elif has_alpha and request.mime == MIME_JPEG:
                resized = cv2.cvtColor(resized, cv2.COLOR_BGRA2BGR)
            ok, encoded = cv2.imencode(ext, resized, _encode_params(request.mime, request.options.quality))
        except cv2.error as exc:
            msg = f"Failed to encode {request.width}px image as {request.mime}"
            raise AdapterError(msg) from exc

        if not ok:
            msg = f"Failed to encode {request.width}px image as {request.mime}"
            raise AdapterError(msg)

        logger.debug("OpenCV encoded %dx%d %s (%d bytes)", request.width, height, ext, encoded.size)
        return ResizeResult(data=encoded.tobytes(), width=request.width, height=height)
