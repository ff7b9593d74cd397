"""Shared value objects passed between the loader stages and the adapters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

Color = str | int | tuple[int, ...]


@dataclass(frozen=True)
class ImageMetadata:
    """Native dimensions of a source image as reported by an adapter."""

    width: int
    height: int
    format: str | None = None


@dataclass(frozen=True)
class AdapterOptions:
    """Encoder settings shared by every resize of one invocation."""

    quality: int = 85
    background: Color | None = None


@dataclass(frozen=True)
class ResizeRequest:
    """A single resize job handed to an adapter."""

    width: int
    mime: str
    options: AdapterOptions = field(default_factory=AdapterOptions)


@dataclass(frozen=True)
class ResizeResult:
    """Encoded bytes produced by an adapter plus their true dimensions."""

    data: bytes
    width: int
    height: int


@dataclass(frozen=True)
class RenderResult:
    """Everything one render pass produced, in planned-width order."""

    results: tuple[ResizeResult, ...]
    webp_results: tuple[ResizeResult, ...]
    placeholder: ResizeResult | None = None


@dataclass(frozen=True)
class AssetReference:
    """Where an emitted file lives and how it is addressed at runtime.

    Attributes:
        output_path: Path handed to the file emitter.
        url: Public URL of the file.  When ``runtime_public_path`` is set
             the URL is relative and must be prefixed by the bundler's
             runtime public path.
        runtime_public_path: Whether ``url`` still needs the runtime prefix.
    """

    output_path: str
    url: str
    runtime_public_path: bool = False

    def __str__(self) -> str:
        return self.url


@dataclass(frozen=True)
class Artifact:
    """One emitted derivative file plus its addressing metadata."""

    path: AssetReference
    width: int
    height: int

    @property
    def src_fragment(self) -> str:
        """Return the ``srcset`` entry for this artifact (``"<url> <width>w"``)."""
        return f"{self.path.url} {self.width}w"

    def to_dict(self) -> dict[str, Any]:
        """Return the artifact as a plain mapping."""
        return {
            "path": self.path.url,
            "width": self.width,
            "height": self.height,
            "srcFragment": self.src_fragment,
        }


@dataclass(frozen=True)
class ImageDescriptor:
    """Final result of one loader invocation."""

    src_set: str
    src_set_webp: str
    images: tuple[Artifact, ...]
    src: AssetReference
    width: int
    height: int
    placeholder: str | None = None
    webp_images: tuple[Artifact, ...] = ()
    passthrough: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Return the descriptor as a JSON-serialisable mapping."""
        data: dict[str, Any] = {
            "srcSet": self.src_set,
            "srcSetWebP": self.src_set_webp,
            "images": [image.to_dict() for image in self.images],
            "src": self.src.url,
            "width": self.width,
            "height": self.height,
        }
        if self.placeholder is not None:
            data["placeholder"] = self.placeholder
        return data

    def __str__(self) -> str:
        return self.src.url
