"""Descriptor building — fold artifacts into the final image descriptor."""

from __future__ import annotations

import base64
from collections.abc import Sequence

from responsive_images.core.datatypes import Artifact, AssetReference, ImageDescriptor, ResizeResult
from responsive_images.core.exceptions import ResponsiveImagesError

SRCSET_SEPARATOR = ","

# Stand-in dimensions for pass-through output; the source is never measured.
PASSTHROUGH_SIZE = 100


def placeholder_data_uri(data: bytes, mime: str) -> str:
    """Encode placeholder bytes as a ``data:`` URI."""
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def build_src_set(artifacts: Sequence[Artifact]) -> str:
    """Join the ``srcset`` fragments of *artifacts* in order."""
    return SRCSET_SEPARATOR.join(artifact.src_fragment for artifact in artifacts)


def build(
    artifacts: Sequence[Artifact],
    webp_artifacts: Sequence[Artifact],
    *,
    placeholder: ResizeResult | None = None,
    mime: str,
) -> ImageDescriptor:
    """Build the descriptor for a rendered image.

    ``src``, ``width`` and ``height`` mirror the first artifact of the
    plan.  The WebP ``srcset`` never lists more entries than the native
    one, and the placeholder only ever appears inline.

    Args:
        artifacts: Native-format artifacts in planned-width order.
        webp_artifacts: WebP artifacts in planned-width order.
        placeholder: Placeholder resize result, if one was requested.
        mime: Mime type the placeholder was encoded with.

    Raises:
        ResponsiveImagesError: If there are no artifacts to describe.
    """
    if not artifacts:
        msg = "Cannot build an image descriptor without artifacts"
        raise ResponsiveImagesError(msg)

    first = artifacts[0]
    return ImageDescriptor(
        src_set=build_src_set(artifacts),
        src_set_webp=build_src_set(webp_artifacts[: len(artifacts)]),
        images=tuple(artifacts),
        webp_images=tuple(webp_artifacts[: len(artifacts)]),
        src=first.path,
        width=first.width,
        height=first.height,
        placeholder=placeholder_data_uri(placeholder.data, mime) if placeholder is not None else None,
    )


def build_passthrough(reference: AssetReference) -> ImageDescriptor:
    """Describe an image emitted unchanged, with fixed stand-in dimensions."""
    artifact = Artifact(path=reference, width=PASSTHROUGH_SIZE, height=PASSTHROUGH_SIZE)
    return ImageDescriptor(
        src_set=reference.url,
        src_set_webp="",
        images=(artifact,),
        src=reference,
        width=PASSTHROUGH_SIZE,
        height=PASSTHROUGH_SIZE,
        passthrough=True,
    )
