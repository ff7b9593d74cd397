"""Artifact assembly — name, emit and describe each rendered file."""

from __future__ import annotations

import logging
from typing import Protocol

from responsive_images.core.datatypes import Artifact, AssetReference, ResizeResult
from responsive_images.core.events import EMITTED, EventBus
from responsive_images.loader.emit import FileEmitter
from responsive_images.loader.naming import substitute_size, webp_file_name

logger = logging.getLogger(__name__)


class Namer(Protocol):
    """Naming collaborator: expands templates and resolves file names."""

    def interpolate(self, template: str, content: bytes) -> str: ...

    def resolve(self, file_name: str) -> AssetReference: ...


def assemble(
    result: ResizeResult,
    *,
    template: str,
    namer: Namer,
    emitter: FileEmitter,
    webp: bool = False,
    event_bus: EventBus | None = None,
) -> Artifact:
    """Turn one resize result into an emitted, addressable artifact.

    The template gets the result's width and height, the namer expands
    the rest from the encoded bytes, and WebP variants have their
    extension rewritten so they never share a path with the native file.
    The file is emitted exactly once.

    Args:
        result: Encoded bytes and dimensions from the adapter.
        template: Filename template with ``[ext]`` already substituted.
        namer: Naming collaborator.
        emitter: Build-output collaborator.
        webp: Whether *result* is the WebP variant.
        event_bus: Optional bus receiving an ``"emitted"`` event.
    """
    file_name = namer.interpolate(substitute_size(template, result.width, result.height), result.data)
    if webp:
        file_name = webp_file_name(file_name)
    reference = namer.resolve(file_name)

    emitter.emit(reference.output_path, result.data)
    logger.debug("Emitted %s (%d bytes)", reference.output_path, len(result.data))
    if event_bus is not None:
        event_bus.emit(EMITTED, path=reference.output_path, size=len(result.data))

    return Artifact(path=reference, width=result.width, height=result.height)


def assemble_all(
    results: tuple[ResizeResult, ...],
    *,
    template: str,
    namer: Namer,
    emitter: FileEmitter,
    webp: bool = False,
    event_bus: EventBus | None = None,
) -> list[Artifact]:
    """Assemble *results* in order."""
    return [
        assemble(result, template=template, namer=namer, emitter=emitter, webp=webp, event_bus=event_bus)
        for result in results
    ]
