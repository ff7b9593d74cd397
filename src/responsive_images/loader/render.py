"""Render pipeline — fan every planned resize out to the adapter and gather them."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from responsive_images.core.base_adapter import MIME_WEBP, ImageAdapter
from responsive_images.core.datatypes import AdapterOptions, RenderResult, ResizeRequest, ResizeResult
from responsive_images.core.events import PROGRESS, EventBus

logger = logging.getLogger(__name__)

NATIVE = "native"
WEBP = "webp"
PLACEHOLDER = "placeholder"


@dataclass(frozen=True)
class RenderSlot:
    """One resize request tagged with its position in the plan."""

    index: int
    kind: str
    request: ResizeRequest


def build_slots(
    widths: list[int],
    mime: str,
    options: AdapterOptions,
    *,
    placeholder_size: int | None = None,
) -> list[RenderSlot]:
    """Lay out the resize requests for one invocation.

    Each planned width gets a native-format slot followed by a WebP slot;
    the placeholder, when requested, takes the last slot.

    Args:
        widths: Planned widths, in order.
        mime: Target mime type for the native variants and the placeholder.
        options: Encoder settings shared by every request.
        placeholder_size: Placeholder width, or ``None`` for no placeholder.
    """
    slots: list[RenderSlot] = []
    for width in widths:
        slots.append(RenderSlot(len(slots), NATIVE, ResizeRequest(width=width, mime=mime, options=options)))
        slots.append(RenderSlot(len(slots), WEBP, ResizeRequest(width=width, mime=MIME_WEBP, options=options)))
    if placeholder_size is not None:
        slots.append(
            RenderSlot(len(slots), PLACEHOLDER, ResizeRequest(width=placeholder_size, mime=mime, options=options))
        )
    return slots


async def render(
    adapter: ImageAdapter,
    widths: list[int],
    mime: str,
    options: AdapterOptions,
    *,
    placeholder_size: int | None = None,
    event_bus: EventBus | None = None,
) -> RenderResult:
    """Run every resize of the plan concurrently and collect them by slot.

    Results are correlated to their slot index, never to completion order.
    The first failing resize cancels the rest of the batch and is re-raised
    unchanged.

    Args:
        adapter: Image adapter bound to the source image.
        widths: Planned widths, in order.
        mime: Target mime type for the native variants.
        options: Encoder settings.
        placeholder_size: Placeholder width, or ``None`` to skip it.
        event_bus: Optional bus receiving a ``"progress"`` event per resize.

    Returns:
        A ``RenderResult`` whose native and WebP tuples follow *widths*.
    """
    slots = build_slots(widths, mime, options, placeholder_size=placeholder_size)
    total = len(slots)
    finished: list[int] = []

    async def run_slot(slot: RenderSlot) -> tuple[int, ResizeResult]:
        result = await adapter.resize(slot.request)
        finished.append(slot.index)
        logger.debug("Resized %s slot %d to %dx%d", slot.kind, slot.index, result.width, result.height)
        if event_bus is not None:
            event_bus.emit(
                PROGRESS,
                current=len(finished),
                total=total,
                message=f"Rendered {slot.kind} {result.width}w ({len(finished)}/{total})",
            )
        return slot.index, result

    logger.info("Dispatching %d resizes for widths %s", total, widths)
    tasks = [asyncio.ensure_future(run_slot(slot)) for slot in slots]
    try:
        outcomes = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        raise

    by_index = dict(outcomes)
    native = tuple(by_index[slot.index] for slot in slots if slot.kind == NATIVE)
    webp = tuple(by_index[slot.index] for slot in slots if slot.kind == WEBP)
    placeholder = next((by_index[slot.index] for slot in slots if slot.kind == PLACEHOLDER), None)

    return RenderResult(results=native, webp_results=webp, placeholder=placeholder)
