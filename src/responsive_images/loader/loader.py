"""Loader entry point — one source image in, one image descriptor out."""

from __future__ import annotations

import asyncio
import logging
from pathlib import PurePath

from responsive_images.core.base_adapter import ImageAdapter
from responsive_images.core.datatypes import ImageDescriptor
from responsive_images.core.events import EMITTED, EventBus
from responsive_images.core.registry import AdapterRegistry
from responsive_images.loader.assemble import Namer, assemble_all
from responsive_images.loader.descriptor import PASSTHROUGH_SIZE, build, build_passthrough
from responsive_images.loader.emit import FileEmitter
from responsive_images.loader.naming import TemplateNamer, substitute_ext, substitute_size
from responsive_images.loader.options import LoaderOptions, resolve_mime
from responsive_images.loader.planner import clamp_widths, raw_sizes, requested_widths
from responsive_images.loader.render import render

logger = logging.getLogger(__name__)


async def load(
    content: bytes,
    resource_path: str | PurePath,
    options: LoaderOptions,
    *,
    emitter: FileEmitter,
    adapter: ImageAdapter | None = None,
    namer: Namer | None = None,
    event_bus: EventBus | None = None,
) -> ImageDescriptor:
    """Produce every responsive derivative of one source image.

    Steps: resolve the target format, plan widths against the source's
    native width, render native and WebP variants (plus the optional
    placeholder) concurrently, then emit and describe the results.  Files
    are only emitted once every resize has succeeded.

    When the loader is disabled or no sizes are configured, the source
    bytes are emitted unchanged and described with stand-in dimensions.

    Args:
        content: Raw bytes of the source image.
        resource_path: Path of the source, used for ``[name]``/``[path]``
                       and for the format when ``options.format`` is unset.
        options: Parsed loader options.
        emitter: Collaborator persisting emitted files.
        adapter: Image adapter to use; built from ``options.adapter`` if omitted.
        namer: Naming collaborator; a ``TemplateNamer`` if omitted.
        event_bus: Optional bus for progress and emission events.

    Returns:
        The ``ImageDescriptor`` for the source image.

    Raises:
        ConfigurationError: If the format or any option is unusable.
        PlanningError: If the size options are malformed.
        Exception: Whatever the adapter raised for the first failing resize.
    """
    mime, ext = resolve_mime(options, resource_path)
    template = substitute_ext(options.name, ext)
    if namer is None:
        namer = TemplateNamer(
            resource_path=resource_path,
            output_path=options.output_path,
            public_path=options.public_path,
            context=options.context,
        )

    sizes = [] if options.disable else requested_widths(raw_sizes(options))
    if not sizes:
        logger.info("Passing %s through unchanged", resource_path)
        file_name = namer.interpolate(substitute_size(template, PASSTHROUGH_SIZE, PASSTHROUGH_SIZE), content)
        reference = namer.resolve(file_name)
        emitter.emit(reference.output_path, content)
        if event_bus is not None:
            event_bus.emit(EMITTED, path=reference.output_path, size=len(content))
        return build_passthrough(reference)

    if adapter is None:
        adapter = AdapterRegistry().create(options.adapter, content)

    metadata = await adapter.metadata()
    widths = clamp_widths(sizes, metadata.width)
    logger.info("Rendering %s at widths %s (%s)", resource_path, widths, mime)

    rendered = await render(
        adapter,
        widths,
        mime,
        options.adapter_options,
        placeholder_size=options.placeholder_size if options.placeholder else None,
        event_bus=event_bus,
    )

    artifacts = assemble_all(rendered.results, template=template, namer=namer, emitter=emitter, event_bus=event_bus)
    webp_artifacts = assemble_all(
        rendered.webp_results, template=template, namer=namer, emitter=emitter, webp=True, event_bus=event_bus
    )
    logger.info("Emitted %d files for %s", len(artifacts) + len(webp_artifacts), resource_path)

    return build(artifacts, webp_artifacts, placeholder=rendered.placeholder, mime=mime)


def load_sync(
    content: bytes,
    resource_path: str | PurePath,
    options: LoaderOptions,
    *,
    emitter: FileEmitter,
    adapter: ImageAdapter | None = None,
    namer: Namer | None = None,
    event_bus: EventBus | None = None,
) -> ImageDescriptor:
    """Blocking wrapper around :func:`load` for callers without an event loop."""
    return asyncio.run(
        load(content, resource_path, options, emitter=emitter, adapter=adapter, namer=namer, event_bus=event_bus)
    )
