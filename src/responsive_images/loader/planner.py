"""Size planning — turn size options into the list of widths to render."""

from __future__ import annotations

import logging
import math
import sys
from typing import Any

from responsive_images.core.exceptions import PlanningError
from responsive_images.loader.options import LoaderOptions

logger = logging.getLogger(__name__)

# Requested when nothing is configured: clamps to the native width.
UNBOUNDED = sys.maxsize

DEFAULT_STEPS = 4


def _to_number(name: str, value: Any) -> float:
    if isinstance(value, bool):
        msg = f"'{name}' must be numeric, got {value!r}"
        raise PlanningError(msg)
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        msg = f"'{name}' must be numeric, got {value!r}"
        raise PlanningError(msg) from exc
    if not math.isfinite(number):
        msg = f"'{name}' must be finite, got {value!r}"
        raise PlanningError(msg)
    return number


def generate_range(minimum: Any, maximum: Any, steps: Any = None) -> list[int]:
    """Return *steps* widths spread evenly from *minimum* to *maximum*.

    Every width is rounded up, so ``generate_range(10, 100, 4)`` yields
    ``[10, 40, 70, 100]``.

    Raises:
        PlanningError: If a value is not numeric or *steps* is below 2.
    """
    low = math.floor(_to_number("min", minimum))
    high = math.floor(_to_number("max", maximum))
    count = DEFAULT_STEPS if steps is None else math.floor(_to_number("steps", steps))
    if count < 2:
        msg = f"'steps' must be at least 2 to span min..max, got {steps!r}"
        raise PlanningError(msg)

    span = high - low
    return [math.ceil(low + span * step / (count - 1)) for step in range(count)]


def raw_sizes(options: LoaderOptions) -> list[Any]:
    """Pick the raw size source by priority and normalise it to a list.

    Priority: query ``size``/``sizes`` > ``min``+``max`` range > static
    ``size``/``sizes`` > ``[UNBOUNDED]``.  An explicitly empty list stays
    empty, which the loader treats as pass-through.
    """
    if options.query_sizes is not None:
        source = options.query_sizes
    elif options.min is not None and options.max is not None:
        source = generate_range(options.min, options.max, options.steps)
    elif options.sizes is not None:
        source = options.sizes
    else:
        source = [UNBOUNDED]

    if isinstance(source, list | tuple):
        return list(source)
    return [source]


def requested_widths(sizes: list[Any]) -> list[int]:
    """Parse raw size values into whole pixel widths, flooring fractions.

    Raises:
        PlanningError: If a size is not numeric or not positive.
    """
    widths: list[int] = []
    for size in sizes:
        requested = math.floor(_to_number("size", size))
        if requested < 1:
            msg = f"Sizes must be positive, got {size!r}"
            raise PlanningError(msg)
        widths.append(requested)
    return widths


def clamp_widths(widths: list[int], source_width: int) -> list[int]:
    """Clamp each width to *source_width* and drop repeats, keeping first-seen order.

    Args:
        widths: Requested widths, as returned by :func:`requested_widths`.
        source_width: Native width of the source image.

    Returns:
        The planned widths.
    """
    planned: list[int] = []
    seen: set[int] = set()
    for requested in widths:
        width = min(source_width, requested)
        if width in seen:
            continue
        seen.add(width)
        planned.append(width)
    return planned


def plan(options: LoaderOptions, source_width: int) -> list[int]:
    """Resolve *options* into the ordered, deduplicated widths to render.

    Shorthand for ``clamp_widths(requested_widths(raw_sizes(options)), source_width)``.
    The loader runs these steps separately so malformed sizes fail before
    the source image is decoded.

    Raises:
        PlanningError: If the size options are malformed.
    """
    widths = clamp_widths(requested_widths(raw_sizes(options)), source_width)
    logger.info("Planned widths %s for a %dpx wide source", widths, source_width)
    return widths
