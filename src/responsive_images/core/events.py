"""EventBus — observer used to report resize progress and file emission."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

EventHandler = Callable[..., None]

# Events fired by the loader.
PROGRESS = "progress"
EMITTED = "emitted"


class EventBus:
    """Publish/subscribe hub between the loader and its front ends.

    The loader fires ``"progress"`` after every finished resize and
    ``"emitted"`` after every file handed to the emitter.  A failing
    handler is logged and skipped so that reporting can never abort
    an invocation.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event: str, handler: EventHandler) -> None:
        """Register *handler* to be called whenever *event* fires.

        Args:
            event: Event name, e.g. ``"progress"``.
            handler: Callable receiving the event payload as keyword arguments.
        """
        self._handlers[event].append(handler)

    def unsubscribe(self, event: str, handler: EventHandler) -> None:
        """Remove a previously registered handler.

        Args:
            event: Event name.
            handler: The handler to remove.
        """
        try:
            self._handlers[event].remove(handler)
        except ValueError:
            logger.warning("Handler %r was not subscribed to event %r", handler, event)

    def emit(self, event: str, **payload: Any) -> None:
        """Fire *event*, passing *payload* to every subscribed handler."""
        for handler in list(self._handlers.get(event, [])):
            try:
                handler(**payload)
            except Exception:
                logger.exception("Handler %r failed for event %r", handler, event)
