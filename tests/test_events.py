"""Integration tests for the EventBus."""

from __future__ import annotations

from typing import Any

import pytest

from responsive_images.core.events import EMITTED, PROGRESS, EventBus


class TestEventBusSubscribeEmit:
    """Tests for basic subscribe/emit behaviour."""

    def test_handler_receives_payload(self) -> None:
        """A subscribed handler receives all keyword arguments."""
        bus = EventBus()
        received: list[dict[str, Any]] = []
        bus.subscribe(PROGRESS, lambda **kw: received.append(kw))

        bus.emit(PROGRESS, current=1, total=4, message="Rendered native 50w (1/4)")

        assert received == [{"current": 1, "total": 4, "message": "Rendered native 50w (1/4)"}]

    def test_different_events_are_independent(self) -> None:
        """Subscribing to one event does not receive another."""
        bus = EventBus()
        received: list[str] = []
        bus.subscribe(EMITTED, lambda **_kw: received.append("emitted"))

        bus.emit(PROGRESS, current=1, total=1, message="")

        assert received == []

    def test_emit_without_subscribers_is_noop(self) -> None:
        """Emitting an event with no subscribers does not raise."""
        EventBus().emit(EMITTED, path="a.png", size=3)


class TestEventBusUnsubscribe:
    """Tests for handler removal."""

    def test_unsubscribed_handler_not_called(self) -> None:
        """After unsubscribe, the handler is no longer invoked."""
        bus = EventBus()
        calls: list[int] = []

        def handler(**_kw: Any) -> None:
            calls.append(1)

        bus.subscribe(EMITTED, handler)
        bus.unsubscribe(EMITTED, handler)
        bus.emit(EMITTED, path="a.png", size=1)

        assert calls == []

    def test_unsubscribe_unknown_handler_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        """Removing a handler that was never subscribed logs a warning."""
        EventBus().unsubscribe(PROGRESS, lambda **_kw: None)

        assert "was not subscribed" in caplog.text


class TestEventBusErrorHandling:
    """Tests for handler error isolation."""

    def test_failing_handler_does_not_break_others(self, caplog: pytest.LogCaptureFixture) -> None:
        """A handler that raises does not prevent subsequent handlers."""
        bus = EventBus()
        results: list[str] = []

        def bad_handler(**_kw: Any) -> None:
            msg = "boom"
            raise RuntimeError(msg)

        bus.subscribe(EMITTED, bad_handler)
        bus.subscribe(EMITTED, lambda **_kw: results.append("ok"))

        bus.emit(EMITTED, path="a.png", size=1)

        assert results == ["ok"]
        assert "boom" in caplog.text
