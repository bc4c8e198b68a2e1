"""Tests for EventBus and ErrorHandler."""

import logging
from dataclasses import dataclass
from unittest.mock import Mock

from cardbrowser.errors import TransportError
from cardbrowser.errors.handler import ErrorHandler, ErrorOccurredEvent, ErrorSeverity
from cardbrowser.events.bus import Event, EventBus


@dataclass(kw_only=True)
class _PingEvent(Event):
    value: int = 0


class TestEventBus:
    def test_publish_reaches_subscribers_in_order(self):
        bus = EventBus()
        received = []
        bus.subscribe(_PingEvent, lambda e: received.append(("a", e.value)))
        bus.subscribe(_PingEvent, lambda e: received.append(("b", e.value)))

        bus.publish(_PingEvent(value=1))

        assert received == [("a", 1), ("b", 1)]

    def test_cancelled_subscription_skipped(self):
        bus = EventBus()
        received = []
        sub = bus.subscribe(_PingEvent, lambda e: received.append(e.value))
        sub.cancel()

        bus.publish(_PingEvent(value=1))

        assert received == []
        assert bus.subscriber_count(_PingEvent) == 0

    def test_unsubscribe(self):
        bus = EventBus()
        sub = bus.subscribe(_PingEvent, lambda e: None)
        bus.unsubscribe(sub)
        assert bus.subscriber_count(_PingEvent) == 0

    def test_failing_handler_does_not_block_others(self):
        logger = Mock()
        bus = EventBus(logger=logger)
        received = []

        def _fail(event):
            raise RuntimeError("boom")

        bus.subscribe(_PingEvent, _fail)
        bus.subscribe(_PingEvent, lambda e: received.append(e.value))
        bus.publish(_PingEvent(value=7))

        assert received == [7]
        logger.error.assert_called_once()


class TestErrorHandler:
    def test_logs_publishes_and_notifies(self):
        logger = Mock()
        bus = EventBus()
        events = []
        bus.subscribe(ErrorOccurredEvent, events.append)
        handler = ErrorHandler(logger, bus)
        ui = Mock()
        handler.register_ui_callback(ui)

        handler.handle(TransportError("offline"), context={"page": 2})

        assert logger.log.call_args.args[0] == logging.ERROR
        assert events[0].context == {"page": 2}
        assert events[0].severity is ErrorSeverity.ERROR
        ui.assert_called_once_with("offline", ErrorSeverity.ERROR)

    def test_warning_does_not_reach_ui(self):
        logger = Mock()
        handler = ErrorHandler(logger, EventBus())
        ui = Mock()
        handler.register_ui_callback(ui)

        handler.handle(TransportError("slow"), ErrorSeverity.WARNING)

        assert logger.log.call_args.args[0] == logging.WARNING
        ui.assert_not_called()

    def test_counts_handled_errors(self):
        handler = ErrorHandler(Mock(), EventBus())
        handler.handle(TransportError("a"))
        handler.handle(TransportError("b"), ErrorSeverity.INFO)
        assert handler.handled_count == 2


class TestEventBusHierarchy:
    def test_base_subscription_receives_subclass_events(self):
        bus = EventBus()
        received = []
        bus.subscribe(Event, lambda e: received.append(type(e).__name__))

        bus.publish(_PingEvent(value=1))

        assert received == ["_PingEvent"]

    def test_same_handler_subscribed_twice_unsubscribes_once(self):
        bus = EventBus()
        received = []
        handler = received.append
        first = bus.subscribe(_PingEvent, handler)
        bus.subscribe(_PingEvent, handler)

        bus.unsubscribe(first)
        bus.publish(_PingEvent(value=2))

        assert len(received) == 1
