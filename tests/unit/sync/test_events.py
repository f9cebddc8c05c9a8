"""Unit tests for sync.events module."""

import logging

from unittest.mock import MagicMock

from wikipages.sync.events import EditError, EventChannel, Ready, RunningEnded, RunningStarted


class TestEventChannel:
    """Test cases for EventChannel."""

    def test_delivers_to_subscribers_of_the_class(self):
        channel = EventChannel()
        on_ready = MagicMock()
        on_started = MagicMock()
        channel.subscribe(Ready, on_ready)
        channel.subscribe(RunningStarted, on_started)

        event = Ready()
        channel.emit(event)

        on_ready.assert_called_once_with(event)
        on_started.assert_not_called()

    def test_subscribers_run_in_subscription_order(self):
        channel = EventChannel()
        calls = []
        channel.subscribe(RunningEnded, lambda event: calls.append("first"))
        channel.subscribe(RunningEnded, lambda event: calls.append("second"))

        channel.emit(RunningEnded())

        assert calls == ["first", "second"]

    def test_unsubscribe(self):
        channel = EventChannel()
        callback = MagicMock()
        unsubscribe = channel.subscribe(Ready, callback)

        unsubscribe()
        unsubscribe()
        channel.emit(Ready())

        callback.assert_not_called()

    def test_failing_subscriber_does_not_stop_others(self, caplog):
        channel = EventChannel()
        after = MagicMock()
        channel.subscribe(EditError, MagicMock(side_effect=RuntimeError("boom")))
        channel.subscribe(EditError, after)

        with caplog.at_level(logging.ERROR, logger="wikipages.sync.events"):
            channel.emit(EditError(unit=MagicMock(), error=ValueError("x")))

        after.assert_called_once()
        assert "EditError" in caplog.text

    def test_emit_without_subscribers(self):
        EventChannel().emit(Ready())
