"""Notification sink factory.

Provides get_sink() / set_sink() to swap the delivery channel. Defaults
to LoggingNotificationSink; tests install FakeNotificationSink.
"""

from notifications.sink.log_adapter import LoggingNotificationSink
from notifications.sink.port import NotificationSink

_current_sink: NotificationSink | None = None


def get_sink() -> NotificationSink:
    """Return the current notification sink."""
    global _current_sink
    if _current_sink is None:
        _current_sink = LoggingNotificationSink()
    return _current_sink


def set_sink(sink: NotificationSink) -> None:
    """Override the active notification sink (useful for tests)."""
    global _current_sink
    _current_sink = sink


def reset_sink() -> None:
    """Reset to the default sink."""
    global _current_sink
    _current_sink = None
