"""Fake notification sink: records published notifications for testing."""

from notifications.sink.port import NotificationCategory, NotificationSink


class FakeNotificationSink(NotificationSink):
    """Sink that records notifications in memory for test assertions."""

    def __init__(self):
        self.published: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Notification delivery failed"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Notification delivery failed"):
        """Configure the fake sink behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def publish(
        self,
        user_id: str,
        title: str,
        message: str,
        category: str = NotificationCategory.INFO.value,
        icon: str = "fa-bell",
        metadata: dict | None = None,
    ) -> None:
        if not self.should_succeed:
            raise ConnectionError(self.failure_reason)

        self.published.append(
            {
                "user_id": user_id,
                "title": title,
                "message": message,
                "category": category,
                "icon": icon,
                "metadata": metadata or {},
            }
        )

    def reset(self):
        """Clear published notifications (useful between tests)."""
        self.published.clear()
        self.should_succeed = True
        self.failure_reason = "Notification delivery failed"
