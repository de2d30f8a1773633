"""Notification sink that writes each notification to the structured log.

Used when no delivery channel is configured, e.g. in development.
"""

import structlog

from notifications.sink.port import NotificationCategory, NotificationSink

logger = structlog.get_logger(__name__)


class LoggingNotificationSink(NotificationSink):
    def publish(
        self,
        user_id: str,
        title: str,
        message: str,
        category: str = NotificationCategory.INFO.value,
        icon: str = "fa-bell",
        metadata: dict | None = None,
    ) -> None:
        logger.info(
            "Notification published",
            user_id=user_id,
            title=title,
            message=message,
            category=category,
            icon=icon,
            metadata=metadata or {},
        )
