"""Notification sink port: abstract interface for user-facing delivery.

The ordering core publishes one message per lifecycle event and never
waits on, or fails because of, delivery.
"""

from abc import ABC, abstractmethod
from enum import Enum


class NotificationCategory(Enum):
    ORDER_UPDATE = "order_update"
    NEW_ORDER = "new_order"
    RESTAURANT_STATUS = "restaurant_status"
    DELIVERY_UPDATE = "delivery_update"
    PROMOTION = "promotion"
    INFO = "info"


class NotificationSink(ABC):
    @abstractmethod
    def publish(
        self,
        user_id: str,
        title: str,
        message: str,
        category: str = NotificationCategory.INFO.value,
        icon: str = "fa-bell",
        metadata: dict | None = None,
    ) -> None:
        """Hand a notification to the delivery channel."""
        ...
