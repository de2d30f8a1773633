"""Order lifecycle notifications: event handler feeding the notification sink.

One notification per lifecycle event, addressed to the customer. Delivery
is best-effort: the transition has already committed when these handlers
run, and a failing sink is logged and otherwise ignored.
"""

import structlog
from protean.utils.mixins import handle

from notifications.sink import get_sink
from notifications.templates import get_template
from notifications.templates.courier_progress import CourierProgressTemplate
from ordering.domain import ordering
from ordering.order.events import (
    CourierAssigned,
    CourierProgressed,
    OrderCancelled,
    OrderConfirmed,
    OrderDelivered,
    OrderPlaced,
    OrderStatusOverridden,
    PreparationStarted,
)
from ordering.order.order import Order, OrderStatus

logger = structlog.get_logger(__name__)


def publish_to_customer(customer_id: str, template, context: dict) -> bool:
    """Render ``template`` and hand it to the sink. Returns False on failure."""
    rendered = template.render(context)
    try:
        get_sink().publish(
            user_id=str(customer_id),
            title=rendered["title"],
            message=rendered["message"],
            category=template.category,
            icon=template.icon,
            metadata={
                "order_id": context.get("order_id"),
                "order_code": context.get("order_code"),
                "status": context.get("status"),
            },
        )
    except Exception:
        logger.exception(
            "Notification delivery failed",
            customer_id=str(customer_id),
            order_id=context.get("order_id"),
        )
        return False
    return True


def _status_context(event, status: str, **extra) -> dict:
    context = {
        "order_id": str(event.order_id),
        "order_code": event.order_code,
        "status": status,
    }
    context.update({k: v for k, v in extra.items() if v is not None})
    return context


@ordering.event_handler(part_of=Order)
class OrderLifecycleNotifier:
    """Tells customers about every status change of their order."""

    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        publish_to_customer(
            event.customer_id,
            get_template(event.status),
            _status_context(event, event.status),
        )

    @handle(OrderConfirmed)
    def on_order_confirmed(self, event: OrderConfirmed) -> None:
        status = OrderStatus.CONFIRMED.value
        publish_to_customer(event.customer_id, get_template(status), _status_context(event, status))

    @handle(PreparationStarted)
    def on_preparation_started(self, event: PreparationStarted) -> None:
        status = OrderStatus.PREPARING.value
        publish_to_customer(event.customer_id, get_template(status), _status_context(event, status))

    @handle(CourierAssigned)
    def on_courier_assigned(self, event: CourierAssigned) -> None:
        # the OTP goes to the customer only
        status = OrderStatus.OUT_FOR_DELIVERY.value
        publish_to_customer(
            event.customer_id,
            get_template(status),
            _status_context(event, status, otp=event.delivery_otp, courier_name=event.agent_name),
        )

    @handle(CourierProgressed)
    def on_courier_progressed(self, event: CourierProgressed) -> None:
        publish_to_customer(
            event.customer_id,
            CourierProgressTemplate,
            _status_context(event, OrderStatus.OUT_FOR_DELIVERY.value, progress=event.progress),
        )

    @handle(OrderDelivered)
    def on_order_delivered(self, event: OrderDelivered) -> None:
        status = OrderStatus.DELIVERED.value
        publish_to_customer(event.customer_id, get_template(status), _status_context(event, status))

    @handle(OrderCancelled)
    def on_order_cancelled(self, event: OrderCancelled) -> None:
        status = OrderStatus.CANCELLED.value
        publish_to_customer(
            event.customer_id,
            get_template(status),
            _status_context(event, status, reason=event.reason),
        )

    @handle(OrderStatusOverridden)
    def on_status_overridden(self, event: OrderStatusOverridden) -> None:
        publish_to_customer(
            event.customer_id,
            get_template(event.new_status),
            _status_context(event, event.new_status, otp=event.delivery_otp),
        )
