"""Administrative status override: command and handler.

Operators may force an order into any other status. Terminal orders stay
terminal. Forcing ``delivered`` still credits the courier and forcing
``cancelled`` releases them.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.courier.settlement import release_courier, settle_courier
from ordering.domain import ordering
from ordering.lookup import load_order
from ordering.order.order import Order, OrderStatus

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class OverrideOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=50)
    actor = String(max_length=255)


@ordering.command_handler(part_of=Order)
class OverrideOrderStatusHandler:
    @handle(OverrideOrderStatus)
    def override_status(self, command):
        order = load_order(command.order_id)
        previous = order.override_status(command.status, actor=command.actor)

        if order.status == OrderStatus.DELIVERED.value:
            settle_courier(order)
        elif order.status == OrderStatus.CANCELLED.value:
            release_courier(order)

        current_domain.repository_for(Order).add(order)
        logger.info(
            "Order status overridden",
            order_id=str(order.id),
            previous_status=previous,
            status=order.status,
            actor=command.actor,
        )
        return str(order.id)
