"""Order cancellation: command and handler.

Cancels an order from any non-terminal state. When ``customer_id`` is
given the caller is a customer and must own the order.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.courier.settlement import release_courier
from ordering.domain import ordering
from ordering.errors import Forbidden
from ordering.lookup import load_order
from ordering.order.order import Order


@ordering.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    reason = String(max_length=500)
    cancelled_by = String(max_length=255)
    customer_id = Identifier()


@ordering.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        order = load_order(command.order_id)
        if command.customer_id and str(order.customer_id) != str(command.customer_id):
            raise Forbidden("Not authorized to cancel this order")

        order.cancel(reason=command.reason, cancelled_by=command.cancelled_by or command.customer_id)
        release_courier(order)
        current_domain.repository_for(Order).add(order)
        return str(order.id)
