"""Delivery completion by the courier: command and handler.

The courier submits the OTP the customer reads out. Orders not assigned
to the calling agent are reported as not found.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.courier.settlement import settle_courier
from ordering.domain import ordering
from ordering.errors import NotFound
from ordering.lookup import load_order
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class CompleteDelivery:
    order_id = Identifier(required=True)
    agent_id = Identifier(required=True)
    otp = String(required=True, max_length=10)


@ordering.command_handler(part_of=Order)
class CompleteDeliveryHandler:
    @handle(CompleteDelivery)
    def complete_delivery(self, command):
        order = load_order(command.order_id)
        if order.courier_id != str(command.agent_id):
            raise NotFound(f"Order {command.order_id} not found")

        order.verify_delivery_otp(command.otp, actor=command.agent_id)
        amount = settle_courier(order)
        current_domain.repository_for(Order).add(order)
        logger.info(
            "Order delivered",
            order_id=str(order.id),
            verified_by="courier",
            agent_id=command.agent_id,
            commission=float(amount),
        )
        return str(order.id)
