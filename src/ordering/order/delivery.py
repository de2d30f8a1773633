"""OTP-verified handoff initiated by the customer: command and handler.

Orders the caller does not own are reported as not found.
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
class VerifyDeliveryOtp:
    order_id = Identifier(required=True)
    caller_id = Identifier(required=True)
    otp = String(required=True, max_length=10)


@ordering.command_handler(part_of=Order)
class VerifyDeliveryOtpHandler:
    @handle(VerifyDeliveryOtp)
    def verify_delivery_otp(self, command):
        order = load_order(command.order_id)
        if str(order.customer_id) != str(command.caller_id):
            raise NotFound(f"Order {command.order_id} not found")

        order.verify_delivery_otp(command.otp, actor=command.caller_id)
        settle_courier(order)
        current_domain.repository_for(Order).add(order)
        logger.info("Order delivered", order_id=str(order.id), verified_by="customer")
        return str(order.id)
