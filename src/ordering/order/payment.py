"""Payment verification: command and handler.

The gateway signature must authenticate the order/payment pair before the
order is stamped paid. Only the owning customer may submit it.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.errors import Forbidden, InvalidSignature
from ordering.lookup import load_order
from ordering.order.order import Order
from payments.gateway import get_gateway

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class VerifyPayment:
    """Confirm an online order with the gateway's checkout signature."""

    order_id = Identifier(required=True)
    caller_id = Identifier(required=True)
    gateway_order_id = String(required=True, max_length=255)
    gateway_payment_id = String(required=True, max_length=255)
    signature = String(required=True, max_length=255)


@ordering.command_handler(part_of=Order)
class VerifyPaymentHandler:
    @handle(VerifyPayment)
    def verify_payment(self, command):
        order = load_order(command.order_id)
        if str(order.customer_id) != str(command.caller_id):
            raise Forbidden("Not authorized to pay for this order")

        if not get_gateway().verify_payment_signature(
            command.gateway_order_id,
            command.gateway_payment_id,
            command.signature,
        ):
            logger.warning("Payment signature rejected", order_id=str(order.id))
            raise InvalidSignature("Payment verification failed")

        order.confirm_payment(
            gateway_order_id=command.gateway_order_id,
            gateway_payment_id=command.gateway_payment_id,
            signature=command.signature,
        )
        current_domain.repository_for(Order).add(order)
        logger.info("Payment verified", order_id=str(order.id), order_code=order.order_code)
        return str(order.id)
