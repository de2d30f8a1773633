"""Razorpay signature verification.

Razorpay signs a successful checkout with
HMAC-SHA256(key_secret, "<razorpay_order_id>|<razorpay_payment_id>")
and hands the hex digest to the browser, which relays it to us.
"""

import hashlib
import hmac
import os

import structlog

from ordering.errors import GatewayUnavailable
from payments.gateway.port import PaymentGateway

logger = structlog.get_logger(__name__)


def compute_signature(secret: str, gateway_order_id: str, gateway_payment_id: str) -> str:
    payload = f"{gateway_order_id}|{gateway_payment_id}"
    return hmac.new(secret.encode(), payload.encode(), hashlib.sha256).hexdigest()


class RazorpayGateway(PaymentGateway):
    """Verifies checkout signatures with the account's key secret."""

    def __init__(self, key_secret: str | None = None) -> None:
        self.key_secret = key_secret if key_secret is not None else os.getenv("RAZORPAY_KEY_SECRET")

    def verify_payment_signature(
        self,
        gateway_order_id: str,
        gateway_payment_id: str,
        signature: str,
    ) -> bool:
        if not self.key_secret:
            logger.error("Payment signature check attempted without RAZORPAY_KEY_SECRET")
            raise GatewayUnavailable("Payment gateway is not configured")
        if not isinstance(signature, str) or not signature:
            return False

        expected = compute_signature(self.key_secret, gateway_order_id, gateway_payment_id)
        return hmac.compare_digest(expected.encode(), signature.encode())
