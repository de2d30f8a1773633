"""Configurable fake payment gateway for development and testing.

This adapter simulates signature verification without a real key secret.
It can be configured at runtime to accept, reject or be unreachable:
- Manual API testing via /payments/gateway/configure
- Automated tests with predictable outcomes
"""

from ordering.errors import GatewayUnavailable
from payments.gateway.port import PaymentGateway


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.available: bool = True
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, available: bool = True) -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.available = available

    def verify_payment_signature(
        self,
        gateway_order_id: str,
        gateway_payment_id: str,
        signature: str,
    ) -> bool:
        self.calls.append(
            {
                "method": "verify_payment_signature",
                "gateway_order_id": gateway_order_id,
                "gateway_payment_id": gateway_payment_id,
                "signature": signature,
            }
        )
        if not self.available:
            raise GatewayUnavailable("Payment gateway is unreachable")
        return self.should_succeed
