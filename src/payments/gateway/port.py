"""Payment gateway port (abstract interface).

Defines the contract that payment gateway adapters must implement. The
ordering core only needs to know whether a gateway order/payment pair
carries an authentic signature.
"""

from abc import ABC, abstractmethod


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def verify_payment_signature(
        self,
        gateway_order_id: str,
        gateway_payment_id: str,
        signature: str,
    ) -> bool:
        """Return True when ``signature`` authenticates the order/payment pair.

        Raises ``GatewayUnavailable`` when the gateway cannot verify at all.
        """
        ...
