"""Payment gateway factory.

``PAYMENT_GATEWAY`` picks the adapter used when none has been set:
``razorpay`` (default) verifies HMAC signatures with RAZORPAY_KEY_SECRET,
``fake`` accepts every signature and is meant for local development.
"""

import os

from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.port import PaymentGateway
from payments.gateway.razorpay_adapter import RazorpayGateway

_ADAPTERS = {
    "razorpay": RazorpayGateway,
    "fake": FakeGateway,
}

_current_gateway: PaymentGateway | None = None


def build_gateway(name: str | None = None) -> PaymentGateway:
    name = (name or os.getenv("PAYMENT_GATEWAY") or "razorpay").lower()
    try:
        return _ADAPTERS[name]()
    except KeyError:
        raise ValueError(f"Unknown payment gateway: {name}") from None


def get_gateway() -> PaymentGateway:
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = build_gateway()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    global _current_gateway
    _current_gateway = None
