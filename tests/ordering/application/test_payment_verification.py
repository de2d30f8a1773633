"""Application tests for online payment verification."""

from uuid import uuid4

import pytest
from ordering import operations
from ordering.errors import Forbidden, GatewayUnavailable, InvalidSignature, InvalidTransition, NotFound
from ordering.order import queries
from ordering.order.order import OrderStatus, PaymentStatus
from payments.gateway import set_gateway
from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.razorpay_adapter import RazorpayGateway, compute_signature

SECRET = "test-key-secret"


def _place(customer_id, address, payment_method="online"):
    return operations.create_order(
        customer_id,
        [{"menu_item_id": "paneer-tikka", "quantity": 1}],
        address,
        payment_method=payment_method,
    )


def _verify(order, caller_id, gateway_order_id="order_RZP1", gateway_payment_id="pay_RZP1", signature=None):
    signature = signature or compute_signature(SECRET, gateway_order_id, gateway_payment_id)
    return operations.verify_payment(
        str(order.id),
        caller_id=caller_id,
        gateway_order_id=gateway_order_id,
        gateway_payment_id=gateway_payment_id,
        signature=signature,
    )


@pytest.fixture()
def customer_id():
    return f"cust-{uuid4().hex[:8]}"


@pytest.fixture(autouse=True)
def _gateway(gateway, menu):
    """Every test here runs against the signing gateway and the seeded menu."""
    yield


class TestVerifyPayment:
    def test_valid_signature_confirms_order(self, customer_id, address):
        order = _verify(_place(customer_id, address), customer_id)
        assert order.status == OrderStatus.CONFIRMED.value
        assert order.payment_status == PaymentStatus.PAID.value
        assert order.payment.gateway_order_id == "order_RZP1"
        assert order.payment.gateway_payment_id == "pay_RZP1"
        assert order.payment.paid_at is not None

    def test_history_records_payment(self, customer_id, address):
        order = _verify(_place(customer_id, address), customer_id)
        latest = sorted(order.history, key=lambda e: e.changed_at)[-1]
        assert latest.to_status == OrderStatus.CONFIRMED.value
        assert latest.note == "payment verified"

    def test_tampered_signature_rejected(self, customer_id, address):
        order = _place(customer_id, address)
        with pytest.raises(InvalidSignature):
            _verify(order, customer_id, signature="0" * 64)

        reloaded = queries.get_order(str(order.id))
        assert reloaded.status == OrderStatus.PENDING.value
        assert reloaded.payment_status == PaymentStatus.UNPAID.value

    def test_only_owner_may_verify(self, customer_id, address):
        order = _place(customer_id, address)
        with pytest.raises(Forbidden):
            _verify(order, "someone-else")

    def test_second_verification_rejected(self, customer_id, address):
        order = _place(customer_id, address)
        _verify(order, customer_id)
        with pytest.raises(InvalidTransition):
            _verify(order, customer_id)

    def test_cod_order_cannot_be_paid_online(self, customer_id, address):
        order = _place(customer_id, address, payment_method="cod")
        with pytest.raises(InvalidTransition):
            _verify(order, customer_id)

    def test_cancelled_order_cannot_be_paid(self, customer_id, address):
        order = _place(customer_id, address)
        operations.cancel_order(str(order.id), customer_id=customer_id)
        with pytest.raises(InvalidTransition):
            _verify(order, customer_id)

    def test_unknown_order(self, customer_id):
        with pytest.raises(NotFound):
            operations.verify_payment(
                "missing-order",
                caller_id=customer_id,
                gateway_order_id="o",
                gateway_payment_id="p",
                signature="s",
            )


class TestGatewayFailures:
    def test_unconfigured_gateway(self, customer_id, address):
        order = _place(customer_id, address)
        set_gateway(RazorpayGateway(key_secret=""))
        with pytest.raises(GatewayUnavailable):
            _verify(order, customer_id)
        assert queries.get_order(str(order.id)).status == OrderStatus.PENDING.value

    def test_gateway_outage(self, customer_id, address):
        order = _place(customer_id, address)
        fake = FakeGateway()
        fake.configure(should_succeed=True, available=False)
        set_gateway(fake)
        with pytest.raises(GatewayUnavailable):
            _verify(order, customer_id)
