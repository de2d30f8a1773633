"""Ordering operations exposed to request handlers.

Each operation processes one command synchronously while holding the
locks of every order and agent it may write, then returns the reloaded
aggregates. Concurrent conflicting operations on the same order therefore
run one after the other: the first commits, the second observes the new
state and fails its guard instead of overwriting.
"""

import json
from contextlib import contextmanager

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.courier.assignment import AssignCourier
from ordering.courier.availability import SetAgentAvailability, UpdateAgentLocation
from ordering.courier.completion import CompleteDelivery
from ordering.courier.courier import DeliveryAgent
from ordering.courier.earnings import EarningsSummary, get_earnings_summary
from ordering.courier.progress import RecordCourierProgress
from ordering.courier.registration import EnsureAgentProfile, UpdateAgentProfile
from ordering.lookup import load_agent, load_order
from ordering.locks import agent_key, locks, order_key, phone_key
from ordering.order.cancellation import CancelOrder
from ordering.order.creation import PlaceOrder
from ordering.order.delivery import VerifyDeliveryOtp
from ordering.order.order import Order, PaymentMethod
from ordering.order.payment import VerifyPayment
from ordering.order.preparation import StartPreparation
from ordering.order.status import OverrideOrderStatus


def _courier_of(order_id: str) -> str | None:
    try:
        return current_domain.repository_for(Order).get(order_id).courier_id
    except ObjectNotFoundError:
        return None


@contextmanager
def _order_scope(order_id: str):
    """Lock an order together with whichever courier currently holds it.

    The courier can change between reading it and taking the order lock,
    so the read is repeated under the lock until it is stable.
    """
    agent_id = _courier_of(order_id)
    while True:
        with locks.hold(order_key(order_id), agent_key(agent_id)):
            current = _courier_of(order_id)
            if current == agent_id:
                yield
                return
        agent_id = current


def _process(command):
    return current_domain.process(command, asynchronous=False)


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
def create_order(
    customer_id: str,
    items: list[dict],
    address: dict,
    payment_method: str = PaymentMethod.ONLINE.value,
    customer: dict | None = None,
    notes: str | None = None,
) -> Order:
    order_id = _process(
        PlaceOrder(
            customer_id=customer_id,
            items=json.dumps(items),
            address=json.dumps(address),
            payment_method=payment_method,
            customer=json.dumps(customer) if customer else None,
            notes=notes,
        )
    )
    return load_order(order_id)


def verify_payment(
    order_id: str,
    caller_id: str,
    gateway_order_id: str,
    gateway_payment_id: str,
    signature: str,
) -> Order:
    with locks.hold(order_key(order_id)):
        _process(
            VerifyPayment(
                order_id=order_id,
                caller_id=caller_id,
                gateway_order_id=gateway_order_id,
                gateway_payment_id=gateway_payment_id,
                signature=signature,
            )
        )
    return load_order(order_id)


def start_preparation(order_id: str, actor: str | None = None) -> Order:
    with locks.hold(order_key(order_id)):
        _process(StartPreparation(order_id=order_id, actor=actor))
    return load_order(order_id)


def update_status(order_id: str, target_status: str, actor: str | None = None) -> Order:
    with _order_scope(order_id):
        _process(OverrideOrderStatus(order_id=order_id, status=target_status, actor=actor))
    return load_order(order_id)


def cancel_order(
    order_id: str,
    reason: str | None = None,
    cancelled_by: str | None = None,
    customer_id: str | None = None,
) -> Order:
    with _order_scope(order_id):
        _process(
            CancelOrder(
                order_id=order_id,
                reason=reason,
                cancelled_by=cancelled_by,
                customer_id=customer_id,
            )
        )
    return load_order(order_id)


def verify_delivery_otp(order_id: str, caller_id: str, code: str) -> Order:
    with _order_scope(order_id):
        _process(VerifyDeliveryOtp(order_id=order_id, caller_id=caller_id, otp=code))
    return load_order(order_id)


# ---------------------------------------------------------------------------
# Couriers
# ---------------------------------------------------------------------------
def assign_courier(order_id: str, agent_id: str) -> tuple[Order, DeliveryAgent]:
    with locks.hold(order_key(order_id), agent_key(agent_id)):
        _process(AssignCourier(order_id=order_id, agent_id=agent_id))
    return load_order(order_id), load_agent(agent_id)


def record_courier_progress(order_id: str, agent_id: str, progress: str) -> Order:
    with locks.hold(order_key(order_id), agent_key(agent_id)):
        _process(RecordCourierProgress(order_id=order_id, agent_id=agent_id, progress=progress))
    return load_order(order_id)


def complete_delivery(order_id: str, agent_id: str, code: str) -> Order:
    with locks.hold(order_key(order_id), agent_key(agent_id)):
        _process(CompleteDelivery(order_id=order_id, agent_id=agent_id, otp=code))
    return load_order(order_id)


def ensure_agent_profile(
    agent_id: str,
    name: str | None = None,
    phone: str | None = None,
    email: str | None = None,
) -> DeliveryAgent:
    with locks.hold(agent_key(agent_id), phone_key(phone)):
        _process(EnsureAgentProfile(agent_id=agent_id, name=name, phone=phone, email=email))
    return load_agent(agent_id)


def update_agent_profile(agent_id: str, bank_details: dict | None = None, **changes) -> DeliveryAgent:
    with locks.hold(agent_key(agent_id), phone_key(changes.get("phone"))):
        _process(
            UpdateAgentProfile(
                agent_id=agent_id,
                bank_details=json.dumps(bank_details) if bank_details else None,
                **changes,
            )
        )
    return load_agent(agent_id)


def set_agent_availability(agent_id: str, online: bool) -> DeliveryAgent:
    with locks.hold(agent_key(agent_id)):
        _process(SetAgentAvailability(agent_id=agent_id, online=online))
    return load_agent(agent_id)


def update_agent_location(agent_id: str, latitude: float, longitude: float) -> DeliveryAgent:
    with locks.hold(agent_key(agent_id)):
        _process(UpdateAgentLocation(agent_id=agent_id, latitude=latitude, longitude=longitude))
    return load_agent(agent_id)


def earnings_summary(agent_id: str) -> EarningsSummary:
    return get_earnings_summary(agent_id)
