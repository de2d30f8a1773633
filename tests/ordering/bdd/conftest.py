"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from ordering.courier.courier import DeliveryAgent
from ordering.courier.events import AgentAvailabilityChanged, EarningsCredited
from ordering.errors import FoodstreamError
from ordering.order.events import (
    CourierAssigned,
    CourierProgressed,
    OrderCancelled,
    OrderConfirmed,
    OrderDelivered,
    OrderPlaced,
    OrderStatusOverridden,
    PreparationStarted,
)
from ordering.order.order import Order
from ordering.order.pricing import calculate_fees
from ordering.settings.port import DeliverySettings
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

# Map event name strings to classes for dynamic lookup in Then steps
_ORDER_EVENT_CLASSES = {
    "OrderPlaced": OrderPlaced,
    "OrderConfirmed": OrderConfirmed,
    "PreparationStarted": PreparationStarted,
    "CourierAssigned": CourierAssigned,
    "CourierProgressed": CourierProgressed,
    "OrderDelivered": OrderDelivered,
    "OrderCancelled": OrderCancelled,
    "OrderStatusOverridden": OrderStatusOverridden,
}

_AGENT_EVENT_CLASSES = {
    "AgentAvailabilityChanged": AgentAvailabilityChanged,
    "EarningsCredited": EarningsCredited,
}

# Phrase used in feature files -> error code
_ERROR_CODES = {
    "an invalid transition": "INVALID_TRANSITION",
    "an invalid OTP": "INVALID_OTP",
    "an already assigned": "ALREADY_ASSIGNED",
    "an order not ready": "ORDER_NOT_READY",
    "an agent unavailable": "AGENT_UNAVAILABLE",
}


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def customer_id():
    return "cust-001"


@pytest.fixture()
def error():
    """Container for the failure raised by a When step."""
    return {"exc": None}


def _place(customer_id, payment_method):
    return Order.place(
        customer_id=customer_id,
        items_data=[{"menu_item_id": "paneer-tikka", "name": "Paneer Tikka", "quantity": 2, "unit_price": 250.0}],
        address_data={"line1": "12 Station Road", "city": "Balangir"},
        fees=calculate_fees(500, DeliverySettings()),
        payment_method=payment_method,
    )


# ---------------------------------------------------------------------------
# Given steps: Order
# ---------------------------------------------------------------------------
@given("an online order was placed", target_fixture="order")
def online_order(customer_id):
    return _place(customer_id, "online")


@given("a cash on delivery order was placed", target_fixture="order")
def cod_order(customer_id):
    return _place(customer_id, "cod")


@given("the payment was verified", target_fixture="order")
def paid_order(order):
    order.confirm_payment("order_GW1", "pay_GW1", "sig")
    return order


@given("the kitchen started preparing", target_fixture="order")
def preparing_order(order):
    order.start_preparation(actor="admin-1")
    return order


@given("a courier accepted the order", target_fixture="order")
def assigned_order(order, agent):
    agent.accept_order(str(order.id))
    order.assign_courier(str(agent.agent_id), name=agent.name, phone=agent.phone)
    return order


@given("the customer confirmed the handoff", target_fixture="order")
def delivered_order(order):
    order.verify_delivery_otp(order.delivery_otp, actor=order.customer_id)
    return order


@given("the order was cancelled", target_fixture="order")
def cancelled_order(order):
    order.cancel(reason="Changed my mind", cancelled_by=order.customer_id)
    return order


@given("the order events are cleared", target_fixture="order")
def cleared_events(order):
    order._events.clear()
    return order


# ---------------------------------------------------------------------------
# Given steps: Delivery agent
# ---------------------------------------------------------------------------
@given("an online delivery agent", target_fixture="agent")
def online_agent():
    agent = DeliveryAgent.register("agent-001", name="Ravi", phone="9000000001")
    agent.go_online()
    agent._events.clear()
    return agent


@given("an offline delivery agent", target_fixture="agent")
def offline_agent():
    agent = DeliveryAgent.register("agent-001", name="Ravi", phone="9000000001")
    agent._events.clear()
    return agent


@given("another online delivery agent", target_fixture="rival")
def rival_agent():
    rival = DeliveryAgent.register("agent-002", name="Sita", phone="9000000002")
    rival.go_online()
    return rival


# ---------------------------------------------------------------------------
# Then steps: Order
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(order, status):
    assert order.status == status


@then(parsers.cfparse('the payment status is "{status}"'))
def payment_status_is(order, status):
    assert order.payment_status == status


@then(parsers.cfparse("an {event_type} order event is raised"))
@then(parsers.cfparse("a {event_type} order event is raised"))
def order_event_raised(order, event_type):
    event_cls = _ORDER_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in order._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in order._events]}"


@then("no order event is raised")
def no_order_event(order):
    assert order._events == []


@then(parsers.cfparse("the order action fails with {kind} error"))
def order_action_fails(error, kind):
    assert error["exc"] is not None, "Expected the action to fail but it succeeded"
    if kind == "a validation":
        assert isinstance(error["exc"], ValidationError)
        return
    assert isinstance(error["exc"], FoodstreamError)
    assert error["exc"].code == _ERROR_CODES[kind]


# ---------------------------------------------------------------------------
# Then steps: Delivery agent
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the agent status is "{status}"'))
def agent_status_is(agent, status):
    assert agent.status == status


@then(parsers.cfparse("a {event_type} agent event is raised"))
@then(parsers.cfparse("an {event_type} agent event is raised"))
def agent_event_raised(agent, event_type):
    event_cls = _AGENT_EVENT_CLASSES[event_type]
    assert any(isinstance(e, event_cls) for e in agent._events)
