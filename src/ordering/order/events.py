"""Order domain events: immutable facts about order lifecycle changes.

Exactly one event is raised per status transition. Each carries the order
code and the customer so that notification handlers can address the
customer without reloading the order.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A customer placed an order."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_code = String(required=True)
    customer_id = Identifier(required=True)
    status = String(required=True)
    payment_method = String(required=True)
    item_count = Integer(required=True)
    total = Float(required=True)
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderConfirmed:
    """Payment was verified and the order moved to confirmed."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_code = String(required=True)
    customer_id = Identifier(required=True)
    gateway_payment_id = String()
    confirmed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class PreparationStarted:
    """The kitchen started preparing the order."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_code = String(required=True)
    customer_id = Identifier(required=True)
    started_at = DateTime(required=True)


@ordering.event(part_of="Order")
class CourierAssigned:
    """A delivery agent took the order; it is now out for delivery.

    Carries the delivery OTP for the customer channel only.
    """

    __version__ = 1

    order_id = Identifier(required=True)
    order_code = String(required=True)
    customer_id = Identifier(required=True)
    agent_id = Identifier(required=True)
    agent_name = String()
    agent_phone = String()
    delivery_otp = String(required=True)
    assigned_at = DateTime(required=True)


@ordering.event(part_of="Order")
class CourierProgressed:
    """The courier reported finer-grained progress while out for delivery."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_code = String(required=True)
    customer_id = Identifier(required=True)
    agent_id = Identifier(required=True)
    progress = String(required=True)
    recorded_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderDelivered:
    """The customer's OTP matched and the order was handed over."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_code = String(required=True)
    customer_id = Identifier(required=True)
    agent_id = Identifier()
    total = Float(required=True)
    delivered_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled before completion."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_code = String(required=True)
    customer_id = Identifier(required=True)
    agent_id = Identifier()
    previous_status = String(required=True)
    reason = String()
    cancelled_by = String()
    cancelled_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusOverridden:
    """An operator forced the order into a new status, bypassing guards."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_code = String(required=True)
    customer_id = Identifier(required=True)
    agent_id = Identifier()
    previous_status = String(required=True)
    new_status = String(required=True)
    delivery_otp = String()
    total = Float()
    actor = String()
    overridden_at = DateTime(required=True)
