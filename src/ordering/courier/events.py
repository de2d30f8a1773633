"""Delivery agent domain events."""

from protean.fields import DateTime, Float, Identifier, String

from ordering.domain import ordering


@ordering.event(part_of="DeliveryAgent")
class AgentRegistered:
    """A delivery agent profile was created on first access."""

    __version__ = 1

    agent_id = Identifier(required=True)
    name = String()
    registered_at = DateTime(required=True)


@ordering.event(part_of="DeliveryAgent")
class AgentAvailabilityChanged:
    """The agent went online, went offline, or started/finished a delivery."""

    __version__ = 1

    agent_id = Identifier(required=True)
    previous_status = String(required=True)
    status = String(required=True)
    changed_at = DateTime(required=True)


@ordering.event(part_of="DeliveryAgent")
class EarningsCredited:
    """Commission for a completed delivery was credited to the agent."""

    __version__ = 1

    agent_id = Identifier(required=True)
    order_id = Identifier(required=True)
    amount = Float(required=True)
    order_total = Float(required=True)
    earned_at = DateTime(required=True)
