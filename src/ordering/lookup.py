"""Repository lookups that surface missing records as ``NotFound``."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.courier.courier import DeliveryAgent
from ordering.errors import NotFound
from ordering.order.order import Order


def load_order(order_id: str) -> Order:
    try:
        return current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError:
        raise NotFound(f"Order {order_id} not found") from None


def load_agent(agent_id: str) -> DeliveryAgent:
    try:
        return current_domain.repository_for(DeliveryAgent).get(agent_id)
    except ObjectNotFoundError:
        raise NotFound(f"Delivery agent {agent_id} not found") from None
