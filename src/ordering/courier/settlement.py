"""Courier bookkeeping shared by every path that ends a delivery."""

import structlog
from protean.utils.globals import current_domain

from ordering.courier.courier import DeliveryAgent
from ordering.lookup import load_agent

logger = structlog.get_logger(__name__)


def settle_courier(order):
    """Credit the assigned courier for a delivered order.

    Returns the commission credited, or None when no courier was assigned.
    """
    if order.courier is None:
        return None
    agent = load_agent(order.courier_id)
    amount = agent.credit_delivery(str(order.id), order.pricing.total)
    current_domain.repository_for(DeliveryAgent).add(agent)
    logger.info(
        "Courier credited",
        agent_id=order.courier_id,
        order_id=str(order.id),
        amount=float(amount),
    )
    return amount


def release_courier(order) -> None:
    """Free the courier of an order that will not be delivered."""
    if order.courier is None:
        return
    agent = load_agent(order.courier_id)
    agent.release_order(str(order.id))
    current_domain.repository_for(DeliveryAgent).add(agent)
    logger.info("Courier released", agent_id=order.courier_id, order_id=str(order.id))
