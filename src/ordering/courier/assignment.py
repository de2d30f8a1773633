"""Courier assignment: command and handler.

Runs under the per-order and per-agent locks taken by
``ordering.operations``; the guards here are what the losing side of a
race observes.
"""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ordering.courier.courier import DeliveryAgent
from ordering.domain import ordering
from ordering.lookup import load_agent, load_order
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class AssignCourier:
    """A delivery agent accepts a ready order."""

    order_id = Identifier(required=True)
    agent_id = Identifier(required=True)


@ordering.command_handler(part_of=Order)
class AssignCourierHandler:
    @handle(AssignCourier)
    def assign_courier(self, command):
        order = load_order(command.order_id)
        agent = load_agent(command.agent_id)

        order.assert_assignable()
        agent.accept_order(str(order.id))
        order.assign_courier(str(agent.agent_id), name=agent.name, phone=agent.phone)

        current_domain.repository_for(Order).add(order)
        current_domain.repository_for(DeliveryAgent).add(agent)
        logger.info("Courier assigned", order_id=str(order.id), agent_id=str(agent.agent_id))
        return str(order.id)
