"""Agent availability toggle and location pings."""

import structlog
from protean import handle
from protean.fields import Boolean, Float, Identifier
from protean.utils.globals import current_domain

from ordering.courier.courier import DeliveryAgent
from ordering.domain import ordering
from ordering.lookup import load_agent

logger = structlog.get_logger(__name__)


@ordering.command(part_of="DeliveryAgent")
class SetAgentAvailability:
    agent_id = Identifier(required=True)
    online = Boolean(required=True)


@ordering.command(part_of="DeliveryAgent")
class UpdateAgentLocation:
    agent_id = Identifier(required=True)
    latitude = Float(required=True, min_value=-90, max_value=90)
    longitude = Float(required=True, min_value=-180, max_value=180)


@ordering.command_handler(part_of=DeliveryAgent)
class AgentAvailabilityHandler:
    @handle(SetAgentAvailability)
    def set_availability(self, command):
        agent = load_agent(command.agent_id)
        if command.online:
            agent.go_online()
        else:
            agent.go_offline()
        current_domain.repository_for(DeliveryAgent).add(agent)
        logger.info("Agent availability changed", agent_id=command.agent_id, status=agent.status)
        return agent.status

    @handle(UpdateAgentLocation)
    def update_location(self, command):
        agent = load_agent(command.agent_id)
        agent.update_location(command.latitude, command.longitude)
        current_domain.repository_for(DeliveryAgent).add(agent)
        return str(agent.agent_id)
