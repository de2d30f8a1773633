"""Delivery agent profile: lazy creation and updates."""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.courier.courier import DeliveryAgent
from ordering.domain import ordering
from ordering.lookup import load_agent

logger = structlog.get_logger(__name__)


@ordering.command(part_of="DeliveryAgent")
class EnsureAgentProfile:
    """Return the agent's profile, creating it on first access."""

    agent_id = Identifier(required=True)
    name = String(max_length=100)
    phone = String(max_length=20)
    email = String(max_length=254)


@ordering.command(part_of="DeliveryAgent")
class UpdateAgentProfile:
    agent_id = Identifier(required=True)
    name = String(max_length=100)
    phone = String(max_length=20)
    vehicle_type = String(max_length=20)
    vehicle_number = String(max_length=20)
    bank_details = Text()  # JSON dict of account_number/ifsc_code/account_holder


def _assert_phone_free(phone: str | None, agent_id: str) -> None:
    if not phone:
        return
    repo = current_domain.repository_for(DeliveryAgent)
    holders = repo._dao.query.filter(phone=phone).limit(None).all().items
    if any(str(a.agent_id) != str(agent_id) for a in holders):
        raise ValidationError({"phone": ["Phone number is already registered to another agent"]})


@ordering.command_handler(part_of=DeliveryAgent)
class AgentProfileHandler:
    @handle(EnsureAgentProfile)
    def ensure_profile(self, command):
        repo = current_domain.repository_for(DeliveryAgent)
        try:
            return str(repo.get(command.agent_id).agent_id)
        except ObjectNotFoundError:
            pass

        _assert_phone_free(command.phone, command.agent_id)
        agent = DeliveryAgent.register(
            agent_id=command.agent_id,
            name=command.name,
            phone=command.phone,
            email=command.email,
        )
        repo.add(agent)
        logger.info("Delivery agent registered", agent_id=command.agent_id)
        return str(agent.agent_id)

    @handle(UpdateAgentProfile)
    def update_profile(self, command):
        agent = load_agent(command.agent_id)
        _assert_phone_free(command.phone, command.agent_id)
        bank_details = json.loads(command.bank_details) if command.bank_details else None
        agent.update_profile(
            name=command.name,
            phone=command.phone,
            vehicle_type=command.vehicle_type,
            vehicle_number=command.vehicle_number,
            bank_details=bank_details,
        )
        current_domain.repository_for(DeliveryAgent).add(agent)
        return str(agent.agent_id)
