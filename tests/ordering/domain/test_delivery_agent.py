"""Tests for the DeliveryAgent aggregate: availability and earnings."""

from decimal import Decimal

import pytest
from ordering.courier.courier import AgentStatus, DeliveryAgent, VehicleType, commission_for
from ordering.courier.events import AgentAvailabilityChanged, AgentRegistered, EarningsCredited
from ordering.errors import AgentUnavailable, InvalidTransition
from protean.exceptions import ValidationError


def _agent(agent_id="agent-1"):
    return DeliveryAgent.register(agent_id=agent_id, name="Ravi", phone="9000000001")


def _online_agent():
    agent = _agent()
    agent.go_online()
    return agent


def _busy_agent(order_id="ord-1"):
    agent = _online_agent()
    agent.accept_order(order_id)
    return agent


class TestRegistration:
    def test_new_agent_is_offline(self):
        agent = _agent()
        assert agent.status == AgentStatus.OFFLINE.value
        assert agent.current_order_id is None
        assert agent.total_deliveries == 0
        assert agent.total_earnings == 0.0
        assert agent.vehicle_type == VehicleType.BIKE.value

    def test_default_name(self):
        agent = DeliveryAgent.register(agent_id="agent-x")
        assert agent.name == "Delivery Agent"

    def test_raises_agent_registered(self):
        agent = _agent()
        assert any(isinstance(e, AgentRegistered) for e in agent._events)


class TestAvailability:
    def test_go_online(self):
        agent = _agent()
        agent._events.clear()
        agent.go_online()
        assert agent.status == AgentStatus.ONLINE.value
        assert agent.is_available
        assert isinstance(agent._events[0], AgentAvailabilityChanged)

    def test_go_online_twice_is_noop(self):
        agent = _online_agent()
        agent._events.clear()
        agent.go_online()
        assert agent._events == []

    def test_go_offline(self):
        agent = _online_agent()
        agent.go_offline()
        assert agent.status == AgentStatus.OFFLINE.value
        assert not agent.is_available

    def test_cannot_go_offline_mid_delivery(self):
        agent = _busy_agent()
        with pytest.raises(InvalidTransition):
            agent.go_offline()
        assert agent.status == AgentStatus.ON_DELIVERY.value

    def test_cannot_toggle_online_mid_delivery(self):
        with pytest.raises(InvalidTransition):
            _busy_agent().go_online()


class TestAcceptOrder:
    def test_accept_moves_agent_on_delivery(self):
        agent = _busy_agent("ord-9")
        assert agent.status == AgentStatus.ON_DELIVERY.value
        assert str(agent.current_order_id) == "ord-9"
        assert not agent.is_available

    def test_offline_agent_cannot_accept(self):
        with pytest.raises(AgentUnavailable):
            _agent().accept_order("ord-1")

    def test_one_active_order_at_a_time(self):
        agent = _busy_agent("ord-1")
        with pytest.raises(AgentUnavailable) as exc:
            agent.accept_order("ord-2")
        assert exc.value.code == "AGENT_UNAVAILABLE"
        assert str(agent.current_order_id) == "ord-1"

    def test_release_returns_agent_online(self):
        agent = _busy_agent("ord-1")
        agent.release_order("ord-1")
        assert agent.status == AgentStatus.ONLINE.value
        assert agent.current_order_id is None

    def test_release_of_other_order_is_ignored(self):
        agent = _busy_agent("ord-1")
        agent.release_order("ord-2")
        assert str(agent.current_order_id) == "ord-1"

    def test_active_order_requires_on_delivery(self):
        agent = _online_agent()
        with pytest.raises(ValidationError):
            agent.current_order_id = "ord-1"


class TestCommission:
    def test_twenty_percent_of_total(self):
        assert commission_for(580) == Decimal("116.00")

    def test_rounded_to_cents(self):
        assert commission_for(333.33) == Decimal("66.67")


class TestCreditDelivery:
    def test_credit_updates_ledger_and_frees_agent(self):
        agent = _busy_agent("ord-1")
        agent._events.clear()
        amount = agent.credit_delivery("ord-1", 580.0)

        assert amount == Decimal("116.00")
        assert agent.total_deliveries == 1
        assert agent.total_earnings == 116.0
        assert len(agent.earnings) == 1
        assert agent.earnings[0].amount == 116.0
        assert agent.earnings[0].order_total == 580.0
        assert agent.status == AgentStatus.ONLINE.value
        assert agent.current_order_id is None
        assert any(isinstance(e, EarningsCredited) for e in agent._events)

    def test_earnings_accumulate(self):
        agent = _busy_agent("ord-1")
        agent.credit_delivery("ord-1", 500.0)
        agent.accept_order("ord-2")
        agent.credit_delivery("ord-2", 250.0)
        assert agent.total_deliveries == 2
        assert agent.total_earnings == 150.0


class TestProfile:
    def test_update_profile(self):
        agent = _agent()
        agent.update_profile(
            name="Ravi Kumar",
            vehicle_type=VehicleType.SCOOTER.value,
            vehicle_number="OD-03-1234",
            bank_details={"account_number": "1234567890", "ifsc_code": "SBIN0001234", "account_holder": "Ravi"},
        )
        assert agent.name == "Ravi Kumar"
        assert agent.vehicle_type == "scooter"
        assert agent.bank_details.ifsc_code == "SBIN0001234"
        assert agent.phone == "9000000001"

    def test_unknown_vehicle_type_rejected(self):
        with pytest.raises(ValidationError):
            _agent().update_profile(vehicle_type="rocket")

    def test_update_location(self):
        agent = _agent()
        agent.update_location(20.70, 83.49)
        assert agent.current_location.latitude == 20.70
        assert agent.current_location.updated_at is not None
