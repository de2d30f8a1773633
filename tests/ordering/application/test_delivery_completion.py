"""Application tests for the OTP handoff and courier settlement."""

from uuid import uuid4

import pytest
from ordering import operations
from ordering.courier.courier import AgentStatus
from ordering.errors import InvalidOtp, InvalidTransition, NotFound
from ordering.order import queries
from ordering.order.order import OrderStatus, PaymentStatus


def _wrong(otp: str) -> str:
    return "1000" if otp != "1000" else "1001"


@pytest.fixture(autouse=True)
def _menu(menu):
    yield


@pytest.fixture()
def dispatched(address):
    """A COD order out for delivery with its courier."""
    customer_id = f"cust-{uuid4().hex[:8]}"
    agent_id = f"agent-{uuid4().hex[:8]}"
    order = operations.create_order(
        customer_id,
        [{"menu_item_id": "paneer-tikka", "quantity": 2}],
        address,
        payment_method="cod",
    )
    operations.ensure_agent_profile(agent_id, name="Ravi")
    operations.set_agent_availability(agent_id, online=True)
    order, _ = operations.assign_courier(str(order.id), agent_id)
    return order, customer_id, agent_id


class TestCourierCompletesDelivery:
    def test_correct_otp_delivers_and_credits(self, dispatched):
        order, _, agent_id = dispatched

        delivered = operations.complete_delivery(str(order.id), agent_id, order.delivery_otp)

        assert delivered.status == OrderStatus.DELIVERED.value
        assert delivered.otp_verified is True
        assert delivered.payment_status == PaymentStatus.PAID.value

        agent = operations.ensure_agent_profile(agent_id)
        assert agent.status == AgentStatus.ONLINE.value
        assert agent.current_order_id is None
        assert agent.total_deliveries == 1
        # 20% of the 580.00 order total
        assert agent.total_earnings == 116.0
        assert [str(e.order_id) for e in agent.earnings] == [str(order.id)]

    def test_wrong_otp_changes_nothing(self, dispatched):
        order, _, agent_id = dispatched

        with pytest.raises(InvalidOtp):
            operations.complete_delivery(str(order.id), agent_id, _wrong(order.delivery_otp))

        reloaded = queries.get_order(str(order.id))
        assert reloaded.status == OrderStatus.OUT_FOR_DELIVERY.value
        assert reloaded.otp_verified is False
        agent = operations.ensure_agent_profile(agent_id)
        assert agent.status == AgentStatus.ON_DELIVERY.value
        assert agent.total_deliveries == 0

    def test_other_courier_sees_not_found(self, dispatched):
        order, _, _ = dispatched
        with pytest.raises(NotFound):
            operations.complete_delivery(str(order.id), "agent-intruder", order.delivery_otp)

    def test_delivered_order_cannot_be_completed_again(self, dispatched):
        order, _, agent_id = dispatched
        operations.complete_delivery(str(order.id), agent_id, order.delivery_otp)
        with pytest.raises(InvalidTransition):
            operations.complete_delivery(str(order.id), agent_id, order.delivery_otp)
        assert operations.ensure_agent_profile(agent_id).total_deliveries == 1


class TestCustomerVerifiesOtp:
    def test_customer_confirms_handoff(self, dispatched):
        order, customer_id, agent_id = dispatched

        delivered = operations.verify_delivery_otp(str(order.id), caller_id=customer_id, code=order.delivery_otp)

        assert delivered.status == OrderStatus.DELIVERED.value
        assert operations.ensure_agent_profile(agent_id).total_deliveries == 1

    def test_non_owner_sees_not_found(self, dispatched):
        order, _, _ = dispatched
        with pytest.raises(NotFound):
            operations.verify_delivery_otp(str(order.id), caller_id="cust-other", code=order.delivery_otp)

    def test_otp_before_dispatch_is_rejected(self, address):
        customer_id = f"cust-{uuid4().hex[:8]}"
        order = operations.create_order(
            customer_id, [{"menu_item_id": "butter-naan", "quantity": 1}], address, payment_method="cod"
        )
        with pytest.raises(InvalidTransition):
            operations.verify_delivery_otp(str(order.id), caller_id=customer_id, code=order.delivery_otp)


class TestDeliveryHistory:
    def test_active_order_then_history(self, dispatched):
        order, _, agent_id = dispatched
        assert str(queries.active_order_for_agent(agent_id).id) == str(order.id)

        operations.complete_delivery(str(order.id), agent_id, order.delivery_otp)

        assert queries.active_order_for_agent(agent_id) is None
        assert [str(o.id) for o in queries.delivery_history(agent_id)] == [str(order.id)]

    def test_earnings_summary_counts_today(self, dispatched):
        order, _, agent_id = dispatched
        operations.complete_delivery(str(order.id), agent_id, order.delivery_otp)

        summary = operations.earnings_summary(agent_id)
        assert summary.today.deliveries == 1
        assert summary.today.amount == 116.0
        assert summary.lifetime.amount == 116.0
        assert summary.recent_history[0]["order_id"] == str(order.id)
