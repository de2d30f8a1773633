"""Courier-side progress (pick, start, arrive): command and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.lookup import load_order
from ordering.order.order import CourierProgress, Order


@ordering.command(part_of="Order")
class RecordCourierProgress:
    order_id = Identifier(required=True)
    agent_id = Identifier(required=True)
    progress = String(required=True, max_length=20, choices=CourierProgress)


@ordering.command_handler(part_of=Order)
class RecordCourierProgressHandler:
    @handle(RecordCourierProgress)
    def record_progress(self, command):
        order = load_order(command.order_id)
        order.record_courier_progress(command.agent_id, command.progress)
        current_domain.repository_for(Order).add(order)
        return order.courier_progress
