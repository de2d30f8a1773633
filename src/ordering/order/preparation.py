"""Kitchen preparation: command and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.lookup import load_order
from ordering.order.order import Order


@ordering.command(part_of="Order")
class StartPreparation:
    """The kitchen starts cooking a confirmed order."""

    order_id = Identifier(required=True)
    actor = String(max_length=255)


@ordering.command_handler(part_of=Order)
class StartPreparationHandler:
    @handle(StartPreparation)
    def start_preparation(self, command):
        order = load_order(command.order_id)
        order.start_preparation(actor=command.actor)
        current_domain.repository_for(Order).add(order)
        return str(order.id)
