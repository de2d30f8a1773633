"""Order placement: command and handler.

Prices and names are snapshotted from the menu catalog at placement; the
fee breakdown and delivery OTP are fixed in the same step.
"""

import json
from decimal import Decimal

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from menu import get_menu
from ordering.domain import ordering
from ordering.errors import ItemNotFound
from ordering.order.order import Order, PaymentMethod
from ordering.order.pricing import calculate_fees, to_money
from ordering.settings import current_settings

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class PlaceOrder:
    """Place a new order for the authenticated customer."""

    customer_id = Identifier(required=True)
    items = Text(required=True)  # JSON list of {"menu_item_id", "quantity"}
    address = Text(required=True)  # JSON dict of delivery address fields
    payment_method = String(
        max_length=10,
        choices=PaymentMethod,
        default=PaymentMethod.ONLINE.value,
    )
    customer = Text()  # JSON dict of name/email/phone
    notes = Text()


def snapshot_items(lines: list[dict]) -> list[dict]:
    """Resolve requested lines against the menu, copying name and price."""
    menu = get_menu()
    items_data = []
    for line in lines:
        menu_item_id = str(line["menu_item_id"])
        item = menu.get_item(menu_item_id)
        if item is None or not item.available:
            raise ItemNotFound(f"Menu item {menu_item_id} not found")
        items_data.append(
            {
                "menu_item_id": menu_item_id,
                "name": item.name,
                "quantity": line.get("quantity", 1),
                "unit_price": float(to_money(item.price)),
            }
        )
    return items_data


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        lines = json.loads(command.items) if isinstance(command.items, str) else command.items
        address = json.loads(command.address) if isinstance(command.address, str) else command.address
        customer = json.loads(command.customer) if isinstance(command.customer, str) else command.customer

        items_data = snapshot_items(lines)
        subtotal = sum(
            (to_money(i["unit_price"]) * int(i["quantity"]) for i in items_data),
            Decimal("0"),
        )
        fees = calculate_fees(
            subtotal,
            current_settings(),
            latitude=address.get("latitude"),
            longitude=address.get("longitude"),
        )

        order = Order.place(
            customer_id=command.customer_id,
            items_data=items_data,
            address_data=address,
            fees=fees,
            payment_method=command.payment_method,
            customer_data=customer,
            notes=command.notes,
        )
        current_domain.repository_for(Order).add(order)
        logger.info(
            "Order placed",
            order_id=str(order.id),
            order_code=order.order_code,
            customer_id=command.customer_id,
            total=order.pricing.total,
        )
        return str(order.id)
