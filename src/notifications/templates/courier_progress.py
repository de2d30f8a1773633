"""Courier progress template: finer-grained updates while out for delivery."""

from notifications.sink.port import NotificationCategory

_PROGRESS_MESSAGES = {
    "picked_up": "Your courier has picked up order {order_code}.",
    "en_route": "Your courier is on the way with order {order_code}.",
    "arrived": "Your courier has arrived with order {order_code}. Keep your OTP ready.",
}


class CourierProgressTemplate:
    category = NotificationCategory.DELIVERY_UPDATE.value
    icon = "fa-route"

    @staticmethod
    def render(context: dict) -> dict:
        text = _PROGRESS_MESSAGES.get(context.get("progress"), "Delivery update for order {order_code}.")
        return {"title": "Delivery Update", "message": text.format(order_code=context["order_code"])}
