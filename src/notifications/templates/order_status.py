"""Order status templates: one per lifecycle status, plus a fallback.

Each template renders a title and message from the event context. The
context always carries ``order_code``; ``otp`` is present only for orders
going out for delivery.
"""

from notifications.sink.port import NotificationCategory


class OrderPlacedTemplate:
    status = "pending"
    category = NotificationCategory.ORDER_UPDATE.value
    icon = "fa-receipt"

    @staticmethod
    def render(context: dict) -> dict:
        return {
            "title": "Order Placed",
            "message": f"Your order {context['order_code']} has been placed and is awaiting payment.",
        }


class OrderConfirmedTemplate:
    status = "confirmed"
    category = NotificationCategory.ORDER_UPDATE.value
    icon = "fa-check-circle"

    @staticmethod
    def render(context: dict) -> dict:
        return {
            "title": "Order Confirmed",
            "message": f"Your order {context['order_code']} is confirmed. The kitchen will start on it shortly.",
        }


class OrderPreparingTemplate:
    status = "preparing"
    category = NotificationCategory.ORDER_UPDATE.value
    icon = "fa-utensils"

    @staticmethod
    def render(context: dict) -> dict:
        return {
            "title": "Preparing Your Food",
            "message": f"The kitchen has started preparing order {context['order_code']}.",
        }


class OutForDeliveryTemplate:
    status = "out_for_delivery"
    category = NotificationCategory.DELIVERY_UPDATE.value
    icon = "fa-motorcycle"

    @staticmethod
    def render(context: dict) -> dict:
        message = f"Your order {context['order_code']} is on its way."
        if context.get("courier_name"):
            message += f" {context['courier_name']} is delivering it."
        if context.get("otp"):
            message += f" Share OTP {context['otp']} with the courier at handoff."
        return {"title": "Out for Delivery", "message": message}


class OrderDeliveredTemplate:
    status = "delivered"
    category = NotificationCategory.ORDER_UPDATE.value
    icon = "fa-box-open"

    @staticmethod
    def render(context: dict) -> dict:
        return {
            "title": "Order Delivered",
            "message": f"Your order {context['order_code']} has been delivered. Enjoy your meal!",
        }


class OrderCancelledTemplate:
    status = "cancelled"
    category = NotificationCategory.ORDER_UPDATE.value
    icon = "fa-times-circle"

    @staticmethod
    def render(context: dict) -> dict:
        message = f"Your order {context['order_code']} has been cancelled."
        if context.get("reason"):
            message += f" Reason: {context['reason']}"
        return {"title": "Order Cancelled", "message": message}


class GenericStatusTemplate:
    """Fallback for statuses without a dedicated template."""

    status = None
    category = NotificationCategory.ORDER_UPDATE.value
    icon = "fa-bell"

    @staticmethod
    def render(context: dict) -> dict:
        label = str(context.get("status") or "updated").replace("_", " ")
        return {
            "title": "Order Update",
            "message": f"Your order {context['order_code']} is now {label}.",
        }
