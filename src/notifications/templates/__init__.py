"""Template registry: maps order statuses to template classes.

Unknown statuses fall back to GenericStatusTemplate so that an operator's
custom status still produces a sensible message.
"""

from notifications.templates.order_status import (
    GenericStatusTemplate,
    OrderCancelledTemplate,
    OrderConfirmedTemplate,
    OrderDeliveredTemplate,
    OrderPlacedTemplate,
    OrderPreparingTemplate,
    OutForDeliveryTemplate,
)

TEMPLATE_REGISTRY: dict[str, type] = {
    template.status: template
    for template in (
        OrderPlacedTemplate,
        OrderConfirmedTemplate,
        OrderPreparingTemplate,
        OutForDeliveryTemplate,
        OrderDeliveredTemplate,
        OrderCancelledTemplate,
    )
}


def get_template(status: str):
    """Look up a template class by order status string."""
    return TEMPLATE_REGISTRY.get(status, GenericStatusTemplate)
