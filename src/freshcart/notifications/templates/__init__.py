"""Template registry: maps a template key to its template class.

Each template knows its notification type and how to render a title and
message from event context data.
"""

from freshcart.notifications.templates.driver_assigned import (
    CustomerDriverAssignedTemplate,
    DriverNewAssignmentTemplate,
)
from freshcart.notifications.templates.order_cancellation import OrderCancellationTemplate
from freshcart.notifications.templates.order_delivered import (
    CustomerOrderDeliveredTemplate,
    DriverOrderDeliveredTemplate,
)
from freshcart.notifications.templates.order_shipped import (
    CustomerOrderShippedTemplate,
    DriverOrderShippedTemplate,
)

TEMPLATE_REGISTRY: dict[str, type] = {
    "driver_assigned.driver": DriverNewAssignmentTemplate,
    "driver_assigned.customer": CustomerDriverAssignedTemplate,
    "order_shipped.customer": CustomerOrderShippedTemplate,
    "order_shipped.driver": DriverOrderShippedTemplate,
    "order_delivered.customer": CustomerOrderDeliveredTemplate,
    "order_delivered.driver": DriverOrderDeliveredTemplate,
    "order_cancelled.customer": OrderCancellationTemplate,
}


def get_template(key: str):
    """Look up a template class by its registry key."""
    template_cls = TEMPLATE_REGISTRY.get(key)
    if template_cls is None:
        raise ValueError(f"No template registered for key: {key}")
    return template_cls
