"""Delivery templates: sent when an order is delivered."""

from freshcart.notifications.notification.notification import NotificationType


class CustomerOrderDeliveredTemplate:
    notification_type = NotificationType.ORDER_DELIVERED.value

    @staticmethod
    def render(context: dict) -> dict:
        total = context.get("total")
        message = "Your order has been delivered."
        if total is not None:
            message = f"Your order has been delivered. Amount paid: {total:.2f}."
        return {"title": "Order Delivered", "message": message}


class DriverOrderDeliveredTemplate:
    notification_type = NotificationType.ORDER_DELIVERED.value

    @staticmethod
    def render(context: dict) -> dict:
        return {
            "title": "Delivered",
            "message": "You marked the order as delivered.",
        }
