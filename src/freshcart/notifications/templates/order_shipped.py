"""Shipping templates: sent when an order moves to shipped."""

from freshcart.notifications.notification.notification import NotificationType


class CustomerOrderShippedTemplate:
    notification_type = NotificationType.ORDER_SHIPPED.value

    @staticmethod
    def render(context: dict) -> dict:
        return {
            "title": "Order Shipped",
            "message": "Your order has been shipped.",
        }


class DriverOrderShippedTemplate:
    notification_type = NotificationType.ORDER_SHIPPED.value

    @staticmethod
    def render(context: dict) -> dict:
        return {
            "title": "Order Shipped",
            "message": "Order status is now shipped.",
        }
