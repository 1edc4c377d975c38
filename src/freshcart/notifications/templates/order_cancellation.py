"""Cancellation template: sent when an admin cancels a customer's order."""

from freshcart.notifications.notification.notification import NotificationType


class OrderCancellationTemplate:
    notification_type = NotificationType.SYSTEM.value

    @staticmethod
    def render(context: dict) -> dict:
        return {
            "title": "Order Cancelled",
            "message": "Your order has been cancelled. Any reserved items have been returned to stock.",
        }
