"""Driver assignment templates: one for the driver, one for the customer."""

from freshcart.notifications.notification.notification import NotificationType


class DriverNewAssignmentTemplate:
    notification_type = NotificationType.DRIVER_ASSIGNED.value

    @staticmethod
    def render(context: dict) -> dict:
        return {
            "title": "New Order Assigned",
            "message": "You have been assigned an order.",
        }


class CustomerDriverAssignedTemplate:
    notification_type = NotificationType.DRIVER_ASSIGNED.value

    @staticmethod
    def render(context: dict) -> dict:
        driver_name = context.get("driver_name")
        if driver_name:
            message = f"{driver_name} has been assigned to deliver your order."
        else:
            message = "A driver has been assigned to your order."
        return {"title": "Driver Assigned", "message": message}
