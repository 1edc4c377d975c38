"""Order reads for customers, drivers and admins."""

from protean.utils.globals import current_domain

from freshcart.identity.user.principal import Admin, Customer, Driver, Principal, require_admin, require_driver, unreachable
from freshcart.ordering.order.order import Order
from freshcart.ordering.order.repository import ORDER_TABS, load_order
from freshcart.shared.errors import Forbidden, ValidationFailed
from freshcart.shared.pagination import Page, PageRequest


def my_orders(user_id: str) -> list[Order]:
    return current_domain.repository_for(Order).for_user(user_id)


def get_order(principal: Principal, order_id: str) -> Order:
    """An order is visible to its owner, any admin and its assigned driver."""
    order = load_order(order_id)
    owner = str(order.user_id)
    driver_id = str(order.driver_id) if order.driver_id else None

    match principal:
        case Admin():
            return order
        case Customer(user_id=user_id) if owner == user_id:
            return order
        case Driver(user_id=user_id) if driver_id == user_id or owner == user_id:
            return order
        case Customer() | Driver():
            raise Forbidden("You cannot view this order")
        case _:
            unreachable(principal)


def admin_orders(
    principal: Principal,
    request: PageRequest,
    tab: str = "all",
    search: str | None = None,
) -> Page[Order]:
    require_admin(principal)
    tab = (tab or "all").lower()
    if tab not in ORDER_TABS:
        raise ValidationFailed(f"Unknown tab {tab!r}, expected one of: {', '.join(ORDER_TABS)}")
    return current_domain.repository_for(Order).search(request, tab=tab, search=search)


def driver_orders(principal: Principal, request: PageRequest) -> Page[Order]:
    driver = require_driver(principal)
    return current_domain.repository_for(Order).for_driver(driver.user_id, request)
