"""Delivery statistics and driver availability."""

from dataclasses import dataclass

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from freshcart.domain import freshcart
from freshcart.identity.user.principal import Admin, Customer, Driver, principal_from, unreachable
from freshcart.identity.user.user import Role, User, UserStatus
from freshcart.ordering.order.order import Order, OrderStatus
from freshcart.shared.errors import Forbidden, NotFound, ValidationFailed
from freshcart.shared.pagination import PageRequest

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class DriverStats:
    total_assigned: int = 0
    delivered_count: int = 0


@dataclass(frozen=True)
class DriverDetail:
    user: User
    stats: DriverStats


@freshcart.command(part_of="User")
class SetDriverAvailability:
    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=20)
    driver_id = Identifier(required=True)
    status = String(required=True, max_length=20)


def _driver(driver_id: str) -> User:
    user = current_domain.repository_for(User).find(driver_id)
    if user is None:
        raise NotFound("Driver not found")
    if not user.is_driver:
        raise ValidationFailed("User is not a driver")
    return user


def stats_for(driver_id: str) -> DriverStats:
    orders = current_domain.repository_for(Order).assigned_to(driver_id)
    delivered = sum(1 for order in orders if order.status == OrderStatus.DELIVERED.value)
    return DriverStats(total_assigned=len(orders), delivered_count=delivered)


def driver_detail(driver_id: str) -> DriverDetail:
    user = _driver(driver_id)
    return DriverDetail(user=user, stats=stats_for(driver_id))


def drivers_with_stats(search: str | None = None) -> list[tuple[User, DriverStats]]:
    users = current_domain.repository_for(User)
    page = users.search(PageRequest.of(size="all"), search=search, role=Role.DRIVER.value)
    return [(driver, stats_for(str(driver.id))) for driver in page.items]


@freshcart.command_handler(part_of=User)
class DriverAvailabilityHandler:
    @handle(SetDriverAvailability)
    def set_availability(self, command):
        """A driver goes on (active) or off (inactive) shift."""
        principal = principal_from(command.actor_id, command.actor_role)
        match principal:
            case Driver(user_id=user_id) if user_id == str(command.driver_id):
                pass
            case Driver() | Customer() | Admin():
                raise Forbidden("Drivers can only change their own status")
            case _:
                unreachable(principal)

        if command.status not in {status.value for status in UserStatus}:
            raise ValidationFailed("Status must be active or inactive")

        driver = _driver(str(command.driver_id))
        driver.change_status(command.status)
        current_domain.repository_for(User).add(driver)

        logger.info("driver_availability_changed", driver_id=str(driver.id), status=driver.status)
        return str(driver.id)
