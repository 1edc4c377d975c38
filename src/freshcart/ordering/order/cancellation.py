"""Customer cancellation of their own pending order."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from freshcart.catalogue.product.product import Product
from freshcart.domain import freshcart
from freshcart.identity.user.principal import Admin, Customer, Driver, principal_from, unreachable
from freshcart.ordering.order.order import Order, OrderStatus
from freshcart.ordering.order.repository import load_order
from freshcart.shared.errors import Forbidden

logger = structlog.get_logger(__name__)


@freshcart.command(part_of="Order")
class CancelMyOrder:
    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=20)
    order_id = Identifier(required=True)


def restock_lines(order: Order) -> None:
    """Put every line's quantity back on the shelf."""
    products = current_domain.repository_for(Product)
    for line in order.items:
        if not products.restore_stock(str(line.product_id), line.quantity):
            logger.warning(
                "restock_skipped_missing_product",
                order_id=str(order.id),
                product_id=str(line.product_id),
                quantity=line.quantity,
            )


@freshcart.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelMyOrder)
    def cancel_my_order(self, command):
        principal = principal_from(command.actor_id, command.actor_role)
        match principal:
            case Customer(user_id=user_id):
                pass
            case Admin() | Driver():
                raise Forbidden("You cannot cancel this order")
            case _:
                unreachable(principal)

        repo = current_domain.repository_for(Order)
        order = load_order(command.order_id)
        if str(order.user_id) != str(user_id):
            raise Forbidden("You cannot cancel this order")

        previous = order.status
        order.cancel(actor_id=str(user_id), actor_role=command.actor_role)
        repo.claim_status(str(order.id), previous, OrderStatus.CANCELLED.value)
        repo.add(order)
        restock_lines(order)

        logger.info("order_cancelled", order_id=str(order.id), user_id=str(user_id))
        return str(order.id)
