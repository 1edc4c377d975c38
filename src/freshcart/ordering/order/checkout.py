"""Checkout: turn the customer's cart into a pending order.

The handler runs inside one unit of work. Each line's stock is taken with a
conditional UPDATE that re-checks availability at write time, so a
concurrent checkout that got there first makes this one fail instead of
driving stock negative. Any failure rolls back every decrement, leaves
the cart as it was and creates no order.
"""

import structlog
from protean import handle
from protean.fields import Float, Identifier, String, Text, ValueObject
from protean.utils.globals import current_domain

from freshcart.catalogue.product.product import Product
from freshcart.domain import freshcart
from freshcart.identity.user.principal import Admin, Customer, Driver, principal_from, unreachable
from freshcart.ordering.cart.cart import Cart
from freshcart.ordering.cart.management import cart_of
from freshcart.ordering.order.order import MAX_NOTES_LENGTH, Order, ShippingAddress
from freshcart.shared.errors import EmptyCart, Forbidden, InsufficientStock, NotFound, StockUpdateConflict, ValidationFailed

logger = structlog.get_logger(__name__)


@freshcart.command(part_of="Order")
class PlaceOrder:
    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=20)
    user_id = Identifier(required=True)
    shipping_fee = Float(default=0.0)
    shipping_address = ValueObject(ShippingAddress)
    notes = Text()


def _check_terms(command) -> float:
    shipping_fee = command.shipping_fee if command.shipping_fee is not None else 0.0
    if shipping_fee < 0:
        raise ValidationFailed("Shipping fee must be 0 or greater")
    if command.notes is not None and len(command.notes) > MAX_NOTES_LENGTH:
        raise ValidationFailed(f"Notes must be at most {MAX_NOTES_LENGTH} characters")
    return shipping_fee


@freshcart.command_handler(part_of=Order)
class CheckoutHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        match principal_from(command.actor_id, command.actor_role):
            case Customer(user_id=user_id) if str(user_id) == str(command.user_id):
                pass
            case Customer() | Admin() | Driver():
                raise Forbidden("Only customers can place orders for themselves")
            case principal:
                unreachable(principal)

        shipping_fee = _check_terms(command)

        cart = cart_of(command.user_id)
        if cart is None or cart.is_empty:
            raise EmptyCart("Cart is empty")

        products = current_domain.repository_for(Product)
        lines = []
        for item in cart.lines:
            product = products.find(str(item.product_id))
            if product is None:
                raise NotFound(f"Product {item.product_id} no longer exists")
            if product.in_stock < item.quantity:
                raise InsufficientStock(f"Not enough stock for {product.name}")

            lines.append(
                {
                    "product_id": str(product.id),
                    "name": product.name,
                    "price": product.price,
                    "image": product.image_url,
                    "quantity": item.quantity,
                    "line_total": round(product.price * item.quantity, 2),
                }
            )

            if not products.decrement_stock(str(product.id), item.quantity):
                raise StockUpdateConflict(f"Stock update failed for {product.name}")

        order = Order.place(
            user_id=command.user_id,
            lines=lines,
            shipping_fee=shipping_fee,
            shipping_address=command.shipping_address,
            notes=command.notes,
        )
        current_domain.repository_for(Order).add(order)

        cart.clear()
        current_domain.repository_for(Cart).add(cart)

        logger.info(
            "order_placed",
            order_id=str(order.id),
            user_id=str(order.user_id),
            lines=len(order.items),
            total=order.total,
        )
        return str(order.id)
