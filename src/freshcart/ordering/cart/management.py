"""Cart use cases for the signed-in customer."""

from dataclasses import dataclass

import structlog
from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from freshcart.catalogue.product.product import Product
from freshcart.catalogue.product.repository import load_product
from freshcart.domain import freshcart
from freshcart.ordering.cart.cart import Cart, CartItem

logger = structlog.get_logger(__name__)


@freshcart.command(part_of="Cart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(default=1)


@freshcart.command(part_of="Cart")
class ChangeCartQuantity:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@freshcart.command(part_of="Cart")
class RemoveFromCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


@freshcart.command(part_of="Cart")
class ClearCart:
    user_id = Identifier(required=True)


@dataclass(frozen=True)
class PricedLine:
    item: CartItem
    product: Product | None


def cart_of(user_id) -> Cart | None:
    return current_domain.repository_for(Cart)._dao.query.filter(user_id=user_id).all().first


def get_or_create_cart(user_id) -> Cart:
    cart = cart_of(user_id)
    if cart is None:
        cart = Cart.create(user_id)
        current_domain.repository_for(Cart).add(cart)
    return cart


@freshcart.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        load_product(command.product_id)
        cart = get_or_create_cart(command.user_id)
        cart.add_item(command.product_id, command.quantity)
        current_domain.repository_for(Cart).add(cart)

        logger.debug(
            "cart_item_added",
            user_id=str(command.user_id),
            product_id=str(command.product_id),
            quantity=command.quantity,
        )
        return str(cart.id)

    @handle(ChangeCartQuantity)
    def change_quantity(self, command):
        cart = get_or_create_cart(command.user_id)
        cart.set_quantity(command.product_id, command.quantity)
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        cart = get_or_create_cart(command.user_id)
        cart.remove_item(command.product_id)
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)

    @handle(ClearCart)
    def clear_cart(self, command):
        cart = get_or_create_cart(command.user_id)
        cart.clear()
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)


def get_my_cart(user_id) -> Cart:
    return get_or_create_cart(user_id)


def priced_lines(cart: Cart) -> list[PricedLine]:
    """Cart items next to the current product; a deleted product shows as ``None``."""
    products = current_domain.repository_for(Product)
    return [PricedLine(item=item, product=products.find(str(item.product_id))) for item in cart.lines]


def subtotal(lines: list[PricedLine]) -> float:
    return round(sum(line.product.price * line.item.quantity for line in lines if line.product is not None), 2)
