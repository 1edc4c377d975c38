"""Admin catalogue maintenance: create, edit, restock and delete products."""

import json
from enum import Enum

import structlog
from protean import handle
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from freshcart.catalogue.product.product import Product
from freshcart.catalogue.product.repository import load_product
from freshcart.domain import freshcart
from freshcart.identity.user.principal import principal_from, require_admin
from freshcart.shared.errors import Conflict, NotFound, ValidationFailed

logger = structlog.get_logger(__name__)


class RestockMode(Enum):
    SET = "set"
    ADD = "add"


@freshcart.command(part_of="Product")
class CreateProduct:
    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=20)
    name = String(required=True, max_length=200)
    description = Text(required=True)
    price = Float(required=True)
    category = String(required=True, max_length=100)
    manufacturer = String(max_length=200)
    manufacture_date = String(max_length=30)
    expire_date = String(max_length=30)
    nutritional_info = Text()
    image_url = String(max_length=500)
    images = Text()  # JSON array of image URLs
    available = Boolean(default=True)
    in_stock = Integer(default=0)
    sku = String(max_length=64)


@freshcart.command(part_of="Product")
class UpdateProduct:
    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=20)
    product_id = Identifier(required=True)
    changes = Text(required=True)  # JSON object of field -> new value


@freshcart.command(part_of="Product")
class RestockProduct:
    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=20)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    mode = String(choices=RestockMode, default=RestockMode.SET.value)


@freshcart.command(part_of="Product")
class DeleteProduct:
    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=20)
    product_id = Identifier(required=True)


def _check_numbers(price: float | None, in_stock: int | None) -> None:
    if price is not None and price < 0:
        raise ValidationFailed("Price must be 0 or greater")
    if in_stock is not None and in_stock < 0:
        raise ValidationFailed("Stock must be 0 or greater")


@freshcart.command_handler(part_of=Product)
class ProductManagementHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        admin = require_admin(principal_from(command.actor_id, command.actor_role))
        _check_numbers(command.price, command.in_stock)

        products = current_domain.repository_for(Product)
        if products.by_name(command.name) is not None:
            raise Conflict("Product name already in use")
        if command.sku and products.by_sku(command.sku) is not None:
            raise Conflict("SKU already in use")

        product = Product.create(
            name=command.name,
            description=command.description,
            price=command.price,
            category=command.category,
            images=json.loads(command.images) if command.images else [],
            image_url=command.image_url,
            manufacturer=command.manufacturer,
            manufacture_date=command.manufacture_date,
            expire_date=command.expire_date,
            nutritional_info=command.nutritional_info,
            available=command.available,
            in_stock=command.in_stock,
            sku=command.sku,
        )
        products.add(product)

        logger.info("product_created", product_id=str(product.id), name=product.name, created_by=admin.user_id)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        require_admin(principal_from(command.actor_id, command.actor_role))
        changes = json.loads(command.changes)
        _check_numbers(changes.get("price"), changes.get("in_stock"))

        products = current_domain.repository_for(Product)
        product = load_product(command.product_id)

        name = changes.get("name")
        if name and name != product.name and products.by_name(name) is not None:
            raise Conflict("Product name already in use")
        sku = changes.get("sku")
        if sku and sku != product.sku and products.by_sku(sku) is not None:
            raise Conflict("SKU already in use")

        product.revise(changes)
        products.add(product)

        logger.info("product_updated", product_id=str(product.id), fields=sorted(changes))
        return str(product.id)

    @handle(RestockProduct)
    def restock_product(self, command):
        require_admin(principal_from(command.actor_id, command.actor_role))
        if command.quantity < 0:
            raise ValidationFailed("Quantity must be 0 or greater")

        products = current_domain.repository_for(Product)
        match RestockMode(command.mode):
            case RestockMode.SET:
                applied = products.set_stock(command.product_id, command.quantity)
            case RestockMode.ADD:
                applied = products.restore_stock(command.product_id, command.quantity)
        if not applied:
            raise NotFound("Product not found")

        logger.info(
            "product_restocked",
            product_id=str(command.product_id),
            mode=command.mode,
            quantity=command.quantity,
        )
        return str(command.product_id)

    @handle(DeleteProduct)
    def delete_product(self, command):
        admin = require_admin(principal_from(command.actor_id, command.actor_role))
        current_domain.repository_for(Product)._dao.delete(load_product(command.product_id))
        logger.info("product_deleted", product_id=str(command.product_id), deleted_by=admin.user_id)
