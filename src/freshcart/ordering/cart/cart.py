"""Shopping cart: one per user, emptied at checkout.

A cart is an ordered list of (product, quantity) items. Adding a product
that is already in the cart increases that item; quantities are always at
least 1. The cart is created lazily the first time its owner touches it.
"""

from protean.fields import DateTime, HasMany, Identifier, Integer

from freshcart.domain import freshcart
from freshcart.shared.clock import utcnow
from freshcart.shared.errors import NotFound, ValidationFailed


@freshcart.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    position = Integer(default=0)


@freshcart.aggregate
class Cart:
    user_id = Identifier(required=True, unique=True)
    items = HasMany(CartItem)
    created_at = DateTime(default=utcnow)
    updated_at = DateTime(default=utcnow)

    @classmethod
    def create(cls, user_id):
        now = utcnow()
        return cls(user_id=user_id, created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    @property
    def lines(self) -> list[CartItem]:
        """Items in the order they were first added."""
        return sorted(self.items, key=lambda item: item.position)

    def item_for(self, product_id) -> CartItem | None:
        return next((item for item in self.items if str(item.product_id) == str(product_id)), None)

    def add_item(self, product_id, quantity: int = 1) -> CartItem:
        """Add a product, or increase its quantity if it is already in the cart."""
        if quantity < 1:
            raise ValidationFailed("Quantity must be at least 1")

        existing = self.item_for(product_id)
        self.updated_at = utcnow()
        if existing is not None:
            existing.quantity += quantity
            return existing

        position = max((item.position for item in self.items), default=-1) + 1
        item = CartItem(product_id=product_id, quantity=quantity, position=position)
        self.add_items(item)
        return item

    def set_quantity(self, product_id, quantity: int) -> None:
        """Set an item's quantity; zero or less removes the item."""
        item = self.item_for(product_id)
        if item is None:
            raise NotFound("Item not found in cart")

        self.updated_at = utcnow()
        if quantity <= 0:
            self.remove_items(item)
        else:
            item.quantity = quantity

    def remove_item(self, product_id) -> None:
        item = self.item_for(product_id)
        if item is not None:
            self.remove_items(item)
            self.updated_at = utcnow()

    def clear(self) -> None:
        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = utcnow()

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)
