"""Order aggregate: the core of the ordering context.

An order is created from a snapshot of the customer's cart. Its items copy
the product name, price and image at checkout time, so later catalogue
edits never rewrite history.

State Machine:
    PENDING → SHIPPED → DELIVERED
    PENDING → CANCELLED

DELIVERED and CANCELLED are terminal. Payment is tracked separately in
``payment_status``; delivery always settles it. Assigning a driver moves the
order to SHIPPED, and an order can only be delivered once it has shipped.
"""

from enum import Enum

from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text, ValueObject

from freshcart.domain import freshcart
from freshcart.ordering.order.events import DriverAssigned, OrderStatusChanged
from freshcart.shared.clock import utcnow
from freshcart.shared.errors import InvalidTransition, ValidationFailed


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    UNPAID = "unpaid"
    PAID = "paid"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

TERMINAL_STATES = frozenset(status for status, targets in _VALID_TRANSITIONS.items() if not targets)

# Payment status each order status forces, where it forces one
_IMPLIED_PAYMENT = {OrderStatus.DELIVERED: PaymentStatus.PAID}

MAX_NOTES_LENGTH = 500


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    """Re-asserting a non-terminal status is allowed and changes nothing."""
    if current == target:
        return current not in TERMINAL_STATES
    return target in _VALID_TRANSITIONS[current]


def check_payment_status(status: OrderStatus, payment_status: PaymentStatus) -> None:
    implied = _IMPLIED_PAYMENT.get(status)
    if implied is not None and payment_status != implied:
        raise ValidationFailed(
            f"Payment status {payment_status.value} contradicts order status {status.value}, "
            f"expected {implied.value}"
        )


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@freshcart.value_object(part_of="Order")
class ShippingAddress:
    """Where the order goes, captured at checkout."""

    user_name = String(max_length=100)
    phone = String(max_length=30)
    address1 = String(max_length=255)
    address2 = String(max_length=255)
    city = String(max_length=100)
    state = String(max_length=100)
    zip = String(max_length=20)
    country = String(max_length=100)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@freshcart.entity(part_of="Order")
class OrderItem:
    # Snapshot: the product may be edited or deleted later
    product_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    price = Float(required=True, min_value=0.0)
    image = String(max_length=500)
    quantity = Integer(required=True, min_value=1)
    line_total = Float(required=True, min_value=0.0)
    position = Integer(default=0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@freshcart.aggregate
class Order:
    user_id = Identifier(required=True)
    driver_id = Identifier()
    status = String(max_length=20, choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(max_length=20, choices=PaymentStatus, default=PaymentStatus.UNPAID.value)
    items = HasMany(OrderItem)
    subtotal = Float(default=0.0, min_value=0.0)
    shipping_fee = Float(default=0.0, min_value=0.0)
    total = Float(default=0.0)
    shipping_address = ValueObject(ShippingAddress)
    notes = Text()
    # Lowercased order id, shipping name/phone and item names for admin search
    search_text = Text()
    assigned_at = DateTime()
    delivered_at = DateTime()
    cancelled_at = DateTime()
    created_at = DateTime(default=utcnow)
    updated_at = DateTime(default=utcnow)

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, user_id, lines: list[dict], shipping_fee=0.0, shipping_address=None, notes=None):
        """Build a pending, unpaid order from snapshotted lines."""
        subtotal = round(sum(line["line_total"] for line in lines), 2)
        now = utcnow()
        order = cls(
            user_id=user_id,
            status=OrderStatus.PENDING.value,
            payment_status=PaymentStatus.UNPAID.value,
            subtotal=subtotal,
            shipping_fee=shipping_fee,
            total=round(subtotal + shipping_fee, 2),
            shipping_address=shipping_address or ShippingAddress(),
            notes=notes,
            created_at=now,
            updated_at=now,
        )
        for position, line in enumerate(lines):
            order.add_items(OrderItem(position=position, **line))
        order.search_text = order._searchable()
        return order

    def _searchable(self) -> str:
        address = self.shipping_address
        parts = [str(self.id)]
        if address is not None:
            parts += [address.user_name or "", address.phone or ""]
        parts += [item.name for item in self.items]
        return " ".join(part for part in parts if part).lower()

    @property
    def lines(self) -> list[OrderItem]:
        return sorted(self.items, key=lambda item: item.position)

    # -------------------------------------------------------------------
    # State helpers
    # -------------------------------------------------------------------
    @property
    def current_status(self) -> OrderStatus:
        return OrderStatus(self.status)

    @property
    def is_terminal(self) -> bool:
        return self.current_status in TERMINAL_STATES

    def _assert_can_transition(self, target_status: OrderStatus) -> None:
        """Validate that the current state allows transition to target."""
        if not can_transition(self.current_status, target_status):
            raise InvalidTransition(f"Cannot transition from {self.status} to {target_status.value}")

    def _move_to(self, target: OrderStatus, actor_id=None, actor_role=None) -> None:
        previous = self.status
        now = utcnow()
        self.status = target.value
        self.updated_at = now
        if previous == target.value:
            return

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                customer_id=str(self.user_id),
                driver_id=str(self.driver_id) if self.driver_id else None,
                status=self.status,
                previous_status=previous,
                payment_status=self.payment_status,
                actor_id=actor_id,
                actor_role=actor_role,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------
    def cancel(self, actor_id=None, actor_role=None) -> None:
        if self.current_status != OrderStatus.PENDING:
            raise InvalidTransition("Order cannot be cancelled after status changes")
        self.driver_id = None
        self.cancelled_at = utcnow()
        self._move_to(OrderStatus.CANCELLED, actor_id, actor_role)

    def reassign_driver(self, driver_id, assigned_by=None) -> None:
        """Record the driver without touching the status."""
        if self.is_terminal:
            raise InvalidTransition(f"Cannot assign driver when order is {self.status}")
        changed = str(self.driver_id or "") != str(driver_id)
        self.driver_id = driver_id
        self.assigned_at = utcnow()
        self.updated_at = self.assigned_at
        if changed:
            self.raise_(
                DriverAssigned(
                    order_id=str(self.id),
                    customer_id=str(self.user_id),
                    driver_id=str(driver_id),
                    assigned_by=assigned_by,
                    assigned_at=self.assigned_at,
                )
            )

    def assign_driver(self, driver_id, assigned_by=None) -> None:
        if self.is_terminal:
            raise InvalidTransition(f"Cannot assign driver when order is {self.status}")
        self._assert_can_transition(OrderStatus.SHIPPED)
        self.reassign_driver(driver_id, assigned_by)
        self._move_to(OrderStatus.SHIPPED, assigned_by, "admin")

    def mark_shipped(self, actor_id=None, actor_role=None) -> None:
        self._assert_can_transition(OrderStatus.SHIPPED)
        if not self.driver_id:
            raise InvalidTransition("Driver must be assigned before shipping")
        self._move_to(OrderStatus.SHIPPED, actor_id, actor_role)

    def mark_delivered(self, actor_id=None, actor_role=None) -> None:
        if self.current_status != OrderStatus.SHIPPED:
            raise InvalidTransition("Order must be shipped before delivered")
        self.payment_status = PaymentStatus.PAID.value
        self.delivered_at = utcnow()
        self._move_to(OrderStatus.DELIVERED, actor_id, actor_role)

    def reassert(self, actor_id=None, actor_role=None) -> None:
        """Keep the current status; only legal while the order is still open."""
        self._assert_can_transition(self.current_status)
        self._move_to(self.current_status, actor_id, actor_role)

    def set_payment_status(self, payment_status: PaymentStatus) -> None:
        check_payment_status(self.current_status, payment_status)
        self.payment_status = payment_status.value
        self.updated_at = utcnow()

    def __repr__(self) -> str:
        return f"<Order {self.id} {self.status}>"
