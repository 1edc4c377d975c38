"""FastAPI routes for the Ordering context: cart and orders."""

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from freshcart.identity.api.dependencies import get_admin, get_current_user, get_driver, get_principal
from freshcart.identity.user.principal import Admin, Driver, Principal, acting_as
from freshcart.identity.user.user import User
from freshcart.ordering.api.schemas import (
    AddToCartRequest,
    AdminStatusRequest,
    AssignDriverRequest,
    CartLineSchema,
    CartProductSchema,
    CartSchema,
    CheckoutRequest,
    DriverStatusRequest,
    OrderLineSchema,
    OrderListSchema,
    OrderSchema,
    UpdateCartQuantityRequest,
)
from freshcart.ordering.cart.cart import Cart
from freshcart.ordering.cart.management import (
    AddToCart,
    ChangeCartQuantity,
    ClearCart,
    RemoveFromCart,
    get_my_cart,
    priced_lines,
    subtotal,
)
from freshcart.ordering.order.cancellation import CancelMyOrder
from freshcart.ordering.order.checkout import PlaceOrder
from freshcart.ordering.order.fulfillment import AdminUpdateStatus, AssignDriver, DriverUpdateStatus
from freshcart.ordering.order.order import Order, ShippingAddress
from freshcart.ordering.order.queries import admin_orders, driver_orders, get_order, my_orders
from freshcart.shared.api import ApiResponse, PaginationSchema
from freshcart.shared.pagination import Page, PageRequest

cart_router = APIRouter(prefix="/cart", tags=["cart"])
order_router = APIRouter(prefix="/orders", tags=["orders"])


def _cart(cart: Cart) -> CartSchema:
    lines = priced_lines(cart)
    return CartSchema(
        id=str(cart.id),
        user_id=str(cart.user_id),
        items=[
            CartLineSchema(
                product_id=str(line.item.product_id),
                quantity=line.item.quantity,
                product=CartProductSchema.model_validate(line.product) if line.product else None,
            )
            for line in lines
        ],
        item_count=cart.item_count,
        subtotal=subtotal(lines),
    )


def _order(order: Order) -> OrderSchema:
    schema = OrderSchema.model_validate(order)
    return schema.model_copy(update={"items": [OrderLineSchema.model_validate(line) for line in order.lines]})


def _order_page(page: Page) -> OrderListSchema:
    return OrderListSchema(orders=[_order(o) for o in page.items], pagination=PaginationSchema.from_page(page))


def _reload(order_id: str) -> Order:
    return current_domain.repository_for(Order).get(order_id)


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
@cart_router.get("", response_model=ApiResponse[CartSchema])
async def get_cart(user: User = Depends(get_current_user)):
    return ApiResponse(data=_cart(get_my_cart(str(user.id))))


@cart_router.post("/items", response_model=ApiResponse[CartSchema])
async def add_item(body: AddToCartRequest, user: User = Depends(get_current_user)):
    command = AddToCart(user_id=str(user.id), product_id=body.product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return ApiResponse(message="Item added to cart", data=_cart(get_my_cart(str(user.id))))


@cart_router.put("/items/{product_id}", response_model=ApiResponse[CartSchema])
async def update_item(product_id: str, body: UpdateCartQuantityRequest, user: User = Depends(get_current_user)):
    command = ChangeCartQuantity(user_id=str(user.id), product_id=product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return ApiResponse(message="Cart updated", data=_cart(get_my_cart(str(user.id))))


@cart_router.delete("/items/{product_id}", response_model=ApiResponse[CartSchema])
async def remove_item(product_id: str, user: User = Depends(get_current_user)):
    current_domain.process(RemoveFromCart(user_id=str(user.id), product_id=product_id), asynchronous=False)
    return ApiResponse(message="Item removed from cart", data=_cart(get_my_cart(str(user.id))))


@cart_router.delete("", response_model=ApiResponse[CartSchema])
async def clear(user: User = Depends(get_current_user)):
    current_domain.process(ClearCart(user_id=str(user.id)), asynchronous=False)
    return ApiResponse(message="Cart cleared", data=_cart(get_my_cart(str(user.id))))


# ---------------------------------------------------------------------------
# Customer orders
# ---------------------------------------------------------------------------
@order_router.post("", status_code=201, response_model=ApiResponse[OrderSchema])
async def checkout(body: CheckoutRequest, principal: Principal = Depends(get_principal)):
    address = ShippingAddress(**body.shipping_address.model_dump()) if body.shipping_address else None
    command = PlaceOrder(
        **acting_as(principal),
        user_id=principal.user_id,
        shipping_fee=body.shipping_fee,
        shipping_address=address,
        notes=body.notes,
    )
    order_id = current_domain.process(command, asynchronous=False)
    return ApiResponse(message="Order created", data=_order(_reload(order_id)))


@order_router.get("/me", response_model=ApiResponse[list[OrderSchema]])
async def list_my_orders(user: User = Depends(get_current_user)):
    return ApiResponse(data=[_order(order) for order in my_orders(str(user.id))])


# ---------------------------------------------------------------------------
# Admin and driver lists (static paths before /{order_id})
# ---------------------------------------------------------------------------
@order_router.get("", response_model=ApiResponse[OrderListSchema])
async def list_orders(
    page: int = Query(1, ge=1),
    size: str = Query("10"),
    tab: str = "all",
    search: str | None = None,
    admin: Admin = Depends(get_admin),
):
    result = admin_orders(admin, PageRequest.of(page, size), tab=tab, search=search)
    return ApiResponse(data=_order_page(result))


@order_router.get("/driver/my-orders", response_model=ApiResponse[OrderListSchema])
async def list_driver_orders(
    page: int = Query(1, ge=1),
    size: str = Query("10"),
    driver: Driver = Depends(get_driver),
):
    return ApiResponse(data=_order_page(driver_orders(driver, PageRequest.of(page, size))))


@order_router.patch("/driver/{order_id}/status", response_model=ApiResponse[OrderSchema])
async def driver_status(order_id: str, body: DriverStatusRequest, driver: Driver = Depends(get_driver)):
    command = DriverUpdateStatus(**acting_as(driver), order_id=order_id, status=body.status)
    current_domain.process(command, asynchronous=False)
    return ApiResponse(message="Order status updated", data=_order(_reload(order_id)))


# ---------------------------------------------------------------------------
# Single order
# ---------------------------------------------------------------------------
@order_router.get("/{order_id}", response_model=ApiResponse[OrderSchema])
async def get_one(order_id: str, principal: Principal = Depends(get_principal)):
    return ApiResponse(data=_order(get_order(principal, order_id)))


@order_router.put("/{order_id}/cancel", response_model=ApiResponse[OrderSchema])
async def cancel(order_id: str, principal: Principal = Depends(get_principal)):
    current_domain.process(CancelMyOrder(**acting_as(principal), order_id=order_id), asynchronous=False)
    return ApiResponse(message="Order cancelled", data=_order(_reload(order_id)))


@order_router.patch("/{order_id}/assign-driver", response_model=ApiResponse[OrderSchema])
async def assign(order_id: str, body: AssignDriverRequest, admin: Admin = Depends(get_admin)):
    command = AssignDriver(**acting_as(admin), order_id=order_id, driver_id=body.driver_id)
    current_domain.process(command, asynchronous=False)
    return ApiResponse(message="Driver assigned", data=_order(_reload(order_id)))


@order_router.patch("/{order_id}/status", response_model=ApiResponse[OrderSchema])
async def update_status(order_id: str, body: AdminStatusRequest, admin: Admin = Depends(get_admin)):
    command = AdminUpdateStatus(
        **acting_as(admin),
        order_id=order_id,
        status=body.status,
        payment_status=body.payment_status,
        driver_id=body.driver_id,
    )
    current_domain.process(command, asynchronous=False)
    return ApiResponse(message="Order status updated", data=_order(_reload(order_id)))
