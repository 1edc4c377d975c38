from protean.utils.globals import current_domain
from sqlalchemy import update

from freshcart.domain import freshcart
from freshcart.ordering.order.order import Order, OrderStatus, PaymentStatus
from freshcart.shared.errors import InvalidTransition, NotFound
from freshcart.shared.pagination import Page, PageRequest, fetch_all, paginate

# Admin list tabs and the statuses each one shows
ORDER_TABS = {
    "all": None,
    "pending": (OrderStatus.PENDING,),
    "unfulfilled": (OrderStatus.PENDING,),
    "unpaid": None,
    "open": (OrderStatus.PENDING, OrderStatus.SHIPPED),
    "closed": (OrderStatus.DELIVERED, OrderStatus.CANCELLED),
}


@freshcart.repository(part_of=Order)
class OrderRepository:
    def find(self, order_id: str) -> Order | None:
        return self._dao.query.filter(id=order_id).all().first

    def claim_status(self, order_id: str, expected: str, target: str) -> None:
        """Write ``target`` only if the stored status is still ``expected``.

        Two requests that read the same status cannot both move the order;
        the second one matches no row and fails.
        """
        model = self._dao.database_model_cls
        stmt = update(model).where(model.id == order_id, model.status == expected).values(status=target)
        result = self._dao._get_session().execute(stmt.execution_options(synchronize_session=False))
        if result.rowcount != 1:
            raise InvalidTransition("Order was updated by another request, reload and try again")

    def for_user(self, user_id: str) -> list[Order]:
        return fetch_all(self._dao.query.filter(user_id=user_id).order_by("-created_at"))

    def for_driver(self, driver_id: str, request: PageRequest) -> Page[Order]:
        return paginate(self._dao.query.filter(driver_id=driver_id).order_by("-created_at"), request)

    def search(self, request: PageRequest, tab: str = "all", search: str | None = None) -> Page[Order]:
        query = self._dao.query.order_by("-created_at")

        if tab == "unpaid":
            query = query.filter(payment_status=PaymentStatus.UNPAID.value)
        elif ORDER_TABS.get(tab):
            query = query.filter(status__in=[status.value for status in ORDER_TABS[tab]])

        if search and search.strip():
            query = query.filter(search_text__icontains=search.strip().lower())
        return paginate(query, request)

    def all_orders(self) -> list[Order]:
        return fetch_all(self._dao.query.order_by("created_at"))

    def assigned_to(self, driver_id: str) -> list[Order]:
        return fetch_all(self._dao.query.filter(driver_id=driver_id))


def load_order(order_id: str) -> Order:
    order = current_domain.repository_for(Order).find(order_id)
    if order is None:
        raise NotFound("Order not found")
    return order
