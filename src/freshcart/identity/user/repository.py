from protean.utils.globals import current_domain
from protean.utils.query import Q

from freshcart.domain import freshcart
from freshcart.identity.user.user import User
from freshcart.ordering.order.order import Order
from freshcart.shared.errors import Conflict, NotFound
from freshcart.shared.pagination import Page, PageRequest, paginate


@freshcart.repository(part_of=User)
class UserRepository:
    def by_email(self, email: str) -> User | None:
        return self._dao.query.filter(email=email.lower()).all().first

    def by_username(self, username: str) -> User | None:
        return self._dao.query.filter(username=username).all().first

    def with_role(self, role: str):
        return self._dao.query.filter(role=role)

    def search(self, request: PageRequest, search: str | None = None, role: str | None = None) -> Page[User]:
        query = self._dao.query.order_by("-created_at")
        if role:
            query = query.filter(role=role)
        if search:
            term = search.strip()
            query = query.filter(
                Q(username__icontains=term) | Q(email__icontains=term) | Q(phone_number__icontains=term)
            )
        return paginate(query, request)

    def find(self, user_id: str) -> User | None:
        return self._dao.query.filter(id=user_id).all().first


def load_user(user_id: str) -> User:
    user = current_domain.repository_for(User).find(user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def ensure_deletable(user: User) -> None:
    """Users who ever placed or carried an order stay on record."""
    orders = current_domain.repository_for(Order)._dao.query
    if orders.filter(user_id=str(user.id)).all().total or orders.filter(driver_id=str(user.id)).all().total:
        raise Conflict("User has orders and cannot be deleted")
