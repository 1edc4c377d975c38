"""Product persistence.

Stock and counter writes are single UPDATE statements evaluated by the
database (``col = col + n``) on the unit of work's session, never a
read-modify-write in Python, so concurrent requests cannot lose each
other's updates.
"""

from protean.utils.globals import current_domain
from protean.utils.query import Q
from sqlalchemy import update

from freshcart.catalogue.product.product import Product, ProductComment, ProductFavorite, ProductRating, rating_summary
from freshcart.domain import freshcart
from freshcart.shared.errors import NotFound
from freshcart.shared.pagination import Page, PageRequest, fetch_all, paginate


@freshcart.repository(part_of=Product)
class ProductRepository:
    def find(self, product_id: str) -> Product | None:
        return self._dao.query.filter(id=product_id).all().first

    def by_name(self, name: str) -> Product | None:
        return self._dao.query.filter(name=name).all().first

    def by_sku(self, sku: str) -> Product | None:
        return self._dao.query.filter(sku=sku).all().first

    # ------------------------------------------------------------------
    # Guarded and incremental writes
    # ------------------------------------------------------------------
    def _apply(self, stmt) -> int:
        session = self._dao._get_session()
        result = session.execute(stmt.execution_options(synchronize_session=False))
        return result.rowcount

    def decrement_stock(self, product_id: str, quantity: int) -> bool:
        """Take ``quantity`` units if, at write time, that many are in stock."""
        model = self._dao.database_model_cls
        return (
            self._apply(
                update(model)
                .where(model.id == product_id, model.in_stock >= quantity)
                .values(in_stock=model.in_stock - quantity)
            )
            == 1
        )

    def restore_stock(self, product_id: str, quantity: int) -> bool:
        model = self._dao.database_model_cls
        return self._apply(update(model).where(model.id == product_id).values(in_stock=model.in_stock + quantity)) == 1

    def set_stock(self, product_id: str, quantity: int) -> bool:
        model = self._dao.database_model_cls
        return self._apply(update(model).where(model.id == product_id).values(in_stock=quantity)) == 1

    def record_sale(self, product_id: str, quantity: int, revenue: float) -> bool:
        model = self._dao.database_model_cls
        return (
            self._apply(
                update(model)
                .where(model.id == product_id)
                .values(
                    total_sold=model.total_sold + quantity,
                    total_revenue=model.total_revenue + revenue,
                )
            )
            == 1
        )

    def increment_views(self, product_id: str) -> bool:
        model = self._dao.database_model_cls
        return self._apply(update(model).where(model.id == product_id).values(view_count=model.view_count + 1)) == 1

    def store_rating(self, product_id: str, average_rating: float, review_count: int) -> bool:
        model = self._dao.database_model_cls
        return (
            self._apply(
                update(model)
                .where(model.id == product_id)
                .values(average_rating=average_rating, review_count=review_count)
            )
            == 1
        )

    # ------------------------------------------------------------------
    # Catalogue reads
    # ------------------------------------------------------------------
    def search(
        self,
        request: PageRequest,
        search: str | None = None,
        category: str | None = None,
        out_of_stock: bool = False,
    ) -> Page[Product]:
        query = self._dao.query.order_by("-created_at")
        if out_of_stock:
            query = query.filter(in_stock__lte=0)
        if category:
            query = query.filter(category=category)
        if search:
            term = search.strip()
            query = query.filter(
                Q(name__icontains=term)
                | Q(category__icontains=term)
                | Q(manufacturer__icontains=term)
                | Q(sku__icontains=term)
            )
        return paginate(query, request)

    def by_category(self, category: str) -> list[Product]:
        return fetch_all(self._dao.query.filter(category=category, available=True).order_by("-created_at"))

    def available(self) -> list[Product]:
        return fetch_all(self._dao.query.filter(available=True))


def load_product(product_id: str) -> Product:
    product = current_domain.repository_for(Product).find(product_id)
    if product is None:
        raise NotFound("Product not found")
    return product


def rating_for(product_id: str, user_id: str) -> ProductRating | None:
    query = current_domain.repository_for(ProductRating)._dao.query
    return query.filter(product_id=product_id, user_id=user_id).all().first


def refresh_rating(product_id: str) -> tuple[float, int]:
    """Recompute the product's rating summary from every rating record."""
    ratings = fetch_all(current_domain.repository_for(ProductRating)._dao.query.filter(product_id=product_id))
    average, count = rating_summary([r.rating for r in ratings])
    current_domain.repository_for(Product).store_rating(product_id, average, count)
    return average, count


def favorite_for(product_id: str, user_id: str) -> ProductFavorite | None:
    query = current_domain.repository_for(ProductFavorite)._dao.query
    return query.filter(product_id=product_id, user_id=user_id).all().first


def favorites_of(user_id: str) -> list[ProductFavorite]:
    query = current_domain.repository_for(ProductFavorite)._dao.query
    return fetch_all(query.filter(user_id=user_id).order_by("-created_at"))


def comments_for(product_id: str) -> list[ProductComment]:
    query = current_domain.repository_for(ProductComment)._dao.query
    return fetch_all(query.filter(product_id=product_id).order_by("-created_at"))
