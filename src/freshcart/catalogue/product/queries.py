"""Read-side catalogue queries."""

from protean.utils.globals import current_domain

from freshcart.catalogue.product.product import Product
from freshcart.catalogue.product.repository import load_product
from freshcart.shared.clock import as_utc
from freshcart.shared.errors import ValidationFailed
from freshcart.shared.pagination import Page, PageRequest

DEFAULT_LIMIT = 10


def _products():
    return current_domain.repository_for(Product)


def get_product(product_id: str) -> Product:
    return load_product(product_id)


def list_products(request: PageRequest, search: str | None = None) -> Page[Product]:
    return _products().search(request, search=search)


def list_out_of_stock(request: PageRequest, search: str | None = None, category: str | None = None) -> Page[Product]:
    return _products().search(request, search=search, category=category, out_of_stock=True)


def products_in_category(category: str) -> list[Product]:
    if not category or not category.strip():
        raise ValidationFailed("Category is required")
    return _products().by_category(category.strip())


def _ranked(key, limit: int) -> list[Product]:
    return sorted(_products().available(), key=key)[:limit]


def recent_products(limit: int = DEFAULT_LIMIT) -> list[Product]:
    return _ranked(lambda p: (-as_utc(p.created_at).timestamp(), str(p.id)), limit)


def trending_products(limit: int = DEFAULT_LIMIT) -> list[Product]:
    """Best sellers."""
    return _ranked(lambda p: (-p.total_sold, str(p.id)), limit)


def popular_products(limit: int = DEFAULT_LIMIT) -> list[Product]:
    """Most viewed."""
    return _ranked(lambda p: (-p.view_count, str(p.id)), limit)


def top_rated_products(limit: int = DEFAULT_LIMIT) -> list[Product]:
    return _ranked(lambda p: (-p.average_rating, -p.review_count, str(p.id)), limit)
