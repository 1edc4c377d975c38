import pytest
from freshcart.catalogue.product.engagement import (
    CommentOnProduct,
    RateProduct,
    RecordView,
    ToggleFavorite,
    list_comments,
    list_favorites,
)
from freshcart.catalogue.product.product import Product
from freshcart.catalogue.product.queries import (
    list_out_of_stock,
    popular_products,
    products_in_category,
    recent_products,
    top_rated_products,
    trending_products,
)
from freshcart.shared.errors import NotFound, ValidationFailed
from freshcart.shared.pagination import PageRequest
from protean import UnitOfWork, current_domain


def _process(command):
    return current_domain.process(command, asynchronous=False)


class TestRatings:
    def test_average_over_users(self, make_product, make_user, reload):
        product = make_product()
        _process(RateProduct(product_id=product.id, user_id=make_user().id, rating=4))
        _process(RateProduct(product_id=product.id, user_id=make_user().id, rating=2))

        stored = reload(product)
        assert stored.average_rating == 3.0
        assert stored.review_count == 2

    def test_rerating_replaces_the_previous_rating(self, make_product, customer, reload):
        product = make_product()
        _process(RateProduct(product_id=product.id, user_id=customer.id, rating=1))
        _process(RateProduct(product_id=product.id, user_id=customer.id, rating=5))

        stored = reload(product)
        assert stored.average_rating == 5.0
        assert stored.review_count == 1

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_range(self, make_product, customer, rating):
        with pytest.raises(ValidationFailed, match="between 1 and 5"):
            _process(RateProduct(product_id=make_product().id, user_id=customer.id, rating=rating))

    def test_missing_product(self, customer):
        with pytest.raises(NotFound):
            _process(RateProduct(product_id="missing", user_id=customer.id, rating=3))


class TestFavorites:
    def test_toggle_on_and_off(self, make_product, customer):
        product = make_product(name="Figs")

        assert _process(ToggleFavorite(product_id=product.id, user_id=customer.id)) is True
        assert [p.name for p in list_favorites(customer.id)] == ["Figs"]

        assert _process(ToggleFavorite(product_id=product.id, user_id=customer.id)) is False
        assert list_favorites(customer.id) == []

    def test_missing_product(self, customer):
        with pytest.raises(NotFound):
            _process(ToggleFavorite(product_id="missing", user_id=customer.id))


class TestComments:
    def test_comment_is_trimmed_and_listed(self, make_product, customer):
        product = make_product()
        _process(CommentOnProduct(product_id=product.id, user_id=customer.id, comment="  Very fresh!  "))

        comments = list_comments(product.id)
        assert [c.comment for c in comments] == ["Very fresh!"]
        assert comments[0].user_id == customer.id

    def test_blank_comment(self, make_product, customer):
        with pytest.raises(ValidationFailed, match="Comment is required"):
            _process(CommentOnProduct(product_id=make_product().id, user_id=customer.id, comment="   "))

    def test_long_comment(self, make_product, customer):
        with pytest.raises(ValidationFailed, match="at most 1000 characters"):
            _process(CommentOnProduct(product_id=make_product().id, user_id=customer.id, comment="x" * 1001))


class TestViews:
    def test_each_view_counts(self, make_product, reload):
        product = make_product()
        _process(RecordView(product_id=product.id))
        _process(RecordView(product_id=product.id))
        assert reload(product).view_count == 2

    def test_missing_product(self):
        with pytest.raises(NotFound):
            _process(RecordView(product_id="missing"))


class TestCatalogueQueries:
    def test_category_lists_only_available_products(self, make_product):
        make_product(name="Apple", category="Fruits")
        make_product(name="Old Pear", category="Fruits", available=False)
        make_product(name="Milk", category="Dairy")

        assert [p.name for p in products_in_category("Fruits")] == ["Apple"]

    def test_category_is_required(self):
        with pytest.raises(ValidationFailed, match="Category is required"):
            products_in_category(" ")

    def test_out_of_stock(self, make_product):
        make_product(name="Apple", in_stock=0)
        make_product(name="Milk", in_stock=3)

        page = list_out_of_stock(PageRequest.of(1, 10))
        assert [p.name for p in page.items] == ["Apple"]
        assert page.total == 1

    def test_rankings(self, make_product):
        apple = make_product(name="Apple", average_rating=4.5, review_count=2)
        milk = make_product(name="Milk", average_rating=3.0, review_count=9)
        with UnitOfWork():
            products = current_domain.repository_for(Product)
            products.record_sale(str(milk.id), 7, 14.0)
            products.increment_views(str(apple.id))

        assert trending_products()[0].name == "Milk"
        assert popular_products()[0].name == "Apple"
        assert top_rated_products()[0].name == "Apple"
        assert {p.name for p in recent_products()} == {"Apple", "Milk"}
