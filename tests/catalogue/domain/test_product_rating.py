"""Tests for Product rating aggregation and edits."""

import pytest
from freshcart.catalogue.product.product import Product, rating_summary
from protean.exceptions import ValidationError


class TestRatingSummary:
    def test_average_and_count(self):
        assert rating_summary([5, 4, 4]) == (4.33, 3)

    def test_no_ratings(self):
        assert rating_summary([]) == (0.0, 0)


class TestProduct:
    def test_first_image_becomes_the_cover(self):
        product = Product.create("Apple", "Crisp", 2.5, "Fruits", images=["a.png", "b.png"])
        assert product.image_url == "a.png"
        assert product.image_list == ["a.png", "b.png"]

    def test_revise_applies_editable_fields(self):
        product = Product.create("Apple", "Crisp", 2.5, "Fruits")
        product.revise({"price": 3.0, "images": ["c.png"]})
        assert product.price == 3.0
        assert product.image_list == ["c.png"]

    def test_revise_rejects_counters(self):
        product = Product.create("Apple", "Crisp", 2.5, "Fruits")
        with pytest.raises(ValidationError):
            product.revise({"total_sold": 99})

    def test_stock_cannot_go_negative(self):
        with pytest.raises(ValidationError):
            Product.create("Apple", "Crisp", 2.5, "Fruits", in_stock=-1)

    def test_repr_shows_stock(self):
        product = Product(name="Milk", price=1.0, category="Dairy", in_stock=3)
        assert repr(product) == "<Product Milk stock=3>"
