"""Customer engagement: views, ratings, favorites and comments."""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from freshcart.catalogue.product.product import Product, ProductComment, ProductFavorite, ProductRating
from freshcart.catalogue.product.repository import (
    comments_for,
    favorite_for,
    favorites_of,
    load_product,
    rating_for,
    refresh_rating,
)
from freshcart.domain import freshcart
from freshcart.shared.errors import NotFound, ValidationFailed

logger = structlog.get_logger(__name__)

MAX_COMMENT_LENGTH = 1000


@freshcart.command(part_of="Product")
class RecordView:
    product_id = Identifier(required=True)


@freshcart.command(part_of="Product")
class RateProduct:
    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rating = Integer(required=True)


@freshcart.command(part_of="Product")
class ToggleFavorite:
    product_id = Identifier(required=True)
    user_id = Identifier(required=True)


@freshcart.command(part_of="Product")
class CommentOnProduct:
    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    comment = Text()


@freshcart.command_handler(part_of=Product)
class EngagementHandler:
    @handle(RecordView)
    def record_view(self, command):
        if not current_domain.repository_for(Product).increment_views(command.product_id):
            raise NotFound("Product not found")
        return str(command.product_id)

    @handle(RateProduct)
    def rate_product(self, command):
        """Rate 1..5. A user's latest rating replaces their previous one."""
        if not 1 <= command.rating <= 5:
            raise ValidationFailed("Rating must be between 1 and 5")
        product = load_product(command.product_id)

        ratings = current_domain.repository_for(ProductRating)
        existing = rating_for(str(product.id), command.user_id)
        if existing is None:
            ratings.add(ProductRating(product_id=str(product.id), user_id=command.user_id, rating=command.rating))
        else:
            existing.change(command.rating)
            ratings.add(existing)
        average, count = refresh_rating(str(product.id))

        logger.info(
            "product_rated",
            product_id=str(product.id),
            user_id=str(command.user_id),
            rating=command.rating,
            average_rating=average,
            review_count=count,
        )
        return str(product.id)

    @handle(ToggleFavorite)
    def toggle_favorite(self, command):
        """Favorite the product, or un-favorite it if it already is. Returns the new state."""
        product = load_product(command.product_id)
        favorites = current_domain.repository_for(ProductFavorite)

        favorite = favorite_for(str(product.id), command.user_id)
        if favorite is None:
            favorites.add(ProductFavorite(product_id=str(product.id), user_id=command.user_id))
            return True

        favorites._dao.delete(favorite)
        return False

    @handle(CommentOnProduct)
    def comment_on_product(self, command):
        text = (command.comment or "").strip()
        if not text:
            raise ValidationFailed("Comment is required")
        if len(text) > MAX_COMMENT_LENGTH:
            raise ValidationFailed(f"Comment must be at most {MAX_COMMENT_LENGTH} characters")

        product = load_product(command.product_id)
        comment = ProductComment(product_id=str(product.id), user_id=command.user_id, comment=text)
        current_domain.repository_for(ProductComment).add(comment)
        return str(comment.id)


def list_comments(product_id: str) -> list[ProductComment]:
    load_product(product_id)
    return comments_for(product_id)


def list_favorites(user_id: str) -> list[Product]:
    products = current_domain.repository_for(Product)
    favorited = (products.find(str(favorite.product_id)) for favorite in favorites_of(user_id))
    return [product for product in favorited if product is not None]
