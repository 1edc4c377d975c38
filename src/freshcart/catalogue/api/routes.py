"""FastAPI routes for the Catalogue context: products and engagement.

Static paths are declared before ``/{product_id}`` so they are not read
as product ids.
"""

import json

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from freshcart.catalogue.api.schemas import (
    CommentAuthorSchema,
    CommentRequest,
    CommentSchema,
    CreateProductRequest,
    FavoriteSchema,
    ProductListSchema,
    ProductSchema,
    RateRequest,
    RestockRequest,
    UpdateProductRequest,
)
from freshcart.catalogue.product import engagement, queries
from freshcart.catalogue.product.management import CreateProduct, DeleteProduct, RestockProduct, UpdateProduct
from freshcart.catalogue.product.product import ProductComment
from freshcart.identity.api.dependencies import get_admin, get_current_user
from freshcart.identity.user.principal import Admin, acting_as
from freshcart.identity.user.user import User
from freshcart.shared.api import ApiResponse, PaginationSchema
from freshcart.shared.pagination import Page, PageRequest

product_router = APIRouter(prefix="/products", tags=["products"])


def _product(product) -> ProductSchema:
    return ProductSchema.model_validate(product)


def _products(products) -> list[ProductSchema]:
    return [_product(product) for product in products]


def _page(page: Page) -> ProductListSchema:
    return ProductListSchema(products=_products(page.items), pagination=PaginationSchema.from_page(page))


def _comment(comment: ProductComment) -> CommentSchema:
    author = current_domain.repository_for(User).find(str(comment.user_id))
    return CommentSchema(
        id=str(comment.id),
        product_id=str(comment.product_id),
        comment=comment.comment,
        created_at=comment.created_at,
        user=CommentAuthorSchema.model_validate(author) if author else None,
    )


# ---------------------------------------------------------------------------
# Catalogue reads
# ---------------------------------------------------------------------------
@product_router.get("", response_model=ApiResponse[ProductListSchema])
async def list_products(page: int = Query(1, ge=1), size: str = Query("10"), search: str | None = None):
    result = queries.list_products(PageRequest.of(page, size), search=search)
    return ApiResponse(message="Products fetched successfully", data=_page(result))


@product_router.get("/recent", response_model=ApiResponse[list[ProductSchema]])
async def recent(limit: int = Query(10, ge=1, le=100)):
    return ApiResponse(data=_products(queries.recent_products(limit)))


@product_router.get("/trending", response_model=ApiResponse[list[ProductSchema]])
async def trending(limit: int = Query(10, ge=1, le=100)):
    return ApiResponse(data=_products(queries.trending_products(limit)))


@product_router.get("/popular", response_model=ApiResponse[list[ProductSchema]])
async def popular(limit: int = Query(10, ge=1, le=100)):
    return ApiResponse(data=_products(queries.popular_products(limit)))


@product_router.get("/top-rated", response_model=ApiResponse[list[ProductSchema]])
async def top_rated(limit: int = Query(10, ge=1, le=100)):
    return ApiResponse(data=_products(queries.top_rated_products(limit)))


@product_router.get("/out-of-stock", response_model=ApiResponse[ProductListSchema])
async def out_of_stock(
    page: int = Query(1, ge=1),
    size: str = Query("10"),
    search: str | None = None,
    category: str | None = None,
):
    result = queries.list_out_of_stock(PageRequest.of(page, size), search=search, category=category)
    return ApiResponse(data=_page(result))


@product_router.get("/category/{category}", response_model=ApiResponse[list[ProductSchema]])
async def by_category(category: str):
    return ApiResponse(data=_products(queries.products_in_category(category)))


@product_router.get("/favorites/me", response_model=ApiResponse[list[ProductSchema]])
async def my_favorites(user: User = Depends(get_current_user)):
    return ApiResponse(data=_products(engagement.list_favorites(str(user.id))))


@product_router.get("/{product_id}", response_model=ApiResponse[ProductSchema])
async def get_product(product_id: str):
    return ApiResponse(data=_product(queries.get_product(product_id)))


@product_router.get("/{product_id}/comments", response_model=ApiResponse[list[CommentSchema]])
async def comments(product_id: str):
    return ApiResponse(data=[_comment(c) for c in engagement.list_comments(product_id)])


# ---------------------------------------------------------------------------
# Engagement
# ---------------------------------------------------------------------------
@product_router.patch("/{product_id}/view", response_model=ApiResponse[ProductSchema])
async def record_view(product_id: str):
    current_domain.process(engagement.RecordView(product_id=product_id), asynchronous=False)
    return ApiResponse(data=_product(queries.get_product(product_id)))


@product_router.post("/{product_id}/rate", response_model=ApiResponse[ProductSchema])
async def rate(product_id: str, body: RateRequest, user: User = Depends(get_current_user)):
    command = engagement.RateProduct(product_id=product_id, user_id=str(user.id), rating=body.rating)
    current_domain.process(command, asynchronous=False)
    return ApiResponse(message="Rating saved", data=_product(queries.get_product(product_id)))


@product_router.post("/{product_id}/favorite", response_model=ApiResponse[FavoriteSchema])
async def favorite(product_id: str, user: User = Depends(get_current_user)):
    command = engagement.ToggleFavorite(product_id=product_id, user_id=str(user.id))
    favorited = current_domain.process(command, asynchronous=False)
    message = "Added to favorites" if favorited else "Removed from favorites"
    return ApiResponse(message=message, data=FavoriteSchema(product_id=product_id, favorited=favorited))


@product_router.post("/{product_id}/comment", status_code=201, response_model=ApiResponse[CommentSchema])
async def comment(product_id: str, body: CommentRequest, user: User = Depends(get_current_user)):
    command = engagement.CommentOnProduct(product_id=product_id, user_id=str(user.id), comment=body.comment)
    comment_id = current_domain.process(command, asynchronous=False)
    created = current_domain.repository_for(ProductComment).get(comment_id)
    return ApiResponse(message="Comment added", data=_comment(created))


# ---------------------------------------------------------------------------
# Admin writes
# ---------------------------------------------------------------------------
@product_router.post("", status_code=201, response_model=ApiResponse[ProductSchema])
async def create(body: CreateProductRequest, admin: Admin = Depends(get_admin)):
    fields = body.model_dump()
    fields["images"] = json.dumps(fields["images"])
    product_id = current_domain.process(CreateProduct(**acting_as(admin), **fields), asynchronous=False)
    return ApiResponse(message="Product created", data=_product(queries.get_product(product_id)))


@product_router.put("/{product_id}", response_model=ApiResponse[ProductSchema])
async def update(product_id: str, body: UpdateProductRequest, admin: Admin = Depends(get_admin)):
    changes = json.dumps(body.model_dump(exclude_unset=True))
    current_domain.process(
        UpdateProduct(**acting_as(admin), product_id=product_id, changes=changes),
        asynchronous=False,
    )
    return ApiResponse(message="Product updated", data=_product(queries.get_product(product_id)))


@product_router.put("/{product_id}/restock", response_model=ApiResponse[ProductSchema])
async def restock(product_id: str, body: RestockRequest, admin: Admin = Depends(get_admin)):
    command = RestockProduct(**acting_as(admin), product_id=product_id, quantity=body.quantity, mode=body.mode)
    current_domain.process(command, asynchronous=False)
    return ApiResponse(message="Product restocked", data=_product(queries.get_product(product_id)))


@product_router.delete("/{product_id}", response_model=ApiResponse[None])
async def delete(product_id: str, admin: Admin = Depends(get_admin)):
    current_domain.process(DeleteProduct(**acting_as(admin), product_id=product_id), asynchronous=False)
    return ApiResponse(message="Product deleted")
