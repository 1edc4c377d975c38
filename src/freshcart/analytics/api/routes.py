"""FastAPI routes for admin analytics. Every endpoint takes an optional from/to range."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query

from freshcart.analytics import kpis as analytics
from freshcart.analytics.api.schemas import (
    EarningsPointSchema,
    KpisSchema,
    TopDriverSchema,
    TopProductSchema,
    ViewedProductSchema,
)
from freshcart.identity.api.dependencies import get_admin
from freshcart.identity.user.principal import Admin
from freshcart.shared.api import ApiResponse

analytics_router = APIRouter(prefix="/admin/analytics", tags=["admin-analytics"])


def date_range(
    start: datetime | None = Query(None, alias="from"),
    end: datetime | None = Query(None, alias="to"),
) -> analytics.DateRange:
    return analytics.DateRange.of(start, end)


@analytics_router.get("/kpis", response_model=ApiResponse[KpisSchema])
async def kpis(range_: analytics.DateRange = Depends(date_range), admin: Admin = Depends(get_admin)):
    return ApiResponse(data=KpisSchema.model_validate(analytics.kpis(admin, range_)))


@analytics_router.get("/earnings", response_model=ApiResponse[list[EarningsPointSchema]])
async def earnings(
    group: str = "daily",
    range_: analytics.DateRange = Depends(date_range),
    admin: Admin = Depends(get_admin),
):
    points = analytics.earnings(admin, range_, group)
    return ApiResponse(data=[EarningsPointSchema.model_validate(p) for p in points])


@analytics_router.get("/category-share", response_model=ApiResponse[list[EarningsPointSchema]])
async def category_share(range_: analytics.DateRange = Depends(date_range), admin: Admin = Depends(get_admin)):
    shares = analytics.category_share(admin, range_)
    return ApiResponse(data=[EarningsPointSchema.model_validate(s) for s in shares])


@analytics_router.get("/top-products", response_model=ApiResponse[list[TopProductSchema]])
async def top_products(
    limit: int = Query(10, ge=1, le=100),
    range_: analytics.DateRange = Depends(date_range),
    admin: Admin = Depends(get_admin),
):
    rows = analytics.top_products(admin, range_, limit)
    return ApiResponse(data=[TopProductSchema.model_validate(r) for r in rows])


@analytics_router.get("/drivers", response_model=ApiResponse[list[TopDriverSchema]])
async def drivers(
    limit: int = Query(10, ge=1, le=100),
    range_: analytics.DateRange = Depends(date_range),
    admin: Admin = Depends(get_admin),
):
    rows = analytics.top_drivers(admin, range_, limit)
    return ApiResponse(data=[TopDriverSchema.model_validate(r) for r in rows])


@analytics_router.get("/top-viewed", response_model=ApiResponse[list[ViewedProductSchema]])
async def top_viewed(limit: int = Query(10, ge=1, le=100), admin: Admin = Depends(get_admin)):
    rows = analytics.top_viewed_products(admin, limit)
    return ApiResponse(data=[ViewedProductSchema.model_validate(p) for p in rows])
