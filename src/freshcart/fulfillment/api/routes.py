"""FastAPI routes for drivers: availability and delivery statistics."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from freshcart.fulfillment.api.schemas import (
    DriverAvailabilityRequest,
    DriverDetailSchema,
    DriverProfileSchema,
    DriverStatsSchema,
    DriverSummarySchema,
)
from freshcart.fulfillment.driver.stats import SetDriverAvailability, driver_detail, drivers_with_stats, stats_for
from freshcart.identity.api.dependencies import get_driver
from freshcart.identity.api.schemas import UserSchema
from freshcart.identity.user.principal import Driver, acting_as
from freshcart.identity.user.user import User
from freshcart.shared.api import ApiResponse

driver_router = APIRouter(prefix="/driver", tags=["drivers"])


def _profile(user: User) -> DriverProfileSchema | None:
    profile = user.driver_profile
    if profile is None:
        return None
    return DriverProfileSchema(
        vehicle_type=profile.vehicle_type,
        vehicle_number=profile.vehicle_number,
        license_no=profile.license_no,
        is_available=user.is_active,
    )


@driver_router.get("/stats", response_model=ApiResponse[list[DriverSummarySchema]])
async def all_driver_stats(search: str | None = None):
    data = [
        DriverSummarySchema(
            **UserSchema.model_validate(driver).model_dump(),
            total_assigned=stats.total_assigned,
            delivered_count=stats.delivered_count,
        )
        for driver, stats in drivers_with_stats(search=search)
    ]
    return ApiResponse(data=data)


@driver_router.get("/stats/{driver_id}", response_model=ApiResponse[DriverStatsSchema])
async def driver_stats(driver_id: str):
    return ApiResponse(data=DriverStatsSchema.model_validate(stats_for(driver_id)))


@driver_router.get("/{driver_id}/detail", response_model=ApiResponse[DriverDetailSchema])
async def detail(driver_id: str):
    result = driver_detail(driver_id)
    return ApiResponse(
        data=DriverDetailSchema(
            driver=UserSchema.model_validate(result.user),
            profile=_profile(result.user),
            stats=DriverStatsSchema.model_validate(result.stats),
        )
    )


@driver_router.patch("/{driver_id}/status", response_model=ApiResponse[UserSchema])
async def update_availability(driver_id: str, body: DriverAvailabilityRequest, driver: Driver = Depends(get_driver)):
    command = SetDriverAvailability(**acting_as(driver), driver_id=driver_id, status=body.status)
    current_domain.process(command, asynchronous=False)
    return ApiResponse(
        message="Driver status updated",
        data=UserSchema.model_validate(current_domain.repository_for(User).get(driver_id)),
    )
