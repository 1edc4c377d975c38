"""Pydantic request/response schemas for the driver API."""

from typing import Literal

from freshcart.identity.api.schemas import UserSchema
from freshcart.shared.api import CamelModel


class DriverAvailabilityRequest(CamelModel):
    status: Literal["active", "inactive"]


class DriverStatsSchema(CamelModel):
    total_assigned: int
    delivered_count: int


class DriverProfileSchema(CamelModel):
    vehicle_type: str
    vehicle_number: str | None = None
    license_no: str | None = None
    is_available: bool = False


class DriverSummarySchema(UserSchema):
    total_assigned: int = 0
    delivered_count: int = 0


class DriverDetailSchema(CamelModel):
    driver: UserSchema
    profile: DriverProfileSchema | None = None
    stats: DriverStatsSchema
