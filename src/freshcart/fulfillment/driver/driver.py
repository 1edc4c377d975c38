"""Driver profiles: the vehicle a driver user delivers with."""

from enum import Enum

from protean.fields import String

from freshcart.domain import freshcart


class VehicleType(Enum):
    BIKE = "bike"
    VAN = "van"
    TRUCK = "truck"


@freshcart.value_object(part_of="User")
class DriverProfile:
    vehicle_type: String(choices=VehicleType, required=True)
    vehicle_number: String(max_length=30)
    license_no: String(max_length=50)
