"""User accounts.

A user is a customer, an admin or a driver, set by ``role``. ``status``
only matters for drivers: an inactive driver is off shift. Drivers may
carry a ``DriverProfile`` describing their vehicle.
"""

from enum import Enum

from protean.fields import DateTime, String, ValueObject

from freshcart.domain import freshcart
from freshcart.fulfillment.driver.driver import DriverProfile
from freshcart.shared.clock import utcnow

PROFILE_FIELDS = ("image", "phone_number", "location", "gender", "dob")


class Role(Enum):
    USER = "user"
    ADMIN = "admin"
    DRIVER = "driver"


class UserStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


@freshcart.aggregate
class User:
    email: String(required=True, max_length=254, unique=True)
    username: String(required=True, max_length=50, unique=True)
    password_hash: String(required=True, max_length=255)
    image: String(max_length=500)
    phone_number: String(max_length=30)
    location: String(max_length=255)
    gender: String(max_length=20)
    dob: String(max_length=30)
    role: String(choices=Role, default=Role.USER.value)
    status: String(choices=UserStatus, default=UserStatus.ACTIVE.value)
    driver_profile: ValueObject(DriverProfile)
    created_at: DateTime(default=utcnow)
    updated_at: DateTime(default=utcnow)

    @classmethod
    def register(cls, email, username, password_hash, role=Role.USER.value, **profile):
        now = utcnow()
        return cls(
            email=email.lower(),
            username=username,
            password_hash=password_hash,
            role=role,
            created_at=now,
            updated_at=now,
            **{name: value for name, value in profile.items() if name in PROFILE_FIELDS},
        )

    @property
    def is_driver(self) -> bool:
        return self.role == Role.DRIVER.value

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE.value

    def update_details(self, email=None, username=None, password_hash=None, **profile):
        """Apply the non-empty values; ``None`` leaves a field unchanged."""
        if email:
            self.email = email.lower()
        if username:
            self.username = username
        if password_hash:
            self.password_hash = password_hash
        for name in PROFILE_FIELDS:
            value = profile.get(name)
            if value is not None:
                setattr(self, name, value)
        self.updated_at = utcnow()

    def change_role(self, role):
        self.role = role
        self.updated_at = utcnow()

    def change_status(self, status):
        self.status = status
        self.updated_at = utcnow()

    def assign_vehicle(self, vehicle_type, vehicle_number=None, license_no=None):
        self.driver_profile = DriverProfile(
            vehicle_type=vehicle_type,
            vehicle_number=vehicle_number,
            license_no=license_no,
        )
        self.updated_at = utcnow()
