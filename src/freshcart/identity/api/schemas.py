"""Pydantic request/response schemas for the Identity API.

External contracts, camelCase on the wire, separate from the internal
commands.
"""

from datetime import datetime

from pydantic import EmailStr, Field

from freshcart.shared.api import CamelModel, PaginationSchema


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------
class RegisterRequest(CamelModel):
    email: EmailStr
    username: str = Field(min_length=3, max_length=50)
    password: str = Field(min_length=6, max_length=128)
    confirm_password: str

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "email": "jane@example.com",
                    "username": "jane",
                    "password": "secret123",
                    "confirmPassword": "secret123",
                }
            ]
        }
    }


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UpdateProfileRequest(CamelModel):
    email: EmailStr | None = None
    username: str | None = Field(default=None, min_length=3, max_length=50)
    password: str | None = Field(default=None, min_length=6, max_length=128)
    image: str | None = None
    phone_number: str | None = None
    location: str | None = None
    gender: str | None = None
    dob: str | None = None


class DeleteAccountRequest(CamelModel):
    password: str


class CreateUserRequest(CamelModel):
    email: EmailStr
    username: str = Field(min_length=3, max_length=50)
    password: str = Field(min_length=6, max_length=128)
    role: str = "user"
    phone_number: str | None = None
    location: str | None = None
    vehicle_type: str | None = None
    vehicle_number: str | None = None
    license_no: str | None = None


class UpdateUserRequest(UpdateProfileRequest):
    role: str | None = None
    status: str | None = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------
class UserSchema(CamelModel):
    id: str
    email: str
    username: str
    role: str
    status: str
    image: str | None = None
    phone_number: str | None = None
    location: str | None = None
    gender: str | None = None
    dob: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class LoginSchema(CamelModel):
    token: str
    user: UserSchema


class UserListSchema(CamelModel):
    users: list[UserSchema]
    pagination: PaginationSchema
