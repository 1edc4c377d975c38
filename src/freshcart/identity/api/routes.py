"""FastAPI endpoints for the Identity context: auth, profile, admin users."""

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from freshcart.identity.api.dependencies import get_admin, get_current_user
from freshcart.identity.api.schemas import (
    CreateUserRequest,
    DeleteAccountRequest,
    LoginRequest,
    LoginSchema,
    RegisterRequest,
    UpdateProfileRequest,
    UpdateUserRequest,
    UserListSchema,
    UserSchema,
)
from freshcart.identity.user.administration import CreateUser, DeleteUser, UpdateUser, get_user, list_users
from freshcart.identity.user.principal import Admin, acting_as
from freshcart.identity.user.profile import UpdateProfile, delete_my_account
from freshcart.identity.user.registration import RegisterUser, authenticate, new_password_hash
from freshcart.identity.user.repository import load_user
from freshcart.identity.user.user import User
from freshcart.shared.api import ApiResponse, PaginationSchema, get_settings
from freshcart.shared.config import Settings
from freshcart.shared.pagination import PageRequest

auth_router = APIRouter(prefix="/auth", tags=["auth"])
admin_users_router = APIRouter(prefix="/admin/users", tags=["admin-users"])


def _with_password_hash(changes: dict) -> dict:
    password = changes.pop("password", None)
    if password:
        changes["password_hash"] = new_password_hash(password)
    return changes


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------
@auth_router.post("/register", status_code=201, response_model=ApiResponse[UserSchema])
async def register(body: RegisterRequest):
    command = RegisterUser(
        email=body.email,
        username=body.username,
        password_hash=new_password_hash(body.password, body.confirm_password),
    )
    user_id = current_domain.process(command, asynchronous=False)
    return ApiResponse(message="User Created", data=UserSchema.model_validate(load_user(user_id)))


@auth_router.post("/login", response_model=ApiResponse[LoginSchema])
async def login(body: LoginRequest, settings: Settings = Depends(get_settings)):
    result = authenticate(body.email, body.password, settings)
    return ApiResponse(
        message="Login successful",
        data=LoginSchema(token=result.token, user=UserSchema.model_validate(result.user)),
    )


@auth_router.get("/whoamI", response_model=ApiResponse[UserSchema])
async def who_am_i(user: User = Depends(get_current_user)):
    return ApiResponse(message="User fetched successfully", data=UserSchema.model_validate(user))


@auth_router.put("/update-profile", response_model=ApiResponse[UserSchema])
async def update_my_profile(body: UpdateProfileRequest, user: User = Depends(get_current_user)):
    changes = _with_password_hash(body.model_dump(exclude_unset=True))
    current_domain.process(UpdateProfile(user_id=str(user.id), **changes), asynchronous=False)
    return ApiResponse(message="User updated successfully", data=UserSchema.model_validate(load_user(str(user.id))))


@auth_router.delete("/me", response_model=ApiResponse[None])
async def delete_me(body: DeleteAccountRequest, user: User = Depends(get_current_user)):
    delete_my_account(str(user.id), body.password)
    return ApiResponse(message="Account deleted")


# ---------------------------------------------------------------------------
# Admin user management
# ---------------------------------------------------------------------------
@admin_users_router.post("", status_code=201, response_model=ApiResponse[UserSchema])
async def admin_create_user(body: CreateUserRequest, admin: Admin = Depends(get_admin)):
    fields = body.model_dump()
    command = CreateUser(
        **acting_as(admin),
        password_hash=new_password_hash(fields.pop("password")),
        **fields,
    )
    user_id = current_domain.process(command, asynchronous=False)
    return ApiResponse(message="User Created", data=UserSchema.model_validate(load_user(user_id)))


@admin_users_router.get("", response_model=ApiResponse[UserListSchema])
async def admin_list_users(
    page: int = Query(1, ge=1),
    size: str = Query("10"),
    search: str | None = None,
    role: str | None = None,
    admin: Admin = Depends(get_admin),
):
    result = list_users(admin, PageRequest.of(page, size), search=search, role=role)
    return ApiResponse(
        data=UserListSchema(
            users=[UserSchema.model_validate(user) for user in result.items],
            pagination=PaginationSchema.from_page(result),
        )
    )


@admin_users_router.get("/{user_id}", response_model=ApiResponse[UserSchema])
async def admin_get_user(user_id: str, admin: Admin = Depends(get_admin)):
    return ApiResponse(data=UserSchema.model_validate(get_user(admin, user_id)))


@admin_users_router.put("/{user_id}", response_model=ApiResponse[UserSchema])
async def admin_update_user(user_id: str, body: UpdateUserRequest, admin: Admin = Depends(get_admin)):
    changes = _with_password_hash(body.model_dump(exclude_unset=True))
    current_domain.process(UpdateUser(**acting_as(admin), user_id=user_id, **changes), asynchronous=False)
    return ApiResponse(message="User updated successfully", data=UserSchema.model_validate(load_user(user_id)))


@admin_users_router.delete("/{user_id}", response_model=ApiResponse[None])
async def admin_delete_user(user_id: str, admin: Admin = Depends(get_admin)):
    current_domain.process(DeleteUser(**acting_as(admin), user_id=user_id), asynchronous=False)
    return ApiResponse(message="User deleted")
