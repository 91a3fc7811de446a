"""HTTP routes for registration, login and user administration."""

from __future__ import annotations

from fastapi import APIRouter

from storefront.application.authenticate_user import AuthenticateUserHandler
from storefront.application.delete_user import DeleteUserHandler
from storefront.application.register_user import RegisterUserHandler
from storefront.application.show_product import ListUserProductsHandler
from storefront.application.show_user import ListUsersHandler, ShowUserHandler
from storefront.application.update_user import UpdateUserHandler
from storefront.infrastructure import bootstrap
from storefront.infrastructure.api.dependencies import (
    OptionalPrincipalDep,
    PaginationDep,
    PrincipalDep,
    SettingsDep,
)
from storefront.infrastructure.api.schemas import (
    LoginRequest,
    RegisterRequest,
    UserPatchRequest,
    envelope,
    page_envelope,
)

auth_router = APIRouter(prefix="/auth", tags=["auth"])
user_router = APIRouter(prefix="/users", tags=["users"])


@auth_router.post("/register", status_code=201)
def register(body: RegisterRequest, settings: SettingsDep, principal: OptionalPrincipalDep) -> dict:
    handler = RegisterUserHandler(
        user_repo=bootstrap.user_repository(settings),
        hasher=bootstrap.password_hasher(),
    )
    user = handler.handle(
        username=body.username,
        email=body.email,
        password=body.password,
        role=body.role,
        principal=principal,
    )
    return envelope(user)


@auth_router.post("/login")
def login(body: LoginRequest, settings: SettingsDep) -> dict:
    handler = AuthenticateUserHandler(
        user_repo=bootstrap.user_repository(settings),
        hasher=bootstrap.password_hasher(),
        token_issuer=bootstrap.token_issuer(settings),
    )
    result = handler.handle(body.email, body.password)
    return envelope(result.user, token=result.token)


@user_router.get("")
def list_users(settings: SettingsDep, principal: PrincipalDep, pagination: PaginationDep) -> dict:
    handler = ListUsersHandler(user_repo=bootstrap.user_repository(settings))
    return page_envelope(handler.handle(principal, pagination))


@user_router.get("/me")
def current_user(settings: SettingsDep, principal: PrincipalDep) -> dict:
    handler = ShowUserHandler(user_repo=bootstrap.user_repository(settings))
    return envelope(handler.handle(principal.user_id, principal))


@user_router.get("/{user_id}")
def get_user(user_id: str, settings: SettingsDep, principal: PrincipalDep) -> dict:
    handler = ShowUserHandler(user_repo=bootstrap.user_repository(settings))
    return envelope(handler.handle(user_id, principal))


@user_router.get("/{user_id}/products")
def list_user_products(
    user_id: str, settings: SettingsDep, principal: PrincipalDep, pagination: PaginationDep
) -> dict:
    handler = ListUserProductsHandler(
        product_repo=bootstrap.product_repository(settings),
        user_repo=bootstrap.user_repository(settings),
    )
    return page_envelope(handler.handle(principal, user_id, pagination))


@user_router.patch("/{user_id}")
def update_user(
    user_id: str, body: UserPatchRequest, settings: SettingsDep, principal: PrincipalDep
) -> dict:
    handler = UpdateUserHandler(
        user_repo=bootstrap.user_repository(settings),
        hasher=bootstrap.password_hasher(),
    )
    return envelope(handler.handle(principal, user_id, body.changes()))


@user_router.delete("/{user_id}")
def delete_user(user_id: str, settings: SettingsDep, principal: PrincipalDep) -> dict:
    handler = DeleteUserHandler(user_repo=bootstrap.user_repository(settings))
    handler.handle(user_id, principal)
    return {"success": True, "message": "User deleted"}
