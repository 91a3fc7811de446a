"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.  Each factory takes an
optional Settings so tests can point everything at a temporary directory.
"""

from __future__ import annotations

from datetime import timedelta

from storefront.application.order_workflow import OrderWorkflow
from storefront.domain.service.authorization_policy import AuthorizationPolicy
from storefront.infrastructure.auth.bcrypt_password_hasher import BcryptPasswordHasher
from storefront.infrastructure.auth.jwt_auth import JwtAuthResolver, JwtTokenIssuer
from storefront.infrastructure.config import Settings, get_settings
from storefront.infrastructure.persistence.json_category_repository import (
    JsonCategoryRepository,
)
from storefront.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from storefront.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from storefront.infrastructure.persistence.json_user_repository import (
    JsonUserRepository,
)
from storefront.infrastructure.storage.local_blob_store import LocalBlobStore


def product_repository(settings: Settings | None = None) -> JsonProductRepository:
    settings = settings or get_settings()
    return JsonProductRepository(settings.data_dir / "products.json")


def category_repository(settings: Settings | None = None) -> JsonCategoryRepository:
    settings = settings or get_settings()
    return JsonCategoryRepository(settings.data_dir / "categories.json")


def user_repository(settings: Settings | None = None) -> JsonUserRepository:
    settings = settings or get_settings()
    return JsonUserRepository(settings.data_dir / "users.json")


def order_repository(settings: Settings | None = None) -> JsonOrderRepository:
    settings = settings or get_settings()
    return JsonOrderRepository(settings.data_dir / "orders.json")


def blob_store(settings: Settings | None = None) -> LocalBlobStore:
    settings = settings or get_settings()
    return LocalBlobStore(settings.upload_dir)


def password_hasher() -> BcryptPasswordHasher:
    return BcryptPasswordHasher()


def token_issuer(settings: Settings | None = None) -> JwtTokenIssuer:
    settings = settings or get_settings()
    return JwtTokenIssuer(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl=timedelta(hours=settings.token_ttl_hours),
    )


def auth_resolver(settings: Settings | None = None) -> JwtAuthResolver:
    settings = settings or get_settings()
    return JwtAuthResolver(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        user_repo=user_repository(settings),
    )


def authorization_policy() -> AuthorizationPolicy:
    return AuthorizationPolicy()


def order_workflow(settings: Settings | None = None) -> OrderWorkflow:
    settings = settings or get_settings()
    return OrderWorkflow(
        order_repo=order_repository(settings),
        product_repo=product_repository(settings),
        user_repo=user_repository(settings),
        policy=authorization_policy(),
        deadline_seconds=settings.order_deadline_seconds,
    )
