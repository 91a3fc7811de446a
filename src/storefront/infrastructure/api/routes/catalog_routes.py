"""HTTP routes for products and categories."""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, File, Query, UploadFile

from storefront.application.add_category import AddCategoryHandler
from storefront.application.add_product import AddProductHandler
from storefront.application.assign_product_category import (
    AssignProductCategoryHandler,
    AssignProductsToCategoryHandler,
)
from storefront.application.assign_product_creator import AssignProductCreatorHandler
from storefront.application.delete_category import DeleteCategoryHandler
from storefront.application.delete_product import DeleteProductHandler
from storefront.application.dto import ImageUpload
from storefront.application.show_category import (
    ListCategoriesHandler,
    ListCategoryProductsHandler,
    ShowCategoryHandler,
)
from storefront.application.show_product import (
    ListProductsHandler,
    SearchProductsHandler,
    ShowProductHandler,
)
from storefront.application.update_category import PatchCategoryHandler, UpdateCategoryHandler
from storefront.application.update_product import PatchProductHandler, UpdateProductHandler
from storefront.application.upload_product_image import UploadProductImageHandler
from storefront.infrastructure import bootstrap
from storefront.infrastructure.api.dependencies import (
    PaginationDep,
    PrincipalDep,
    SettingsDep,
)
from storefront.infrastructure.api.schemas import (
    AssignCategoryRequest,
    AssignCreatorRequest,
    CategoryPatchRequest,
    CategoryProductsRequest,
    CategoryRequest,
    ProductPatchRequest,
    ProductRequest,
    envelope,
    page_envelope,
)

product_router = APIRouter(prefix="/products", tags=["products"])
category_router = APIRouter(prefix="/categories", tags=["categories"])


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
@product_router.get("")
def list_products(
    settings: SettingsDep,
    pagination: PaginationDep,
    min_price: Annotated[Decimal | None, Query(alias="minPrice")] = None,
    max_price: Annotated[Decimal | None, Query(alias="maxPrice")] = None,
    is_available: Annotated[bool | None, Query(alias="isAvailable")] = None,
    category_id: Annotated[str | None, Query(alias="categoryId")] = None,
) -> dict:
    handler = ListProductsHandler(product_repo=bootstrap.product_repository(settings))
    page = handler.handle(
        min_price=min_price,
        max_price=max_price,
        is_available=is_available,
        category_id=category_id,
        pagination=pagination,
    )
    return page_envelope(page)


@product_router.get("/search")
def search_products(
    settings: SettingsDep,
    pagination: PaginationDep,
    term: str | None = None,
) -> dict:
    handler = SearchProductsHandler(product_repo=bootstrap.product_repository(settings))
    return page_envelope(handler.handle(term, pagination))


@product_router.get("/{product_id}")
def get_product(product_id: str, settings: SettingsDep) -> dict:
    handler = ShowProductHandler(product_repo=bootstrap.product_repository(settings))
    return envelope(handler.handle(product_id))


@product_router.post("", status_code=201)
def create_product(body: ProductRequest, settings: SettingsDep, principal: PrincipalDep) -> dict:
    handler = AddProductHandler(
        product_repo=bootstrap.product_repository(settings),
        category_repo=bootstrap.category_repository(settings),
    )
    return envelope(handler.handle(principal, body.to_fields()))


@product_router.put("/{product_id}")
def replace_product(
    product_id: str, body: ProductRequest, settings: SettingsDep, principal: PrincipalDep
) -> dict:
    handler = UpdateProductHandler(
        product_repo=bootstrap.product_repository(settings),
        category_repo=bootstrap.category_repository(settings),
    )
    return envelope(handler.handle(principal, product_id, body.to_fields()))


@product_router.patch("/{product_id}")
def patch_product(
    product_id: str, body: ProductPatchRequest, settings: SettingsDep, principal: PrincipalDep
) -> dict:
    handler = PatchProductHandler(
        product_repo=bootstrap.product_repository(settings),
        category_repo=bootstrap.category_repository(settings),
    )
    return envelope(handler.handle(principal, product_id, body.changes()))


@product_router.post("/{product_id}/image")
def upload_product_image(
    product_id: str,
    file: Annotated[UploadFile, File()],
    settings: SettingsDep,
    principal: PrincipalDep,
) -> dict:
    upload = ImageUpload(
        data=file.file.read(),
        content_type=file.content_type or "",
        filename=file.filename or "",
    )
    handler = UploadProductImageHandler(
        product_repo=bootstrap.product_repository(settings),
        blob_store=bootstrap.blob_store(settings),
        max_bytes=settings.max_image_bytes,
    )
    return envelope(handler.handle(principal, product_id, upload))


@product_router.post("/{product_id}/creator")
def assign_product_creator(
    product_id: str, body: AssignCreatorRequest, settings: SettingsDep, principal: PrincipalDep
) -> dict:
    handler = AssignProductCreatorHandler(
        product_repo=bootstrap.product_repository(settings),
        user_repo=bootstrap.user_repository(settings),
    )
    return envelope(handler.handle(principal, product_id, body.user_id))


@product_router.post("/{product_id}/category")
def assign_product_category(
    product_id: str, body: AssignCategoryRequest, settings: SettingsDep, principal: PrincipalDep
) -> dict:
    handler = AssignProductCategoryHandler(
        product_repo=bootstrap.product_repository(settings),
        category_repo=bootstrap.category_repository(settings),
    )
    return envelope(handler.handle(principal, product_id, body.category_id))


@product_router.delete("/{product_id}")
def delete_product(product_id: str, settings: SettingsDep, principal: PrincipalDep) -> dict:
    handler = DeleteProductHandler(
        product_repo=bootstrap.product_repository(settings),
        blob_store=bootstrap.blob_store(settings),
    )
    handler.handle(principal, product_id)
    return {"success": True, "message": "Product deleted"}


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------
@category_router.get("")
def list_categories(settings: SettingsDep, pagination: PaginationDep) -> dict:
    handler = ListCategoriesHandler(category_repo=bootstrap.category_repository(settings))
    return page_envelope(handler.handle(pagination))


@category_router.get("/{category_id}")
def get_category(category_id: str, settings: SettingsDep) -> dict:
    handler = ShowCategoryHandler(category_repo=bootstrap.category_repository(settings))
    return envelope(handler.handle(category_id))


@category_router.get("/{category_id}/products")
def list_category_products(
    category_id: str, settings: SettingsDep, pagination: PaginationDep
) -> dict:
    handler = ListCategoryProductsHandler(
        category_repo=bootstrap.category_repository(settings),
        product_repo=bootstrap.product_repository(settings),
    )
    return page_envelope(handler.handle(category_id, pagination))


@category_router.post("/{category_id}/products")
def assign_products_to_category(
    category_id: str,
    body: CategoryProductsRequest,
    settings: SettingsDep,
    principal: PrincipalDep,
) -> dict:
    handler = AssignProductsToCategoryHandler(
        product_repo=bootstrap.product_repository(settings),
        category_repo=bootstrap.category_repository(settings),
    )
    return envelope(handler.handle(principal, category_id, body.product_ids))


@category_router.post("", status_code=201)
def create_category(body: CategoryRequest, settings: SettingsDep, principal: PrincipalDep) -> dict:
    handler = AddCategoryHandler(category_repo=bootstrap.category_repository(settings))
    return envelope(handler.handle(principal, body.name, body.description))


@category_router.put("/{category_id}")
def replace_category(
    category_id: str, body: CategoryRequest, settings: SettingsDep, principal: PrincipalDep
) -> dict:
    handler = UpdateCategoryHandler(category_repo=bootstrap.category_repository(settings))
    return envelope(handler.handle(principal, category_id, body.name, body.description))


@category_router.patch("/{category_id}")
def patch_category(
    category_id: str, body: CategoryPatchRequest, settings: SettingsDep, principal: PrincipalDep
) -> dict:
    handler = PatchCategoryHandler(category_repo=bootstrap.category_repository(settings))
    return envelope(handler.handle(principal, category_id, body.changes()))


@category_router.delete("/{category_id}")
def delete_category(category_id: str, settings: SettingsDep, principal: PrincipalDep) -> dict:
    handler = DeleteCategoryHandler(
        category_repo=bootstrap.category_repository(settings),
        product_repo=bootstrap.product_repository(settings),
    )
    handler.handle(principal, category_id)
    return {"success": True, "message": "Category deleted"}
