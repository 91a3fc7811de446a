"""Application services: Update Product (full) and Patch Product (partial).

Neither affects existing orders, which captured a price and name
snapshot at creation time.
"""

from __future__ import annotations

from typing import Any

import structlog

from storefront.application.dto import ProductDTO, ProductFields
from storefront.application.guards import require_principal
from storefront.domain.exceptions import CategoryNotFoundError, ProductNotFoundError
from storefront.domain.model.product import Product
from storefront.domain.model.user import Principal
from storefront.domain.repository.category_repository import CategoryRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.authorization_policy import AuthorizationPolicy

logger = structlog.get_logger(__name__)


class _ProductEditor:
    """Shared load / authorize / merge / persist steps."""

    def __init__(
        self,
        product_repo: ProductRepository,
        category_repo: CategoryRepository,
        policy: AuthorizationPolicy | None = None,
    ) -> None:
        self._product_repo = product_repo
        self._category_repo = category_repo
        self._policy = policy or AuthorizationPolicy()

    def _edit(
        self, principal: Principal | None, product_id: str, changes: dict[str, Any]
    ) -> ProductDTO:
        principal = require_principal(principal)

        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(f"Product {product_id} not found")
        self._policy.can_modify_product(principal, product).enforce()

        category_id = changes.get("category_id")
        if category_id and self._category_repo.get_by_id(category_id) is None:
            raise CategoryNotFoundError(f"Category {category_id} not found")

        product.apply_changes(changes)
        self._persist(product, changes)
        logger.info(
            "Product updated",
            product_id=product_id,
            fields=sorted(changes),
            by=principal.user_id,
        )
        return ProductDTO.from_product(product)

    def _persist(self, product: Product, changes: dict[str, Any]) -> None:
        # save() leaves stock alone so a concurrent order is never overwritten;
        # an explicit stock edit goes through set_stock.
        self._product_repo.save(product)
        if "stock" in changes:
            self._product_repo.set_stock(product.id, product.stock)  # type: ignore[arg-type]


class UpdateProductHandler(_ProductEditor):

    def handle(
        self, principal: Principal | None, product_id: str, fields: ProductFields
    ) -> ProductDTO:
        """Replace every editable field of the product."""
        return self._edit(principal, product_id, fields.as_changes())


class PatchProductHandler(_ProductEditor):

    def handle(
        self, principal: Principal | None, product_id: str, changes: dict[str, Any]
    ) -> ProductDTO:
        """Merge only the given fields.  Unknown fields are rejected."""
        return self._edit(principal, product_id, dict(changes))
