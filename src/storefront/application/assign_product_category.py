"""Application services: move one product, or many at once, into a category."""

from __future__ import annotations

import structlog

from storefront.application.dto import CategoryAssignmentDTO, ProductDTO
from storefront.application.guards import require_principal
from storefront.domain.exceptions import (
    CategoryNotFoundError,
    ProductNotFoundError,
    ValidationError,
)
from storefront.domain.model.user import Principal
from storefront.domain.repository.category_repository import CategoryRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.authorization_policy import AuthorizationPolicy

logger = structlog.get_logger(__name__)


class AssignProductCategoryHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        category_repo: CategoryRepository,
        policy: AuthorizationPolicy | None = None,
    ) -> None:
        self._product_repo = product_repo
        self._category_repo = category_repo
        self._policy = policy or AuthorizationPolicy()

    def handle(
        self, principal: Principal | None, product_id: str, category_id: str | None
    ) -> ProductDTO:
        principal = require_principal(principal)
        if not category_id:
            raise ValidationError("A category ID is required")

        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(f"Product {product_id} not found")
        self._policy.can_modify_product(principal, product).enforce()

        if self._category_repo.get_by_id(category_id) is None:
            raise CategoryNotFoundError(f"Category {category_id} not found")

        product.assign_category(category_id)
        self._product_repo.save(product)
        logger.info(
            "Product category assigned",
            product_id=product_id,
            category_id=category_id,
            by=principal.user_id,
        )
        return ProductDTO.from_product(product)


class AssignProductsToCategoryHandler:
    """Admin-only bulk move.  Unknown product IDs are ignored."""

    def __init__(
        self,
        product_repo: ProductRepository,
        category_repo: CategoryRepository,
        policy: AuthorizationPolicy | None = None,
    ) -> None:
        self._product_repo = product_repo
        self._category_repo = category_repo
        self._policy = policy or AuthorizationPolicy()

    def handle(
        self, principal: Principal | None, category_id: str, product_ids: list[str] | None
    ) -> CategoryAssignmentDTO:
        principal = require_principal(principal)
        self._policy.can_manage_categories(principal).enforce()
        if not product_ids:
            raise ValidationError("Provide at least one product ID")

        if self._category_repo.get_by_id(category_id) is None:
            raise CategoryNotFoundError(f"Category {category_id} not found")

        moved = self._product_repo.assign_category(product_ids, category_id)
        found = [self._product_repo.get_by_id(pid) for pid in dict.fromkeys(product_ids)]
        logger.info(
            "Products assigned to category",
            category_id=category_id,
            updated=[p.id for p in moved],
            by=principal.user_id,
        )
        return CategoryAssignmentDTO(
            updated_count=len(moved),
            products=[ProductDTO.from_product(p) for p in found if p is not None],
        )
