"""Application service: Delete Category use case."""

from __future__ import annotations

import structlog

from storefront.application.dto import CategoryDTO
from storefront.application.guards import require_principal
from storefront.domain.exceptions import CategoryInUseError, CategoryNotFoundError
from storefront.domain.model.user import Principal
from storefront.domain.repository.category_repository import CategoryRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.authorization_policy import AuthorizationPolicy

logger = structlog.get_logger(__name__)


class DeleteCategoryHandler:

    def __init__(
        self,
        category_repo: CategoryRepository,
        product_repo: ProductRepository,
        policy: AuthorizationPolicy | None = None,
    ) -> None:
        self._category_repo = category_repo
        self._product_repo = product_repo
        self._policy = policy or AuthorizationPolicy()

    def handle(self, principal: Principal | None, category_id: str) -> CategoryDTO:
        """Delete a category that no product refers to."""
        principal = require_principal(principal)
        self._policy.can_manage_categories(principal).enforce()

        category = self._category_repo.get_by_id(category_id)
        if category is None:
            raise CategoryNotFoundError(f"Category {category_id} not found")

        in_use = self._product_repo.count_by_category(category_id)
        if in_use:
            raise CategoryInUseError(
                f"Cannot delete category because it has {in_use} associated products"
            )

        self._category_repo.delete(category_id)
        logger.info("Category deleted", category_id=category_id, by=principal.user_id)
        return CategoryDTO.from_category(category)
