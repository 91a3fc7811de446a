"""Application service: Add Category use case."""

from __future__ import annotations

import structlog

from storefront.application.dto import CategoryDTO
from storefront.application.guards import require_principal
from storefront.domain.model.category import Category
from storefront.domain.model.user import Principal
from storefront.domain.repository.category_repository import CategoryRepository
from storefront.domain.service.authorization_policy import AuthorizationPolicy

logger = structlog.get_logger(__name__)


class AddCategoryHandler:

    def __init__(
        self,
        category_repo: CategoryRepository,
        policy: AuthorizationPolicy | None = None,
    ) -> None:
        self._category_repo = category_repo
        self._policy = policy or AuthorizationPolicy()

    def handle(
        self, principal: Principal | None, name: str, description: str | None = None
    ) -> CategoryDTO:
        """Create a category.  Names are unique; the store rejects duplicates."""
        principal = require_principal(principal)
        self._policy.can_manage_categories(principal).enforce()

        category = Category.create(name, description, creator_id=principal.user_id)
        self._category_repo.add(category)
        logger.info("Category added", category_id=category.id, name=category.name)
        return CategoryDTO.from_category(category)
