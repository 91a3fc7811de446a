"""Application services: Update Category (full) and Patch Category (partial)."""

from __future__ import annotations

from typing import Any

import structlog

from storefront.application.dto import CategoryDTO
from storefront.application.guards import require_principal
from storefront.domain.exceptions import CategoryNotFoundError
from storefront.domain.model.user import Principal
from storefront.domain.repository.category_repository import CategoryRepository
from storefront.domain.service.authorization_policy import AuthorizationPolicy

logger = structlog.get_logger(__name__)


class _CategoryEditor:

    def __init__(
        self,
        category_repo: CategoryRepository,
        policy: AuthorizationPolicy | None = None,
    ) -> None:
        self._category_repo = category_repo
        self._policy = policy or AuthorizationPolicy()

    def _edit(
        self, principal: Principal | None, category_id: str, changes: dict[str, Any]
    ) -> CategoryDTO:
        principal = require_principal(principal)
        self._policy.can_manage_categories(principal).enforce()

        category = self._category_repo.get_by_id(category_id)
        if category is None:
            raise CategoryNotFoundError(f"Category {category_id} not found")

        category.apply_changes(changes)
        self._category_repo.save(category)
        logger.info("Category updated", category_id=category_id, fields=sorted(changes))
        return CategoryDTO.from_category(category)


class UpdateCategoryHandler(_CategoryEditor):

    def handle(
        self,
        principal: Principal | None,
        category_id: str,
        name: str,
        description: str | None = None,
    ) -> CategoryDTO:
        """Replace both name and description."""
        return self._edit(
            principal, category_id, {"name": name, "description": description}
        )


class PatchCategoryHandler(_CategoryEditor):

    def handle(
        self, principal: Principal | None, category_id: str, changes: dict[str, Any]
    ) -> CategoryDTO:
        return self._edit(principal, category_id, dict(changes))
