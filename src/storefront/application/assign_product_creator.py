"""Application service: Assign Product Creator use case.

Hands a product over to another user.  Only the current creator or an
admin may do so, and an unowned product may be claimed by anyone.
"""

from __future__ import annotations

import structlog

from storefront.application.dto import ProductDTO
from storefront.application.guards import require_principal
from storefront.domain.exceptions import ProductNotFoundError, UserNotFoundError
from storefront.domain.model.user import Principal
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.repository.user_repository import UserRepository
from storefront.domain.service.authorization_policy import AuthorizationPolicy

logger = structlog.get_logger(__name__)


class AssignProductCreatorHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        user_repo: UserRepository,
        policy: AuthorizationPolicy | None = None,
    ) -> None:
        self._product_repo = product_repo
        self._user_repo = user_repo
        self._policy = policy or AuthorizationPolicy()

    def handle(
        self, principal: Principal | None, product_id: str, user_id: str | None = None
    ) -> ProductDTO:
        """Make ``user_id`` (default: the caller) the product's creator."""
        principal = require_principal(principal)
        user_id = user_id or principal.user_id

        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(f"Product {product_id} not found")
        self._policy.can_modify_product(principal, product).enforce()

        if self._user_repo.get_by_id(user_id) is None:
            raise UserNotFoundError(f"User {user_id} not found")

        product.assign_creator(user_id)
        self._product_repo.save(product)
        logger.info(
            "Product creator assigned",
            product_id=product_id,
            creator_id=user_id,
            by=principal.user_id,
        )
        return ProductDTO.from_product(product)
