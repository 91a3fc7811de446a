"""Application service: Delete Product use case."""

from __future__ import annotations

import structlog

from storefront.application.dto import ProductDTO
from storefront.application.guards import require_principal
from storefront.domain.exceptions import ProductNotFoundError
from storefront.domain.model.user import Principal
from storefront.domain.ports import BlobStore
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.authorization_policy import AuthorizationPolicy

logger = structlog.get_logger(__name__)


class DeleteProductHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        blob_store: BlobStore,
        policy: AuthorizationPolicy | None = None,
    ) -> None:
        self._product_repo = product_repo
        self._blob_store = blob_store
        self._policy = policy or AuthorizationPolicy()

    def handle(self, principal: Principal | None, product_id: str) -> ProductDTO:
        """Remove the product and any uploaded (non-default) image."""
        principal = require_principal(principal)

        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(f"Product {product_id} not found")
        self._policy.can_modify_product(principal, product).enforce()

        self._product_repo.delete(product_id)
        if product.has_custom_image:
            self._blob_store.delete(product.image)

        logger.info("Product deleted", product_id=product_id, by=principal.user_id)
        return ProductDTO.from_product(product)
