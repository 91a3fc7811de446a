"""Application service: Upload Product Image use case."""

from __future__ import annotations

import structlog

from storefront.application.dto import ImageUpload, ProductDTO
from storefront.application.guards import require_principal
from storefront.domain.exceptions import ProductNotFoundError, ValidationError
from storefront.domain.model.user import Principal
from storefront.domain.ports import BlobStore
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.authorization_policy import AuthorizationPolicy

logger = structlog.get_logger(__name__)

MAX_IMAGE_BYTES = 5 * 1024 * 1024


class UploadProductImageHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        blob_store: BlobStore,
        policy: AuthorizationPolicy | None = None,
        max_bytes: int = MAX_IMAGE_BYTES,
    ) -> None:
        self._product_repo = product_repo
        self._blob_store = blob_store
        self._policy = policy or AuthorizationPolicy()
        self._max_bytes = max_bytes

    def handle(
        self, principal: Principal | None, product_id: str, upload: ImageUpload
    ) -> ProductDTO:
        """Store a new product image, replacing (and deleting) any previous upload."""
        principal = require_principal(principal)
        self._check_upload(upload)

        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(f"Product {product_id} not found")
        self._policy.can_modify_product(principal, product).enforce()

        reference = self._blob_store.store(
            upload.data, upload.content_type, name_hint=f"product_{product_id}"
        )
        previous = product.replace_image(reference)
        try:
            self._product_repo.save(product)
        except Exception:
            self._blob_store.delete(reference)
            raise

        if previous is not None:
            self._blob_store.delete(previous)

        logger.info("Product image replaced", product_id=product_id, image=reference)
        return ProductDTO.from_product(product)

    def _check_upload(self, upload: ImageUpload) -> None:
        if not upload.content_type or not upload.content_type.startswith("image/"):
            raise ValidationError("The file must be an image")
        if not upload.data:
            raise ValidationError("The image file is empty")
        if len(upload.data) > self._max_bytes:
            raise ValidationError(
                f"The image exceeds the {self._max_bytes // (1024 * 1024)} MB limit"
            )
