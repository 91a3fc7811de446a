"""Application service: Add Product use case."""

from __future__ import annotations

import structlog

from storefront.application.dto import ProductDTO, ProductFields
from storefront.application.guards import require_principal
from storefront.domain.exceptions import CategoryNotFoundError
from storefront.domain.model.product import Product
from storefront.domain.model.user import Principal
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.category_repository import CategoryRepository
from storefront.domain.repository.product_repository import ProductRepository

logger = structlog.get_logger(__name__)


class AddProductHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        category_repo: CategoryRepository,
    ) -> None:
        self._product_repo = product_repo
        self._category_repo = category_repo

    def handle(self, principal: Principal | None, fields: ProductFields) -> ProductDTO:
        """Add a new product to the catalog, created by ``principal``."""
        principal = require_principal(principal)

        if fields.category_id and self._category_repo.get_by_id(fields.category_id) is None:
            raise CategoryNotFoundError(f"Category {fields.category_id} not found")

        product = Product.create(
            name=fields.name,
            price=Money.of(fields.price),
            description=fields.description,
            stock=fields.stock,
            is_available=fields.is_available,
            category_id=fields.category_id,
            creator_id=principal.user_id,
        )
        self._product_repo.add(product)
        logger.info("Product added", product_id=product.id, by=principal.user_id)
        return ProductDTO.from_product(product)
