"""Application services: product queries (show, list with filters, search, by creator)."""

from __future__ import annotations

from decimal import Decimal

from storefront.application.dto import PageDTO, ProductDTO
from storefront.application.guards import require_principal
from storefront.domain.exceptions import ProductNotFoundError, UserNotFoundError, ValidationError
from storefront.domain.model.product import ProductFilter
from storefront.domain.model.user import Principal
from storefront.domain.model.value_objects import Money, Pagination
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.repository.user_repository import UserRepository


class ShowProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, product_id: str) -> ProductDTO:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(f"Product {product_id} not found")
        return ProductDTO.from_product(product)


class ListProductsHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(
        self,
        min_price: Decimal | str | None = None,
        max_price: Decimal | str | None = None,
        is_available: bool | None = None,
        category_id: str | None = None,
        pagination: Pagination | None = None,
    ) -> PageDTO[ProductDTO]:
        """List products; every filter is optional and they combine with AND."""
        product_filter = ProductFilter(
            min_price=Money.of(min_price) if min_price is not None else None,
            max_price=Money.of(max_price) if max_price is not None else None,
            is_available=is_available,
            category_id=category_id,
        )
        page = self._product_repo.list(product_filter, pagination or Pagination())
        return PageDTO.from_page(page, [ProductDTO.from_product(p) for p in page.items])


class SearchProductsHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, term: str | None, pagination: Pagination | None = None) -> PageDTO[ProductDTO]:
        if not term or not term.strip():
            raise ValidationError("A search term is required")
        page = self._product_repo.search(term.strip(), pagination or Pagination())
        return PageDTO.from_page(page, [ProductDTO.from_product(p) for p in page.items])


class ListUserProductsHandler:

    def __init__(self, product_repo: ProductRepository, user_repo: UserRepository) -> None:
        self._product_repo = product_repo
        self._user_repo = user_repo

    def handle(
        self,
        principal: Principal | None,
        user_id: str,
        pagination: Pagination | None = None,
    ) -> PageDTO[ProductDTO]:
        """Products created by ``user_id``, newest first.  Any signed-in user may ask."""
        require_principal(principal)
        if self._user_repo.get_by_id(user_id) is None:
            raise UserNotFoundError(f"User {user_id} not found")
        page = self._product_repo.list(
            ProductFilter(creator_id=user_id), pagination or Pagination()
        )
        return PageDTO.from_page(page, [ProductDTO.from_product(p) for p in page.items])
