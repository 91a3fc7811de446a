"""Application services: category queries."""

from __future__ import annotations

from storefront.application.dto import CategoryDTO, PageDTO, ProductDTO
from storefront.domain.exceptions import CategoryNotFoundError
from storefront.domain.model.product import ProductFilter
from storefront.domain.model.value_objects import Pagination
from storefront.domain.repository.category_repository import CategoryRepository
from storefront.domain.repository.product_repository import ProductRepository


class ShowCategoryHandler:

    def __init__(self, category_repo: CategoryRepository) -> None:
        self._category_repo = category_repo

    def handle(self, category_id: str) -> CategoryDTO:
        category = self._category_repo.get_by_id(category_id)
        if category is None:
            raise CategoryNotFoundError(f"Category {category_id} not found")
        return CategoryDTO.from_category(category)


class ListCategoriesHandler:

    def __init__(self, category_repo: CategoryRepository) -> None:
        self._category_repo = category_repo

    def handle(self, pagination: Pagination | None = None) -> PageDTO[CategoryDTO]:
        """Categories sorted by name."""
        page = self._category_repo.list(pagination or Pagination())
        return PageDTO.from_page(page, [CategoryDTO.from_category(c) for c in page.items])


class ListCategoryProductsHandler:

    def __init__(
        self,
        category_repo: CategoryRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._category_repo = category_repo
        self._product_repo = product_repo

    def handle(
        self, category_id: str, pagination: Pagination | None = None
    ) -> PageDTO[ProductDTO]:
        if self._category_repo.get_by_id(category_id) is None:
            raise CategoryNotFoundError(f"Category {category_id} not found")
        page = self._product_repo.list(
            ProductFilter(category_id=category_id), pagination or Pagination()
        )
        return PageDTO.from_page(page, [ProductDTO.from_product(p) for p in page.items])
