"""Abstract repository for Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, SQL, in-memory)
live in the infrastructure layer.

Stock changes go through ``decrement_stock`` / ``increment_stock`` rather
than ``save`` so an implementation can make them atomic (a conditional
``UPDATE ... WHERE stock >= :qty``, or a lock around read-modify-write).
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.product import Product, ProductFilter
from storefront.domain.model.value_objects import Page, Pagination


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def list(self, product_filter: ProductFilter, pagination: Pagination) -> Page[Product]:
        """Return matching products, most recently created first."""

    @abstractmethod
    def search(self, term: str, pagination: Pagination) -> Page[Product]:
        """Case-insensitive substring search over name or description."""

    @abstractmethod
    def count_by_category(self, category_id: str) -> int:
        """Return how many products reference the category."""

    @abstractmethod
    def add(self, product: Product) -> None:
        """Persist a new product, assigning its ID."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist an updated product.  The stored stock level is left as is."""

    @abstractmethod
    def delete(self, product_id: str) -> None:
        """Remove a product permanently."""

    @abstractmethod
    def decrement_stock(self, product_id: str, amount: int) -> Product:
        """Atomically remove ``amount`` units if at least that many are in stock.

        Raises ProductNotFoundError or InsufficientStockError; on failure the
        stored stock is unchanged.
        """

    @abstractmethod
    def increment_stock(self, product_id: str, amount: int) -> Product:
        """Atomically add ``amount`` units.  Raises ProductNotFoundError."""

    @abstractmethod
    def set_stock(self, product_id: str, stock: int) -> Product:
        """Atomically overwrite the stock level.  Raises ProductNotFoundError."""

    @abstractmethod
    def assign_category(self, product_ids: list[str], category_id: str) -> list[Product]:
        """Atomically point every listed product at ``category_id``.

        Unknown IDs are skipped.  Returns the products that were actually
        moved, i.e. the found ones not already in that category.
        """
