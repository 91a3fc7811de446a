"""Abstract repository for Category aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.category import Category
from storefront.domain.model.value_objects import Page, Pagination


class CategoryRepository(ABC):

    @abstractmethod
    def get_by_id(self, category_id: str) -> Category | None:
        """Return a category by its ID, or None if not found."""

    @abstractmethod
    def get_by_name(self, name: str) -> Category | None:
        """Return a category by its exact name (case-insensitive), or None."""

    @abstractmethod
    def list(self, pagination: Pagination) -> Page[Category]:
        """Return categories sorted by name."""

    @abstractmethod
    def add(self, category: Category) -> None:
        """Persist a new category, assigning its ID.

        Raises DuplicateNameError if another category has the same name.
        """

    @abstractmethod
    def save(self, category: Category) -> None:
        """Persist an updated category.  Raises DuplicateNameError."""

    @abstractmethod
    def delete(self, category_id: str) -> None:
        """Remove a category permanently."""
