"""JSON-file-backed implementation of CategoryRepository."""

from __future__ import annotations

from storefront.domain.exceptions import CategoryNotFoundError, DuplicateNameError
from storefront.domain.model.category import Category
from storefront.domain.model.value_objects import Page, Pagination
from storefront.domain.repository.category_repository import CategoryRepository
from storefront.infrastructure.persistence.json_file import (
    JsonFileRepository,
    format_datetime,
    new_id,
    parse_datetime,
)


class JsonCategoryRepository(JsonFileRepository, CategoryRepository):

    def get_by_id(self, category_id: str) -> Category | None:
        for raw in self._snapshot():
            if raw["id"] == category_id:
                return self._to_domain(raw)
        return None

    def get_by_name(self, name: str) -> Category | None:
        wanted = name.strip().casefold()
        for raw in self._snapshot():
            if raw["name"].casefold() == wanted:
                return self._to_domain(raw)
        return None

    def list(self, pagination: Pagination) -> Page[Category]:
        categories = sorted(
            (self._to_domain(raw) for raw in self._snapshot()),
            key=lambda c: c.name.casefold(),
        )
        return Page.from_sequence(categories, pagination)

    def add(self, category: Category) -> None:
        with self._transaction() as records:
            self._check_unique(records, category)
            category.id = new_id()
            records.append(self._to_raw(category))

    def save(self, category: Category) -> None:
        with self._transaction() as records:
            i = self._index_of(records, category.id)  # type: ignore[arg-type]
            if i is None:
                raise CategoryNotFoundError(f"Category {category.id} not found")
            self._check_unique(records, category)
            records[i] = self._to_raw(category)

    def delete(self, category_id: str) -> None:
        with self._transaction() as records:
            i = self._index_of(records, category_id)
            if i is None:
                raise CategoryNotFoundError(f"Category {category_id} not found")
            del records[i]

    @staticmethod
    def _check_unique(records: list[dict], category: Category) -> None:
        wanted = category.name.casefold()
        for raw in records:
            if raw["id"] != category.id and raw["name"].casefold() == wanted:
                raise DuplicateNameError(f"Category {category.name!r} already exists")

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(category: Category) -> dict:
        return {
            "id": category.id,
            "name": category.name,
            "description": category.description,
            "creator_id": category.creator_id,
            "created_at": format_datetime(category.created_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Category:
        return Category(
            id=raw["id"],
            name=raw["name"],
            description=raw.get("description", ""),
            creator_id=raw.get("creator_id"),
            created_at=parse_datetime(raw["created_at"]),  # type: ignore[arg-type]
        )
