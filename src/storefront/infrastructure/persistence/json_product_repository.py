"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

from decimal import Decimal

from storefront.domain.exceptions import ProductNotFoundError
from storefront.domain.model.product import (
    DEFAULT_IMAGE,
    Product,
    ProductFilter,
    matches_search,
)
from storefront.domain.model.value_objects import Money, Page, Pagination
from storefront.domain.repository.product_repository import ProductRepository
from storefront.infrastructure.persistence.json_file import (
    JsonFileRepository,
    format_datetime,
    new_id,
    parse_datetime,
)


class JsonProductRepository(JsonFileRepository, ProductRepository):

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        for raw in self._snapshot():
            if raw["id"] == product_id:
                return self._to_domain(raw)
        return None

    def list(self, product_filter: ProductFilter, pagination: Pagination) -> Page[Product]:
        products = [self._to_domain(raw) for raw in self._snapshot()]
        matching = [p for p in products if product_filter.matches(p)]
        return Page.from_sequence(_newest_first(matching), pagination)

    def search(self, term: str, pagination: Pagination) -> Page[Product]:
        products = [self._to_domain(raw) for raw in self._snapshot()]
        matching = [p for p in products if matches_search(p, term)]
        return Page.from_sequence(_newest_first(matching), pagination)

    def count_by_category(self, category_id: str) -> int:
        return sum(1 for raw in self._snapshot() if raw.get("category_id") == category_id)

    def add(self, product: Product) -> None:
        with self._transaction() as records:
            product.id = new_id()
            records.append(self._to_raw(product))

    def save(self, product: Product) -> None:
        with self._transaction() as records:
            i = self._index_of(records, product.id)  # type: ignore[arg-type]
            if i is None:
                raise ProductNotFoundError(f"Product {product.id} not found")
            raw = self._to_raw(product)
            raw["stock"] = records[i]["stock"]
            records[i] = raw

    def delete(self, product_id: str) -> None:
        with self._transaction() as records:
            i = self._index_of(records, product_id)
            if i is None:
                raise ProductNotFoundError(f"Product {product_id} not found")
            del records[i]

    def decrement_stock(self, product_id: str, amount: int) -> Product:
        with self._transaction() as records:
            i = self._require(records, product_id)
            product = self._to_domain(records[i])
            product.remove_stock(amount)
            records[i] = self._to_raw(product)
            return product

    def increment_stock(self, product_id: str, amount: int) -> Product:
        with self._transaction() as records:
            i = self._require(records, product_id)
            product = self._to_domain(records[i])
            product.add_stock(amount)
            records[i] = self._to_raw(product)
            return product

    def set_stock(self, product_id: str, stock: int) -> Product:
        with self._transaction() as records:
            i = self._require(records, product_id)
            records[i]["stock"] = stock
            return self._to_domain(records[i])

    def assign_category(self, product_ids: list[str], category_id: str) -> list[Product]:
        wanted = set(product_ids)
        moved: list[Product] = []
        with self._transaction() as records:
            for i, raw in enumerate(records):
                if raw["id"] not in wanted or raw.get("category_id") == category_id:
                    continue
                product = self._to_domain(raw)
                product.assign_category(category_id)
                records[i] = self._to_raw(product)
                moved.append(product)
        return moved

    # --- Serialization --------------------------------------------------------

    def _require(self, records: list[dict], product_id: str) -> int:
        i = self._index_of(records, product_id)
        if i is None:
            raise ProductNotFoundError(f"Product with ID {product_id} not found")
        return i

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "description": product.description,
            "price": str(product.price.amount),
            "currency": product.price.currency,
            "stock": product.stock,
            "is_available": product.is_available,
            "category_id": product.category_id,
            "creator_id": product.creator_id,
            "image": product.image,
            "created_at": format_datetime(product.created_at),
            "updated_at": format_datetime(product.updated_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        return Product(
            id=raw["id"],
            name=raw["name"],
            description=raw.get("description", ""),
            price=Money(Decimal(raw["price"]), raw.get("currency", "USD")),
            stock=raw["stock"],
            is_available=raw.get("is_available", True),
            category_id=raw.get("category_id"),
            creator_id=raw.get("creator_id"),
            image=raw.get("image") or DEFAULT_IMAGE,
            created_at=parse_datetime(raw["created_at"]),  # type: ignore[arg-type]
            updated_at=parse_datetime(raw["updated_at"]),  # type: ignore[arg-type]
        )


def _newest_first(products: list[Product]) -> list[Product]:
    return sorted(products, key=lambda p: p.created_at, reverse=True)
