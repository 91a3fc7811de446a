"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI / HTTP layers and the application layer
without exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Generic, TypeVar

from storefront.domain.model.category import Category
from storefront.domain.model.product import Product
from storefront.domain.model.user import User
from storefront.domain.model.value_objects import Page

T = TypeVar("T")
R = TypeVar("R")


# --- Inputs -------------------------------------------------------------------


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: what the customer asked for (product id + quantity)."""

    product_id: str
    quantity: int


@dataclass(frozen=True)
class AddressSpec:
    street: str
    city: str
    postal_code: str
    country: str


@dataclass(frozen=True)
class ImageUpload:
    data: bytes
    content_type: str
    filename: str = ""


# --- Outputs ------------------------------------------------------------------


@dataclass(frozen=True)
class UserSummaryDTO:
    id: str
    username: str
    email: str


@dataclass(frozen=True)
class OrderLineDTO:
    """Output: a single line item as displayed to the user."""

    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    product_image: str | None = None


@dataclass(frozen=True)
class PaymentDTO:
    method: str
    status: str
    paid_at: datetime | None


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: str
    user_id: str
    user: UserSummaryDTO | None
    status: str
    items: list[OrderLineDTO]
    total_items: int
    total_price: Decimal
    shipping_address: AddressSpec
    payment: PaymentDTO
    delivered_at: datetime | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class ProductDTO:
    id: str
    name: str
    description: str
    price: Decimal
    stock: int
    is_available: bool
    category_id: str | None
    creator_id: str | None
    image: str
    created_at: datetime
    updated_at: datetime

    @staticmethod
    def from_product(product: Product) -> ProductDTO:
        return ProductDTO(
            id=product.id,  # type: ignore[arg-type]
            name=product.name,
            description=product.description,
            price=product.price.amount,
            stock=product.stock,
            is_available=product.is_available,
            category_id=product.category_id,
            creator_id=product.creator_id,
            image=product.image,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


@dataclass(frozen=True)
class CategoryAssignmentDTO:
    """Result of a bulk category move: how many changed, and the products."""

    updated_count: int
    products: list[ProductDTO]


@dataclass(frozen=True)
class CategoryDTO:
    id: str
    name: str
    description: str
    created_at: datetime

    @staticmethod
    def from_category(category: Category) -> CategoryDTO:
        return CategoryDTO(
            id=category.id,  # type: ignore[arg-type]
            name=category.name,
            description=category.description,
            created_at=category.created_at,
        )


@dataclass(frozen=True)
class UserDTO:
    """A user as shown to clients.  Never carries the password hash."""

    id: str
    username: str
    email: str
    role: str
    created_at: datetime

    @staticmethod
    def from_user(user: User) -> UserDTO:
        return UserDTO(
            id=user.id,  # type: ignore[arg-type]
            username=user.username,
            email=user.email,
            role=user.role.value,
            created_at=user.created_at,
        )


@dataclass(frozen=True)
class AuthTokenDTO:
    token: str
    user: UserDTO


@dataclass(frozen=True)
class PageDTO(Generic[T]):
    items: list[T]
    count: int
    total: int
    total_pages: int
    current_page: int

    @staticmethod
    def from_page(page: Page[R], items: list[T]) -> PageDTO[T]:
        return PageDTO(
            items=items,
            count=len(items),
            total=page.total,
            total_pages=page.total_pages,
            current_page=page.current_page,
        )


@dataclass(frozen=True)
class ProductFields:
    """Input: the editable fields of a product, for create and full update."""

    name: str
    price: Decimal | str | float | int = 0
    description: str = ""
    stock: int = 0
    is_available: bool = True
    category_id: str | None = None

    def as_changes(self) -> dict:
        return {
            "name": self.name,
            "price": self.price,
            "description": self.description,
            "stock": self.stock,
            "is_available": self.is_available,
            "category_id": self.category_id,
        }
