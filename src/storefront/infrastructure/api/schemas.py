"""Pydantic request schemas and response envelopes for the HTTP API.

These are external contracts, kept apart from the application DTOs.
JSON field names are camelCase; snake_case is accepted on input too.
Business validation stays in the domain, so the request models only pin
down shapes and leave rules (quantity >= 1, non-blank names) to it.
"""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from storefront.application.dto import AddressSpec, OrderItemSpec, PageDTO, ProductFields


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def changes(self) -> dict[str, Any]:
        """Only the fields the client actually sent, by their Python names."""
        return self.model_dump(exclude_unset=True)


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
class RegisterRequest(CamelModel):
    username: str
    email: str
    password: str
    role: str | None = None


class LoginRequest(CamelModel):
    email: str
    password: str


class UserPatchRequest(CamelModel):
    username: str | None = None
    email: str | None = None
    password: str | None = None
    role: str | None = None


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------
class CategoryRequest(CamelModel):
    name: str
    description: str | None = None


class CategoryPatchRequest(CamelModel):
    name: str | None = None
    description: str | None = None


class ProductRequest(CamelModel):
    name: str
    price: Decimal = Decimal("0")
    description: str = ""
    stock: int = 0
    is_available: bool = True
    category_id: str | None = None

    def to_fields(self) -> ProductFields:
        return ProductFields(
            name=self.name,
            price=self.price,
            description=self.description,
            stock=self.stock,
            is_available=self.is_available,
            category_id=self.category_id,
        )


class ProductPatchRequest(CamelModel):
    name: str | None = None
    price: Decimal | None = None
    description: str | None = None
    stock: int | None = None
    is_available: bool | None = None
    category_id: str | None = None


class AssignCreatorRequest(CamelModel):
    user_id: str | None = None


class AssignCategoryRequest(CamelModel):
    category_id: str | None = None


class CategoryProductsRequest(CamelModel):
    product_ids: list[str] = []


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class OrderItemRequest(CamelModel):
    product_id: str
    quantity: int


class AddressRequest(CamelModel):
    street: str = ""
    city: str = ""
    postal_code: str = ""
    country: str = ""


class PaymentInfoRequest(CamelModel):
    method: str


class CreateOrderRequest(CamelModel):
    items: list[OrderItemRequest] = []
    shipping_address: AddressRequest | None = None
    payment_info: PaymentInfoRequest | None = None

    def item_specs(self) -> list[OrderItemSpec]:
        return [OrderItemSpec(product_id=i.product_id, quantity=i.quantity) for i in self.items]

    def address_spec(self) -> AddressSpec | None:
        if self.shipping_address is None:
            return None
        a = self.shipping_address
        return AddressSpec(street=a.street, city=a.city, postal_code=a.postal_code, country=a.country)

    def payment_method(self) -> str:
        return self.payment_info.method if self.payment_info else ""


class OrderStatusRequest(CamelModel):
    status: str | None = None
    payment_status: str | None = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------
def to_json(value: Any) -> Any:
    """Render DTOs (dataclasses) as JSON-ready data with camelCase keys."""
    if is_dataclass(value) and not isinstance(value, type):
        return {to_camel(f.name): to_json(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    if isinstance(value, dict):
        return {k: to_json(v) for k, v in value.items()}
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


def envelope(data: Any, **extra: Any) -> dict[str, Any]:
    return {"success": True, **extra, "data": to_json(data)}


def page_envelope(page: PageDTO) -> dict[str, Any]:
    return {
        "success": True,
        "count": page.count,
        "total": page.total,
        "totalPages": page.total_pages,
        "currentPage": page.current_page,
        "data": to_json(page.items),
    }
