"""Product aggregate.

Products live independently of orders. They have their own lifecycle:
prices change, stock moves up and down, products are added and removed
from the catalog.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from storefront.domain.exceptions import InsufficientStockError, ValidationError
from storefront.domain.model.value_objects import Money

DEFAULT_IMAGE = "/uploads/products/default.jpg"

# Fields a partial update may touch.  Anything else is rejected.
PATCHABLE_FIELDS = frozenset(
    {"name", "description", "price", "stock", "is_available", "category_id"}
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Product:
    """A product in the catalog.

    This is an aggregate root. Stock is the only field the order workflow
    mutates, and only through ``remove_stock`` / ``add_stock`` so the
    non-negative invariant is checked in one place.
    """

    id: str | None
    name: str
    price: Money = field(default_factory=Money.zero)
    description: str = ""
    stock: int = 0
    is_available: bool = True
    category_id: str | None = None
    creator_id: str | None = None
    image: str = DEFAULT_IMAGE
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def create(
        name: str,
        price: Money | None = None,
        description: str | None = None,
        stock: int = 0,
        is_available: bool = True,
        category_id: str | None = None,
        creator_id: str | None = None,
    ) -> Product:
        """Create a new product, enforcing all invariants."""
        product = Product(
            id=None,
            name=_clean_name(name),
            price=price if price is not None else Money.zero(),
            description=(description or "").strip(),
            stock=_check_stock(stock),
            is_available=bool(is_available),
            category_id=category_id or None,
            creator_id=creator_id,
        )
        return product

    # --- Stock ----------------------------------------------------------------

    def remove_stock(self, quantity: int) -> None:
        if quantity <= 0:
            raise ValidationError("Stock adjustment must be positive")
        if quantity > self.stock:
            raise InsufficientStockError(
                f"Insufficient stock for {self.name}. "
                f"Available: {self.stock}, Requested: {quantity}"
            )
        self.stock -= quantity
        self.touch()

    def add_stock(self, quantity: int) -> None:
        if quantity <= 0:
            raise ValidationError("Stock adjustment must be positive")
        self.stock += quantity
        self.touch()

    # --- Edits ----------------------------------------------------------------

    def apply_changes(self, changes: dict[str, Any]) -> None:
        """Merge a whitelisted set of field changes into the product.

        Every value is validated before anything is assigned, so a bad
        field leaves the product untouched.
        """
        unknown = set(changes) - PATCHABLE_FIELDS
        if unknown:
            raise ValidationError(
                f"Cannot update field(s): {', '.join(sorted(unknown))}"
            )

        cleaned: dict[str, Any] = {}
        for key, value in changes.items():
            if key == "name":
                cleaned[key] = _clean_name(value)
            elif key == "description":
                cleaned[key] = (value or "").strip()
            elif key == "price":
                cleaned[key] = value if isinstance(value, Money) else Money.of(value)
            elif key == "stock":
                cleaned[key] = _check_stock(value)
            elif key == "is_available":
                if not isinstance(value, bool):
                    raise ValidationError("is_available must be a boolean")
                cleaned[key] = value
            elif key == "category_id":
                cleaned[key] = value or None

        for key, value in cleaned.items():
            setattr(self, key, value)
        self.touch()

    def assign_creator(self, user_id: str) -> None:
        self.creator_id = user_id
        self.touch()

    def assign_category(self, category_id: str) -> None:
        self.category_id = category_id
        self.touch()

    def replace_image(self, reference: str) -> str | None:
        """Point the product at a new image; return the old one if it was custom."""
        previous = self.image if self.has_custom_image else None
        self.image = reference
        self.touch()
        return previous

    @property
    def has_custom_image(self) -> bool:
        return bool(self.image) and self.image != DEFAULT_IMAGE

    def touch(self) -> None:
        self.updated_at = _now()


@dataclass(frozen=True)
class ProductFilter:
    """Criteria for listing products.  Every criterion is optional."""

    min_price: Money | None = None
    max_price: Money | None = None
    is_available: bool | None = None
    category_id: str | None = None
    creator_id: str | None = None

    def __post_init__(self) -> None:
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.min_price > self.max_price
        ):
            raise ValidationError("min_price cannot be greater than max_price")

    def matches(self, product: Product) -> bool:
        if self.min_price is not None and product.price < self.min_price:
            return False
        if self.max_price is not None and product.price > self.max_price:
            return False
        if self.is_available is not None and product.is_available != self.is_available:
            return False
        if self.category_id is not None and product.category_id != self.category_id:
            return False
        if self.creator_id is not None and product.creator_id != self.creator_id:
            return False
        return True


def matches_search(product: Product, term: str) -> bool:
    """Case-insensitive substring match over name OR description."""
    needle = term.strip().lower()
    return needle in product.name.lower() or needle in product.description.lower()


# --- Internal helpers ---------------------------------------------------------


def _clean_name(name: str | None) -> str:
    if not name or not name.strip():
        raise ValidationError("Product name is required")
    return name.strip()


def _check_stock(stock: int) -> int:
    if isinstance(stock, bool) or not isinstance(stock, int):
        raise ValidationError("Stock must be an integer")
    if stock < 0:
        raise ValidationError("Stock cannot be negative")
    return stock
