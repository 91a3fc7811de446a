"""Order aggregate, the core of the domain.

The Order is an aggregate root that owns its line items.
All status-machine invariants are enforced here; stock movements are
coordinated outside the aggregate by the StockReservationService.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum

from storefront.domain.exceptions import (
    InvalidOrderError,
    InvalidTransitionError,
    ValidationError,
)
from storefront.domain.model.value_objects import Money, Quantity, ShippingAddress


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentMethod(Enum):
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    PAYPAL = "paypal"
    BANK_TRANSFER = "bank_transfer"
    CASH_ON_DELIVERY = "cash_on_delivery"


class PaymentStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


# Forward path of a healthy order; an admin may skip ahead along it.
_FULFILMENT_PATH = (
    OrderStatus.PENDING,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
)
CANCELLABLE_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.PROCESSING})
TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class PaymentInfo:
    method: PaymentMethod
    status: PaymentStatus = PaymentStatus.PENDING
    paid_at: datetime | None = None


@dataclass(frozen=True)
class OrderLine:
    """Captures the price and name snapshot of a product at order-creation time."""

    product_id: str
    product_name: str
    quantity: Quantity
    unit_price: Money  # locked at order-creation time

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass(frozen=True)
class OrderTotals:
    total_items: int
    total_price: Money


def compute_totals(lines: list[OrderLine]) -> OrderTotals:
    """Derive the order totals from its lines.

    Pure function; the aggregate calls it explicitly whenever its lines are
    set, before the record is persisted.
    """
    total_items = 0
    total_price = Money.zero()
    for line in lines:
        total_items += line.quantity.value
        total_price = total_price + line.line_total
    return OrderTotals(total_items=total_items, total_price=total_price)


@dataclass
class Order:
    """Aggregate root for purchase orders.

    Use the ``Order.create()`` factory for new orders; it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: str | None
    user_id: str
    items: list[OrderLine]
    shipping_address: ShippingAddress
    payment_info: PaymentInfo
    total_items: int = 0
    total_price: Money = field(default_factory=Money.zero)
    status: OrderStatus = OrderStatus.PENDING
    delivered_at: datetime | None = None
    stock_restituted: bool = False
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        user_id: str,
        items: list[OrderLine],
        shipping_address: ShippingAddress,
        payment_info: PaymentInfo,
    ) -> Order:
        """Create a new order, enforcing all invariants."""
        if not user_id:
            raise ValidationError("Order must belong to a user")

        if not items:
            raise InvalidOrderError("Order must contain at least one item")

        totals = compute_totals(items)
        return Order(
            id=None,
            user_id=user_id,
            items=list(items),
            shipping_address=shipping_address,
            payment_info=replace(payment_info, status=PaymentStatus.PENDING, paid_at=None),
            total_items=totals.total_items,
            total_price=totals.total_price,
        )

    # --- State transitions ----------------------------------------------------

    def can_transition_to(self, new_status: OrderStatus) -> bool:
        if self.status in TERMINAL_STATUSES:
            return False
        if new_status == OrderStatus.CANCELLED:
            return self.status in CANCELLABLE_STATUSES
        return _FULFILMENT_PATH.index(new_status) > _FULFILMENT_PATH.index(self.status)

    def transition_to(self, new_status: OrderStatus, at: datetime | None = None) -> bool:
        """Move the order to ``new_status``.

        Returns False (and changes nothing) when the order already has that
        status, so repeating a request is harmless.  Stock restitution for a
        cancellation must be coordinated by the caller.
        """
        if new_status == self.status:
            return False
        if not self.can_transition_to(new_status):
            raise InvalidTransitionError(
                f'Cannot change order status from "{self.status.value}" '
                f'to "{new_status.value}"'
            )
        self.status = new_status
        if new_status == OrderStatus.DELIVERED:
            self.delivered_at = at or _now()
        self.touch()
        return True

    def cancel(self) -> None:
        """Transition PENDING|PROCESSING -> CANCELLED."""
        if self.status not in CANCELLABLE_STATUSES:
            raise InvalidTransitionError(
                f'Cannot cancel an order with status "{self.status.value}"'
            )
        self.transition_to(OrderStatus.CANCELLED)

    def record_payment_status(
        self, payment_status: PaymentStatus, at: datetime | None = None
    ) -> None:
        paid_at = self.payment_info.paid_at
        if payment_status == PaymentStatus.COMPLETED:
            paid_at = at or _now()
        self.payment_info = replace(self.payment_info, status=payment_status, paid_at=paid_at)
        self.touch()

    def mark_stock_restituted(self) -> None:
        self.stock_restituted = True

    # --- Computed properties --------------------------------------------------

    @property
    def is_cancelled(self) -> bool:
        return self.status == OrderStatus.CANCELLED

    @property
    def reserved_quantities(self) -> dict[str, int]:
        """Units held by this order, per product."""
        quantities: dict[str, int] = {}
        for line in self.items:
            quantities[line.product_id] = (
                quantities.get(line.product_id, 0) + line.quantity.value
            )
        return quantities

    def touch(self) -> None:
        self.updated_at = _now()
