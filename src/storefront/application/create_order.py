"""Application service: Create Order use case.

Orchestrates the flow between repositories and the domain model.
This is the only place that coordinates product stock and order
creation in one unit: either every line's stock is taken and the order
is stored, or nothing changes.
"""

from __future__ import annotations

import time
from collections.abc import Callable

import structlog

from storefront.application.deadline import Deadline
from storefront.application.dto import AddressSpec, OrderDTO, OrderItemSpec
from storefront.application.guards import require_principal
from storefront.application.order_presenter import OrderPresenter
from storefront.domain.exceptions import (
    DomainException,
    InvalidOrderError,
    UnexpectedError,
    ValidationError,
)
from storefront.domain.model.order import Order, PaymentInfo, PaymentMethod
from storefront.domain.model.user import Principal
from storefront.domain.model.value_objects import ShippingAddress
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.repository.user_repository import UserRepository
from storefront.domain.service.stock_reservation_service import (
    StockReservationService,
)

logger = structlog.get_logger(__name__)


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        user_repo: UserRepository,
        deadline_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._presenter = OrderPresenter(user_repo, product_repo)
        self._deadline_seconds = deadline_seconds
        self._clock = clock

    def handle(
        self,
        principal: Principal | None,
        item_specs: list[OrderItemSpec] | None,
        shipping_address: AddressSpec | None,
        payment_method: str | PaymentMethod,
    ) -> OrderDTO:
        """Create a new purchase order.

        Steps:
        1. Reject anonymous callers and malformed requests (no stock touched).
        2. Validate every line against current stock and snapshot prices.
        3. Take the stock for all lines atomically (compensated on failure).
        4. Persist the order with totals derived from the snapshot lines.
        """
        principal = require_principal(principal)
        deadline = Deadline(self._deadline_seconds, self._clock)

        self._check_items(item_specs)
        address = self._build_address(shipping_address)
        payment = self._build_payment(payment_method)

        svc = StockReservationService(self._product_repo)
        lines = svc.snapshot_lines(
            ((spec.product_id, spec.quantity) for spec in item_specs),  # type: ignore[union-attr]
            checkpoint=deadline.check,
        )
        deadline.check()

        order = Order.create(
            user_id=principal.user_id,
            items=lines,
            shipping_address=address,
            payment_info=payment,
        )

        svc.reserve(lines)
        try:
            self._order_repo.add(order)
        except DomainException:
            svc.release(lines)
            raise
        except Exception as exc:
            svc.release(lines)
            raise UnexpectedError("Could not save the order") from exc

        logger.info(
            "Order created",
            order_id=order.id,
            user_id=order.user_id,
            total_items=order.total_items,
            total_price=str(order.total_price.amount),
        )
        return self._presenter.present(order)

    # --- Request validation ---------------------------------------------------

    @staticmethod
    def _check_items(item_specs: list[OrderItemSpec] | None) -> None:
        if not item_specs:
            raise InvalidOrderError("Order must contain at least one product")
        for spec in item_specs:
            if not spec.product_id:
                raise InvalidOrderError("Every order item needs a product id")
            if (
                isinstance(spec.quantity, bool)
                or not isinstance(spec.quantity, int)
                or spec.quantity < 1
            ):
                raise InvalidOrderError(
                    f"Quantity for product {spec.product_id} must be a positive integer"
                )

    @staticmethod
    def _build_address(spec: AddressSpec | None) -> ShippingAddress:
        if spec is None:
            raise InvalidOrderError("Shipping address is required")
        try:
            return ShippingAddress(
                street=spec.street,
                city=spec.city,
                postal_code=spec.postal_code,
                country=spec.country,
            )
        except ValidationError as exc:
            raise InvalidOrderError(str(exc)) from exc

    @staticmethod
    def _build_payment(method: str | PaymentMethod) -> PaymentInfo:
        try:
            return PaymentInfo(method=PaymentMethod(method))
        except ValueError as exc:
            raise InvalidOrderError(f"Unknown payment method: {method!r}") from exc
