"""Domain service: Stock Reservation.

This service coordinates the cross-aggregate operation of taking stock
from products for an order, and giving it back when the order is
cancelled or deleted.  It lives in the domain layer because the logic is
a core business rule, not just orchestration.

Reservation is all-or-nothing:
  Phase 1: load and validate every line against current stock, without
            mutating anything.  Fails fast on the first bad line.
  Phase 2: apply each decrement through the repository's atomic
            conditional decrement.  If a concurrent order got there first
            and a decrement is refused, every decrement already applied in
            this pass is compensated before the error propagates, product by
            product, even when returning one of them fails.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

import structlog

from storefront.domain.exceptions import (
    DomainException,
    EntityNotFoundError,
    InsufficientStockError,
    ProductNotFoundError,
    ProductUnavailableError,
)
from storefront.domain.model.order import Order, OrderLine
from storefront.domain.model.value_objects import Quantity
from storefront.domain.repository.product_repository import ProductRepository

logger = structlog.get_logger(__name__)


def _aggregate(lines: Iterable[OrderLine]) -> dict[str, int]:
    quantities: dict[str, int] = {}
    for line in lines:
        quantities[line.product_id] = quantities.get(line.product_id, 0) + line.quantity.value
    return quantities


class StockReservationService:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def snapshot_lines(
        self,
        requested: Iterable[tuple[str, int]],
        checkpoint: Callable[[], None] | None = None,
    ) -> list[OrderLine]:
        """Phase 1: validate (product_id, quantity) pairs and snapshot them.

        Lines are checked in input order.  Quantities of a product that
        appears more than once are accumulated before comparing to stock.
        ``checkpoint`` is called after each lookup so a caller can abort a
        slow request before anything has been mutated.
        """
        lines: list[OrderLine] = []
        requested_so_far: dict[str, int] = {}

        for product_id, quantity in requested:
            product = self._product_repo.get_by_id(product_id)
            if checkpoint is not None:
                checkpoint()
            if product is None:
                raise ProductNotFoundError(f"Product with ID {product_id} not found")
            if not product.is_available:
                raise ProductUnavailableError(f"Product {product.name} is not available")

            wanted = requested_so_far.get(product_id, 0) + quantity
            if product.stock < wanted:
                raise InsufficientStockError(
                    f"Insufficient stock for {product.name}. "
                    f"Available: {product.stock}, Requested: {wanted}"
                )
            requested_so_far[product_id] = wanted

            lines.append(
                OrderLine(
                    product_id=product.id,  # type: ignore[arg-type]
                    product_name=product.name,
                    quantity=Quantity(quantity),
                    unit_price=product.price,  # <-- price snapshot
                )
            )
        return lines

    def reserve(self, lines: Iterable[OrderLine]) -> None:
        """Phase 2: take the stock for every line, or for none of them."""
        applied: list[tuple[str, int]] = []
        try:
            for product_id, quantity in _aggregate(lines).items():
                self._product_repo.decrement_stock(product_id, quantity)
                applied.append((product_id, quantity))
        except Exception:
            if applied:
                logger.warning(
                    "Compensating partial stock reservation",
                    products=[product_id for product_id, _ in applied],
                )
            self._give_back(applied)
            raise

    def release(self, lines: Iterable[OrderLine]) -> None:
        """Return stock for the given lines.

        Products deleted since the order was placed are skipped, and a
        failed write for one product is logged without stopping the rest.
        """
        self._give_back(_aggregate(lines).items())

    def restitute_for_order(self, order: Order) -> None:
        self.release(order.items)
        logger.info("Stock restituted", order_id=order.id, products=order.reserved_quantities)

    # --- Internal helpers -----------------------------------------------------

    def _give_back(self, quantities: Iterable[tuple[str, int]]) -> None:
        for product_id, quantity in quantities:
            try:
                self._product_repo.increment_stock(product_id, quantity)
            except EntityNotFoundError:
                logger.warning(
                    "Skipping restitution for missing product",
                    product_id=product_id,
                    quantity=quantity,
                )
            except DomainException as exc:
                # The remaining products still get their units back.
                logger.error(
                    "Could not return stock",
                    product_id=product_id,
                    quantity=quantity,
                    error=str(exc),
                )
