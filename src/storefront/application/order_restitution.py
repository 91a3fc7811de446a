"""Gives an order's stock back exactly once."""

from __future__ import annotations

from storefront.domain.model.order import Order
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.stock_reservation_service import (
    StockReservationService,
)


def restitute_stock_once(
    order: Order,
    order_repo: OrderRepository,
    product_repo: ProductRepository,
) -> bool:
    """Return the order's stock unless some other request already did.

    The claim is atomic in the order store, so a cancel racing a delete (or
    a repeated cancel) can never credit the products twice.  Returns
    whether this call performed the restitution.
    """
    if not order_repo.claim_restitution(order.id):  # type: ignore[arg-type]
        return False
    order.mark_stock_restituted()
    StockReservationService(product_repo).restitute_for_order(order)
    return True
