"""Application service: Update Order Status use case.

Admins drive orders along pending -> processing -> shipped -> delivered
(or cancel them while pending/processing).  Owners may only cancel their
own pending order.  A change is written only if the stored status is
still the one it was based on, and cancelling gives the stock back
exactly once.
"""

from __future__ import annotations

from enum import Enum
from typing import TypeVar

import structlog

from storefront.application.dto import OrderDTO
from storefront.application.guards import require_principal
from storefront.application.order_presenter import OrderPresenter
from storefront.application.order_restitution import restitute_stock_once
from storefront.domain.exceptions import OrderNotFoundError, ValidationError
from storefront.domain.model.order import OrderStatus, PaymentStatus
from storefront.domain.model.user import Principal
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.repository.user_repository import UserRepository
from storefront.domain.service.authorization_policy import AuthorizationPolicy

logger = structlog.get_logger(__name__)

E = TypeVar("E", bound=Enum)


class UpdateOrderStatusHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        user_repo: UserRepository,
        policy: AuthorizationPolicy | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._presenter = OrderPresenter(user_repo, product_repo)
        self._policy = policy or AuthorizationPolicy()

    def handle(
        self,
        order_id: str,
        status: str | OrderStatus | None,
        principal: Principal | None,
        payment_status: str | PaymentStatus | None = None,
    ) -> OrderDTO:
        principal = require_principal(principal)
        if status is None and payment_status is None:
            raise ValidationError("Nothing to update: give a status or a payment status")

        new_status = _parse(OrderStatus, status, "order status")
        new_payment_status = _parse(PaymentStatus, payment_status, "payment status")

        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(f"Order {order_id} not found")

        if new_status is not None:
            self._policy.can_update_order_status(principal, order, new_status).enforce()
        if new_payment_status is not None:
            self._policy.can_update_payment_status(principal).enforce()

        previous = order.status
        changed = new_status is not None and order.transition_to(new_status)

        if new_payment_status is not None:
            order.record_payment_status(new_payment_status)

        if changed or new_payment_status is not None:
            # Rejected if another request moved the order since it was read.
            self._order_repo.save(order, expected_status=previous)
            logger.info(
                "Order status updated",
                order_id=order_id,
                from_status=previous.value,
                to_status=order.status.value,
                payment_status=order.payment_info.status.value,
                by=principal.user_id,
            )

        if new_status == OrderStatus.CANCELLED:
            # Also settles a cancellation whose restitution was interrupted.
            restitute_stock_once(order, self._order_repo, self._product_repo)

        return self._presenter.present(order)


def _parse(enum_cls: type[E], value: str | E | None, label: str) -> E | None:
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError as exc:
        raise ValidationError(f"Invalid {label}: {value!r}") from exc
