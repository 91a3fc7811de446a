"""Application service: Cancel Order use case.

Self-service cancellation: the owner (or an admin) may cancel an order
that is still pending or processing.  The cancellation is written only
if nobody changed the order's status since it was read, and the reserved
stock goes back to the products exactly once, even if two cancellations
race.
"""

from __future__ import annotations

import structlog

from storefront.application.dto import OrderDTO
from storefront.application.guards import require_principal
from storefront.application.order_presenter import OrderPresenter
from storefront.application.order_restitution import restitute_stock_once
from storefront.domain.exceptions import OrderNotFoundError
from storefront.domain.model.user import Principal
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.repository.user_repository import UserRepository
from storefront.domain.service.authorization_policy import AuthorizationPolicy

logger = structlog.get_logger(__name__)


class CancelOrderHandler:

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

    def handle(self, order_id: str, principal: Principal | None) -> OrderDTO:
        principal = require_principal(principal)

        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(f"Order {order_id} not found")

        self._policy.can_cancel_order(principal, order).enforce()

        # Validates pending|processing before any stock moves.
        previous = order.status
        order.cancel()
        self._order_repo.save(order, expected_status=previous)

        restituted = restitute_stock_once(order, self._order_repo, self._product_repo)
        logger.info(
            "Order cancelled",
            order_id=order_id,
            stock_restituted=restituted,
            by=principal.user_id,
        )
        return self._presenter.present(order)
