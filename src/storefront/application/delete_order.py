"""Application service: Delete Order use case (admin only).

Whatever stock the order still holds is returned before the record is
removed.  The restitution claim decides that, not the status read here,
so a cancellation that was saved but not yet settled is still covered.
"""

from __future__ import annotations

import structlog

from storefront.application.guards import require_principal
from storefront.application.order_restitution import restitute_stock_once
from storefront.domain.exceptions import OrderNotFoundError
from storefront.domain.model.user import Principal
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.authorization_policy import AuthorizationPolicy

logger = structlog.get_logger(__name__)


class DeleteOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        policy: AuthorizationPolicy | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._policy = policy or AuthorizationPolicy()

    def handle(self, order_id: str, principal: Principal | None) -> None:
        principal = require_principal(principal)
        self._policy.can_delete_order(principal).enforce()

        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(f"Order {order_id} not found")

        # Idempotent: a cancelled order normally has nothing left to return.
        restituted = restitute_stock_once(order, self._order_repo, self._product_repo)

        self._order_repo.delete(order_id)
        logger.info(
            "Order deleted",
            order_id=order_id,
            status=order.status.value,
            stock_restituted=restituted,
            by=principal.user_id,
        )
