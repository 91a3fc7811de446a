"""OrderWorkflow: the order lifecycle behind one object.

Thin facade over the order use-case handlers, so the CLI and HTTP layers
have a single entry point.  Every operation returns a DTO or raises a
typed DomainException.
"""

from __future__ import annotations

import time
from collections.abc import Callable

from storefront.application.cancel_order import CancelOrderHandler
from storefront.application.create_order import CreateOrderHandler
from storefront.application.delete_order import DeleteOrderHandler
from storefront.application.dto import AddressSpec, OrderDTO, OrderItemSpec, PageDTO
from storefront.application.show_order import (
    ListOrdersHandler,
    OrderFilter,
    ShowOrderHandler,
)
from storefront.application.update_order_status import UpdateOrderStatusHandler
from storefront.domain.model.order import OrderStatus, PaymentMethod, PaymentStatus
from storefront.domain.model.user import Principal
from storefront.domain.model.value_objects import Pagination
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.repository.user_repository import UserRepository
from storefront.domain.service.authorization_policy import AuthorizationPolicy


class OrderWorkflow:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        user_repo: UserRepository,
        policy: AuthorizationPolicy | None = None,
        deadline_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        policy = policy or AuthorizationPolicy()
        self._create = CreateOrderHandler(
            order_repo, product_repo, user_repo,
            deadline_seconds=deadline_seconds, clock=clock,
        )
        self._show = ShowOrderHandler(order_repo, product_repo, user_repo, policy)
        self._list = ListOrdersHandler(order_repo, product_repo, user_repo, policy)
        self._update_status = UpdateOrderStatusHandler(
            order_repo, product_repo, user_repo, policy
        )
        self._cancel = CancelOrderHandler(order_repo, product_repo, user_repo, policy)
        self._delete = DeleteOrderHandler(order_repo, product_repo, policy)

    def create_order(
        self,
        principal: Principal | None,
        items: list[OrderItemSpec] | None,
        shipping_address: AddressSpec | None,
        payment_method: str | PaymentMethod,
    ) -> OrderDTO:
        return self._create.handle(principal, items, shipping_address, payment_method)

    def get_orders(
        self,
        principal: Principal | None,
        order_filter: OrderFilter | None = None,
        pagination: Pagination | None = None,
    ) -> PageDTO[OrderDTO]:
        return self._list.handle(principal, order_filter, pagination)

    def get_order(self, order_id: str, principal: Principal | None) -> OrderDTO:
        return self._show.handle(order_id, principal)

    def update_order_status(
        self,
        order_id: str,
        status: str | OrderStatus | None,
        principal: Principal | None,
        payment_status: str | PaymentStatus | None = None,
    ) -> OrderDTO:
        return self._update_status.handle(order_id, status, principal, payment_status)

    def cancel_order(self, order_id: str, principal: Principal | None) -> OrderDTO:
        return self._cancel.handle(order_id, principal)

    def delete_order(self, order_id: str, principal: Principal | None) -> None:
        self._delete.handle(order_id, principal)
