"""Application services: order queries."""

from __future__ import annotations

from dataclasses import dataclass

from storefront.application.dto import OrderDTO, PageDTO
from storefront.application.guards import require_principal
from storefront.application.order_presenter import OrderPresenter
from storefront.domain.exceptions import OrderNotFoundError, ValidationError
from storefront.domain.model.order import OrderStatus
from storefront.domain.model.user import Principal
from storefront.domain.model.value_objects import Pagination
from storefront.domain.repository.order_repository import OrderQuery, OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.repository.user_repository import UserRepository
from storefront.domain.service.authorization_policy import AuthorizationPolicy


@dataclass(frozen=True)
class OrderFilter:
    """Caller-facing order criteria.

    ``all_users`` only widens the result for admins; everybody else
    always sees just their own orders.
    """

    status: str | None = None
    all_users: bool = False


class ShowOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        user_repo: UserRepository,
        policy: AuthorizationPolicy | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._presenter = OrderPresenter(user_repo, product_repo)
        self._policy = policy or AuthorizationPolicy()

    def handle(self, order_id: str, principal: Principal | None) -> OrderDTO:
        principal = require_principal(principal)
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(f"Order {order_id} not found")
        self._policy.can_view_order(principal, order).enforce()
        return self._presenter.present(order)


class ListOrdersHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        user_repo: UserRepository,
        policy: AuthorizationPolicy | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._presenter = OrderPresenter(user_repo, product_repo)
        self._policy = policy or AuthorizationPolicy()

    def handle(
        self,
        principal: Principal | None,
        order_filter: OrderFilter | None = None,
        pagination: Pagination | None = None,
    ) -> PageDTO[OrderDTO]:
        principal = require_principal(principal)
        order_filter = order_filter or OrderFilter()
        pagination = pagination or Pagination()

        see_everyone = (
            order_filter.all_users
            and self._policy.can_view_all_orders(principal).allowed
        )
        query = OrderQuery(
            user_id=None if see_everyone else principal.user_id,
            status=_parse_status(order_filter.status),
        )
        page = self._order_repo.list(query, pagination)
        return PageDTO.from_page(page, [self._presenter.present(o) for o in page.items])


def _parse_status(status: str | None) -> OrderStatus | None:
    if status is None:
        return None
    try:
        return OrderStatus(status)
    except ValueError as exc:
        raise ValidationError(f"Invalid order status: {status!r}") from exc
