"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.model.value_objects import Page, Pagination


@dataclass(frozen=True)
class OrderQuery:
    """Storage-level order criteria.  ``user_id=None`` means every user."""

    user_id: str | None = None
    status: OrderStatus | None = None

    def matches(self, order: Order) -> bool:
        if self.user_id is not None and order.user_id != self.user_id:
            return False
        if self.status is not None and order.status != self.status:
            return False
        return True


class OrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: str) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def list(self, query: OrderQuery, pagination: Pagination) -> Page[Order]:
        """Return matching orders, most recent first."""

    @abstractmethod
    def add(self, order: Order) -> None:
        """Persist a new order, assigning its ID."""

    @abstractmethod
    def save(self, order: Order, expected_status: OrderStatus | None = None) -> None:
        """Persist an updated order.

        With ``expected_status`` the write only happens if the stored order
        still has that status; otherwise InvalidTransitionError is raised
        and nothing is written.  ``stock_restituted`` is monotonic: saving
        a stale copy never clears a restitution already claimed.
        """

    @abstractmethod
    def delete(self, order_id: str) -> None:
        """Remove an order permanently."""

    @abstractmethod
    def claim_restitution(self, order_id: str) -> bool:
        """Atomically mark the order's stock as restituted.

        Returns True only for the single caller that flipped the marker;
        that caller is responsible for returning the stock.
        """
