"""Races between order requests, run on real threads against the fakes."""

import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor

import pytest

from storefront.application.dto import AddressSpec, OrderItemSpec
from storefront.application.order_workflow import OrderWorkflow
from storefront.domain.exceptions import (
    DomainException,
    InsufficientStockError,
    InvalidTransitionError,
)
from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.model.product import Product
from storefront.domain.model.user import Principal, Role
from storefront.domain.model.value_objects import Money
from tests.fakes import FakeOrderRepository, FakeProductRepository, FakeUserRepository

ADMIN = Principal("admin", Role.ADMIN)
ALICE = Principal("alice")
ADDRESS = AddressSpec(street="1 Main St", city="Springfield", postal_code="1000", country="US")


class InterleavedOrderRepository(FakeOrderRepository):
    """Runs ``after_read`` once, right after the next order is read.

    Lets a test slot a whole second request between a handler's read
    and its write.
    """

    def __init__(self) -> None:
        super().__init__()
        self.after_read: Callable[[], object] | None = None

    def get_by_id(self, order_id: str) -> Order | None:
        order = super().get_by_id(order_id)
        hook, self.after_read = self.after_read, None
        if hook is not None:
            hook()
        return order


def _setup(stock: int) -> tuple[OrderWorkflow, InterleavedOrderRepository, FakeProductRepository]:
    order_repo = InterleavedOrderRepository()
    product_repo = FakeProductRepository([
        Product(id="p1", name="Widget", price=Money.of("10.00"), stock=stock),
    ])
    workflow = OrderWorkflow(order_repo, product_repo, FakeUserRepository())
    return workflow, order_repo, product_repo


def test_buyers_racing_for_the_last_units_never_oversell():
    workflow, order_repo, product_repo = _setup(stock=3)
    start = threading.Barrier(10)

    def buy(n: int) -> str:
        start.wait()
        try:
            workflow.create_order(
                Principal(f"buyer-{n}"), [OrderItemSpec("p1", 1)], ADDRESS, "credit_card"
            )
            return "ok"
        except InsufficientStockError:
            return "sold out"

    with ThreadPoolExecutor(max_workers=10) as pool:
        results = list(pool.map(buy, range(10)))

    assert results.count("ok") == 3
    assert results.count("sold out") == 7
    assert product_repo.stock_of("p1") == 0
    assert order_repo.count() == 3


def test_cancel_racing_delete_restitutes_once():
    for _ in range(20):
        workflow, _, product_repo = _setup(stock=5)
        order = workflow.create_order(
            Principal("alice"), [OrderItemSpec("p1", 2)], ADDRESS, "credit_card"
        )
        start = threading.Barrier(2)

        def cancel() -> None:
            start.wait()
            try:
                workflow.cancel_order(order.id, ADMIN)
            except DomainException:
                pass

        def delete() -> None:
            start.wait()
            try:
                workflow.delete_order(order.id, ADMIN)
            except DomainException:
                pass

        threads = [threading.Thread(target=cancel), threading.Thread(target=delete)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert product_repo.stock_of("p1") == 5


def test_status_update_cannot_overwrite_a_cancellation_made_after_it_read():
    workflow, order_repo, product_repo = _setup(stock=5)
    order = workflow.create_order(ALICE, [OrderItemSpec("p1", 2)], ADDRESS, "credit_card")
    order_repo.after_read = lambda: workflow.cancel_order(order.id, ALICE)

    with pytest.raises(InvalidTransitionError, match="changed by another request"):
        workflow.update_order_status(order.id, "processing", ADMIN)

    stored = order_repo.get_by_id(order.id)
    assert stored.status == OrderStatus.CANCELLED
    assert stored.stock_restituted is True
    assert product_repo.stock_of("p1") == 5


def test_cancel_cannot_overwrite_a_shipment_made_after_it_read():
    workflow, order_repo, product_repo = _setup(stock=5)
    order = workflow.create_order(ALICE, [OrderItemSpec("p1", 2)], ADDRESS, "credit_card")
    order_repo.after_read = lambda: workflow.update_order_status(order.id, "shipped", ADMIN)

    with pytest.raises(InvalidTransitionError, match="changed by another request"):
        workflow.cancel_order(order.id, ALICE)

    stored = order_repo.get_by_id(order.id)
    assert stored.status == OrderStatus.SHIPPED
    assert stored.stock_restituted is False
    assert product_repo.stock_of("p1") == 3


def test_delete_settles_a_cancellation_saved_before_its_stock_came_back():
    workflow, order_repo, product_repo = _setup(stock=5)
    order = workflow.create_order(ALICE, [OrderItemSpec("p1", 2)], ADDRESS, "credit_card")
    cancelled = order_repo.get_by_id(order.id)
    cancelled.cancel()
    order_repo.save(cancelled, expected_status=OrderStatus.PENDING)

    workflow.delete_order(order.id, ADMIN)

    assert order_repo.get_by_id(order.id) is None
    assert product_repo.stock_of("p1") == 5
