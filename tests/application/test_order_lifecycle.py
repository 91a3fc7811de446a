"""Tests for status updates, cancellation, deletion and stock restitution,
driven through the OrderWorkflow facade."""

from decimal import Decimal

import pytest

from storefront.application.dto import AddressSpec, OrderItemSpec
from storefront.application.order_workflow import OrderWorkflow
from storefront.application.show_order import OrderFilter
from storefront.domain.exceptions import (
    ForbiddenError,
    InvalidTransitionError,
    OrderNotFoundError,
    UnauthenticatedError,
    ValidationError,
)
from storefront.domain.model.product import Product
from storefront.domain.model.user import Principal, Role, User
from storefront.domain.model.value_objects import Money, Pagination
from tests.fakes import FakeOrderRepository, FakeProductRepository, FakeUserRepository

ADMIN = Principal("admin", Role.ADMIN)
ALICE = Principal("alice")
BOB = Principal("bob")
ADDRESS = AddressSpec(street="1 Main St", city="Springfield", postal_code="1000", country="US")


def _setup() -> tuple[OrderWorkflow, FakeOrderRepository, FakeProductRepository]:
    order_repo = FakeOrderRepository()
    product_repo = FakeProductRepository([
        Product(id="p1", name="Widget", price=Money.of("10.00"), stock=5),
        Product(id="p2", name="Gadget", price=Money.of("5.00"), stock=4),
    ])
    user_repo = FakeUserRepository([
        User("alice", "alice", "alice@example.com", "hashed:x"),
        User("bob", "bob", "bob@example.com", "hashed:x"),
        User("admin", "root", "root@example.com", "hashed:x", Role.ADMIN),
    ])
    return OrderWorkflow(order_repo, product_repo, user_repo), order_repo, product_repo


def _place(workflow: OrderWorkflow, principal: Principal = ALICE) -> str:
    dto = workflow.create_order(
        principal,
        [OrderItemSpec("p1", 2), OrderItemSpec("p2", 1)],
        ADDRESS,
        "credit_card",
    )
    return dto.id


class TestUpdateStatus:

    def test_admin_moves_order_forward(self):
        workflow, _, _ = _setup()
        order_id = _place(workflow)
        dto = workflow.update_order_status(order_id, "processing", ADMIN)
        assert dto.status == "processing"

    def test_admin_may_skip_ahead_to_delivered(self):
        workflow, _, _ = _setup()
        order_id = _place(workflow)
        dto = workflow.update_order_status(order_id, "delivered", ADMIN)
        assert dto.status == "delivered"
        assert dto.delivered_at is not None

    def test_non_admin_cannot_ship(self):
        workflow, order_repo, _ = _setup()
        order_id = _place(workflow)
        with pytest.raises(ForbiddenError):
            workflow.update_order_status(order_id, "shipped", ALICE)
        assert order_repo.get_by_id(order_id).status.value == "pending"

    def test_owner_cancels_pending_order_and_gets_stock_back(self):
        workflow, _, product_repo = _setup()
        order_id = _place(workflow)
        dto = workflow.update_order_status(order_id, "cancelled", ALICE)
        assert dto.status == "cancelled"
        assert product_repo.stock_of("p1") == 5
        assert product_repo.stock_of("p2") == 4

    def test_repeating_cancelled_status_restitutes_once(self):
        workflow, _, product_repo = _setup()
        order_id = _place(workflow)
        workflow.update_order_status(order_id, "cancelled", ALICE)
        dto = workflow.update_order_status(order_id, "cancelled", ALICE)
        assert dto.status == "cancelled"
        assert product_repo.stock_of("p1") == 5

    def test_backwards_transition_rejected(self):
        workflow, _, _ = _setup()
        order_id = _place(workflow)
        workflow.update_order_status(order_id, "shipped", ADMIN)
        with pytest.raises(InvalidTransitionError):
            workflow.update_order_status(order_id, "processing", ADMIN)

    def test_cannot_cancel_shipped_order(self):
        workflow, _, product_repo = _setup()
        order_id = _place(workflow)
        workflow.update_order_status(order_id, "shipped", ADMIN)
        with pytest.raises(InvalidTransitionError):
            workflow.update_order_status(order_id, "cancelled", ADMIN)
        assert product_repo.stock_of("p1") == 3

    def test_payment_completed_is_timestamped(self):
        workflow, _, _ = _setup()
        order_id = _place(workflow)
        dto = workflow.update_order_status(order_id, None, ADMIN, payment_status="completed")
        assert dto.status == "pending"
        assert dto.payment.status == "completed"
        assert dto.payment.paid_at is not None

    def test_payment_status_is_admin_only(self):
        workflow, _, _ = _setup()
        order_id = _place(workflow)
        with pytest.raises(ForbiddenError):
            workflow.update_order_status(order_id, None, ALICE, payment_status="completed")

    def test_unknown_status_rejected(self):
        workflow, _, _ = _setup()
        order_id = _place(workflow)
        with pytest.raises(ValidationError, match="Invalid order status"):
            workflow.update_order_status(order_id, "lost", ADMIN)

    def test_nothing_to_update_rejected(self):
        workflow, _, _ = _setup()
        order_id = _place(workflow)
        with pytest.raises(ValidationError, match="Nothing to update"):
            workflow.update_order_status(order_id, None, ADMIN)

    def test_unknown_order(self):
        workflow, _, _ = _setup()
        with pytest.raises(OrderNotFoundError):
            workflow.update_order_status("nope", "processing", ADMIN)


class TestCancel:

    def test_scenario_cancel_restores_every_line(self):
        workflow, _, product_repo = _setup()
        order_id = _place(workflow)
        assert product_repo.stock_of("p1") == 3
        assert product_repo.stock_of("p2") == 3

        dto = workflow.cancel_order(order_id, ALICE)

        assert dto.status == "cancelled"
        assert dto.total_price == Decimal("25.00")
        assert product_repo.stock_of("p1") == 5
        assert product_repo.stock_of("p2") == 4

    def test_cancelling_twice_restitutes_once(self):
        workflow, _, product_repo = _setup()
        order_id = _place(workflow)
        workflow.cancel_order(order_id, ALICE)
        with pytest.raises(InvalidTransitionError):
            workflow.cancel_order(order_id, ALICE)
        assert product_repo.stock_of("p1") == 5
        assert product_repo.stock_of("p2") == 4

    def test_owner_may_cancel_processing_order(self):
        workflow, _, product_repo = _setup()
        order_id = _place(workflow)
        workflow.update_order_status(order_id, "processing", ADMIN)
        assert workflow.cancel_order(order_id, ALICE).status == "cancelled"
        assert product_repo.stock_of("p1") == 5

    def test_stranger_cannot_cancel(self):
        workflow, _, product_repo = _setup()
        order_id = _place(workflow)
        with pytest.raises(ForbiddenError):
            workflow.cancel_order(order_id, BOB)
        assert product_repo.stock_of("p1") == 3

    def test_delivered_order_cannot_be_cancelled(self):
        workflow, _, _ = _setup()
        order_id = _place(workflow)
        workflow.update_order_status(order_id, "delivered", ADMIN)
        with pytest.raises(InvalidTransitionError, match='status "delivered"'):
            workflow.cancel_order(order_id, ADMIN)

    def test_anonymous_cannot_cancel(self):
        workflow, _, _ = _setup()
        order_id = _place(workflow)
        with pytest.raises(UnauthenticatedError):
            workflow.cancel_order(order_id, None)


class TestDelete:

    def test_deleting_active_order_returns_stock(self):
        workflow, order_repo, product_repo = _setup()
        order_id = _place(workflow)
        workflow.delete_order(order_id, ADMIN)
        assert order_repo.get_by_id(order_id) is None
        assert product_repo.stock_of("p1") == 5
        assert product_repo.stock_of("p2") == 4

    def test_deleting_cancelled_order_does_not_restitute_again(self):
        workflow, _, product_repo = _setup()
        order_id = _place(workflow)
        workflow.cancel_order(order_id, ALICE)
        workflow.delete_order(order_id, ADMIN)
        assert product_repo.stock_of("p1") == 5
        assert product_repo.stock_of("p2") == 4

    def test_deleting_shipped_order_returns_stock(self):
        workflow, _, product_repo = _setup()
        order_id = _place(workflow)
        workflow.update_order_status(order_id, "shipped", ADMIN)
        workflow.delete_order(order_id, ADMIN)
        assert product_repo.stock_of("p1") == 5

    def test_delete_is_admin_only(self):
        workflow, order_repo, _ = _setup()
        order_id = _place(workflow)
        with pytest.raises(ForbiddenError):
            workflow.delete_order(order_id, ALICE)
        assert order_repo.get_by_id(order_id) is not None

    def test_delete_unknown_order(self):
        workflow, _, _ = _setup()
        with pytest.raises(OrderNotFoundError):
            workflow.delete_order("nope", ADMIN)


class TestQueries:

    def test_owner_sees_order(self):
        workflow, _, _ = _setup()
        order_id = _place(workflow)
        assert workflow.get_order(order_id, ALICE).id == order_id

    def test_stranger_cannot_see_order(self):
        workflow, _, _ = _setup()
        order_id = _place(workflow)
        with pytest.raises(ForbiddenError):
            workflow.get_order(order_id, BOB)

    def test_list_is_limited_to_own_orders_for_users(self):
        workflow, _, _ = _setup()
        _place(workflow, ALICE)
        _place(workflow, BOB)
        page = workflow.get_orders(ALICE, OrderFilter(all_users=True))
        assert page.total == 1
        assert page.items[0].user_id == "alice"

    def test_admin_lists_everyone_on_request(self):
        workflow, _, _ = _setup()
        _place(workflow, ALICE)
        _place(workflow, BOB)
        assert workflow.get_orders(ADMIN, OrderFilter(all_users=True)).total == 2
        assert workflow.get_orders(ADMIN).total == 0

    def test_status_filter_and_pagination(self):
        workflow, _, _ = _setup()
        first = _place(workflow)
        _place(workflow)
        workflow.cancel_order(first, ALICE)

        cancelled = workflow.get_orders(ALICE, OrderFilter(status="cancelled"))
        assert [o.id for o in cancelled.items] == [first]

        page = workflow.get_orders(ALICE, pagination=Pagination(page=2, limit=1))
        assert page.count == 1
        assert page.total == 2
        assert page.total_pages == 2
        assert page.current_page == 2
