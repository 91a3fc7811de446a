"""Integration tests for the CreateOrder use case.

Uses in-memory fake repositories, no file I/O.
"""

from decimal import Decimal

import pytest

from storefront.application.create_order import CreateOrderHandler
from storefront.application.dto import AddressSpec, OrderItemSpec
from storefront.domain.exceptions import (
    InsufficientStockError,
    InvalidOrderError,
    OperationTimeoutError,
    ProductNotFoundError,
    ProductUnavailableError,
    UnauthenticatedError,
    UnexpectedError,
)
from storefront.domain.model.product import Product
from storefront.domain.model.user import Principal, User
from storefront.domain.model.value_objects import Money
from tests.fakes import (
    FailingOrderRepository,
    FakeOrderRepository,
    FakeProductRepository,
    FakeUserRepository,
    SteppingClock,
)

ALICE = Principal("u1")
ADDRESS = AddressSpec(street="1 Main St", city="Springfield", postal_code="1000", country="US")


def _setup(
    products: list[Product] | None = None,
    order_repo: FakeOrderRepository | None = None,
    **handler_kwargs,
) -> tuple[CreateOrderHandler, FakeOrderRepository, FakeProductRepository]:
    """Build handler with fake repos, optionally pre-loaded with products."""
    if products is None:
        products = [
            Product(id="p1", name="Widget", price=Money.of("10.00"), stock=5),
            Product(id="p2", name="Gadget", price=Money.of("5.00"), stock=4),
            Product(id="p3", name="Retired", price=Money.of("1.00"), stock=9, is_available=False),
        ]
    order_repo = order_repo or FakeOrderRepository()
    product_repo = FakeProductRepository(products)
    user_repo = FakeUserRepository([User("u1", "alice", "alice@example.com", "hashed:x")])
    handler = CreateOrderHandler(order_repo, product_repo, user_repo, **handler_kwargs)
    return handler, order_repo, product_repo


class TestCreateOrderHappyPath:

    def test_single_line_takes_stock_and_totals(self):
        handler, order_repo, product_repo = _setup()
        dto = handler.handle(ALICE, [OrderItemSpec("p1", 3)], ADDRESS, "credit_card")

        assert dto.total_items == 3
        assert dto.total_price == Decimal("30.00")
        assert dto.status == "pending"
        assert dto.payment.status == "pending"
        assert product_repo.stock_of("p1") == 2
        assert order_repo.get_by_id(dto.id) is not None

    def test_second_order_beyond_remaining_stock_fails(self):
        handler, order_repo, product_repo = _setup()
        handler.handle(ALICE, [OrderItemSpec("p1", 3)], ADDRESS, "credit_card")

        with pytest.raises(InsufficientStockError):
            handler.handle(ALICE, [OrderItemSpec("p1", 3)], ADDRESS, "credit_card")

        assert product_repo.stock_of("p1") == 2
        assert order_repo.count() == 1

    def test_multi_line_totals(self):
        handler, _, product_repo = _setup()
        dto = handler.handle(
            ALICE,
            [OrderItemSpec("p1", 2), OrderItemSpec("p2", 1)],
            ADDRESS,
            "paypal",
        )
        assert dto.total_items == 3
        assert dto.total_price == Decimal("25.00")
        assert [line.line_total for line in dto.items] == [Decimal("20.00"), Decimal("5.00")]
        assert product_repo.stock_of("p1") == 3
        assert product_repo.stock_of("p2") == 3

    def test_presents_owner_and_snapshot(self):
        handler, _, _ = _setup()
        dto = handler.handle(ALICE, [OrderItemSpec("p1", 1)], ADDRESS, "debit_card")
        assert dto.user.username == "alice"
        assert dto.items[0].product_name == "Widget"
        assert dto.shipping_address == ADDRESS
        assert dto.payment.method == "debit_card"


class TestCreateOrderPriceLock:

    def test_price_snapshot_at_creation(self):
        handler, order_repo, product_repo = _setup()
        dto = handler.handle(ALICE, [OrderItemSpec("p1", 1)], ADDRESS, "credit_card")

        widget = product_repo.get_by_id("p1")
        widget.apply_changes({"price": Money.of("99.99")})
        product_repo.save(widget)

        saved = order_repo.get_by_id(dto.id)
        assert saved.total_price == Money.of("10.00")
        assert saved.items[0].unit_price == Money.of("10.00")


class TestCreateOrderRejections:

    def test_anonymous_caller_rejected(self):
        handler, _, _ = _setup()
        with pytest.raises(UnauthenticatedError):
            handler.handle(None, [OrderItemSpec("p1", 1)], ADDRESS, "credit_card")

    @pytest.mark.parametrize("items", [None, []])
    def test_empty_items_rejected_without_touching_stock(self, items):
        handler, order_repo, product_repo = _setup()
        with pytest.raises(InvalidOrderError, match="at least one product"):
            handler.handle(ALICE, items, ADDRESS, "credit_card")
        assert product_repo.stock_of("p1") == 5
        assert order_repo.count() == 0

    @pytest.mark.parametrize("quantity", [0, -2, True])
    def test_bad_quantity_rejected(self, quantity):
        handler, _, _ = _setup()
        with pytest.raises(InvalidOrderError, match="positive integer"):
            handler.handle(ALICE, [OrderItemSpec("p1", quantity)], ADDRESS, "credit_card")

    def test_missing_address_rejected(self):
        handler, _, _ = _setup()
        with pytest.raises(InvalidOrderError, match="Shipping address"):
            handler.handle(ALICE, [OrderItemSpec("p1", 1)], None, "credit_card")

    def test_blank_address_field_rejected(self):
        handler, _, _ = _setup()
        address = AddressSpec(street="1 Main St", city="", postal_code="1000", country="US")
        with pytest.raises(InvalidOrderError, match="city"):
            handler.handle(ALICE, [OrderItemSpec("p1", 1)], address, "credit_card")

    def test_unknown_payment_method_rejected(self):
        handler, _, _ = _setup()
        with pytest.raises(InvalidOrderError, match="payment method"):
            handler.handle(ALICE, [OrderItemSpec("p1", 1)], ADDRESS, "bitcoin")

    def test_unknown_product(self):
        handler, _, _ = _setup()
        with pytest.raises(ProductNotFoundError, match="Product with ID ghost not found"):
            handler.handle(ALICE, [OrderItemSpec("ghost", 1)], ADDRESS, "credit_card")

    def test_unavailable_product(self):
        handler, _, product_repo = _setup()
        with pytest.raises(ProductUnavailableError):
            handler.handle(ALICE, [OrderItemSpec("p3", 1)], ADDRESS, "credit_card")
        assert product_repo.stock_of("p3") == 9

    def test_later_line_failure_leaves_earlier_stock_intact(self):
        handler, order_repo, product_repo = _setup()
        with pytest.raises(InsufficientStockError):
            handler.handle(
                ALICE,
                [OrderItemSpec("p1", 2), OrderItemSpec("p2", 10)],
                ADDRESS,
                "credit_card",
            )
        assert product_repo.stock_of("p1") == 5
        assert product_repo.stock_of("p2") == 4
        assert order_repo.count() == 0

    def test_storage_failure_gives_stock_back(self):
        handler, _, product_repo = _setup(order_repo=FailingOrderRepository())
        with pytest.raises(UnexpectedError):
            handler.handle(ALICE, [OrderItemSpec("p1", 2)], ADDRESS, "credit_card")
        assert product_repo.stock_of("p1") == 5


class TestCreateOrderDeadline:

    def test_expired_deadline_times_out_before_any_mutation(self):
        # Every clock read advances 3s against a 5s budget: the second
        # lookup's checkpoint is already past the deadline.
        handler, order_repo, product_repo = _setup(
            deadline_seconds=5, clock=SteppingClock(step=3)
        )
        with pytest.raises(OperationTimeoutError) as exc_info:
            handler.handle(
                ALICE,
                [OrderItemSpec("p1", 1), OrderItemSpec("p2", 1)],
                ADDRESS,
                "credit_card",
            )
        assert exc_info.value.kind == "Timeout"
        assert exc_info.value.retryable
        assert product_repo.stock_of("p1") == 5
        assert product_repo.stock_of("p2") == 4
        assert order_repo.count() == 0

    def test_generous_deadline_succeeds(self):
        handler, _, _ = _setup(deadline_seconds=60, clock=SteppingClock(step=1))
        dto = handler.handle(ALICE, [OrderItemSpec("p1", 1)], ADDRESS, "credit_card")
        assert dto.status == "pending"
