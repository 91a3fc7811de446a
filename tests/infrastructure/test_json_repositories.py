"""Tests for the JSON-file repositories, against a temporary data directory."""

import json
import threading
from decimal import Decimal

import pytest

from storefront.domain.exceptions import (
    CategoryNotFoundError,
    DuplicateEmailError,
    DuplicateNameError,
    InsufficientStockError,
    InvalidTransitionError,
    OrderNotFoundError,
    ProductNotFoundError,
    UnexpectedError,
)
from storefront.domain.model.category import Category
from storefront.domain.model.order import (
    Order,
    OrderLine,
    OrderStatus,
    PaymentInfo,
    PaymentMethod,
)
from storefront.domain.model.product import Product, ProductFilter
from storefront.domain.model.user import Role, User
from storefront.domain.model.value_objects import Money, Pagination, Quantity, ShippingAddress
from storefront.domain.repository.order_repository import OrderQuery
from storefront.infrastructure.persistence.json_category_repository import JsonCategoryRepository
from storefront.infrastructure.persistence.json_order_repository import JsonOrderRepository
from storefront.infrastructure.persistence.json_product_repository import JsonProductRepository
from storefront.infrastructure.persistence.json_user_repository import JsonUserRepository


def _product(name="Widget", price="10.00", stock=5, **kwargs) -> Product:
    return Product.create(name=name, price=Money.of(price), stock=stock, **kwargs)


def _order(user_id="alice", product_id="p1") -> Order:
    return Order.create(
        user_id=user_id,
        items=[OrderLine(product_id, "Widget", Quantity(2), Money.of("10.00"))],
        shipping_address=ShippingAddress("1 Main St", "Springfield", "1000", "US"),
        payment_info=PaymentInfo(PaymentMethod.PAYPAL),
    )


class TestJsonProductRepository:

    def test_creates_an_empty_file(self, tmp_path):
        path = tmp_path / "data" / "products.json"
        JsonProductRepository(path)
        assert json.loads(path.read_text()) == []

    def test_add_and_reload(self, tmp_path):
        path = tmp_path / "products.json"
        product = _product(description="Shiny", category_id="c1")
        JsonProductRepository(path).add(product)

        loaded = JsonProductRepository(path).get_by_id(product.id)
        assert loaded.name == "Widget"
        assert loaded.price == Money.of("10.00")
        assert loaded.category_id == "c1"
        assert loaded.created_at == product.created_at

    def test_save_never_overwrites_stock(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        product = _product(stock=5)
        repo.add(product)

        stale = repo.get_by_id(product.id)
        repo.decrement_stock(product.id, 3)
        stale.apply_changes({"price": Money.of("12.00")})
        repo.save(stale)

        reloaded = repo.get_by_id(product.id)
        assert reloaded.stock == 2
        assert reloaded.price == Money.of("12.00")

    def test_set_stock(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        product = _product(stock=5)
        repo.add(product)
        assert repo.set_stock(product.id, 42).stock == 42
        assert repo.get_by_id(product.id).stock == 42

    def test_decrement_refuses_to_go_negative(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        product = _product(stock=1)
        repo.add(product)
        with pytest.raises(InsufficientStockError):
            repo.decrement_stock(product.id, 2)
        assert repo.get_by_id(product.id).stock == 1

    def test_stock_ops_on_missing_product(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        with pytest.raises(ProductNotFoundError):
            repo.increment_stock("ghost", 1)

    def test_concurrent_decrements_are_serialized(self, tmp_path):
        path = tmp_path / "products.json"
        product = _product(stock=20)
        JsonProductRepository(path).add(product)

        def buy():
            # One repository per thread, as one per request would be.
            JsonProductRepository(path).decrement_stock(product.id, 1)

        threads = [threading.Thread(target=buy) for _ in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert JsonProductRepository(path).get_by_id(product.id).stock == 0

    def test_list_filters_and_search(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        repo.add(_product("Blue Mug", "8.00", description="ceramic"))
        repo.add(_product("Teapot", "25.00"))

        cheap = repo.list(ProductFilter(max_price=Money.of("10")), Pagination())
        assert [p.name for p in cheap.items] == ["Blue Mug"]
        assert [p.name for p in repo.search("CERAMIC", Pagination()).items] == ["Blue Mug"]

    def test_list_by_creator(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        repo.add(_product("Mug", creator_id="alice"))
        repo.add(_product("Rake", creator_id="bob"))
        page = repo.list(ProductFilter(creator_id="alice"), Pagination())
        assert [p.name for p in page.items] == ["Mug"]

    def test_assign_category_moves_known_products_only(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        mug = _product("Mug", category_id="c1")
        rake = _product("Rake", category_id="c2")
        repo.add(mug)
        repo.add(rake)
        repo.decrement_stock(mug.id, 2)

        moved = repo.assign_category([mug.id, rake.id, "ghost"], "c2")

        assert [p.id for p in moved] == [mug.id]
        reloaded = repo.get_by_id(mug.id)
        assert reloaded.category_id == "c2"
        assert reloaded.stock == 3
        assert repo.count_by_category("c2") == 2

    def test_count_by_category(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        repo.add(_product(category_id="c1"))
        repo.add(_product(category_id="c1"))
        repo.add(_product(category_id="c2"))
        assert repo.count_by_category("c1") == 2

    def test_corrupt_file_raises_unexpected_error(self, tmp_path):
        path = tmp_path / "products.json"
        path.write_text("{not json")
        with pytest.raises(UnexpectedError):
            JsonProductRepository(path).get_by_id("x")

    def test_failed_write_leaves_file_untouched(self, tmp_path):
        path = tmp_path / "products.json"
        repo = JsonProductRepository(path)
        repo.add(_product())
        before = path.read_text()
        with pytest.raises(ProductNotFoundError):
            repo.delete("ghost")
        assert path.read_text() == before


class TestJsonCategoryRepository:

    def test_names_are_unique_ignoring_case(self, tmp_path):
        repo = JsonCategoryRepository(tmp_path / "categories.json")
        repo.add(Category.create("Kitchen"))
        with pytest.raises(DuplicateNameError):
            repo.add(Category.create("KITCHEN"))

    def test_get_by_name_and_sorted_list(self, tmp_path):
        repo = JsonCategoryRepository(tmp_path / "categories.json")
        repo.add(Category.create("Kitchen"))
        repo.add(Category.create("garden"))
        assert repo.get_by_name(" kitchen ").name == "Kitchen"
        assert [c.name for c in repo.list(Pagination()).items] == ["garden", "Kitchen"]

    def test_save_and_delete(self, tmp_path):
        repo = JsonCategoryRepository(tmp_path / "categories.json")
        category = Category.create("Kitchen")
        repo.add(category)
        category.apply_changes({"description": "Pots"})
        repo.save(category)
        assert repo.get_by_id(category.id).description == "Pots"
        repo.delete(category.id)
        with pytest.raises(CategoryNotFoundError):
            repo.delete(category.id)


class TestJsonUserRepository:

    def test_roundtrip_keeps_role_and_hash(self, tmp_path):
        repo = JsonUserRepository(tmp_path / "users.json")
        user = User.create("root", "Root@Shop.test", "$2b$hash", Role.ADMIN)
        repo.add(user)
        loaded = repo.get_by_email("root@shop.test")
        assert loaded.id == user.id
        assert loaded.role == Role.ADMIN
        assert loaded.password_hash == "$2b$hash"

    def test_uniqueness(self, tmp_path):
        repo = JsonUserRepository(tmp_path / "users.json")
        repo.add(User.create("alice", "alice@shop.test", "h"))
        with pytest.raises(DuplicateNameError):
            repo.add(User.create("alice", "other@shop.test", "h"))
        with pytest.raises(DuplicateEmailError):
            repo.add(User.create("alice2", "alice@shop.test", "h"))


class TestJsonOrderRepository:

    def test_roundtrip(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        order = _order()
        repo.add(order)

        loaded = repo.get_by_id(order.id)
        assert loaded.total_items == 2
        assert loaded.total_price.amount == Decimal("20.00")
        assert loaded.items[0].unit_price == Money.of("10.00")
        assert loaded.payment_info.method == PaymentMethod.PAYPAL
        assert loaded.status == OrderStatus.PENDING

    def test_list_by_user(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        repo.add(_order("alice"))
        repo.add(_order("bob"))
        page = repo.list(OrderQuery(user_id="bob"), Pagination())
        assert [o.user_id for o in page.items] == ["bob"]

    def test_claim_restitution_succeeds_once(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        order = _order()
        repo.add(order)
        assert repo.claim_restitution(order.id) is True
        assert repo.claim_restitution(order.id) is False
        assert repo.claim_restitution("ghost") is False

    def test_save_cannot_clear_restitution_flag(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        order = _order()
        repo.add(order)
        stale = repo.get_by_id(order.id)
        repo.claim_restitution(order.id)

        stale.transition_to(OrderStatus.PROCESSING)
        repo.save(stale)

        reloaded = repo.get_by_id(order.id)
        assert reloaded.stock_restituted is True
        assert reloaded.status == OrderStatus.PROCESSING

    def test_save_with_stale_status_writes_nothing(self, tmp_path):
        path = tmp_path / "orders.json"
        repo = JsonOrderRepository(path)
        order = _order()
        repo.add(order)
        stale = repo.get_by_id(order.id)

        current = repo.get_by_id(order.id)
        current.cancel()
        repo.save(current, expected_status=OrderStatus.PENDING)
        before = path.read_text()

        stale.transition_to(OrderStatus.PROCESSING)
        with pytest.raises(InvalidTransitionError, match="changed by another request"):
            repo.save(stale, expected_status=OrderStatus.PENDING)

        assert path.read_text() == before
        assert repo.get_by_id(order.id).status == OrderStatus.CANCELLED

    def test_delete_missing(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        with pytest.raises(OrderNotFoundError):
            repo.delete("ghost")
