"""Unit tests for the Product aggregate, filters and search."""

import pytest

from storefront.domain.exceptions import InsufficientStockError, ValidationError
from storefront.domain.model.product import (
    DEFAULT_IMAGE,
    Product,
    ProductFilter,
    matches_search,
)
from storefront.domain.model.value_objects import Money


def _product(**overrides) -> Product:
    fields = {"name": "Widget", "price": Money.of("10.00"), "stock": 5}
    fields.update(overrides)
    return Product.create(**fields)


class TestProductCreation:

    def test_defaults(self):
        p = Product.create(name="  Widget  ")
        assert p.name == "Widget"
        assert p.price == Money.zero()
        assert p.stock == 0
        assert p.is_available is True
        assert p.image == DEFAULT_IMAGE

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError, match="name is required"):
            Product.create(name="   ")

    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            _product(stock=-1)


class TestStock:

    def test_remove_stock(self):
        p = _product()
        p.remove_stock(3)
        assert p.stock == 2

    def test_remove_more_than_available(self):
        p = _product(stock=2)
        with pytest.raises(InsufficientStockError, match="Available: 2, Requested: 3"):
            p.remove_stock(3)
        assert p.stock == 2

    def test_add_stock(self):
        p = _product(stock=2)
        p.add_stock(4)
        assert p.stock == 6

    def test_non_positive_adjustment_rejected(self):
        with pytest.raises(ValidationError):
            _product().add_stock(0)


class TestApplyChanges:

    def test_merges_whitelisted_fields(self):
        p = _product()
        p.apply_changes({"name": "Gizmo", "price": "12.50", "is_available": False})
        assert p.name == "Gizmo"
        assert p.price == Money.of("12.50")
        assert p.is_available is False

    def test_unknown_field_rejected(self):
        p = _product()
        with pytest.raises(ValidationError, match="creator_id"):
            p.apply_changes({"creator_id": "mallory"})

    def test_bad_value_leaves_product_untouched(self):
        p = _product()
        with pytest.raises(ValidationError):
            p.apply_changes({"name": "Gizmo", "stock": -4})
        assert p.name == "Widget"
        assert p.stock == 5


class TestImage:

    def test_replacing_default_image_returns_nothing(self):
        p = _product()
        assert p.replace_image("/uploads/products/a.png") is None
        assert p.has_custom_image

    def test_replacing_custom_image_returns_old_one(self):
        p = _product()
        p.replace_image("/uploads/products/a.png")
        assert p.replace_image("/uploads/products/b.png") == "/uploads/products/a.png"


class TestRelations:

    def test_assign_creator_and_category(self):
        p = _product()
        before = p.updated_at
        p.assign_creator("bob")
        p.assign_category("c2")
        assert (p.creator_id, p.category_id) == ("bob", "c2")
        assert p.updated_at >= before


class TestFilterAndSearch:

    def test_price_range(self):
        f = ProductFilter(min_price=Money.of("5"), max_price=Money.of("10"))
        assert f.matches(_product(price=Money.of("10")))
        assert not f.matches(_product(price=Money.of("10.01")))

    def test_inverted_range_rejected(self):
        with pytest.raises(ValidationError, match="min_price"):
            ProductFilter(min_price=Money.of("10"), max_price=Money.of("5"))

    def test_availability_and_category(self):
        f = ProductFilter(is_available=True, category_id="c1")
        assert f.matches(_product(category_id="c1"))
        assert not f.matches(_product(category_id="c2"))
        assert not f.matches(_product(category_id="c1", is_available=False))

    def test_creator(self):
        f = ProductFilter(creator_id="alice")
        assert f.matches(_product(creator_id="alice"))
        assert not f.matches(_product(creator_id="bob"))
        assert not f.matches(_product())

    def test_search_is_case_insensitive_over_name_or_description(self):
        p = _product(name="Blue Mug", description="Ceramic, dishwasher safe")
        assert matches_search(p, "blue")
        assert matches_search(p, "CERAMIC")
        assert not matches_search(p, "plastic")
