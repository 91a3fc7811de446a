"""Unit tests for domain value objects."""

from decimal import Decimal

import pytest

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import (
    Money,
    Page,
    Pagination,
    Quantity,
    ShippingAddress,
)


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_creation(self):
        m = Money(Decimal("10.50"))
        assert m.amount == Decimal("10.50")
        assert m.currency == "USD"

    def test_of_factory_from_string(self):
        assert Money.of("25.99").amount == Decimal("25.99")

    def test_of_factory_from_int(self):
        assert Money.of(10).amount == Decimal("10")

    def test_zero_is_allowed(self):
        assert Money.zero().amount == Decimal("0")

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Money(Decimal("-1"))

    def test_non_finite_amount_rejected(self):
        with pytest.raises(ValidationError, match="finite"):
            Money(Decimal("NaN"))

    def test_garbage_rejected(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of("ten dollars")

    def test_addition(self):
        assert Money.of("10") + Money.of("5.50") == Money.of("15.50")

    def test_multiplication_by_int(self):
        assert Money.of("7.50") * 3 == Money.of("22.50")

    def test_multiplication_by_float_rejected(self):
        with pytest.raises(TypeError):
            Money.of("7.50") * 1.5

    def test_currency_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="Cannot combine"):
            Money(Decimal("10"), "USD") + Money(Decimal("5"), "EUR")

    def test_str_formatting(self):
        assert str(Money.of("15")) == "$15.00"
        assert str(Money.of("9.5")) == "$9.50"

    def test_comparison_operators(self):
        assert Money.of("5") < Money.of("10")
        assert Money.of("10") > Money.of("5")
        assert Money.of("10") >= Money.of("10")
        assert Money.of("10") <= Money.of("10")


# ── Quantity ─────────────────────────────────────────────────────────────────


class TestQuantity:

    def test_positive(self):
        assert Quantity(3).value == 3

    @pytest.mark.parametrize("bad", [0, -1])
    def test_non_positive_rejected(self, bad):
        with pytest.raises(ValidationError, match="positive"):
            Quantity(bad)

    def test_bool_rejected(self):
        with pytest.raises(ValidationError, match="integer"):
            Quantity(True)

    def test_float_rejected(self):
        with pytest.raises(ValidationError, match="integer"):
            Quantity(1.5)


# ── ShippingAddress ──────────────────────────────────────────────────────────


class TestShippingAddress:

    def test_all_fields_required(self):
        with pytest.raises(ValidationError, match="city is required"):
            ShippingAddress(street="1 Main St", city="  ", postal_code="1000", country="AR")

    def test_valid(self):
        address = ShippingAddress("1 Main St", "Springfield", "1000", "US")
        assert address.city == "Springfield"


# ── Pagination / Page ────────────────────────────────────────────────────────


class TestPagination:

    def test_defaults(self):
        p = Pagination()
        assert (p.page, p.limit, p.offset) == (1, 10, 0)

    def test_page_below_one_rejected(self):
        with pytest.raises(ValidationError, match="at least 1"):
            Pagination(page=0)

    @pytest.mark.parametrize("limit", [0, 101])
    def test_limit_out_of_range_rejected(self, limit):
        with pytest.raises(ValidationError, match="Limit"):
            Pagination(limit=limit)

    def test_page_from_sequence(self):
        page = Page.from_sequence(list(range(25)), Pagination(page=3, limit=10))
        assert page.items == [20, 21, 22, 23, 24]
        assert page.count == 5
        assert page.total == 25
        assert page.total_pages == 3
        assert page.current_page == 3

    def test_page_past_the_end_is_empty(self):
        page = Page.from_sequence([1, 2], Pagination(page=5, limit=10))
        assert page.items == []
        assert page.total == 2
        assert page.total_pages == 1

    def test_empty_result_has_zero_pages(self):
        assert Page.from_sequence([], Pagination()).total_pages == 0
