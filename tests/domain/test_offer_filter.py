"""Unit tests for the Offer Validity Filter."""

from datetime import timedelta

import pytest

from promo.domain.model.cart import CartLineItem, CartSnapshot, ProductRef
from promo.domain.model.value_objects import Money, Quantity
from promo.domain.service.offer_filter import (
    Ineligibility,
    applicable_line_items,
    check_eligibility,
    is_live,
    resolve_product_id,
)
from tests.fakes import END, NOW, START, make_offer


def _line(price: str = "100", qty: int = 1, category: str | None = None, **ids) -> CartLineItem:
    return CartLineItem(
        price=Money.of(price), quantity=Quantity(qty), category=category, **ids
    )


def _cart(*items: CartLineItem, total: str | None = None) -> CartSnapshot:
    return CartSnapshot(items=items, total=Money.of(total) if total is not None else None)


# ── Eligibility gate ─────────────────────────────────────────────────────────


class TestDateWindow:

    def test_inside_window(self):
        assert check_eligibility(make_offer(), _cart(_line()), NOW) is None

    def test_before_start(self):
        reason = check_eligibility(make_offer(), _cart(_line()), START - timedelta(seconds=1))
        assert reason is Ineligibility.NOT_STARTED

    def test_after_end(self):
        reason = check_eligibility(make_offer(), _cart(_line()), END + timedelta(seconds=1))
        assert reason is Ineligibility.EXPIRED

    def test_exactly_at_start_is_valid(self):
        assert check_eligibility(make_offer(), _cart(_line()), START) is None

    def test_exactly_at_end_is_valid(self):
        assert check_eligibility(make_offer(), _cart(_line()), END) is None

    def test_unparseable_date_invalidates(self):
        offer = make_offer(end_date=None)
        assert check_eligibility(offer, _cart(_line()), NOW) is Ineligibility.INVALID_WINDOW

    def test_naive_now_treated_as_utc(self):
        assert check_eligibility(make_offer(), _cart(_line()), NOW.replace(tzinfo=None)) is None

    def test_naive_offer_dates_treated_as_utc(self):
        offer = make_offer(
            start_date=START.replace(tzinfo=None), end_date=END.replace(tzinfo=None)
        )
        assert check_eligibility(offer, _cart(_line()), NOW) is None
        assert check_eligibility(offer, _cart(_line()), END) is None
        reason = check_eligibility(offer, _cart(_line()), END + timedelta(seconds=1))
        assert reason is Ineligibility.EXPIRED


class TestGateOrder:

    def test_inactive(self):
        offer = make_offer(is_active=False)
        assert check_eligibility(offer, _cart(_line()), NOW) is Ineligibility.INACTIVE

    def test_window_checked_before_active_flag(self):
        offer = make_offer(is_active=False)
        reason = check_eligibility(offer, _cart(_line()), END + timedelta(days=1))
        assert reason is Ineligibility.EXPIRED

    def test_minimum_checked_before_usage(self):
        offer = make_offer(min_purchase_amount="500", usage_limit=1, used_count=1)
        reason = check_eligibility(offer, _cart(_line("100")), NOW)
        assert reason is Ineligibility.BELOW_MINIMUM


class TestMinimumPurchase:

    def test_below_minimum(self):
        offer = make_offer(min_purchase_amount="500")
        assert check_eligibility(offer, _cart(_line("499")), NOW) is Ineligibility.BELOW_MINIMUM

    def test_exactly_minimum_accepted(self):
        offer = make_offer(min_purchase_amount="500")
        assert check_eligibility(offer, _cart(_line("250", qty=2)), NOW) is None

    def test_supplied_total_wins_over_item_sum(self):
        offer = make_offer(min_purchase_amount="500")
        assert check_eligibility(offer, _cart(_line("100"), total="600"), NOW) is None


class TestUsageLimit:

    def test_exhausted(self):
        offer = make_offer(usage_limit=5, used_count=5)
        assert check_eligibility(offer, _cart(_line()), NOW) is Ineligibility.USAGE_EXHAUSTED

    def test_one_left(self):
        offer = make_offer(usage_limit=5, used_count=4)
        assert check_eligibility(offer, _cart(_line()), NOW) is None

    def test_no_limit(self):
        offer = make_offer(usage_limit=None, used_count=10_000)
        assert check_eligibility(offer, _cart(_line()), NOW) is None

    def test_zero_limit_is_a_limit(self):
        offer = make_offer(usage_limit=0)
        assert check_eligibility(offer, _cart(_line()), NOW) is Ineligibility.USAGE_EXHAUSTED


class TestIsLive:

    def test_ignores_minimum_purchase(self):
        assert is_live(make_offer(min_purchase_amount="100000"), NOW)

    def test_exhausted_is_not_live(self):
        assert not is_live(make_offer(usage_limit=1, used_count=1), NOW)

    def test_inactive_is_not_live(self):
        assert not is_live(make_offer(is_active=False), NOW)


# ── Product id resolution ────────────────────────────────────────────────────


class TestResolveProductId:

    def test_direct_id(self):
        assert resolve_product_id(_line(item_id="p1")) == "p1"

    def test_nested_product_reference(self):
        assert resolve_product_id(_line(product=ProductRef("p2"))) == "p2"

    def test_direct_id_preferred(self):
        assert resolve_product_id(_line(item_id="p1", product=ProductRef("p2"))) == "p1"

    def test_numeric_id_normalized(self):
        assert resolve_product_id(_line(item_id=42)) == "42"

    def test_no_id(self):
        assert resolve_product_id(_line()) is None


# ── Applicable items ─────────────────────────────────────────────────────────


class TestApplicableLineItems:

    def test_apply_to_all(self):
        items = (_line(item_id="a"), _line(item_id="b"))
        assert applicable_line_items(make_offer(), _cart(*items), NOW) == list(items)

    def test_by_product_both_shapes(self):
        direct = _line(item_id="a")
        nested = _line(product=ProductRef("b"))
        other = _line(item_id="c")
        offer = make_offer(apply_to_all=False, applicable_products=("a", "b"))
        assert applicable_line_items(offer, _cart(direct, nested, other), NOW) == [direct, nested]

    def test_by_category(self):
        shoe = _line(category="shoes")
        shirt = _line(category="shirts")
        offer = make_offer(apply_to_all=False, applicable_categories=("shoes",))
        assert applicable_line_items(offer, _cart(shoe, shirt), NOW) == [shoe]

    def test_products_take_precedence_over_categories(self):
        shoe = _line(item_id="a", category="shoes")
        shirt = _line(item_id="b", category="shirts")
        offer = make_offer(
            apply_to_all=False,
            applicable_products=("b",),
            applicable_categories=("shoes",),
        )
        assert applicable_line_items(offer, _cart(shoe, shirt), NOW) == [shirt]

    def test_no_scope_matches_nothing(self):
        offer = make_offer(apply_to_all=False)
        assert applicable_line_items(offer, _cart(_line(item_id="a")), NOW) == []

    @pytest.mark.parametrize(
        "overrides",
        [{"is_active": False}, {"usage_limit": 0}, {"min_purchase_amount": "1000"}],
    )
    def test_ineligible_offer_has_no_items(self, overrides):
        offer = make_offer(**overrides)
        assert applicable_line_items(offer, _cart(_line()), NOW) == []
