"""Unit tests for the Best-Offer Selector."""

from datetime import timedelta

import pytest

from promo.domain.model.cart import CartLineItem, CartSnapshot
from promo.domain.model.offer import OfferType
from promo.domain.model.value_objects import Money, Quantity
from promo.domain.service.offer_selector import calculate_offer_discount, find_best_offer
from tests.fakes import END, NOW, START, make_offer


def _cart(price: str = "250", qty: int = 2, total: str | None = None) -> CartSnapshot:
    """Single-line cart; 2 x 250 = 500 by default."""
    item = CartLineItem(price=Money.of(price), quantity=Quantity(qty), category="shoes", item_id="p1")
    return CartSnapshot(items=(item,), total=Money.of(total) if total is not None else None)


class TestCalculateOfferDiscount:

    def test_percentage_on_whole_cart(self):
        offer = make_offer(type=OfferType.PERCENTAGE, value="20")
        assert calculate_offer_discount(offer, _cart(), NOW) == Money.of("100")

    @pytest.mark.parametrize(
        "now", [START - timedelta(minutes=1), END + timedelta(minutes=1)]
    )
    def test_outside_window_is_zero(self, now):
        offer = make_offer(type=OfferType.FIXED, value="50")
        assert calculate_offer_discount(offer, _cart(), now) == Money.zero()

    def test_inactive_is_zero(self):
        offer = make_offer(type=OfferType.FIXED, value="50", is_active=False)
        assert calculate_offer_discount(offer, _cart(), NOW) == Money.zero()

    def test_below_minimum_is_zero(self):
        offer = make_offer(type=OfferType.FIXED, value="50", min_purchase_amount="501")
        assert calculate_offer_discount(offer, _cart(), NOW) == Money.zero()

    def test_usage_exhausted_is_zero(self):
        offer = make_offer(type=OfferType.FIXED, value="50", usage_limit=3, used_count=3)
        assert calculate_offer_discount(offer, _cart(), NOW) == Money.zero()

    def test_category_miss_on_buy_x_get_y_is_zero(self):
        offer = make_offer(
            type=OfferType.BUY_X_GET_Y,
            value="0",
            buy_quantity=2,
            apply_to_all=False,
            applicable_categories=("bags",),
        )
        assert calculate_offer_discount(offer, _cart(), NOW) == Money.zero()

    def test_discount_in_cart_currency(self):
        item = CartLineItem(price=Money.of("100", "USD"), quantity=Quantity(1))
        cart = CartSnapshot(items=(item,))
        offer = make_offer(type=OfferType.FIXED, value="5")
        assert calculate_offer_discount(offer, cart, NOW) == Money.of("5", "USD")


class TestFindBestOffer:

    def test_picks_largest_discount(self):
        small = make_offer("a", OfferType.FIXED, "30")
        big = make_offer("b", OfferType.PERCENTAGE, "20")  # 100 on 500
        best = find_best_offer([small, big], _cart(), NOW)
        assert best is not None
        assert best.offer.id == "b"
        assert best.discount == Money.of("100")

    def test_first_of_equal_discounts_wins(self):
        a = make_offer("A", OfferType.FIXED, "30")
        b = make_offer("B", OfferType.FIXED, "75")
        c = make_offer("C", OfferType.FIXED, "75")
        best = find_best_offer([a, b, c], _cart(), NOW)
        assert best.offer.id == "B"

    def test_priority_is_not_consulted(self):
        b = make_offer("B", OfferType.FIXED, "75", priority=0)
        c = make_offer("C", OfferType.FIXED, "75", priority=99)
        assert find_best_offer([b, c], _cart(), NOW).offer.id == "B"

    def test_empty_catalog(self):
        assert find_best_offer([], _cart(), NOW) is None

    def test_all_zero_returns_none(self):
        offers = [
            make_offer("a", OfferType.FREE_SHIPPING, "0"),
            make_offer("b", OfferType.FIXED, "50", is_active=False),
        ]
        assert find_best_offer(offers, _cart(), NOW) is None

    def test_skips_ineligible_offers(self):
        expired = make_offer("old", OfferType.FIXED, "400", end_date=START + timedelta(days=1))
        live = make_offer("new", OfferType.FIXED, "40")
        assert find_best_offer([expired, live], _cart(), NOW).offer.id == "new"

    def test_accepts_any_iterable(self):
        offers = (make_offer(str(i), OfferType.FIXED, str(i * 10)) for i in range(1, 4))
        assert find_best_offer(offers, _cart(), NOW).offer.id == "3"
