"""Domain service: Discount Calculator.

Turns an offer plus the cart lines it applies to into a monetary
discount.  Arithmetic stays in full Decimal precision until the very
end; the result is capped by ``max_discount``, clamped at zero and only
then rounded to a whole currency unit.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from decimal import Decimal

from promo.domain.model.cart import CartLineItem
from promo.domain.model.offer import Offer, OfferType
from promo.domain.model.value_objects import DEFAULT_CURRENCY, Money

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


def _percentage(offer: Offer, applicable_total: Decimal, total_qty: int) -> Decimal:
    return applicable_total * offer.value / _HUNDRED


def _fixed(offer: Offer, applicable_total: Decimal, total_qty: int) -> Decimal:
    # Flat amount even when it exceeds the lines it covers; only
    # max_discount may bring it down.
    return offer.value


def _buy_x_get_y(offer: Offer, applicable_total: Decimal, total_qty: int) -> Decimal:
    if total_qty == 0:
        return _ZERO
    sets = total_qty // (offer.buy_quantity or 1)
    free_items = sets * (offer.get_quantity or 1)
    average_unit_price = applicable_total / total_qty
    return free_items * average_unit_price


def _free_shipping(offer: Offer, applicable_total: Decimal, total_qty: int) -> Decimal:
    # The shipping waiver is applied at checkout, not as a cart discount.
    return _ZERO


_CALCULATORS: dict[OfferType, Callable[[Offer, Decimal, int], Decimal]] = {
    OfferType.PERCENTAGE: _percentage,
    OfferType.FIXED: _fixed,
    OfferType.BOGO: _buy_x_get_y,
    OfferType.BUY_X_GET_Y: _buy_x_get_y,
    OfferType.FREE_SHIPPING: _free_shipping,
}

_uncovered = set(OfferType) - set(_CALCULATORS)
if _uncovered:
    raise RuntimeError(
        f"No discount calculator for offer types: {sorted(t.value for t in _uncovered)}"
    )


def discount_for(
    offer: Offer,
    line_items: Sequence[CartLineItem],
    currency: str = DEFAULT_CURRENCY,
) -> Money:
    """Discount *offer* grants on *line_items*, in whole currency units.

    An empty selection is worth nothing.  Degenerate offer numbers (NaN,
    negative values) come out as a zero discount rather than an error.
    """
    if not line_items:
        return Money.zero(currency)

    applicable_total = sum((item.line_total.amount for item in line_items), _ZERO)
    total_qty = sum(item.quantity.value for item in line_items)

    raw = _CALCULATORS[offer.type](offer, applicable_total, total_qty)

    if not raw.is_finite():
        raw = _ZERO
    if offer.max_discount is not None and raw > offer.max_discount.amount:
        raw = offer.max_discount.amount
    if raw < _ZERO:
        raw = _ZERO

    return Money(raw, currency).rounded()
