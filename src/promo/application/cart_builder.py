"""Builds the engine's CartSnapshot from incoming cart specs."""

from __future__ import annotations

from collections.abc import Sequence

from promo.application.dto import CartItemSpec
from promo.domain.model.cart import CartLineItem, CartSnapshot
from promo.domain.model.value_objects import DEFAULT_CURRENCY, Money, Quantity


def build_cart_snapshot(
    item_specs: Sequence[CartItemSpec],
    cart_total: str | None = None,
    currency: str = DEFAULT_CURRENCY,
) -> CartSnapshot:
    """Raises ValidationError for malformed prices or quantities."""
    items = tuple(
        CartLineItem(
            price=Money.of(spec.price, currency),
            quantity=Quantity(spec.quantity),
            category=spec.category,
            item_id=spec.product_id,
        )
        for spec in item_specs
    )
    total = Money.of(cart_total, currency) if cart_total is not None else None
    return CartSnapshot(items=items, total=total)
