"""Cart snapshot handed to the offer engine.

The storefront is inconsistent about where a line's product id lives:
sometimes on the line itself, sometimes on a nested product reference.
Both shapes are kept here and resolved in one place by the filter.
"""

from __future__ import annotations

from dataclasses import dataclass

from promo.domain.model.value_objects import DEFAULT_CURRENCY, Money, Quantity


@dataclass(frozen=True)
class ProductRef:
    id: str | int


@dataclass(frozen=True)
class CartLineItem:

    price: Money  # unit price
    quantity: Quantity
    category: str | None = None
    item_id: str | int | None = None
    product: ProductRef | None = None

    @property
    def line_total(self) -> Money:
        return self.price * self.quantity.value


@dataclass(frozen=True)
class CartSnapshot:
    """Line items plus the cart total used by the minimum-purchase gate.

    When no total is supplied it is computed over the *entire* cart,
    not just the lines an offer applies to.
    """

    items: tuple[CartLineItem, ...]
    total: Money | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))
        if self.total is None:
            object.__setattr__(self, "total", self._sum_items())

    @property
    def currency(self) -> str:
        return self.total.currency  # type: ignore[union-attr]

    def _sum_items(self) -> Money:
        currency = self.items[0].price.currency if self.items else DEFAULT_CURRENCY
        result = Money.zero(currency)
        for item in self.items:
            result = result + item.line_total
        return result
