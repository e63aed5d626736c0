"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CartItemSpec:
    """Input: one cart line as the storefront sends it."""

    product_id: str | None
    category: str | None
    price: str
    quantity: int


@dataclass(frozen=True)
class OfferDTO:
    """Output: an offer as listed to the customer."""

    id: str
    name: str
    code: str | None
    type: str
    description: str
    priority: int
    ends_at: str
    time_left: str


@dataclass(frozen=True)
class BestOfferDTO:
    """Output: the offer auto-apply would pick, with its savings."""

    offer_id: str
    name: str
    code: str | None
    type: str
    discount: str  # formatted, e.g. "₹150.00"


@dataclass(frozen=True)
class CouponValidationDTO:
    """Output: a customer-entered code that passed validation."""

    offer_id: str
    name: str
    code: str
    type: str
    discount: str
    cart_total: str
    final_total: str
    free_shipping: bool
    message: str
