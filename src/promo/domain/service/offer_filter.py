"""Domain service: Offer Validity Filter.

Decides whether an offer is usable at a given instant for a given cart,
and which cart lines it covers.  The gate runs in a fixed order and stops
at the first failure:

  1. ``now`` inside ``[start_date, end_date]`` (both ends inclusive)
  2. ``is_active``
  3. cart total at or above ``min_purchase_amount``
  4. ``used_count`` below ``usage_limit`` when a limit is set

Auto-apply and coupon-code validation both go through this module so the
two flows can never disagree about an offer.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from enum import Enum

from promo.domain.model.cart import CartLineItem, CartSnapshot
from promo.domain.model.offer import Offer

logger = logging.getLogger(__name__)


class Ineligibility(Enum):
    INVALID_WINDOW = "INVALID_WINDOW"
    NOT_STARTED = "NOT_STARTED"
    EXPIRED = "EXPIRED"
    INACTIVE = "INACTIVE"
    BELOW_MINIMUM = "BELOW_MINIMUM"
    USAGE_EXHAUSTED = "USAGE_EXHAUSTED"


def resolve_product_id(line_item: CartLineItem) -> str | None:
    """Return the line's product id as a string, whichever shape carries it."""
    if line_item.item_id is not None:
        return str(line_item.item_id)
    if line_item.product is not None and line_item.product.id is not None:
        return str(line_item.product.id)
    return None


def _window_reason(offer: Offer, now: datetime) -> Ineligibility | None:
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    if offer.start_date is None or offer.end_date is None:
        return Ineligibility.INVALID_WINDOW
    if now < offer.start_date:
        return Ineligibility.NOT_STARTED
    if now > offer.end_date:
        return Ineligibility.EXPIRED
    return None


def check_eligibility(
    offer: Offer, cart: CartSnapshot, now: datetime
) -> Ineligibility | None:
    """Return why *offer* cannot be used right now, or None if it can."""
    reason = _window_reason(offer, now)
    if reason is not None:
        return reason

    if not offer.is_active:
        return Ineligibility.INACTIVE

    if cart.total.amount < offer.min_purchase_amount.amount:
        return Ineligibility.BELOW_MINIMUM

    if offer.usage_limit is not None and offer.used_count >= offer.usage_limit:
        return Ineligibility.USAGE_EXHAUSTED

    return None


def is_live(offer: Offer, now: datetime) -> bool:
    """True when *offer* could apply to some cart at *now*.

    Runs every gate except the minimum purchase, which depends on the cart.
    """
    if _window_reason(offer, now) is not None or not offer.is_active:
        return False
    return offer.usage_limit is None or offer.used_count < offer.usage_limit


def applicable_line_items(
    offer: Offer, cart: CartSnapshot, now: datetime
) -> list[CartLineItem]:
    """Cart lines *offer* applies to; empty when the offer is not usable."""
    reason = check_eligibility(offer, cart, now)
    if reason is not None:
        logger.debug("Offer %s skipped: %s", offer.id, reason.value)
        return []

    if offer.apply_to_all:
        return list(cart.items)

    if offer.applicable_products:
        wanted = {str(p) for p in offer.applicable_products}
        return [item for item in cart.items if resolve_product_id(item) in wanted]

    if offer.applicable_categories:
        categories = set(offer.applicable_categories)
        return [item for item in cart.items if item.category in categories]

    # No scope at all: structurally matches nothing.
    return []
