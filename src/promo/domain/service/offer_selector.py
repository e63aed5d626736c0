"""Domain service: Best-Offer Selector.

A single pass over the catalog in the order the caller gave it.  An
offer replaces the running best only when its discount is strictly
larger, so on a tie the earlier offer wins.  ``priority`` is not
consulted; callers that want priority-ordered ties sort the catalog
first.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime

from promo.domain.model.cart import CartSnapshot
from promo.domain.model.offer import EvaluatedOffer, Offer
from promo.domain.model.value_objects import Money
from promo.domain.service.discount_calculator import discount_for
from promo.domain.service.offer_filter import applicable_line_items

logger = logging.getLogger(__name__)


def calculate_offer_discount(offer: Offer, cart: CartSnapshot, now: datetime) -> Money:
    """Discount *offer* yields for *cart* at instant *now* (zero if unusable)."""
    items = applicable_line_items(offer, cart, now)
    return discount_for(offer, items, currency=cart.currency)


def find_best_offer(
    offers: Iterable[Offer], cart: CartSnapshot, now: datetime
) -> EvaluatedOffer | None:
    """Return the offer with the largest discount, or None if none saves anything."""
    best: EvaluatedOffer | None = None
    best_discount = Money.zero(cart.currency)

    for offer in offers:
        discount = calculate_offer_discount(offer, cart, now)
        if discount > best_discount:
            best = EvaluatedOffer(offer=offer, discount=discount)
            best_discount = discount

    if best is not None:
        logger.debug("Best offer %s saves %s", best.offer.id, best.discount)
    return best
