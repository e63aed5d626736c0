"""Application service: Find Best Offer use case (auto-apply).

Runs the selector over the active-offers feed for the customer's cart.
Offers without a coupon code are evaluated too; whether such an offer can
be surfaced is the caller's decision.
"""

from __future__ import annotations

from collections.abc import Sequence

from promo.application.cart_builder import build_cart_snapshot
from promo.application.clock import Clock, utc_now
from promo.application.dto import BestOfferDTO, CartItemSpec
from promo.application.list_active_offers import active_offers
from promo.domain.model.offer import EvaluatedOffer
from promo.domain.model.value_objects import DEFAULT_CURRENCY
from promo.domain.repository.offer_repository import OfferRepository
from promo.domain.service.offer_selector import find_best_offer


class FindBestOfferHandler:

    def __init__(
        self,
        offer_repo: OfferRepository,
        clock: Clock = utc_now,
        currency: str = DEFAULT_CURRENCY,
    ) -> None:
        self._offer_repo = offer_repo
        self._clock = clock
        self._currency = currency

    def handle(
        self,
        item_specs: Sequence[CartItemSpec],
        cart_total: str | None = None,
    ) -> BestOfferDTO | None:
        """Return the best offer for this cart, or None if nothing saves money."""
        if not item_specs:
            return None

        now = self._clock()
        cart = build_cart_snapshot(item_specs, cart_total, self._currency)
        best = find_best_offer(active_offers(self._offer_repo, now), cart, now)
        return self._to_dto(best) if best is not None else None

    @staticmethod
    def _to_dto(evaluated: EvaluatedOffer) -> BestOfferDTO:
        offer = evaluated.offer
        return BestOfferDTO(
            offer_id=offer.id,
            name=offer.name,
            code=offer.code,
            type=offer.type.value,
            discount=str(evaluated.discount),
        )
