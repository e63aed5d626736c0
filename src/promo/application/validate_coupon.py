"""Application service: Validate Coupon use case.

The customer typed a code.  Unlike auto-apply, a refusal has to say why,
so the eligibility gate's reason is turned into a message here.  The
gate and the discount arithmetic are the same functions auto-apply
uses; the two flows must never quote different savings for one offer.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from promo.application.cart_builder import build_cart_snapshot
from promo.application.clock import Clock, utc_now
from promo.application.dto import CartItemSpec, CouponValidationDTO
from promo.domain.exceptions import EntityNotFoundError, OfferNotApplicable, ValidationError
from promo.domain.model.cart import CartSnapshot
from promo.domain.model.offer import EvaluatedOffer, Offer
from promo.domain.model.value_objects import DEFAULT_CURRENCY, Money
from promo.domain.repository.offer_repository import OfferRepository
from promo.domain.service.discount_calculator import discount_for
from promo.domain.service.offer_filter import (
    Ineligibility,
    applicable_line_items,
    check_eligibility,
)

logger = logging.getLogger(__name__)

_MESSAGES = {
    Ineligibility.INVALID_WINDOW: "This offer is not currently available",
    Ineligibility.NOT_STARTED: "This offer has not started yet",
    Ineligibility.EXPIRED: "This offer has expired",
    Ineligibility.INACTIVE: "This offer is no longer active",
    Ineligibility.USAGE_EXHAUSTED: "This offer has reached its usage limit",
}


class ValidateCouponHandler:

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
        code: str,
        item_specs: Sequence[CartItemSpec],
        cart_total: str | None = None,
    ) -> CouponValidationDTO:
        """Validate *code* against the cart and price the discount.

        Raises:
            ValidationError: no code given, or the cart itself is malformed.
            EntityNotFoundError: no active offer carries this code.
            OfferNotApplicable: the offer exists but cannot be used now.
        """
        if not code or not code.strip():
            raise ValidationError("Offer code is required")

        offer = self._offer_repo.get_by_code(code)
        if offer is None or not offer.is_active:
            raise EntityNotFoundError("Invalid offer code")

        now = self._clock()
        cart = build_cart_snapshot(item_specs, cart_total, self._currency)

        reason = check_eligibility(offer, cart, now)
        if reason is not None:
            logger.info("Coupon %s refused: %s", offer.code, reason.value)
            raise OfferNotApplicable(self._message_for(reason, offer, cart), reason)

        items = applicable_line_items(offer, cart, now)
        evaluated = EvaluatedOffer(
            offer=offer, discount=discount_for(offer, items, currency=cart.currency)
        )
        return self._to_dto(evaluated, cart)

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _message_for(reason: Ineligibility, offer: Offer, cart: CartSnapshot) -> str:
        if reason is Ineligibility.BELOW_MINIMUM:
            minimum = Money(offer.min_purchase_amount.amount, cart.currency)
            return (
                f"Minimum purchase of {minimum} required. "
                f"Add {cart.total.shortfall_to(minimum)} more to use this offer."
            )
        return _MESSAGES[reason]

    @staticmethod
    def _to_dto(evaluated: EvaluatedOffer, cart: CartSnapshot) -> CouponValidationDTO:
        offer = evaluated.offer
        # A fixed discount can exceed the cart; the customer never pays below zero.
        if cart.total >= evaluated.discount:
            final_total = cart.total - evaluated.discount
        else:
            final_total = Money.zero(cart.currency)
        return CouponValidationDTO(
            offer_id=offer.id,
            name=offer.name,
            code=offer.code or "",
            type=offer.type.value,
            discount=str(evaluated.discount),
            cart_total=str(cart.total),
            final_total=str(final_total),
            free_shipping=evaluated.grants_free_shipping,
            message=f'Offer "{offer.name}" applied successfully! You saved {evaluated.discount}',
        )
