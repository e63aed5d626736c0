"""Application service: Add Offer use case."""

from __future__ import annotations

import secrets
import string
from datetime import datetime
from decimal import Decimal, InvalidOperation

from promo.application.clock import Clock, utc_now
from promo.application.dto import OfferDTO
from promo.application.list_active_offers import format_time_left
from promo.domain.exceptions import ValidationError
from promo.domain.model.offer import Offer, OfferType, parse_timestamp
from promo.domain.model.value_objects import DEFAULT_CURRENCY, Money
from promo.domain.repository.offer_repository import OfferRepository

_CODE_ALPHABET = string.ascii_uppercase + string.digits
_CODE_LENGTH = 6


def generate_coupon_code(prefix: str = "OFFER") -> str:
    """``prefix`` followed by six random characters from A-Z and 0-9."""
    return prefix + "".join(secrets.choice(_CODE_ALPHABET) for _ in range(_CODE_LENGTH))


class AddOfferHandler:

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
        name: str,
        offer_type: str,
        value: str,
        start_date: str,
        end_date: str,
        *,
        description: str = "",
        buy_quantity: int = 1,
        get_quantity: int = 1,
        apply_to_all: bool = False,
        products: tuple[str, ...] = (),
        categories: tuple[str, ...] = (),
        min_purchase: str = "0",
        max_discount: str | None = None,
        code: str | None = None,
        generate_code: bool = False,
        code_prefix: str = "OFFER",
        usage_limit: int | None = None,
        priority: int = 0,
    ) -> OfferDTO:
        """Create an offer in the catalog.

        Dates are ISO-8601 strings.  A code is either given explicitly or,
        with ``generate_code``, drawn at random until it is unused.
        """
        if code and self._offer_repo.get_by_code(code) is not None:
            raise ValidationError(f"Offer code '{code.upper()}' already exists")
        if generate_code and not code:
            code = self._unused_code(code_prefix)

        start = self._parse_date(start_date, "start")
        end = self._parse_date(end_date, "end")

        offer = Offer.create(
            id=self._next_id(),
            name=name,
            type=OfferType.parse(offer_type),
            value=self._parse_decimal(value),
            start_date=start,
            end_date=end,
            description=description,
            buy_quantity=buy_quantity,
            get_quantity=get_quantity,
            apply_to_all=apply_to_all,
            applicable_products=products,
            applicable_categories=categories,
            min_purchase_amount=Money.of(min_purchase, self._currency),
            max_discount=Money.of(max_discount, self._currency) if max_discount is not None else None,
            code=code,
            usage_limit=usage_limit,
            priority=priority,
            created_at=self._clock(),
        )
        self._offer_repo.save(offer)

        return self._to_dto(offer, self._clock())

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _to_dto(offer: Offer, now: datetime) -> OfferDTO:
        return OfferDTO(
            id=offer.id,
            name=offer.name,
            code=offer.code,
            type=offer.type.value,
            description=offer.description,
            priority=offer.priority,
            ends_at=offer.end_date.strftime("%Y-%m-%d %H:%M UTC") if offer.end_date else "",
            time_left=format_time_left(offer.end_date, now),
        )

    # --- Internal helpers -----------------------------------------------------

    def _next_id(self) -> str:
        # Auto-assign ID based on existing offers
        numeric_ids = [int(o.id) for o in self._offer_repo.list_all() if o.id.isdigit()]
        return str(max(numeric_ids) + 1) if numeric_ids else "1"

    def _unused_code(self, prefix: str) -> str:
        while True:
            candidate = generate_coupon_code(prefix.upper())
            if self._offer_repo.get_by_code(candidate) is None:
                return candidate

    @staticmethod
    def _parse_date(raw: str, label: str) -> datetime:
        parsed = parse_timestamp(raw)
        if parsed is None:
            raise ValidationError(f"Invalid {label} date: {raw!r}")
        return parsed

    @staticmethod
    def _parse_decimal(raw: str) -> Decimal:
        try:
            return Decimal(str(raw))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid offer value: {raw!r}") from exc
