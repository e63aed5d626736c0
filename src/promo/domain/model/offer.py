"""Offer aggregate and the discount models it can carry.

Offers are owned by the back-office; the evaluation engine only ever
reads them.  ``usedCount`` bookkeeping happens on the order-commit path,
never here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum

from promo.domain.exceptions import ValidationError
from promo.domain.model.value_objects import Money


class OfferType(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"
    BOGO = "bogo"
    BUY_X_GET_Y = "buy_x_get_y"
    FREE_SHIPPING = "free_shipping"

    @staticmethod
    def parse(raw: str) -> OfferType:
        try:
            return OfferType(raw)
        except ValueError as exc:
            raise ValidationError(f"Unknown offer type: {raw!r}") from exc


def parse_timestamp(raw: str | datetime | None) -> datetime | None:
    """Parse an ISO-8601 timestamp into an aware datetime.

    Naive values are taken to be UTC.  Anything unparseable comes back as
    ``None`` so a single corrupt date disables one offer instead of
    breaking the whole catalog.
    """
    if raw is None:
        return None
    if isinstance(raw, datetime):
        value = raw
    elif isinstance(raw, str):
        try:
            value = datetime.fromisoformat(raw.strip())
        except ValueError:
            return None
    else:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


@dataclass(frozen=True)
class Offer:
    """A promotional-discount rule with its eligibility constraints.

    Use ``Offer.create()`` for new offers; it enforces the invariants an
    admin is expected to respect.  The ``__init__`` stays permissive so
    the repository can reconstitute stored offers as they are, including
    ones with unparseable dates (``None``) that simply never match.
    """

    id: str
    name: str
    type: OfferType
    value: Decimal
    start_date: datetime | None
    end_date: datetime | None
    description: str = ""
    buy_quantity: int = 1
    get_quantity: int = 1
    apply_to_all: bool = False
    applicable_products: tuple[str, ...] = ()
    applicable_categories: tuple[str, ...] = ()
    min_purchase_amount: Money = field(default_factory=Money.zero)
    max_discount: Money | None = None
    code: str | None = None
    usage_limit: int | None = None
    used_count: int = 0
    is_active: bool = True
    priority: int = 0  # admin ordering only; selection ignores it
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        # Naive dates become UTC; a value that is not a number becomes NaN,
        # which the calculator turns into a zero discount.
        for name in ("start_date", "end_date", "created_at"):
            object.__setattr__(self, name, parse_timestamp(getattr(self, name)))
        if not isinstance(self.value, Decimal):
            try:
                value = Decimal(str(self.value))
            except InvalidOperation:
                value = Decimal("NaN")
            object.__setattr__(self, "value", value)

    # --- Factory (used for NEW offers only) -----------------------------------

    @staticmethod
    def create(
        id: str,
        name: str,
        type: OfferType,
        value: Decimal,
        start_date: datetime,
        end_date: datetime,
        *,
        description: str = "",
        buy_quantity: int = 1,
        get_quantity: int = 1,
        apply_to_all: bool = False,
        applicable_products: tuple[str, ...] = (),
        applicable_categories: tuple[str, ...] = (),
        min_purchase_amount: Money | None = None,
        max_discount: Money | None = None,
        code: str | None = None,
        usage_limit: int | None = None,
        priority: int = 0,
        created_at: datetime | None = None,
    ) -> Offer:
        """Create a new offer, enforcing all invariants."""
        if not name or not name.strip():
            raise ValidationError("Offer name is required")

        if not value.is_finite() or value < 0:
            raise ValidationError(f"Offer value must be a non-negative number, got {value}")
        if type is OfferType.PERCENTAGE and value > 100:
            raise ValidationError("Percentage offers cannot exceed 100%")

        if buy_quantity <= 0 or get_quantity <= 0:
            raise ValidationError("Buy and get quantities must be positive")

        start = parse_timestamp(start_date)
        end = parse_timestamp(end_date)
        if start is None or end is None:
            raise ValidationError("Offer start and end dates are required")
        if start >= end:
            raise ValidationError("Offer end date must be after its start date")

        if usage_limit is not None and usage_limit < 0:
            raise ValidationError("Usage limit cannot be negative")

        normalized_code = code.strip().upper() if code and code.strip() else None

        return Offer(
            id=id,
            name=name.strip(),
            type=type,
            value=value,
            start_date=start,
            end_date=end,
            description=description,
            buy_quantity=buy_quantity,
            get_quantity=get_quantity,
            apply_to_all=apply_to_all,
            applicable_products=tuple(str(p) for p in applicable_products),
            applicable_categories=tuple(applicable_categories),
            min_purchase_amount=min_purchase_amount or Money.zero(),
            max_discount=max_discount,
            code=normalized_code,
            usage_limit=usage_limit,
            priority=priority,
            created_at=created_at or datetime.now(timezone.utc),
        )


@dataclass(frozen=True)
class EvaluatedOffer:
    """An offer together with the discount it yields for one cart."""

    offer: Offer
    discount: Money

    @property
    def grants_free_shipping(self) -> bool:
        return self.offer.type is OfferType.FREE_SHIPPING
