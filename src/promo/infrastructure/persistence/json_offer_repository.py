"""JSON-file-backed implementation of OfferRepository.

Records use the storefront's camelCase offer document keys so an export
of the offers collection can be dropped in as-is.
"""

from __future__ import annotations

import json
from datetime import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

from promo.domain.exceptions import ValidationError
from promo.domain.model.offer import Offer, OfferType, parse_timestamp
from promo.domain.model.value_objects import DEFAULT_CURRENCY, Money
from promo.domain.repository.offer_repository import OfferRepository


class JsonOfferRepository(OfferRepository):

    def __init__(self, file_path: Path, currency: str = DEFAULT_CURRENCY) -> None:
        self._file_path = file_path
        self._currency = currency
        self._ensure_file()

    # --- OfferRepository interface --------------------------------------------

    def get_by_id(self, offer_id: str) -> Offer | None:
        return self._load().get(offer_id)

    def get_by_code(self, code: str) -> Offer | None:
        wanted = code.strip().upper()
        for offer in self._load().values():
            if offer.code is not None and offer.code.upper() == wanted:
                return offer
        return None

    def list_all(self) -> list[Offer]:
        return list(self._load().values())

    def save(self, offer: Offer) -> None:
        offers = self._load()
        offers[offer.id] = offer
        self._persist(offers)

    # --- Serialization helpers ------------------------------------------------

    def _load(self) -> dict[str, Offer]:
        raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        offers: dict[str, Offer] = {}
        for item in raw:
            offer = self._to_offer(item)
            offers[offer.id] = offer
        return offers

    def _to_offer(self, item: dict[str, Any]) -> Offer:
        max_discount = item.get("maxDiscount")
        usage_limit = item.get("usageLimit")
        return Offer(
            id=str(item.get("id") or item.get("_id")),
            name=item.get("name", ""),
            description=item.get("description", ""),
            type=OfferType.parse(item["type"]),
            value=_decimal(item.get("value")),
            buy_quantity=int(item.get("buyQuantity") or 1),
            get_quantity=int(item.get("getQuantity") or 1),
            apply_to_all=bool(item.get("applyToAll", False)),
            applicable_products=tuple(
                _reference_id(p) for p in item.get("applicableProducts") or []
            ),
            applicable_categories=tuple(item.get("applicableCategories") or []),
            min_purchase_amount=self._money(item.get("minPurchaseAmount") or 0),
            max_discount=None if max_discount is None else self._money(max_discount),
            code=item.get("code") or None,
            usage_limit=None if usage_limit is None else int(usage_limit),
            used_count=int(item.get("usedCount") or 0),
            start_date=parse_timestamp(item.get("startDate")),
            end_date=parse_timestamp(item.get("endDate")),
            is_active=bool(item.get("isActive", True)),
            priority=int(item.get("priority") or 0),
            created_at=parse_timestamp(item.get("createdAt")),
        )

    def _persist(self, offers: dict[str, Offer]) -> None:
        raw = [
            {
                "id": o.id,
                "name": o.name,
                "description": o.description,
                "type": o.type.value,
                "value": str(o.value),
                "buyQuantity": o.buy_quantity,
                "getQuantity": o.get_quantity,
                "applyToAll": o.apply_to_all,
                "applicableProducts": list(o.applicable_products),
                "applicableCategories": list(o.applicable_categories),
                "minPurchaseAmount": str(o.min_purchase_amount.amount),
                "maxDiscount": None if o.max_discount is None else str(o.max_discount.amount),
                "code": o.code,
                "usageLimit": o.usage_limit,
                "usedCount": o.used_count,
                "startDate": _isoformat(o.start_date),
                "endDate": _isoformat(o.end_date),
                "isActive": o.is_active,
                "priority": o.priority,
                "createdAt": _isoformat(o.created_at),
            }
            for o in offers.values()
        ]
        self._file_path.write_text(
            json.dumps(raw, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
        )

    def _money(self, value: Any) -> Money:
        return Money.of(value, self._currency)

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")


def _reference_id(value: Any) -> str:
    """Product references are stored either as bare ids or as ``{"_id": ...}``."""
    if isinstance(value, dict):
        return str(value.get("_id") or value.get("id"))
    return str(value)


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _decimal(value: Any) -> Decimal:
    """Offer value as stored; a missing or null value means 0."""
    if value is None:
        return Decimal("0")
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ValidationError(f"Invalid offer value: {value!r}") from exc
