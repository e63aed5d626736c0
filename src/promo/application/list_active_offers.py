"""Application service: List Active Offers use case (query).

Produces the storefront's active-offers feed: live offers ordered by
``priority`` (highest first), then newest first.  Auto-apply evaluates
offers in this same order, which is what makes ``priority`` the
effective tie-break between equally good offers.
"""

from __future__ import annotations

from datetime import datetime, timezone

from promo.application.clock import Clock, utc_now
from promo.application.dto import OfferDTO
from promo.domain.model.offer import Offer
from promo.domain.repository.offer_repository import OfferRepository
from promo.domain.service.offer_filter import is_live

DEFAULT_ACTIVE_LIMIT = 10

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def active_offers(
    offer_repo: OfferRepository, now: datetime, limit: int | None = None
) -> list[Offer]:
    """Live offers in feed order, optionally truncated to *limit*."""
    live = [offer for offer in offer_repo.list_all() if is_live(offer, now)]
    live.sort(key=lambda o: (o.priority, o.created_at or _EPOCH), reverse=True)
    return live[:limit] if limit is not None else live


def format_time_left(end_date: datetime | None, now: datetime) -> str:
    """Human countdown such as ``2d 5h left``; ``Expired`` once past."""
    if end_date is None:
        return "Expired"
    seconds = int((end_date - now).total_seconds())
    if seconds < 0:
        return "Expired"

    days, remainder = divmod(seconds, 86400)
    hours, remainder = divmod(remainder, 3600)
    minutes = remainder // 60

    if days > 0:
        return f"{days}d {hours}h left"
    if hours > 0:
        return f"{hours}h {minutes}m left"
    return f"{minutes}m left"


class ListActiveOffersHandler:

    def __init__(
        self,
        offer_repo: OfferRepository,
        clock: Clock = utc_now,
        limit: int = DEFAULT_ACTIVE_LIMIT,
    ) -> None:
        self._offer_repo = offer_repo
        self._clock = clock
        self._limit = limit

    def handle(self) -> list[OfferDTO]:
        now = self._clock()
        return [self._to_dto(o, now) for o in active_offers(self._offer_repo, now, self._limit)]

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
