"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

import logging

from promo.infrastructure.persistence.json_offer_repository import (
    JsonOfferRepository,
)
from promo.infrastructure.settings import PromoSettings

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def settings() -> PromoSettings:
    return PromoSettings()


def offer_repository(config: PromoSettings | None = None) -> JsonOfferRepository:
    config = config or settings()
    return JsonOfferRepository(config.offers_file, currency=config.CURRENCY)


def configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level, logging.WARNING), format=_LOG_FORMAT)
