"""Abstract repository for the Offer aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, SQL, in-memory)
live in the infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from promo.domain.model.offer import Offer


class OfferRepository(ABC):

    @abstractmethod
    def get_by_id(self, offer_id: str) -> Offer | None:
        """Return an offer by its ID, or None if not found."""

    @abstractmethod
    def get_by_code(self, code: str) -> Offer | None:
        """Return the offer with this coupon code (case-insensitive), or None."""

    @abstractmethod
    def list_all(self) -> list[Offer]:
        """Return every offer in the catalog, in storage order."""

    @abstractmethod
    def save(self, offer: Offer) -> None:
        """Persist a new or updated offer."""
