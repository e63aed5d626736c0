"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.

The evaluation engine itself never raises these for bad offer data; it
degrades to a zero discount instead.  They are raised when offers are
created and by the coupon-code flow, which has to tell the customer why
a code was refused.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from promo.domain.service.offer_filter import Ineligibility


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class OfferNotApplicable(DomainException):
    """An existing offer cannot be used for this cart right now."""

    def __init__(self, message: str, reason: Ineligibility) -> None:
        super().__init__(message)
        self.reason = reason
