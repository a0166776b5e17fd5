"""
Domain exceptions - Semantic error types for registration.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.

Taxonomy:
- InvalidInput: the client sent data we cannot honour (HTTP 400)
- ReferenceDataFault: reference data is misconfigured (HTTP 500)
- PersistenceFault: the durable write failed and was rolled back (HTTP 503)
- PublicationFault: the post-commit hand-off to the broker failed
"""

from datetime import date


class RegistrationError(Exception):
    """Base class for registration domain errors."""

    pass


class InvalidInput(RegistrationError):
    """Registration payload cannot be processed (client data fault)."""

    pass


class UnknownTicketType(InvalidInput):
    """Ticket type code does not exist in reference data."""

    def __init__(self, code: str) -> None:
        super().__init__(f"Invalid ticket type: {code}")
        self.code = code


class ReferenceDataFault(RegistrationError):
    """Reference data is incomplete or inconsistent (system fault)."""

    pass


class PricingCategoryNotFound(ReferenceDataFault):
    """Neither a date-specific nor the fallback pricing category exists."""

    def __init__(self, day: date, fallback_code: str) -> None:
        super().__init__(
            f"Cannot determine pricing category for {day.isoformat()} "
            f"(fallback '{fallback_code}' is missing)"
        )
        self.day = day
        self.fallback_code = fallback_code


class AmbiguousPricingCategory(ReferenceDataFault):
    """More than one pricing category covers the same day."""

    def __init__(self, day: date, codes: list[str]) -> None:
        super().__init__(
            f"Ambiguous pricing category for {day.isoformat()}: {', '.join(codes)}"
        )
        self.day = day
        self.codes = codes


class TicketPriceNotFound(ReferenceDataFault):
    """No price is defined for a (ticket type, pricing category) pair."""

    def __init__(self, ticket_type_code: str, pricing_category_code: str) -> None:
        super().__init__(
            f"Cannot determine ticket price for ticket type '{ticket_type_code}' "
            f"and pricing category '{pricing_category_code}'"
        )
        self.ticket_type_code = ticket_type_code
        self.pricing_category_code = pricing_category_code


class PersistenceFault(RegistrationError):
    """Durable write failed; the unit of work was rolled back."""

    pass


class PublicationFault(RegistrationError):
    """Completed registration could not be handed to the broker."""

    pass
