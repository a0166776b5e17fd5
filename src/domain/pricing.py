"""
Pricing resolution - Picks the ticket price applicable at receipt time.

Resolution order:
1. Ticket type by code (unknown code is a client error)
2. Pricing category covering the receipt day, in the receipt's own offset
3. Fallback category "L" when no date-scoped category matches
4. Ticket price for the (ticket type, pricing category) pair

Overlapping date-scoped categories are rejected rather than resolved
by lookup order.
"""

from dataclasses import dataclass
from datetime import date, datetime

from .exceptions import (
    AmbiguousPricingCategory,
    InvalidInput,
    PricingCategoryNotFound,
    TicketPriceNotFound,
    UnknownTicketType,
)
from .models import FALLBACK_PRICING_CATEGORY, PricingCategory, TicketPrice
from .ports import PricingCategoryRepository, TicketPriceRepository, TicketTypeRepository


@dataclass
class PricingResolver:
    """Resolves the base ticket price for a registration."""

    ticket_types: TicketTypeRepository
    pricing_categories: PricingCategoryRepository
    ticket_prices: TicketPriceRepository
    fallback_category: str = FALLBACK_PRICING_CATEGORY

    def resolve(self, received_at: datetime, ticket_type_code: str) -> TicketPrice:
        """
        Resolve the ticket price for a ticket type at a receipt timestamp.

        Args:
            received_at: Timezone-aware receipt timestamp
            ticket_type_code: Ticket type code from the registration

        Returns:
            The unique TicketPrice for the resolved pair

        Raises:
            UnknownTicketType: If the ticket type code does not exist
            InvalidInput: If received_at carries no UTC offset
            ReferenceDataFault: If no category or price can be determined
        """
        ticket_type = self.ticket_types.find_by_code(ticket_type_code)
        if ticket_type is None:
            raise UnknownTicketType(ticket_type_code)

        pricing_category = self._pricing_category_for(self._receipt_day(received_at))

        ticket_price = self.ticket_prices.find_by_ticket_type_and_pricing_category(
            ticket_type, pricing_category
        )
        if ticket_price is None:
            raise TicketPriceNotFound(ticket_type.code, pricing_category.code)
        return ticket_price

    def _receipt_day(self, received_at: datetime) -> date:
        """Calendar day of the timestamp in its own offset."""
        if received_at.tzinfo is None or received_at.utcoffset() is None:
            raise InvalidInput("Receipt timestamp must include a UTC offset")
        return received_at.date()

    def _pricing_category_for(self, day: date) -> PricingCategory:
        matches = [
            category
            for category in self.pricing_categories.find_by_date(day)
            if category.code != self.fallback_category
        ]
        if len(matches) > 1:
            raise AmbiguousPricingCategory(day, sorted(c.code for c in matches))
        if matches:
            return matches[0]

        fallback = self.pricing_categories.find_by_code(self.fallback_category)
        if fallback is None:
            raise PricingCategoryNotFound(day, self.fallback_category)
        return fallback
