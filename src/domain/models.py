"""
Domain models - Registration input, reference data and the ticket aggregate.

All models are frozen dataclasses. Money is always decimal.Decimal,
quantized to cents; binary floating point never enters the domain.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

CENTS = Decimal("0.01")

# Pricing category used when no date-scoped category covers the receipt day
FALLBACK_PRICING_CATEGORY = "L"


def to_money(value: Decimal | int | str) -> Decimal:
    """Convert a value to a two-place Decimal amount."""
    return Decimal(value).quantize(CENTS)


class RegistrationState(str, Enum):
    """
    Lifecycle of a single registration.

    Success path:
        RECEIVED -> VALIDATED -> PRICED -> DISCOUNTED -> PERSISTED -> PUBLISHED

    Any lookup or validation step may instead move to FAILED, in which
    case nothing has been persisted.
    """

    RECEIVED = "RECEIVED"
    VALIDATED = "VALIDATED"
    PRICED = "PRICED"
    DISCOUNTED = "DISCOUNTED"
    PERSISTED = "PERSISTED"
    PUBLISHED = "PUBLISHED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class AttendeeRegistration:
    """Registration request as received from intake."""

    first_name: str
    last_name: str
    email: str
    ticket_type: str
    phone_number: str | None = None
    title: str | None = None
    company: str | None = None
    discount_code: str | None = None


@dataclass(frozen=True)
class Attendee:
    first_name: str
    last_name: str
    email: str
    phone_number: str | None = None
    title: str | None = None
    company: str | None = None
    id: int | None = None


@dataclass(frozen=True)
class TicketType:
    code: str
    name: str | None = None
    id: int | None = None


@dataclass(frozen=True)
class PricingCategory:
    """
    Date-scoped pricing tier.

    valid_from and valid_to are inclusive; a missing bound is open-ended.
    """

    code: str
    valid_from: date | None = None
    valid_to: date | None = None
    id: int | None = None

    def covers(self, day: date) -> bool:
        """Check whether this category applies on the given calendar day."""
        if self.valid_from is not None and day < self.valid_from:
            return False
        if self.valid_to is not None and day > self.valid_to:
            return False
        return True


@dataclass(frozen=True)
class TicketPrice:
    ticket_type: TicketType
    pricing_category: PricingCategory
    base_price: Decimal
    id: int | None = None


@dataclass(frozen=True)
class DiscountCode:
    code: str
    amount: Decimal
    id: int | None = None


@dataclass(frozen=True)
class AttendeeTicket:
    """
    Priced, uniquely coded ticket owned by exactly one attendee.

    The id is assigned by storage on persistence; everything else is
    fixed at creation.
    """

    ticket_code: str
    attendee: Attendee
    ticket_price: TicketPrice
    net_price: Decimal
    discount_code: DiscountCode | None = None
    id: int | None = None
