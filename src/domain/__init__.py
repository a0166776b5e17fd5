"""
Domain layer - Pure business logic with zero framework imports.

This package contains the registration and pricing pipeline for event
attendees. It defines its own port interfaces for infrastructure
abstraction, ensuring true hexagonal architecture decoupling.
"""

from .exceptions import (
    AmbiguousPricingCategory,
    InvalidInput,
    PersistenceFault,
    PricingCategoryNotFound,
    PublicationFault,
    ReferenceDataFault,
    RegistrationError,
    TicketPriceNotFound,
    UnknownTicketType,
)
from .models import (
    FALLBACK_PRICING_CATEGORY,
    Attendee,
    AttendeeRegistration,
    AttendeeTicket,
    DiscountCode,
    PricingCategory,
    RegistrationState,
    TicketPrice,
    TicketType,
)
from .ports import (
    AttendeeTicketRepository,
    DiscountCodeRepository,
    EventChannel,
    MessageSink,
    PricingCategoryRepository,
    TicketPriceRepository,
    TicketTypeRepository,
    UnitOfWork,
)
from .pricing import PricingResolver
from .registration import RegistrationPipeline

__all__ = [
    "FALLBACK_PRICING_CATEGORY",
    "AmbiguousPricingCategory",
    "Attendee",
    "AttendeeRegistration",
    "AttendeeTicket",
    "AttendeeTicketRepository",
    "DiscountCode",
    "DiscountCodeRepository",
    "EventChannel",
    "InvalidInput",
    "MessageSink",
    "PersistenceFault",
    "PricingCategory",
    "PricingCategoryNotFound",
    "PricingCategoryRepository",
    "PricingResolver",
    "PublicationFault",
    "ReferenceDataFault",
    "RegistrationError",
    "RegistrationPipeline",
    "RegistrationState",
    "TicketPrice",
    "TicketPriceNotFound",
    "TicketPriceRepository",
    "TicketType",
    "TicketTypeRepository",
    "UnitOfWork",
    "UnknownTicketType",
]
