"""
Outbound message schemas - Pydantic models for the registration event.

Maps an AttendeeTicket field-for-field (including nested attendee,
price and discount) into a JSON document with camelCase keys.
Decimal amounts are emitted as strings so no precision is lost.
"""

from datetime import date
from decimal import Decimal

from pydantic import AliasGenerator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.domain.models import AttendeeTicket


class OutboundMessage(BaseModel):
    """Base model: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=AliasGenerator(serialization_alias=to_camel),
        from_attributes=True,
        frozen=True,
    )


class AttendeeMessage(OutboundMessage):
    id: int | None = None
    first_name: str
    last_name: str
    email: str
    phone_number: str | None = None
    title: str | None = None
    company: str | None = None


class TicketTypeMessage(OutboundMessage):
    id: int | None = None
    code: str
    name: str | None = None


class PricingCategoryMessage(OutboundMessage):
    id: int | None = None
    code: str
    valid_from: date | None = None
    valid_to: date | None = None


class TicketPriceMessage(OutboundMessage):
    id: int | None = None
    ticket_type: TicketTypeMessage
    pricing_category: PricingCategoryMessage
    base_price: Decimal


class DiscountCodeMessage(OutboundMessage):
    id: int | None = None
    code: str
    amount: Decimal


class AttendeeTicketMessage(OutboundMessage):
    """Completed registration event published to the broker."""

    id: int | None = None
    ticket_code: str
    attendee: AttendeeMessage
    ticket_price: TicketPriceMessage
    discount_code: DiscountCodeMessage | None = None
    net_price: Decimal


def serialize_ticket(ticket: AttendeeTicket) -> bytes:
    """Serialize a ticket to a UTF-8 JSON document."""
    message = AttendeeTicketMessage.model_validate(ticket)
    return message.model_dump_json(by_alias=True).encode()
