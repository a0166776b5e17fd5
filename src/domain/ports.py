"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from collections.abc import Sequence
from datetime import date
from types import TracebackType
from typing import Protocol

from .models import AttendeeTicket, DiscountCode, PricingCategory, TicketPrice, TicketType


class TicketTypeRepository(Protocol):
    """Port interface for ticket type reference data."""

    def find_by_code(self, code: str) -> TicketType | None:
        """Return the ticket type with the given code, or None."""
        ...


class PricingCategoryRepository(Protocol):
    """Port interface for pricing category reference data."""

    def find_by_date(self, day: date) -> Sequence[PricingCategory]:
        """
        Return every date-scoped pricing category covering the given day.

        The fallback category is never included. An empty sequence means
        no date-scoped category applies; more than one means the reference
        data overlaps and the caller must treat it as ambiguous.

        Args:
            day: Calendar day of the registration receipt

        Returns:
            Matching categories, ordered by code
        """
        ...

    def find_by_code(self, code: str) -> PricingCategory | None:
        """Return the pricing category with the given code, or None."""
        ...


class TicketPriceRepository(Protocol):
    """Port interface for ticket price reference data."""

    def find_by_ticket_type_and_pricing_category(
        self, ticket_type: TicketType, pricing_category: PricingCategory
    ) -> TicketPrice | None:
        """Return the unique price for the pair, or None if undefined."""
        ...


class DiscountCodeRepository(Protocol):
    """Port interface for discount code lookup."""

    def find_by_code(self, code: str) -> DiscountCode | None:
        """Return the discount code, or None if unknown."""
        ...


class AttendeeTicketRepository(Protocol):
    """Port interface for ticket persistence."""

    def add(self, ticket: AttendeeTicket) -> AttendeeTicket:
        """
        Persist a ticket together with its attendee.

        Runs inside the enclosing unit of work; nothing is durable until
        the unit of work commits.

        Args:
            ticket: Fully priced ticket without storage identity

        Returns:
            The same ticket with storage-assigned ids

        Raises:
            PersistenceFault: If the write is rejected (e.g. duplicate ticket code)
        """
        ...


class UnitOfWork(Protocol):
    """
    Explicit transaction scope around ticket persistence.

    Usage:
        with unit_of_work() as uow:
            uow.attendee_tickets.add(ticket)
            uow.commit()

    Leaving the block without commit(), or through an exception,
    rolls back every write made through the unit of work.
    """

    attendee_tickets: AttendeeTicketRepository

    def __enter__(self) -> "UnitOfWork": ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None: ...

    def commit(self) -> None:
        """Make all writes durable."""
        ...


class EventChannel(Protocol):
    """Port interface for the ordered hand-off to the publishing stage."""

    def put(self, ticket: AttendeeTicket) -> None:
        """
        Enqueue a completed registration for publication.

        Raises:
            PublicationFault: If the event cannot be enqueued
        """
        ...


class MessageSink(Protocol):
    """Port interface for the outbound broker transport."""

    def publish(self, routing_key: str, body: bytes) -> None:
        """
        Deliver one serialized message.

        Args:
            routing_key: Fixed topic of the completed-registration event
            body: JSON document (UTF-8)
        """
        ...
