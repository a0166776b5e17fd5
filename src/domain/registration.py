"""
Registration domain service - Attendee registration pipeline.

This module turns an incoming registration into a priced, discounted,
uniquely coded and persisted AttendeeTicket, then hands the ticket over
for publication.

Registration Lifecycle
======================

    RECEIVED -> VALIDATED -> PRICED -> DISCOUNTED -> PERSISTED -> PUBLISHED

Any step before PERSISTED may instead move to FAILED, with nothing persisted.
PUBLISHED is reached asynchronously, in the publishing stage.

Atomicity:
- Attendee and ticket are written inside one explicit unit of work.
- The unit of work rolls back on any error before commit.
- The ticket is enqueued for publication only after commit; a failed
  enqueue is logged and never turns a committed registration into a failure.
"""

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from .exceptions import InvalidInput, PersistenceFault, ReferenceDataFault, RegistrationError
from .models import (
    Attendee,
    AttendeeRegistration,
    AttendeeTicket,
    DiscountCode,
    RegistrationState,
    TicketPrice,
    to_money,
)
from .ports import DiscountCodeRepository, EventChannel, UnitOfWork
from .pricing import PricingResolver

logger = logging.getLogger(__name__)

ZERO = to_money(0)


def trim_to_none(value: str | None) -> str | None:
    """Strip whitespace; blank or missing input becomes None."""
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


@dataclass
class RegistrationPipeline:
    """
    Domain service for attendee registration.

    Orchestrates attendee creation, price resolution, discount lookup,
    ticket code generation, persistence and the post-commit hand-off.
    """

    pricing_resolver: PricingResolver
    discount_codes: DiscountCodeRepository
    unit_of_work: Callable[[], UnitOfWork]
    events: EventChannel

    def register(
        self, received_at: datetime, registration: AttendeeRegistration
    ) -> AttendeeTicket:
        """
        Register an attendee and issue a ticket.

        Args:
            received_at: Timezone-aware receipt timestamp
            registration: Registration payload

        Returns:
            The persisted AttendeeTicket

        Raises:
            InvalidInput: If the payload is unusable (e.g. unknown ticket type)
            ReferenceDataFault: If pricing reference data is misconfigured
            PersistenceFault: If the write failed and was rolled back
        """
        logger.info("Registration received at: %s for: %s", received_at, registration.email)
        self._transition(registration, RegistrationState.RECEIVED)

        try:
            ticket = self._process(received_at, registration)
        except ReferenceDataFault as e:
            logger.error("Reference data fault for %s: %s", registration.email, e)
            self._transition(registration, RegistrationState.FAILED)
            raise
        except PersistenceFault as e:
            logger.error("Registration not stored for %s: %s", registration.email, e)
            self._transition(registration, RegistrationState.FAILED)
            raise
        except RegistrationError as e:
            logger.info("Registration rejected for %s: %s", registration.email, e)
            self._transition(registration, RegistrationState.FAILED)
            raise

        logger.info("Registration saved, ticket code: %s", ticket.ticket_code)
        self._transition(registration, RegistrationState.PERSISTED)

        self._emit(ticket)
        return ticket

    def _process(
        self, received_at: datetime, registration: AttendeeRegistration
    ) -> AttendeeTicket:
        attendee = self._create_attendee(registration)
        self._transition(registration, RegistrationState.VALIDATED)

        ticket_price = self.pricing_resolver.resolve(received_at, registration.ticket_type)
        self._transition(registration, RegistrationState.PRICED)

        discount_code = self._find_discount_code(registration.discount_code)
        net_price = self._net_price(ticket_price, discount_code)
        self._transition(registration, RegistrationState.DISCOUNTED)

        ticket = AttendeeTicket(
            ticket_code=self._generate_ticket_code(),
            attendee=attendee,
            ticket_price=ticket_price,
            discount_code=discount_code,
            net_price=net_price,
        )

        with self.unit_of_work() as uow:
            saved = uow.attendee_tickets.add(ticket)
            uow.commit()
        return saved

    def _emit(self, ticket: AttendeeTicket) -> None:
        """Hand the committed ticket to the publishing stage."""
        try:
            self.events.put(ticket)
        except Exception:
            # Ticket is already durable; report separately, never to the caller
            logger.exception(
                "Failed to enqueue registration event, ticket code: %s", ticket.ticket_code
            )

    def _create_attendee(self, registration: AttendeeRegistration) -> Attendee:
        """
        Build the attendee, normalizing text fields.

        Required fields are trimmed and must not be blank; optional
        fields become None when blank.
        """
        first_name = trim_to_none(registration.first_name)
        last_name = trim_to_none(registration.last_name)
        email = trim_to_none(registration.email)
        if first_name is None or last_name is None or email is None:
            raise InvalidInput("First name, last name and email are required")

        return Attendee(
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone_number=trim_to_none(registration.phone_number),
            title=trim_to_none(registration.title),
            company=trim_to_none(registration.company),
        )

    def _find_discount_code(self, code: str | None) -> DiscountCode | None:
        """Unknown or blank codes mean no discount."""
        code = trim_to_none(code)
        if code is None:
            return None
        return self.discount_codes.find_by_code(code)

    def _net_price(self, ticket_price: TicketPrice, discount_code: DiscountCode | None) -> Decimal:
        """
        Compute base price minus discount, clamped at zero.

        A discount larger than the base price yields a free ticket
        and a warning instead of a negative price.
        """
        discount = discount_code.amount if discount_code is not None else ZERO
        net_price = to_money(ticket_price.base_price - discount)
        if net_price < ZERO:
            logger.warning(
                "Discount %s (%s) exceeds base price %s, net price clamped to %s",
                discount_code.code if discount_code else None,
                discount,
                ticket_price.base_price,
                ZERO,
            )
            return ZERO
        return net_price

    def _generate_ticket_code(self) -> str:
        """
        Generate a random ticket code (UUID4).

        122 random bits make collisions negligible; the storage unique
        constraint rejects the rest.
        """
        return str(uuid.uuid4())

    def _transition(self, registration: AttendeeRegistration, state: RegistrationState) -> None:
        logger.debug("Registration for %s -> %s", registration.email, state.value)
