"""Repository adapters - Database implementations."""

from .postgres import (
    PostgresAttendeeTicketRepository,
    PostgresDiscountCodeRepository,
    PostgresPricingCategoryRepository,
    PostgresTicketPriceRepository,
    PostgresTicketTypeRepository,
    PostgresUnitOfWork,
    run_migrations,
)

__all__ = [
    "PostgresAttendeeTicketRepository",
    "PostgresDiscountCodeRepository",
    "PostgresPricingCategoryRepository",
    "PostgresTicketPriceRepository",
    "PostgresTicketTypeRepository",
    "PostgresUnitOfWork",
    "run_migrations",
]
