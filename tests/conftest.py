"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- In-memory reference data repositories
- An in-memory ticket store with unit-of-work semantics
- A recording event channel
- A fully wired RegistrationPipeline
"""

import pytest

from src.domain.pricing import PricingResolver
from src.domain.registration import RegistrationPipeline
from tests.fakes import (
    EARLY,
    FALLBACK,
    FREEBIE,
    SAVE10,
    STANDARD,
    STANDARD_EARLY,
    STANDARD_FALLBACK,
    VIP,
    VIP_EARLY,
    InMemoryDiscountCodeRepository,
    InMemoryPricingCategoryRepository,
    InMemoryTicketPriceRepository,
    InMemoryTicketTypeRepository,
    RecordingEventChannel,
    TicketStore,
)


@pytest.fixture
def ticket_types() -> InMemoryTicketTypeRepository:
    return InMemoryTicketTypeRepository(STANDARD, VIP)


@pytest.fixture
def pricing_categories() -> InMemoryPricingCategoryRepository:
    return InMemoryPricingCategoryRepository(EARLY, FALLBACK)


@pytest.fixture
def ticket_prices() -> InMemoryTicketPriceRepository:
    return InMemoryTicketPriceRepository(STANDARD_EARLY, STANDARD_FALLBACK, VIP_EARLY)


@pytest.fixture
def discount_codes() -> InMemoryDiscountCodeRepository:
    return InMemoryDiscountCodeRepository(SAVE10, FREEBIE)


@pytest.fixture
def ticket_store() -> TicketStore:
    return TicketStore()


@pytest.fixture
def event_channel() -> RecordingEventChannel:
    return RecordingEventChannel()


@pytest.fixture
def pricing_resolver(
    ticket_types: InMemoryTicketTypeRepository,
    pricing_categories: InMemoryPricingCategoryRepository,
    ticket_prices: InMemoryTicketPriceRepository,
) -> PricingResolver:
    return PricingResolver(
        ticket_types=ticket_types,
        pricing_categories=pricing_categories,
        ticket_prices=ticket_prices,
    )


@pytest.fixture
def pipeline(
    pricing_resolver: PricingResolver,
    discount_codes: InMemoryDiscountCodeRepository,
    ticket_store: TicketStore,
    event_channel: RecordingEventChannel,
) -> RegistrationPipeline:
    return RegistrationPipeline(
        pricing_resolver=pricing_resolver,
        discount_codes=discount_codes,
        unit_of_work=ticket_store.unit_of_work,
        events=event_channel,
    )
