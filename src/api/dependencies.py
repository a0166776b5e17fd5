"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
Every collaborator is passed explicitly; nothing is looked up globally.
"""

from fastapi import Request
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import (
    PostgresDiscountCodeRepository,
    PostgresPricingCategoryRepository,
    PostgresTicketPriceRepository,
    PostgresTicketTypeRepository,
    PostgresUnitOfWork,
)
from src.domain.ports import EventChannel
from src.domain.pricing import PricingResolver
from src.domain.registration import RegistrationPipeline


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_event_channel(request: Request) -> EventChannel:
    """Get the event channel drained by the publisher (created at startup)."""
    return request.app.state.event_channel


def get_pricing_resolver(request: Request) -> PricingResolver:
    """Create pricing resolver over the reference-data repositories."""
    pool = get_pool(request)
    return PricingResolver(
        ticket_types=PostgresTicketTypeRepository(pool),
        pricing_categories=PostgresPricingCategoryRepository(pool),
        ticket_prices=PostgresTicketPriceRepository(pool),
    )


def get_registration_pipeline(request: Request) -> RegistrationPipeline:
    """
    Create registration pipeline with injected dependencies.

    Wires together the pricing resolver, discount lookup, unit of work
    factory and event channel for the domain service.
    """
    pool = get_pool(request)
    return RegistrationPipeline(
        pricing_resolver=get_pricing_resolver(request),
        discount_codes=PostgresDiscountCodeRepository(pool),
        unit_of_work=lambda: PostgresUnitOfWork(pool),
        events=get_event_channel(request),
    )
