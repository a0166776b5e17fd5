"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures routes and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from psycopg_pool import ConnectionPool

from src.adapters.messaging import ConsoleMessageSink, EventPublisher, InMemoryEventChannel
from src.adapters.repository.postgres import run_migrations
from src.api.v1 import router as v1_router
from src.config.logging import configure_logging
from src.config.settings import Settings, get_settings
from src.domain.exceptions import PublicationFault
from src.domain.ports import MessageSink

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "Attendee Registration API v1 - Register attendees and issue priced tickets",
    },
]


def create_message_sink(settings: Settings) -> MessageSink:
    """Build the outbound sink selected by settings.message_sink."""
    if settings.message_sink == "rabbitmq":
        from src.adapters.messaging.rabbitmq import RabbitMQMessageSink

        return RabbitMQMessageSink(settings.amqp_url, exchange_name=settings.amqp_exchange)
    return ConsoleMessageSink()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates database connection pool and runs migrations on startup
    - Starts the event publisher worker on startup
    - Drains the publisher (which closes the sink), then closes the pool on shutdown
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    logger.info("Starting application...")
    logger.info("Connecting to database...")

    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
    )

    logger.info("Running database migrations...")
    run_migrations(pool)

    channel = InMemoryEventChannel(
        max_size=settings.event_queue_max_size,
        put_timeout=settings.enqueue_timeout_seconds,
    )
    sink = create_message_sink(settings)
    publisher = EventPublisher(
        channel,
        sink,
        max_attempts=settings.publish_max_attempts,
        retry_backoff_seconds=settings.publish_retry_backoff_seconds,
        dead_letter_max_size=settings.dead_letter_max_size,
    )
    publisher.start()

    # Store collaborators in app state for dependency injection
    app.state.pool = pool
    app.state.event_channel = channel
    app.state.publisher = publisher

    logger.info("Application startup complete")

    yield

    logger.info("Shutting down application...")
    try:
        # The worker closes the sink after draining the channel
        publisher.stop()
    finally:
        pool.close()
        logger.info("Database connection pool closed")


app = FastAPI(
    title="attendee-registration",
    description="Attendee Registration API - Prices, tickets and announces event registrations",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

app.include_router(v1_router, prefix="/v1")


@app.get("/health")
def health_check(request: Request) -> dict[str, str | int]:
    """
    Health check endpoint with database validation.

    Returns 200 OK if application and database are healthy, along with
    publisher counters. Raises exception if database connection fails.
    """
    pool = request.app.state.pool
    with pool.connection() as conn:
        conn.execute("SELECT 1")

    publisher: EventPublisher = request.app.state.publisher
    return {
        "status": "healthy",
        "published": publisher.published_count,
        "publish_failures": publisher.failed_count,
        "pending_events": request.app.state.event_channel.qsize(),
        "dead_letters": len(publisher.dead_letters),
    }


@app.post("/admin/dead-letters/replay")
def replay_dead_letters(request: Request) -> dict[str, int]:
    """Re-enqueue events whose publication failed; returns how many were replayed."""
    publisher: EventPublisher = request.app.state.publisher
    try:
        replayed = publisher.replay_dead_letters()
    except PublicationFault as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)) from None
    return {"replayed": replayed}
