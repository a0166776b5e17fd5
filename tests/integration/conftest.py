"""
Shared fixtures for integration tests.

Requires PostgreSQL to be running (via docker-compose); migrations,
including seed reference data, are applied once per session.
"""

from collections.abc import Generator

import pytest
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import run_migrations
from src.config.settings import get_settings


@pytest.fixture(scope="session")
def pool() -> Generator[ConnectionPool, None, None]:
    """Create connection pool and apply migrations."""
    settings = get_settings()
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=1,
        max_size=10,
        open=True,
    )
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture(autouse=True)
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Remove tickets and attendees before each test; reference data stays."""
    with pool.connection() as conn:
        conn.execute("DELETE FROM attendee_tickets")
        conn.execute("DELETE FROM attendees")
        conn.execute("DELETE FROM pricing_categories WHERE code LIKE 'TEST%'")
        conn.commit()
    yield


@pytest.fixture
def count_rows(pool: ConnectionPool):
    """Return a helper counting rows in a table."""

    def count(table: str) -> int:
        with pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(f"SELECT COUNT(*) FROM {table}")
            return cursor.fetchone()[0]

    return count
