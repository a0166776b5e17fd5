"""
PostgreSQL repository adapters - Implement the domain repository protocols.

This module provides the PostgreSQL implementation of the domain's
repository ports using psycopg3 with raw SQL.

Transaction Design:
-------------------
Reference data (ticket types, pricing categories, prices, discount codes)
is read-only from the registration pipeline's point of view. Those
repositories borrow a pooled connection per lookup.

Ticket persistence runs through PostgresUnitOfWork, which pins one
pooled connection for its whole scope. The attendee row and the ticket
row are inserted on that connection and only become visible when
commit() is called; leaving the scope without commit rolls both back.

The UNIQUE constraint on attendee_tickets.ticket_code is the final
guard against ticket code collisions.
"""

import logging
from contextlib import ExitStack
from dataclasses import replace
from datetime import date
from pathlib import Path
from types import TracebackType

import psycopg
from psycopg_pool import ConnectionPool

from src.domain.exceptions import PersistenceFault
from src.domain.models import (
    FALLBACK_PRICING_CATEGORY,
    AttendeeTicket,
    DiscountCode,
    PricingCategory,
    TicketPrice,
    TicketType,
    to_money,
)

logger = logging.getLogger(__name__)

_PRICING_CATEGORY_COLUMNS = "id, code, valid_from, valid_to"


def _pricing_category_from_row(row: tuple) -> PricingCategory:
    return PricingCategory(id=row[0], code=row[1], valid_from=row[2], valid_to=row[3])


class PostgresTicketTypeRepository:
    """
    Implements TicketTypeRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def find_by_code(self, code: str) -> TicketType | None:
        sql = "SELECT id, code, name FROM ticket_types WHERE code = %s"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (code,))
            row = cursor.fetchone()

        if row is None:
            return None
        return TicketType(id=row[0], code=row[1], name=row[2])


class PostgresPricingCategoryRepository:
    """
    Implements PricingCategoryRepository protocol via psycopg3.

    Validity bounds are inclusive DATE columns; NULL means open-ended.
    The fallback category is excluded from date lookups.
    """

    def __init__(self, pool: ConnectionPool, fallback_code: str = FALLBACK_PRICING_CATEGORY) -> None:
        self._pool = pool
        self._fallback_code = fallback_code

    def find_by_date(self, day: date) -> list[PricingCategory]:
        """
        Return every date-scoped category covering the day, ordered by code.

        All matches are returned (not LIMIT 1) so overlapping ranges are
        detected by the caller instead of being resolved by row order.
        """
        sql = f"""
            SELECT {_PRICING_CATEGORY_COLUMNS}
            FROM pricing_categories
            WHERE code <> %s
              AND (valid_from IS NULL OR valid_from <= %s)
              AND (valid_to IS NULL OR valid_to >= %s)
            ORDER BY code
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (self._fallback_code, day, day))
            rows = cursor.fetchall()

        return [_pricing_category_from_row(row) for row in rows]

    def find_by_code(self, code: str) -> PricingCategory | None:
        sql = f"SELECT {_PRICING_CATEGORY_COLUMNS} FROM pricing_categories WHERE code = %s"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (code,))
            row = cursor.fetchone()

        return _pricing_category_from_row(row) if row is not None else None


class PostgresTicketPriceRepository:
    """Implements TicketPriceRepository protocol via psycopg3."""

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def find_by_ticket_type_and_pricing_category(
        self, ticket_type: TicketType, pricing_category: PricingCategory
    ) -> TicketPrice | None:
        """
        Look up the base price for a (ticket type, pricing category) pair.

        Joins on codes so callers may pass reference data built outside
        this database (ids are refreshed from the joined rows).
        """
        sql = """
            SELECT tp.id, tp.base_price,
                   tt.id, tt.code, tt.name,
                   pc.id, pc.code, pc.valid_from, pc.valid_to
            FROM ticket_prices tp
            JOIN ticket_types tt ON tt.id = tp.ticket_type_id
            JOIN pricing_categories pc ON pc.id = tp.pricing_category_id
            WHERE tt.code = %s AND pc.code = %s
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (ticket_type.code, pricing_category.code))
            row = cursor.fetchone()

        if row is None:
            return None
        return TicketPrice(
            id=row[0],
            base_price=to_money(row[1]),
            ticket_type=TicketType(id=row[2], code=row[3], name=row[4]),
            pricing_category=_pricing_category_from_row(row[5:9]),
        )


class PostgresDiscountCodeRepository:
    """Implements DiscountCodeRepository protocol via psycopg3."""

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def find_by_code(self, code: str) -> DiscountCode | None:
        sql = "SELECT id, code, amount FROM discount_codes WHERE code = %s"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (code,))
            row = cursor.fetchone()

        if row is None:
            return None
        return DiscountCode(id=row[0], code=row[1], amount=to_money(row[2]))


class PostgresAttendeeTicketRepository:
    """
    Implements AttendeeTicketRepository protocol on a pinned connection.

    Does not commit; the owning PostgresUnitOfWork decides.
    """

    def __init__(self, conn: psycopg.Connection) -> None:
        self._conn = conn

    def add(self, ticket: AttendeeTicket) -> AttendeeTicket:
        """
        Insert the attendee and its ticket.

        Args:
            ticket: Ticket whose price (and discount, if any) carry storage ids

        Returns:
            The ticket with attendee and ticket ids assigned

        Raises:
            PersistenceFault: On any database error (e.g. duplicate ticket code)
        """
        attendee_sql = """
            INSERT INTO attendees (first_name, last_name, email, phone_number, title, company)
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING id
        """

        ticket_sql = """
            INSERT INTO attendee_tickets
                (ticket_code, attendee_id, ticket_price_id, discount_code_id, net_price)
            VALUES (%s, %s, %s, %s, %s)
            RETURNING id
        """

        attendee = ticket.attendee
        discount_code_id = ticket.discount_code.id if ticket.discount_code else None

        try:
            with self._conn.cursor() as cursor:
                cursor.execute(
                    attendee_sql,
                    (
                        attendee.first_name,
                        attendee.last_name,
                        attendee.email,
                        attendee.phone_number,
                        attendee.title,
                        attendee.company,
                    ),
                )
                attendee_id = cursor.fetchone()[0]

                cursor.execute(
                    ticket_sql,
                    (
                        ticket.ticket_code,
                        attendee_id,
                        ticket.ticket_price.id,
                        discount_code_id,
                        ticket.net_price,
                    ),
                )
                ticket_id = cursor.fetchone()[0]
        except psycopg.Error as e:
            raise PersistenceFault(f"Failed to persist ticket {ticket.ticket_code}") from e

        return replace(ticket, id=ticket_id, attendee=replace(attendee, id=attendee_id))


class PostgresUnitOfWork:
    """
    Implements UnitOfWork protocol on one pooled connection.

    The connection is taken from the pool on enter and returned on exit.
    Anything not committed by then is rolled back.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool
        self._stack: ExitStack | None = None
        self._conn: psycopg.Connection | None = None
        self._committed = False

    def __enter__(self) -> "PostgresUnitOfWork":
        self._stack = ExitStack()
        try:
            self._conn = self._stack.enter_context(self._pool.connection())
        except psycopg.Error as e:
            self._stack.close()
            raise PersistenceFault("Database unavailable") from e

        self._committed = False
        self.attendee_tickets = PostgresAttendeeTicketRepository(self._conn)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        try:
            if not self._committed:
                self._conn.rollback()
                logger.debug("Unit of work rolled back")
        finally:
            self._stack.close()
            self._stack = None
            self._conn = None

    def commit(self) -> None:
        try:
            self._conn.commit()
        except psycopg.Error as e:
            raise PersistenceFault("Failed to commit registration") from e
        self._committed = True


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration must be idempotent (IF NOT EXISTS, ON CONFLICT DO NOTHING).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))
    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        try:
            with pool.connection() as conn:
                conn.execute(sql_file.read_text())
        except psycopg.Error as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
        logger.info(f"Migration complete: {sql_file.name}")
