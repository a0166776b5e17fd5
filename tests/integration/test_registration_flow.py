"""
Integration tests for the registration flow.

Tests the full registration flow through the API with a real database
and the console message sink. Requires PostgreSQL to be running.
"""

import json
import logging

import pytest
from fastapi.testclient import TestClient
from psycopg_pool import ConnectionPool

from src.adapters.messaging import EventPublisher, InMemoryEventChannel
from src.api.main import app

pytestmark = pytest.mark.integration


class CollectingSink:
    def __init__(self) -> None:
        self.messages: list[tuple[str, bytes]] = []

    def publish(self, routing_key: str, body: bytes) -> None:
        self.messages.append((routing_key, body))


@pytest.fixture
def sink() -> CollectingSink:
    return CollectingSink()


@pytest.fixture
def client(pool: ConnectionPool, sink: CollectingSink):
    """Create test client with the real pool and a collecting publisher."""
    channel = InMemoryEventChannel()
    publisher = EventPublisher(channel, sink)
    publisher.start()
    app.state.pool = pool
    app.state.event_channel = channel
    app.state.publisher = publisher
    yield TestClient(app)
    publisher.stop()


def payload(**overrides) -> dict:
    data = {
        "firstName": "Jan",
        "lastName": "Kowalski",
        "email": "jan@example.com",
        "ticketType": "STANDARD",
        "receivedAt": "2026-02-15T10:00:00+01:00",
    }
    data.update(overrides)
    return data


class TestRegistrationFlow:
    def test_full_registration_flow(
        self, client: TestClient, sink: CollectingSink, count_rows, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO):
            response = client.post("/v1/registrations", json=payload(discountCode="SAVE10"))
            app.state.event_channel.join()

        assert response.status_code == 201
        body = response.json()
        assert body["pricingCategory"] == "EARLY"
        assert body["netPrice"] == "90.00"
        assert count_rows("attendee_tickets") == 1

        routing_key, message = sink.messages[0]
        assert routing_key == "lau-kujawa"
        document = json.loads(message)
        assert document["ticketCode"] == body["ticketCode"]
        assert document["discountCode"]["code"] == "SAVE10"
        assert "Registration saved, ticket code" in caplog.text

    def test_fallback_category(self, client: TestClient) -> None:
        response = client.post(
            "/v1/registrations", json=payload(receivedAt="2030-01-01T12:00:00+00:00")
        )

        assert response.status_code == 201
        assert response.json()["pricingCategory"] == "L"
        assert response.json()["netPrice"] == "150.00"

    def test_unknown_ticket_type_nothing_stored_or_published(
        self, client: TestClient, sink: CollectingSink, count_rows
    ) -> None:
        response = client.post("/v1/registrations", json=payload(ticketType="BOGUS"))
        app.state.event_channel.join()

        assert response.status_code == 400
        assert count_rows("attendee_tickets") == 0
        assert count_rows("attendees") == 0
        assert sink.messages == []

    def test_optional_fields_stored_as_null(self, client: TestClient, pool: ConnectionPool) -> None:
        response = client.post(
            "/v1/registrations", json=payload(phoneNumber="  ", title="", company=" ACME ")
        )

        with pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(
                """
                SELECT a.phone_number, a.title, a.company
                FROM attendees a JOIN attendee_tickets t ON t.attendee_id = a.id
                WHERE t.ticket_code = %s
                """,
                (response.json()["ticketCode"],),
            )
            assert cursor.fetchone() == (None, None, "ACME")
