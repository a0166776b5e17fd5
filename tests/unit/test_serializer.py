"""
Unit tests for the outbound registration event document.

Tests verify the field-for-field mapping of AttendeeTicket into JSON.
"""

import json
from decimal import Decimal

from src.adapters.messaging.serializer import AttendeeTicketMessage, serialize_ticket
from tests.fakes import SAVE10, make_ticket


class TestSerializeTicket:
    def test_returns_utf8_json_bytes(self) -> None:
        body = serialize_ticket(make_ticket())

        assert isinstance(body, bytes)
        assert isinstance(json.loads(body.decode("utf-8")), dict)

    def test_top_level_fields_camel_case(self) -> None:
        ticket = make_ticket()

        document = json.loads(serialize_ticket(ticket))

        assert set(document) == {
            "id",
            "ticketCode",
            "attendee",
            "ticketPrice",
            "discountCode",
            "netPrice",
        }
        assert document["ticketCode"] == ticket.ticket_code

    def test_attendee_mapping(self) -> None:
        ticket = make_ticket(company="ACME")

        attendee = json.loads(serialize_ticket(ticket))["attendee"]

        assert attendee == {
            "id": 1,
            "firstName": "Jan",
            "lastName": "Kowalski",
            "email": "jan@example.com",
            "phoneNumber": None,
            "title": None,
            "company": "ACME",
        }

    def test_price_mapping_nested(self) -> None:
        price = json.loads(serialize_ticket(make_ticket()))["ticketPrice"]

        assert price["basePrice"] == "100.00"
        assert price["ticketType"]["code"] == "STANDARD"
        assert price["pricingCategory"]["code"] == "EARLY"
        assert price["pricingCategory"]["validFrom"] == "2026-01-01"
        assert price["pricingCategory"]["validTo"] == "2026-03-31"

    def test_amounts_encoded_as_exact_strings(self) -> None:
        document = json.loads(serialize_ticket(make_ticket(discount_code=SAVE10)))

        assert document["netPrice"] == "90.00"
        assert document["discountCode"] == {"id": 1, "code": "SAVE10", "amount": "10.00"}

    def test_absent_discount_is_null(self) -> None:
        document = json.loads(serialize_ticket(make_ticket()))

        assert document["discountCode"] is None


class TestAttendeeTicketMessage:
    def test_validates_from_domain_object(self) -> None:
        ticket = make_ticket(discount_code=SAVE10)

        message = AttendeeTicketMessage.model_validate(ticket)

        assert message.ticket_code == ticket.ticket_code
        assert message.net_price == Decimal("90.00")
        assert message.discount_code.code == "SAVE10"
        assert message.attendee.email == "jan@example.com"
