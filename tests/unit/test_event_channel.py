"""
Unit tests for InMemoryEventChannel.

Tests verify FIFO ordering, bounded capacity and close semantics.
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from src.adapters.messaging.channel import InMemoryEventChannel
from src.domain.exceptions import PublicationFault
from tests.fakes import make_ticket


class TestOrdering:
    def test_fifo_order(self) -> None:
        channel = InMemoryEventChannel()
        tickets = [make_ticket() for _ in range(5)]

        for ticket in tickets:
            channel.put(ticket)

        assert [channel.get() for _ in range(5)] == tickets

    def test_concurrent_producers_lose_nothing(self) -> None:
        channel = InMemoryEventChannel()
        tickets = [make_ticket() for _ in range(200)]

        with ThreadPoolExecutor(max_workers=8) as executor:
            list(executor.map(channel.put, tickets))

        received = [channel.get() for _ in range(200)]
        assert sorted(t.ticket_code for t in received) == sorted(t.ticket_code for t in tickets)


class TestCapacity:
    def test_full_bounded_channel_raises_publication_fault(self) -> None:
        channel = InMemoryEventChannel(max_size=1, put_timeout=0.01)
        channel.put(make_ticket())

        with pytest.raises(PublicationFault):
            channel.put(make_ticket())

    def test_unbounded_by_default(self) -> None:
        channel = InMemoryEventChannel()
        for _ in range(1000):
            channel.put(make_ticket())

        assert channel.qsize() == 1000


class TestClose:
    def test_put_after_close_raises(self) -> None:
        channel = InMemoryEventChannel()
        channel.close()

        assert channel.closed
        with pytest.raises(PublicationFault):
            channel.put(make_ticket())

    def test_queued_events_drain_before_end_marker(self) -> None:
        channel = InMemoryEventChannel()
        ticket = make_ticket()
        channel.put(ticket)
        channel.close()

        assert channel.get() == ticket
        assert channel.get() is None

    def test_close_is_idempotent(self) -> None:
        channel = InMemoryEventChannel()
        channel.close()
        channel.close()

        assert channel.qsize() == 1

    def test_close_waits_for_inflight_put(self) -> None:
        channel = InMemoryEventChannel(max_size=1, put_timeout=5.0)
        first, second = make_ticket(), make_ticket()
        channel.put(first)

        producer = threading.Thread(target=channel.put, args=(second,))
        producer.start()
        time.sleep(0.05)  # producer blocks on the full queue
        closer = threading.Thread(target=channel.close)
        closer.start()
        time.sleep(0.05)

        assert channel.get() == first
        producer.join(5.0)
        assert channel.get() == second
        closer.join(5.0)
        assert channel.get() is None

    def test_put_racing_close_is_never_silently_lost(self) -> None:
        for _ in range(50):
            channel = InMemoryEventChannel()
            accepted: list = []
            rejected: list = []
            ticket = make_ticket()

            def produce(channel=channel, ticket=ticket, accepted=accepted, rejected=rejected) -> None:
                try:
                    channel.put(ticket)
                    accepted.append(ticket)
                except PublicationFault:
                    rejected.append(ticket)

            producer = threading.Thread(target=produce)
            producer.start()
            channel.close()
            producer.join(5.0)

            drained = []
            while (item := channel.get()) is not None:
                drained.append(item)
            assert drained == accepted
            assert len(accepted) + len(rejected) == 1
