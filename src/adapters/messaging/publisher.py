"""
Event publisher - Receive, serialize and publish stage.

A single worker thread drains the event channel in FIFO order,
serializes each completed registration and forwards it to the message
sink under the fixed routing key.

Delivery semantics (at-least-once goal):
- A failed publish is retried (tenacity) up to max_attempts with linear backoff.
- Events that still fail are logged at ERROR and kept in a bounded
  dead_letters buffer until replay_dead_letters() re-enqueues them.
  They never affect the registration, which is already committed.
- The sink is closed on the worker thread once the channel is drained.
"""

import logging
import threading
import time
from collections import deque
from collections.abc import Callable

from tenacity import Retrying, before_sleep_log, stop_after_attempt, wait_incrementing

from src.domain.exceptions import PublicationFault
from src.domain.models import AttendeeTicket, RegistrationState
from src.domain.ports import MessageSink

from .channel import InMemoryEventChannel
from .serializer import serialize_ticket

logger = logging.getLogger(__name__)

# Fixed routing key of the registration-completed topic
REGISTRATION_ROUTING_KEY = "lau-kujawa"


class EventPublisher:
    """Single-consumer publishing stage between the event channel and the broker."""

    def __init__(
        self,
        channel: InMemoryEventChannel,
        sink: MessageSink,
        routing_key: str = REGISTRATION_ROUTING_KEY,
        max_attempts: int = 3,
        retry_backoff_seconds: float = 0.5,
        dead_letter_max_size: int = 1000,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._channel = channel
        self._sink = sink
        self._routing_key = routing_key
        self._max_attempts = max(1, max_attempts)
        self._retry_backoff_seconds = retry_backoff_seconds
        self._sleep = sleep
        self._thread: threading.Thread | None = None

        self.published_count = 0
        self.failed_count = 0
        self.dead_letters: deque[AttendeeTicket] = deque(maxlen=max(1, dead_letter_max_size))

    @property
    def routing_key(self) -> str:
        return self._routing_key

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the worker thread (no-op if already running)."""
        if self.running:
            return
        self._thread = threading.Thread(target=self._run, name="event-publisher", daemon=True)
        self._thread.start()
        logger.info("Event publisher started (routing key: %s)", self._routing_key)

    def stop(self, timeout: float | None = 5.0) -> None:
        """Close the channel and wait for queued events to be published."""
        self._channel.close()
        if self._thread is None:
            # No worker to close the sink on its way out
            self._close_sink()
        else:
            self._thread.join(timeout)
            if self._thread.is_alive():
                # Keep the reference so start() cannot spawn a second consumer
                logger.warning(
                    "Event publisher did not stop within %ss, %d event(s) pending",
                    timeout,
                    self._channel.qsize(),
                )
            else:
                self._thread = None
        logger.info(
            "Event publisher stopped (published: %d, failed: %d)",
            self.published_count,
            self.failed_count,
        )

    def replay_dead_letters(self) -> int:
        """
        Re-enqueue dead-lettered events for another publication round.

        Only the events present at call time are replayed, so events that
        fail again during the replay wait for the next call.

        Returns:
            Number of events put back on the channel

        Raises:
            PublicationFault: If the channel rejects an event; it stays dead-lettered
        """
        replayed = 0
        for _ in range(len(self.dead_letters)):
            try:
                ticket = self.dead_letters.popleft()
            except IndexError:
                break
            try:
                self._channel.put(ticket)
            except PublicationFault:
                self.dead_letters.appendleft(ticket)
                raise
            replayed += 1
        logger.info("Replayed %d dead-lettered event(s)", replayed)
        return replayed

    def _run(self) -> None:
        while True:
            ticket = self._channel.get()
            try:
                if ticket is None:
                    self._close_sink()
                    return
                self.publish(ticket)
            finally:
                self._channel.task_done()

    def _close_sink(self) -> None:
        close = getattr(self._sink, "close", None)
        if close is None:
            return
        try:
            close()
        except Exception:
            logger.exception("Failed to close message sink")

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_incrementing(
                start=self._retry_backoff_seconds,
                increment=self._retry_backoff_seconds,
            ),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            sleep=self._sleep,
            reraise=True,
        )

    def publish(self, ticket: AttendeeTicket) -> bool:
        """
        Serialize and publish one ticket, retrying on sink failures.

        Args:
            ticket: Committed ticket to announce

        Returns:
            True if the sink accepted the message, False if it was dead-lettered
        """
        try:
            body = serialize_ticket(ticket)
        except Exception:
            logger.exception("Cannot serialize registration event, ticket code: %s", ticket.ticket_code)
            self._dead_letter(ticket)
            return False

        try:
            self._retrying()(self._sink.publish, self._routing_key, body)
        except Exception as e:
            logger.error(
                "Publication failed after %d attempt(s), ticket code: %s - %s",
                self._max_attempts,
                ticket.ticket_code,
                e,
            )
            self._dead_letter(ticket)
            return False

        self.published_count += 1
        logger.info("Registration published, ticket code: %s", ticket.ticket_code)
        logger.debug("Registration for %s -> %s", ticket.attendee.email, RegistrationState.PUBLISHED.value)
        return True

    def _dead_letter(self, ticket: AttendeeTicket) -> None:
        self.failed_count += 1
        if len(self.dead_letters) == self.dead_letters.maxlen:
            logger.error(
                "Dead letter buffer full, dropping event, ticket code: %s",
                self.dead_letters[0].ticket_code,
            )
        self.dead_letters.append(ticket)
