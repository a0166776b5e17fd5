"""
In-process event channel - Implements EventChannel protocol.

Ordered (FIFO) hand-off between the registration pipeline and the
single publishing worker. Producers call put(); exactly one consumer
calls get() until it receives None after close().
"""

import logging
import queue
import threading

from src.domain.exceptions import PublicationFault
from src.domain.models import AttendeeTicket

logger = logging.getLogger(__name__)

# Marks the end of the stream for the consumer
_CLOSED = object()


class InMemoryEventChannel:
    """
    Implements EventChannel protocol with a thread-safe queue.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, max_size: int = 0, put_timeout: float = 1.0) -> None:
        """
        Initialize the channel.

        Args:
            max_size: Queue capacity, 0 for unbounded
            put_timeout: Seconds put() waits on a full queue before failing
        """
        self._queue: queue.Queue = queue.Queue(maxsize=max_size)
        self._put_timeout = put_timeout
        self._closed = False
        # Orders put() against close() so no event lands behind the end marker
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._closed

    def put(self, ticket: AttendeeTicket) -> None:
        """
        Enqueue a ticket for publication.

        Raises:
            PublicationFault: If the channel is closed or stays full
        """
        with self._lock:
            if self._closed:
                raise PublicationFault(f"Event channel is closed, ticket code: {ticket.ticket_code}")
            try:
                self._queue.put(ticket, timeout=self._put_timeout)
            except queue.Full:
                raise PublicationFault(
                    f"Event channel full, ticket code: {ticket.ticket_code}"
                ) from None

    def get(self) -> AttendeeTicket | None:
        """Block until the next ticket; None once the channel is closed and drained."""
        item = self._queue.get()
        if item is _CLOSED:
            return None
        return item

    def task_done(self) -> None:
        self._queue.task_done()

    def join(self) -> None:
        """Block until every enqueued item has been processed."""
        self._queue.join()

    def qsize(self) -> int:
        return self._queue.qsize()

    def close(self) -> None:
        """Stop accepting events; the consumer drains what is queued, then stops."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(_CLOSED)
        logger.debug("Event channel closed")
