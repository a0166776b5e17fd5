"""
Console message sink adapter - Implements MessageSink protocol.

This module provides a console-based implementation of the domain's
message sink port, logging outbound events for local development.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleMessageSink:
    """
    Implements MessageSink protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - stands in for the RabbitMQ sink.
    """

    def publish(self, routing_key: str, body: bytes) -> None:
        """
        Log the message at INFO level (simulates broker delivery).

        Args:
            routing_key: Fixed topic of the registration event
            body: JSON document
        """
        logger.info("[PUBLISH] Routing key: %s Body: %s", routing_key, body.decode())
