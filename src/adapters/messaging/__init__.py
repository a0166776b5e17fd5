"""Messaging adapters - Event channel, serialization and broker sinks."""

from .channel import InMemoryEventChannel
from .console import ConsoleMessageSink
from .publisher import REGISTRATION_ROUTING_KEY, EventPublisher
from .serializer import AttendeeTicketMessage, serialize_ticket

__all__ = [
    "REGISTRATION_ROUTING_KEY",
    "AttendeeTicketMessage",
    "ConsoleMessageSink",
    "EventPublisher",
    "InMemoryEventChannel",
    "serialize_ticket",
]
