"""Event bus infrastructure."""

from .interfaces import EventBus, EventHandler
from .in_memory import InMemoryEventBus
from .redis_streams import RedisStreamsEventBus
from .handlers import EventHandlerRegistry
from .consumer import RedisStreamConsumer, start_consumer, stop_consumer

__all__ = [
    "EventBus",
    "EventHandler",
    "InMemoryEventBus",
    "RedisStreamsEventBus",
    "EventHandlerRegistry",
    "RedisStreamConsumer",
    "start_consumer",
    "stop_consumer",
]
