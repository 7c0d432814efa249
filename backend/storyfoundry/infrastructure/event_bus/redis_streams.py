"""Redis Streams implementation of the event bus.

Events are appended to one stream per event type so that every API worker
sees them; each worker delivers them to its own subscribers through
:class:`~storyfoundry.infrastructure.event_bus.consumer.RedisStreamConsumer`.
"""
from __future__ import annotations

import json
from typing import Iterable, Optional, Type

import redis.asyncio as redis

from storyfoundry.shared_kernel.domain_events import DomainEvent
from .interfaces import EventBus, EventHandler
from .handlers import EventHandlerRegistry


class RedisStreamsEventBus(EventBus):
    def __init__(
        self,
        redis_url: str,
        stream_prefix: str = "storyfoundry:events",
        client=None,
        maxlen: Optional[int] = 1000,
    ) -> None:
        self._redis = client if client is not None else redis.from_url(redis_url, decode_responses=True)
        self._stream_prefix = stream_prefix
        self._maxlen = maxlen
        self._registry = EventHandlerRegistry()

    @property
    def redis(self):
        return self._redis

    @property
    def stream_prefix(self) -> str:
        return self._stream_prefix

    @property
    def maxlen(self) -> Optional[int]:
        return self._maxlen

    def stream_name(self, event_type_name: str) -> str:
        return f"{self._stream_prefix}:{event_type_name}"

    async def publish(self, event: DomainEvent) -> str:
        event_data = {
            "event_type": type(event).__name__,
            "payload": json.dumps(event.to_dict(), default=str),
        }
        stream = self.stream_name(type(event).__name__)
        if not self._maxlen:
            return await self._redis.xadd(stream, event_data)
        # Consumers never replay old entries.
        return await self._redis.xadd(stream, event_data, maxlen=self._maxlen, approximate=True)

    def subscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        self._registry.register(event_type.__name__, handler)

    def unsubscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        self._registry.unregister(event_type.__name__, handler)

    def event_types(self) -> Iterable[str]:
        return self._registry.event_types()

    async def deliver(self, event: DomainEvent) -> int:
        """Hand an event read back from Redis to local subscribers."""
        return await self._registry.dispatch(event)

    async def close(self) -> None:
        await self._redis.aclose()
