"""In-memory event bus for a single process."""
from __future__ import annotations

from typing import Type

from storyfoundry.shared_kernel.domain_events import DomainEvent
from .interfaces import EventBus, EventHandler
from .handlers import EventHandlerRegistry


class InMemoryEventBus(EventBus):
    def __init__(self) -> None:
        self._registry = EventHandlerRegistry()

    async def publish(self, event: DomainEvent) -> str:
        await self._registry.dispatch(event)
        return type(event).__name__

    def subscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        self._registry.register(event_type.__name__, handler)

    def unsubscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        self._registry.unregister(event_type.__name__, handler)
