"""Registry for event handlers."""
from __future__ import annotations

import logging
from typing import Dict, List, Iterable

from storyfoundry.shared_kernel.domain_events import DomainEvent
from .interfaces import EventHandler

logger = logging.getLogger(__name__)


class EventHandlerRegistry:
    def __init__(self) -> None:
        self._handlers: Dict[str, List[EventHandler]] = {}

    def register(self, event_type_name: str, handler: EventHandler) -> None:
        self._handlers.setdefault(event_type_name, []).append(handler)

    def unregister(self, event_type_name: str, handler: EventHandler) -> None:
        handlers = self._handlers.get(event_type_name, [])
        if handler in handlers:
            handlers.remove(handler)
        if not handlers:
            self._handlers.pop(event_type_name, None)

    def get_handlers(self, event_type_name: str) -> List[EventHandler]:
        return list(self._handlers.get(event_type_name, []))

    def event_types(self) -> Iterable[str]:
        return list(self._handlers.keys())

    async def dispatch(self, event: DomainEvent) -> int:
        """Run every handler for ``event``; one failing handler does not stop the rest."""
        delivered = 0
        for handler in self.get_handlers(type(event).__name__):
            try:
                await handler(event)
                delivered += 1
            except Exception:
                logger.exception("Event handler failed for %s", type(event).__name__)
        return delivered
