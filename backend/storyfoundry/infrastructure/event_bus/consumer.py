"""Redis Streams consumer feeding local subscribers."""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Dict, Optional

from storyfoundry.shared_kernel.domain_events import EVENT_TYPES
from .redis_streams import RedisStreamsEventBus

logger = logging.getLogger(__name__)

EMPTY_STREAM_ID = "0-0"


class RedisStreamConsumer:
    def __init__(self, bus: RedisStreamsEventBus) -> None:
        self._bus = bus
        self._last_ids: Dict[str, str] = {}

    async def _cursor(self, event_type: str) -> str:
        """Last id read for ``event_type``; fixed at the stream tip on first use."""
        if event_type not in self._last_ids:
            latest = await self._bus.redis.xrevrange(self._bus.stream_name(event_type), count=1)
            self._last_ids[event_type] = latest[0][0] if latest else EMPTY_STREAM_ID
        return self._last_ids[event_type]

    async def poll(self, timeout_ms: int = 1000, count: int = 25) -> int:
        streams = {
            self._bus.stream_name(event_type): await self._cursor(event_type)
            for event_type in self._bus.event_types()
            if event_type in EVENT_TYPES
        }
        if not streams:
            await asyncio.sleep(timeout_ms / 1000)
            return 0
        results = await self._bus.redis.xread(streams=streams, count=count, block=timeout_ms)
        processed = 0
        for stream_name, entries in results or []:
            if isinstance(stream_name, bytes):
                stream_name = stream_name.decode("utf-8")
            event_type = stream_name.rsplit(":", 1)[-1]
            event_cls = EVENT_TYPES.get(event_type)
            for entry_id, data in entries:
                self._last_ids[event_type] = entry_id
                payload_raw = data.get("payload") if isinstance(data, dict) else None
                if not payload_raw or event_cls is None:
                    continue
                try:
                    event = event_cls.from_dict(json.loads(payload_raw))
                except (json.JSONDecodeError, TypeError, ValueError):
                    logger.warning("Skipping malformed %s entry %s", event_type, entry_id)
                    continue
                await self._bus.deliver(event)
                processed += 1
        return processed

    async def run(self, stop: asyncio.Event, timeout_ms: int = 1000) -> None:
        """Poll until ``stop`` is set."""
        while not stop.is_set():
            try:
                await self.poll(timeout_ms=timeout_ms)
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Redis stream poll failed")
                await asyncio.sleep(timeout_ms / 1000)


def start_consumer(bus: RedisStreamsEventBus, timeout_ms: int = 1000) -> tuple[asyncio.Task, asyncio.Event]:
    stop = asyncio.Event()
    task = asyncio.create_task(RedisStreamConsumer(bus).run(stop, timeout_ms=timeout_ms))
    return task, stop


async def stop_consumer(task: Optional[asyncio.Task], stop: Optional[asyncio.Event]) -> None:
    if task is None or stop is None:
        return
    stop.set()
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
