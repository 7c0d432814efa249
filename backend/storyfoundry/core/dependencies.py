"""
Dependency wiring for the FastAPI app.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional
import logging

from fastapi import Request

from storyfoundry.core.config import settings
from storyfoundry.core.session import extract_access_token
from storyfoundry.infrastructure.event_bus import EventBus, InMemoryEventBus, RedisStreamsEventBus
from storyfoundry.services.supabase_client import SupabaseClient
from storyfoundry.shared_kernel.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_event_bus: Optional[EventBus] = None


@dataclass
class SupabaseClients:
    """Per-request clients: ``user`` acts as the session user, ``service`` bypasses RLS."""
    user: SupabaseClient
    service: SupabaseClient


def _missing(name: str) -> ConfigurationError:
    logger.error("Supabase configuration missing: %s", name)
    return ConfigurationError(
        f"Server configuration error: Missing {name}",
        code="CONFIGURATION_MISSING",
    )


def build_user_client(cookies: Mapping[str, str]) -> SupabaseClient:
    """Client carrying the session found in ``cookies`` (if any)."""
    if not settings.SUPABASE_URL:
        raise _missing("Supabase URL")
    if not settings.SUPABASE_ANON_KEY:
        raise _missing("anon key")
    return SupabaseClient(
        settings.SUPABASE_URL,
        settings.SUPABASE_ANON_KEY,
        access_token=extract_access_token(cookies, settings.auth_cookie_name),
    )


def build_service_client() -> SupabaseClient:
    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        raise _missing("service role key")
    if not settings.SUPABASE_URL:
        raise _missing("Supabase URL")
    return SupabaseClient(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)


async def get_supabase_clients(request: Request) -> SupabaseClients:
    service = build_service_client()
    user = build_user_client(request.cookies)
    return SupabaseClients(user=user, service=service)


async def get_user_client(request: Request) -> SupabaseClient:
    return build_user_client(request.cookies)


def get_event_bus() -> EventBus:
    """
    Return the process-wide event bus so subscribers and publishers meet.
    """
    global _event_bus
    if _event_bus is not None:
        return _event_bus

    if settings.EVENT_BUS_BACKEND.lower() == "redis" and settings.REDIS_URL:
        _event_bus = RedisStreamsEventBus(
            settings.REDIS_URL,
            settings.EVENT_BUS_STREAM_PREFIX,
            maxlen=settings.EVENT_BUS_STREAM_MAXLEN,
        )
    else:
        _event_bus = InMemoryEventBus()
    return _event_bus


def reset_event_bus() -> None:
    """Drop the cached event bus (shutdown and tests)."""
    global _event_bus
    _event_bus = None
