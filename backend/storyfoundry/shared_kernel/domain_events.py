"""Domain event primitives for the shared kernel."""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Optional, Dict, Any, Type
from uuid import UUID, uuid4
from abc import ABC

_ENVELOPE_FIELDS = {"event_id", "occurred_at", "correlation_id", "causation_id"}


@dataclass(frozen=True)
class DomainEvent(ABC):
    """Base class for all domain events."""

    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    correlation_id: Optional[UUID] = None
    causation_id: Optional[UUID] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_id": str(self.event_id),
            "event_type": self.__class__.__name__,
            "occurred_at": self.occurred_at.isoformat(),
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "causation_id": str(self.causation_id) if self.causation_id else None,
            "payload": self._payload_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DomainEvent":
        """Rebuild an event serialized with :meth:`to_dict`."""
        payload = data.get("payload") or {}
        known = {item.name for item in fields(cls)} - _ENVELOPE_FIELDS
        kwargs: Dict[str, Any] = {key: value for key, value in payload.items() if key in known}
        if data.get("event_id"):
            kwargs["event_id"] = UUID(str(data["event_id"]))
        if data.get("occurred_at"):
            kwargs["occurred_at"] = datetime.fromisoformat(str(data["occurred_at"]))
        if data.get("correlation_id"):
            kwargs["correlation_id"] = UUID(str(data["correlation_id"]))
        if data.get("causation_id"):
            kwargs["causation_id"] = UUID(str(data["causation_id"]))
        return cls(**kwargs)

    def _payload_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        for item in fields(self):
            if item.name in _ENVELOPE_FIELDS:
                continue
            value = getattr(self, item.name)
            payload[item.name] = self._serialize_value(value)
        return payload

    @staticmethod
    def _serialize_value(value: Any) -> Any:
        if isinstance(value, UUID):
            return str(value)
        if isinstance(value, datetime):
            return value.isoformat()
        return value


# Profile events
@dataclass(frozen=True)
class ProfileUpdatedEvent(DomainEvent):
    """A profile changed; ``user_id=None`` asks every header to refresh."""
    user_id: Optional[str] = None


@dataclass(frozen=True)
class StorageChangedEvent(DomainEvent):
    """A shared client-side storage key changed in another tab or window."""
    key: str = ""
    user_id: Optional[str] = None


# Project events
@dataclass(frozen=True)
class ProjectCreatedEvent(DomainEvent):
    project_id: str = ""
    owner_id: str = ""
    ip_timestamped: bool = False


EVENT_TYPES: Dict[str, Type[DomainEvent]] = {
    event_type.__name__: event_type
    for event_type in (ProfileUpdatedEvent, StorageChangedEvent, ProjectCreatedEvent)
}
