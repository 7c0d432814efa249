"""Shared kernel primitives (events, value objects, errors)."""

from .domain_events import (
    DomainEvent,
    ProfileUpdatedEvent,
    StorageChangedEvent,
    ProjectCreatedEvent,
    EVENT_TYPES,
)
from .exceptions import (
    DomainException,
    ValidationError,
    AuthenticationError,
    AuthenticationFailedError,
    PermissionDeniedError,
    ProfileNotFoundError,
    ConfigurationError,
    ExternalServiceError,
    SupabaseError,
)
from .value_objects import ContentSnapshot

__all__ = [
    "DomainEvent",
    "ProfileUpdatedEvent",
    "StorageChangedEvent",
    "ProjectCreatedEvent",
    "EVENT_TYPES",
    "DomainException",
    "ValidationError",
    "AuthenticationError",
    "AuthenticationFailedError",
    "PermissionDeniedError",
    "ProfileNotFoundError",
    "ConfigurationError",
    "ExternalServiceError",
    "SupabaseError",
    "ContentSnapshot",
]
