"""Shared kernel exception hierarchy."""
from typing import Optional, Dict, Any


class DomainException(Exception):
    """Base exception for all domain errors.

    ``details`` is merged into the JSON error body next to ``error``.
    """

    status_code: int = 500

    def __init__(self, message: str, code: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.message, **self.details}


class ValidationError(DomainException):
    """Raised when request validation fails."""

    status_code = 400


class AuthenticationError(DomainException):
    """Raised when no valid session can be resolved."""

    status_code = 401


class PermissionDeniedError(DomainException):
    """Raised when the user's role does not allow the operation."""

    status_code = 403


class ProfileNotFoundError(DomainException):
    """Raised when an authenticated user has no profile row."""


class ConfigurationError(DomainException):
    """Raised when required server configuration is missing."""


class ExternalServiceError(DomainException):
    """Raised when an external service fails."""


class SupabaseError(ExternalServiceError):
    """Raised when Supabase (auth or database) rejects or fails a request."""

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        details: Optional[Dict[str, Any]] = None,
        status: Optional[int] = None,
    ) -> None:
        super().__init__(message, code=code, details=details)
        self.status = status


class AuthenticationFailedError(ExternalServiceError):
    """Raised when the auth server could not be asked about a session."""
