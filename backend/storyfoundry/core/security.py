"""Session authentication dependencies."""
from typing import Optional
import logging

from fastapi import Depends

from storyfoundry.core.dependencies import get_user_client
from storyfoundry.models.user import SessionUser
from storyfoundry.services.supabase_client import SupabaseClient
from storyfoundry.shared_kernel.exceptions import (
    AuthenticationError,
    AuthenticationFailedError,
    SupabaseError,
)

logger = logging.getLogger(__name__)


async def resolve_session_user(client: SupabaseClient) -> SessionUser:
    """
    Ask the auth server who owns the client's session.

    Raises:
        AuthenticationError: 401, no session or the session was rejected
        AuthenticationFailedError: 500, the auth server failed
    """
    try:
        user = SessionUser.model_validate(await client.get_user())
    except AuthenticationError as exc:
        logger.info("Auth failed: %s", exc.message)
        raise AuthenticationError(
            "Unauthorized",
            code=exc.code,
            details={"details": exc.message or "No user found"},
        ) from exc
    except SupabaseError as exc:
        logger.error("Auth exception: %s", exc.message)
        raise AuthenticationFailedError(
            "Authentication failed",
            code="AUTH_EXCEPTION",
            details={"details": exc.message, "step": "auth_exception"},
        ) from exc

    logger.info("Authenticated user %s", user.id)
    return user


async def get_current_user(
    client: SupabaseClient = Depends(get_user_client),
) -> SessionUser:
    """Session user for endpoints that require one."""
    return await resolve_session_user(client)


async def get_optional_user(
    client: SupabaseClient = Depends(get_user_client),
) -> Optional[SessionUser]:
    """Session user, or None for anonymous visitors and expired sessions."""
    try:
        return await resolve_session_user(client)
    except AuthenticationError:
        return None
