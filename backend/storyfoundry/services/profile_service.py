"""Profile service"""
from typing import Optional
import logging

from storyfoundry.models.profile import Profile
from storyfoundry.services.supabase_client import SupabaseClient
from storyfoundry.shared_kernel.exceptions import (
    PermissionDeniedError,
    ProfileNotFoundError,
    SupabaseError,
)

logger = logging.getLogger(__name__)

PROFILES_TABLE = "profiles"
PERMISSION_COLUMNS = "id, role, display_name"
HEADER_COLUMNS = "id, first_name, last_name, display_name, avatar_url, role"


class ProfileService:
    """Service for profile lookups"""

    def __init__(self, client: SupabaseClient, fallback_client: Optional[SupabaseClient] = None):
        self.client = client
        self.fallback_client = fallback_client

    async def _lookup(self, client: SupabaseClient, user_id: str, columns: str) -> Optional[Profile]:
        try:
            row = await client.select_single(PROFILES_TABLE, columns, id=user_id)
        except SupabaseError as exc:
            logger.warning("Profile lookup failed for %s: %s", user_id, exc.message)
            return None
        return Profile.model_validate(row) if row else None

    async def get_profile(self, user_id: str, columns: str = PERMISSION_COLUMNS) -> Optional[Profile]:
        """
        Get the profile of a user.

        Row-level security can hide the row from the session client right
        after sign-up, so an empty answer is retried once with the
        fallback (service-role) client when one is configured.

        Args:
            user_id: Auth user ID
            columns: PostgREST select list

        Returns:
            Profile if found by either client, None otherwise
        """
        profile = await self._lookup(self.client, user_id, columns)
        if profile:
            logger.info("Profile found with session client: %s", user_id)
            return profile

        if self.fallback_client is None:
            return None

        profile = await self._lookup(self.fallback_client, user_id, columns)
        if profile:
            logger.info("Profile found with service client: %s", user_id)
        return profile

    async def require_profile(self, user_id: str, columns: str = PERMISSION_COLUMNS) -> Profile:
        profile = await self.get_profile(user_id, columns)
        if profile is None:
            logger.error("No profile found for user %s", user_id)
            raise ProfileNotFoundError(
                "User profile not found. Please refresh the page or contact support.",
                code="PROFILE_NOT_FOUND",
                details={
                    "details": f"User ID: {user_id}",
                    "suggestion": "Try refreshing the page or signing out and back in.",
                },
            )
        return profile


def ensure_can_create_projects(profile: Profile) -> None:
    """Readers may browse but not create content."""
    if profile.is_reader:
        raise PermissionDeniedError(
            "Permission denied",
            code="READER_ROLE",
            details={
                "message": "Readers cannot create projects. Please upgrade to Writer role in settings.",
                "upgradeRequired": True,
            },
        )
