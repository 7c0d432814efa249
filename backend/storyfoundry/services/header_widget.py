"""Application header: signed-in profile, role badge and sign-out."""
from __future__ import annotations

from typing import Awaitable, Callable, Optional
import logging

from storyfoundry.core.config import settings
from storyfoundry.infrastructure.event_bus import EventBus
from storyfoundry.models.profile import Profile, Role
from storyfoundry.models.user import SessionUser
from storyfoundry.schemas.header import AvatarView, HeaderView, NavLink, RoleBadge
from storyfoundry.services.profile_service import HEADER_COLUMNS, ProfileService
from storyfoundry.services.supabase_client import SupabaseClient
from storyfoundry.shared_kernel.domain_events import ProfileUpdatedEvent, StorageChangedEvent
from storyfoundry.shared_kernel.exceptions import SupabaseError

logger = logging.getLogger(__name__)

AVATAR_STORAGE_KEY = "avatar_updated"

ROLE_ICONS = {
    Role.WRITER: "pen",
    Role.READER: "book-open",
}

ROLE_BADGE_CLASSES = {
    Role.WRITER: "bg-yellow-500/20 text-yellow-600 border-yellow-400 shadow-sm",
    Role.READER: "bg-purple-500/20 text-purple-600 border-purple-400 shadow-sm",
}
DEFAULT_BADGE_CLASS = "bg-gray-500/20 text-gray-600 border-gray-400"

SIGNED_OUT_ACTIONS = [
    NavLink(label="Sign In", href="/signin"),
    NavLink(label="Sign Up", href="/signup"),
]

OnChange = Callable[[HeaderView], Awaitable[None]]


def role_icon(role: Optional[str]) -> Optional[str]:
    parsed = Role.parse(role)
    return ROLE_ICONS.get(parsed) if parsed else None


def role_badge_class(role: Optional[str]) -> str:
    parsed = Role.parse(role)
    return ROLE_BADGE_CLASSES.get(parsed, DEFAULT_BADGE_CLASS) if parsed else DEFAULT_BADGE_CLASS


def display_name_for(profile: Optional[Profile], user: Optional[SessionUser]) -> str:
    fallback = (user.email_local_part if user else None) or "User"
    if profile is None:
        return fallback
    if profile.display_name:
        return profile.display_name
    first_name = profile.first_name or ""
    last_name = profile.last_name or ""
    if first_name or last_name:
        return f"{first_name} {last_name}".strip()
    return fallback


def initials_for(profile: Optional[Profile]) -> str:
    if profile is None:
        return "U"
    parts = [part for part in (profile.first_name, profile.last_name) if part]
    if not parts and profile.display_name:
        parts = profile.display_name.split()[:2]
    initials = "".join(part.strip()[0] for part in parts if part.strip())
    return initials.upper() or "U"


class HeaderWidget:
    """
    Server-side header for one viewer.

    ``mount`` loads the profile and starts listening for profile and
    avatar notifications; each notification re-fetches the profile and,
    when ``on_change`` is given, pushes the new rendering to it. Fetches
    are not coordinated, so the last one to finish wins.
    """

    def __init__(
        self,
        user: Optional[SessionUser],
        profile_service: Optional[ProfileService],
        event_bus: Optional[EventBus] = None,
        on_change: Optional[OnChange] = None,
    ) -> None:
        self.user = user
        self.profile_service = profile_service
        self.event_bus = event_bus
        self.on_change = on_change
        self.profile: Optional[Profile] = None
        self._mounted = False

    @property
    def mounted(self) -> bool:
        return self._mounted

    async def mount(self) -> HeaderView:
        await self.refresh(notify=False)
        if self.event_bus is not None and not self._mounted:
            self.event_bus.subscribe(ProfileUpdatedEvent, self._on_profile_updated)
            self.event_bus.subscribe(StorageChangedEvent, self._on_storage_changed)
        self._mounted = True
        return self.render()

    def unmount(self) -> None:
        if self.event_bus is not None and self._mounted:
            self.event_bus.unsubscribe(ProfileUpdatedEvent, self._on_profile_updated)
            self.event_bus.unsubscribe(StorageChangedEvent, self._on_storage_changed)
        self._mounted = False

    async def refresh(self, notify: bool = True) -> Optional[Profile]:
        """Re-fetch the profile; a failed or empty lookup keeps the last one."""
        if self.user is None or self.profile_service is None:
            return None

        profile = await self.profile_service.get_profile(self.user.id, HEADER_COLUMNS)
        if profile is not None:
            self.profile = profile
        else:
            logger.info("Header: no profile found for %s", self.user.id)

        if notify and self.on_change is not None:
            await self.on_change(self.render())
        return self.profile

    def _is_for_viewer(self, user_id: Optional[str]) -> bool:
        return user_id is None or (self.user is not None and user_id == self.user.id)

    async def _on_profile_updated(self, event: ProfileUpdatedEvent) -> None:
        if self._is_for_viewer(event.user_id):
            await self.refresh()

    async def _on_storage_changed(self, event: StorageChangedEvent) -> None:
        if event.key == AVATAR_STORAGE_KEY and self._is_for_viewer(event.user_id):
            await self.refresh()

    def render(self) -> HeaderView:
        if self.user is None:
            return HeaderView(signed_in=False, actions=list(SIGNED_OUT_ACTIONS))

        profile = self.profile
        badge = None
        if profile is not None and profile.role:
            badge = RoleBadge(
                role=profile.role,
                label=profile.role.upper(),
                icon=role_icon(profile.role),
                css_class=role_badge_class(profile.role),
            )

        return HeaderView(
            signed_in=True,
            display_name=display_name_for(profile, self.user),
            avatar=AvatarView(
                url=profile.avatar_url if profile else None,
                initials=initials_for(profile),
            ),
            role_badge=badge,
            notifications=0,
            menu=[
                NavLink(label="Settings", href="/app/settings", icon="settings"),
                NavLink(label="Sign Out", href="/api/v1/auth/signout", icon="log-out", method="POST"),
            ],
        )

    async def sign_out(self, client: SupabaseClient) -> str:
        redirect = await sign_out_session(client)
        self.unmount()
        self.profile = None
        return redirect


async def sign_out_session(client: SupabaseClient) -> str:
    """Revoke the session and return where to send the browser.

    The browser is signed out locally even when revocation fails.
    """
    try:
        await client.sign_out()
    except SupabaseError:
        logger.exception("Sign out error")
    return settings.SIGN_OUT_REDIRECT
