import pytest

from storyfoundry.infrastructure.event_bus import InMemoryEventBus
from storyfoundry.models.profile import Profile
from storyfoundry.models.user import SessionUser
from storyfoundry.services import header_widget as header_module
from storyfoundry.services.header_widget import (
    AVATAR_STORAGE_KEY,
    DEFAULT_BADGE_CLASS,
    HeaderWidget,
    display_name_for,
    initials_for,
    role_badge_class,
    role_icon,
    sign_out_session,
)
from storyfoundry.shared_kernel.domain_events import ProfileUpdatedEvent, StorageChangedEvent
from storyfoundry.shared_kernel.exceptions import SupabaseError


class DummyProfileService:
    def __init__(self, profile=None):
        self.profile = profile
        self.calls = 0

    async def get_profile(self, user_id, columns=None):
        self.calls += 1
        return self.profile


class DummyAuthClient:
    def __init__(self, error=None):
        self.error = error
        self.signed_out = False

    async def sign_out(self, scope="global"):
        if self.error:
            raise self.error
        self.signed_out = True


USER = SessionUser(id="user-1", email="maria@example.com")


def test_display_name_prefers_display_name():
    profile = Profile(id="u", display_name="Maria K.", first_name="Maria", last_name="Kim")
    assert display_name_for(profile, USER) == "Maria K."


def test_display_name_from_first_and_last():
    assert display_name_for(Profile(id="u", first_name="Maria"), USER) == "Maria"
    assert display_name_for(Profile(id="u", first_name="Maria", last_name="Kim"), USER) == "Maria Kim"


def test_display_name_falls_back_to_email_then_user():
    assert display_name_for(None, USER) == "maria"
    assert display_name_for(Profile(id="u"), SessionUser(id="u")) == "User"


def test_initials():
    assert initials_for(Profile(id="u", first_name="maria", last_name="kim")) == "MK"
    assert initials_for(Profile(id="u", display_name="ada lovelace byron")) == "AL"
    assert initials_for(Profile(id="u")) == "U"
    assert initials_for(None) == "U"


def test_role_styles():
    assert role_icon("writer") == "pen"
    assert role_icon("READER") == "book-open"
    assert role_icon("admin") is None
    assert "yellow" in role_badge_class("Writer")
    assert "purple" in role_badge_class("reader")
    assert role_badge_class("admin") == DEFAULT_BADGE_CLASS
    assert role_badge_class(None) == DEFAULT_BADGE_CLASS


@pytest.mark.asyncio
async def test_signed_out_view_has_sign_in_actions():
    view = await HeaderWidget(None, DummyProfileService()).mount()

    assert view.signed_in is False
    assert [link.href for link in view.actions] == ["/signin", "/signup"]
    assert view.menu == []
    assert view.brand == "StoryFoundry"


@pytest.mark.asyncio
async def test_signed_in_view_renders_profile():
    profile = Profile(
        id="user-1",
        role="writer",
        first_name="Maria",
        last_name="Kim",
        avatar_url="https://cdn.example.com/a.png",
    )

    view = await HeaderWidget(USER, DummyProfileService(profile)).mount()

    assert view.signed_in is True
    assert view.display_name == "Maria Kim"
    assert view.avatar.url == "https://cdn.example.com/a.png"
    assert view.avatar.initials == "MK"
    assert view.role_badge.label == "WRITER"
    assert view.role_badge.icon == "pen"
    assert view.notifications == 0
    assert [link.label for link in view.menu] == ["Settings", "Sign Out"]
    assert [link.method for link in view.menu] == ["GET", "POST"]


@pytest.mark.asyncio
async def test_missing_profile_renders_without_badge():
    view = await HeaderWidget(USER, DummyProfileService(None)).mount()

    assert view.display_name == "maria"
    assert view.role_badge is None
    assert view.avatar.initials == "U"


@pytest.mark.asyncio
async def test_profile_updated_event_refreshes_and_pushes():
    service = DummyProfileService(Profile(id="user-1", display_name="Old"))
    bus = InMemoryEventBus()
    pushed = []

    async def on_change(view):
        pushed.append(view)

    widget = HeaderWidget(USER, service, bus, on_change=on_change)
    await widget.mount()
    service.profile = Profile(id="user-1", display_name="New")

    await bus.publish(ProfileUpdatedEvent(user_id="user-1"))

    assert pushed[-1].display_name == "New"
    assert service.calls == 2


@pytest.mark.asyncio
async def test_events_for_other_users_are_ignored():
    service = DummyProfileService(Profile(id="user-1", display_name="Same"))
    bus = InMemoryEventBus()
    widget = HeaderWidget(USER, service, bus)
    await widget.mount()

    await bus.publish(ProfileUpdatedEvent(user_id="someone-else"))
    await bus.publish(StorageChangedEvent(key=AVATAR_STORAGE_KEY, user_id="someone-else"))
    await bus.publish(StorageChangedEvent(key="theme", user_id="user-1"))
    assert service.calls == 1

    await bus.publish(StorageChangedEvent(key=AVATAR_STORAGE_KEY, user_id="user-1"))
    await bus.publish(ProfileUpdatedEvent())
    assert service.calls == 3


@pytest.mark.asyncio
async def test_refresh_keeps_last_profile_when_lookup_empty():
    service = DummyProfileService(Profile(id="user-1", display_name="Kept"))
    widget = HeaderWidget(USER, service)
    await widget.mount()

    service.profile = None
    await widget.refresh()

    assert widget.render().display_name == "Kept"


@pytest.mark.asyncio
async def test_unmount_stops_listening():
    service = DummyProfileService(Profile(id="user-1"))
    bus = InMemoryEventBus()
    widget = HeaderWidget(USER, service, bus)
    await widget.mount()
    assert widget.mounted is True

    widget.unmount()
    await bus.publish(ProfileUpdatedEvent(user_id="user-1"))

    assert widget.mounted is False
    assert service.calls == 1


@pytest.mark.asyncio
async def test_sign_out_clears_state():
    bus = InMemoryEventBus()
    widget = HeaderWidget(USER, DummyProfileService(Profile(id="user-1")), bus)
    await widget.mount()
    client = DummyAuthClient()

    redirect = await widget.sign_out(client)

    assert redirect == "/"
    assert client.signed_out is True
    assert widget.profile is None
    assert widget.mounted is False


@pytest.mark.asyncio
async def test_sign_out_error_still_redirects(monkeypatch):
    monkeypatch.setattr(header_module.settings, "SIGN_OUT_REDIRECT", "/goodbye")

    redirect = await sign_out_session(DummyAuthClient(error=SupabaseError("network down")))

    assert redirect == "/goodbye"
