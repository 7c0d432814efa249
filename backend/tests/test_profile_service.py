import pytest

from storyfoundry.services.profile_service import (
    HEADER_COLUMNS,
    PERMISSION_COLUMNS,
    ProfileService,
    ensure_can_create_projects,
)
from storyfoundry.models.profile import Profile, Role
from storyfoundry.shared_kernel.exceptions import (
    PermissionDeniedError,
    ProfileNotFoundError,
    SupabaseError,
)


class DummyClient:
    def __init__(self, rows=None, error=None):
        self.rows = rows or {}
        self.error = error
        self.calls = []

    async def select_single(self, table, columns, **filters):
        self.calls.append((table, columns, filters))
        if self.error:
            raise self.error
        return self.rows.get(filters.get("id"))


@pytest.mark.asyncio
async def test_get_profile_uses_session_client_first():
    client = DummyClient({"user-1": {"id": "user-1", "role": "writer"}})
    fallback = DummyClient({"user-1": {"id": "user-1", "role": "reader"}})

    profile = await ProfileService(client, fallback_client=fallback).get_profile("user-1")

    assert profile.role == "writer"
    assert client.calls == [("profiles", PERMISSION_COLUMNS, {"id": "user-1"})]
    assert fallback.calls == []


@pytest.mark.asyncio
async def test_get_profile_falls_back_when_row_hidden():
    client = DummyClient()
    fallback = DummyClient({"user-1": {"id": "user-1", "role": "writer", "display_name": "Ada"}})

    profile = await ProfileService(client, fallback_client=fallback).get_profile("user-1")

    assert profile.display_name == "Ada"
    assert len(fallback.calls) == 1


@pytest.mark.asyncio
async def test_get_profile_error_is_treated_as_missing():
    client = DummyClient(error=SupabaseError("permission denied for table profiles"))
    fallback = DummyClient({"user-1": {"id": "user-1", "role": "writer"}})

    profile = await ProfileService(client, fallback_client=fallback).get_profile("user-1", HEADER_COLUMNS)

    assert profile.id == "user-1"
    assert fallback.calls[0][1] == HEADER_COLUMNS


@pytest.mark.asyncio
async def test_get_profile_without_fallback_returns_none():
    assert await ProfileService(DummyClient()).get_profile("nobody") is None


@pytest.mark.asyncio
async def test_require_profile_raises_with_suggestion():
    service = ProfileService(DummyClient(), fallback_client=DummyClient())

    with pytest.raises(ProfileNotFoundError) as excinfo:
        await service.require_profile("user-9")

    payload = excinfo.value.to_payload()
    assert excinfo.value.status_code == 500
    assert payload["error"] == "User profile not found. Please refresh the page or contact support."
    assert payload["details"] == "User ID: user-9"
    assert "signing out" in payload["suggestion"]


@pytest.mark.parametrize("role", ["reader", "Reader", "READER"])
def test_readers_cannot_create_projects(role):
    with pytest.raises(PermissionDeniedError) as excinfo:
        ensure_can_create_projects(Profile(id="u", role=role))

    payload = excinfo.value.to_payload()
    assert excinfo.value.status_code == 403
    assert payload["error"] == "Permission denied"
    assert payload["upgradeRequired"] is True


@pytest.mark.parametrize("role", ["writer", "admin", None])
def test_non_readers_can_create_projects(role):
    ensure_can_create_projects(Profile(id="u", role=role))


def test_role_parse_is_case_insensitive():
    assert Role.parse(" Writer ") is Role.WRITER
    assert Role.parse("editor") is None
    assert Role.parse(None) is None
