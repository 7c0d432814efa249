"""Header endpoints"""
import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response, WebSocket, WebSocketDisconnect, status

from storyfoundry.core.dependencies import build_user_client, get_event_bus, get_user_client
from storyfoundry.core.security import get_current_user, get_optional_user, resolve_session_user
from storyfoundry.infrastructure.event_bus import EventBus
from storyfoundry.models.user import SessionUser
from storyfoundry.schemas.header import HeaderView
from storyfoundry.services.header_widget import HeaderWidget
from storyfoundry.services.profile_service import ProfileService
from storyfoundry.services.supabase_client import SupabaseClient
from storyfoundry.shared_kernel.domain_events import ProfileUpdatedEvent, StorageChangedEvent
from storyfoundry.shared_kernel.exceptions import AuthenticationError, DomainException

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/header", response_model=HeaderView)
async def get_header(
    client: SupabaseClient = Depends(get_user_client),
    current_user: Optional[SessionUser] = Depends(get_optional_user),
):
    """Rendered header for the cookie session (signed-out view without one)."""
    widget = HeaderWidget(current_user, ProfileService(client))
    return await widget.mount()


@router.post("/profile/updated", status_code=status.HTTP_204_NO_CONTENT)
async def notify_profile_updated(
    current_user: SessionUser = Depends(get_current_user),
    event_bus: EventBus = Depends(get_event_bus),
):
    """Tell every open header of the current user to reload the profile."""
    await event_bus.publish(ProfileUpdatedEvent(user_id=current_user.id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.websocket("/header/ws")
async def header_updates(websocket: WebSocket):
    """
    WebSocket endpoint pushing the header whenever the profile changes.

    Server sends:
    - {"type": "header", "header": {...}} on connect and after each refresh
    - {"type": "error", "message": "..."} on error

    Client may send:
    - {"type": "profileUpdated"} after editing the profile
    - {"type": "storage", "key": "avatar_updated"} after changing the avatar
    - {"type": "refresh"} to reload this header only
    """
    await websocket.accept()
    event_bus = get_event_bus()

    try:
        client = build_user_client(websocket.cookies)
        try:
            user: Optional[SessionUser] = await resolve_session_user(client)
        except AuthenticationError:
            user = None
    except DomainException as exc:
        await websocket.send_json({"type": "error", "message": exc.message})
        await websocket.close()
        return

    async def push(view: HeaderView) -> None:
        await websocket.send_json({"type": "header", "header": view.model_dump()})

    widget = HeaderWidget(user, ProfileService(client), event_bus, on_change=push)
    try:
        await push(await widget.mount())
        while True:
            try:
                message = await websocket.receive_json()
            except json.JSONDecodeError:
                await websocket.send_json({"type": "error", "message": "Invalid JSON message"})
                continue
            if not isinstance(message, dict):
                await websocket.send_json({"type": "error", "message": "Message must be an object"})
                continue

            kind = message.get("type")
            if kind == "refresh":
                await widget.refresh()
            elif kind in ("profileUpdated", "storage"):
                if user is None:
                    continue
                if kind == "profileUpdated":
                    await event_bus.publish(ProfileUpdatedEvent(user_id=user.id))
                else:
                    await event_bus.publish(
                        StorageChangedEvent(key=str(message.get("key") or ""), user_id=user.id)
                    )
            else:
                await websocket.send_json({"type": "error", "message": f"Unknown message type: {kind}"})
    except WebSocketDisconnect:
        logger.info("Header WebSocket disconnected")
    finally:
        widget.unmount()
