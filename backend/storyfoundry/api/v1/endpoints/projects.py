"""Projects endpoints"""
from datetime import datetime, timezone
from typing import Any, Dict
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from storyfoundry.core.config import settings
from storyfoundry.core.dependencies import SupabaseClients, get_event_bus, get_supabase_clients
from storyfoundry.core.rate_limit import PROJECT_CREATE_LIMIT, limiter
from storyfoundry.core.security import get_current_user
from storyfoundry.infrastructure.event_bus import EventBus
from storyfoundry.infrastructure.observability import PROJECT_CREATION_TOTAL
from storyfoundry.models.user import SessionUser
from storyfoundry.schemas.project import ProjectCreate, ProjectCreateResponse
from storyfoundry.services.profile_service import ProfileService, ensure_can_create_projects
from storyfoundry.services.project_service import ProjectService
from storyfoundry.shared_kernel.exceptions import DomainException, ValidationError

router = APIRouter()
logger = logging.getLogger(__name__)


async def read_project_data(request: Request) -> ProjectCreate:
    """Parse the request body; malformed JSON or wrong types are a 400."""
    try:
        body = await request.json()
    except ValueError as exc:
        raise ValidationError("Invalid JSON body", code="INVALID_JSON") from exc

    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object", code="INVALID_BODY")

    logger.info("Project request fields: %s", sorted(body.keys()))
    try:
        return ProjectCreate.model_validate(body)
    except PydanticValidationError as exc:
        error = exc.errors()[0]
        field = ".".join(str(part) for part in error.get("loc", ())) or "body"
        raise ValidationError(
            f"Invalid {field}: {error.get('msg')}",
            code="INVALID_FIELD",
        ) from exc


def unexpected_error_payload(exc: Exception) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "error": "Failed to create project",
        "details": str(exc) or "Unknown error",
        "errorType": type(exc).__name__,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if settings.DEBUG:
        payload["debug"] = {
            "hasSupabaseUrl": bool(settings.SUPABASE_URL),
            "hasAnonKey": bool(settings.SUPABASE_ANON_KEY),
            "hasServiceKey": bool(settings.SUPABASE_SERVICE_ROLE_KEY),
        }
    return payload


@router.post("/create", response_model=ProjectCreateResponse)
@limiter.limit(PROJECT_CREATE_LIMIT)
async def create_project(
    request: Request,
    clients: SupabaseClients = Depends(get_supabase_clients),
    current_user: SessionUser = Depends(get_current_user),
    event_bus: EventBus = Depends(get_event_bus),
):
    """
    Create a new project for the signed-in writer.

    The body is read only after the caller is known to be a writer, so a
    reader gets 403 whatever the body holds.

    - **title**: required
    - **logline**: required
    - **description**: optional, stored as the synopsis
    - **format**: required
    - **genre**: optional
    - **visibility**: defaults to "private"
    - **ip_protection_enabled**: also record an IP timestamp (default true)
    """
    try:
        profile_service = ProfileService(clients.user, fallback_client=clients.service)
        profile = await profile_service.require_profile(current_user.id)
        ensure_can_create_projects(profile)
        logger.info("User profile verified - role: %s", profile.role)

        project_data = await read_project_data(request)
        project_service = ProjectService(clients.service, event_bus=event_bus)
        project = await project_service.create(project_data, current_user.id)
    except DomainException as exc:
        if exc.status_code < 500:
            PROJECT_CREATION_TOTAL.labels("rejected").inc()
        raise
    except Exception as exc:
        logger.exception("Unexpected error while creating project")
        PROJECT_CREATION_TOTAL.labels("error").inc()
        return JSONResponse(status_code=500, content=unexpected_error_payload(exc))

    return {"success": True, "project": project}
