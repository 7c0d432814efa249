"""Project service"""
from typing import Any, Dict, Optional
import logging

from storyfoundry.infrastructure.event_bus import EventBus
from storyfoundry.infrastructure.observability import PROJECT_CREATION_TOTAL
from storyfoundry.models.project import DEFAULT_VISIBILITY, PROJECTS_TABLE, NewProject, Project
from storyfoundry.schemas.project import ProjectCreate
from storyfoundry.services.ip_timestamp_service import IPTimestampService
from storyfoundry.services.supabase_client import SupabaseClient
from storyfoundry.shared_kernel.domain_events import ProjectCreatedEvent
from storyfoundry.shared_kernel.exceptions import ExternalServiceError, SupabaseError, ValidationError
from storyfoundry.shared_kernel.value_objects import ContentSnapshot

logger = logging.getLogger(__name__)


def validate_project_data(project_data: ProjectCreate) -> None:
    """
    Check the fields a project cannot be created without.

    Raises:
        ValidationError: naming the first missing field
    """
    if not (project_data.title or "").strip():
        raise ValidationError("Title is required", code="TITLE_REQUIRED")
    if not (project_data.logline or "").strip():
        raise ValidationError("Logline is required", code="LOGLINE_REQUIRED")
    if not project_data.format:
        raise ValidationError("Format is required", code="FORMAT_REQUIRED")


class ProjectService:
    """Service for project operations"""

    def __init__(
        self,
        client: SupabaseClient,
        event_bus: Optional[EventBus] = None,
        ip_timestamps: Optional[IPTimestampService] = None,
    ):
        self.client = client
        self.event_bus = event_bus
        self.ip_timestamps = ip_timestamps or IPTimestampService(client)

    async def create(self, project_data: ProjectCreate, owner_id: str) -> Dict[str, Any]:
        """
        Create a new project.

        The ``ai_enabled`` flag has no column and is accepted for
        compatibility only. When ``ip_protection_enabled`` is set an IP
        timestamp is written after the project; its failure is logged and
        does not undo the project.

        Args:
            project_data: Project creation data
            owner_id: Owner user ID

        Returns:
            The stored project row

        Raises:
            ValidationError: a required field is missing
            ExternalServiceError: the database rejected the insert
        """
        validate_project_data(project_data)

        title = project_data.title.strip()
        logline = project_data.logline.strip()
        synopsis = (project_data.description or "").strip() or None

        new_project = NewProject(
            title=title,
            logline=logline,
            synopsis=synopsis,
            format=project_data.format,
            genre=project_data.genre or None,
            visibility=project_data.visibility or DEFAULT_VISIBILITY,
            owner_id=owner_id,
            buzz_score=0,
        )

        try:
            row = await self.client.insert(PROJECTS_TABLE, new_project.to_row())
        except SupabaseError as exc:
            logger.error("Project creation error for %s: %s", owner_id, exc.message)
            PROJECT_CREATION_TOTAL.labels("db_error").inc()
            raise ExternalServiceError(
                "Failed to create project",
                code=exc.code,
                details={"details": exc.message},
            ) from exc

        project = Project.model_validate(row)
        logger.info("Project created successfully: %s", project.id)
        PROJECT_CREATION_TOTAL.labels("created").inc()

        ip_timestamped = False
        if project_data.ip_protection_enabled:
            snapshot = ContentSnapshot.create(title, logline, project_data.description)
            ip_timestamped = await self.ip_timestamps.record(project.id, snapshot)

        if self.event_bus is not None:
            event = ProjectCreatedEvent(
                project_id=project.id,
                owner_id=owner_id,
                ip_timestamped=ip_timestamped,
            )
            try:
                await self.event_bus.publish(event)
            except Exception:
                logger.exception("Failed to publish ProjectCreatedEvent for %s", project.id)

        return row
