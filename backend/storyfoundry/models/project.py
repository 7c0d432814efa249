"""Project model"""
from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict

PROJECTS_TABLE = "projects"
IP_TIMESTAMPS_TABLE = "ip_timestamps"
DEFAULT_VISIBILITY = "private"
LOCAL_TIMESTAMP_PROVIDER = "local"


class NewProject(BaseModel):
    """Columns written when a project is created."""

    title: str
    logline: str
    synopsis: Optional[str] = None
    format: str
    genre: Optional[str] = None
    visibility: str = DEFAULT_VISIBILITY
    owner_id: str
    buzz_score: int = 0

    def to_row(self) -> Dict[str, Any]:
        return self.model_dump()


class IPTimestamp(BaseModel):
    """Provenance record pairing a project with its encoded initial text."""

    project_id: str
    content_hash: str
    provider: str = LOCAL_TIMESTAMP_PROVIDER

    def to_row(self) -> Dict[str, Any]:
        return self.model_dump()


class Project(BaseModel):
    """Row of the ``projects`` table as returned by the database."""

    model_config = ConfigDict(extra="allow")

    id: str
    title: str
    logline: Optional[str] = None
    synopsis: Optional[str] = None
    format: Optional[str] = None
    genre: Optional[str] = None
    visibility: str = DEFAULT_VISIBILITY
    owner_id: str
    buzz_score: float = 0

    def __repr__(self):
        return f"<Project {self.title}>"
