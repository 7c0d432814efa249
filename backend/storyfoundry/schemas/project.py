"""Project request/response schemas"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict

from storyfoundry.models.project import DEFAULT_VISIBILITY


class ProjectCreate(BaseModel):
    """Body of a project creation request.

    Required text fields are optional here; their presence is checked after
    authorization so that unauthorized callers never learn about the body.
    """
    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    logline: Optional[str] = None
    description: Optional[str] = None
    format: Optional[str] = None
    genre: Optional[str] = None
    visibility: Optional[str] = DEFAULT_VISIBILITY
    ai_enabled: bool = True
    ip_protection_enabled: bool = True


class ProjectCreateResponse(BaseModel):
    success: bool = True
    project: Dict[str, Any]
