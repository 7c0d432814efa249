"""Pydantic schemas for request/response validation"""
from storyfoundry.schemas.project import ProjectCreate, ProjectCreateResponse
from storyfoundry.schemas.header import AvatarView, HeaderView, NavLink, RoleBadge

__all__ = [
    # Project
    "ProjectCreate",
    "ProjectCreateResponse",
    # Header
    "AvatarView",
    "HeaderView",
    "NavLink",
    "RoleBadge",
]
