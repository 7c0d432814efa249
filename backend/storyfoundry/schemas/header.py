"""Header view schemas"""
from typing import List, Optional

from pydantic import BaseModel, Field


class NavLink(BaseModel):
    label: str
    href: str
    icon: Optional[str] = None
    method: str = "GET"  # "POST" links are submitted as forms, not followed


class RoleBadge(BaseModel):
    role: str
    label: str
    icon: Optional[str] = None
    css_class: str


class AvatarView(BaseModel):
    url: Optional[str] = None
    initials: str


class HeaderView(BaseModel):
    """Everything the header needs to draw itself."""
    brand: str = "StoryFoundry"
    brand_initials: str = "SF"
    home_href: str = "/app/dashboard"
    signed_in: bool = False
    display_name: Optional[str] = None
    avatar: Optional[AvatarView] = None
    role_badge: Optional[RoleBadge] = None
    notifications: int = 0
    menu: List[NavLink] = Field(default_factory=list)
    actions: List[NavLink] = Field(default_factory=list)
