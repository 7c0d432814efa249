"""Profile model"""
from __future__ import annotations

import enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class Role(str, enum.Enum):
    """Permission level stored on a profile"""
    READER = "reader"
    WRITER = "writer"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Role"]:
        """Case-insensitive lookup; unknown values map to None."""
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class Profile(BaseModel):
    """Row of the ``profiles`` table (created by a database trigger)."""

    model_config = ConfigDict(extra="ignore")

    id: str
    role: Optional[str] = None
    display_name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    avatar_url: Optional[str] = None

    @property
    def normalized_role(self) -> Optional[Role]:
        return Role.parse(self.role)

    @property
    def is_reader(self) -> bool:
        return self.normalized_role is Role.READER

    def __repr__(self):
        return f"<Profile {self.id} role={self.role}>"
