"""Session user model"""
from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class SessionUser(BaseModel):
    """User resolved from the Supabase auth server for the current session."""

    model_config = ConfigDict(extra="ignore")

    id: str
    email: Optional[str] = None
    user_metadata: Dict[str, Any] = {}

    @property
    def email_local_part(self) -> Optional[str]:
        if not self.email:
            return None
        return self.email.split("@")[0] or None

    def __repr__(self):
        return f"<SessionUser {self.id}>"
