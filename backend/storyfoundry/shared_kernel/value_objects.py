"""Shared kernel value objects."""
import base64
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ContentSnapshot:
    """Text of a project at creation time, kept for proof-of-authorship claims.

    ``encoded`` is a plain base64 encoding of the joined text, not a digest.
    """
    title: str
    logline: str
    description: str = ""

    @classmethod
    def create(cls, title: str, logline: str, description: Optional[str] = None) -> "ContentSnapshot":
        return cls(
            title=title.strip(),
            logline=logline.strip(),
            description=(description or "").strip(),
        )

    @property
    def text(self) -> str:
        return f"{self.title}\n{self.logline}\n{self.description}"

    @property
    def encoded(self) -> str:
        return base64.b64encode(self.text.encode("utf-8")).decode("ascii")
