"""
Tag domain entity.
"""
import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

DEFAULT_TAG_COLOR = "#6366f1"

HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}){1,2}$")


@dataclass(frozen=True)
class Tag:
    """
    Tag domain entity.

    ``color`` is a CSS hex colour such as ``#6366f1``.
    """

    id: uuid.UUID
    name: str
    color: str
    user_id: Optional[int]
    created_at: datetime

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Tag name is required")
        if not HEX_COLOR.match(self.color or ""):
            raise ValueError(f"Invalid tag color: {self.color}")

    @classmethod
    def create(cls, name: str, color: Optional[str] = None, user_id: Optional[int] = None) -> "Tag":
        return cls(
            id=uuid.uuid4(),
            name=(name or "").strip(),
            color=color or DEFAULT_TAG_COLOR,
            user_id=user_id,
            created_at=datetime.now(timezone.utc),
        )

    def rename(self, name: str, color: Optional[str] = None) -> "Tag":
        return Tag(
            id=self.id,
            name=(name or "").strip(),
            color=color or self.color,
            user_id=self.user_id,
            created_at=self.created_at,
        )
