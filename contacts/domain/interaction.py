"""
Interaction domain entity.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class InteractionType(Enum):
    """Kind of touchpoint with a contact."""

    CALL = "call"
    EMAIL = "email"
    MEETING = "meeting"
    NOTE = "note"
    OTHER = "other"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Interaction:
    """A logged touchpoint with a contact."""

    id: uuid.UUID
    contact_id: uuid.UUID
    interaction_type: InteractionType
    subject: str
    notes: Optional[str]
    interaction_date: datetime
    user_id: Optional[int]
    created_at: datetime

    def __post_init__(self):
        if not self.subject or not self.subject.strip():
            raise ValueError("Interaction subject is required")

    @classmethod
    def create(
        cls,
        contact_id: uuid.UUID,
        subject: str,
        interaction_type: InteractionType = InteractionType.NOTE,
        notes: Optional[str] = None,
        interaction_date: Optional[datetime] = None,
        user_id: Optional[int] = None,
    ) -> "Interaction":
        now = datetime.now(timezone.utc)
        return cls(
            id=uuid.uuid4(),
            contact_id=contact_id,
            interaction_type=interaction_type,
            subject=(subject or "").strip(),
            notes=notes or None,
            interaction_date=interaction_date or now,
            user_id=user_id,
            created_at=now,
        )
