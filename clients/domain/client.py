"""
Client domain entity.
"""
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import List, Optional

from core.domain.value_objects import Email

UPDATABLE_FIELDS = ("name", "email", "phone", "company")


@dataclass(frozen=True)
class Client:
    """
    Client domain entity.

    Immutable; ``with_changes`` returns an updated copy.
    """

    id: uuid.UUID
    name: str
    email: str
    phone: Optional[str]
    company: Optional[str]
    created_at: datetime
    created_by: Optional[int] = None

    def __post_init__(self):
        """Validate client entity."""
        if not self.name or not self.name.strip():
            raise ValueError("Client name is required")
        object.__setattr__(self, "email", Email(self.email).value)

    @classmethod
    def create(
        cls,
        name: str,
        email: str,
        phone: Optional[str] = None,
        company: Optional[str] = None,
        created_by: Optional[int] = None,
    ) -> "Client":
        """
        Create a new Client entity.

        Args:
            name: Client name
            email: Contact email
            phone: Optional phone number
            company: Optional company name
            created_by: Id of the user creating the client

        Returns:
            Client entity instance
        """
        return cls(
            id=uuid.uuid4(),
            name=name.strip(),
            email=email,
            phone=phone or None,
            company=company or None,
            created_at=datetime.now(timezone.utc),
            created_by=created_by,
        )

    def with_changes(self, **changes) -> "Client":
        """Copy of the client with the given fields replaced."""
        allowed = {key: value for key, value in changes.items() if key in UPDATABLE_FIELDS}
        return replace(self, **allowed)


@dataclass(frozen=True)
class ClientWithLicenses:
    """A client together with the full view of its licenses."""

    client: Client
    licenses: List = field(default_factory=list)
