"""
Profile domain entity.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.domain.value_objects import ROLE_LABELS, Email, UserRole


@dataclass(frozen=True)
class Profile:
    """
    A CRM user as seen by the application.

    ``id`` is the primary key of the underlying Django user.
    """

    id: int
    email: str
    full_name: str
    role: UserRole
    created_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate profile entity."""
        if not isinstance(self.role, UserRole):
            raise ValueError(f"Invalid role: {self.role}")

    @classmethod
    def create(
        cls,
        user_id: int,
        email: str,
        full_name: str = "",
        role: UserRole = UserRole.STAFF,
        created_at: Optional[datetime] = None,
    ) -> "Profile":
        """
        Create a Profile entity.

        Args:
            user_id: Django user primary key
            email: Login email (normalised to lower case)
            full_name: Display name
            role: Role of the user
            created_at: Creation timestamp

        Returns:
            Profile entity instance
        """
        return cls(
            id=user_id,
            email=Email(email).value,
            full_name=full_name.strip(),
            role=role,
            created_at=created_at,
        )

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN

    @property
    def is_staff(self) -> bool:
        return self.role is UserRole.STAFF

    @property
    def role_label(self) -> str:
        return ROLE_LABELS[self.role]
