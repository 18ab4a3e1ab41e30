"""
Profile repository port (interface).

This defines the contract for user and profile persistence.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from accounts.domain.profile import Profile
from core.domain.value_objects import UserRole


class ProfileRepository(ABC):
    """
    Abstract repository for Profile entities.
    """

    @abstractmethod
    async def find_by_user_id(self, user_id: int) -> Optional[Profile]:
        """
        Find the profile of a user.

        Args:
            user_id: Django user primary key

        Returns:
            Profile entity or None if the user has no profile
        """
        pass

    @abstractmethod
    async def email_exists(self, email: str) -> bool:
        """
        Check whether a user already uses an email (case-insensitive).

        Args:
            email: Email address

        Returns:
            True if taken
        """
        pass

    @abstractmethod
    async def create_user(
        self, email: str, password: str, full_name: str, role: UserRole
    ) -> Profile:
        """
        Create a user together with its profile.

        Args:
            email: Login email, also used as username
            password: Raw password
            full_name: Display name
            role: Role of the new user

        Returns:
            Created profile
        """
        pass

    @abstractmethod
    async def update_full_name(self, user_id: int, full_name: str) -> Optional[Profile]:
        """
        Change the display name of a user.

        Args:
            user_id: Django user primary key
            full_name: New display name

        Returns:
            Updated profile or None if it does not exist
        """
        pass

    @abstractmethod
    async def list_all(self) -> List[Profile]:
        """
        List every profile ordered by name.

        Returns:
            List of Profile entities
        """
        pass
