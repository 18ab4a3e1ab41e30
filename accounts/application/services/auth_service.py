"""
Authentication service.

Session login/logout over ``django.contrib.auth`` plus profile and role
lookups. Every operation answers with a ServiceResult envelope.
"""

import logging
from typing import List, Optional

from asgiref.sync import sync_to_async
from django.contrib.auth import authenticate, login, logout

from accounts.domain.profile import Profile
from accounts.ports.profile_repository import ProfileRepository
from core.application.result import ServiceResult, service_operation
from core.domain.exceptions import (
    DuplicateEmailError,
    NotAuthenticatedError,
    ValidationError,
)
from core.domain.value_objects import Email, UserRole
from core.metrics import login_attempts_total

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6

INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
MISSING_PROFILE = "UNAUTHORIZED"


def _authenticated_user(request):
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        return None
    return user


class AuthService:
    """Login, logout and the current user's profile and role."""

    def __init__(self, profile_repository: ProfileRepository):
        self.profile_repository = profile_repository

    async def sign_in(self, request, email: Optional[str], password: Optional[str]) -> ServiceResult[Profile]:
        """
        Log a user in and attach the session to ``request``.

        A user without profile is refused and no session is created.
        """
        if not email or not password:
            login_attempts_total.labels(outcome="invalid").inc()
            return ServiceResult.fail("Email and password are required", code=INVALID_CREDENTIALS)

        user = await sync_to_async(authenticate)(
            request, username=email.strip().lower(), password=password
        )
        if user is None:
            logger.info("Failed login attempt for %s", email)
            login_attempts_total.labels(outcome="invalid").inc()
            return ServiceResult.fail("Invalid credentials", code=INVALID_CREDENTIALS)

        profile = await self.profile_repository.find_by_user_id(user.pk)
        if profile is None:
            logger.warning("User %s has no profile, login refused", user.pk)
            login_attempts_total.labels(outcome="unauthorized").inc()
            return ServiceResult.fail("User has no profile", code=MISSING_PROFILE)

        await sync_to_async(login)(request, user)
        login_attempts_total.labels(outcome="success").inc()
        logger.info("User %s signed in", user.pk)
        return ServiceResult.ok(profile)

    async def sign_out(self, request) -> ServiceResult[None]:
        """Flush the session. Always succeeds."""
        await sync_to_async(logout)(request)
        return ServiceResult.ok(None)

    async def get_current_user(self, request):
        """Authenticated Django user of the request, or None."""
        return _authenticated_user(request)

    async def get_current_profile(self, request) -> Optional[Profile]:
        """Profile of the logged-in user, or None."""
        user = _authenticated_user(request)
        if user is None:
            return None
        return await self.profile_repository.find_by_user_id(user.pk)

    async def get_current_role(self, request) -> Optional[UserRole]:
        profile = await self.get_current_profile(request)
        return profile.role if profile else None

    @staticmethod
    def is_admin(profile: Optional[Profile]) -> bool:
        return profile is not None and profile.is_admin

    @staticmethod
    def is_staff(profile: Optional[Profile]) -> bool:
        return profile is not None and profile.is_staff

    @staticmethod
    def has_session(request) -> bool:
        return _authenticated_user(request) is not None

    @service_operation("sign up")
    async def sign_up(
        self,
        email: str,
        password: str,
        full_name: str,
        role: str = UserRole.STAFF.value,
    ) -> ServiceResult[Profile]:
        """
        Create a user with its profile.

        Args:
            email: Login email
            password: Raw password (at least six characters)
            full_name: Display name
            role: ``admin`` or ``staff``
        """
        if not Email.is_valid(email):
            raise ValidationError("Invalid email address")
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        try:
            user_role = UserRole(role)
        except ValueError as exc:
            raise ValidationError(f"Invalid role: {role}") from exc

        normalized = Email(email).value
        if await self.profile_repository.email_exists(normalized):
            raise DuplicateEmailError(f"A user with email {normalized} already exists")

        profile = await self.profile_repository.create_user(
            normalized, password, (full_name or "").strip(), user_role
        )
        logger.info("User %s created with role %s", profile.id, user_role.value)
        return ServiceResult.ok(profile, message="User created")

    @service_operation("update profile")
    async def update_profile(self, user_id: Optional[int], full_name: str) -> ServiceResult[Profile]:
        """Change the display name of the current user."""
        if user_id is None:
            raise NotAuthenticatedError()
        if not full_name or not full_name.strip():
            raise ValidationError("Full name is required")
        profile = await self.profile_repository.update_full_name(user_id, full_name.strip())
        if profile is None:
            raise NotAuthenticatedError("User has no profile")
        return ServiceResult.ok(profile)

    @service_operation("list users", empty=list)
    async def list_profiles(self) -> ServiceResult[List[Profile]]:
        return ServiceResult.ok(await self.profile_repository.list_all())
