"""
Django implementation of ProfileRepository port.

Users live in ``django.contrib.auth``; the username is the lower-cased email.
"""
from typing import List, Optional

from asgiref.sync import sync_to_async
from django.contrib.auth import get_user_model
from django.db import transaction

from accounts.domain.profile import Profile
from accounts.infrastructure.models import Profile as ProfileModel
from accounts.ports.profile_repository import ProfileRepository
from core.domain.value_objects import UserRole


class DjangoProfileRepository(ProfileRepository):
    """
    Django ORM implementation of ProfileRepository.
    """

    def _to_domain(self, model: ProfileModel) -> Profile:
        """
        Convert Django model to domain entity.

        Args:
            model: Django Profile model (with its user loaded)

        Returns:
            Profile domain entity
        """
        user = model.user
        return Profile(
            id=user.pk,
            email=(user.email or user.get_username()).lower(),
            full_name=model.full_name,
            role=UserRole(model.role),
            created_at=model.created_at,
        )

    @sync_to_async
    def find_by_user_id(self, user_id: int) -> Optional[Profile]:
        try:
            model = ProfileModel.objects.select_related("user").get(user_id=user_id)
            return self._to_domain(model)
        except ProfileModel.DoesNotExist:
            return None

    @sync_to_async
    def email_exists(self, email: str) -> bool:
        User = get_user_model()
        return User.objects.filter(username__iexact=email).exists() or User.objects.filter(
            email__iexact=email
        ).exists()

    @sync_to_async
    def create_user(self, email: str, password: str, full_name: str, role: UserRole) -> Profile:
        User = get_user_model()
        email = email.lower()
        with transaction.atomic():
            user = User.objects.create_user(username=email, email=email, password=password)
            model = ProfileModel.objects.create(user=user, full_name=full_name, role=role.value)
        return self._to_domain(model)

    @sync_to_async
    def update_full_name(self, user_id: int, full_name: str) -> Optional[Profile]:
        try:
            model = ProfileModel.objects.select_related("user").get(user_id=user_id)
        except ProfileModel.DoesNotExist:
            return None
        model.full_name = full_name
        model.save(update_fields=["full_name", "updated_at"])
        return self._to_domain(model)

    @sync_to_async
    def list_all(self) -> List[Profile]:
        return [self._to_domain(model) for model in ProfileModel.objects.select_related("user")]
