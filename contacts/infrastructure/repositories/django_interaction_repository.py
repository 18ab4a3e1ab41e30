"""
Django implementation of InteractionRepository port.
"""
import uuid
from typing import List

from asgiref.sync import sync_to_async

from contacts.domain.interaction import Interaction, InteractionType
from contacts.infrastructure.models import Interaction as InteractionModel
from contacts.ports.interaction_repository import InteractionRepository


class DjangoInteractionRepository(InteractionRepository):
    """
    Django ORM implementation of InteractionRepository.
    """

    def _to_domain(self, model: InteractionModel) -> Interaction:
        return Interaction(
            id=model.id,
            contact_id=model.contact_id,
            interaction_type=InteractionType(model.interaction_type),
            subject=model.subject,
            notes=model.notes,
            interaction_date=model.interaction_date,
            user_id=model.user_id,
            created_at=model.created_at,
        )

    @sync_to_async
    def save(self, interaction: Interaction) -> Interaction:
        model, _ = InteractionModel.objects.update_or_create(
            id=interaction.id,
            defaults={
                "contact_id": interaction.contact_id,
                "interaction_type": interaction.interaction_type.value,
                "subject": interaction.subject,
                "notes": interaction.notes,
                "interaction_date": interaction.interaction_date,
                "user_id": interaction.user_id,
            },
        )
        return self._to_domain(model)

    @sync_to_async
    def list_for_contact(self, contact_id: uuid.UUID) -> List[Interaction]:
        models = InteractionModel.objects.filter(contact_id=contact_id).order_by("-interaction_date")
        return [self._to_domain(model) for model in models]
