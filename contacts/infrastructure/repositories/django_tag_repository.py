"""
Django implementation of TagRepository port.
"""
import uuid
from typing import Dict, Iterable, List, Optional

from asgiref.sync import sync_to_async

from contacts.domain.contact import Contact
from contacts.domain.tag import Tag
from contacts.infrastructure.models import Contact as ContactModel
from contacts.infrastructure.models import ContactTag
from contacts.infrastructure.models import Tag as TagModel
from contacts.infrastructure.repositories.django_contact_repository import contact_to_domain
from contacts.ports.tag_repository import TagRepository


class DjangoTagRepository(TagRepository):
    """
    Django ORM implementation of TagRepository.
    """

    def _to_domain(self, model: TagModel) -> Tag:
        return Tag(
            id=model.id,
            name=model.name,
            color=model.color,
            user_id=model.user_id,
            created_at=model.created_at,
        )

    @sync_to_async
    def save(self, tag: Tag) -> Tag:
        model, _ = TagModel.objects.update_or_create(
            id=tag.id,
            defaults={"name": tag.name, "color": tag.color, "user_id": tag.user_id},
        )
        return self._to_domain(model)

    @sync_to_async
    def find_by_id(self, tag_id: uuid.UUID) -> Optional[Tag]:
        try:
            return self._to_domain(TagModel.objects.get(id=tag_id))
        except TagModel.DoesNotExist:
            return None

    @sync_to_async
    def list_all(self) -> List[Tag]:
        return [self._to_domain(model) for model in TagModel.objects.order_by("name")]

    @sync_to_async
    def delete(self, tag_id: uuid.UUID) -> bool:
        deleted, _ = TagModel.objects.filter(id=tag_id).delete()
        return deleted > 0

    @sync_to_async
    def attach(self, contact_id: uuid.UUID, tag_id: uuid.UUID) -> bool:
        _, created = ContactTag.objects.get_or_create(contact_id=contact_id, tag_id=tag_id)
        return created

    @sync_to_async
    def detach(self, contact_id: uuid.UUID, tag_id: uuid.UUID) -> bool:
        deleted, _ = ContactTag.objects.filter(contact_id=contact_id, tag_id=tag_id).delete()
        return deleted > 0

    @sync_to_async
    def tags_for_contact(self, contact_id: uuid.UUID) -> List[Tag]:
        models = TagModel.objects.filter(contact_tags__contact_id=contact_id).order_by("name")
        return [self._to_domain(model) for model in models]

    @sync_to_async
    def tags_for_contacts(self, contact_ids: Iterable[uuid.UUID]) -> Dict[uuid.UUID, List[Tag]]:
        links = (
            ContactTag.objects.filter(contact_id__in=list(contact_ids))
            .select_related("tag")
            .order_by("tag__name")
        )
        grouped: Dict[uuid.UUID, List[Tag]] = {}
        for link in links:
            grouped.setdefault(link.contact_id, []).append(self._to_domain(link.tag))
        return grouped

    @sync_to_async
    def contacts_for_tag(self, tag_id: uuid.UUID) -> List[Contact]:
        models = ContactModel.objects.filter(contact_tags__tag_id=tag_id).order_by("-created_at")
        return [contact_to_domain(model) for model in models]
