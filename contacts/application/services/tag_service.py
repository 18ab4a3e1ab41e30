"""
Tag service.
"""

import logging
import uuid
from typing import List, Optional

from contacts.domain.contact import Contact
from contacts.domain.tag import Tag
from contacts.ports.contact_repository import ContactRepository
from contacts.ports.tag_repository import TagRepository
from core.application.result import ServiceResult, service_operation, validating
from core.domain.exceptions import ContactNotFoundError, TagNotFoundError

logger = logging.getLogger(__name__)


class TagService:
    """Tags and their assignment to contacts."""

    def __init__(self, tag_repository: TagRepository, contact_repository: ContactRepository):
        self.tag_repository = tag_repository
        self.contact_repository = contact_repository

    async def _get_or_raise(self, tag_id: uuid.UUID) -> Tag:
        tag = await self.tag_repository.find_by_id(tag_id)
        if tag is None:
            raise TagNotFoundError(f"Tag {tag_id} not found")
        return tag

    @service_operation("list tags", empty=list)
    async def get_tags(self) -> ServiceResult[List[Tag]]:
        return ServiceResult.ok(await self.tag_repository.list_all())

    @service_operation("create tag")
    async def create_tag(
        self, name: str, color: Optional[str] = None, user_id: Optional[int] = None
    ) -> ServiceResult[Tag]:
        """Create a tag; the colour defaults to ``#6366f1``."""
        with validating():
            tag = Tag.create(name=name, color=color, user_id=user_id)
        saved = await self.tag_repository.save(tag)
        return ServiceResult.ok(saved, message="Tag created")

    @service_operation("update tag")
    async def update_tag(self, tag_id: uuid.UUID, name: str, color: Optional[str] = None) -> ServiceResult[Tag]:
        tag = await self._get_or_raise(tag_id)
        with validating():
            updated = tag.rename(name, color)
        saved = await self.tag_repository.save(updated)
        return ServiceResult.ok(saved, message="Tag updated")

    @service_operation("delete tag")
    async def delete_tag(self, tag_id: uuid.UUID) -> ServiceResult[None]:
        if not await self.tag_repository.delete(tag_id):
            raise TagNotFoundError(f"Tag {tag_id} not found")
        return ServiceResult.ok(None, message="Tag deleted")

    @service_operation("add tag to contact")
    async def add_tag_to_contact(self, contact_id: uuid.UUID, tag_id: uuid.UUID) -> ServiceResult[None]:
        if await self.contact_repository.find_by_id(contact_id) is None:
            raise ContactNotFoundError(f"Contact {contact_id} not found")
        await self._get_or_raise(tag_id)
        if not await self.tag_repository.attach(contact_id, tag_id):
            logger.debug("Tag %s already on contact %s", tag_id, contact_id)
        return ServiceResult.ok(None, message="Tag added to contact")

    @service_operation("remove tag from contact")
    async def remove_tag_from_contact(self, contact_id: uuid.UUID, tag_id: uuid.UUID) -> ServiceResult[None]:
        await self.tag_repository.detach(contact_id, tag_id)
        return ServiceResult.ok(None, message="Tag removed from contact")

    @service_operation("list contact tags", empty=list)
    async def get_contact_tags(self, contact_id: uuid.UUID) -> ServiceResult[List[Tag]]:
        return ServiceResult.ok(await self.tag_repository.tags_for_contact(contact_id))

    @service_operation("list contacts by tag", empty=list)
    async def get_contacts_by_tag(self, tag_id: uuid.UUID) -> ServiceResult[List[Contact]]:
        return ServiceResult.ok(await self.tag_repository.contacts_for_tag(tag_id))
