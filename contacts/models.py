from contacts.infrastructure.models import Contact, ContactTag, Interaction, Tag  # noqa: F401
