"""
Contact, tag and interaction models.
"""
import uuid

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class Contact(models.Model):
    """
    A person tracked by the CRM: lead, customer, partner or supplier.
    """

    CONTACT_TYPE_CHOICES = [
        ("lead", "Lead"),
        ("customer", "Customer"),
        ("partner", "Partner"),
        ("supplier", "Supplier"),
        ("other", "Other"),
    ]

    STATUS_CHOICES = [
        ("new", "New"),
        ("contacted", "Contacted"),
        ("qualified", "Qualified"),
        ("active", "Active"),
        ("inactive", "Inactive"),
        ("lost", "Lost"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    first_name = models.CharField(max_length=150)
    last_name = models.CharField(max_length=150, null=True, blank=True)
    email = models.EmailField(null=True, blank=True, db_index=True)
    phone = models.CharField(max_length=50, null=True, blank=True)
    company_name = models.CharField(max_length=255, null=True, blank=True)
    job_title = models.CharField(max_length=255, null=True, blank=True)
    contact_type = models.CharField(max_length=20, choices=CONTACT_TYPE_CHOICES, default="lead")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="new")
    source = models.CharField(max_length=100, null=True, blank=True)
    notes = models.TextField(null=True, blank=True)
    score = models.PositiveSmallIntegerField(
        default=0, validators=[MinValueValidator(0), MaxValueValidator(100)]
    )
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_contacts",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="contacts",
    )
    tags = models.ManyToManyField("Tag", through="ContactTag", related_name="contacts")
    last_contact_date = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "contacts"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["contact_type", "status"]),
            models.Index(fields=["user", "created_at"]),
        ]

    def __str__(self):
        return " ".join(part for part in (self.first_name, self.last_name) if part)


class Tag(models.Model):
    """
    Coloured label that can be attached to contacts.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    color = models.CharField(max_length=20, default="#6366f1")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="tags",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "tags"
        ordering = ["name"]

    def __str__(self):
        return self.name


class ContactTag(models.Model):
    """
    Link between a contact and a tag.
    """

    contact = models.ForeignKey(Contact, on_delete=models.CASCADE, related_name="contact_tags")
    tag = models.ForeignKey(Tag, on_delete=models.CASCADE, related_name="contact_tags")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "contact_tags"
        unique_together = [["contact", "tag"]]

    def __str__(self):
        return f"{self.contact_id} -> {self.tag_id}"


class Interaction(models.Model):
    """
    A call, email, meeting or note logged against a contact.
    """

    INTERACTION_TYPE_CHOICES = [
        ("call", "Call"),
        ("email", "Email"),
        ("meeting", "Meeting"),
        ("note", "Note"),
        ("other", "Other"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    contact = models.ForeignKey(Contact, on_delete=models.CASCADE, related_name="interactions")
    interaction_type = models.CharField(max_length=20, choices=INTERACTION_TYPE_CHOICES, default="note")
    subject = models.CharField(max_length=255)
    notes = models.TextField(null=True, blank=True)
    interaction_date = models.DateTimeField()
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="interactions",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "interactions"
        ordering = ["-interaction_date"]
        indexes = [
            models.Index(fields=["contact", "interaction_date"]),
        ]

    def __str__(self):
        return f"{self.interaction_type}: {self.subject}"
