"""
Contact domain entities.
"""
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Dict, List, Optional

from core.domain.value_objects import ContactStatus, ContactType, Email

MIN_SCORE = 0
MAX_SCORE = 100

UPDATABLE_FIELDS = (
    "first_name",
    "last_name",
    "email",
    "phone",
    "company_name",
    "job_title",
    "contact_type",
    "status",
    "source",
    "notes",
    "score",
    "assigned_to",
    "last_contact_date",
)


def validate_score(score: int) -> int:
    """Return ``score`` as an int in ``0..100`` or raise ``ValueError``."""
    try:
        value = int(score)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Score must be a number: {score}") from exc
    if value < MIN_SCORE or value > MAX_SCORE:
        raise ValueError(f"Score must be between {MIN_SCORE} and {MAX_SCORE}")
    return value


@dataclass(frozen=True)
class Contact:
    """
    Contact domain entity.

    ``email`` is optional but always stored lower case when present.
    """

    id: uuid.UUID
    first_name: str
    last_name: Optional[str]
    email: Optional[str]
    phone: Optional[str]
    company_name: Optional[str]
    job_title: Optional[str]
    contact_type: ContactType
    status: ContactStatus
    source: Optional[str]
    notes: Optional[str]
    score: int
    assigned_to: Optional[int]
    user_id: Optional[int]
    last_contact_date: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    def __post_init__(self):
        """Validate contact entity."""
        if not self.first_name or not self.first_name.strip():
            raise ValueError("First name is required")
        if self.email:
            object.__setattr__(self, "email", Email(self.email).value)
        object.__setattr__(self, "score", validate_score(self.score))

    @classmethod
    def create(
        cls,
        first_name: str,
        last_name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        company_name: Optional[str] = None,
        job_title: Optional[str] = None,
        contact_type: ContactType = ContactType.LEAD,
        status: ContactStatus = ContactStatus.NEW,
        source: Optional[str] = None,
        notes: Optional[str] = None,
        score: int = 0,
        assigned_to: Optional[int] = None,
        user_id: Optional[int] = None,
    ) -> "Contact":
        """
        Create a new Contact entity.

        Args:
            first_name: Given name (required)
            last_name: Family name
            email: Optional email address
            phone: Phone number
            company_name: Company the contact works for
            job_title: Position in the company
            contact_type: Kind of contact
            status: Lifecycle status
            source: Where the contact came from (``manual``, ``import`` ...)
            notes: Free text
            score: Lead score in ``0..100``
            assigned_to: User responsible for the contact
            user_id: Owner of the record

        Returns:
            Contact entity instance
        """
        now = datetime.now(timezone.utc)
        return cls(
            id=uuid.uuid4(),
            first_name=(first_name or "").strip(),
            last_name=last_name or None,
            email=email or None,
            phone=phone or None,
            company_name=company_name or None,
            job_title=job_title or None,
            contact_type=contact_type,
            status=status,
            source=source or None,
            notes=notes or None,
            score=score,
            assigned_to=assigned_to,
            user_id=user_id,
            last_contact_date=None,
            created_at=now,
            updated_at=now,
        )

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def with_changes(self, **changes) -> "Contact":
        """Copy with the given fields replaced and ``updated_at`` refreshed."""
        allowed = {key: value for key, value in changes.items() if key in UPDATABLE_FIELDS}
        return replace(self, updated_at=datetime.now(timezone.utc), **allowed)


@dataclass(frozen=True)
class ContactFilters:
    """Filters and page window for contact listings."""

    contact_type: Optional[ContactType] = None
    status: Optional[str] = None
    assigned_to: Optional[int] = None
    tag_id: Optional[uuid.UUID] = None
    search: Optional[str] = None
    page: int = 1
    per_page: int = 50

    def __post_init__(self):
        if self.page < 1:
            raise ValueError("Page must be 1 or greater")
        if self.per_page < 1:
            raise ValueError("Page size must be 1 or greater")


@dataclass(frozen=True)
class ContactWithTags:
    """A contact together with its tags."""

    contact: Contact
    tags: List = field(default_factory=list)


@dataclass(frozen=True)
class ContactStats:
    """Counters over the contacts owned by a user."""

    total: int
    new_this_month: int
    by_type: Dict[str, int]
    by_status: Dict[str, int]


@dataclass(frozen=True)
class ContactSummary:
    """The contact columns shown next to deals and tasks."""

    id: uuid.UUID
    first_name: str
    last_name: Optional[str]
    email: Optional[str]
    company_name: Optional[str]

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)
