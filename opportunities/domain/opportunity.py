"""
Opportunity domain entities.
"""
import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from contacts.domain.contact import ContactSummary
from core.domain.value_objects import OpportunityStatus

UPDATABLE_FIELDS = (
    "title",
    "description",
    "value",
    "contact_id",
    "pipeline_id",
    "stage_id",
    "expected_close_date",
    "assigned_to",
)


def to_amount(value) -> Decimal:
    """Coerce a deal value to a non-negative Decimal with two places."""
    try:
        amount = Decimal(str(value if value is not None else 0))
    except InvalidOperation as exc:
        raise ValueError(f"Invalid value: {value}") from exc
    if amount < 0:
        raise ValueError("Opportunity value must not be negative")
    return amount.quantize(Decimal("0.01"))


@dataclass(frozen=True)
class Opportunity:
    """
    Opportunity domain entity.

    Closing a deal (won or lost) stamps ``actual_close_date``.
    """

    id: uuid.UUID
    title: str
    description: Optional[str]
    value: Decimal
    contact_id: Optional[uuid.UUID]
    pipeline_id: Optional[uuid.UUID]
    stage_id: Optional[uuid.UUID]
    status: OpportunityStatus
    expected_close_date: Optional[date]
    actual_close_date: Optional[date]
    lost_reason: Optional[str]
    assigned_to: Optional[int]
    user_id: Optional[int]
    created_at: datetime
    updated_at: datetime

    def __post_init__(self):
        """Validate opportunity entity."""
        if not self.title or not self.title.strip():
            raise ValueError("Opportunity title is required")
        object.__setattr__(self, "value", to_amount(self.value))

    @classmethod
    def create(
        cls,
        title: str,
        value=0,
        description: Optional[str] = None,
        contact_id: Optional[uuid.UUID] = None,
        pipeline_id: Optional[uuid.UUID] = None,
        stage_id: Optional[uuid.UUID] = None,
        expected_close_date: Optional[date] = None,
        assigned_to: Optional[int] = None,
        user_id: Optional[int] = None,
    ) -> "Opportunity":
        """
        Create a new open opportunity.

        Returns:
            Opportunity entity instance with status ``open``
        """
        now = datetime.now(timezone.utc)
        return cls(
            id=uuid.uuid4(),
            title=(title or "").strip(),
            description=description or None,
            value=value,
            contact_id=contact_id,
            pipeline_id=pipeline_id,
            stage_id=stage_id,
            status=OpportunityStatus.OPEN,
            expected_close_date=expected_close_date,
            actual_close_date=None,
            lost_reason=None,
            assigned_to=assigned_to,
            user_id=user_id,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_open(self) -> bool:
        return self.status is OpportunityStatus.OPEN

    def with_changes(self, **changes) -> "Opportunity":
        allowed = {key: value for key, value in changes.items() if key in UPDATABLE_FIELDS}
        return replace(self, updated_at=datetime.now(timezone.utc), **allowed)

    def move_to(self, stage_id: uuid.UUID, pipeline_id: uuid.UUID) -> "Opportunity":
        return replace(
            self, stage_id=stage_id, pipeline_id=pipeline_id, updated_at=datetime.now(timezone.utc)
        )

    def mark_won(self, closed_on: date) -> "Opportunity":
        return replace(
            self,
            status=OpportunityStatus.WON,
            actual_close_date=closed_on,
            lost_reason=None,
            updated_at=datetime.now(timezone.utc),
        )

    def mark_lost(self, closed_on: date, reason: Optional[str] = None) -> "Opportunity":
        return replace(
            self,
            status=OpportunityStatus.LOST,
            actual_close_date=closed_on,
            lost_reason=reason or None,
            updated_at=datetime.now(timezone.utc),
        )


@dataclass(frozen=True)
class StageSummary:
    """The stage columns shown next to a deal."""

    id: uuid.UUID
    name: str
    color: str
    probability: int


@dataclass(frozen=True)
class OpportunityDetail:
    """An opportunity with its contact and stage summaries."""

    opportunity: Opportunity
    contact: Optional[ContactSummary] = None
    stage: Optional[StageSummary] = None


@dataclass(frozen=True)
class OpportunityFilters:
    """Filters for opportunity listings."""

    status: Optional[OpportunityStatus] = None
    stage_id: Optional[uuid.UUID] = None
    pipeline_id: Optional[uuid.UUID] = None
    assigned_to: Optional[int] = None
    contact_id: Optional[uuid.UUID] = None


@dataclass(frozen=True)
class StageColumn:
    """One column of the pipeline board."""

    stage: object
    opportunities: List[OpportunityDetail] = field(default_factory=list)
    total_value: Decimal = Decimal("0.00")


@dataclass(frozen=True)
class OpportunityMetrics:
    """Pipeline totals and win rate for a user."""

    total_open_value: Decimal
    total_won_value: Decimal
    total_lost_value: Decimal
    open_count: int
    won_count: int
    lost_count: int
    win_rate: Decimal
    average_deal_size: Decimal
