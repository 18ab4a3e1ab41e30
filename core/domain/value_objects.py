"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
import re
from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.

    Value objects are immutable and compared by value.
    """

    def __eq__(self, other):
        """Compare value objects by their attributes."""
        if not isinstance(other, self.__class__):
            return False
        return self.__dict__ == other.__dict__

    def __hash__(self):
        """Make value objects hashable."""
        return hash(tuple(sorted(self.__dict__.items())))


@dataclass(frozen=True)
class Email(ValueObject):
    """Email value object with validation."""

    value: str

    def __post_init__(self):
        """Validate email format and normalise case."""
        if not self.value or not EMAIL_PATTERN.match(self.value.strip()):
            raise ValueError(f"Invalid email address: {self.value}")
        object.__setattr__(self, "value", self.value.strip().lower())

    @staticmethod
    def is_valid(value: Optional[str]) -> bool:
        """Check an address without raising."""
        return bool(value) and bool(EMAIL_PATTERN.match(value.strip()))

    def __str__(self) -> str:
        """Return email as string."""
        return self.value


class UserRole(Enum):
    """System roles: admins can write, staff can only read."""

    ADMIN = "admin"
    STAFF = "staff"

    def __str__(self) -> str:
        return self.value


class LicenseType(Enum):
    """License type value object."""

    ONE_TIME = "licencia_unica"
    SUBSCRIPTION = "suscripcion"

    def __str__(self) -> str:
        return self.value

    @property
    def payment_type(self) -> str:
        """Payment-provider flavour for this license type."""
        return "one_time" if self is LicenseType.ONE_TIME else "subscription"


class LicenseStatus(Enum):
    """License status value object."""

    ACTIVE = "activa"
    INACTIVE = "inactiva"
    PENDING_PAYMENT = "pendiente_pago"

    def __str__(self) -> str:
        return self.value


class ContactType(Enum):
    """Kind of CRM contact."""

    LEAD = "lead"
    CUSTOMER = "customer"
    PARTNER = "partner"
    SUPPLIER = "supplier"
    OTHER = "other"

    def __str__(self) -> str:
        return self.value


class ContactStatus(Enum):
    """Lifecycle status of a CRM contact."""

    NEW = "new"
    CONTACTED = "contacted"
    QUALIFIED = "qualified"
    ACTIVE = "active"
    INACTIVE = "inactive"
    LOST = "lost"

    def __str__(self) -> str:
        return self.value


class OpportunityStatus(Enum):
    """Outcome of a sales-pipeline deal."""

    OPEN = "open"
    WON = "won"
    LOST = "lost"

    def __str__(self) -> str:
        return self.value


class TaskStatus(Enum):
    """Task status value object."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    def __str__(self) -> str:
        return self.value


class TaskPriority(Enum):
    """Task priority value object."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

    def __str__(self) -> str:
        return self.value


class SalesInterval(Enum):
    """Time windows offered by the sales chart."""

    LAST_7_DAYS = "7d"
    LAST_30_DAYS = "30d"
    LAST_3_MONTHS = "3m"
    LAST_6_MONTHS = "6m"
    LAST_12_MONTHS = "12m"

    def __str__(self) -> str:
        return self.value

    @property
    def is_daily(self) -> bool:
        """Whether the interval is bucketed by day rather than by month."""
        return self.value.endswith("d")

    @property
    def size(self) -> int:
        """Number of buckets in the interval."""
        return int(self.value[:-1])


ROLE_LABELS: Dict[UserRole, str] = {
    UserRole.ADMIN: "Administrador",
    UserRole.STAFF: "Personal",
}

LICENSE_TYPE_LABELS: Dict[LicenseType, str] = {
    LicenseType.ONE_TIME: "Licencia Única",
    LicenseType.SUBSCRIPTION: "Suscripción",
}

LICENSE_STATUS_LABELS: Dict[LicenseStatus, str] = {
    LicenseStatus.ACTIVE: "Activa",
    LicenseStatus.INACTIVE: "Inactiva",
    LicenseStatus.PENDING_PAYMENT: "Pendiente de Pago",
}

LICENSE_STATUS_COLORS: Dict[LicenseStatus, str] = {
    LicenseStatus.ACTIVE: "green",
    LicenseStatus.INACTIVE: "gray",
    LicenseStatus.PENDING_PAYMENT: "yellow",
}

# Form values used by the Spanish UI mapped to stored contact statuses
SPANISH_CONTACT_STATUS: Dict[str, ContactStatus] = {
    "activo": ContactStatus.ACTIVE,
    "inactivo": ContactStatus.INACTIVE,
    "prospecto": ContactStatus.QUALIFIED,
    "lead": ContactStatus.NEW,
}


def translate_contact_status(estado: Optional[str], default: Optional[str] = None) -> Optional[str]:
    """
    Translate a Spanish contact status from the UI into the stored value.

    Args:
        estado: Value sent by the form or query string
        default: Value returned for unknown input (None keeps the input)

    Returns:
        English status value
    """
    if not estado:
        return default
    status = SPANISH_CONTACT_STATUS.get(estado.strip().lower())
    if status:
        return status.value
    return default if default is not None else estado
