"""
Input coercion shared by the services.

Route handlers may pass raw strings; these helpers turn them into domain
values and raise ``ValidationError`` for anything malformed.
"""

import uuid
from datetime import date, datetime
from datetime import timezone as dt_timezone
from enum import Enum
from typing import Optional, Type, TypeVar

from django.utils import timezone
from django.utils.dateparse import parse_datetime as django_parse_datetime

from core.domain.exceptions import ValidationError

E = TypeVar("E", bound=Enum)


def parse_uuid(value, field: str = "id") -> Optional[uuid.UUID]:
    if value in (None, ""):
        return None
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError as exc:
        raise ValidationError(f"Invalid {field}: {value}") from exc


def parse_date(value) -> Optional[date]:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError as exc:
        raise ValidationError(f"Invalid date: {value}") from exc


def parse_datetime(value) -> Optional[datetime]:
    """Parse an ISO timestamp; naive values are taken as UTC."""
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        try:
            parsed = django_parse_datetime(str(value))
        except ValueError as exc:
            raise ValidationError(f"Invalid datetime: {value}") from exc
        if parsed is None:
            day = parse_date(value)
            parsed = datetime(day.year, day.month, day.day)
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, dt_timezone.utc)
    return parsed


def parse_enum(enum_cls: Type[E], value, label: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError as exc:
        raise ValidationError(f"Invalid {label}: {value}") from exc
