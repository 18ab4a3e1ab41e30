"""
Service result envelope.

Every application service answers with a ``ServiceResult``: ``success`` plus
either ``data`` or ``error``. Route handlers turn the envelope into an HTTP
response; nothing below the API layer raises to its caller.
"""

import functools
import logging
import math
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Generic, Optional, TypeVar

from django.db import DatabaseError

from core.domain.exceptions import DomainException, ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")

UNEXPECTED_ERROR = "Unexpected error"


@dataclass(frozen=True)
class Pagination:
    """Page window of a list query."""

    total: int
    page: int
    per_page: int
    total_pages: int

    @classmethod
    def build(cls, total: int, page: int, per_page: int) -> "Pagination":
        """Build pagination info for ``total`` rows split in ``per_page`` pages."""
        total_pages = math.ceil(total / per_page) if per_page else 0
        return cls(total=total, page=page, per_page=per_page, total_pages=total_pages)

    @property
    def has_more(self) -> bool:
        """Whether pages remain after the current one."""
        return self.page < self.total_pages

    @staticmethod
    def bounds(page: int, per_page: int):
        """
        Row range covered by a page.

        Returns:
            Tuple ``(start, end)`` with ``end`` inclusive
        """
        start = (page - 1) * per_page
        return start, start + per_page - 1


@dataclass
class ServiceResult(Generic[T]):
    """The ``{success, data, error}`` envelope returned by services."""

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    message: Optional[str] = None
    pagination: Optional[Pagination] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(
        cls,
        data: Optional[T] = None,
        message: Optional[str] = None,
        pagination: Optional[Pagination] = None,
        **extra: Any,
    ) -> "ServiceResult[T]":
        """Successful result."""
        return cls(success=True, data=data, message=message, pagination=pagination, extra=extra)

    @classmethod
    def fail(
        cls,
        error: str,
        code: Optional[str] = None,
        data: Optional[T] = None,
        **extra: Any,
    ) -> "ServiceResult[T]":
        """Failed result; ``data`` keeps the empty value callers expect."""
        return cls(success=False, data=data, error=error, error_code=code, extra=extra)

    def to_dict(self) -> Dict[str, Any]:
        """Plain dictionary form, used for logging and task results."""
        payload: Dict[str, Any] = {"success": self.success}
        if self.success:
            payload["data"] = self.data
            if self.message:
                payload["message"] = self.message
        else:
            payload["error"] = self.error
        payload.update(self.extra)
        return payload


def service_operation(action: str, empty: Callable[[], Any] = lambda: None):
    """
    Wrap an async service method so failures come back as envelopes.

    Domain exceptions keep their message and code. Database errors are
    logged with a traceback and reported as ``DATABASE_ERROR``.

    Args:
        action: Human readable operation name used in log lines
        empty: Factory for the ``data`` value of a failed result
    """

    def decorator(func: Callable[..., Awaitable[ServiceResult]]):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> ServiceResult:
            try:
                return await func(*args, **kwargs)
            except DomainException as exc:
                logger.warning("%s failed: %s - %s", action, exc.code, exc.message)
                return ServiceResult.fail(exc.message, code=exc.code, data=empty())
            except DatabaseError as exc:
                logger.error("%s failed: %s", action, exc, exc_info=True)
                return ServiceResult.fail(str(exc) or UNEXPECTED_ERROR, code="DATABASE_ERROR", data=empty())

        return wrapper

    return decorator


@contextmanager
def validating():
    """Turn entity ``ValueError``s raised inside the block into ``ValidationError``."""
    try:
        yield
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc
