"""
Unit tests for the service result envelope.
"""
import pytest
from django.db import DatabaseError

from core.application.result import Pagination, ServiceResult, service_operation, validating
from core.domain.exceptions import ContactNotFoundError, ValidationError


class TestPagination:
    def test_build(self):
        pagination = Pagination.build(total=101, page=2, per_page=50)
        assert pagination.total_pages == 3
        assert pagination.has_more is True

    def test_last_page_has_no_more(self):
        assert Pagination.build(total=100, page=2, per_page=50).has_more is False

    def test_empty(self):
        pagination = Pagination.build(total=0, page=1, per_page=50)
        assert pagination.total_pages == 0
        assert pagination.has_more is False

    def test_bounds(self):
        assert Pagination.bounds(3, 20) == (40, 59)


class TestServiceResult:
    def test_ok_keeps_extra_fields(self):
        result = ServiceResult.ok([1, 2], message="2 contacts imported", imported=2)
        assert result.success is True
        assert result.to_dict() == {
            "success": True,
            "data": [1, 2],
            "message": "2 contacts imported",
            "imported": 2,
        }

    def test_fail(self):
        result = ServiceResult.fail("boom", code="VALIDATION_ERROR", data=[])
        assert result.success is False
        assert result.data == []
        assert result.to_dict() == {"success": False, "error": "boom"}


@pytest.mark.asyncio
class TestServiceOperation:
    """Exceptions raised by a service method come back as failed envelopes."""

    async def test_domain_exception(self):
        @service_operation("get contact")
        async def operation():
            raise ContactNotFoundError("Contact 1 not found")

        result = await operation()
        assert result.success is False
        assert result.error == "Contact 1 not found"
        assert result.error_code == "CONTACT_NOT_FOUND"

    async def test_database_error(self):
        @service_operation("list contacts", empty=list)
        async def operation():
            raise DatabaseError("connection lost")

        result = await operation()
        assert result.error_code == "DATABASE_ERROR"
        assert result.data == []

    async def test_other_exceptions_propagate(self):
        @service_operation("explode")
        async def operation():
            raise RuntimeError("bug")

        with pytest.raises(RuntimeError):
            await operation()


def test_validating_turns_value_error_into_validation_error():
    with pytest.raises(ValidationError, match="Score must be"):
        with validating():
            raise ValueError("Score must be between 0 and 100")
