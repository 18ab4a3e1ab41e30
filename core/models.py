from core.infrastructure.models import AuditLog  # noqa: F401
