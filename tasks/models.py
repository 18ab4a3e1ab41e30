from tasks.infrastructure.models import Task  # noqa: F401
