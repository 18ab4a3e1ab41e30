from clients.infrastructure.models import Client  # noqa: F401
