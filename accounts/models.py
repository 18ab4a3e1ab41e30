from accounts.infrastructure.models import Profile  # noqa: F401
