from billing.infrastructure.models import Payment, ProcessedWebhookEvent  # noqa: F401
