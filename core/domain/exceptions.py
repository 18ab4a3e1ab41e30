"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions.
"""


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ValidationError(DomainException):
    """Raised when input data breaks a domain rule."""

    def __init__(self, message: str = "Invalid data"):
        super().__init__(message, code="VALIDATION_ERROR")


class DuplicateEmailError(DomainException):
    """Raised when an email address is already registered."""

    def __init__(self, message: str = "A record with this email already exists"):
        super().__init__(message, code="DUPLICATE_EMAIL")


class NotAuthenticatedError(DomainException):
    """Raised when an operation needs a signed-in user."""

    def __init__(self, message: str = "User not authenticated"):
        super().__init__(message, code="NOT_AUTHENTICATED")


class PermissionDeniedError(DomainException):
    """Raised when the current role cannot perform an operation."""

    def __init__(self, message: str = "Permission denied"):
        super().__init__(message, code="PERMISSION_DENIED")


class NotFoundError(DomainException):
    """Base exception for missing records."""

    def __init__(self, message: str = "Resource not found", code: str = "NOT_FOUND"):
        super().__init__(message, code=code)


class ClientNotFoundError(NotFoundError):
    """Raised when a client is not found."""

    def __init__(self, message: str = "Client not found"):
        super().__init__(message, code="CLIENT_NOT_FOUND")


class ProductNotFoundError(NotFoundError):
    """Raised when a product is not found."""

    def __init__(self, message: str = "Product not found"):
        super().__init__(message, code="PRODUCT_NOT_FOUND")


class LicenseNotFoundError(NotFoundError):
    """Raised when a license is not found."""

    def __init__(self, message: str = "License not found"):
        super().__init__(message, code="LICENSE_NOT_FOUND")


class ContactNotFoundError(NotFoundError):
    """Raised when a contact is not found."""

    def __init__(self, message: str = "Contact not found"):
        super().__init__(message, code="CONTACT_NOT_FOUND")


class TagNotFoundError(NotFoundError):
    """Raised when a tag is not found."""

    def __init__(self, message: str = "Tag not found"):
        super().__init__(message, code="TAG_NOT_FOUND")


class OpportunityNotFoundError(NotFoundError):
    """Raised when an opportunity is not found."""

    def __init__(self, message: str = "Opportunity not found"):
        super().__init__(message, code="OPPORTUNITY_NOT_FOUND")


class PipelineNotFoundError(NotFoundError):
    """Raised when a pipeline or pipeline stage is not found."""

    def __init__(self, message: str = "Pipeline not found"):
        super().__init__(message, code="PIPELINE_NOT_FOUND")


class TaskNotFoundError(NotFoundError):
    """Raised when a task is not found."""

    def __init__(self, message: str = "Task not found"):
        super().__init__(message, code="TASK_NOT_FOUND")


class PaymentException(DomainException):
    """Base exception for payment-related errors."""

    pass


class InvalidPriceError(PaymentException):
    """Raised when a checkout amount is missing or not positive."""

    def __init__(self, message: str = "Invalid price"):
        super().__init__(message, code="INVALID_PRICE")


class PaymentGatewayError(PaymentException):
    """Raised when the payment provider rejects or fails a request."""

    def __init__(self, message: str = "Payment provider error"):
        super().__init__(message, code="PAYMENT_GATEWAY_ERROR")


class WebhookVerificationError(PaymentException):
    """Raised when a webhook payload cannot be verified."""

    def __init__(self, message: str = "Webhook verification failed"):
        super().__init__(message, code="WEBHOOK_VERIFICATION_FAILED")
