"""
Payment gateway port (interface).

The hosted checkout provider as the billing services see it.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict

from billing.domain.payment import CheckoutRequest, CheckoutSession
from billing.domain.webhook import WebhookEvent


class PaymentGateway(ABC):
    """
    Abstract payment provider.

    Implementations raise ``PaymentGatewayError`` when the provider rejects
    a request and ``WebhookVerificationError`` for payloads that fail
    signature checks.
    """

    @abstractmethod
    async def create_checkout_session(self, request: CheckoutRequest) -> CheckoutSession:
        """
        Open a hosted checkout.

        Args:
            request: Line item, customer email and return URLs

        Returns:
            CheckoutSession with the session id and redirect URL
        """
        pass

    @abstractmethod
    async def retrieve_checkout_session(self, session_id: str) -> Dict[str, Any]:
        """Fetch a checkout session as plain JSON."""
        pass

    @abstractmethod
    async def cancel_subscription(self, subscription_id: str) -> Dict[str, Any]:
        """Cancel a subscription immediately and return it as plain JSON."""
        pass

    @abstractmethod
    def construct_event(self, payload: bytes, signature: str, secret: str) -> WebhookEvent:
        """
        Verify a webhook signature and parse the event.

        Args:
            payload: Raw request body
            signature: ``Stripe-Signature`` header value
            secret: Webhook signing secret

        Returns:
            WebhookEvent
        """
        pass
