"""
Serializers for Stripe endpoints.
"""

from rest_framework import serializers


class CheckoutRequestSerializer(serializers.Serializer):
    licenseId = serializers.UUIDField(  # noqa: N815
        error_messages={"required": "licenseId is required", "null": "licenseId is required"},
    )


class CheckoutResponseSerializer(serializers.Serializer):
    sessionId = serializers.CharField()  # noqa: N815
    url = serializers.URLField()


class WebhookResponseSerializer(serializers.Serializer):
    received = serializers.BooleanField()
