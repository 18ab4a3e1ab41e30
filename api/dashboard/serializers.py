"""
Serializers for dashboard endpoints.
"""

from rest_framework import serializers


class DashboardStatsSerializer(serializers.Serializer):
    total_clients = serializers.IntegerField()
    total_products = serializers.IntegerField()
    total_licenses = serializers.IntegerField()
    active_licenses = serializers.IntegerField()
    inactive_licenses = serializers.IntegerField()
    pending_payment_licenses = serializers.IntegerField()
    expired_licenses = serializers.IntegerField()


class SalesChartSerializer(serializers.Serializer):
    """Chart series; ``values`` and ``counts`` line up with ``labels``."""

    interval = serializers.CharField()
    granularity = serializers.CharField()
    labels = serializers.ListField(child=serializers.CharField())
    values = serializers.ListField(child=serializers.DecimalField(max_digits=14, decimal_places=2))
    counts = serializers.ListField(child=serializers.IntegerField())
    total = serializers.DecimalField(max_digits=14, decimal_places=2)
    count = serializers.IntegerField()
