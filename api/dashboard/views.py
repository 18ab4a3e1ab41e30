"""
Dashboard counters and sales chart views.
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.dashboard.serializers import DashboardStatsSerializer, SalesChartSerializer
from api.responses import envelope_response
from billing.infrastructure.repositories.django_payment_repository import DjangoPaymentRepository
from clients.infrastructure.repositories.django_client_repository import DjangoClientRepository
from core.infrastructure.cache_adapters import cache_adapter
from core.instrumentation import get_tracer
from dashboard.application.services.dashboard_service import DashboardService
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from products.infrastructure.repositories.django_product_repository import DjangoProductRepository

tracer = get_tracer(__name__)


def _dashboard_service() -> DashboardService:
    return DashboardService(
        client_repository=DjangoClientRepository(),
        product_repository=DjangoProductRepository(),
        license_repository=DjangoLicenseRepository(),
        payment_repository=DjangoPaymentRepository(),
        cache=cache_adapter,
    )


class DashboardStatsView(APIView):
    @extend_schema(
        operation_id="dashboard_stats",
        summary="Dashboard counters",
        tags=["Dashboard"],
        responses={200: DashboardStatsSerializer},
    )
    def get(self, request: Request) -> Response:
        return envelope_response(async_to_sync(_dashboard_service().get_stats)(), DashboardStatsSerializer)


class SalesDataView(APIView):
    """Sales chart for the dashboard."""

    @extend_schema(
        operation_id="sales_data",
        summary="Sales chart",
        description="Daily buckets for 7d and 30d, monthly buckets for 3m, 6m and 12m.",
        tags=["Dashboard"],
        parameters=[OpenApiParameter("interval", str, description="7d, 30d, 3m, 6m (default) or 12m")],
        responses={200: SalesChartSerializer, 400: {"description": "Invalid interval"}},
    )
    def get(self, request: Request) -> Response:
        return async_to_sync(self._handle_sales)(request)

    async def _handle_sales(self, request: Request) -> Response:
        with tracer.start_as_current_span("sales_data") as span:
            interval = request.query_params.get("interval")
            span.set_attribute("sales.interval", interval or "default")
            result = await _dashboard_service().get_sales_data(interval)
            return envelope_response(result, SalesChartSerializer, span=span)
