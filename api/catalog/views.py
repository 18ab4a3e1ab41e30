"""
Client, product and license API views.

Reads are open to every signed-in user; writes need the admin role.
"""

import uuid

from asgiref.sync import async_to_sync
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.catalog.serializers import (
    ClientRequestSerializer,
    ClientSerializer,
    ClientUpdateRequestSerializer,
    ClientWithLicensesSerializer,
    LicenseFullSerializer,
    LicenseRequestSerializer,
    LicenseSerializer,
    LicenseStatusRequestSerializer,
    LicenseUpdateRequestSerializer,
    ProductRequestSerializer,
    ProductSerializer,
    ProductUpdateRequestSerializer,
)
from api.responses import actor_of, envelope_response, user_id_of
from clients.application.services.client_service import ClientService
from clients.infrastructure.repositories.django_client_repository import DjangoClientRepository
from core.application.parsing import parse_enum, parse_uuid
from core.domain.value_objects import LicenseStatus, LicenseType
from core.infrastructure.events import event_bus
from core.instrumentation import get_tracer
from licenses.application.services.license_service import LicenseService
from licenses.domain.license import LicenseFilters
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from products.application.services.product_service import ProductService
from products.infrastructure.repositories.django_product_repository import DjangoProductRepository

_client_repo = DjangoClientRepository()
_product_repo = DjangoProductRepository()
_license_repo = DjangoLicenseRepository()

tracer = get_tracer(__name__)


def _client_service() -> ClientService:
    return ClientService(
        client_repository=_client_repo,
        license_repository=_license_repo,
        event_bus=event_bus,
    )


def _product_service() -> ProductService:
    return ProductService(product_repository=_product_repo, event_bus=event_bus)


def _license_service() -> LicenseService:
    return LicenseService(
        license_repository=_license_repo,
        client_repository=_client_repo,
        product_repository=_product_repo,
        event_bus=event_bus,
    )


class ClientListView(APIView):
    """List, search and create clients."""

    @extend_schema(
        operation_id="list_clients",
        summary="List clients",
        tags=["CRM"],
        parameters=[OpenApiParameter("q", str, description="Search by name, email or company")],
        responses={200: ClientSerializer(many=True)},
    )
    def get(self, request: Request) -> Response:
        query = request.query_params.get("q")
        result = async_to_sync(_client_service().search)(query or "")
        return envelope_response(result, ClientSerializer, many=True)

    @extend_schema(
        operation_id="create_client",
        summary="Create client",
        tags=["CRM"],
        request=ClientRequestSerializer,
        responses={201: ClientSerializer, 400: {"description": "Bad Request"}},
    )
    def post(self, request: Request) -> Response:
        serializer = ClientRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = async_to_sync(_client_service().create)(
            serializer.validated_data, user_id_of(request), actor=actor_of(request)
        )
        return envelope_response(result, ClientSerializer, success_status=status.HTTP_201_CREATED)


class ClientDetailView(APIView):
    """Single client with its licenses."""

    @extend_schema(
        operation_id="get_client",
        summary="Get client with licenses",
        tags=["CRM"],
        responses={200: ClientWithLicensesSerializer, 404: {"description": "Not Found"}},
    )
    def get(self, request: Request, client_id: uuid.UUID) -> Response:
        result = async_to_sync(_client_service().get_with_licenses)(client_id)
        return envelope_response(result, ClientWithLicensesSerializer)

    @extend_schema(
        operation_id="update_client",
        summary="Update client",
        tags=["CRM"],
        request=ClientUpdateRequestSerializer,
        responses={200: ClientSerializer, 404: {"description": "Not Found"}},
    )
    def put(self, request: Request, client_id: uuid.UUID) -> Response:
        serializer = ClientUpdateRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = async_to_sync(_client_service().update)(client_id, serializer.validated_data)
        return envelope_response(result, ClientSerializer)

    @extend_schema(operation_id="delete_client", summary="Delete client", tags=["CRM"], responses={200: None})
    def delete(self, request: Request, client_id: uuid.UUID) -> Response:
        return envelope_response(async_to_sync(_client_service().delete)(client_id, actor=actor_of(request)))


class ProductListView(APIView):
    """List, search and create products."""

    @extend_schema(
        operation_id="list_products",
        summary="List products",
        tags=["CRM"],
        parameters=[OpenApiParameter("q", str, description="Search by name or description")],
        responses={200: ProductSerializer(many=True)},
    )
    def get(self, request: Request) -> Response:
        query = request.query_params.get("q")
        result = async_to_sync(_product_service().search)(query or "")
        return envelope_response(result, ProductSerializer, many=True)

    @extend_schema(
        operation_id="create_product",
        summary="Create product",
        tags=["CRM"],
        request=ProductRequestSerializer,
        responses={201: ProductSerializer, 400: {"description": "Bad Request"}},
    )
    def post(self, request: Request) -> Response:
        serializer = ProductRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = async_to_sync(_product_service().create)(serializer.validated_data, actor=actor_of(request))
        return envelope_response(result, ProductSerializer, success_status=status.HTTP_201_CREATED)


class ProductDetailView(APIView):
    @extend_schema(
        operation_id="get_product",
        summary="Get product",
        tags=["CRM"],
        responses={200: ProductSerializer, 404: {"description": "Not Found"}},
    )
    def get(self, request: Request, product_id: uuid.UUID) -> Response:
        return envelope_response(async_to_sync(_product_service().get_by_id)(product_id), ProductSerializer)

    @extend_schema(
        operation_id="update_product",
        summary="Update product",
        tags=["CRM"],
        request=ProductUpdateRequestSerializer,
        responses={200: ProductSerializer, 404: {"description": "Not Found"}},
    )
    def put(self, request: Request, product_id: uuid.UUID) -> Response:
        serializer = ProductUpdateRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = async_to_sync(_product_service().update)(product_id, serializer.validated_data)
        return envelope_response(result, ProductSerializer)

    @extend_schema(operation_id="delete_product", summary="Delete product", tags=["CRM"], responses={200: None})
    def delete(self, request: Request, product_id: uuid.UUID) -> Response:
        return envelope_response(async_to_sync(_product_service().delete)(product_id, actor=actor_of(request)))


class LicenseListView(APIView):
    """List and create licenses."""

    @extend_schema(
        operation_id="list_licenses",
        summary="List licenses",
        description="Licenses joined with their client and product, newest first.",
        tags=["CRM"],
        parameters=[
            OpenApiParameter("status", str, description="activa, inactiva or pendiente_pago"),
            OpenApiParameter("type", str, description="licencia_unica or suscripcion"),
            OpenApiParameter("client_id", str),
            OpenApiParameter("product_id", str),
            OpenApiParameter("expired", bool),
        ],
        responses={200: LicenseFullSerializer(many=True)},
    )
    def get(self, request: Request) -> Response:
        return async_to_sync(self._handle_list)(request)

    async def _handle_list(self, request: Request) -> Response:
        with tracer.start_as_current_span("list_licenses") as span:
            params = request.query_params
            expired = params.get("expired")
            filters = LicenseFilters(
                status=parse_enum(LicenseStatus, params["status"], "license status") if params.get("status") else None,
                type=parse_enum(LicenseType, params["type"], "license type") if params.get("type") else None,
                client_id=parse_uuid(params.get("client_id"), "client_id"),
                product_id=parse_uuid(params.get("product_id"), "product_id"),
                expired=None if expired in (None, "") else expired.lower() in ("1", "true", "yes"),
            )
            result = await _license_service().get_filtered(filters)
            span.set_attribute("licenses.count", len(result.data or []))
            return envelope_response(result, LicenseFullSerializer, many=True, span=span)

    @extend_schema(
        operation_id="create_license",
        summary="Create license",
        tags=["CRM"],
        request=LicenseRequestSerializer,
        responses={201: LicenseSerializer, 400: {"description": "Bad Request"}, 404: {"description": "Not Found"}},
    )
    def post(self, request: Request) -> Response:
        serializer = LicenseRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = async_to_sync(_license_service().create)(serializer.validated_data, actor=actor_of(request))
        return envelope_response(result, LicenseSerializer, success_status=status.HTTP_201_CREATED)


class LicenseCountsView(APIView):
    @extend_schema(
        operation_id="count_licenses",
        summary="License counts by status",
        tags=["CRM"],
        responses={200: {"type": "object", "additionalProperties": {"type": "integer"}}},
    )
    def get(self, request: Request) -> Response:
        return envelope_response(async_to_sync(_license_service().count_by_status)())


class LicenseDetailView(APIView):
    @extend_schema(
        operation_id="get_license",
        summary="Get license",
        tags=["CRM"],
        responses={200: LicenseFullSerializer, 404: {"description": "Not Found"}},
    )
    def get(self, request: Request, license_id: uuid.UUID) -> Response:
        result = async_to_sync(_license_service().get_full_by_id)(license_id)
        return envelope_response(result, LicenseFullSerializer)

    @extend_schema(
        operation_id="update_license",
        summary="Update license",
        tags=["CRM"],
        request=LicenseUpdateRequestSerializer,
        responses={200: LicenseSerializer, 404: {"description": "Not Found"}},
    )
    def put(self, request: Request, license_id: uuid.UUID) -> Response:
        serializer = LicenseUpdateRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = async_to_sync(_license_service().update)(
            license_id, serializer.validated_data, actor=actor_of(request)
        )
        return envelope_response(result, LicenseSerializer)

    @extend_schema(operation_id="delete_license", summary="Delete license", tags=["CRM"], responses={200: None})
    def delete(self, request: Request, license_id: uuid.UUID) -> Response:
        return envelope_response(async_to_sync(_license_service().delete)(license_id, actor=actor_of(request)))


class LicenseStatusView(APIView):
    """Change only the status of a license."""

    @extend_schema(
        operation_id="update_license_status",
        summary="Change license status",
        tags=["CRM"],
        request=LicenseStatusRequestSerializer,
        responses={200: LicenseSerializer, 400: {"description": "Bad Request"}, 404: {"description": "Not Found"}},
    )
    def patch(self, request: Request, license_id: uuid.UUID) -> Response:
        serializer = LicenseStatusRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = async_to_sync(_license_service().update_status)(
            license_id, serializer.validated_data["status"], actor=actor_of(request)
        )
        return envelope_response(result, LicenseSerializer)

