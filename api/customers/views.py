"""
Customer endpoints used by the Spanish UI forms.

Customers are contacts; these views translate the form vocabulary
(``nombre``, ``correo_electronico``, ``estado``...) to contact fields.
"""

import uuid

from asgiref.sync import async_to_sync
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.crm.serializers import ContactSerializer
from api.customers.serializers import CustomerRequestSerializer, CustomerUpdateRequestSerializer
from api.responses import envelope_response, user_id_of
from contacts.application.services.contact_service import ContactService
from contacts.infrastructure.repositories.django_contact_repository import DjangoContactRepository
from contacts.infrastructure.repositories.django_interaction_repository import (
    DjangoInteractionRepository,
)
from contacts.infrastructure.repositories.django_tag_repository import DjangoTagRepository
from core.domain.value_objects import ContactType, translate_contact_status
from core.infrastructure.events import event_bus
from core.instrumentation import get_tracer
from opportunities.infrastructure.repositories.django_opportunity_repository import (
    DjangoOpportunityRepository,
)
from tasks.infrastructure.repositories.django_task_repository import DjangoTaskRepository

tracer = get_tracer(__name__)


def _contact_service() -> ContactService:
    return ContactService(
        contact_repository=DjangoContactRepository(),
        tag_repository=DjangoTagRepository(),
        interaction_repository=DjangoInteractionRepository(),
        opportunity_repository=DjangoOpportunityRepository(),
        task_repository=DjangoTaskRepository(),
        event_bus=event_bus,
    )


def _validation_error(serializer) -> Response:
    field, errors = next(iter(serializer.errors.items()))
    return Response(
        {"success": False, "error": str(errors[0]), "code": "VALIDATION_ERROR", "field": field},
        status=status.HTTP_400_BAD_REQUEST,
    )


class CustomerListView(APIView):
    """Paginated customer list with optional search."""

    @extend_schema(
        operation_id="list_customers",
        summary="List customers",
        tags=["Customers"],
        parameters=[
            OpenApiParameter("page", int),
            OpenApiParameter("limite", int, description="Page size"),
            OpenApiParameter("busqueda", str, description="Free-text search; disables paging"),
            OpenApiParameter("estado", str, description="activo, inactivo, prospecto, lead or a raw status"),
            OpenApiParameter("tipo", str, description="Contact type"),
        ],
        responses={200: ContactSerializer(many=True)},
    )
    def get(self, request: Request) -> Response:
        return async_to_sync(self._handle_list)(request)

    async def _handle_list(self, request: Request) -> Response:
        with tracer.start_as_current_span("list_customers") as span:
            params = request.query_params
            busqueda = (params.get("busqueda") or "").strip()
            if busqueda:
                span.set_attribute("customers.search", True)
                result = await _contact_service().search_contacts(busqueda)
                if not result.success:
                    return envelope_response(result, span=span)
                data = ContactSerializer(result.data, many=True).data
                return Response(
                    {
                        "success": True,
                        "data": data,
                        "total": len(data),
                        "page": 1,
                        "limite": len(data),
                        "tiene_mas": False,
                    }
                )

            filters = {"page": params.get("page"), "per_page": params.get("limite")}
            if params.get("estado"):
                filters["status"] = translate_contact_status(params["estado"])
            if params.get("tipo"):
                filters["contact_type"] = params["tipo"]
            result = await _contact_service().get_contacts(filters)
            if not result.success:
                return envelope_response(result, span=span)

            pagination = result.pagination
            span.set_attribute("customers.total", pagination.total)
            return Response(
                {
                    "success": True,
                    "data": ContactSerializer(result.data, many=True).data,
                    "total": pagination.total,
                    "page": pagination.page,
                    "limite": pagination.per_page,
                    "tiene_mas": pagination.has_more,
                }
            )


class CustomerCreateView(APIView):
    @extend_schema(
        operation_id="create_customer",
        summary="Create customer",
        description="JSON body only. The contact is stored as a manual customer.",
        tags=["Customers"],
        request=CustomerRequestSerializer,
        responses={
            201: ContactSerializer,
            400: {"description": "Bad Request"},
            409: {"description": "Email already in use"},
        },
    )
    def post(self, request: Request) -> Response:
        if "application/json" not in (request.content_type or ""):
            return Response(
                {"success": False, "error": "Content-Type debe ser application/json", "code": "VALIDATION_ERROR"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        serializer = CustomerRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return _validation_error(serializer)

        data = serializer.to_contact_data()
        data["contact_type"] = ContactType.CUSTOMER.value
        data["source"] = "manual"
        data["status"] = translate_contact_status(serializer.validated_data.get("estado"), "active")
        result = async_to_sync(_contact_service().create_contact)(data, user_id_of(request))
        if result.success:
            result.message = "Cliente creado exitosamente"
        return envelope_response(result, ContactSerializer, success_status=status.HTTP_201_CREATED)


class CustomerDetailView(APIView):
    @extend_schema(
        operation_id="get_customer",
        summary="Get customer",
        tags=["Customers"],
        responses={200: ContactSerializer, 404: {"description": "Not Found"}},
    )
    def get(self, request: Request, customer_id: uuid.UUID) -> Response:
        result = async_to_sync(_contact_service().get_contact_by_id)(customer_id)
        return envelope_response(result, ContactSerializer)

    @extend_schema(
        operation_id="update_customer",
        summary="Update customer",
        tags=["Customers"],
        request=CustomerUpdateRequestSerializer,
        responses={200: ContactSerializer, 404: {"description": "Not Found"}},
    )
    def put(self, request: Request, customer_id: uuid.UUID) -> Response:
        serializer = CustomerUpdateRequestSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return _validation_error(serializer)
        data = serializer.to_contact_data()
        if serializer.validated_data.get("estado"):
            data["status"] = translate_contact_status(serializer.validated_data["estado"])
        result = async_to_sync(_contact_service().update_contact)(customer_id, data)
        if result.success:
            result.message = "Cliente actualizado exitosamente"
        return envelope_response(result, ContactSerializer)

    @extend_schema(operation_id="delete_customer", summary="Delete customer", tags=["Customers"], responses={200: None})
    def delete(self, request: Request, customer_id: uuid.UUID) -> Response:
        result = async_to_sync(_contact_service().delete_contact)(customer_id)
        if result.success:
            result.message = "Cliente eliminado exitosamente"
        return envelope_response(result)
