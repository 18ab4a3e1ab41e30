"""
Auth API views.

Login and logout answer with redirects for the HTML login form; the other
endpoints are JSON.
"""

from asgiref.sync import async_to_sync
from django.conf import settings
from django.http import HttpResponseRedirect
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.application.services.auth_service import MISSING_PROFILE, AuthService
from accounts.infrastructure.repositories.django_profile_repository import DjangoProfileRepository
from api.auth.serializers import (
    LoginRequestSerializer,
    ProfileSerializer,
    SignUpRequestSerializer,
    UpdateProfileRequestSerializer,
)
from api.permissions import IsAdminOrReadOnly, IsSignedIn
from api.responses import envelope_response, user_id_of
from core.instrumentation import get_tracer

_profile_repo = DjangoProfileRepository()

tracer = get_tracer(__name__)


def _login_error(reason: str) -> HttpResponseRedirect:
    return HttpResponseRedirect(f"{settings.CRM_LOGIN_URL}?error={reason}")


class LoginView(APIView):
    """Session login from the login form."""

    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="login",
        summary="Log in",
        description=(
            "Log in with `email` and `password` (form or JSON). Redirects to the "
            "dashboard, or back to the login page with `?error=invalid` or "
            "`?error=unauthorized`."
        ),
        tags=["Auth"],
        request=LoginRequestSerializer,
        responses={302: {"description": "Redirect"}},
    )
    def post(self, request: Request):
        return async_to_sync(self._handle_login)(request)

    async def _handle_login(self, request: Request):
        with tracer.start_as_current_span("login") as span:
            serializer = LoginRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return _login_error("invalid")
            data = serializer.validated_data

            result = await AuthService(_profile_repo).sign_in(
                request._request, data.get("email"), data.get("password")
            )
            if not result.success:
                span.set_attribute("login.outcome", result.error_code)
                if result.error_code == MISSING_PROFILE:
                    return _login_error("unauthorized")
                return _login_error("invalid")

            span.set_attribute("login.outcome", "success")
            return HttpResponseRedirect(settings.CRM_LOGIN_REDIRECT_URL)


class LogoutView(APIView):
    """Session logout; always ends on the login page."""

    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="logout",
        summary="Log out",
        tags=["Auth"],
        request=None,
        responses={302: {"description": "Redirect to the login page"}},
    )
    def post(self, request: Request):
        async_to_sync(AuthService(_profile_repo).sign_out)(request._request)
        return HttpResponseRedirect(settings.CRM_LOGIN_URL)


class MeView(APIView):
    """Profile of the signed-in user."""

    permission_classes = [IsSignedIn]

    @extend_schema(
        operation_id="current_user",
        summary="Current user",
        tags=["Auth"],
        responses={200: ProfileSerializer, 401: {"description": "Not authenticated"}},
    )
    def get(self, request: Request) -> Response:
        profile = async_to_sync(AuthService(_profile_repo).get_current_profile)(request._request)
        if profile is None:
            return Response(
                {"success": False, "error": "User has no profile", "code": "NOT_AUTHENTICATED"},
                status=status.HTTP_401_UNAUTHORIZED,
            )
        return Response({"success": True, "data": ProfileSerializer(profile).data})

    @extend_schema(
        operation_id="update_current_user",
        summary="Update display name",
        tags=["Auth"],
        request=UpdateProfileRequestSerializer,
        responses={200: ProfileSerializer},
    )
    def patch(self, request: Request) -> Response:
        serializer = UpdateProfileRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = async_to_sync(AuthService(_profile_repo).update_profile)(
            user_id_of(request), serializer.validated_data["full_name"]
        )
        return envelope_response(result, ProfileSerializer)


class UsersView(APIView):
    """User listing and admin sign-up."""

    permission_classes = [IsAdminOrReadOnly]

    @extend_schema(
        operation_id="list_users",
        summary="List users",
        tags=["Auth"],
        responses={200: ProfileSerializer(many=True)},
    )
    def get(self, request: Request) -> Response:
        result = async_to_sync(AuthService(_profile_repo).list_profiles)()
        return envelope_response(result, ProfileSerializer, many=True)

    @extend_schema(
        operation_id="create_user",
        summary="Create user",
        description="Create a user with its profile. Admin only.",
        tags=["Auth"],
        request=SignUpRequestSerializer,
        responses={201: ProfileSerializer, 400: {"description": "Bad Request"}, 409: {"description": "Duplicate email"}},
    )
    def post(self, request: Request) -> Response:
        return async_to_sync(self._handle_sign_up)(request)

    async def _handle_sign_up(self, request: Request) -> Response:
        with tracer.start_as_current_span("create_user") as span:
            serializer = SignUpRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            data = serializer.validated_data
            result = await AuthService(_profile_repo).sign_up(
                data["email"], data["password"], data["full_name"], data["role"]
            )
            return envelope_response(result, ProfileSerializer, success_status=status.HTTP_201_CREATED, span=span)
