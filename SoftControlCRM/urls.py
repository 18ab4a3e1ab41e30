"""
URL configuration for SoftControlCRM.

Everything under ``/api/`` needs a session except the paths listed in
``CRM_PUBLIC_PATHS``.
"""
from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from core.views import HealthView, MetricsView, ReadyView

urlpatterns = [
    path("admin/", admin.site.urls),
    path("health/", HealthView.as_view(), name="health"),
    path("ready/", ReadyView.as_view(), name="ready"),
    path("metrics", MetricsView.as_view(), name="metrics"),
    path("api/auth/", include("api.auth.urls")),
    path("api/stripe/", include("api.billing.urls")),
    path("api/", include("api.customers.urls")),
    path("api/", include("api.catalog.urls")),
    path("api/", include("api.crm.urls")),
    path("api/", include("api.dashboard.urls")),
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
]
