"""
URL configuration for client, product and license endpoints.
"""

from django.urls import path

from api.catalog import views

urlpatterns = [
    path("clients", views.ClientListView.as_view(), name="clients"),
    path("clients/<uuid:client_id>", views.ClientDetailView.as_view(), name="client-detail"),
    path("products", views.ProductListView.as_view(), name="products"),
    path("products/<uuid:product_id>", views.ProductDetailView.as_view(), name="product-detail"),
    path("licenses", views.LicenseListView.as_view(), name="licenses"),
    path("licenses/counts", views.LicenseCountsView.as_view(), name="license-counts"),
    path("licenses/<uuid:license_id>", views.LicenseDetailView.as_view(), name="license-detail"),
    path(
        "licenses/<uuid:license_id>/status",
        views.LicenseStatusView.as_view(),
        name="license-status",
    ),
]
