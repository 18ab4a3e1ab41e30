"""
URL configuration for customer endpoints.
"""

from django.urls import path

from api.customers import views

urlpatterns = [
    path("customers", views.CustomerListView.as_view(), name="customers"),
    path("customers/crear", views.CustomerCreateView.as_view(), name="customer-create"),
    path("customers/<uuid:customer_id>", views.CustomerDetailView.as_view(), name="customer-detail"),
]
