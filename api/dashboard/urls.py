"""
URL configuration for dashboard endpoints.
"""

from django.urls import path

from api.dashboard import views

urlpatterns = [
    path("dashboard/stats", views.DashboardStatsView.as_view(), name="dashboard-stats"),
    path("sales/data", views.SalesDataView.as_view(), name="sales-data"),
]
