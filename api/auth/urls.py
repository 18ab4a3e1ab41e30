"""
URL configuration for auth API endpoints.
"""

from django.urls import path

from api.auth import views

urlpatterns = [
    path("login", views.LoginView.as_view(), name="login"),
    path("logout", views.LogoutView.as_view(), name="logout"),
    path("me", views.MeView.as_view(), name="current-user"),
    path("users", views.UsersView.as_view(), name="users"),
]
