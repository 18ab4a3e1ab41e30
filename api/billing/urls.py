"""
URL configuration for Stripe endpoints.
"""

from django.urls import path

from api.billing import views

urlpatterns = [
    path("create-checkout", views.CreateCheckoutView.as_view(), name="stripe-create-checkout"),
    path("sessions/<str:session_id>", views.CheckoutSessionView.as_view(), name="stripe-session"),
    path(
        "subscriptions/<str:subscription_id>/cancel",
        views.CancelSubscriptionView.as_view(),
        name="stripe-cancel-subscription",
    ),
    path("webhook", views.StripeWebhookView.as_view(), name="stripe-webhook"),
]
