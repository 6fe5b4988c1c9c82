"""
URL configuration for the payments app, included under ``/api/payments/``.
"""
from django.urls import path

from .views import PricingPlanListView, SubscriptionCheckoutView
from .webhooks import FedaPayWebhookView

urlpatterns = [
    path("plans/", PricingPlanListView.as_view(), name="pricing-plans"),
    path("subscriptions/", SubscriptionCheckoutView.as_view(), name="subscription-checkout"),
    path("webhook/", FedaPayWebhookView.as_view(), name="fedapay-webhook"),
]
