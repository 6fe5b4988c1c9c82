"""
Views for the payments app.

Lists the active subscription plans and starts a subscription purchase on
FedaPay.  The processor webhook lives in :mod:`payments.webhooks`.
"""
from __future__ import annotations

import logging

from rest_framework import generics, permissions, status, views
from rest_framework.response import Response

from .gateway import Customer, get_gateway
from .models import PricingPlan
from .serializers import PricingPlanSerializer, SubscriptionCheckoutSerializer

logger = logging.getLogger(__name__)


class PricingPlanListView(generics.ListAPIView):
    queryset = PricingPlan.objects.filter(is_active=True)
    serializer_class = PricingPlanSerializer
    permission_classes = [permissions.AllowAny]
    pagination_class = None


class SubscriptionCheckoutView(views.APIView):
    """Open a FedaPay transaction for a pricing plan and return its payment link."""

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        serializer = SubscriptionCheckoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        plan = serializer.validated_data["plan"]
        user = request.user

        gateway = get_gateway()
        txn_id = gateway.create_transaction(
            amount=plan.amount,
            description=f"Subscription #{plan.name}",
            callback_url=serializer.validated_data.get("callback_url") or None,
            customer=Customer(email=user.email, firstname=user.first_name, lastname=user.last_name),
            plan=plan,
            user=user,
        )
        url = gateway.create_payment_link(txn_id)
        logger.info("Subscription checkout for user %s on plan %s: transaction %s", user.pk, plan.pk, txn_id)
        return Response({"url": url, "transaction_id": txn_id}, status=status.HTTP_201_CREATED)
