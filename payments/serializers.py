"""
Serializers for the payments app.

Subscription checkout only needs a plan reference and an optional return
URL; the FedaPay calls themselves happen in the view through the gateway.
"""
from __future__ import annotations

from rest_framework import serializers

from .models import PricingPlan


class PricingPlanSerializer(serializers.ModelSerializer):
    """Read-only view of a plan."""

    class Meta:
        model = PricingPlan
        fields = ["id", "name", "amount", "duration", "is_active"]
        read_only_fields = fields


class SubscriptionCheckoutSerializer(serializers.Serializer):
    """Serializer for starting a subscription purchase."""

    plan_id = serializers.IntegerField()
    callback_url = serializers.URLField(required=False, allow_blank=True)

    def validate(self, attrs):
        try:
            plan = PricingPlan.objects.get(pk=attrs["plan_id"], is_active=True)
        except PricingPlan.DoesNotExist:
            raise serializers.ValidationError({"plan_id": "Pricing plan not found."})
        attrs["plan"] = plan
        return attrs
