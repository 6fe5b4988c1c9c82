# orders/serializers.py
from rest_framework import serializers

from .models import Order, OrderItem


class OrderItemRequestSerializer(serializers.Serializer):
    tier_id = serializers.IntegerField(required=False, allow_null=True)
    quantity = serializers.IntegerField(min_value=1)


class CreateOrderSerializer(serializers.Serializer):
    """Shape of a purchase request. Business rules live in orders.services."""
    event_id = serializers.IntegerField()
    items = OrderItemRequestSerializer(many=True, required=False, default=list)
    email = serializers.EmailField(required=False, allow_blank=True)
    first_name = serializers.CharField(required=False, allow_blank=True, max_length=150)
    last_name = serializers.CharField(required=False, allow_blank=True, max_length=150)
    callback_url = serializers.URLField(required=False, allow_blank=True, max_length=500)


class OrderItemSerializer(serializers.ModelSerializer):
    tier = serializers.CharField(source="price_tier.name", read_only=True)

    class Meta:
        model = OrderItem
        fields = ["id", "tier", "quantity", "unit_price_snapshot", "line_total", "ticket_urls"]


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    event_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "event_id",
            "status",
            "payment_status",
            "total_amount",
            "external_transaction_reference",
            "items",
            "created_at",
        ]
