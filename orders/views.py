# orders/views.py
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from .buyers import buyer_from_request
from .models import Order
from .serializers import CreateOrderSerializer, OrderSerializer
from .services import ItemRequest, place_order


class OrderCreateView(APIView):
    """Place an order; guests may buy without an account."""
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        serializer = CreateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        placed = place_order(
            event_id=data["event_id"],
            buyer=buyer_from_request(request, data),
            items=[ItemRequest(tier_id=i.get("tier_id"), quantity=i["quantity"]) for i in data["items"]],
            callback_url=data.get("callback_url") or None,
        )

        body = {"order_id": str(placed.order.pk)}
        if placed.requires_payment:
            body["payment_link_url"] = placed.payment_link_url
            body["external_transaction_id"] = placed.external_transaction_id
        else:
            body["message"] = placed.message
        return Response(body, status=status.HTTP_201_CREATED)


class OrderDetailView(generics.RetrieveAPIView):
    serializer_class = OrderSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return Order.objects.filter(buyer=self.request.user).prefetch_related("items__price_tier")
