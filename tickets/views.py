"""
Ticket verification endpoint, the target of the QR code on every ticket.
"""
from __future__ import annotations

import logging

from rest_framework import permissions, throttling, views
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from orders.models import Order, OrderItem

from .rendering import build_ticket_code
from .verification import InvalidTicketToken, resolve_token

logger = logging.getLogger(__name__)


class TicketVerifyView(views.APIView):
    """Resolve a ticket token and report whether the ticket is valid."""

    permission_classes = [permissions.AllowAny]
    authentication_classes = []
    throttle_classes = [throttling.ScopedRateThrottle]
    throttle_scope = "ticket_verify"

    def get(self, request, token: str):
        try:
            ref = resolve_token(token)
        except InvalidTicketToken:
            logger.warning("Ticket verification with a forged or corrupt token")
            raise NotFound("Unknown ticket.")

        item = (
            OrderItem.objects.select_related("order", "order__event", "order__buyer", "price_tier")
            .filter(pk=ref.item_id, order_id=ref.order_id)
            .first()
        )
        if item is None or not 1 <= ref.sequence <= item.quantity:
            raise NotFound("Unknown ticket.")

        order = item.order
        return Response({
            "valid": order.status == Order.STATUS_CONFIRMED and order.seats_committed_at is not None,
            "code": build_ticket_code(item.price_tier.name, ref.sequence),
            "order_id": str(order.pk),
            "item_id": item.pk,
            "sequence": ref.sequence,
            "order_status": order.status,
            "event": {
                "id": order.event_id,
                "name": order.event.name,
                "starts_at": order.event.starts_at,
            },
            "tier": item.price_tier.name,
            "holder": order.buyer.email,
        })
