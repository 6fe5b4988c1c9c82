"""
Celery tasks for the tickets app.
"""
from __future__ import annotations

import logging

from celery import shared_task
from django.db import OperationalError

from orders.models import Order

from .services import issue_tickets_for_order

logger = logging.getLogger(__name__)


@shared_task(
    autoretry_for=(OperationalError, OSError),
    retry_backoff=True,
    max_retries=5,
)
def issue_order_tickets(order_id: str) -> int:
    """Render and store the tickets of a confirmed order, then mail them."""
    from orders.tasks import send_order_confirmation

    order = Order.objects.select_related("event", "buyer").filter(pk=order_id).first()
    if order is None:
        logger.warning("issue_order_tickets: order %s not found", order_id)
        return 0

    issued = issue_tickets_for_order(order)
    if order.status == Order.STATUS_CONFIRMED:
        send_order_confirmation.delay(str(order.pk))
    return issued
