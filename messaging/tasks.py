from __future__ import annotations

import logging

from celery import shared_task
from django.db import OperationalError

from .services import enroll_in_event_conversation

logger = logging.getLogger(__name__)


@shared_task(
    autoretry_for=(OperationalError,),
    retry_backoff=True,
    max_retries=5,
)
def enroll_order_buyer(order_id: str) -> bool:
    """Chat enrollment handler of the order confirmation fan-out."""
    from orders.models import Order

    order = (
        Order.objects.select_related("event", "buyer")
        .filter(pk=order_id, status=Order.STATUS_CONFIRMED)
        .first()
    )
    if order is None:
        logger.warning("enroll_order_buyer: no confirmed order %s", order_id)
        return False
    return enroll_in_event_conversation(order.event, order.buyer)
