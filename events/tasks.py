"""
Celery tasks for the events app.

`commit_order_seats` is the seat-ledger handler of the order confirmation
fan-out.  Ticket issuance is only queued once the seats are committed,
since a ticket implies capacity was actually granted.
"""
from __future__ import annotations

import logging

from celery import shared_task
from django.db import OperationalError

from . import ledger

logger = logging.getLogger(__name__)


@shared_task(
    autoretry_for=(OperationalError,),
    retry_backoff=True,
    max_retries=5,
)
def commit_order_seats(order_id: str) -> bool:
    """Decrement the event's remaining seats for a confirmed order."""
    from orders.models import Order
    from tickets.tasks import issue_order_tickets

    order = Order.objects.filter(pk=order_id).first()
    if order is None:
        logger.warning("commit_order_seats: order %s not found", order_id)
        return False

    committed = ledger.commit_order_seats(order)
    order.refresh_from_db(fields=["seats_committed_at"])
    if order.seats_committed_at is not None:
        # also covers a retried run whose previous attempt committed
        # but failed before queuing issuance
        issue_order_tickets.delay(str(order.pk))
    return committed
