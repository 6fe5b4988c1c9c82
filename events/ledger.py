"""
Seat ledger.

`Event.remaining_seats` is the single authoritative capacity counter for
an event.  It is decremented when an order is confirmed, never at intake,
and always through a conditional UPDATE so two confirmations racing for
the last seats can never push it below zero.
"""
from __future__ import annotations

import logging

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from common.exceptions import SeatLedgerViolation
from .models import Event

logger = logging.getLogger(__name__)


def reserve_seats(event_id: int, seats: int) -> bool:
    """
    Atomically take ``seats`` from the event's counter.

    Returns False (and changes nothing) when fewer seats remain.
    """
    if seats <= 0:
        return True
    updated = Event.objects.filter(pk=event_id, remaining_seats__gte=seats).update(
        remaining_seats=F("remaining_seats") - seats
    )
    return updated == 1


def commit_order_seats(order) -> bool:
    """
    Move a confirmed order's seat-units out of the event's counter.

    Idempotent: the order's ``seats_committed_at`` marker is claimed with a
    conditional update in the same transaction as the decrement, so a retried
    or duplicated call is a no-op.  Returns True when this call did the work.

    Raises:
        SeatLedgerViolation: the event does not have enough seats left.
    """
    # local import, orders depends on events
    from orders.models import Order

    seats = order.seat_units()
    with transaction.atomic():
        claimed = Order.objects.filter(
            pk=order.pk,
            status=Order.STATUS_CONFIRMED,
            seats_committed_at__isnull=True,
        ).update(seats_committed_at=timezone.now())
        if not claimed:
            logger.info("Seats for order %s already committed or order not confirmed", order.pk)
            return False

        if not reserve_seats(order.event_id, seats):
            remaining = (
                Event.objects.filter(pk=order.event_id)
                .values_list("remaining_seats", flat=True)
                .first()
            )
            logger.critical(
                "Seat ledger violation: order %s needs %s seats, event %s has %s left",
                order.pk, seats, order.event_id, remaining,
            )
            raise SeatLedgerViolation(
                f"Order {order.pk} needs {seats} seats, event {order.event_id} has {remaining} left."
            )

    logger.info("Committed %s seats for order %s on event %s", seats, order.pk, order.event_id)
    return True


def committed_seats(event_id: int) -> int:
    """Seat-units held by confirmed orders whose seats were committed."""
    from orders.models import OrderItem

    rows = OrderItem.objects.filter(
        order__event_id=event_id,
        order__seats_committed_at__isnull=False,
    ).values_list("quantity", "price_tier__seats_per_unit")
    return sum(qty * per_unit for qty, per_unit in rows)
