"""
Confirmation dispatcher.

Callers that move an order to CONFIRMED call :func:`dispatch_order_confirmed`
inside the transaction that made the change.  The fan-out runs on commit,
so handlers never observe an uncommitted order, and each receiver's failure
is logged without affecting the others.
"""
from __future__ import annotations

import logging
from functools import partial

from django.db import transaction

from .models import Order
from .signals import order_confirmed

logger = logging.getLogger(__name__)


def dispatch_order_confirmed(order: Order) -> None:
    transaction.on_commit(partial(fan_out, order.pk))


def fan_out(order_id) -> list:
    logger.info("Order %s confirmed, dispatching side effects", order_id)
    responses = order_confirmed.send_robust(sender=Order, order_id=order_id)
    for receiver, response in responses:
        if isinstance(response, Exception):
            logger.error(
                "Confirmation handler %s failed for order %s: %r",
                getattr(receiver, "__qualname__", receiver), order_id, response,
                exc_info=response,
            )
    return responses
