"""
Webhook reconciliation.

FedaPay tells us that "something happened" to a transaction; we never
trust what the payload says about it.  The authoritative status is
fetched again from the gateway and applied to whichever local record
carries the reference: a ticket Order, or a subscription Transaction.

Every transition is a compare-and-set on ``status=pending`` so duplicate
or concurrent deliveries settle a record exactly once, and only the
delivery that won the transition fans out the order confirmation.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from django.db import transaction
from django.utils import timezone

from common.exceptions import OrphanPayment
from orders.confirmation import dispatch_order_confirmed
from orders.models import Order

from .gateway import APPROVED_STATUSES, FAILED_STATUSES, get_gateway
from .models import Transaction

logger = logging.getLogger(__name__)

OUTCOME_CONFIRMED = "confirmed"
OUTCOME_CANCELLED = "cancelled"
OUTCOME_ALREADY_SETTLED = "already_settled"
OUTCOME_UNCHANGED = "unchanged"


@dataclass
class Reconciliation:
    outcome: str
    external_id: str
    gateway_status: str | None = None
    order: Order | None = None
    transaction: Transaction | None = None

    @property
    def changed(self) -> bool:
        return self.outcome in (OUTCOME_CONFIRMED, OUTCOME_CANCELLED)


def _settle_order(order: Order, approved: bool) -> bool:
    if approved:
        values = {"status": Order.STATUS_CONFIRMED, "payment_status": Order.PAYMENT_COMPLETED}
    else:
        values = {"status": Order.STATUS_CANCELLED, "payment_status": Order.PAYMENT_FAILED}

    with transaction.atomic():
        won = Order.objects.filter(pk=order.pk, status=Order.STATUS_PENDING).update(
            updated_at=timezone.now(), **values
        )
        if not won:
            return False
        order.refresh_from_db()
        if approved:
            dispatch_order_confirmed(order)
    return True


def _settle_transaction(txn: Transaction, approved: bool) -> bool:
    new_status = Transaction.STATUS_COMPLETED if approved else Transaction.STATUS_FAILED
    won = Transaction.objects.filter(pk=txn.pk, status=Transaction.STATUS_PENDING).update(
        status=new_status, updated_at=timezone.now()
    )
    if won:
        txn.refresh_from_db()
    return bool(won)


def reconcile_payment(external_id: str, gateway=None) -> Reconciliation:
    """
    Apply the gateway's current view of ``external_id`` to local state.

    Raises:
        OrphanPayment: no order or subscription transaction has this reference.
        PaymentGatewayError: the status could not be re-verified.
    """
    external_id = str(external_id)
    order = (
        Order.objects.select_related("event")
        .filter(external_transaction_reference=external_id)
        .first()
    )
    txn = None
    if order is None:
        txn = Transaction.objects.filter(external_reference=external_id).first()
    if order is None and txn is None:
        logger.warning("Payment notification for unknown transaction %s", external_id)
        raise OrphanPayment(f"No order or transaction for reference {external_id}.")

    result = Reconciliation(outcome=OUTCOME_ALREADY_SETTLED, external_id=external_id, order=order, transaction=txn)
    if order is not None:
        current, pending = order.status, Order.STATUS_PENDING
    else:
        current, pending = txn.status, Transaction.STATUS_PENDING
    if current != pending:
        logger.info("Reference %s already settled (%s), nothing to do", external_id, current)
        return result

    gateway = gateway or get_gateway()
    status = gateway.verify_transaction(external_id)
    result.gateway_status = status

    if status in APPROVED_STATUSES:
        approved = True
    elif status in FAILED_STATUSES:
        approved = False
    else:
        logger.info("Transaction %s still %s, waiting for a final status", external_id, status)
        result.outcome = OUTCOME_UNCHANGED
        return result

    if order is not None:
        won = _settle_order(order, approved)
    else:
        won = _settle_transaction(txn, approved)

    if not won:
        # a concurrent delivery settled it between our read and our write
        logger.info("Reference %s settled by a concurrent delivery", external_id)
        return result

    result.outcome = OUTCOME_CONFIRMED if approved else OUTCOME_CANCELLED
    logger.info("Reference %s reconciled: gateway=%s outcome=%s", external_id, status, result.outcome)
    return result
