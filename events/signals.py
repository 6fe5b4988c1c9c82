"""Seat-ledger receiver for the order confirmation signal."""
from django.dispatch import receiver

from orders.signals import order_confirmed


@receiver(order_confirmed, dispatch_uid="events.commit_order_seats")
def commit_seats_on_confirmation(sender, order_id, **kwargs):
    from .tasks import commit_order_seats

    commit_order_seats.delay(str(order_id))
