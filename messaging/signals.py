"""
Signal handlers for the messaging app.

Confirmed buyers join the event chat.
"""
from django.dispatch import receiver

from orders.signals import order_confirmed


@receiver(order_confirmed, dispatch_uid="messaging.enroll_order_buyer")
def enroll_buyer_on_confirmation(sender, order_id, **kwargs) -> None:
    from .tasks import enroll_order_buyer

    enroll_order_buyer.delay(str(order_id))
