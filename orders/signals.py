"""
The order confirmation signal.

Sent exactly once per order that becomes CONFIRMED, after the confirming
transaction has committed.  Receivers live in the apps that own each side
effect (seat ledger, chat) and only enqueue Celery work, so a slow or failing
handler never blocks the others.
"""
from django.dispatch import Signal

# kwargs: order_id
order_confirmed = Signal()
