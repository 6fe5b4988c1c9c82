"""
Celery tasks for the orders app.

`send_order_confirmation` mails the buyer one message carrying every
ticket PDF of the order.  It runs after ticket issuance so the
attachments exist.
"""
from __future__ import annotations

import logging
from smtplib import SMTPException

from celery import shared_task
from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from django.utils import timezone

from .models import Order

logger = logging.getLogger(__name__)


def _context(order: Order) -> dict:
    event = order.event
    items = list(order.items.select_related("price_tier"))
    return {
        "order": order,
        "event": event,
        "buyer": order.buyer,
        "items": items,
        "ticket_count": sum(len(item.ticket_urls) for item in items),
        "currency": settings.FEDAPAY_CURRENCY,
        "is_free": order.total_amount == 0,
        "starts_at": timezone.localtime(event.starts_at),
        "frontend_url": settings.FRONTEND_URL,
    }


def build_confirmation_email(order: Order) -> EmailMultiAlternatives:
    from tickets.services import ticket_files

    ctx = _context(order)
    text_body = render_to_string("emails/order_confirmation.txt", ctx)
    html_body = render_to_string("emails/order_confirmation.html", ctx)
    message = EmailMultiAlternatives(
        subject=f"Your tickets for {order.event.name}",
        body=text_body,
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=[order.buyer.email],
    )
    message.attach_alternative(html_body, "text/html")
    for filename, content in ticket_files(order):
        message.attach(filename, content, "application/pdf")
    return message


@shared_task(
    autoretry_for=(SMTPException, OSError),
    retry_backoff=True,
    max_retries=5,
)
def send_order_confirmation(order_id: str) -> bool:
    """Email the tickets of a confirmed order, at most once."""
    claimed = Order.objects.filter(
        pk=order_id,
        status=Order.STATUS_CONFIRMED,
        confirmation_sent_at__isnull=True,
    ).update(confirmation_sent_at=timezone.now())
    if not claimed:
        logger.info("Confirmation for order %s already sent or order not confirmed", order_id)
        return False

    order = Order.objects.select_related("event", "buyer").get(pk=order_id)
    try:
        build_confirmation_email(order).send(fail_silently=False)
    except Exception:
        # release the marker so the retry can send
        Order.objects.filter(pk=order_id).update(confirmation_sent_at=None)
        logger.exception("Failed to send confirmation email for order %s", order_id)
        raise

    logger.info("Confirmation email sent to %s for order %s", order.buyer.email, order_id)
    return True
