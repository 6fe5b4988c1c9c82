"""
Ticket issuance.

Renders one PDF per purchased unit of a confirmed order, stores it through
Django's default storage (S3 via django-storages in production) and records
the public URLs on the order item.  Items that already have their URLs are
left alone, so re-running issuance for an order is harmless.
"""
from __future__ import annotations

import logging

from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.utils import timezone

from orders.models import Order

from .rendering import TicketData, build_ticket_code, render_ticket_pdf
from .verification import build_verification_url

logger = logging.getLogger(__name__)


def ticket_storage_name(order_id, item_id: int, sequence: int) -> str:
    return f"tickets/{order_id}/{item_id}-{sequence}.pdf"


def _public_url(name: str) -> str:
    url = default_storage.url(name)
    if url.startswith("/"):
        url = f"{settings.APP_BASE_URL}{url}"
    return url


def ticket_data_for(order: Order, item, sequence: int) -> TicketData:
    event = order.event
    tier = item.price_tier
    return TicketData(
        code=build_ticket_code(tier.name, sequence),
        event_name=event.name,
        location=event.location,
        starts_at=timezone.localtime(event.starts_at),
        ends_at=timezone.localtime(event.ends_at) if event.ends_at else None,
        buyer_email=order.buyer.email,
        tier_name=tier.name,
        unit_amount=item.unit_price_snapshot,
        currency=settings.FEDAPAY_CURRENCY,
        order_id=str(order.pk),
        verification_url=build_verification_url(order.pk, item.pk, sequence),
    )


def _store(name: str, content: bytes) -> str:
    if default_storage.exists(name):
        # leftover of an interrupted run; keep the name stable
        default_storage.delete(name)
    return default_storage.save(name, ContentFile(content))


def issue_tickets_for_order(order: Order) -> int:
    """
    Issue the missing tickets of ``order``.  Returns how many were created.

    Only confirmed orders get tickets.
    """
    if order.status != Order.STATUS_CONFIRMED:
        logger.warning("Not issuing tickets for order %s in status %s", order.pk, order.status)
        return 0

    issued = 0
    for item in order.items.select_related("price_tier"):
        if item.ticket_urls:
            continue
        urls = []
        for sequence in range(1, item.quantity + 1):
            pdf = render_ticket_pdf(ticket_data_for(order, item, sequence))
            name = _store(ticket_storage_name(order.pk, item.pk, sequence), pdf)
            urls.append(_public_url(name))
        item.ticket_urls = urls
        item.save(update_fields=["ticket_urls"])
        issued += len(urls)

    logger.info("Issued %s tickets for order %s", issued, order.pk)
    return issued


def ticket_files(order: Order):
    """Yield ``(filename, pdf bytes)`` for every issued ticket of ``order``."""
    for item in order.items.select_related("price_tier"):
        for sequence in range(1, len(item.ticket_urls) + 1):
            name = ticket_storage_name(order.pk, item.pk, sequence)
            with default_storage.open(name, "rb") as fh:
                yield f"{build_ticket_code(item.price_tier.name, sequence)}.pdf", fh.read()
