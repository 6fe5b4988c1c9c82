from smtplib import SMTPException
from unittest import mock

import pytest

from orders.models import Order
from orders.tasks import build_confirmation_email, send_order_confirmation
from tests.fixtures import make_order
from tickets.services import issue_tickets_for_order


@pytest.mark.django_db
def test_one_email_bundles_every_ticket(paid_event, standard_tier, table_tier, user, mailoutbox):
    order = make_order(paid_event, user, [(standard_tier, 2), (table_tier, 1)])
    issue_tickets_for_order(order)

    assert send_order_confirmation(str(order.pk)) is True

    assert len(mailoutbox) == 1
    message = mailoutbox[0]
    assert message.subject == f"Your tickets for {paid_event.name}"
    assert sorted(name for name, _, _ in message.attachments) == ["Standard-1.pdf", "Standard-2.pdf", "Table-1.pdf"]
    assert all(content.startswith(b"%PDF") for _, content, _ in message.attachments)
    assert "28000 XOF" in message.body
    html, mimetype = message.alternatives[0]
    assert mimetype == "text/html"
    assert str(order.pk) in html


@pytest.mark.django_db
def test_confirmation_is_sent_once(paid_event, standard_tier, user, mailoutbox):
    order = make_order(paid_event, user, [(standard_tier, 1)])
    issue_tickets_for_order(order)

    assert send_order_confirmation(str(order.pk)) is True
    assert send_order_confirmation(str(order.pk)) is False
    assert len(mailoutbox) == 1


@pytest.mark.django_db
def test_pending_order_gets_no_mail(paid_event, standard_tier, user, mailoutbox):
    order = make_order(paid_event, user, [(standard_tier, 1)], status=Order.STATUS_PENDING)
    assert send_order_confirmation(str(order.pk)) is False
    assert mailoutbox == []


@pytest.mark.django_db
def test_failed_send_releases_the_marker(paid_event, standard_tier, user):
    order = make_order(paid_event, user, [(standard_tier, 1)])
    issue_tickets_for_order(order)

    with mock.patch("django.core.mail.EmailMultiAlternatives.send", side_effect=SMTPException("relay down")):
        with pytest.raises(SMTPException):
            send_order_confirmation(str(order.pk))

    order.refresh_from_db()
    assert order.confirmation_sent_at is None


@pytest.mark.django_db
def test_free_order_mail_says_free(free_event, user):
    from events.models import PriceTier

    tier = PriceTier.objects.create(event=free_event, name="Standard", unit_amount=0)
    order = make_order(free_event, user, [(tier, 1)])
    issue_tickets_for_order(order)

    message = build_confirmation_email(order)
    assert "FREE" in message.body
    assert "Total paid" not in message.body
