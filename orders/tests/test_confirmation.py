"""
Confirmation fan-out tests.

Each side effect of a confirmed order runs independently: one failing
handler must not prevent the others, nor undo the confirmation itself.
"""
from unittest import mock

import pytest

from common.exceptions import SeatLedgerViolation
from events import ledger
from messaging.models import ConversationMember
from orders.confirmation import dispatch_order_confirmed, fan_out
from orders.models import Order
from orders.signals import order_confirmed
from tests.fixtures import make_order


@pytest.mark.django_db
def test_dispatch_waits_for_commit(paid_event, standard_tier, user, django_capture_on_commit_callbacks):
    order = make_order(paid_event, user, [(standard_tier, 1)])
    receiver = mock.Mock()
    order_confirmed.connect(receiver, dispatch_uid="test.receiver")
    try:
        with django_capture_on_commit_callbacks() as callbacks:
            dispatch_order_confirmed(order)
            receiver.assert_not_called()
        assert len(callbacks) == 1
        callbacks[0]()
        receiver.assert_called_once()
        assert receiver.call_args.kwargs["order_id"] == order.pk
    finally:
        order_confirmed.disconnect(dispatch_uid="test.receiver")


@pytest.mark.django_db
def test_failing_handler_does_not_block_the_others(paid_event, standard_tier, user, caplog):
    order = make_order(paid_event, user, [(standard_tier, 2)])

    with mock.patch("messaging.tasks.enroll_in_event_conversation", side_effect=RuntimeError("chat is down")):
        responses = fan_out(order.pk)

    errors = [r for _, r in responses if isinstance(r, Exception)]
    assert len(errors) == 1
    assert "chat is down" in str(errors[0])
    assert "Confirmation handler" in caplog.text

    paid_event.refresh_from_db()
    assert paid_event.remaining_seats == 8
    order.refresh_from_db()
    assert order.status == Order.STATUS_CONFIRMED
    assert all(item.ticket_urls for item in order.items.all())


@pytest.mark.django_db
def test_ledger_violation_skips_tickets_but_still_enrolls(paid_event, table_tier, user, mailoutbox):
    ledger.reserve_seats(paid_event.pk, 9)
    order = make_order(paid_event, user, [(table_tier, 1)])

    responses = fan_out(order.pk)

    assert any(isinstance(r, SeatLedgerViolation) for _, r in responses)
    order.refresh_from_db()
    assert order.status == Order.STATUS_CONFIRMED
    assert order.items.get().ticket_urls == []
    assert mailoutbox == []
    assert ConversationMember.objects.filter(user=user, conversation__event=paid_event).exists()


@pytest.mark.django_db
def test_replayed_fan_out_is_harmless(paid_event, standard_tier, user, mailoutbox):
    order = make_order(paid_event, user, [(standard_tier, 2)])

    fan_out(order.pk)
    first_urls = order.items.get().ticket_urls
    fan_out(order.pk)

    paid_event.refresh_from_db()
    assert paid_event.remaining_seats == 8
    assert order.items.get().ticket_urls == first_urls
    assert len(mailoutbox) == 1
    assert ConversationMember.objects.filter(user=user).count() == 1
