"""
Seat ledger tests.

Covers the conditional decrement, the once-per-order commit marker, and
the invariant that committed seat-units equal capacity minus remaining.
"""
import logging

import pytest

from common.exceptions import SeatLedgerViolation
from events import ledger
from events.models import Event, PriceTier
from orders.models import Order
from tests.fixtures import make_event, make_order


def assert_ledger_balanced(event):
    event.refresh_from_db()
    assert event.capacity - event.remaining_seats == ledger.committed_seats(event.pk)


@pytest.mark.django_db
def test_new_event_starts_with_full_capacity(paid_event):
    assert paid_event.remaining_seats == paid_event.capacity == 10


@pytest.mark.django_db
def test_reserve_seats_is_conditional(paid_event):
    assert ledger.reserve_seats(paid_event.pk, 7) is True
    assert ledger.reserve_seats(paid_event.pk, 4) is False
    paid_event.refresh_from_db()
    assert paid_event.remaining_seats == 3
    assert ledger.reserve_seats(paid_event.pk, 3) is True
    paid_event.refresh_from_db()
    assert paid_event.remaining_seats == 0


@pytest.mark.django_db
def test_commit_uses_seats_per_unit(paid_event, standard_tier, table_tier, user):
    order = make_order(paid_event, user, [(standard_tier, 2), (table_tier, 1)])

    assert ledger.commit_order_seats(order) is True

    paid_event.refresh_from_db()
    assert paid_event.remaining_seats == 10 - 2 - 4
    assert_ledger_balanced(paid_event)


@pytest.mark.django_db
def test_commit_is_idempotent(paid_event, standard_tier, user):
    order = make_order(paid_event, user, [(standard_tier, 3)])

    assert ledger.commit_order_seats(order) is True
    assert ledger.commit_order_seats(order) is False
    assert ledger.commit_order_seats(order) is False

    paid_event.refresh_from_db()
    assert paid_event.remaining_seats == 7
    order.refresh_from_db()
    assert order.seats_committed_at is not None
    assert_ledger_balanced(paid_event)


@pytest.mark.django_db
def test_pending_orders_do_not_touch_the_ledger(paid_event, standard_tier, user):
    order = make_order(paid_event, user, [(standard_tier, 2)], status=Order.STATUS_PENDING)

    assert ledger.commit_order_seats(order) is False
    paid_event.refresh_from_db()
    assert paid_event.remaining_seats == 10


@pytest.mark.django_db
def test_violation_is_raised_not_clamped(paid_event, table_tier, user, caplog):
    ledger.reserve_seats(paid_event.pk, 8)
    order = make_order(paid_event, user, [(table_tier, 1)])

    with caplog.at_level(logging.CRITICAL, logger="events.ledger"):
        with pytest.raises(SeatLedgerViolation):
            ledger.commit_order_seats(order)

    assert any(r.levelno == logging.CRITICAL for r in caplog.records)
    paid_event.refresh_from_db()
    assert paid_event.remaining_seats == 2
    order.refresh_from_db()
    # the marker claim rolled back with the failed decrement
    assert order.seats_committed_at is None


@pytest.mark.django_db
def test_racing_orders_for_the_last_seats(organizer, user):
    event = make_event(organizer, capacity=4)
    tier = PriceTier.objects.create(event=event, name="Duo", unit_amount=2000, seats_per_unit=2)
    orders = [make_order(event, user, [(tier, 1)]) for _ in range(3)]

    outcomes = []
    for order in orders:
        try:
            outcomes.append(ledger.commit_order_seats(order))
        except SeatLedgerViolation:
            outcomes.append("violation")

    assert outcomes == [True, True, "violation"]
    event.refresh_from_db()
    assert event.remaining_seats == 0
    assert_ledger_balanced(event)


@pytest.mark.django_db
def test_model_save_never_overwrites_the_counter(paid_event):
    stale = Event.objects.get(pk=paid_event.pk)
    ledger.reserve_seats(paid_event.pk, 6)

    stale.name = "Renamed"
    stale.save()

    paid_event.refresh_from_db()
    assert paid_event.name == "Renamed"
    assert paid_event.remaining_seats == 4
