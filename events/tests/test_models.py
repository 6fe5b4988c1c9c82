from datetime import timedelta

import pytest
from django.core.exceptions import ValidationError
from django.utils import timezone

from events.models import Event
from tests.fixtures import make_event


@pytest.mark.django_db
def test_capacity_is_frozen_once_published(paid_event):
    paid_event.capacity = 25
    with pytest.raises(ValidationError):
        paid_event.save()


@pytest.mark.django_db
def test_capacity_change_before_publish_moves_remaining(organizer):
    event = make_event(organizer, status=Event.STATUS_DRAFT, capacity=10)

    event.capacity = 15
    event.save()
    assert event.remaining_seats == 15

    event.capacity = 12
    event.save()
    event.refresh_from_db()
    assert (event.capacity, event.remaining_seats) == (12, 12)


@pytest.mark.django_db
def test_open_for_orders(organizer):
    past = timezone.now() - timedelta(days=2)
    assert make_event(organizer).is_open_for_orders()
    assert not make_event(organizer, status=Event.STATUS_DRAFT).is_open_for_orders()
    assert not make_event(organizer, starts_at=past, ends_at=past + timedelta(hours=2)).is_open_for_orders()
