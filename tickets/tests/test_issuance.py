import uuid

import pytest
from django.core.files.storage import default_storage

from orders.models import Order
from tests.fixtures import make_order
from tickets.services import issue_tickets_for_order, ticket_storage_name
from tickets.verification import (
    InvalidTicketToken,
    TicketReference,
    build_verification_url,
    make_token,
    resolve_token,
)


def test_token_round_trip():
    order_id = uuid.uuid4()
    token = make_token(order_id, 42, 3)
    assert resolve_token(token) == TicketReference(order_id=str(order_id), item_id=42, sequence=3)


@pytest.mark.parametrize("token", ["", "garbage", "eyJvIjoiMSJ9:tampered:sig"])
def test_forged_tokens_are_rejected(token):
    with pytest.raises(InvalidTicketToken):
        resolve_token(token)


def test_token_signed_for_another_purpose_is_rejected():
    from django.core import signing

    token = signing.dumps({"o": "x", "i": 1, "n": 1}, salt="something-else")
    with pytest.raises(InvalidTicketToken):
        resolve_token(token)


def test_verification_url_points_at_this_api(settings):
    url = build_verification_url(uuid.uuid4(), 1, 1)
    assert url.startswith(f"{settings.APP_BASE_URL}/api/tickets/verify/")
    assert url.endswith("/")


@pytest.mark.django_db
def test_one_artifact_per_purchased_unit(paid_event, standard_tier, table_tier, user):
    order = make_order(paid_event, user, [(standard_tier, 3), (table_tier, 1)])

    assert issue_tickets_for_order(order) == 4

    standard, table = order.items.order_by("id")
    assert len(standard.ticket_urls) == 3
    assert len(table.ticket_urls) == 1
    for seq in (1, 2, 3):
        name = ticket_storage_name(order.pk, standard.pk, seq)
        assert default_storage.exists(name)
        with default_storage.open(name, "rb") as fh:
            assert fh.read().startswith(b"%PDF")
    assert all(url.startswith("https://tickets.test/media/tickets/") for url in standard.ticket_urls)


@pytest.mark.django_db
def test_issued_items_are_not_regenerated(paid_event, standard_tier, user):
    order = make_order(paid_event, user, [(standard_tier, 2)])
    issue_tickets_for_order(order)
    urls = order.items.get().ticket_urls

    assert issue_tickets_for_order(order) == 0
    assert order.items.get().ticket_urls == urls


@pytest.mark.django_db
def test_unconfirmed_orders_get_no_tickets(paid_event, standard_tier, user):
    order = make_order(paid_event, user, [(standard_tier, 2)], status=Order.STATUS_PENDING)
    assert issue_tickets_for_order(order) == 0
    assert order.items.get().ticket_urls == []
