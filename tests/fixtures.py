"""
Common test fixtures for Django REST Framework API tests.

Provides fixtures for creating a user and authenticating a client
with a JWT token, published free and paid events with price tiers, and a
fake FedaPay gateway so no test talks to the network.
"""
from datetime import timedelta

import pytest
from django.contrib.auth.models import User
from django.utils import timezone

from common.exceptions import PaymentGatewayError
from events.models import Event, PriceTier
from orders.models import Order, OrderItem


@pytest.fixture
def user(db):
    """Create a test user."""
    return User.objects.create_user(
        username="u1", password="pass12345", email="u1@example.com", first_name="Ada", last_name="Buyer"
    )


@pytest.fixture
def organizer(db):
    return User.objects.create_user(username="org", password="pass12345", email="org@example.com")


@pytest.fixture
def auth_client(client, db, user):
    """Authenticate the Django test client using JWT tokens."""
    resp = client.post(
        "/api/token/",
        {"username": "u1", "password": "pass12345"},
        content_type="application/json",
    )
    assert resp.status_code == 200
    token = resp.json()["access"]
    client.defaults["HTTP_AUTHORIZATION"] = f"Bearer {token}"
    return client


def make_event(organizer, **overrides):
    now = timezone.now()
    fields = {
        "name": "Cotonou Jazz Night",
        "location": "Institut Français, Cotonou",
        "starts_at": now + timedelta(days=7),
        "ends_at": now + timedelta(days=7, hours=4),
        "status": Event.STATUS_PUBLISHED,
        "access_type": Event.ACCESS_PAID,
        "capacity": 10,
        "created_by": organizer,
    }
    fields.update(overrides)
    return Event.objects.create(**fields)


def make_order(event, buyer, lines, status=Order.STATUS_CONFIRMED, reference=None):
    """Create an order directly, bypassing intake. ``lines`` is ``[(tier, quantity)]``."""
    confirmed = status == Order.STATUS_CONFIRMED
    order = Order.objects.create(
        event=event,
        buyer=buyer,
        total_amount=sum(tier.unit_amount * qty for tier, qty in lines),
        status=status,
        payment_status=Order.PAYMENT_COMPLETED if confirmed else Order.PAYMENT_PENDING,
        external_transaction_reference=reference,
    )
    for tier, qty in lines:
        OrderItem.objects.create(order=order, price_tier=tier, quantity=qty, unit_price_snapshot=tier.unit_amount)
    return order


@pytest.fixture
def paid_event(organizer):
    return make_event(organizer)


@pytest.fixture
def standard_tier(paid_event):
    return PriceTier.objects.create(event=paid_event, name="Standard", unit_amount=5000, seats_per_unit=1)


@pytest.fixture
def table_tier(paid_event):
    """A tier whose one unit is a table for four."""
    return PriceTier.objects.create(event=paid_event, name="Table", unit_amount=18000, seats_per_unit=4)


@pytest.fixture
def free_event(organizer):
    return make_event(organizer, name="Open Mic", access_type=Event.ACCESS_FREE, capacity=20)


class FakeGateway:
    """Stands in for FedaPayGateway; records calls and returns canned ids."""

    def __init__(self):
        self.created = []
        self.links = []
        self.statuses = {}
        self.verify_calls = []
        self.fail_on = set()
        self._next_id = 100000

    def create_transaction(self, amount, description, callback_url, customer, plan=None, user=None):
        if "create" in self.fail_on:
            raise PaymentGatewayError("FedaPay POST /v1/transactions failed")
        self._next_id += 1
        txn_id = str(self._next_id)
        self.created.append({
            "id": txn_id,
            "amount": amount,
            "description": description,
            "callback_url": callback_url,
            "customer": customer,
        })
        return txn_id

    def create_payment_link(self, external_transaction_id):
        if "link" in self.fail_on:
            raise PaymentGatewayError("FedaPay did not return a payment link")
        self.links.append(external_transaction_id)
        return f"https://checkout.fedapay.test/{external_transaction_id}"

    def verify_transaction(self, external_transaction_id):
        self.verify_calls.append(external_transaction_id)
        if "verify" in self.fail_on:
            raise PaymentGatewayError("FedaPay GET failed")
        return self.statuses.get(external_transaction_id, "pending")


@pytest.fixture
def gateway(monkeypatch):
    """Patch every get_gateway() lookup with a FakeGateway."""
    fake = FakeGateway()
    monkeypatch.setattr("payments.gateway.get_gateway", lambda: fake)
    monkeypatch.setattr("orders.services.get_gateway", lambda: fake)
    monkeypatch.setattr("payments.reconciliation.get_gateway", lambda: fake)
    monkeypatch.setattr("payments.views.get_gateway", lambda: fake)
    return fake
