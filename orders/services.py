"""
Order intake.

`place_order` validates a purchase request against the event and its price
tiers, persists the order and its items in one transaction, and then either
confirms it straight away (nothing to pay) or opens a FedaPay transaction
and hands back the hosted payment link.

Capacity is checked here but not taken: seats leave the ledger only when
the order is confirmed (see :mod:`events.ledger`).
"""
from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass, field

from django.conf import settings
from django.db import transaction

from common.exceptions import (
    CapacityExceeded,
    EventNotAvailable,
    GuestInfoRequired,
    InvalidPaidOrder,
    InvalidTier,
    PaymentGatewayError,
    QuantityCapExceeded,
)
from events.models import Event, PriceTier
from payments.gateway import Customer, get_gateway

from .buyers import Buyer, GuestBuyer, resolve_buyer
from .confirmation import dispatch_order_confirmed
from .models import Order, OrderItem

logger = logging.getLogger(__name__)

FREE_ORDER_MESSAGE = "Your order is confirmed. Your tickets are on their way by email."


@dataclass(frozen=True)
class ItemRequest:
    tier_id: int | None
    quantity: int


@dataclass
class PlacedOrder:
    order: Order
    message: str = ""
    payment_link_url: str | None = None
    external_transaction_id: str | None = None

    @property
    def requires_payment(self) -> bool:
        return self.payment_link_url is not None


@dataclass
class _Line:
    tier: PriceTier
    quantity: int = 0

    @property
    def seat_units(self) -> int:
        return self.quantity * self.tier.seats_per_unit

    @property
    def amount(self) -> int:
        return self.quantity * self.tier.unit_amount


@dataclass
class _Draft:
    event: Event
    lines: list = field(default_factory=list)
    synthesize_default_tier: bool = False

    @property
    def seat_units(self) -> int:
        return sum(line.seat_units for line in self.lines)

    @property
    def quantity(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def total(self) -> int:
        return sum(line.amount for line in self.lines)


def _load_event(event_id) -> Event:
    event = Event.objects.filter(pk=event_id).first()
    if event is None or not event.is_open_for_orders():
        raise EventNotAvailable()
    return event


def _build_lines(event: Event, items: list[ItemRequest]) -> _Draft:
    tiers = {tier.pk: tier for tier in event.price_tiers.all()}
    draft = _Draft(event=event)

    if not tiers and event.is_free:
        # free event without prices: one zero-amount tier stands in
        draft.synthesize_default_tier = True
        default = PriceTier(event=event, name=PriceTier.DEFAULT_FREE_NAME, unit_amount=0, seats_per_unit=1)
        if any(item.tier_id is not None for item in items):
            raise InvalidTier()
        quantity = sum(item.quantity for item in items) if items else 1
        draft.lines.append(_Line(tier=default, quantity=quantity))
        return draft

    merged = OrderedDict()
    for item in items:
        tier = tiers.get(item.tier_id)
        if tier is None:
            raise InvalidTier()
        merged.setdefault(tier.pk, _Line(tier=tier)).quantity += item.quantity
    draft.lines.extend(merged.values())
    return draft


def _validate(draft: _Draft, buyer: Buyer) -> None:
    event = draft.event

    if draft.seat_units > event.remaining_seats:
        raise CapacityExceeded(
            f"Requested {draft.seat_units} seats, {event.remaining_seats} left."
        )

    is_guest = isinstance(buyer, GuestBuyer)
    if is_guest and not buyer.is_complete:
        raise GuestInfoRequired()

    if not event.is_free and (not draft.lines or draft.total <= 0):
        raise InvalidPaidOrder()

    if not draft.lines or draft.quantity <= 0:
        raise InvalidTier("Choose at least one ticket.")

    limit = settings.GUEST_FREE_TICKET_LIMIT
    if is_guest and event.is_free and draft.quantity > limit:
        raise QuantityCapExceeded(f"Guests may take at most {limit} tickets for a free event.")


def _persist(draft: _Draft, buyer: Buyer, callback_url: str | None) -> Order:
    free = draft.total == 0
    with transaction.atomic():
        if draft.synthesize_default_tier:
            line = draft.lines[0]
            line.tier, _ = PriceTier.objects.get_or_create(
                event=draft.event,
                name=PriceTier.DEFAULT_FREE_NAME,
                defaults={"unit_amount": 0, "seats_per_unit": 1},
            )
        user = resolve_buyer(buyer)
        order = Order.objects.create(
            event=draft.event,
            buyer=user,
            is_guest=isinstance(buyer, GuestBuyer),
            total_amount=draft.total,
            callback_url=callback_url or "",
            status=Order.STATUS_CONFIRMED if free else Order.STATUS_PENDING,
            payment_status=Order.PAYMENT_COMPLETED if free else Order.PAYMENT_PENDING,
        )
        OrderItem.objects.bulk_create([
            OrderItem(
                order=order,
                price_tier=line.tier,
                quantity=line.quantity,
                unit_price_snapshot=line.tier.unit_amount,
            )
            for line in draft.lines
        ])
        if free:
            dispatch_order_confirmed(order)
    return order


def _open_payment(order: Order, gateway) -> PlacedOrder:
    buyer = order.buyer
    try:
        txn_id = gateway.create_transaction(
            amount=order.total_amount,
            description=f"Tickets - {order.event.name}",
            callback_url=order.callback_url or None,
            customer=Customer(email=buyer.email, firstname=buyer.first_name, lastname=buyer.last_name),
        )
        Order.objects.filter(pk=order.pk).update(external_transaction_reference=txn_id)
        order.external_transaction_reference = txn_id
        link = gateway.create_payment_link(txn_id)
    except PaymentGatewayError:
        # never leave a pending order the buyer cannot pay
        Order.objects.filter(pk=order.pk, status=Order.STATUS_PENDING).update(
            status=Order.STATUS_CANCELLED,
            payment_status=Order.PAYMENT_FAILED,
        )
        logger.error("Payment setup failed for order %s, order cancelled", order.pk)
        raise

    logger.info("Order %s awaiting payment on transaction %s", order.pk, txn_id)
    return PlacedOrder(order=order, payment_link_url=link, external_transaction_id=txn_id)


def place_order(
    event_id,
    buyer: Buyer,
    items: list[ItemRequest],
    callback_url: str | None = None,
    gateway=None,
) -> PlacedOrder:
    """
    Validate and persist a purchase.

    Raises:
        EventNotAvailable: unknown, unpublished or finished event.
        InvalidTier: an item references a tier of another event.
        CapacityExceeded: more seat-units than the event has left.
        GuestInfoRequired: anonymous buyer without email and name.
        InvalidPaidOrder: paid event with no items or a zero total.
        QuantityCapExceeded: guest asking for too many free tickets.
        PaymentGatewayError: the payment transaction could not be opened.
    """
    event = _load_event(event_id)
    draft = _build_lines(event, items)
    _validate(draft, buyer)
    order = _persist(draft, buyer, callback_url)

    if order.status == Order.STATUS_CONFIRMED:
        logger.info("Free order %s confirmed for event %s", order.pk, event.pk)
        return PlacedOrder(order=order, message=FREE_ORDER_MESSAGE)

    return _open_payment(order, gateway or get_gateway())
