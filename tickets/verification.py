"""
Ticket verification tokens.

The QR code on a ticket carries a URL with a signed token that names the
order, the order item and the ticket's sequence within that item.  The
token is tamper-proof (``django.core.signing``) but not secret, and it is
resolved back to the exact ticket by the verify endpoint.
"""
from __future__ import annotations

from dataclasses import dataclass

from django.conf import settings
from django.core import signing
from django.urls import reverse

TOKEN_SALT = "tickets.verification"


class InvalidTicketToken(Exception):
    pass


@dataclass(frozen=True)
class TicketReference:
    order_id: str
    item_id: int
    sequence: int


def make_token(order_id, item_id: int, sequence: int) -> str:
    return signing.dumps({"o": str(order_id), "i": int(item_id), "n": int(sequence)}, salt=TOKEN_SALT, compress=True)


def resolve_token(token: str) -> TicketReference:
    try:
        data = signing.loads(token, salt=TOKEN_SALT)
        return TicketReference(order_id=str(data["o"]), item_id=int(data["i"]), sequence=int(data["n"]))
    except (signing.BadSignature, KeyError, TypeError, ValueError) as e:
        raise InvalidTicketToken(str(e)) from e


def build_verification_url(order_id, item_id: int, sequence: int) -> str:
    path = reverse("ticket-verify", kwargs={"token": make_token(order_id, item_id, sequence)})
    return f"{settings.APP_BASE_URL}{path}"
