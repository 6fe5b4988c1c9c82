"""
Buyer identity.

A purchase comes either from an authenticated user or from a guest who only
gave an email and a name.  Intake turns either shape into one concrete user
record up front; nothing after that branches on "is there a user?".
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction

from common.exceptions import GuestInfoRequired

User = get_user_model()


@dataclass(frozen=True)
class AuthenticatedBuyer:
    user: object


@dataclass(frozen=True)
class GuestBuyer:
    email: str
    first_name: str
    last_name: str = ""

    @property
    def is_complete(self) -> bool:
        return bool((self.email or "").strip() and (self.first_name or "").strip())


Buyer = Union[AuthenticatedBuyer, GuestBuyer]


def buyer_from_request(request, data: dict) -> Buyer:
    """Pick the buyer variant for an order request."""
    user = getattr(request, "user", None)
    if user is not None and user.is_authenticated:
        return AuthenticatedBuyer(user=user)
    return GuestBuyer(
        email=(data.get("email") or "").strip().lower(),
        first_name=(data.get("first_name") or "").strip(),
        last_name=(data.get("last_name") or "").strip(),
    )


def resolve_buyer(buyer: Buyer):
    """Return the user record that will own the order."""
    if isinstance(buyer, AuthenticatedBuyer):
        return buyer.user
    if not buyer.is_complete:
        raise GuestInfoRequired()

    existing = User.objects.filter(email__iexact=buyer.email).order_by("id").first()
    if existing is not None:
        return existing

    try:
        with transaction.atomic():
            user = User(
                username=buyer.email[:150],
                email=buyer.email,
                first_name=buyer.first_name[:150],
                last_name=buyer.last_name[:150],
            )
            user.set_unusable_password()
            user.save()
            return user
    except IntegrityError:
        # a concurrent guest checkout created it first
        user = User.objects.filter(email__iexact=buyer.email).order_by("id").first()
        if user is None:
            raise
        return user
