import pytest
from django.contrib.auth.models import AnonymousUser, User
from django.db import IntegrityError
from django.test import RequestFactory

from common.exceptions import GuestInfoRequired
from orders.buyers import AuthenticatedBuyer, GuestBuyer, buyer_from_request, resolve_buyer


@pytest.mark.django_db
def test_guest_is_resolved_to_a_new_user_with_unusable_password():
    user = resolve_buyer(GuestBuyer(email="ama@example.com", first_name="Ama", last_name="Owusu"))

    assert user.pk is not None
    assert (user.username, user.email, user.first_name) == ("ama@example.com", "ama@example.com", "Ama")
    assert not user.has_usable_password()


@pytest.mark.django_db
def test_returning_guest_reuses_the_user(user):
    resolved = resolve_buyer(GuestBuyer(email="U1@Example.com", first_name="Someone"))
    assert resolved == user
    assert User.objects.count() == 1


@pytest.mark.django_db
def test_incomplete_guest_cannot_be_resolved():
    with pytest.raises(GuestInfoRequired):
        resolve_buyer(GuestBuyer(email="ama@example.com", first_name=" "))
    assert not User.objects.exists()


@pytest.mark.django_db
def test_buyer_from_request(user):
    request = RequestFactory().post("/api/orders/")

    request.user = user
    assert buyer_from_request(request, {}) == AuthenticatedBuyer(user)

    request.user = AnonymousUser()
    guest = buyer_from_request(request, {"email": " Ama@Example.com ", "first_name": "Ama"})
    assert guest == GuestBuyer(email="ama@example.com", first_name="Ama", last_name="")
    assert guest.is_complete


@pytest.mark.django_db
def test_username_clash_with_another_account_is_not_reused():
    other = User.objects.create_user(username="ama@example.com", email="someone.else@example.com")

    with pytest.raises(IntegrityError):
        resolve_buyer(GuestBuyer(email="ama@example.com", first_name="Ama"))

    assert User.objects.get() == other
