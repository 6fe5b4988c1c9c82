"""
FedaPay payment gateway adapter.

Thin wrapper over the FedaPay REST API: create a transaction, obtain the
hosted checkout link for it, and re-fetch its authoritative status.  Every
failure surfaces as :class:`PaymentGatewayError`; the adapter never makes
up a transaction id.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

import requests
from django.conf import settings

from common.exceptions import PaymentGatewayError

logger = logging.getLogger(__name__)

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
APPROVED_STATUSES = frozenset({"approved", "transferred"})
FAILED_STATUSES = frozenset({"declined", "canceled", "cancelled", "refunded", "expired"})


@dataclass(frozen=True)
class Customer:
    email: str
    firstname: str = ""
    lastname: str = ""

    def as_payload(self) -> dict:
        return {"email": self.email, "firstname": self.firstname, "lastname": self.lastname}


def default_callback_url() -> str:
    return f"{settings.FRONTEND_URL}/payment/callback"


def _unwrap(data: dict) -> dict:
    """FedaPay nests resources under a versioned key, e.g. ``v1/transaction``."""
    if isinstance(data, dict):
        for key in ("v1/transaction", "transaction"):
            if isinstance(data.get(key), dict):
                return data[key]
    return data or {}


class FedaPayGateway:
    """Calls the FedaPay API with the configured secret key."""

    def __init__(self, secret_key: str | None = None, api_url: str | None = None, timeout: int | None = None):
        self.secret_key = secret_key if secret_key is not None else settings.FEDAPAY_SECRET_KEY
        self.api_url = (api_url or settings.FEDAPAY_API_URL).rstrip("/")
        self.timeout = timeout or settings.FEDAPAY_TIMEOUT

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.secret_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _request(self, method: str, path: str, payload: dict | None = None) -> dict:
        if not self.secret_key:
            raise PaymentGatewayError("FedaPay secret key is not configured.")
        url = f"{self.api_url}{path}"
        try:
            response = requests.request(
                method,
                url,
                headers=self._headers(),
                json=payload,
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            body = getattr(getattr(e, "response", None), "text", "")
            logger.error("FedaPay %s %s failed: %s %s", method, path, e, body[:500])
            raise PaymentGatewayError(f"FedaPay {method} {path} failed") from e
        except ValueError as e:
            logger.error("FedaPay %s %s returned invalid JSON", method, path)
            raise PaymentGatewayError(f"FedaPay {method} {path} returned invalid JSON") from e

    def create_transaction(
        self,
        amount: int,
        description: str,
        callback_url: str | None,
        customer: Customer,
        plan=None,
        user=None,
    ) -> str:
        """
        Create a transaction on FedaPay and return its id.

        When ``plan`` is given this is a subscription purchase and a local
        :class:`payments.models.Transaction` is recorded for ``user`` with an
        expiry derived from the plan duration.
        """
        payload = {
            "description": description,
            "amount": int(amount),
            "currency": {"iso": settings.FEDAPAY_CURRENCY},
            "callback_url": callback_url or default_callback_url(),
            "mode": settings.FEDAPAY_MODE,
            "customer": customer.as_payload(),
        }
        txn = _unwrap(self._request("POST", "/v1/transactions", payload))
        txn_id = txn.get("id")
        if not txn_id:
            logger.error("FedaPay transaction created without an id: %s", txn)
            raise PaymentGatewayError("FedaPay did not return a transaction id")
        txn_id = str(txn_id)
        logger.info("FedaPay transaction %s created (%s %s)", txn_id, amount, settings.FEDAPAY_CURRENCY)

        if plan is not None:
            from .models import Transaction

            Transaction.objects.create(
                user=user,
                plan=plan,
                amount=int(amount),
                external_reference=txn_id,
                expires_at=plan.expires_at(),
            )
        return txn_id

    def create_payment_link(self, external_transaction_id: str) -> str:
        data = self._request("POST", f"/v1/transactions/{external_transaction_id}/token", {})
        url = data.get("url") if isinstance(data, dict) else None
        if not url:
            raise PaymentGatewayError("FedaPay did not return a payment link")
        return url

    def verify_transaction(self, external_transaction_id: str) -> str:
        """Return the processor's current status for the transaction."""
        txn = _unwrap(self._request("GET", f"/v1/transactions/{external_transaction_id}"))
        status = (txn.get("status") or "").lower()
        if not status:
            raise PaymentGatewayError("FedaPay transaction has no status")
        return status


def get_gateway() -> FedaPayGateway:
    return FedaPayGateway()
